import logging
import math
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from .delphi import AnalysisResult

logger = logging.getLogger(__name__)

D_THRESHOLD = 0.2
CONSENSUS_THRESHOLD = 75.0
RULE_WIDTH = 60

INTERPRETATIONS = {
    "excellent": "EXCELLENT consensus achieved (d <= 0.2, consensus >= 75%)",
    "good_d": "GOOD d-construct value, but consensus percentage could be improved",
    "good_consensus": "GOOD consensus percentage, but d-construct value needs improvement",
    "further_rounds": "Further rounds may be needed to achieve consensus",
}


def interpret(d_construct: float, consensus: float) -> Tuple[str, str]:
    good_d = d_construct <= D_THRESHOLD
    good_consensus = consensus >= CONSENSUS_THRESHOLD
    if good_d and good_consensus:
        label = "excellent"
    elif good_d:
        label = "good_d"
    elif good_consensus:
        label = "good_consensus"
    else:
        label = "further_rounds"
    return label, INTERPRETATIONS[label]


def _fmt(value: float, pattern: str) -> str:
    return "NA" if value is None or math.isnan(value) else pattern % value


def format_results(result: AnalysisResult) -> str:
    lines = [
        "Fuzzy Delphi Method Results",
        "============================",
        "",
        "Overall Results:",
        f"  - Overall d-construct value: {result.overall_d_construct}",
        f"  - Overall consensus percentage: {result.overall_consensus} %",
        "",
        "Item-level Results:",
        "  - Average d-value per item:",
        result.item_d_values.to_string(),
        "",
        "  - Consensus percentage per item:",
        result.consensus_percentage.to_string(),
        "",
        "  - Defuzzification values:",
        result.defuzzification.to_string(),
        "",
        "  - Item rankings:",
        result.ranking.to_string(),
    ]
    return "\n".join(lines) + "\n"


def format_summary(result: AnalysisResult) -> str:
    lines = [
        "Fuzzy Delphi Method - Summary",
        "==============================",
        "",
        f"Number of experts: {result.n_experts}",
        f"Number of items: {result.n_items}",
        "",
        "Overall Construct:",
        f"  - d-construct value: {result.overall_d_construct}",
        f"  - Consensus percentage: {result.overall_consensus} %",
        "",
        "Item Analysis:",
        result.summary_frame().to_string(index=False),
    ]
    return "\n".join(lines) + "\n"


def generate_report(result: AnalysisResult, output_file: Optional[str] = None) -> str:
    _, interpretation = interpret(result.overall_d_construct, result.overall_consensus)
    lines = [
        "=" * RULE_WIDTH,
        "FUZZY DELPHI METHOD - ANALYSIS REPORT",
        "=" * RULE_WIDTH,
        "",
        "OVERALL RESULTS",
        "-" * RULE_WIDTH,
        f"Overall d-construct value: {result.overall_d_construct}",
        f"Overall consensus percentage: {result.overall_consensus} %",
        "",
        f"Interpretation: {interpretation}",
        "",
        "ITEM-LEVEL ANALYSIS",
        "-" * RULE_WIDTH,
        "",
    ]
    for row in result.items():
        lines.append(
            "%-15s | d=%-6s | Consensus=%-7s | Defuzz=%-7s | Rank=%s"
            % (
                row.item,
                _fmt(row.d_value, "%.2f"),
                _fmt(row.consensus_pct, "%.2f%%"),
                _fmt(row.defuzzification, "%.4f"),
                _fmt(row.rank, "%g"),
            )
        )
    lines += ["", "=" * RULE_WIDTH, ""]
    text = "\n".join(lines)

    if output_file is not None:
        Path(output_file).write_text(text, encoding="utf-8")
        logger.info("Report saved to %s", output_file)
    return text


def export_results(result: AnalysisResult, output_dir: str = ".", prefix: str = "fuzzy_delphi") -> List[Path]:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    overall = pd.DataFrame(
        {
            "Metric": ["Overall d-construct", "Overall consensus percentage"],
            "Value": [result.overall_d_construct, result.overall_consensus],
        }
    )
    tables = [
        ("fuzzy_scale", result.fuzzy_scale.round(2), True),
        ("item_summary", result.summary_frame(), False),
        ("overall_results", overall, False),
        ("defuzzification", result.defuzzification.to_frame().T, False),
        ("rankings", result.ranking.to_frame().T, False),
    ]
    written = []
    for name, frame, keep_index in tables:
        path = out / f"{prefix}_{name}.csv"
        frame.to_csv(path, index=keep_index)
        written.append(path)
    logger.info("Exported %d files to %s", len(written), out)
    return written
