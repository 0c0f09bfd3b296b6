import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .config import Settings, configure_logging
from .data import coerce_numeric, load_dataframe, validate_ranges
from .delphi import AnalysisResult, run
from .report import export_results, generate_report

logger = logging.getLogger(__name__)


def analyze(source, settings: Optional[Settings] = None, export: bool = False, report: bool = False) -> AnalysisResult:
    # explicit settings also set the package log level
    if settings is None:
        settings = Settings()
    else:
        configure_logging(settings.log_level)
    if isinstance(source, pd.DataFrame):
        ratings = source
    else:
        ratings = coerce_numeric(load_dataframe(source))

    issues = validate_ranges(ratings, settings.likert_scale)
    if issues:
        logger.warning("Values outside the %d-point scale in columns: %s", settings.likert_scale, ", ".join(map(str, issues)))

    result = run(ratings, scale=settings.likert_scale, consensus_threshold=settings.consensus_threshold)

    if export:
        export_results(result, settings.output_dir, settings.prefix)
    if report:
        out = Path(settings.output_dir)
        out.mkdir(parents=True, exist_ok=True)
        generate_report(result, out / f"{settings.prefix}_report.txt")
    return result
