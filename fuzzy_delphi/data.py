import os
from typing import List

import numpy as np
import pandas as pd

from .errors import InvalidInput
from .likert import scale_table

# values and weights each demo item's ratings are drawn from
DEMO_ITEMS = {
    "Item1": ([4, 5], [0.3, 0.7]),
    "Item2": ([4, 5], [0.4, 0.6]),
    "Item3": ([4, 5], [0.35, 0.65]),
    "Item4": ([3, 4, 5], [0.1, 0.4, 0.5]),
    "Item5": ([4, 5], [0.45, 0.55]),
    "Item6": ([3, 4, 5], [0.2, 0.5, 0.3]),
    "Item7": ([2, 3, 4, 5], [0.1, 0.2, 0.4, 0.3]),
    "Item8": ([3, 4, 5], [0.3, 0.4, 0.3]),
    "Item9": ([2, 3, 4, 5], [0.05, 0.25, 0.45, 0.25]),
    "Item10": ([3, 4, 5], [0.15, 0.5, 0.35]),
}
DEMO_EXPERTS = 27


def demo_dataset(seed: int = 123, n_experts: int = DEMO_EXPERTS) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    data = {}
    for item, (values, probs) in DEMO_ITEMS.items():
        data[item] = rng.choice(values, size=n_experts, p=probs)
    return pd.DataFrame(data)


def load_dataframe(file) -> pd.DataFrame:
    name = file if isinstance(file, (str, os.PathLike)) else getattr(file, "name", "")
    name = os.fspath(name) if name else ""
    try:
        if name.lower().endswith(".csv"):
            df = pd.read_csv(file)
        else:
            df = pd.read_excel(file)
    except (OSError, ValueError) as exc:
        raise InvalidInput(f"Could not read ratings from {name or 'file object'}: {exc}") from exc
    return df


def coerce_numeric(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    for col in df.columns:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def validate_ranges(df: pd.DataFrame, scale: int = 5) -> List[str]:
    domain = list(scale_table(scale))
    issues = []
    for col in df.columns:
        series = df[col].dropna()
        if not series.empty and not series.isin(domain).all():
            issues.append(col)
    return issues
