import logging
from typing import Dict, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from .errors import InvalidInput, InvalidParameter

logger = logging.getLogger(__name__)

VERTICES = ("m1", "m2", "m3")


class FuzzyTriangularNumber(NamedTuple):
    m1: float
    m2: float
    m3: float

    def is_ordered(self) -> bool:
        return self.m1 <= self.m2 <= self.m3

    def centroid(self) -> float:
        return (self.m1 + self.m2 + self.m3) / 3.0


LIKERT_SCALES: Dict[int, Dict[int, FuzzyTriangularNumber]] = {
    5: {
        1: FuzzyTriangularNumber(0.0, 0.0, 0.2),
        2: FuzzyTriangularNumber(0.0, 0.2, 0.4),
        3: FuzzyTriangularNumber(0.2, 0.4, 0.6),
        4: FuzzyTriangularNumber(0.4, 0.6, 0.8),
        5: FuzzyTriangularNumber(0.6, 0.8, 1.0),
    },
    7: {
        1: FuzzyTriangularNumber(0.0, 0.0, 0.2),
        2: FuzzyTriangularNumber(0.0, 0.2, 0.4),
        3: FuzzyTriangularNumber(0.0, 0.4, 0.6),
        4: FuzzyTriangularNumber(0.2, 0.6, 0.8),
        5: FuzzyTriangularNumber(0.4, 0.8, 1.0),
        6: FuzzyTriangularNumber(0.6, 1.0, 1.0),
        7: FuzzyTriangularNumber(0.8, 1.0, 1.0),
    },
}

OUT_OF_DOMAIN_POLICIES = ("missing", "raise")

# cell classification used by the mapper
VALID = "valid"
MISSING = "missing"
OUT_OF_DOMAIN = "out_of_domain"


def scale_table(scale: int) -> Dict[int, FuzzyTriangularNumber]:
    try:
        known = not isinstance(scale, bool) and scale in LIKERT_SCALES
    except TypeError:
        known = False
    if not known:
        raise InvalidParameter(f"Likert scale must be one of {sorted(LIKERT_SCALES)}, got {scale!r}")
    return LIKERT_SCALES[int(scale)]


def as_rating_frame(ratings) -> pd.DataFrame:
    if isinstance(ratings, np.ndarray):
        if ratings.ndim != 2:
            raise InvalidInput(f"Ratings array must be 2-dimensional, got {ratings.ndim} dimension(s)")
        ratings = pd.DataFrame(ratings, columns=[f"Item{j + 1}" for j in range(ratings.shape[1])])
    if not isinstance(ratings, pd.DataFrame):
        raise InvalidInput(f"Ratings must be a pandas DataFrame or 2-D numpy array, got {type(ratings).__name__}")
    return ratings


def classify_rating(value, table: Dict[int, FuzzyTriangularNumber]) -> Tuple[str, Optional[int]]:
    if isinstance(value, (bool, np.bool_)):
        return OUT_OF_DOMAIN, None
    if pd.isna(value):
        return MISSING, None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return OUT_OF_DOMAIN, None
    if not number.is_integer() or int(number) not in table:
        return OUT_OF_DOMAIN, None
    return VALID, int(number)


def fuzzy_columns(items) -> pd.MultiIndex:
    return pd.MultiIndex.from_product([list(items), list(VERTICES)], names=["item", "vertex"])


def map_to_fuzzy(ratings: pd.DataFrame, scale: int = 5, out_of_domain: str = "missing") -> pd.DataFrame:
    """Convert Likert ratings to one (m1, m2, m3) column group per item."""
    ratings = as_rating_frame(ratings)
    table = scale_table(scale)
    if out_of_domain not in OUT_OF_DOMAIN_POLICIES:
        raise InvalidParameter(f"out_of_domain must be one of {OUT_OF_DOMAIN_POLICIES}, got {out_of_domain!r}")

    values = np.full((ratings.shape[0], ratings.shape[1] * 3), np.nan, dtype=float)
    rejected: Dict[str, int] = {}
    for j, item in enumerate(ratings.columns):
        for i, raw in enumerate(ratings.iloc[:, j].tolist()):
            kind, rating = classify_rating(raw, table)
            if kind == VALID:
                values[i, 3 * j:3 * j + 3] = table[rating]
            elif kind == OUT_OF_DOMAIN:
                rejected[item] = rejected.get(item, 0) + 1

    if rejected:
        if out_of_domain == "raise":
            raise InvalidInput(f"Ratings outside the {scale}-point scale in columns: {', '.join(map(str, rejected))}")
        logger.warning("Treating %d out-of-scale rating(s) as missing: %s", sum(rejected.values()), rejected)

    return pd.DataFrame(values, index=ratings.index.copy(), columns=fuzzy_columns(ratings.columns))


def item_triples(fuzzy: pd.DataFrame, item) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    return tuple(fuzzy[(item, v)].to_numpy(dtype=float) for v in VERTICES)


def fuzzy_items(fuzzy: pd.DataFrame) -> list:
    return list(fuzzy.columns.get_level_values("item").unique())
