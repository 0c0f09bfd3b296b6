import logging
import math
from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd

from .errors import EmptyInput, InvalidInput, InvalidParameter
from .likert import VERTICES, FuzzyTriangularNumber, as_rating_frame, fuzzy_items, item_triples, map_to_fuzzy, scale_table

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 5
DEFAULT_THRESHOLD = 0.2
PUBLISHED_DECIMALS = 2
# crisp values equal to this many decimals share a rank
RANK_DECIMALS = 10


@dataclass(frozen=True)
class ItemSummary:
    item: str
    d_value: float
    consensus_pct: float
    defuzzification: float
    rank: float


@dataclass(frozen=True)
class AnalysisResult:
    fuzzy_data: pd.DataFrame
    fuzzy_scale: pd.DataFrame
    item_d_values: pd.Series
    consensus_percentage: pd.Series
    defuzzification: pd.Series
    ranking: pd.Series
    overall_d_construct: float
    overall_consensus: float
    likert_scale: int = DEFAULT_SCALE
    consensus_threshold: float = DEFAULT_THRESHOLD

    @property
    def n_experts(self) -> int:
        return self.fuzzy_scale.shape[0]

    @property
    def n_items(self) -> int:
        return self.fuzzy_scale.shape[1]

    def items(self) -> List[ItemSummary]:
        return [
            ItemSummary(
                item=item,
                d_value=float(self.item_d_values[item]),
                consensus_pct=float(self.consensus_percentage[item]),
                defuzzification=float(self.defuzzification[item]),
                rank=float(self.ranking[item]),
            )
            for item in self.fuzzy_scale.columns
        ]

    def summary_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "Item": list(self.fuzzy_scale.columns),
                "d_value": self.item_d_values.to_numpy(dtype=float),
                "Consensus_pct": self.consensus_percentage.to_numpy(dtype=float),
                "Defuzzification": self.defuzzification.to_numpy(dtype=float),
                "Rank": self.ranking.to_numpy(dtype=float),
            }
        )


def _mean_ignore_nan(values: np.ndarray) -> float:
    present = values[~np.isnan(values)]
    if present.size == 0:
        return np.nan
    # a vertex every expert agrees on is its own mean, exactly
    if np.all(present == present[0]):
        return float(present[0])
    return math.fsum(present) / present.size


def group_mean(fuzzy: pd.DataFrame) -> pd.DataFrame:
    items = fuzzy_items(fuzzy)
    rows = [[_mean_ignore_nan(col) for col in item_triples(fuzzy, item)] for item in items]
    return pd.DataFrame(rows, index=pd.Index(items, name="item"), columns=list(VERTICES), dtype=float)


def calculate_distance(fuzzy: pd.DataFrame) -> pd.DataFrame:
    # d = sqrt(((mean_m1 - m1)^2 + (mean_m2 - m2)^2 + (mean_m3 - m3)^2) / 3)
    means = group_mean(fuzzy)
    distances = {}
    for item in means.index:
        m1, m2, m3 = item_triples(fuzzy, item)
        mean_m1, mean_m2, mean_m3 = means.loc[item]
        column = np.full(fuzzy.shape[0], np.nan)
        for e in range(fuzzy.shape[0]):
            total = (mean_m1 - m1[e]) ** 2 + (mean_m2 - m2[e]) ** 2 + (mean_m3 - m3[e]) ** 2
            if not np.isnan(total):
                column[e] = math.sqrt(total / 3.0)
        distances[item] = column
    result = pd.DataFrame(distances, index=fuzzy.index.copy(), columns=list(means.index))
    logger.debug("Distances computed for %d experts x %d items", result.shape[0], result.shape[1])
    return result


def _check_threshold(threshold) -> float:
    if isinstance(threshold, bool):
        raise InvalidParameter(f"Consensus threshold must be a number, got {threshold!r}")
    try:
        value = float(threshold)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Consensus threshold must be a number, got {threshold!r}") from None
    if not math.isfinite(value) or value < 0:
        raise InvalidParameter(f"Consensus threshold must be finite and non-negative, got {threshold!r}")
    return value


def calculate_consensus(distances: pd.DataFrame, threshold: float = DEFAULT_THRESHOLD) -> pd.Series:
    # missing distances stay in the denominator
    threshold = _check_threshold(threshold)
    n_experts = distances.shape[0]
    result = {}
    for item in distances.columns:
        column = distances[item].to_numpy(dtype=float)
        agreeing = int(np.sum(column[~np.isnan(column)] <= threshold))
        result[item] = agreeing / n_experts * 100.0 if n_experts else np.nan
    return pd.Series(result, index=list(distances.columns), dtype=float, name="consensus_pct")


def defuzzify(fuzzy: pd.DataFrame) -> pd.Series:
    means = group_mean(fuzzy)
    crisp = {}
    for item, row in means.iterrows():
        value = FuzzyTriangularNumber(*row[list(VERTICES)]).centroid()
        crisp[item] = value if math.isfinite(value) else np.nan
    return pd.Series(crisp, index=list(means.index), dtype=float, name="defuzzification")


def rank_items(crisp_values: pd.Series) -> pd.Series:
    crisp_values = pd.Series(crisp_values, dtype=float)
    ranks = crisp_values.round(RANK_DECIMALS).rank(ascending=False, method="average", na_option="keep")
    ranks.name = "rank"
    return ranks


def validate_ratings(ratings) -> pd.DataFrame:
    ratings = as_rating_frame(ratings)
    if ratings.shape[0] == 0 or ratings.shape[1] == 0:
        raise EmptyInput(f"Ratings need at least one expert and one item, got shape {ratings.shape}")
    if ratings.columns.has_duplicates:
        dupes = ratings.columns[ratings.columns.duplicated()].unique()
        raise InvalidInput(f"Duplicate item names: {', '.join(map(str, dupes))}")

    for col in ratings.columns:
        series = ratings[col]
        if pd.api.types.is_bool_dtype(series) or not (
            pd.api.types.is_numeric_dtype(series) or series.isna().all()
        ):
            raise InvalidInput(f"Column {col!r} is not numeric")
        present = series.dropna().astype(float)
        if not np.all(np.isfinite(present)) or not np.all(present == np.floor(present)):
            raise InvalidInput(f"Column {col!r} holds non-integer ratings")
    return ratings


def run(
    ratings,
    scale: int = DEFAULT_SCALE,
    consensus_threshold: float = DEFAULT_THRESHOLD,
    out_of_domain: str = "missing",
) -> AnalysisResult:
    ratings = validate_ratings(ratings)
    scale_table(scale)
    threshold = _check_threshold(consensus_threshold)
    logger.info(
        "Fuzzy Delphi run: %d experts, %d items, %d-point scale, threshold %s",
        ratings.shape[0],
        ratings.shape[1],
        scale,
        threshold,
    )

    fuzzy_data = map_to_fuzzy(ratings, scale, out_of_domain=out_of_domain)
    distances = calculate_distance(fuzzy_data)
    item_d_values = distances.mean(axis=0, skipna=True)
    consensus = calculate_consensus(distances, threshold)
    crisp = defuzzify(fuzzy_data)
    ranking = rank_items(crisp)

    overall_d = item_d_values.mean(skipna=True)
    overall_consensus = consensus.mean(skipna=True)

    result = AnalysisResult(
        fuzzy_data=fuzzy_data,
        fuzzy_scale=distances,
        item_d_values=item_d_values.round(PUBLISHED_DECIMALS).rename("d_value"),
        consensus_percentage=consensus.round(PUBLISHED_DECIMALS),
        defuzzification=crisp,
        ranking=ranking,
        overall_d_construct=round(float(overall_d), PUBLISHED_DECIMALS),
        overall_consensus=round(float(overall_consensus), PUBLISHED_DECIMALS),
        likert_scale=int(scale),
        consensus_threshold=threshold,
    )
    logger.info(
        "Overall d-construct %.2f, overall consensus %.2f%%",
        result.overall_d_construct,
        result.overall_consensus,
    )
    return result
