import logging

from .config import Settings, configure_logging
from .delphi import (
    AnalysisResult,
    ItemSummary,
    calculate_consensus,
    calculate_distance,
    defuzzify,
    group_mean,
    rank_items,
    run,
)
from .errors import EmptyInput, FuzzyDelphiError, InvalidInput, InvalidParameter
from .likert import LIKERT_SCALES, FuzzyTriangularNumber, map_to_fuzzy
from .pipeline import analyze

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
