import logging
import os
from dataclasses import dataclass

from .errors import InvalidParameter

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    likert_scale: int = 5
    consensus_threshold: float = 0.2
    output_dir: str = "."
    prefix: str = "fuzzy_delphi"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            likert_scale=_parse(os.getenv("FDM_LIKERT_SCALE"), int, defaults.likert_scale, "FDM_LIKERT_SCALE"),
            consensus_threshold=_parse(
                os.getenv("FDM_CONSENSUS_THRESHOLD"), float, defaults.consensus_threshold, "FDM_CONSENSUS_THRESHOLD"
            ),
            output_dir=os.getenv("FDM_OUTPUT_DIR", defaults.output_dir),
            prefix=os.getenv("FDM_PREFIX", defaults.prefix),
            log_level=os.getenv("FDM_LOG_LEVEL", defaults.log_level).upper(),
        )


def _parse(raw, kind, default, name):
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError:
        raise InvalidParameter(f"{name} must be a valid {kind.__name__}, got {raw!r}") from None


def configure_logging(level="INFO") -> logging.Logger:
    logger = logging.getLogger("fuzzy_delphi")
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise InvalidParameter(f"Unknown log level {level!r}")
        level = numeric
    logger.setLevel(level)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
