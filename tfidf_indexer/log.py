import logging
import sys

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = logging.getLogger("tfidf_indexer")

_handler: logging.Handler | None = None


def configure_logging(level: str | int = logging.INFO) -> None:
    """Send package log records to the current stderr at the given level."""
    global _handler
    if isinstance(level, str):
        if level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        level = getattr(logging, level.upper())
    logger.setLevel(level)
    # removeHandler does not flush, so a previously closed stderr is harmless
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(_handler)
