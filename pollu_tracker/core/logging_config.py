import logging

from pollu_tracker.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install the root handler once; later calls only adjust the level."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))
