"""Logging setup for the API process."""
import logging

from habitual.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once, at the level from settings."""
    level_name = (level or ("DEBUG" if settings.debug else settings.log_level)).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
