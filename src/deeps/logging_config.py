import logging
import os

# Floors are generated on worker threads; the thread name ties records to one generation.
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(threadName)s] %(name)s: %(message)s"


def configure_logging(default_level: int = logging.INFO) -> None:
    """Configure the root logger for the ``deeps-floor`` command and embedding servers.

    ``DEEPS_LOG_LEVEL`` (e.g. ``debug``) overrides ``default_level``; unknown
    names fall back to it. Records go to stderr so a floor dumped to stdout
    stays clean JSON.
    """
    level_name = os.getenv("DEEPS_LOG_LEVEL")
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
