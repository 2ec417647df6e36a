from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler

from config import Settings

ROOT_LOGGER = "planner"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Library modules log into a silent parent until the CLI configures it.
logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Module logger under the shared ``planner`` parent (``planner.<name>``)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Attach a rotating file handler to the ``planner`` parent logger, once per
    process: <data_dir>/logs/app.log (1MB x 5 backups).
    User-facing failures are echoed by the CLI itself, so no console handler.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if getattr(logger, "_app_configured", False):
        return logger

    logger.setLevel(settings.log_level)
    try:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(settings.log_dir / "app.log", maxBytes=1_000_000,
                                 backupCount=5, encoding="utf-8")
    except OSError:
        fh = None  # unwritable data dir: logging stays silent
    if fh is not None:
        fh.setLevel(settings.log_level)
        fh.setFormatter(_FORMAT)
        logger.addHandler(fh)

    logger._app_configured = True  # type: ignore[attr-defined]
    return logger
