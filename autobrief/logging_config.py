"""Logging setup shared by the batch job, scripts and services."""
import logging

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the root logger."""
    global _configured

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not _configured:
        logging.basicConfig(level=numeric_level, format=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        _configured = True
    else:
        logging.getLogger().setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
