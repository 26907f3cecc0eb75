"""Logging setup for the API process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; uvicorn keeps its own handlers."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("liftlog").setLevel(level.upper())
