"""Logging setup for bridgetally runs."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs every request line at INFO
TRANSPORT_LOGGERS = ("httpx", "httpcore")


def log_level(*, verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger with the report format.

    Request logging from the HTTP transport is shown only at DEBUG; otherwise those
    loggers are held at WARNING. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    transport_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
