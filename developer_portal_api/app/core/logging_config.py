"""
Logging configuration for the developer portal.

``setup_logging`` reads the level and the optional log file from the
application ``Settings`` and configures the root logger once.  The
``urllib3`` logger used by ``requests`` is kept at ``WARNING`` unless
the application itself runs at ``DEBUG``, so every outgoing call to
API management or the notification backend does not end up in the
log.
"""

import logging
from pathlib import Path

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose connection chatter is only useful when debugging.
NOISY_LOGGERS = ("urllib3",)


def setup_logging(settings: Settings) -> None:
    """Configure logging from ``settings.log_level`` and ``settings.log_file``.

    Unknown level names fall back to ``INFO``.  Root handlers are only
    attached when none exist yet (pytest and uvicorn may have done it
    already); the level of the noisy library loggers is adjusted on
    every call.
    """
    numeric_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(Path(settings.log_file).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
