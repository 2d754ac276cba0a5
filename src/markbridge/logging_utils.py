"""Logging setup helper for applications embedding markbridge."""

from __future__ import annotations

import logging
import sys
from typing import Optional

LIBRARY_LOGGER_NAME = "markbridge"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    # getLevelName returns "Level X" for names it does not know
    return level if isinstance(level, int) else logging.INFO


def _make_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Attach handlers to the ``markbridge`` logger.

    The library itself never installs handlers; modules only create child
    loggers with ``logging.getLogger(__name__)``. Applications call this once
    to see conversion diagnostics. Calling it again replaces the handlers
    installed by the previous call.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g., "DEBUG"). Unknown names
        mean INFO.
    log_file : str, optional
        Path of a file that receives the same records as stderr.
    trace_mode : bool, default False
        Include timestamps and logger names in every record.

    Returns
    -------
    logging.Logger
        The configured library logger.

    """
    level = _resolve_level(log_level)
    formatter = (
        logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT) if trace_mode else logging.Formatter(_PLAIN_FORMAT)
    )

    library_logger = logging.getLogger(LIBRARY_LOGGER_NAME)
    library_logger.setLevel(level)
    for old_handler in list(library_logger.handlers):
        library_logger.removeHandler(old_handler)
        old_handler.close()

    library_logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), level, formatter))

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            library_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            library_logger.addHandler(_make_handler(file_handler, level, formatter))
            library_logger.debug("Logging to file: %s", log_file)

    return library_logger
