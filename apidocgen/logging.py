"""Logging utilities for apidocgen commands.

Console output is terse by default. ``--verbose`` adds DEBUG records tagged
with the emitting component (``scanner``, ``render`` ...), and a log file,
when requested, always receives the full DEBUG stream, tracebacks of failed
commands included.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "apidocgen"
_CONSOLE_FORMAT = "[apidocgen] %(levelname)s %(message)s"
_VERBOSE_CONSOLE_FORMAT = "[apidocgen] %(levelname)s %(component)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(component)s: %(message)s"


class _ComponentFilter(logging.Filter):
    """Expose the logger name relative to the apidocgen hierarchy as ``component``."""

    def filter(self, record: logging.LogRecord) -> bool:
        prefix = f"{_LOGGER_NAME}."
        if record.name.startswith(prefix):
            record.component = record.name[len(prefix) :]
        else:
            record.component = record.name
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the apidocgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the apidocgen logger with console output and an optional file sink."""
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose or log_file is not None else logging.INFO)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    component_filter = _ComponentFilter()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(console_level)
    stream_handler.addFilter(component_filter)
    stream_handler.setFormatter(
        logging.Formatter(_VERBOSE_CONSOLE_FORMAT if verbose else _CONSOLE_FORMAT)
    )
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(component_filter)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def log_failure(command: str, exc: BaseException) -> None:
    """Record why ``command`` failed; the traceback is kept at DEBUG level.

    Scan and render errors carry the offending ``path``, which is named in
    the record.
    """
    logger = get_logger("cli")
    path = getattr(exc, "path", None)
    if path is not None:
        logger.debug("%s failed at %s", command, path, exc_info=exc)
    else:
        logger.debug("%s failed", command, exc_info=exc)


__all__ = ["configure_logging", "get_logger", "log_failure"]
