"""Logging utilities for json_schema_to_swift.

Every module logs through ``get_logger(<module>)``. Records are tagged
with the pipeline phase that emitted them (parse, reify, promote,
assemble, emit) so a verbose run reads as a trace of the pipeline.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "json_schema_to_swift"

# Logger name -> pipeline phase
PHASES = {
    "parser": "parse",
    "reifier": "reify",
    "promotion": "promote",
    "assembler": "assemble",
    "generator": "emit",
    "cli": "cli",
}


class PhaseFilter(logging.Filter):
    """Sets ``record.phase`` from the name of the logger that emitted the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        module = record.name.rpartition(".")[2] if record.name != _LOGGER_NAME else ""
        record.phase = PHASES.get(module, module or "-")
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the json_schema_to_swift hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Log every pipeline step (DEBUG) instead of warnings only
        log_file: Optional file that receives the same records, timestamped

    Returns:
        The package logger
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations do not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    formats = ["%(levelname)s [%(phase)s] %(message)s"]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        formats.append("%(asctime)s %(levelname)s [%(phase)s] %(message)s")

    for handler, fmt in zip(handlers, formats):
        handler.setLevel(level)
        handler.addFilter(PhaseFilter())
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)

    return logger


__all__ = ["PhaseFilter", "configure_logging", "get_logger"]
