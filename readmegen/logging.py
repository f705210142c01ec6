"""Logging setup shared by the CLI, the service and the pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

_LOGGER_NAME = "readmegen"
_NO_RUN = "-"

# Third-party loggers that are noisy at DEBUG.
_QUIET_LIBRARIES = ("urllib3", "httpx", "httpcore", "multipart")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the readmegen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def run_logger(name: str, run_id: str) -> logging.LoggerAdapter:
    """Logger whose records carry the id of the run being processed."""
    return logging.LoggerAdapter(get_logger(name), {"run_id": run_id})


class RunContextFilter(logging.Filter):
    """Gives records logged outside a run the placeholder run id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "run_id"):
            record.run_id = _NO_RUN
        return True


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    quiet: Iterable[str] = _QUIET_LIBRARIES,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the readmegen logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # The CLI and tests may configure more than once per process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    context = RunContextFilter()
    console = logging.StreamHandler()
    console.setLevel(level)
    console.addFilter(context)
    console.setFormatter(logging.Formatter("[readmegen] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(context)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s [run %(run_id)s] %(message)s")
        )
        logger.addHandler(file_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger


__all__ = ["RunContextFilter", "configure_logging", "get_logger", "run_logger"]
