"""
Centralised logging configuration for Ledger Mapper.

Every module obtains its logger via ``get_logger(<module>)``.  Mapping edits
additionally go through ``audit`` so that reviewers can replay who moved
which account where from a single ``ledger_mapper.audit`` stream.

The pipeline calls ``configure_logging`` at startup.  Handlers are installed
once per process; later calls only adjust the level.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional


LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "ledger_mapper"
AUDIT_LOGGER_NAME = f"{ROOT_LOGGER_NAME}.audit"

_handlers: list[logging.Handler] = []


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
) -> None:
    """Set up the root logger for the ``ledger_mapper`` namespace.

    Parameters
    ----------
    level:
        Minimum severity to emit.  Re-applied on every call.
    log_file:
        If provided on the first call, a ``FileHandler`` is added alongside
        the console handler.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False

    if _handlers:
        for handler in _handlers:
            handler.setLevel(level)
        return

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    _handlers.append(console)

    if log_file:
        _handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in _handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``ledger_mapper`` namespace."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def audit(event: str, **fields: Any) -> None:
    """Emit one ``key=value`` line on the audit stream.

    >>> audit("set_field", account="1001", field="sub_category", new="Equity")
    """
    detail = " ".join(f"{k}={v!r}" for k, v in fields.items())
    logging.getLogger(AUDIT_LOGGER_NAME).info("%s %s", event.upper(), detail)
