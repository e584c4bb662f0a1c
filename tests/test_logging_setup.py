"""
Unit tests for the logging helpers.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from ledger_mapper.logging_setup import AUDIT_LOGGER_NAME, audit, configure_logging, get_logger
from ledger_mapper.mapping_store import set_field
from ledger_mapper.schema import AccountMapping, MappingField


class _Collector(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture
def audit_lines() -> Iterator[List[str]]:
    configure_logging(level=logging.INFO)
    handler = _Collector()
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    audit_logger.addHandler(handler)
    try:
        yield handler.messages
    finally:
        audit_logger.removeHandler(handler)


class TestLoggers:
    def test_namespace(self) -> None:
        assert get_logger("classifier").name == "ledger_mapper.classifier"

    def test_level_reapplied(self) -> None:
        configure_logging(level=logging.WARNING)
        assert logging.getLogger("ledger_mapper").level == logging.WARNING
        configure_logging(level=logging.INFO)
        assert logging.getLogger("ledger_mapper").level == logging.INFO


class TestAudit:
    def test_format(self, audit_lines: List[str]) -> None:
        audit("set_field", account="1001")
        assert audit_lines == ["SET_FIELD account='1001'"]

    def test_edit_is_audited(self, audit_lines: List[str]) -> None:
        mappings = [AccountMapping("1001", "Cash")]
        set_field(mappings, "1001", MappingField.SUB_CATEGORY, "Current Assets")
        assert len(audit_lines) == 1
        assert "Current Assets" in audit_lines[0]

    def test_no_op_not_audited(self, audit_lines: List[str]) -> None:
        set_field([AccountMapping("1001", "Cash")], "1001", MappingField.SUB_CATEGORY, "")
        assert audit_lines == []
