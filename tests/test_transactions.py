import asyncio
import logging

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from docvault.core.logging import ConsoleLogFormatter, bind_request_id, log_context
from docvault.db.transactions import bounded, is_transient
from docvault.domains.exceptions import StorageUnavailableError


class _DriverError(Exception):
    def __init__(self, sqlstate):
        super().__init__(sqlstate)
        self.sqlstate = sqlstate


async def test_bounded_returns_result():
    async def work():
        return 42

    assert await bounded("work", work(), timeout=1) == 42


async def test_bounded_timeout_becomes_unavailable():
    with pytest.raises(StorageUnavailableError) as exc_info:
        await bounded("slow", asyncio.sleep(1), timeout=0.01)

    assert exc_info.value.operation == "slow"
    assert exc_info.value.reason == "timeout"


async def test_bounded_keeps_integrity_errors():
    async def work():
        raise IntegrityError("INSERT", {}, _DriverError("23505"))

    with pytest.raises(IntegrityError):
        await bounded("insert", work(), timeout=1)


async def test_bounded_maps_transient_driver_errors():
    async def work():
        raise OperationalError("SELECT", {}, _DriverError("55P03"))

    with pytest.raises(StorageUnavailableError):
        await bounded("select", work(), timeout=1)


def test_is_transient():
    assert is_transient(OperationalError("SELECT", {}, _DriverError(None)))
    assert not is_transient(IntegrityError("INSERT", {}, _DriverError("23505")))


def test_log_context_drops_empty_values():
    assert log_context(document_id=1, owner_id=None, version_number=2) == {
        "document_id": "1",
        "version_number": 2,
    }


def test_console_formatter_appends_extras():
    bind_request_id(None)
    record = logging.LogRecord("docvault.test", logging.INFO, __file__, 1, "document.created", None, None)
    record.document_id = "abc"

    line = ConsoleLogFormatter().format(record)

    assert "docvault.test" in line
    assert "[rid=-]" in line
    assert line.endswith("document.created document_id=abc")
