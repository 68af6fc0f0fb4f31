"""
Test suite for correlation ID context and logging filter.

System role: Verification of request tracing helpers
"""

import asyncio
import logging

import pytest

from memory_backend.observability.correlation import (
    CorrelationIdFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    clear_correlation_id()
    yield
    clear_correlation_id()


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)


class TestCorrelationContext:
    """Test suite for set/get/clear."""

    def test_set_explicit_id(self) -> None:
        assert set_correlation_id("abc") == "abc"
        assert get_correlation_id() == "abc"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_generates_uuid(self, value) -> None:
        generated = set_correlation_id(value)

        assert len(generated) == 36
        assert get_correlation_id() == generated

    def test_clear(self) -> None:
        set_correlation_id("abc")
        clear_correlation_id()
        assert get_correlation_id() == ""

    @pytest.mark.asyncio
    async def test_isolated_between_tasks(self) -> None:
        """Test concurrent tasks each see their own correlation ID."""

        async def worker(value: str) -> str:
            set_correlation_id(value)
            await asyncio.sleep(0)
            return get_correlation_id()

        results = await asyncio.gather(worker("one"), worker("two"))

        assert results == ["one", "two"]


class TestCorrelationIdFilter:
    """Test suite for CorrelationIdFilter."""

    def test_stamps_current_id(self) -> None:
        set_correlation_id("req-1")
        record = _record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-1"

    def test_placeholder_when_unset(self) -> None:
        record = _record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"
