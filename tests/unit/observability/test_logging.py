"""Tests for structured logging and log context."""

import json
import logging

from storefront.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogContext,
    operation_var,
    store_id_var,
)


def _record(message: str = "Swept entries", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="storefront.cache.sweeper",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    """Test context variable propagation."""

    def test_sets_and_resets(self) -> None:
        """Context values exist only inside the block."""
        with LogContext(store_id="store-1", operation="invalidate"):
            assert store_id_var.get() == "store-1"
            assert operation_var.get() == "invalidate"
        assert store_id_var.get() == ""
        assert operation_var.get() == ""

    def test_nested_contexts_restore_outer(self) -> None:
        """An inner context restores the outer value on exit."""
        with LogContext(store_id="outer"):
            with LogContext(store_id="inner"):
                assert store_id_var.get() == "inner"
            assert store_id_var.get() == "outer"

    def test_unknown_keys_ignored(self) -> None:
        """Keys without a context variable are accepted and ignored."""
        with LogContext(tenant="x"):
            assert store_id_var.get() == ""


class TestJsonFormatter:
    """Test JSON output."""

    def test_basic_fields(self) -> None:
        """Output is JSON with level, logger and message."""
        data = json.loads(JsonFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "storefront.cache.sweeper"
        assert data["message"] == "Swept entries"
        assert "store_id" not in data

    def test_includes_context(self) -> None:
        """Active context is added to every record."""
        with LogContext(store_id="store-9", operation="invalidate"):
            data = json.loads(JsonFormatter().format(_record()))

        assert data["store_id"] == "store-9"
        assert data["operation"] == "invalidate"

    def test_includes_extra_fields(self) -> None:
        """Extra record attributes are serialized, unserializable ones as strings."""
        data = json.loads(JsonFormatter().format(_record(deleted=3, kind=object())))

        assert data["deleted"] == 3
        assert isinstance(data["kind"], str)


class TestConsoleFormatter:
    """Test human-readable output."""

    def test_includes_context(self) -> None:
        """Store id and operation are appended."""
        formatter = ConsoleFormatter(use_colors=False)
        with LogContext(store_id="store-1", operation="sweep"):
            line = formatter.format(_record())

        assert "storefront.cache.sweeper" in line
        assert "Swept entries" in line
        assert line.endswith("store=store-1 op=sweep")
