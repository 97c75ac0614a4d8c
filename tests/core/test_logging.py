"""Tests for structured logging."""

import asyncio
import json
import logging
from pathlib import Path

import pytest
import structlog

from edgeinclude.config.models import LoggingConfig, LogOutputConfig
from edgeinclude.core.logging import (
    configure_logging,
    current_request_id,
    get_logger,
    request_context,
)


class TestRequestContext:
    """Request correlation id binding tests."""

    def setup_method(self) -> None:
        structlog.contextvars.clear_contextvars()

    def test_given_request_id_when_bound_then_can_retrieve(self) -> None:
        """Request ID is visible inside the block and returned by it."""
        with request_context("test-123") as rid:
            assert rid == "test-123"
            assert current_request_id() == "test-123"

    @pytest.mark.parametrize("given", [None, ""])
    def test_given_no_id_when_bound_then_generates_one(self, given: str | None) -> None:
        """A 12-hex-digit id is generated when none is provided."""
        with request_context(given) as rid:
            assert len(rid) == 12
            int(rid, 16)
            assert current_request_id() == rid

    def test_given_block_exits_then_id_unbound(self) -> None:
        """Leaving the block removes the binding."""
        with request_context("abc"):
            pass
        assert current_request_id() is None

    def test_given_nested_blocks_then_outer_id_restored(self) -> None:
        with request_context("outer"):
            with request_context("inner"):
                assert current_request_id() == "inner"
            assert current_request_id() == "outer"

    def test_given_error_in_block_then_id_unbound(self) -> None:
        with pytest.raises(RuntimeError), request_context("abc"):
            raise RuntimeError("boom")
        assert current_request_id() is None

    @pytest.mark.asyncio
    async def test_given_concurrent_tasks_then_ids_isolated(self) -> None:
        """Each task sees only its own id."""

        async def worker(rid: str) -> str | None:
            with request_context(rid):
                await asyncio.sleep(0)
                return current_request_id()

        assert await asyncio.gather(worker("a"), worker("b")) == ["a", "b"]


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        structlog.contextvars.clear_contextvars()
        logging.getLogger().handlers.clear()

    def teardown_method(self) -> None:
        logging.getLogger().handlers.clear()

    def test_given_config_object_when_configure_then_takes_precedence(self, tmp_path: Path) -> None:
        """LoggingConfig object takes precedence over simple params."""
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        configure_logging(config=config, json_format=False, level="ERROR")
        get_logger().debug("debug msg")

        assert "debug msg" in log_file.read_text()

    def test_given_json_output_when_log_then_fields_present(self, tmp_path: Path) -> None:
        """JSON output carries event, level, timestamp, logger and request id."""
        log_file = tmp_path / "json.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        with request_context("req-1"):
            get_logger("edgeinclude.test").info("fragment_rendered", callback="blockA")

        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "fragment_rendered"
        assert data["callback"] == "blockA"
        assert data["level"] == "info"
        assert data["logger"] == "edgeinclude.test"
        assert data["request_id"] == "req-1"
        assert "timestamp" in data

    def test_given_multi_output_config_when_configure_then_logs_to_all(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_json_output_when_exception_logged_then_traceback_rendered(
        self, tmp_path: Path
    ) -> None:
        log_file = tmp_path / "exc.log"
        configure_logging(
            config=LoggingConfig(outputs=[LogOutputConfig(format="json", destination=str(log_file))])
        )

        try:
            raise ValueError("bad fragment")
        except ValueError:
            get_logger().exception("fragment_failed")

        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "fragment_failed"
        assert "ValueError: bad fragment" in data["exception"]

    def test_given_stdlib_record_when_logged_then_rendered_with_context(
        self, tmp_path: Path
    ) -> None:
        """Records from plain stdlib loggers share handlers and request context."""
        log_file = tmp_path / "foreign.log"
        configure_logging(
            config=LoggingConfig(outputs=[LogOutputConfig(format="json", destination=str(log_file))])
        )

        with request_context("req-2"):
            logging.getLogger("host.lib").warning("from stdlib")

        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "from stdlib"
        assert data["level"] == "warning"
        assert data["request_id"] == "req-2"

    def test_given_reconfigure_then_handlers_replaced(self, tmp_path: Path) -> None:
        configure_logging(level="INFO")
        configure_logging(level="INFO")

        assert len(logging.getLogger().handlers) == 1
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
