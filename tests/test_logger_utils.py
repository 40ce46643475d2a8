# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

from __future__ import annotations

import io
import json
import logging

import pytest

from swiftmcp.utils.logger import (
    ColoredFormatter,
    StructuredJSONFormatter,
    SwiftMCPHandler,
    get_logger,
    setup_logger,
)


def _format(formatter: logging.Formatter, **extra: object) -> str:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    logger = logging.getLogger("swiftmcp.test.logger")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    try:
        logger.info("greeting", extra=extra)
    finally:
        logger.handlers = []
        logger.propagate = True
    return stream.getvalue().strip()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_uses_orjson_and_collects_context() -> None:
    line = _format(StructuredJSONFormatter(), context={"value": 42}, session="abc")

    payload = json.loads(line)
    assert payload["level"] == "info"
    assert payload["logger"] == "swiftmcp.test.logger"
    assert payload["message"] == "greeting"
    assert payload["context"] == {"value": 42, "session": "abc"}


def test_json_formatter_accepts_custom_serializer() -> None:
    line = _format(StructuredJSONFormatter(lambda payload: f"custom:{payload['message']}"))

    assert line == "custom:greeting"


def test_colored_formatter_restores_record_fields() -> None:
    line = _format(ColoredFormatter("%(levelname)s %(name)s %(message)s"))

    assert "\033[32mINFO\033[0m" in line
    assert line.endswith("greeting")


def test_setup_logger_reads_environment(monkeypatch: pytest.MonkeyPatch, restore_root_logger: logging.Logger) -> None:
    monkeypatch.setenv("SWIFTMCP_LOG_LEVEL", "debug")
    monkeypatch.setenv("SWIFTMCP_LOG_JSON", "1")

    setup_logger(force=True)

    (handler,) = [h for h in restore_root_logger.handlers if isinstance(h, SwiftMCPHandler)]
    assert handler.level == logging.DEBUG
    assert isinstance(handler.formatter, StructuredJSONFormatter)


def test_setup_logger_is_idempotent_without_force(restore_root_logger: logging.Logger) -> None:
    setup_logger(force=True, use_json=False, use_color=False)
    setup_logger(use_json=True)

    handlers = [h for h in restore_root_logger.handlers if isinstance(h, SwiftMCPHandler)]
    assert len(handlers) == 1
    assert not isinstance(handlers[0].formatter, StructuredJSONFormatter)
    assert not isinstance(handlers[0].formatter, ColoredFormatter)


def test_no_color_disables_ansi(monkeypatch: pytest.MonkeyPatch, restore_root_logger: logging.Logger) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("SWIFTMCP_LOG_JSON", raising=False)

    setup_logger(force=True)

    (handler,) = [h for h in restore_root_logger.handlers if isinstance(h, SwiftMCPHandler)]
    assert not isinstance(handler.formatter, ColoredFormatter)


def test_get_logger_defaults_to_package_logger() -> None:
    assert get_logger().name == "swiftmcp"
    assert get_logger("swiftmcp.demo").name == "swiftmcp.demo"
