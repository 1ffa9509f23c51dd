import io
import json
import logging
from collections.abc import Generator

import pytest

from oratestkit.utils.logging import (
    CurrentTestFilter,
    StructuredFormatter,
    configure_logging,
    get_logger,
    get_test_id,
    log_with_context,
    set_log_level,
    set_test_id,
)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger("oratestkit")
    handlers, propagate, level = list(root.handlers), root.propagate, root.level
    yield
    root.handlers[:] = handlers
    root.propagate = propagate
    root.setLevel(level)


def test_get_logger_namespace() -> None:
    assert get_logger().name == "oratestkit"
    assert get_logger("harness").name == "oratestkit.harness"
    assert get_logger("oratestkit.sql").name == "oratestkit.sql"


def test_get_logger_adds_filter_once() -> None:
    logger = get_logger("filters")
    get_logger("filters")
    assert sum(isinstance(f, CurrentTestFilter) for f in logger.filters) == 1


def test_structured_formatter() -> None:
    set_test_id("test_urowid")
    record = logging.LogRecord("oratestkit.harness", logging.INFO, __file__, 10, "Dropping table %s", ("t1",), None)
    record.extra_fields = {"table": "t1"}

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["message"] == "Dropping table t1"
    assert entry["level"] == "INFO"
    assert entry["test_id"] == "test_urowid"
    assert entry["table"] == "t1"


def test_configure_logging_structured() -> None:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    configure_logging(level="DEBUG", extra_handlers=[handler])
    try:
        log_with_context(get_logger("harness"), logging.INFO, "created", table="nodb_tab")
        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["message"] == "created"
        assert entry["table"] == "nodb_tab"
    finally:
        handler.close()


def test_test_id_tracks_current_test(request: pytest.FixtureRequest) -> None:
    assert get_test_id() == request.node.nodeid


def test_set_log_level_keeps_handlers() -> None:
    handler = logging.NullHandler()
    configure_logging(level="INFO", format_style="simple", extra_handlers=[handler])
    set_log_level("debug")
    root = logging.getLogger("oratestkit")
    assert root.level == logging.DEBUG
    assert handler in root.handlers
    assert get_logger("harness").isEnabledFor(logging.DEBUG)


def test_log_with_context_skips_disabled_level() -> None:
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    configure_logging(level="WARNING", format_style="simple", extra_handlers=[handler])
    log_with_context(get_logger("harness"), logging.DEBUG, "dropped", table="nodb_tab")
    assert stream.getvalue() == ""
