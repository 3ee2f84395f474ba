from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Iterator

import pytest

from workflow_engine.engine.errors import TransitionErrorKind
from workflow_engine.logging import JsonFormatter, configure_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="workflow_engine.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Executed %s",
        args=("action",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_emits_core_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "workflow_engine.test"
    assert payload["message"] == "Executed action"
    assert "timestamp" in payload
    assert "extra" not in payload


def test_json_formatter_nests_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(instance_id="abc", attempt=2)))
    assert payload["extra"] == {"instance_id": "abc", "attempt": 2}


def test_json_formatter_stringifies_ids_and_kinds() -> None:
    instance_id = uuid.uuid4()
    record = _record(instance_id=instance_id, kind=TransitionErrorKind.ACTION_DISABLED)
    payload = json.loads(JsonFormatter().format(record))
    assert payload["extra"]["instance_id"] == str(instance_id)
    assert payload["extra"]["kind"] == TransitionErrorKind.ACTION_DISABLED.value


_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    saved_root = (list(root.handlers), root.level)
    saved_uvicorn = {
        name: (list(logging.getLogger(name).handlers), logging.getLogger(name).propagate)
        for name in _UVICORN_LOGGERS
    }
    yield
    root.handlers = saved_root[0]
    root.setLevel(saved_root[1])
    for name, (handlers, propagate) in saved_uvicorn.items():
        logging.getLogger(name).handlers = handlers
        logging.getLogger(name).propagate = propagate


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_installs_single_json_handler() -> None:
    configure_logging("debug")
    configure_logging("warning")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    handler = root.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert handler.stream is sys.stdout
    assert isinstance(handler.formatter, JsonFormatter)
    assert root.level == logging.WARNING


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_routes_uvicorn_through_root() -> None:
    logging.getLogger("uvicorn.access").addHandler(logging.NullHandler())
    logging.getLogger("uvicorn.error").propagate = False

    configure_logging("info")

    for name in _UVICORN_LOGGERS:
        uv_logger = logging.getLogger(name)
        assert uv_logger.handlers == []
        assert uv_logger.propagate is True
