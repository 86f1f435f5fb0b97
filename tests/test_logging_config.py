"""JSON logging setup tests."""

import json
import logging

import pytest

from src.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_emits_json(capsys):
    setup_logging("debug")
    logging.getLogger("src.diagnostics.test").info("scan done", extra={"audit_id": "abc"})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "scan done"
    assert record["level"] == "INFO"
    assert record["logger"] == "src.diagnostics.test"
    assert record["audit_id"] == "abc"
    assert "timestamp" in record


def test_setup_logging_quiets_httpx():
    setup_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger().level == logging.DEBUG


def test_uvicorn_loggers_share_root_handler():
    setup_logging()
    root_handler = logging.getLogger().handlers[0]
    assert logging.getLogger("uvicorn.access").handlers == [root_handler]
    assert logging.getLogger("uvicorn.access").propagate is False
