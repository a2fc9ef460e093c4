import importlib
import json
import logging
import warnings

from pythonjsonlogger.json import JsonFormatter

import logger
from logger import setup_logger, get_logger

def test_formatter_import_is_not_deprecated():
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        importlib.reload(logger)
    assert issubclass(logger.PanJsonFormatter, JsonFormatter)

def test_json_logger_writes_structured_lines(capsys):
    log = setup_logger("pan-test-json", level="debug", format_type="json")
    assert log.level == logging.DEBUG
    assert log.propagate is False
    assert isinstance(log.handlers[0].formatter, JsonFormatter)

    log.info("validated", extra={"valid": 3})
    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["message"] == "validated"
    assert record["level"] == "INFO"
    assert record["logger"] == "pan-test-json"
    assert record["valid"] == 3
    assert record["timestamp"]

def test_text_logger(capsys):
    log = setup_logger("pan-test-text", level="WARNING", format_type="text")
    log.info("hidden")
    log.warning("shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "pan-test-text - WARNING" in out

def test_get_logger_reuses_handlers():
    first = get_logger("pan-test-reuse")
    second = get_logger("pan-test-reuse")
    assert first is second
    assert len(second.handlers) == 1
