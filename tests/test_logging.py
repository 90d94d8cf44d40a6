"""Tests for the logging helpers."""

import json
import logging

from cuetimer.utils import logger as logger_module
from cuetimer.utils.logger import ColoredFormatter, JSONFormatter, log_structured


def _record(msg="Cue due", level=logging.WARNING, **extra):
    record = logging.LogRecord("cuetimer.core.commands", level, __file__, 42, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    payload = json.loads(JSONFormatter().format(_record(config="round.yaml", second=180)))
    assert payload["message"] == "Cue due"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "cuetimer.core.commands"
    assert payload["config"] == "round.yaml"
    assert payload["second"] == 180
    assert payload["timestamp"].endswith("Z")
    assert payload["source"].endswith(":42")


def test_json_formatter_stringifies_unserializable_extras():
    payload = json.loads(JSONFormatter().format(_record(path=object())))
    assert payload["path"].startswith("<object object")


def test_colored_formatter_restores_levelname():
    record = _record(level=logging.ERROR)
    output = ColoredFormatter("%(levelname)s %(message)s").format(record)
    assert "\033[31m" in output
    assert record.levelname == "ERROR"


def test_log_structured_appends_context(caplog, monkeypatch):
    monkeypatch.setattr(logger_module, "ENABLE_JSON_LOGS", False)
    log = logging.getLogger("cuetimer.test")
    with caplog.at_level(logging.INFO, logger="cuetimer.test"):
        log_structured(log, logging.INFO, "Trigger file loaded", config="round.yaml", cues=2)
    assert "Trigger file loaded | config=round.yaml cues=2" in caplog.text


def test_log_structured_passes_extra_in_json_mode(caplog, monkeypatch):
    monkeypatch.setattr(logger_module, "ENABLE_JSON_LOGS", True)
    log = logging.getLogger("cuetimer.test")
    with caplog.at_level(logging.INFO, logger="cuetimer.test"):
        log_structured(log, logging.INFO, "Trigger file loaded", config="round.yaml")
    assert caplog.records[-1].config == "round.yaml"
    assert caplog.records[-1].getMessage() == "Trigger file loaded"
