import io
import logging

import logging_setup
from logging_setup import ROOT_LOGGER_NAME, _parse_level, configure_logging, get_logger


def test_parse_level(monkeypatch):
    assert _parse_level("debug") == logging.DEBUG
    assert _parse_level("15") == 15
    assert _parse_level(logging.ERROR) == logging.ERROR
    monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "WARNING")
    assert _parse_level(None) == logging.WARNING
    monkeypatch.delenv("FINANCE_TRACKER_LOG_LEVEL")
    assert _parse_level("nonsense") == logging.INFO


def test_configure_logging_once(monkeypatch):
    root = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (list(root.handlers), root.level, root.propagate)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    stream = io.StringIO()
    try:
        configure_logging("INFO", stream=stream)
        configure_logging("DEBUG", stream=io.StringIO())
        get_logger(f"{ROOT_LOGGER_NAME}.test").info("hello")
        assert "hello" in stream.getvalue()
        assert len([h for h in root.handlers if isinstance(h, logging.StreamHandler)]) == 1
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
        root.propagate = saved[2]
