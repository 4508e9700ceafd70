import logging

from pythonjsonlogger import jsonlogger

from repair_quotes.core.observability import setup_logging


def test_setup_logging_uses_json_and_env_level(monkeypatch):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DISABLE_ACCESS_LOG", "1")
    try:
        setup_logging()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
        assert logging.getLogger("uvicorn.access").disabled is True
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("uvicorn.access").disabled = False
