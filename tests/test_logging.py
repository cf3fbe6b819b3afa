"""Tests for logging helpers"""
import logging

from storefront.logging import configure_logging, get_logger, loggable


def test_loggable_escapes_control_characters():
    assert loggable("men\nFAKE - root - ERROR") == "men\\nFAKE - root - ERROR"
    assert loggable("a\tb\r\x00") == "a\\tb\\r"


def test_loggable_truncates_and_handles_empty():
    assert loggable("x" * 60) == "x" * 50 + "..."
    assert loggable("x" * 60, max_length=10) == "x" * 10 + "..."
    assert loggable("") == "N/A"
    assert loggable(None) == "N/A"


def test_get_logger_is_cached():
    assert get_logger("storefront.test") is get_logger("storefront.test")


def test_configure_logging_keeps_existing_handlers(monkeypatch):
    root = logging.getLogger()
    handler = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [handler])

    assert configure_logging(level="DEBUG") is False
    assert root.handlers == [handler]
