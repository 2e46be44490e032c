"""Tests for logging configuration and utilities."""

import logging

from evntboard_openai.logging import (
    ComponentFormatter,
    SecretRedactor,
    configure_logging,
    format_extra,
    resolve_level,
)


def _record(name: str, msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSecretRedactor:
    """Tests for SecretRedactor class."""

    def test_redacts_openai_api_key(self):
        redactor = SecretRedactor()
        text = "apiKey is sk-proj-abcdefghijklmnopqrstuvwxyz123456"
        result = redactor.redact(text)
        assert "sk-p" in result
        assert "3456" in result
        assert "abcdefghijklmnopqrstuvwxyz" not in result

    def test_redacts_env_assignment(self):
        redactor = SecretRedactor()
        result = redactor.redact("MODULE_TOKEN=abcdefghijklmnop")
        assert "MODULE_TOKEN=" in result
        assert "abcdefghijklmnop" not in result

    def test_redacts_json_token_field(self):
        redactor = SecretRedactor()
        result = redactor.redact('{"code": "openai", "token": "hub-token-123456"}')
        assert '"code": "openai"' in result
        assert "hub-token-123456" not in result

    def test_short_secret_fully_masked(self):
        redactor = SecretRedactor()
        result = redactor.redact('{"token": "abcdefgh"}')
        assert result == '{"token": "***"}'

    def test_disabled_redactor_passes_through(self):
        redactor = SecretRedactor(enabled=False)
        text = "sk-proj-abcdefghijklmnopqrstuvwxyz123456"
        assert redactor.redact(text) == text

    def test_plain_text_untouched(self):
        redactor = SecretRedactor()
        assert redactor.redact("hub_connected") == "hub_connected"


class TestComponentFormatter:
    def test_component_from_package_logger(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")
        record = _record("evntboard_openai.rpc.session", "rpc_request_sent")
        assert formatter.format(record) == "rpc | rpc_request_sent"

    def test_component_from_third_party_logger(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")
        record = _record("websockets.client", "connected")
        assert formatter.format(record) == "websockets | connected"

    def test_extra_fields_appended_and_redacted(self):
        formatter = ComponentFormatter("%(message)s")
        record = _record(
            "evntboard_openai.hub",
            "hub_registered",
            host="ws://hub",
            token_dump="MODULE_TOKEN=abcdefghijklmnop",
        )
        result = formatter.format(record)
        assert result.startswith("hub_registered host=ws://hub")
        assert "abcdefghijklmnop" not in result


def test_format_extra_ignores_standard_attributes():
    record = _record("x", "msg")
    assert format_extra(record) == ""


def test_resolve_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert resolve_level() == "WARNING"
    assert resolve_level("debug") == "DEBUG"
    assert resolve_level("chatty") == "INFO"


def test_configure_logging_quiets_noisy_loggers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("DEBUG")

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, ComponentFormatter)
        assert logging.getLogger("openai").level == logging.WARNING
        assert logging.getLogger("websockets").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
