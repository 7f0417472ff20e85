"""Tests for structured logging."""

import pytest

from maestro.observability.logging import PIIRedactor, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        """Should configure JSON format for production."""
        setup_logging(level="INFO", format="json", redact_pii=False)
        get_logger("test").info("test_message")

    def test_setup_console_format(self) -> None:
        """Should configure console format for development."""
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        get_logger("test").debug("test_message")

    def test_unknown_level_defaults_to_info(self) -> None:
        setup_logging(level="VERBOSE", format="json")
        assert get_logger("test") is not None


class TestPIIRedactor:
    """Tests for PIIRedactor processor."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    def test_redacts_sensitive_keys(self, redactor: PIIRedactor) -> None:
        result = redactor(None, "info", {"event": "x", "api_key": "abc", "text": "hi"})
        assert result["api_key"] == "[REDACTED]"
        assert result["text"] == "[REDACTED]"
        assert result["event"] == "x"

    def test_redacts_email_in_values(self, redactor: PIIRedactor) -> None:
        result = redactor(None, "info", {"event": "contact ada@example.com now"})
        assert result["event"] == "contact [EMAIL] now"

    def test_redacts_phone_in_nested_values(self, redactor: PIIRedactor) -> None:
        result = redactor(None, "info", {"event": "x", "extra": {"note": ["+1 555 123 4567"]}})
        assert result["extra"]["note"] == ["[PHONE]"]

    def test_leaves_non_strings_alone(self, redactor: PIIRedactor) -> None:
        result = redactor(None, "info", {"event": "x", "count": 3, "ok": True})
        assert result["count"] == 3
        assert result["ok"] is True
