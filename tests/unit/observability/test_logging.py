"""Tests for structured logging."""

import pytest
import structlog

from agentpack.observability.logging import (
    PIIRedactor,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_json_format(self) -> None:
        setup_logging(level="INFO", format="json", redact_pii=False)
        get_logger("test").info("test_message")

    def test_setup_console_format(self) -> None:
        setup_logging(level="DEBUG", format="console", redact_pii=False)
        get_logger("test").debug("test_message")

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(level="VERBOSE", format="json", redact_pii=True)
        get_logger("test").info("test_message", token="abc")

    def test_context_binding(self) -> None:
        setup_logging(level="INFO", format="json", redact_pii=True)
        with structlog.contextvars.bound_contextvars(tenant_id="t1", pack_key="generic"):
            get_logger("test").info("pack_apply_started")
        assert structlog.contextvars.get_contextvars() == {}


class TestPIIRedactor:
    """Tests for PII redaction."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    def test_redacts_sensitive_keys(self, redactor: PIIRedactor) -> None:
        event_dict = {"token": "abc", "Authorization": "Bearer x", "model": "gpt-4o-mini"}
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert result["token"] == "[REDACTED]"
        assert result["Authorization"] == "[REDACTED]"
        assert result["model"] == "gpt-4o-mini"

    def test_redacts_webhook_urls(self, redactor: PIIRedactor) -> None:
        """Playbook payloads carry webhook URLs that must not be logged."""
        event_dict = {"payload": {"webhook_url": "https://hooks.test/x", "name": "Main"}}
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert result["payload"]["webhook_url"] == "[REDACTED]"
        assert result["payload"]["name"] == "Main"

    def test_redacts_email_pattern(self, redactor: PIIRedactor) -> None:
        event_dict = {"error": "duplicate owner user@example.com"}
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert result["error"] == "duplicate owner [EMAIL]"

    def test_redacts_phone_pattern(self, redactor: PIIRedactor) -> None:
        event_dict = {"message": "Call me at +1-555-123-4567 please"}
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert "[PHONE]" in result["message"]

    def test_handles_lists(self, redactor: PIIRedactor) -> None:
        event_dict = {"errors": ["a@b.io failed", "ok"]}
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert result["errors"] == ["[EMAIL] failed", "ok"]

    def test_preserves_non_pii_data(self, redactor: PIIRedactor) -> None:
        event_dict = {
            "event": "pack_apply_completed",
            "counts": {"agents": 1},
            "success": True,
            "duration_ms": 12,
        }
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert result == event_dict

    def test_identifiers_not_mistaken_for_phones(self, redactor: PIIRedactor) -> None:
        tenant = "550e8400-e29b-41d4-a716-446655440000"
        event_dict = {"tenant_id": tenant, "row_id": tenant, "id": tenant}
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert result == event_dict

    def test_identifier_keys_still_redact_nested_values(self, redactor: PIIRedactor) -> None:
        event_dict = {"owner_id": {"email": "a@b.io"}}
        result = redactor(None, None, event_dict)  # type: ignore[arg-type]
        assert result["owner_id"]["email"] == "[REDACTED]"
