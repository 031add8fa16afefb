"""
Tests for the logging redaction functionality.

Claims and caller metadata carry PII, so verify it is masked before it
reaches log output.
"""
import asyncio
import json
import logging
import pytest
import structlog

from burnt_verification import BurntVerifier
from burnt_verification.core.logging import (
    SensitiveDataRedactor,
    log_session_event,
    redact_sensitive_data,
    sensitive_data_redactor_processor,
    setup_logging,
)
from burnt_verification.exceptions import ProviderVerificationError


class TestSensitiveDataRedactor:
    """Test the SensitiveDataRedactor class."""

    @pytest.fixture
    def redactor(self):
        """Create a fresh redactor instance for each test."""
        return SensitiveDataRedactor()

    @pytest.mark.parametrize("key", [
        "app_secret",
        "appSecret",
        "APP_SECRET",
        "signature",
        "authorization",
        "access_token",
        "client_secret_value",
        "refresh_token",
    ])
    def test_fully_redacted_keys(self, redactor, key):
        data = {key: "sensitive_value_123"}
        assert redactor.redact(data)[key] == "[REDACTED]"

    @pytest.mark.parametrize("key", ["email", "workEmail", "user_email"])
    def test_email_keys_keep_domain(self, redactor, key):
        data = {key: "jane@co.com"}
        assert redactor.redact(data)[key] == "***@co.com"

    def test_full_name_partial(self, redactor):
        assert redactor.redact({"fullName": "Jane Doe"}) == {"fullName": "Ja***"}

    def test_app_id_keeps_last_four(self, redactor):
        assert redactor.redact({"app_id": "0xabcdef1234"}) == {"app_id": "****1234"}

    def test_nested_claims(self, redactor):
        data = {
            "claims": {
                "companyName": "Acme Corp",
                "workEmail": "jane@co.com",
            },
            "proofs": [{"signatures": ["0xsig"]}],
        }
        result = redactor.redact(data)

        assert result["claims"]["companyName"] == "Acme Corp"
        assert result["claims"]["workEmail"] == "***@co.com"
        assert result["proofs"][0]["signatures"] == "[REDACTED]"

    def test_emails_inside_encoded_strings(self, redactor):
        message = json.dumps({"workEmail": "jane@co.com"})
        result = redactor.redact({"contextMessage": message})
        assert "jane@" not in result["contextMessage"]
        assert "***@co.com" in result["contextMessage"]

    def test_bearer_token_in_value(self, redactor):
        result = redactor.redact({"header": "Bearer abc.def.ghi"})
        assert result["header"] == "Bearer [REDACTED]"

    def test_non_sensitive_values_untouched(self, redactor):
        data = {"session_id": "session-1", "proof_count": 2, "ok": True, "none": None}
        assert redactor.redact(data) == data

    def test_disabled_redactor(self):
        redactor = SensitiveDataRedactor(enabled=False)
        data = {"app_secret": "s3cr3t"}
        assert redactor.redact(data) == data


def test_redact_sensitive_data_helper():
    result = redact_sensitive_data({"workEmail": "jane@co.com", "appSecret": "s3cr3t"})
    assert result == {"workEmail": "***@co.com", "appSecret": "[REDACTED]"}


def test_structlog_processor_redacts_event():
    event = {"event": "Session event", "details": {"metadata": {"workEmail": "jane@co.com"}}}
    result = sensitive_data_redactor_processor(logging.getLogger("test"), "info", event)
    assert result["details"]["metadata"]["workEmail"] == "***@co.com"
    assert result["event"] == "Session event"


class TestConfiguredPipeline:
    """Rendered log output once setup_logging has installed the processors."""

    @pytest.fixture
    def configured(self, caplog):
        structlog.reset_defaults()
        setup_logging(force=True)
        caplog.set_level(logging.DEBUG)
        yield caplog
        structlog.reset_defaults()

    def test_session_event_rendered_redacted(self, configured):
        log_session_event(
            "session-1",
            "session_initialized",
            provider="reclaim",
            details={"metadata": {"workEmail": "jane@co.com", "fullName": "Jane Doe"}},
        )

        assert "session-1" in configured.text
        assert "jane@co.com" not in configured.text
        assert "Jane Doe" not in configured.text
        assert "***@co.com" in configured.text

    def test_error_strings_redacted(self, configured):
        log_session_event(
            "session-1", "verification_failed", provider="reclaim", error="user jane@co.com rejected"
        )

        assert "jane@co.com" not in configured.text
        assert "user ***@co.com rejected" in configured.text

    @pytest.mark.asyncio
    async def test_failed_reclaim_session_logs_no_pii(self, configured, reclaim_provider, proof_factory):
        session = await reclaim_provider.initialize_session(
            {"verificationTypeId": "abc", "metadata": {"workEmail": "jane@co.com"}}
        )
        task = asyncio.create_task(reclaim_provider.wait_for_verification(session.session_id))
        await proof_factory.last.wait_started()
        proof_factory.last.fail(RuntimeError("user jane@co.com rejected"))

        with pytest.raises(ProviderVerificationError):
            await task

        assert "verification_failed" in configured.text
        assert "jane@co.com" not in configured.text


def test_verifier_installs_redacting_pipeline():
    structlog.reset_defaults()
    try:
        BurntVerifier({"mode": "mock"})
        assert structlog.is_configured()
        assert sensitive_data_redactor_processor in structlog.get_config()["processors"]
    finally:
        structlog.reset_defaults()


def test_setup_logging_keeps_host_configuration():
    structlog.reset_defaults()
    try:
        structlog.configure(processors=[structlog.processors.KeyValueRenderer()])
        setup_logging()
        assert sensitive_data_redactor_processor not in structlog.get_config()["processors"]
    finally:
        structlog.reset_defaults()
