"""
Unit tests for the BurntVerifier facade.
"""

import pytest
from unittest.mock import AsyncMock, patch

from burnt_verification import BurntVerifier
from burnt_verification.core.config import Settings
from burnt_verification.exceptions import ConfigurationError
from burnt_verification.models import BurntVerifierConfig
from burnt_verification.providers import MockVerificationProvider, ReclaimVerificationProvider


CREDENTIALS = {"appId": "app-123", "appSecret": "secret-456"}


class TestProviderSelection:
    """Test adapter construction from configuration."""

    def test_default_is_reclaim(self):
        verifier = BurntVerifier(CREDENTIALS)
        assert isinstance(verifier.provider, ReclaimVerificationProvider)
        assert verifier.provider_name == "reclaim"

    def test_explicit_reclaim(self):
        verifier = BurntVerifier({**CREDENTIALS, "defaultProvider": "reclaim", "mode": "reclaim"})
        assert isinstance(verifier.provider, ReclaimVerificationProvider)

    @pytest.mark.parametrize(
        "config",
        [
            {"defaultProvider": "mock"},
            {"mode": "mock"},
            {"defaultProvider": "reclaim", "mode": "mock"},
        ],
    )
    def test_mock_selection(self, config):
        verifier = BurntVerifier({**CREDENTIALS, **config})
        assert isinstance(verifier.provider, MockVerificationProvider)
        assert verifier.provider_name == "mock"

    def test_mock_needs_no_credentials(self):
        verifier = BurntVerifier({"mode": "mock"})
        assert isinstance(verifier.provider, MockVerificationProvider)

    def test_accepts_config_model(self):
        verifier = BurntVerifier(BurntVerifierConfig(app_id="a", app_secret="b"))
        assert verifier.provider_name == "reclaim"

    def test_primus_not_implemented(self):
        with patch("burnt_verification.providers.reclaim_client.aiohttp.ClientSession") as session_cls:
            with pytest.raises(ConfigurationError, match="not yet implemented"):
                BurntVerifier({**CREDENTIALS, "defaultProvider": "primus"})
            session_cls.assert_not_called()

    def test_primus_wins_over_mock_mode(self):
        with pytest.raises(ConfigurationError):
            BurntVerifier({**CREDENTIALS, "defaultProvider": "primus", "mode": "mock"})

    @pytest.mark.parametrize(
        "config",
        [{"defaultProvider": "worldcoin"}, {"mode": "staging"}],
    )
    def test_unknown_selection(self, config):
        with pytest.raises(ConfigurationError):
            BurntVerifier({**CREDENTIALS, **config})

    @pytest.mark.parametrize(
        "config",
        [{}, {"appId": "app-123"}, {"appSecret": "secret-456"}],
    )
    def test_reclaim_requires_credentials(self, config):
        with pytest.raises(ConfigurationError):
            BurntVerifier(config)

    def test_each_verifier_gets_its_own_adapter(self):
        first = BurntVerifier(CREDENTIALS)
        second = BurntVerifier(CREDENTIALS)
        assert first.provider is not second.provider

    def test_from_settings(self):
        settings = Settings(BURNT_APP_ID="", BURNT_APP_SECRET="", BURNT_MODE="mock")
        verifier = BurntVerifier.from_settings(settings)
        assert verifier.provider_name == "mock"

    def test_from_settings_empty_provider_means_default(self):
        settings = Settings(
            BURNT_APP_ID="a", BURNT_APP_SECRET="b", BURNT_DEFAULT_PROVIDER="", BURNT_MODE=""
        )
        verifier = BurntVerifier.from_settings(settings)
        assert verifier.provider_name == "reclaim"


class TestDelegation:
    """Test that the facade forwards both lifecycle calls."""

    @pytest.mark.asyncio
    async def test_mock_end_to_end(self):
        verifier = BurntVerifier({"mode": "mock"})
        verifier.provider.delay_seconds = 0

        session = await verifier.initialize_session({"verificationTypeId": "x"})
        assert session.url.startswith("http://localhost:8080/mock-verification-page")
        assert session.session_id

        certificate = await verifier.verify(session.session_id)
        assert certificate.claims == {
            "companyName": "Mock Company Inc.",
            "email": "test@mockcompany.com",
            "employmentStatus": "Active",
        }
        assert certificate.timestamp_s > 0
        assert certificate.created_at > 0

    @pytest.mark.asyncio
    async def test_forwards_to_adapter(self):
        verifier = BurntVerifier(CREDENTIALS)
        verifier.provider.initialize_session = AsyncMock(return_value="session-info")
        verifier.provider.wait_for_verification = AsyncMock(return_value="certificate")

        assert await verifier.initialize_session({"verificationTypeId": "abc"}) == "session-info"
        assert await verifier.verify("s1") == "certificate"

        verifier.provider.initialize_session.assert_awaited_once_with({"verificationTypeId": "abc"})
        verifier.provider.wait_for_verification.assert_awaited_once_with("s1")
