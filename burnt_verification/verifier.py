"""
Burnt Verifier

The main entry point for the Burnt verification SDK.

Usage:
    verifier = BurntVerifier({"appId": "...", "appSecret": "..."})
    session = await verifier.initialize_session({"verificationTypeId": "..."})
    certificate = await verifier.verify(session.session_id)
"""

from typing import Callable, Dict, Union

from burnt_verification.core.config import Settings, settings as default_settings
from burnt_verification.core.logging import get_logger, setup_logging
from burnt_verification.exceptions import ConfigurationError
from burnt_verification.models import (
    BurntAttributeCertificate,
    BurntVerifierConfig,
    SessionInfo,
)
from burnt_verification.providers import (
    BaseVerificationProvider,
    MockVerificationProvider,
    ReclaimVerificationProvider,
)
from burnt_verification.providers.base import RequestOptions

logger = get_logger(__name__)

DEFAULT_PROVIDER = "reclaim"
MOCK_PROVIDER = "mock"

# Recognized provider tags that have no adapter yet
PLANNED_PROVIDERS = frozenset({"primus"})


def _build_reclaim(config: BurntVerifierConfig) -> BaseVerificationProvider:
    if not config.app_id or not config.app_secret:
        raise ConfigurationError(
            "Reclaim provider requires appId and appSecret",
            {"provider": DEFAULT_PROVIDER},
        )
    return ReclaimVerificationProvider(config.app_id, config.app_secret)


def _build_mock(config: BurntVerifierConfig) -> BaseVerificationProvider:
    return MockVerificationProvider()


PROVIDER_BUILDERS: Dict[str, Callable[[BurntVerifierConfig], BaseVerificationProvider]] = {
    DEFAULT_PROVIDER: _build_reclaim,
    MOCK_PROVIDER: _build_mock,
}


def select_provider(config: BurntVerifierConfig) -> str:
    """
    Resolve the provider tag for a configuration.

    Raises:
        ConfigurationError: For planned or unknown provider tags
    """
    provider = config.default_provider
    if provider in PLANNED_PROVIDERS:
        raise ConfigurationError(
            f"{provider.capitalize()} provider not yet implemented",
            {"provider": provider},
        )
    if provider == MOCK_PROVIDER or config.mode == MOCK_PROVIDER:
        return MOCK_PROVIDER
    if provider not in (None, DEFAULT_PROVIDER):
        raise ConfigurationError(f"Unknown provider: {provider}", {"provider": provider})
    if config.mode not in (None, DEFAULT_PROVIDER):
        raise ConfigurationError(f"Unknown mode: {config.mode}", {"mode": config.mode})
    return DEFAULT_PROVIDER


class BurntVerifier:
    """
    Facade over the configured verification provider.

    The provider is chosen once at construction; the verifier itself keeps
    no session state.
    """

    def __init__(self, config: Union[BurntVerifierConfig, dict]):
        setup_logging()

        if not isinstance(config, BurntVerifierConfig):
            config = BurntVerifierConfig.model_validate(config)

        provider_name = select_provider(config)
        self._adapter = PROVIDER_BUILDERS[provider_name](config)
        logger.info("Burnt verifier configured", provider=provider_name)

    @classmethod
    def from_settings(cls, settings: Settings = None) -> "BurntVerifier":
        """Build a verifier from environment settings."""
        settings = settings or default_settings
        return cls(
            BurntVerifierConfig(
                app_id=settings.BURNT_APP_ID,
                app_secret=settings.BURNT_APP_SECRET,
                default_provider=settings.BURNT_DEFAULT_PROVIDER,
                mode=settings.BURNT_MODE,
            )
        )

    @property
    def provider(self) -> BaseVerificationProvider:
        return self._adapter

    @property
    def provider_name(self) -> str:
        return self._adapter.name

    async def initialize_session(self, options: RequestOptions) -> SessionInfo:
        """
        Start a new verification session.

        Args:
            options: Verification request options (model or dict)

        Returns:
            SessionInfo with the verification URL (typically shown as a QR
            code or deep link) and the session id
        """
        return await self._adapter.initialize_session(options)

    async def verify(self, session_id: str) -> BurntAttributeCertificate:
        """
        Wait for the verification result of a session.

        Args:
            session_id: The session id returned from initialize_session

        Returns:
            The BurntAttributeCertificate once verification succeeds
        """
        return await self._adapter.wait_for_verification(session_id)
