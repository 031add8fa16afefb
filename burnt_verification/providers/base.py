"""
Base Verification Provider Interface

Abstract base class for provider adapters.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Union

from burnt_verification.core.logging import get_logger, redact_sensitive_data
from burnt_verification.models import (
    BurntAttributeCertificate,
    SessionInfo,
    VerificationRequestOptions,
)

logger = get_logger(__name__)

RequestOptions = Union[VerificationRequestOptions, dict]


@dataclass
class PendingSession:
    """Adapter-owned handle stored in the session registry."""

    request: Any
    options: VerificationRequestOptions


class BaseVerificationProvider(ABC):
    """
    Abstract base class for verification providers.

    Each provider hides one external proof system (Reclaim, Primus, ...)
    behind the same two-step lifecycle: start a session and hand the user a
    URL, then wait for the out-of-process proof flow to finish.
    """

    name: str = "base"

    @abstractmethod
    async def initialize_session(self, options: RequestOptions) -> SessionInfo:
        """
        Initialize a verification session.

        Args:
            options: Verification request options

        Returns:
            SessionInfo with the URL to present to the user and the session id

        Raises:
            ProviderInitializationError: If the provider cannot produce a URL
        """
        pass

    @abstractmethod
    async def wait_for_verification(self, session_id: str) -> BurntAttributeCertificate:
        """
        Wait for the verification to complete.

        Args:
            session_id: Session id returned from initialize_session

        Returns:
            BurntAttributeCertificate for the verified attribute

        Raises:
            SessionNotFoundError: If the session is unknown or already consumed
            ProviderVerificationError: If the provider reports a failure
        """
        pass

    @staticmethod
    def _coerce_options(options: RequestOptions) -> VerificationRequestOptions:
        if isinstance(options, VerificationRequestOptions):
            return options
        return VerificationRequestOptions.model_validate(options)

    async def _notify_success(
        self, options: Optional[VerificationRequestOptions], certificate: BurntAttributeCertificate
    ) -> None:
        if options is not None and options.on_success is not None:
            await self._run_hook(options.on_success, certificate)

    async def _notify_error(
        self, options: Optional[VerificationRequestOptions], error: Exception
    ) -> None:
        if options is not None and options.on_error is not None:
            await self._run_hook(options.on_error, error)

    async def _run_hook(self, hook, argument) -> None:
        """Run a caller hook; its failures never change the session outcome."""
        try:
            result = hook(argument)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "Verification hook raised",
                provider=self.name,
                hook=getattr(hook, "__name__", repr(hook)),
                error=redact_sensitive_data(str(e)),
                exc_info=True,
            )
