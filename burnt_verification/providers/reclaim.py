"""
Reclaim Verification Provider

Adapter for Reclaim Protocol. Hides the Reclaim request handle and its
callback-based session API from the rest of the SDK.
"""

import asyncio
import json
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional

from burnt_verification.core.config import settings
from burnt_verification.core.logging import get_logger, log_session_event, redact_sensitive_data
from burnt_verification.exceptions import (
    NormalizationError,
    ProviderInitializationError,
    ProviderVerificationError,
    VerificationError,
)
from burnt_verification.models import BurntAttributeCertificate, SessionInfo
from burnt_verification.normalizer import build_certificate
from burnt_verification.providers.base import BaseVerificationProvider, PendingSession, RequestOptions
from burnt_verification.providers.reclaim_client import ProofRequest, ReclaimProofRequest
from burnt_verification.registry import SessionRegistry

logger = get_logger(__name__)

# Context address used when attaching caller metadata to a request
CONTEXT_ADDRESS = "0x0"

ProofRequestFactory = Callable[[str, str, str, Dict[str, Any]], Awaitable[ProofRequest]]


def _settle(future: asyncio.Future, result: Any = None, error: Optional[BaseException] = None) -> None:
    # Late callbacks after cancellation, or a second callback, are dropped
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


class ReclaimVerificationProvider(BaseVerificationProvider):
    """
    Verification provider backed by Reclaim Protocol.

    Sessions are registered in a SessionRegistry when their URL is handed
    out and consumed exactly once when Reclaim reports success or failure.
    """

    name = "reclaim"

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        proof_request_factory: Optional[ProofRequestFactory] = None,
        registry: Optional[SessionRegistry] = None,
        share_page_url: Optional[str] = None,
        use_app_clip: Optional[bool] = None,
        sdk_log: Optional[bool] = None,
    ):
        """
        Initialize Reclaim provider.

        Args:
            app_id: Reclaim application id
            app_secret: Reclaim application secret
            proof_request_factory: Creates request handles, defaults to ReclaimProofRequest.init
            registry: Session registry, a private one is created if omitted
            share_page_url: Share page the request URL points at
            use_app_clip: Whether to route the user through the App Clip
            sdk_log: Enable request-side logging on the proof request
        """
        self.app_id = app_id
        self.app_secret = app_secret
        self._init_request = proof_request_factory or ReclaimProofRequest.init
        self._registry = registry if registry is not None else SessionRegistry()
        self.request_options = {
            "useAppClip": settings.RECLAIM_USE_APP_CLIP if use_app_clip is None else use_app_clip,
            "log": settings.RECLAIM_SDK_LOG if sdk_log is None else sdk_log,
            "customSharePageUrl": share_page_url or settings.RECLAIM_SHARE_PAGE_URL,
        }
        logger.debug("Initialized Reclaim provider", app_id=app_id)

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    async def initialize_session(self, options: RequestOptions) -> SessionInfo:
        """Initialize a Reclaim verification session."""
        options = self._coerce_options(options)
        provider_id = options.verification_type_id

        try:
            request = await self._init_request(
                self.app_id, self.app_secret, provider_id, dict(self.request_options)
            )

            if options.callback_url:
                request.set_app_callback_url(options.callback_url)

            # Only attach context when there is metadata to carry
            if options.metadata:
                request.add_context(CONTEXT_ADDRESS, json.dumps(options.metadata))

            request_url = await request.get_request_url()
        except VerificationError:
            raise
        except Exception as e:
            logger.error(
                "Reclaim session initialization failed",
                verification_type_id=provider_id,
                error=redact_sensitive_data(str(e)),
            )
            raise ProviderInitializationError(
                f"Failed to initialize Reclaim session: {e}",
                {"verification_type_id": provider_id},
            ) from e

        if not request_url:
            raise ProviderInitializationError(
                "Reclaim did not return a request URL",
                {"verification_type_id": provider_id},
            )

        get_session_id = getattr(request, "get_session_id", None)
        session_id = get_session_id() if callable(get_session_id) else None
        if not session_id:
            session_id = f"reclaim_session_{uuid.uuid4().hex}"

        self._registry.register(session_id, PendingSession(request=request, options=options))
        log_session_event(
            session_id,
            "session_initialized",
            provider=self.name,
            details={"verification_type_id": provider_id, "metadata": options.metadata},
        )

        return SessionInfo(url=request_url, session_id=session_id)

    async def wait_for_verification(self, session_id: str) -> BurntAttributeCertificate:
        """
        Wait for Reclaim to report the outcome of a session.

        Suspends until the user finishes the proof flow. There is no
        timeout; cancelling the awaiting task leaves the session registered.
        """
        pending: PendingSession = self._registry.get(session_id)

        loop = asyncio.get_running_loop()
        outcome: asyncio.Future = loop.create_future()

        def on_success(response: Any) -> None:
            loop.call_soon_threadsafe(_settle, outcome, response, None)

        def on_error(error: Exception) -> None:
            if not isinstance(error, BaseException):
                error = ProviderVerificationError(str(error))
            loop.call_soon_threadsafe(_settle, outcome, None, error)

        try:
            await pending.request.start_session(on_success=on_success, on_error=on_error)
            response = await outcome
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._registry.consume(session_id)
            error = e
            if not isinstance(e, ProviderVerificationError):
                error = ProviderVerificationError(
                    f"Reclaim verification failed: {e}", {"session_id": session_id}
                )
            log_session_event(session_id, "verification_failed", provider=self.name, error=str(e))
            await self._notify_error(pending.options, error)
            if error is e:
                raise
            raise error from e

        self._registry.consume(session_id)

        try:
            certificate = build_certificate(session_id, response)
        except NormalizationError as e:
            error = ProviderVerificationError(e.message, {"session_id": session_id})
            log_session_event(session_id, "verification_failed", provider=self.name, error=e.message)
            await self._notify_error(pending.options, error)
            raise error from e

        log_session_event(
            session_id,
            "verification_succeeded",
            provider=self.name,
            details={"verification_type_id": certificate.verification_type_id},
        )
        await self._notify_success(pending.options, certificate)
        return certificate
