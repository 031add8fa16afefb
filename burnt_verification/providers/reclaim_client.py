"""
Reclaim Proof Request Client

Thin aiohttp client for the Reclaim proof-request backend. It exposes the
callback-style request handle the Reclaim adapter drives:

    request = await ReclaimProofRequest.init(app_id, app_secret, provider_id, options)
    request.set_app_callback_url(...)
    request.add_context("0x0", json.dumps(metadata))
    url = await request.get_request_url()
    await request.start_session(on_success=..., on_error=...)

Any object with the same shape can be injected into the adapter instead.
"""

import asyncio
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple
from urllib.parse import urlencode

import aiohttp

from burnt_verification.core.config import settings

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({"PROOF_SUBMITTED"})
FAILURE_STATUSES = frozenset(
    {
        "PROOF_GENERATION_FAILED",
        "PROOF_SUBMISSION_FAILED",
        "ERROR_SUBMITTED",
        "ERROR_SUBMISSION_FAILED",
    }
)

SuccessCallback = Callable[[Any], Any]
ErrorCallback = Callable[[Exception], Any]


class ReclaimClientError(Exception):
    """Raised when the Reclaim backend rejects a request or reports a failure."""

    pass


class ProofRequest(Protocol):
    """Request handle shape the Reclaim adapter relies on."""

    async def get_request_url(self) -> str: ...

    def get_session_id(self) -> Optional[str]: ...

    def add_context(self, address: str, message: str) -> None: ...

    def set_app_callback_url(self, url: str) -> None: ...

    async def start_session(
        self, *, on_success: SuccessCallback, on_error: ErrorCallback
    ) -> None: ...


def sign_request(app_secret: str, provider_id: str, timestamp: str) -> str:
    """HMAC-SHA256 over the canonical JSON of providerId and timestamp."""
    canonical = json.dumps(
        {"providerId": provider_id, "timestamp": timestamp},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hmac.new(
        app_secret.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha256
    ).hexdigest()


class ReclaimProofRequest:
    """
    A single Reclaim proof request.

    Created through ``init``, which registers the session with the backend.
    ``start_session`` launches a background task that polls the session
    status until the user submits a proof or the flow fails, then invokes
    every registered callback pair exactly once.
    """

    def __init__(
        self,
        app_id: str,
        provider_id: str,
        session_id: str,
        options: Optional[Dict[str, Any]] = None,
        api_base_url: Optional[str] = None,
        poll_interval: Optional[float] = None,
        request_timeout: Optional[float] = None,
    ):
        self.app_id = app_id
        self.provider_id = provider_id
        self.session_id = session_id
        self.options = options or {}
        self.api_base_url = (api_base_url or settings.RECLAIM_API_BASE_URL).rstrip("/")
        self.poll_interval = (
            poll_interval
            if poll_interval is not None
            else settings.RECLAIM_STATUS_POLL_INTERVAL_SECONDS
        )
        self.request_timeout = request_timeout or settings.RECLAIM_REQUEST_TIMEOUT_SECONDS
        self._context: Optional[Dict[str, str]] = None
        self._callback_url: Optional[str] = None
        self._listeners: List[Tuple[SuccessCallback, ErrorCallback]] = []
        self._poll_task: Optional[asyncio.Task] = None

    @classmethod
    async def init(
        cls,
        app_id: str,
        app_secret: str,
        provider_id: str,
        options: Optional[Dict[str, Any]] = None,
        api_base_url: Optional[str] = None,
    ) -> "ReclaimProofRequest":
        """
        Register a new proof request session with the backend.

        Raises:
            ReclaimClientError: If the backend rejects the request
            aiohttp.ClientError: If the backend is unreachable
        """
        api_base_url = (api_base_url or settings.RECLAIM_API_BASE_URL).rstrip("/")
        timestamp = str(int(time.time() * 1000))
        payload = {
            "appId": app_id,
            "providerId": provider_id,
            "timestamp": timestamp,
            "signature": sign_request(app_secret, provider_id, timestamp),
        }

        logger.debug(f"Initializing Reclaim session for provider {provider_id}")
        async with aiohttp.ClientSession() as session:
            async with session.post(
                f"{api_base_url}/api/sdk/init/session/",
                json=payload,
                timeout=aiohttp.ClientTimeout(total=settings.RECLAIM_REQUEST_TIMEOUT_SECONDS),
            ) as response:
                if response.status not in (200, 201):
                    text = await response.text()
                    raise ReclaimClientError(f"HTTP {response.status}: {text}")
                data = await response.json()

        session_id = data.get("sessionId")
        if not session_id:
            raise ReclaimClientError("Reclaim did not return a session id")

        return cls(
            app_id=app_id,
            provider_id=provider_id,
            session_id=session_id,
            options=options,
            api_base_url=api_base_url,
        )

    def get_session_id(self) -> str:
        return self.session_id

    def add_context(self, address: str, message: str) -> None:
        self._context = {"contextAddress": address, "contextMessage": message}

    def set_app_callback_url(self, url: str) -> None:
        self._callback_url = url

    async def get_request_url(self) -> str:
        """Build the share page URL the user opens (link or QR code)."""
        params = {
            "sessionId": self.session_id,
            "appId": self.app_id,
            "providerId": self.provider_id,
        }
        if self._context:
            params["context"] = json.dumps(self._context)
        if self._callback_url:
            params["callbackUrl"] = self._callback_url
        if self.options.get("useAppClip"):
            params["useAppClip"] = "true"

        share_page = self.options.get("customSharePageUrl") or settings.RECLAIM_SHARE_PAGE_URL
        return f"{share_page}?{urlencode(params)}"

    async def start_session(
        self, *, on_success: SuccessCallback, on_error: ErrorCallback
    ) -> None:
        """Start listening for the proof; returns once polling is scheduled."""
        self._listeners.append((on_success, on_error))
        if self._poll_task is None or self._poll_task.done():
            self._poll_task = asyncio.create_task(self._poll_status())

    def close(self) -> None:
        """Stop polling without notifying listeners."""
        if self._poll_task and not self._poll_task.done():
            self._poll_task.cancel()

    async def _fetch_status(self, session: aiohttp.ClientSession) -> Dict[str, Any]:
        async with session.get(
            f"{self.api_base_url}/api/sdk/session/{self.session_id}",
            timeout=aiohttp.ClientTimeout(total=self.request_timeout),
        ) as response:
            if response.status != 200:
                text = await response.text()
                raise ReclaimClientError(f"HTTP {response.status}: {text}")
            data = await response.json()

        if not isinstance(data, dict):
            raise ReclaimClientError(f"Unexpected status response: {type(data).__name__}")
        status = data.get("session") or data
        if not isinstance(status, dict):
            raise ReclaimClientError(f"Unexpected session payload: {type(status).__name__}")
        return status

    async def _poll_status(self) -> None:
        try:
            async with aiohttp.ClientSession() as session:
                while True:
                    status = await self._fetch_status(session)
                    state = status.get("status")
                    if state in SUCCESS_STATUSES:
                        self._dispatch(success=status.get("proofs") or [])
                        return
                    if state in FAILURE_STATUSES:
                        self._dispatch(
                            error=ReclaimClientError(f"Reclaim session {self.session_id} ended with {state}")
                        )
                        return
                    await asyncio.sleep(self.poll_interval)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Every failure reaches the listeners
            logger.error(f"Reclaim status polling failed for {self.session_id}: {type(e).__name__}")
            self._dispatch(error=e)

    def _dispatch(self, success: Any = None, error: Optional[Exception] = None) -> None:
        listeners, self._listeners = self._listeners, []
        for on_success, on_error in listeners:
            try:
                if error is not None:
                    on_error(error)
                else:
                    on_success(success)
            except Exception as e:
                logger.error(f"Reclaim listener for {self.session_id} raised: {type(e).__name__}")
