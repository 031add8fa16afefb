"""
Mock Verification Provider

Stand-in provider for demos and tests. Never talks to the network.
"""

import asyncio
import secrets
import time
from typing import Optional

from burnt_verification.core.config import settings
from burnt_verification.core.logging import get_logger
from burnt_verification.models import BurntAttributeCertificate, SessionInfo
from burnt_verification.providers.base import BaseVerificationProvider, PendingSession, RequestOptions
from burnt_verification.registry import SessionRegistry

logger = get_logger(__name__)

MOCK_VERIFICATION_TYPE_ID = "mock-provider"

MOCK_CLAIMS = {
    "companyName": "Mock Company Inc.",
    "email": "test@mockcompany.com",
    "employmentStatus": "Active",
}


class MockVerificationProvider(BaseVerificationProvider):
    """
    Returns a fixed certificate after a simulated delay.

    Sessions still go through a SessionRegistry so the mock follows the
    same single-consumption rules as a real provider.
    """

    name = "mock"

    def __init__(
        self,
        delay_seconds: Optional[float] = None,
        url: Optional[str] = None,
        registry: Optional[SessionRegistry] = None,
    ):
        self.delay_seconds = (
            settings.MOCK_VERIFICATION_DELAY_SECONDS if delay_seconds is None else delay_seconds
        )
        self.url = url or settings.MOCK_VERIFICATION_URL
        self._registry = registry if registry is not None else SessionRegistry()

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    async def initialize_session(self, options: RequestOptions) -> SessionInfo:
        options = self._coerce_options(options)
        logger.info(
            "Mock provider initializing session",
            verification_type_id=options.verification_type_id,
        )

        session_id = f"mock_session_{int(time.time() * 1000)}_{secrets.token_hex(4)}"
        self._registry.register(session_id, PendingSession(request=None, options=options))
        return SessionInfo(url=self.url, session_id=session_id)

    async def wait_for_verification(self, session_id: str) -> BurntAttributeCertificate:
        pending: PendingSession = self._registry.get(session_id)
        logger.info("Mock provider waiting for verification", session_id=session_id)

        # Simulate the user completing the flow
        await asyncio.sleep(self.delay_seconds)

        self._registry.consume(session_id)
        certificate = BurntAttributeCertificate(
            verification_type_id=MOCK_VERIFICATION_TYPE_ID,
            session_id=session_id,
            claims=dict(MOCK_CLAIMS),
            timestamp_s=int(time.time()),
            created_at=int(time.time() * 1000),
            context={"mock": True},
        )
        await self._notify_success(pending.options, certificate)
        return certificate
