"""
Pytest configuration and shared fixtures for all tests.

The proof-request side of Reclaim is replaced by FakeProofRequest, which
records every call the adapter makes and lets a test fire the success or
error callback by hand.
"""
import asyncio
import json
import pytest
from typing import Any, Dict, List, Optional

from burnt_verification.providers import MockVerificationProvider, ReclaimVerificationProvider
from burnt_verification.registry import SessionRegistry


class FakeProofRequest:
    """Records adapter calls and exposes the registered callbacks."""

    def __init__(self, session_id: Optional[str], url: str = "https://share.example/req"):
        self.session_id = session_id
        self.url = url
        self.context: Optional[tuple] = None
        self.callback_url: Optional[str] = None
        self.listeners: List[tuple] = []
        self.started = asyncio.Event()

    def get_session_id(self) -> Optional[str]:
        return self.session_id

    def add_context(self, address: str, message: str) -> None:
        self.context = (address, message)

    def set_app_callback_url(self, url: str) -> None:
        self.callback_url = url

    async def get_request_url(self) -> str:
        return self.url

    async def start_session(self, *, on_success, on_error) -> None:
        self.listeners.append((on_success, on_error))
        self.started.set()

    async def wait_started(self) -> None:
        await asyncio.wait_for(self.started.wait(), timeout=1)
        await asyncio.sleep(0)

    def succeed(self, response: Any) -> None:
        for on_success, _ in self.listeners:
            on_success(response)

    def fail(self, error: Exception) -> None:
        for _, on_error in self.listeners:
            on_error(error)


class FakeProofRequestFactory:
    """Stands in for ReclaimProofRequest.init."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.requests: List[FakeProofRequest] = []
        self.error: Optional[Exception] = None
        self.url = "https://share.example/req"

    async def __call__(self, app_id, app_secret, provider_id, options):
        self.calls.append(
            {
                "app_id": app_id,
                "app_secret": app_secret,
                "provider_id": provider_id,
                "options": options,
            }
        )
        if self.error is not None:
            raise self.error
        request = FakeProofRequest(f"session-{len(self.requests) + 1}", url=self.url)
        self.requests.append(request)
        return request

    @property
    def last(self) -> FakeProofRequest:
        return self.requests[-1]


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def proof_factory():
    return FakeProofRequestFactory()


@pytest.fixture
def reclaim_provider(proof_factory, registry):
    return ReclaimVerificationProvider(
        app_id="app-123",
        app_secret="secret-456",
        proof_request_factory=proof_factory,
        registry=registry,
    )


@pytest.fixture
def mock_provider():
    return MockVerificationProvider(delay_seconds=0)


@pytest.fixture
def reclaim_proof():
    """A Reclaim v4 style proof with stringified parameters and context."""
    return {
        "identifier": "0xabc",
        "timestampS": 1717000000,
        "claimData": {
            "provider": "http",
            "parameters": json.dumps(
                {
                    "url": "https://example.com/profile",
                    "paramValues": {"companyName": "Acme Corp"},
                }
            ),
            "context": json.dumps(
                {
                    "extractedParameters": {"employmentStatus": "Active"},
                    "contextAddress": "0x0",
                    "contextMessage": json.dumps(
                        {"fullName": "Jane Doe", "workEmail": "jane@co.com"}
                    ),
                    "providerHash": "0xdef",
                }
            ),
        },
    }
