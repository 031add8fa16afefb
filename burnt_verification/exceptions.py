"""Custom exceptions for Burnt verification."""

from typing import Any, Dict, Optional


class VerificationError(Exception):
    """Base exception for verification errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(VerificationError):
    """Raised when the verifier is configured with an unsupported provider."""

    pass


class ProviderInitializationError(VerificationError):
    """Raised when the external system cannot produce a session or URL."""

    pass


class SessionNotFoundError(VerificationError):
    """Raised when a session id is unknown, expired or already consumed."""

    def __init__(self, session_id: str):
        super().__init__(
            f"Session {session_id} not found or expired.",
            {"session_id": session_id},
        )
        self.session_id = session_id


class DuplicateSessionError(VerificationError):
    """Raised when a session id is registered twice."""

    pass


class ProviderVerificationError(VerificationError):
    """Raised when the external system reports a failed verification."""

    pass


class NormalizationError(VerificationError):
    """Raised when a proof payload cannot be mapped to claims."""

    pass
