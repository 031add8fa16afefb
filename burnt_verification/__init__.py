"""
Burnt Verification SDK

Requests attestations of user attributes from pluggable verification
providers and normalizes their proofs into BurntAttributeCertificate.
"""

from .exceptions import (
    ConfigurationError,
    DuplicateSessionError,
    NormalizationError,
    ProviderInitializationError,
    ProviderVerificationError,
    SessionNotFoundError,
    VerificationError,
)
from .models import (
    BurntAttributeCertificate,
    BurntVerifierConfig,
    SessionInfo,
    VerificationRequestOptions,
)
from .registry import SessionRegistry
from .verifier import BurntVerifier

__all__ = [
    # Facade
    "BurntVerifier",
    # Models
    "BurntAttributeCertificate",
    "BurntVerifierConfig",
    "SessionInfo",
    "VerificationRequestOptions",
    # Sessions
    "SessionRegistry",
    # Errors
    "VerificationError",
    "ConfigurationError",
    "ProviderInitializationError",
    "SessionNotFoundError",
    "DuplicateSessionError",
    "ProviderVerificationError",
    "NormalizationError",
]
