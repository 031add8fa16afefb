"""
Provider Adapters

This package provides:
- BaseVerificationProvider: Abstract base for provider adapters
- ReclaimVerificationProvider: Reclaim Protocol adapter
- MockVerificationProvider: Fixed-certificate provider for demos and tests
- ReclaimProofRequest: Default Reclaim proof-request client
"""

from .base import BaseVerificationProvider, PendingSession
from .mock import MockVerificationProvider
from .reclaim import ReclaimVerificationProvider
from .reclaim_client import ProofRequest, ReclaimClientError, ReclaimProofRequest

__all__ = [
    # Base
    "BaseVerificationProvider",
    "PendingSession",
    # Providers
    "MockVerificationProvider",
    "ReclaimVerificationProvider",
    # Reclaim client
    "ProofRequest",
    "ReclaimClientError",
    "ReclaimProofRequest",
]
