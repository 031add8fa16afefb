"""
Configuration settings for the verification SDK
"""

import os
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Verification settings"""

    # Application credentials
    BURNT_APP_ID: str = os.getenv("BURNT_APP_ID", "")
    BURNT_APP_SECRET: str = os.getenv("BURNT_APP_SECRET", "")

    # Provider selection ('reclaim', 'mock'; 'primus' is not implemented yet)
    BURNT_DEFAULT_PROVIDER: Optional[str] = os.getenv("BURNT_DEFAULT_PROVIDER")
    BURNT_MODE: Optional[str] = os.getenv("BURNT_MODE")

    # Reclaim proof request
    RECLAIM_API_BASE_URL: str = os.getenv(
        "RECLAIM_API_BASE_URL", "https://api.reclaimprotocol.org"
    )
    RECLAIM_SHARE_PAGE_URL: str = os.getenv(
        "RECLAIM_SHARE_PAGE_URL", "https://portal.reclaimprotocol.org/kernel"
    )
    RECLAIM_USE_APP_CLIP: bool = os.getenv("RECLAIM_USE_APP_CLIP", "False").lower() == "true"
    RECLAIM_SDK_LOG: bool = os.getenv("RECLAIM_SDK_LOG", "True").lower() == "true"
    RECLAIM_STATUS_POLL_INTERVAL_SECONDS: float = float(
        os.getenv("RECLAIM_STATUS_POLL_INTERVAL_SECONDS", "3")
    )
    # Per-HTTP-request timeout; the overall wait for the user is unbounded
    RECLAIM_REQUEST_TIMEOUT_SECONDS: float = float(
        os.getenv("RECLAIM_REQUEST_TIMEOUT_SECONDS", "30")
    )

    # Mock provider
    MOCK_VERIFICATION_URL: str = os.getenv(
        "MOCK_VERIFICATION_URL", "http://localhost:8080/mock-verification-page"
    )
    MOCK_VERIFICATION_DELAY_SECONDS: float = float(
        os.getenv("MOCK_VERIFICATION_DELAY_SECONDS", "2")
    )

    # Logging
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @field_validator("RECLAIM_USE_APP_CLIP", "RECLAIM_SDK_LOG", mode="before")
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes")
        return bool(v)

    @field_validator("BURNT_DEFAULT_PROVIDER", "BURNT_MODE", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        # Ignore unknown environment variables from a shared .env
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
