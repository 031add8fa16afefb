"""
Verification Data Models

Standardized certificate and request shapes shared by every provider.
"""

from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class VerificationRequestOptions(BaseModel):
    """
    Configuration for initializing a verification request.

    ``verification_type_id`` selects the attribute/template being verified
    (previously known as "provider id" on the Reclaim side).
    """

    model_config = ConfigDict(populate_by_name=True)

    verification_type_id: str = Field(
        ..., alias="verificationTypeId", description="Type of verification to perform"
    )
    callback_url: Optional[str] = Field(
        None, alias="callbackUrl", description="Callback URL for redirects or webhooks"
    )
    metadata: Optional[Dict[str, Any]] = Field(
        None, description="Custom metadata attached to the session as context"
    )

    # Optional hooks run when the session reaches its terminal outcome
    on_success: Optional[Callable[..., Any]] = Field(
        None, alias="onSuccess", exclude=True
    )
    on_error: Optional[Callable[..., Any]] = Field(
        None, alias="onError", exclude=True
    )


class BurntAttributeCertificate(BaseModel):
    """
    A standardized certificate proving a user's attribute.

    This is the Burnt format for what may be a zk-proof or a signed claim
    on the provider side.
    """

    model_config = ConfigDict(populate_by_name=True)

    verification_type_id: str = Field(..., alias="verificationTypeId")
    claims: Dict[str, Any] = Field(default_factory=dict)
    timestamp_s: int = Field(..., alias="timestampS")  # when the provider asserted the claim
    session_id: str = Field(..., alias="sessionId")
    created_at: int = Field(..., alias="createdAt")  # epoch milliseconds
    context: Optional[Any] = None  # raw provider payload(s), diagnostic only


class SessionInfo(BaseModel):
    """URL to present to the user plus the session id to verify later."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    session_id: str = Field(..., alias="sessionId")


class BurntVerifierConfig(BaseModel):
    """Facade configuration."""

    model_config = ConfigDict(populate_by_name=True)

    app_id: str = Field("", alias="appId", description="Application ID")
    app_secret: str = Field("", alias="appSecret", description="Application secret")
    default_provider: Optional[str] = Field(
        None, alias="defaultProvider", description="Provider tag, defaults to 'reclaim'"
    )
    mode: Optional[str] = Field(None, description="'reclaim' or 'mock'")
