"""
Logging configuration with automatic sensitive data redaction.

Proof payloads, claims and caller metadata routinely carry PII (names,
work emails) and the app secret travels through the provider setup, so
every structured log event passes through SensitiveDataRedactor before
it is rendered.
"""

import logging
import re
import sys
from typing import Any, Dict, List, Set
import structlog
from structlog.stdlib import LoggerFactory

from burnt_verification.core.config import settings


class SensitiveDataRedactor:
    """
    Redacts sensitive data from log entries.

    Handles:
    - Exact key matches (secret, signature, etc.)
    - Pattern-based key matches (contains 'secret', 'token', etc.)
    - Nested dictionaries and lists
    - Partial redaction (email domain preserved, last 4 chars of ids)
    """

    # Keys that should be fully redacted (exact match, case-insensitive)
    FULLY_REDACTED_KEYS: Set[str] = {
        "app_secret",
        "appsecret",
        "secret",
        "private_key",
        "privatekey",
        "signature",
        "signatures",
        "access_token",
        "authorization",
        "cookie",
        "password",
        "ssn",
    }

    # Key patterns that should be fully redacted (substring match)
    REDACTED_KEY_PATTERNS: List[str] = [
        "password",
        "secret",
        "token",
        "credential",
        "private_key",
    ]

    # Key patterns that should be partially redacted (show domain or last N chars)
    PARTIALLY_REDACTED_PATTERNS: List[str] = [
        "email",
        "phone",
        "fullname",
        "full_name",
        "app_id",
        "appid",
    ]

    # Regex patterns for detecting sensitive data in values
    VALUE_PATTERNS = {
        "email": re.compile(r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})"),
        "jwt": re.compile(r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"),
        "bearer": re.compile(r"Bearer\s+[a-zA-Z0-9._-]+", re.IGNORECASE),
    }

    REDACTED_PLACEHOLDER = "[REDACTED]"

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._fully_redacted_lower = {k.lower() for k in self.FULLY_REDACTED_KEYS}

    def redact(self, data: Any, key: str = None) -> Any:
        """
        Recursively redact sensitive data.

        Args:
            data: The data to redact (can be dict, list, or primitive)
            key: The key name if this data is a value in a dict

        Returns:
            Redacted version of the data
        """
        if not self.enabled:
            return data

        if data is None:
            return None

        if key:
            key_lower = key.lower()

            if key_lower in self._fully_redacted_lower:
                return self.REDACTED_PLACEHOLDER

            for pattern in self.REDACTED_KEY_PATTERNS:
                if pattern in key_lower:
                    return self.REDACTED_PLACEHOLDER

            if not isinstance(data, (dict, list, tuple)):
                for pattern in self.PARTIALLY_REDACTED_PATTERNS:
                    if pattern in key_lower:
                        return self._partial_redact(data, pattern)

        if isinstance(data, dict):
            return {k: self.redact(v, k) for k, v in data.items()}

        if isinstance(data, (list, tuple)):
            return [self.redact(item) for item in data]

        # Proof payloads embed JSON-encoded strings, so values are scanned too
        if isinstance(data, str):
            return self._redact_string_value(data)

        return data

    def _partial_redact(self, value: Any, key_type: str) -> str:
        """Partially redact a value, preserving some information for debugging."""
        value_str = str(value)

        if not value_str:
            return value_str

        # Email: show domain only
        if key_type == "email":
            if "@" in value_str:
                return f"***@{value_str.split('@')[-1]}"
            return "***"

        # Names: show first 2 chars
        if "name" in key_type:
            if len(value_str) > 2:
                return f"{value_str[:2]}***"
            return "***"

        # Phone: show last 4 digits
        if key_type == "phone":
            digits = re.sub(r"\D", "", value_str)
            if len(digits) > 4:
                return f"***{digits[-4:]}"
            return "****"

        # Default: show last 4 chars
        if len(value_str) > 4:
            return f"****{value_str[-4:]}"
        return "****"

    def _redact_string_value(self, value: str) -> str:
        """Check string values for sensitive patterns and redact them."""
        if not value or len(value) < 6:
            return value

        result = self.VALUE_PATTERNS["jwt"].sub("[JWT_REDACTED]", value)
        result = self.VALUE_PATTERNS["bearer"].sub("Bearer [REDACTED]", result)
        result = self.VALUE_PATTERNS["email"].sub(r"***@\2", result)
        return result


def sensitive_data_redactor_processor(
    logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Structlog processor that redacts sensitive data from log events.

    Runs before the final renderer (JSON/Console) so sensitive data never
    reaches log output.
    """
    return _redactor.redact(event_dict)


def setup_logging(force: bool = False) -> None:
    """
    Setup structured logging with automatic sensitive data redaction.

    The verifier calls this on construction. A host that already configured
    structlog keeps its own pipeline unless ``force`` is set, and is then
    responsible for adding ``sensitive_data_redactor_processor`` to it.
    """
    if structlog.is_configured() and not force:
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            sensitive_data_redactor_processor,
            structlog.processors.JSONRenderer()
            if settings.LOG_FORMAT == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    # Reduce noise from the HTTP client
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger"""
    return structlog.get_logger(name)


def log_session_event(
    session_id: str,
    event_type: str,
    provider: str = None,
    details: Dict[str, Any] = None,
    **kwargs: Any,
) -> None:
    """Log a verification session lifecycle event"""
    logger = get_logger("verification.session")

    # Error strings can quote provider messages verbatim
    log_data = redact_sensitive_data(
        {
            "session_id": session_id,
            "event_type": event_type,
            "provider": provider,
            "details": details or {},
            **kwargs,
        }
    )

    if event_type.endswith("failed"):
        logger.warning("Session event", **log_data)
    else:
        logger.info("Session event", **log_data)


# Global redactor instance for manual use
_redactor = SensitiveDataRedactor()


def redact_sensitive_data(data: Any) -> Any:
    """
    Manually redact sensitive data from any data structure.

    Use this when data is logged through the stdlib logger or handed to
    a diagnostic sink outside the structlog pipeline.

    Example:
        >>> redact_sensitive_data({"workEmail": "jane@co.com", "appSecret": "s3cr3t"})
        {'workEmail': '***@co.com', 'appSecret': '[REDACTED]'}
    """
    return _redactor.redact(data)
