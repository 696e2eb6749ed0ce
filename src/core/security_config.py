"""Security configuration constants for the Email Composer API.

Keys listed here are redacted from structured logs, and the error field
sets decide what an error envelope may reveal in each environment.
"""

SENSITIVE_KEYS: set[str] = {
    # Credentials
    "password",
    "secret",
    "token",
    "access_token",
    "authorization",
    "api_key",
    "gemini_api_key",
    "key",
    "bearer",
    "cookie",
    "set-cookie",
    "x-api-key",
    # Recipient addresses and free-text content
    "email",
    "to",
    "cc",
    "bcc",
    "recipient_info",
    "recipientinfo",
    "prompt",
    "body",
}

PRODUCTION_ERROR_FIELDS: set[str] = {
    "correlation_id",
    "type",
}

DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "details",
    "traceback",
    "exception_type",
    "validation_errors",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Return the error envelope fields allowed for `environment`."""
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS
    return DEVELOPMENT_ERROR_FIELDS


def is_sensitive_key(key: str) -> bool:
    """Case-insensitive membership check against SENSITIVE_KEYS."""
    normalized = key.lower().strip()
    return normalized in SENSITIVE_KEYS or normalized.replace("-", "_") in SENSITIVE_KEYS
