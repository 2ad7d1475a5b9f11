"""Helpers that keep secrets out of logs and error output."""

from __future__ import annotations

SENSITIVE_KEYS = {
    "token",
    "key",
    "password",
    "secret",
    "authorization",
    "access_token",
    "body",
}


def mask_token(token: str, prefix_len: int = 8, suffix_len: int = 4) -> str:
    """Mask a token for safe logging/display.

    Args:
        token: Token to mask.
        prefix_len: Number of prefix characters to show.
        suffix_len: Number of suffix characters to show.

    Returns:
        Masked token string (e.g., "sk-ant-o...yyyy").
    """
    if not token:
        return "<empty>"

    if len(token) <= prefix_len + suffix_len:
        return "*" * len(token)

    return f"{token[:prefix_len]}...{token[-suffix_len:]}"


def sanitize_details(details: dict) -> dict:
    """Mask values whose key looks sensitive.

    Args:
        details: Raw details dictionary.

    Returns:
        Copy of details with sensitive string values masked and nested
        dictionaries sanitized recursively.
    """
    sanitized = {}
    for key, value in details.items():
        lower_key = key.lower()
        if any(s in lower_key for s in SENSITIVE_KEYS):
            if isinstance(value, str):
                sanitized[key] = mask_token(value, prefix_len=4, suffix_len=4)
            else:
                sanitized[key] = "<redacted>"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_details(value)
        else:
            sanitized[key] = value
    return sanitized


__all__ = ["SENSITIVE_KEYS", "mask_token", "sanitize_details"]
