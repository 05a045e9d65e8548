"""Masks GitLab credentials in text before it reaches logs or error messages."""

import re

# (prefix)(secret) pairs; only the secret group is replaced.
_SECRET_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"(Bearer\s+)([\w\-.~+/=]+)",
        r"(Private-Token:\s*)([\w\-.~+/=]+)",
        r"(private_token=)([\w\-.~+/=]+)",
        r"(gl(?:pat|oas|dt|rt|cbt|ptt)-)([\w\-]+)",
    )
)
REDACTED = "[REDACTED]"


def redact_text(text: str) -> str:
    if not text:
        return text
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(rf"\1{REDACTED}", text)
    return text
