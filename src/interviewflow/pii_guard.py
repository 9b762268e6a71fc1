from __future__ import annotations

import re
from typing import Any, Iterable

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_RE = re.compile(r"(?:\+?\d{1,3}[ .-]?)?(?:\(\d{3}\)[ .-]?)?(?:\d[ .-]?){6,12}\d\b")


DEFAULT_PII_KEYS = {"name", "full_name", "phone", "phone_number", "email", "address"}


def redact_text(text: str) -> str:
    text = _EMAIL_RE.sub("[REDACTED_EMAIL]", text)
    text = _PHONE_RE.sub("[REDACTED_PHONE]", text)
    return text


def _redact_value(value: Any, pii_keys: set[str]) -> Any:
    if isinstance(value, str):
        return redact_text(value)
    if isinstance(value, dict):
        return redact_payload(value, pii_keys)
    if isinstance(value, (list, tuple)):
        return [_redact_value(v, pii_keys) for v in value]
    return value


def redact_payload(payload: dict, pii_keys: Iterable[str] = DEFAULT_PII_KEYS) -> dict:
    redacted = {}
    pii_keys = set(pii_keys)
    for key, value in payload.items():
        if key in pii_keys:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = _redact_value(value, pii_keys)
    return redacted
