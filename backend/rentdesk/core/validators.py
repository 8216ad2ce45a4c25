# backend/rentdesk/core/validators.py
"""
Input validation and sanitization helpers shared by the request schemas
"""

import re
from typing import Any

import bleach

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\+]?[(]?[0-9]{3}[)]?[-\s\.]?[0-9]{3}[-\s\.]?[0-9]{4,6}$")

MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2


def is_valid_email(email: str) -> bool:
    return bool(email) and bool(EMAIL_RE.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(phone) and bool(PHONE_RE.match(phone))


def normalize_email(email: str) -> str:
    return email.strip().lower()


def sanitize_input(value: Any) -> Any:
    """Strip markup and surrounding whitespace from strings, recursively through lists and dicts"""
    if isinstance(value, str):
        return bleach.clean(value.replace("\x00", ""), tags=[], strip=True).strip()
    if isinstance(value, list):
        return [sanitize_input(item) for item in value]
    if isinstance(value, dict):
        return {key: sanitize_input(item) for key, item in value.items()}
    return value
