"""Format helpers for subject contact attributes."""

from __future__ import annotations

from urllib.parse import urlparse
import re

EMAIL_PATTERN = re.compile(r"[a-z0-9._%+-]{1,64}@[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}", re.IGNORECASE)
_PHONE_NOISE = re.compile(r"[\s\-()+]")
PHONE_DIGITS_PATTERN = re.compile(r"\d{10,15}")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch((value or "").strip()))


def clean_phone(value: str) -> str:
    """Strip separators, parentheses and the leading plus from a phone number."""

    return _PHONE_NOISE.sub("", value or "")


def has_plausible_phone_digits(value: str) -> bool:
    return bool(PHONE_DIGITS_PATTERN.fullmatch(clean_phone(value)))


def is_valid_website(url: str) -> bool:
    try:
        parsed = urlparse((url or "").strip())
        host = parsed.hostname or ""
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(host) and " " not in host


def website_host(url: str) -> str:
    try:
        return (urlparse((url or "").strip()).hostname or "").lower()
    except ValueError:
        return ""
