from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse


SEOKEY_MAX_LENGTH = 500
_FORBIDDEN_CHARS = re.compile(r"[<>'\"&]")


class InvalidInputError(ValueError):
    pass


def validate_seokey(raw: Optional[str]) -> str:
    if not raw:
        raise InvalidInputError("Seokey or URL is required")
    if len(raw) > SEOKEY_MAX_LENGTH:
        raise InvalidInputError("Seokey is too long")
    if not raw.strip():
        raise InvalidInputError("Seokey cannot be empty")
    if _FORBIDDEN_CHARS.search(raw):
        raise InvalidInputError("Seokey contains invalid characters")
    return raw


def extract_seokey(value: str) -> Optional[str]:
    """Returns the seokey of a gaana.com URL, or ``value`` itself when it is not a URL."""
    if not value:
        return None
    if not value.startswith("http"):
        return value
    try:
        path = urlparse(value).path
    except ValueError:
        return value
    parts = [part for part in path.split("/") if part]
    return parts[-1] if parts else None


def resolve_seokey(raw: Optional[str]) -> str:
    seokey = extract_seokey(validate_seokey(raw))
    if not seokey:
        raise InvalidInputError("Invalid URL or Seokey format")
    return seokey
