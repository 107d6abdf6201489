"""
Gravatar URLs for new users.
"""

from __future__ import annotations

import hashlib
from urllib.parse import urlencode

_GRAVATAR_URL = "https://www.gravatar.com/avatar"


def gravatar_url(email: str, size: int = 200, rating: str = "pg", default: str = "mm") -> str:
    """Deterministic avatar URL derived from the (trimmed, lower-cased) email."""
    digest = hashlib.md5(email.strip().lower().encode()).hexdigest()
    query = urlencode({"s": size, "r": rating, "d": default})
    return f"{_GRAVATAR_URL}/{digest}?{query}"
