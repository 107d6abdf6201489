"""
Field checks shared by the request schemas.

Each helper either returns the (possibly normalized) value or raises a
``PydanticCustomError`` whose message is exactly what the client sees in
the ``errors`` list of a 400 response.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, List

from email_validator import EmailNotValidError, validate_email
from pydantic_core import PydanticCustomError


def _fail(message: str) -> PydanticCustomError:
    return PydanticCustomError("field_check", message)


def require_text(value: Any, message: str) -> str:
    """Reject missing, null and blank values."""
    if value is None or isinstance(value, (dict, list)):
        raise _fail(message)
    text = str(value)
    if not text.strip():
        raise _fail(message)
    return text


def require_present(value: Any, message: str) -> str:
    """Reject only a missing value; an empty string is still present."""
    if value is None:
        raise _fail(message)
    return str(value)


def require_email(value: Any, message: str) -> str:
    if not isinstance(value, str):
        raise _fail(message)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise _fail(message) from None
    return value


def require_min_length(value: Any, length: int, message: str) -> str:
    if not isinstance(value, str) or len(value) < length:
        raise _fail(message)
    return value


def split_skills(value: Any, message: str) -> List[str]:
    """Turn ``"python, go ,sql"`` (or a list) into ``["python", "go", "sql"]``."""
    if isinstance(value, list):
        skills = [str(skill).strip() for skill in value]
    else:
        skills = [skill.strip() for skill in require_text(value, message).split(",")]
    skills = [skill for skill in skills if skill]
    if not skills:
        raise _fail(message)
    return skills


INVALID_DATE = "Please enter a valid date"


def parse_date(value: Any, message: str) -> datetime:
    """Accept ISO dates (``2020-01-31``) and datetimes."""
    if isinstance(value, datetime):
        return value
    text = require_text(value, message).strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise _fail(INVALID_DATE) from None


def optional_date(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_date(value, INVALID_DATE)
