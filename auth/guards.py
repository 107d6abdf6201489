"""
Ownership checks for mutating owned resources.
"""

from __future__ import annotations

import logging
from typing import Any

from api.errors import AuthorizationError

logger = logging.getLogger(__name__)


def authorize(resource_owner_id: Any, acting_id: str) -> bool:
    """Return True when ``acting_id`` owns the resource."""
    if resource_owner_id is None or not acting_id:
        return False
    return str(resource_owner_id) == str(acting_id)


def require_owner(resource_owner_id: Any, acting_id: str, message: str = "Not Authorized") -> None:
    """Raise ``AuthorizationError`` unless ``acting_id`` owns the resource."""
    if not authorize(resource_owner_id, acting_id):
        logger.warning("User %s denied on resource owned by %s", acting_id, resource_owner_id)
        raise AuthorizationError(message)
