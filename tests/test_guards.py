"""
Tests for the ownership guard.
"""

import pytest
from bson import ObjectId

from api.errors import AuthorizationError
from auth.guards import authorize, require_owner


class TestOwnershipGuard:
    def test_owner_allowed(self):
        assert authorize("abc", "abc")

    def test_object_id_owner_matches_string(self):
        oid = ObjectId()
        assert authorize(oid, str(oid))

    def test_other_user_denied(self):
        assert not authorize("abc", "xyz")

    def test_missing_owner_denied(self):
        assert not authorize(None, "abc")

    def test_require_owner_raises_with_message(self):
        with pytest.raises(AuthorizationError) as exc:
            require_owner("abc", "xyz", "User not authorized")
        assert exc.value.status_code == 401
        assert exc.value.body() == {"msg": "User not authorized"}

    def test_require_owner_passes_for_owner(self):
        require_owner("abc", "abc")
