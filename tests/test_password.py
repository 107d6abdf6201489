"""
Tests for bcrypt password hashing.
"""

from unittest.mock import patch

import bcrypt
import pytest

from auth.password import check_credentials, hash_password, verify_password


class TestPasswordHashing:
    def test_hash_then_verify(self):
        hashed = hash_password("secret1", rounds=4)
        assert hashed != "secret1"
        assert hashed.startswith("$2")
        assert verify_password("secret1", hashed)

    def test_wrong_password_rejected(self):
        hashed = hash_password("secret1", rounds=4)
        assert not verify_password("secret2", hashed)

    def test_salt_is_random(self):
        assert hash_password("secret1", rounds=4) != hash_password("secret1", rounds=4)

    def test_default_cost_factor_is_ten(self):
        assert hash_password("secret1").split("$")[2] == "10"

    @pytest.mark.parametrize("stored", ["", "not-a-hash", "$2b$10$short"])
    def test_malformed_hash_returns_false(self, stored):
        assert verify_password("secret1", stored) is False

    def test_none_hash_returns_false(self):
        assert verify_password("secret1", None) is False

    def test_long_password_hashes(self):
        long_pw = "x" * 200
        hashed = hash_password(long_pw, rounds=4)
        assert verify_password(long_pw, hashed)


class TestCheckCredentials:
    def test_known_user(self):
        hashed = hash_password("secret1", rounds=4)
        assert check_credentials("secret1", hashed)
        assert not check_credentials("secret2", hashed)

    def test_unknown_user_still_runs_bcrypt(self):
        with patch.object(bcrypt, "checkpw", wraps=bcrypt.checkpw) as checkpw:
            assert check_credentials("secret1", None) is False
        checkpw.assert_called_once()
