"""Unit tests for password hashing and JWT helpers."""

import jwt
import pytest

from cinestream.core.exceptions import UnauthorizedError
from cinestream.core.security import (
    TokenData,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret"


class TestPasswordHashing:
    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert hashed.startswith("$2")
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_cost_factor_is_encoded(self):
        assert "$12$" in hash_password("pw", rounds=12)
        assert "$10$" in hash_password("pw")

    @pytest.mark.parametrize("stored", ["", "not-a-hash", "$2b$10$short"])
    def test_verify_rejects_bad_hashes(self, stored):
        assert verify_password("anything", stored) is False


class TestTokens:
    def test_round_trip(self):
        token = create_access_token("abc123", "ana@example.com", secret=SECRET)
        data = decode_token(token, secret=SECRET)
        assert isinstance(data, TokenData)
        assert data.user_id == "abc123"
        assert data.email == "ana@example.com"
        assert data.exp - data.iat == 3600

    def test_claims_use_user_id_key(self):
        token = create_access_token("abc123", "ana@example.com", secret=SECRET)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["userId"] == "abc123"
        assert set(payload) == {"userId", "email", "iat", "exp"}

    def test_expired_token(self):
        token = create_access_token("abc123", "ana@example.com", secret=SECRET, expires_in=-10)
        with pytest.raises(UnauthorizedError) as exc_info:
            decode_token(token, secret=SECRET)
        assert exc_info.value.detail == "Token has expired"
        assert exc_info.value.status_code == 401

    def test_wrong_secret(self):
        token = create_access_token("abc123", "ana@example.com", secret=SECRET)
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_token(token, secret="other-secret")

    def test_garbage_token(self):
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_token("not.a.jwt", secret=SECRET)

    def test_missing_claims(self):
        token = jwt.encode({"sub": "x", "iat": 1, "exp": 4102444800}, SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedError, match="Invalid token"):
            decode_token(token, secret=SECRET)
