"""Unit tests for password hashing and access tokens."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import JWTError, jwt

from app.core.config import settings
from app.core import security
from app.core.security import create_access_token, decode_access_token, hash_password, verify_password


class TestPasswords:
    def test_hash_verifies(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    @pytest.mark.parametrize(
        "hashed",
        [
            pytest.param(None, id="no_user"),
            pytest.param("", id="empty"),
            pytest.param("not-a-bcrypt-hash", id="malformed"),
        ],
    )
    def test_missing_or_bad_hash_is_false(self, hashed):
        assert verify_password("secret123", hashed) is False

    @pytest.mark.parametrize("hashed", [None, "not-a-bcrypt-hash"], ids=["no_user", "malformed"])
    def test_missing_hash_still_runs_one_bcrypt_round(self, monkeypatch, hashed):
        real_verify = security.pwd_context.verify
        calls = []

        def recording_verify(secret, hash_, **kwargs):
            calls.append(hash_)
            return real_verify(secret, hash_, **kwargs)

        monkeypatch.setattr(security.pwd_context, "verify", recording_verify)

        assert verify_password("secret123", hashed) is False
        assert calls == [security._DUMMY_HASH]


class TestAccessToken:
    def test_claims(self):
        payload = decode_access_token(create_access_token(7, "ayse@studytracker.io", "Ayşe"))

        assert payload["sub"] == "7"
        assert payload["type"] == "access"
        assert payload["role"] == "student"
        assert payload["email"] == "ayse@studytracker.io"

    def test_expired_token_rejected(self):
        past = datetime.now(timezone.utc) - timedelta(minutes=5)
        token = jwt.encode(
            {"sub": "7", "type": "access", "exp": past},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_wrong_key_rejected(self):
        token = jwt.encode({"sub": "7", "type": "access"}, "another-key", algorithm=settings.ALGORITHM)

        with pytest.raises(JWTError):
            decode_access_token(token)
