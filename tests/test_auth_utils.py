"""Tests for password hashing, JWT issuance/validation and secret handling."""
import time

import jwt
import pytest

from metabolic_health import config
from metabolic_health.config import ConfigurationError, get_secret_key, settings
from metabolic_health.core.auth_utils import create_jwt, decode_jwt, hash_password, verify_password
from metabolic_health.core.errors import Unauthenticated


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret12")
        assert hashed != "secret12"
        assert "secret12" not in hashed

    def test_same_password_gets_different_salts(self):
        assert hash_password("secret12") != hash_password("secret12")

    def test_verify(self):
        hashed = hash_password("secret12")
        assert verify_password("secret12", hashed)
        assert not verify_password("secret13", hashed)

    def test_verify_rejects_empty_or_garbage_hash(self):
        assert not verify_password("secret12", "")
        assert not verify_password("secret12", "not-a-hash")


class TestJwt:
    def test_round_trip_claims(self):
        token = create_jwt("user-1", "ann@example.com")
        payload = decode_jwt(token)
        assert payload["sub"] == "user-1"
        assert payload["email"] == "ann@example.com"
        assert payload["exp"] - payload["iat"] == 7 * 24 * 3600

    def test_expired_token_rejected(self):
        issued = int(time.time()) - settings.auth_token_ttl_seconds - 60
        token = create_jwt("user-1", "ann@example.com", issued_at=issued)
        with pytest.raises(Unauthenticated):
            decode_jwt(token)

    def test_token_signed_with_other_key_rejected(self):
        now = int(time.time())
        forged = jwt.encode(
            {"sub": "user-1", "email": "ann@example.com", "iat": now, "exp": now + 60},
            "some-other-secret",
            algorithm="HS256",
        )
        with pytest.raises(Unauthenticated):
            decode_jwt(forged)

    def test_tampered_payload_rejected(self):
        header, payload, sig = create_jwt("user-1", "ann@example.com").split(".")
        other_payload = create_jwt("user-2", "bob@example.com").split(".")[1]
        with pytest.raises(Unauthenticated):
            decode_jwt(".".join([header, other_payload, sig]))

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
    def test_malformed_token_rejected(self, token):
        with pytest.raises(Unauthenticated):
            decode_jwt(token)

    def test_token_without_subject_rejected(self):
        now = int(time.time())
        token = jwt.encode({"email": "x@example.com", "iat": now, "exp": now + 60}, get_secret_key(), algorithm="HS256")
        with pytest.raises(Unauthenticated):
            decode_jwt(token)


class TestSecretKey:
    def test_production_requires_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "auth_secret_key", None)
        monkeypatch.setattr(settings, "environment", "production")
        with pytest.raises(ConfigurationError):
            get_secret_key()

    def test_development_generates_random_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "auth_secret_key", None)
        monkeypatch.setattr(settings, "environment", "development")
        monkeypatch.setattr(config, "_ephemeral_secret", None)
        first = get_secret_key()
        assert len(first) >= 32
        assert get_secret_key() == first

    def test_configured_secret_is_used(self, monkeypatch):
        monkeypatch.setattr(settings, "auth_secret_key", "configured")
        assert get_secret_key() == "configured"
