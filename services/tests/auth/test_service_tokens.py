"""Tests for service token issuers."""

import base64
import time

import jwt
import pytest

from rollcall.auth import create_token_issuer
from rollcall.auth.tokens import (
    NoopTokenIssuer,
    ServerTokenIssuer,
    ServiceTokenIssuer,
    StaticTokenIssuer,
    decode_secret,
)
from rollcall.config import ServiceAuthConfig, ServiceAuthMode

SECRET = base64.b64encode(b"a-shared-secret-of-reasonable-length").decode()


class TestNoopTokenIssuer:
    async def test_returns_empty_token(self):
        token = await NoopTokenIssuer().get_token()
        assert token.token == ""
        assert token.expires_at is None


class TestStaticTokenIssuer:
    async def test_returns_configured_token(self):
        token = await StaticTokenIssuer("static-abc").get_token()
        assert token.token == "static-abc"

    def test_requires_token(self):
        with pytest.raises(ValueError, match="requires a token"):
            StaticTokenIssuer("")


class TestDecodeSecret:
    def test_decodes_base64(self):
        assert decode_secret(SECRET) == b"a-shared-secret-of-reasonable-length"

    def test_rejects_invalid_base64(self):
        with pytest.raises(ValueError, match="not valid base64"):
            decode_secret("not base64!")

    def test_rejects_empty(self):
        with pytest.raises(ValueError, match="empty"):
            decode_secret("")


class TestServerTokenIssuer:
    async def test_token_claims(self):
        issuer = ServerTokenIssuer(SECRET, subject="rollcall-test", ttl_seconds=600)

        token = await issuer.get_token()

        claims = issuer.authenticate(token.token)
        assert claims["sub"] == "rollcall-test"
        assert claims["exp"] - claims["iat"] == 600
        assert int(token.expires_at.timestamp()) == claims["exp"]

    async def test_fresh_token_each_call(self, monkeypatch):
        issuer = ServerTokenIssuer(SECRET)
        first = await issuer.get_token()
        monkeypatch.setattr(time, "time", lambda: 2_000_000_000)
        second = await issuer.get_token()
        assert first.token != second.token

    async def test_rejects_token_signed_with_other_secret(self):
        other_secret = base64.b64encode(b"some-other-secret-that-is-long-enough").decode()
        token = await ServerTokenIssuer(other_secret).get_token()

        with pytest.raises(jwt.InvalidSignatureError):
            ServerTokenIssuer(SECRET).authenticate(token.token)

    def test_rejects_expired_token(self):
        expired = jwt.encode(
            {"sub": "backstage-server", "iat": 1, "exp": 2},
            decode_secret(SECRET),
            algorithm="HS256",
        )
        with pytest.raises(jwt.ExpiredSignatureError):
            ServerTokenIssuer(SECRET).authenticate(expired)

    def test_rejects_token_without_subject(self):
        token = jwt.encode(
            {"exp": int(time.time()) + 60}, decode_secret(SECRET), algorithm="HS256"
        )
        with pytest.raises(jwt.MissingRequiredClaimError):
            ServerTokenIssuer(SECRET).authenticate(token)

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError, match="ttl_seconds"):
            ServerTokenIssuer(SECRET, ttl_seconds=0)


class TestCreateTokenIssuer:
    def test_none_mode(self):
        issuer = create_token_issuer(ServiceAuthConfig(mode=ServiceAuthMode.NONE))
        assert isinstance(issuer, NoopTokenIssuer)
        assert isinstance(issuer, ServiceTokenIssuer)

    def test_static_mode(self):
        issuer = create_token_issuer(
            ServiceAuthConfig(mode=ServiceAuthMode.STATIC, static_token="abc")
        )
        assert isinstance(issuer, StaticTokenIssuer)

    def test_jwt_mode(self):
        issuer = create_token_issuer(
            ServiceAuthConfig(mode="jwt", secret=SECRET, subject="svc", token_ttl_seconds=60)
        )
        assert isinstance(issuer, ServerTokenIssuer)
        assert issuer.subject == "svc"
        assert issuer.ttl_seconds == 60

    def test_jwt_mode_requires_secret(self):
        with pytest.raises(ValueError, match="secret is required"):
            create_token_issuer(ServiceAuthConfig(mode=ServiceAuthMode.JWT))
