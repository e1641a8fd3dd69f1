"""Unit tests for JWTAuthProvider claim handling and the JWKS cache."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from jose import jwt as jose_jwt

from infrastructure.auth import jwt_provider as jwt_provider_module
from infrastructure.auth.jwt_provider import JWTAuthProvider, _get_jwks_keys


def _make_hs256_token(payload: dict, secret: str = "test-secret") -> str:
    return jose_jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def _clear_jwks_cache():
    """Reset the module-level JWKS cache around every test."""
    jwt_provider_module._jwks_cache = None
    yield
    jwt_provider_module._jwks_cache = None


@pytest.fixture
def hs256_provider() -> JWTAuthProvider:
    return JWTAuthProvider(secret_key="test-secret", algorithm="HS256", expire_minutes=30)


def _jwks_client(response: MagicMock | None = None, error: Exception | None = None) -> AsyncMock:
    client = AsyncMock()
    client.__aenter__.return_value = client
    if error is not None:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    return client


class TestValidateTokenClaims:
    async def test_returns_none_without_sub(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"email": "user@example.com", "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_returns_none_without_email(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token({"sub": str(uuid4()), "exp": 9999999999})

        assert await hs256_provider.validate_token(token) is None

    async def test_returns_none_for_non_uuid_sub(self, hs256_provider: JWTAuthProvider):
        token = _make_hs256_token(
            {"sub": "507f1f77bcf86cd799439011", "email": "user@example.com", "exp": 9999999999}
        )

        assert await hs256_provider.validate_token(token) is None

    async def test_ignores_extra_identity_claims(self, hs256_provider: JWTAuthProvider):
        user_id = uuid4()
        token = _make_hs256_token(
            {
                "sub": str(user_id),
                "email": "user@example.com",
                "exp": 9999999999,
                "user_metadata": {"name": "Jane", "avatar_url": "https://img/jane.png"},
            }
        )

        result = await hs256_provider.validate_token(token)

        assert result is not None
        assert result.id == user_id
        assert result.email == "user@example.com"


class TestGetJwksKeys:
    async def test_returns_empty_without_jwks_url(self):
        with patch.object(jwt_provider_module, "settings") as mock_settings:
            mock_settings.supabase_jwks_url = ""

            assert await _get_jwks_keys() == {}

    async def test_fetches_and_caches_keys(self):
        response = MagicMock()
        response.json.return_value = {
            "keys": [
                {"kid": "key-1", "kty": "EC"},
                {"kty": "EC"},
            ]
        }
        client = _jwks_client(response=response)

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = "https://id.example.com/jwks.json"

            first = await _get_jwks_keys()
            second = await _get_jwks_keys()

        assert first == {"key-1": {"kid": "key-1", "kty": "EC"}}
        assert second is first
        client.get.assert_called_once()

    async def test_returns_empty_on_http_error(self):
        client = _jwks_client(error=httpx.ConnectError("unreachable"))

        with (
            patch.object(jwt_provider_module, "settings") as mock_settings,
            patch.object(jwt_provider_module.httpx, "AsyncClient", return_value=client),
        ):
            mock_settings.supabase_jwks_url = "https://id.example.com/jwks.json"

            result = await _get_jwks_keys()

        assert result == {}
        assert jwt_provider_module._jwks_cache is None


class TestValidateEs256:
    async def test_returns_none_without_kid(self, hs256_provider: JWTAuthProvider):
        result = await hs256_provider._validate_es256("token", {"alg": "ES256"})

        assert result is None

    async def test_returns_none_when_kid_unknown_after_refetch(
        self, hs256_provider: JWTAuthProvider
    ):
        with patch.object(
            jwt_provider_module, "_get_jwks_keys", AsyncMock(return_value={})
        ) as fetch:
            result = await hs256_provider._validate_es256("token", {"kid": "missing"})

        assert result is None
        assert fetch.await_count == 2
