"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from piratepanda.core.config import (
    AppSettings,
    GoogleSettings,
    OAuthSettings,
    SecuritySettings,
)
from piratepanda.main import create_app
from piratepanda.services import AccessTokenCodec

TEST_SERVER_URL = "https://piratepanda.example.com"
TEST_JWT_SECRET = "fixture-jwt-secret-0123456789abcdef"


def build_settings(**overrides) -> AppSettings:
    values = {
        "SERVER_URL": TEST_SERVER_URL,
        "security": SecuritySettings(JWT_SECRET=TEST_JWT_SECRET),
        "oauth": OAuthSettings(OAUTH_COOKIE_SECRET="fixture-cookie-secret-0123456789abcdef"),
        "google": GoogleSettings(
            GOOGLE_CLIENT_ID="fixture-client-id",
            GOOGLE_CLIENT_SECRET="fixture-client-secret",
        ),
    }
    values.update(overrides)
    return AppSettings(**values)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def settings() -> AppSettings:
    return build_settings()


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def token_codec(settings) -> AccessTokenCodec:
    return AccessTokenCodec(secret=settings.security.jwt_secret)


@pytest.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as http_client:
        yield http_client
