"""
Application configuration models and helpers.

Every secret the service needs is read once at startup. ``load_settings``
turns missing or malformed values into a ``StartupConfigError`` so the
process refuses to start instead of failing on the first login.
"""

from functools import lru_cache
from pathlib import Path

import os

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from piratepanda.core.errors import StartupConfigError


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


class SecuritySettings(BaseSettings):
    """Access token signing configuration."""

    model_config = SettingsConfigDict(frozen=True)

    jwt_secret: str = Field(..., min_length=1, validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", validation_alias="JWT_ALGORITHM")
    access_token_ttl_seconds: int = Field(
        3600,
        gt=0,
        validation_alias="ACCESS_TOKEN_TTL",
        description="Lifetime of tokens handed out by /login.",
    )

    @field_validator("jwt_algorithm")
    @classmethod
    def _require_hmac(cls, value: str) -> str:
        """Only symmetric HMAC algorithms make sense with a shared secret."""
        if value not in {"HS256", "HS384", "HS512"}:
            raise ValueError("JWT_ALGORITHM must be one of HS256, HS384, HS512.")
        return value


class OAuthSettings(BaseSettings):
    """Settings for the transient handshake cookie and the provider exchange."""

    model_config = SettingsConfigDict(frozen=True)

    cookie_secret: str = Field(..., min_length=1, validation_alias="OAUTH_COOKIE_SECRET")
    cookie_name: str = Field("piratepanda-oauth", validation_alias="OAUTH_COOKIE_NAME")
    cookie_secure: bool = Field(
        False,
        validation_alias="OAUTH_COOKIE_SECURE",
        description="Mark the state cookie Secure; enable when served over HTTPS.",
    )
    state_ttl_seconds: int = Field(900, gt=0, validation_alias="OAUTH_STATE_TTL")
    provider_timeout_seconds: float = Field(
        10.0, gt=0, validation_alias="OAUTH_PROVIDER_TIMEOUT"
    )


class GoogleSettings(BaseSettings):
    """Credentials of the Google OAuth client."""

    model_config = SettingsConfigDict(frozen=True)

    client_id: str = Field(..., min_length=1, validation_alias="GOOGLE_CLIENT_ID")
    client_secret: str = Field(..., min_length=1, validation_alias="GOOGLE_CLIENT_SECRET")
    scopes: str = Field(
        "openid email profile",
        validation_alias="GOOGLE_SCOPES",
        description="Space separated scopes requested on the consent screen.",
    )


class AppSettings(BaseSettings):
    """Root settings object for the service."""

    model_config = SettingsConfigDict(frozen=True)

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    host: str = Field("localhost", validation_alias="APP_HOST")
    port: int = Field(3006, validation_alias="APP_PORT")
    server_url: str = Field(
        ...,
        validation_alias="SERVER_URL",
        description=(
            "Externally visible base URL, e.g. https://piratepanda.now.sh. "
            "Used verbatim for the OAuth callback."
        ),
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(
                "APP_LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
            )
        return level

    @field_validator("server_url")
    @classmethod
    def _normalize_server_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("SERVER_URL must be an absolute http(s) URL.")
        return value.rstrip("/")

    @property
    def login_callback_url(self) -> str:
        """Callback handed to the provider; points back at /login."""
        return f"{self.server_url}/login"


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or exc.title
        problems.append(f"{location} ({error.get('msg', 'invalid')})")
    return "Missing or invalid configuration: " + ", ".join(problems)


def load_settings(env_file: str = ".env") -> AppSettings:
    """Read settings from the environment, failing fast when any are unusable."""
    _load_env_file(env_file)
    try:
        return AppSettings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise StartupConfigError(_describe(exc)) from exc


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return load_settings()


__all__ = [
    "AppSettings",
    "GoogleSettings",
    "OAuthSettings",
    "SecuritySettings",
    "get_settings",
    "load_settings",
]
