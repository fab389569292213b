try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import pytest
from pydantic import ValidationError

from piratepanda import main
from piratepanda.core.config import load_settings
from piratepanda.core.errors import StartupConfigError

from conftest import build_settings


@pytest.mark.parametrize(
    "missing",
    ["JWT_SECRET", "OAUTH_COOKIE_SECRET", "SERVER_URL", "GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"],
)
def test_missing_required_setting_is_fatal(
    tmp_path, monkeypatch: pytest.MonkeyPatch, missing: str
) -> None:
    monkeypatch.delenv(missing, raising=False)

    with pytest.raises(StartupConfigError, match=missing):
        load_settings(str(tmp_path / "absent.env"))


def test_server_url_must_be_absolute(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERVER_URL", "piratepanda.now.sh")

    with pytest.raises(StartupConfigError, match="SERVER_URL"):
        load_settings(str(tmp_path / "absent.env"))


@pytest.mark.parametrize("level", ["verbose", "loud", "TRACE"])
def test_unknown_log_level_is_fatal(
    tmp_path, monkeypatch: pytest.MonkeyPatch, level: str
) -> None:
    monkeypatch.setenv("APP_LOG_LEVEL", level)

    with pytest.raises(StartupConfigError, match="APP_LOG_LEVEL"):
        load_settings(str(tmp_path / "absent.env"))


def test_log_level_is_case_insensitive() -> None:
    assert build_settings(APP_LOG_LEVEL=" debug ").log_level == "DEBUG"


def test_environment_defaults(tmp_path) -> None:
    settings = load_settings(str(tmp_path / "absent.env"))

    assert settings.port == 3006
    assert settings.security.access_token_ttl_seconds == 3600
    assert settings.security.jwt_algorithm == "HS256"
    assert settings.oauth.provider_timeout_seconds == 10.0
    assert settings.oauth.cookie_secure is False


def test_callback_url_uses_configured_server_url_verbatim() -> None:
    settings = build_settings(SERVER_URL="https://piratepanda.now.sh/")

    assert settings.server_url == "https://piratepanda.now.sh"
    assert settings.login_callback_url == "https://piratepanda.now.sh/login"


def test_settings_are_immutable() -> None:
    settings = build_settings()

    with pytest.raises(ValidationError):
        settings.server_url = "https://elsewhere.example.com"  # type: ignore[misc]


def test_run_exits_when_configuration_is_missing(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.setattr(main, "load_settings", lambda: load_settings("absent.env"))
    served = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: served.append(args))

    assert main.run() == 1
    assert "JWT_SECRET" in capsys.readouterr().err
    assert served == []


def test_run_serves_on_configured_address(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "load_settings", lambda: build_settings(APP_PORT=4000))
    served = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: served.append(kwargs))

    assert main.run() == 0
    assert served[0]["host"] == "localhost"
    assert served[0]["port"] == 4000
