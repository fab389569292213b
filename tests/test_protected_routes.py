try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import logging

import pytest

from piratepanda.dependencies import get_user_directory
from piratepanda.services import AccessTokenCodec


class RecordingDirectory:
    def __init__(self) -> None:
        self.lookups: list = []

    def lookup(self, identity):
        self.lookups.append(identity)
        return None


@pytest.mark.anyio
async def test_index_needs_no_token(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {"text": "Token not required"}


@pytest.mark.anyio
async def test_profile_with_header_token(client, token_codec):
    token = token_codec.issue(1, 3600)

    response = await client.get("/profile", headers={"Authorization": token})

    assert response.status_code == 200
    assert response.json() == {"id": 1, "name": "Jen Jones"}


@pytest.mark.anyio
async def test_profile_accepts_bearer_scheme(client, token_codec):
    token = token_codec.issue(2, 3600)

    response = await client.get("/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.json() == {"id": 2, "name": "Ada Lovelace"}


@pytest.mark.anyio
async def test_profile_with_query_token(client, token_codec):
    token = token_codec.issue("1", 3600)

    response = await client.get("/profile", params={"token": token})

    assert response.status_code == 200
    assert response.json() == {"id": 1, "name": "Jen Jones"}


@pytest.mark.anyio
async def test_header_takes_precedence_over_query(client, token_codec):
    header_token = token_codec.issue(2, 3600)
    query_token = token_codec.issue(1, 3600)

    response = await client.get(
        "/profile",
        headers={"Authorization": header_token},
        params={"token": query_token},
    )

    assert response.json()["name"] == "Ada Lovelace"


@pytest.mark.anyio
async def test_invalid_header_is_not_rescued_by_query(client, token_codec):
    response = await client.get(
        "/profile",
        headers={"Authorization": "garbage"},
        params={"token": token_codec.issue(1, 3600)},
    )

    assert response.status_code == 401


@pytest.mark.anyio
async def test_profile_for_unknown_identity_is_empty(client, token_codec):
    token = token_codec.issue("999", 3600)

    response = await client.get("/profile", headers={"Authorization": token})

    assert response.status_code == 200
    assert response.content == b""


@pytest.mark.anyio
async def test_profile_without_token_never_reaches_handler(app, client):
    directory = RecordingDirectory()
    app.dependency_overrides[get_user_directory] = lambda: directory

    response = await client.get("/profile")

    assert response.status_code == 401
    assert response.json() == {"detail": "Missing authentication"}
    assert response.headers["www-authenticate"] == "Bearer"
    assert directory.lookups == []


@pytest.mark.anyio
async def test_expired_token_is_rejected(app, client, token_codec):
    directory = RecordingDirectory()
    app.dependency_overrides[get_user_directory] = lambda: directory

    response = await client.get(
        "/profile", headers={"Authorization": token_codec.issue(1, -10)}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid token"}
    assert directory.lookups == []


@pytest.mark.anyio
async def test_token_from_other_secret_is_rejected(client):
    foreign = AccessTokenCodec(secret="someone-elses-secret-0123456789abcdef")

    response = await client.get(
        "/profile", headers={"Authorization": foreign.issue(1, 3600)}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid token"}


@pytest.mark.anyio
async def test_greeting_reescapes_decoded_name(client, token_codec):
    token = token_codec.issue(1, 3600)

    response = await client.get("/hello%20world", headers={"Authorization": token})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "Hello, hello%20world!"


@pytest.mark.anyio
async def test_greeting_escapes_markup(client, token_codec):
    token = token_codec.issue(1, 3600)

    response = await client.get("/%3Cb%3Epanda", params={"token": token})

    assert response.text == "Hello, %3Cb%3Epanda!"


@pytest.mark.anyio
async def test_greeting_keeps_uri_component_safe_characters(client, token_codec):
    token = token_codec.issue(1, 3600)

    response = await client.get("/panda!(*)'~", params={"token": token})

    assert response.text == "Hello, panda!(*)'~!"


@pytest.mark.anyio
async def test_greeting_requires_token(client):
    response = await client.get("/panda")

    assert response.status_code == 401


@pytest.mark.anyio
async def test_access_log_omits_query_token(client, token_codec, caplog):
    token = token_codec.issue(1, 3600)

    with caplog.at_level(logging.INFO, logger="piratepanda.access"):
        await client.get("/profile", params={"token": token})

    assert "GET /profile -> 200" in caplog.text
    assert token not in caplog.text


@pytest.mark.anyio
@pytest.mark.parametrize("path", ["/docs", "/redoc", "/openapi.json"])
async def test_framework_doc_routes_are_not_public(client, path):
    response = await client.get(path)

    assert response.status_code == 401
    assert response.json() == {"detail": "Missing authentication"}
