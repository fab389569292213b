"""
FastAPI routes for piratepanda.

| Method   | Path       | Auth            |
|----------|------------|-----------------|
| GET      | /          | none            |
| GET,POST | /login     | Google, try     |
| GET      | /profile   | access token    |
| GET      | /{name}    | access token    |
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from piratepanda.api.auth import CurrentIdentity, OptionalIdentity
from piratepanda.core.config import AppSettings
from piratepanda.core.errors import ProviderHandshakeError
from piratepanda.dependencies import get_app_settings, get_login_flow, get_user_directory
from piratepanda.schemas import TextMessage
from piratepanda.services import GoogleLoginFlow, UserDirectory

router = APIRouter()
logger = logging.getLogger(__name__)

LOGIN_SUCCESS_TEXT = "Tokens for the select few! Check your authorization header."

# Characters encodeURIComponent leaves alone besides letters, digits and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"


@router.get("/", response_model=TextMessage, status_code=HTTPStatus.OK)
async def index() -> TextMessage:
    """Public endpoint; no token needed."""
    return TextMessage(text="Token not required")


@router.api_route("/login", methods=["GET", "POST"])
async def login(
    request: Request,
    flow: Annotated[GoogleLoginFlow, Depends(get_login_flow)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    caller: OptionalIdentity,
) -> Response:
    """
    Send the browser to Google, or finish the handshake when Google sends it back.

    Success puts a fresh access token in the ``Authorization`` response header.
    Failures answer 200 with a plaintext explanation and no token.
    """
    cookie_name = settings.oauth.cookie_name
    params = request.query_params

    if not flow.is_callback(params):
        if caller is not None:
            logger.info("Caller %s already holds a valid token; logging in again", caller)
        redirect = flow.start()
        response = RedirectResponse(
            url=redirect.authorization_url, status_code=HTTPStatus.FOUND
        )
        response.set_cookie(
            cookie_name,
            redirect.state_cookie,
            max_age=settings.oauth.state_ttl_seconds,
            path="/login",
            secure=settings.oauth.cookie_secure,
            httponly=True,
            samesite="lax",
        )
        return response

    try:
        issued = await flow.complete(params, request.cookies.get(cookie_name))
    except ProviderHandshakeError as exc:
        logger.warning("Google login failed: %s", exc)
        response = PlainTextResponse(f"Authentication failed due to {exc}")
    else:
        response = JSONResponse(
            content=TextMessage(text=LOGIN_SUCCESS_TEXT).model_dump(),
            headers={"Authorization": issued.access_token},
        )

    response.delete_cookie(
        cookie_name,
        path="/login",
        secure=settings.oauth.cookie_secure,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("/profile")
async def profile(
    identity: CurrentIdentity,
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> Response:
    """Return the caller's profile, or an empty body when they are not listed."""
    user = directory.lookup(identity)
    if user is None:
        return Response(status_code=HTTPStatus.OK)
    return JSONResponse(content=user.model_dump())


@router.get("/{name}", response_class=PlainTextResponse)
async def greet(name: str, identity: CurrentIdentity) -> PlainTextResponse:
    """Greet ``name``; the decoded path segment is percent-encoded again."""
    return PlainTextResponse(f"Hello, {quote(name, safe=_URI_COMPONENT_SAFE)}!")


__all__ = ["LOGIN_SUCCESS_TEXT", "router"]
