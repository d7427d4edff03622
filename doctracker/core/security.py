"""Shared-secret authentication.

Every ``/api/*`` route and the UI root require the static ``APP_TOKEN``
secret, presented either as ``Authorization: Bearer <token>`` or as the
``app_token`` cookie that ``GET /auth`` sets.  There is no session store
and no per-user identity.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Depends, Request

from doctracker.config import Settings, get_settings
from doctracker.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

COOKIE_NAME = "app_token"
COOKIE_MAX_AGE = 31536000  # one year, in seconds
BEARER_PREFIX = "Bearer "


def parse_cookies(header: str | None) -> dict[str, str]:
    """Split a raw ``Cookie`` header into a name → value mapping.

    Segments are separated by ``;`` and split on their first ``=``; names
    and values are whitespace-trimmed.  Segments without ``=`` or with an
    empty name are skipped.  A missing header yields an empty dict.
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies

    for segment in header.split(";"):
        name, sep, value = segment.strip().partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        cookies[name] = value.strip()
    return cookies


def token_matches(candidate: str | None, secret: str) -> bool:
    """Exact, constant-time comparison of ``candidate`` against ``secret``.

    An unset secret accepts nothing, and an empty candidate never matches.
    """
    if not candidate or not secret:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))


def extract_tokens(authorization: str | None, cookie_header: str | None) -> list[str]:
    """Return the credentials a request presents, bearer token first."""
    tokens: list[str] = []
    if authorization and authorization.startswith(BEARER_PREFIX):
        tokens.append(authorization[len(BEARER_PREFIX):])

    cookie = parse_cookies(cookie_header).get(COOKIE_NAME)
    if cookie is not None:
        tokens.append(cookie)
    return tokens


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was created with."""
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def require_auth(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> None:
    """FastAPI dependency gating a route on the shared secret.

    Raises:
        UnauthorizedError: if neither the bearer token nor the cookie match.
    """
    presented = extract_tokens(
        request.headers.get("authorization"),
        request.headers.get("cookie"),
    )
    if any(token_matches(token, settings.app_token) for token in presented):
        return

    logger.warning(
        "Request rejected: missing or invalid credential",
        extra={"path": request.url.path, "method": request.method},
    )
    raise UnauthorizedError()
