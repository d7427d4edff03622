"""Browser entry points.

GET /auth?token=X  exchange the shared secret for a long-lived cookie
GET /              the single-page UI (cookie or bearer token required)

Remaining static assets are mounted by ``create_app`` after all routes.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse, Response

from doctracker.config import Settings
from doctracker.core.security import (
    COOKIE_MAX_AGE,
    COOKIE_NAME,
    get_app_settings,
    require_auth,
    token_matches,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ui"])


@router.get("/auth")
async def authenticate(
    token: str | None = Query(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Set the ``app_token`` cookie and redirect to the UI.

    Returns 401 with a plain-text body when the token does not match.
    """
    if not token_matches(token, settings.app_token):
        logger.warning("Cookie exchange rejected: invalid token")
        return PlainTextResponse("Invalid token", status_code=401)

    response = RedirectResponse(url="/", status_code=302)
    # Raw header: the token must reach the browser unquoted.
    response.headers["set-cookie"] = (
        f"{COOKIE_NAME}={token}; Path=/; HttpOnly; SameSite=Strict; Max-Age={COOKIE_MAX_AGE}"
    )
    logger.info("Auth cookie issued")
    return response


@router.get("/", dependencies=[Depends(require_auth)], include_in_schema=False)
async def index(settings: Settings = Depends(get_app_settings)) -> FileResponse:
    return FileResponse(settings.index_file, media_type="text/html")
