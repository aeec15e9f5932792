import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from shortcode_app.context import AppContext
from shortcode_app.dependencies import SESSION_USER_KEY, get_context
from shortcode_app.errors import OAuthError

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)

RETURN_TO_COOKIE = "returnTo"
SESSION_STATE_KEY = "oauth_state"


def safe_return_to(value: Optional[str]) -> str:
    """Only same-site absolute paths are followed after login."""
    if not value or not value.startswith("/") or value.startswith("//") or "\\" in value:
        return "/"
    return value


@router.get("/github")
async def github_login(
    request: Request,
    return_to: str = Query("/", alias="returnTo"),
    context: AppContext = Depends(get_context)
):
    """Remember where to go back to, then hand over to GitHub."""
    state = secrets.token_urlsafe(16)
    request.session[SESSION_STATE_KEY] = state

    response = RedirectResponse(context.github.authorize_url(state), status_code=302)
    response.set_cookie(
        RETURN_TO_COOKIE,
        safe_return_to(return_to),
        max_age=context.settings.return_to_max_age,
        httponly=True,
    )
    return response


@router.get("/github/callback")
async def github_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    context: AppContext = Depends(get_context)
):
    """
    Finish the OAuth flow: find or create the user and store its key in
    the session. Any failure lands on the home page.
    """
    expected_state = request.session.pop(SESSION_STATE_KEY, None)
    try:
        if error or not code:
            raise OAuthError(error or "No code in callback")
        if not state or state != expected_state:
            raise OAuthError("OAuth state mismatch")

        access_token = await context.github.exchange_code(code)
        profile = await context.github.fetch_profile(access_token)
        user = await context.users.find_or_create_github_user(access_token, profile)
    except OAuthError as e:
        logger.warning("GitHub login failed: %s", e)
        return RedirectResponse("/", status_code=302)

    request.session[SESSION_USER_KEY] = user.key
    return_to = safe_return_to(request.cookies.get(RETURN_TO_COOKIE))

    response = RedirectResponse(return_to, status_code=302)
    response.delete_cookie(RETURN_TO_COOKIE)
    return response


@router.get("/logout")
async def logout(request: Request):
    request.session.clear()
    return RedirectResponse("/", status_code=302)
