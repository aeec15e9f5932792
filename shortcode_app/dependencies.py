"""
FastAPI dependencies for dependency injection.

Everything is read from the ``AppContext`` stored on ``app.state`` by
``main.create_app``; tests build their own app and context.
"""

from typing import Optional

from fastapi import Depends, Request

from shortcode_app.context import AppContext
from shortcode_app.errors import LoginRequired
from shortcode_app.services.shortcode_service import ShortcodeService
from shortcode_app.services.user_service import UserService
from shortcode_app.storage.strategies import StoredRecord


SESSION_USER_KEY = "user"


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_shortcode_service(context: AppContext = Depends(get_context)) -> ShortcodeService:
    return context.shortcodes


def get_user_service(context: AppContext = Depends(get_context)) -> UserService:
    return context.users


async def get_current_user(
    request: Request,
    users: UserService = Depends(get_user_service)
) -> Optional[StoredRecord]:
    """Re-fetch the user whose key the session carries."""
    key = request.session.get(SESSION_USER_KEY)
    if not key:
        return None
    return await users.get_user(key)


async def require_user(
    request: Request,
    user: Optional[StoredRecord] = Depends(get_current_user)
) -> StoredRecord:
    """Admin guard: anonymous requests are sent through the GitHub login."""
    if user is None:
        raise LoginRequired(request.url.path)
    return user
