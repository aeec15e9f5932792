from fastapi import APIRouter, Depends, HTTPException, status

from shortcode_app.dependencies import get_shortcode_service, require_user
from shortcode_app.schemas.shortcode import ShortcodeStats
from shortcode_app.schemas.user import UserResponse
from shortcode_app.services.shortcode_service import ShortcodeService
from shortcode_app.services.user_service import to_user_response
from shortcode_app.storage.strategies import StoredRecord

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("", response_model=UserResponse, include_in_schema=False)
@router.get("/", response_model=UserResponse)
async def whoami(user: StoredRecord = Depends(require_user)):
    """The signed-in user"""
    return to_user_response(user)


@router.get("/shortcodes/{shortcode}", response_model=ShortcodeStats)
async def get_shortcode_stats(
    shortcode: str,
    user: StoredRecord = Depends(require_user),
    shortcode_service: ShortcodeService = Depends(get_shortcode_service)
):
    """A shortcode with its creation audit and invocations"""
    stats = await shortcode_service.get_shortcode_stats(shortcode)
    if not stats:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shortcode not found"
        )
    return stats
