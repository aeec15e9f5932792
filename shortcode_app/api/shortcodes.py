from fastapi import APIRouter, Depends, Request

from shortcode_app.dependencies import get_shortcode_service
from shortcode_app.schemas.shortcode import ShortcodeResponse
from shortcode_app.services.request_context import capture_request_context, read_request_body
from shortcode_app.services.shortcode_service import ShortcodeService

router = APIRouter(tags=["shortcodes"])


@router.post("/", response_model=ShortcodeResponse)
async def create_shortcode(
    request: Request,
    shortcode_service: ShortcodeService = Depends(get_shortcode_service)
):
    """
    Create a shortcode from a JSON or form body with ``redirect`` and ``status``.

    Validation failures are answered with 400 and a plain text message by the
    ``InvalidShortcodeRequest`` handler.
    """
    body = await read_request_body(request)
    context = capture_request_context(request, body)
    return await shortcode_service.create_shortcode(body, context)
