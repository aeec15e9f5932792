from fastapi import APIRouter, Depends, Request

from shortcode_app.context import AppContext
from shortcode_app.dependencies import get_context

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

router = APIRouter(tags=["docs"])


@router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def documentation(request: Request, context: AppContext = Depends(get_context)):
    """Catch-all: any request no other route handled gets the docs page."""
    return context.docs.render(request)
