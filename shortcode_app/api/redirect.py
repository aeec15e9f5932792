import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import RedirectResponse

from shortcode_app.context import AppContext
from shortcode_app.dependencies import get_context
from shortcode_app.services.request_context import capture_request_context, read_request_body
from shortcode_app.services.shortcode_service import Found, LookupFailed, NotFound

router = APIRouter(tags=["redirect"])

logger = logging.getLogger(__name__)


@router.api_route("/{shortcode}", methods=["GET", "POST"])
async def resolve_shortcode(
    shortcode: str,
    request: Request,
    background_tasks: BackgroundTasks,
    context: AppContext = Depends(get_context)
):
    """
    Redirect to the stored target with the stored status.

    Unknown codes and failed lookups get the documentation page instead.
    The invocation audit is written after the redirect has been sent, so
    an audit failure never costs the caller their redirect.
    """
    result = await context.shortcodes.resolve(shortcode)

    if isinstance(result, LookupFailed):
        logger.warning(
            "Lookup of shortcode %s failed, serving documentation",
            shortcode,
            exc_info=result.error,
        )
    elif isinstance(result, NotFound):
        logger.debug("Unknown shortcode %s", shortcode)
    if not isinstance(result, Found):
        return context.docs.render(request)

    body = await read_request_body(request)
    audit = capture_request_context(request, body, params={"shortcode": shortcode})
    background_tasks.add_task(context.shortcodes.record_invocation_safely, shortcode, audit)

    record = result.record
    logger.info("Redirecting %s -> %s (%s)", shortcode, record.redirect, record.status)
    return RedirectResponse(url=record.redirect, status_code=record.status)
