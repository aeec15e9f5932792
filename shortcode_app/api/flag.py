import base64
import json

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from shortcode_app.api.docs import ALL_METHODS
from shortcode_app.context import AppContext
from shortcode_app.dependencies import get_context
from shortcode_app.services.request_context import client_ip, read_request_body

REFERENCE = "https://gist.github.com/Birdie0/78ee79402a4301b1faf412ab5f1cdcf9"
GREETING = base64.b64decode("VGVsbCB1cyB3aG8geW91IGFyZSwgbGVnZW5k").decode("utf-8")


def create_flag_router(token: str) -> APIRouter:
    """
    Router for ``/flag/<token>``, where the token is derived from the index
    template at startup.

    Every hit fires the notification webhook in the background and gets the
    same JSON answer.
    """
    router = APIRouter(tags=["flag"])
    target = f"/flag/{token}"

    async def flag(
        request: Request,
        background_tasks: BackgroundTasks,
        context: AppContext = Depends(get_context)
    ):
        body = await read_request_body(request)
        details = {
            "ip": client_ip(request),
            "method": request.method,
            "baseUrl": target,
            "query": dict(request.query_params),
            "body": body,
        }
        content = json.dumps(details, indent=2)
        payload = {
            "content": f"```json\n{content}```",
            "username": context.settings.app_root,
            **body,
        }
        background_tasks.add_task(context.notifier.send, payload)

        return {
            "method": "POST",
            "target": target,
            "reference": REFERENCE,
            "body": {"username": "discord#1337", "content": GREETING},
        }

    router.add_api_route(target, flag, methods=ALL_METHODS, include_in_schema=False)
    router.add_api_route(f"{target}/{{rest:path}}", flag, methods=ALL_METHODS, include_in_schema=False)
    return router
