"""
Helpers that read requester metadata off a Starlette request.
"""

import json
from typing import Any, Dict, Optional

from fastapi import Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from shortcode_app.schemas.shortcode import RequestContext


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def client_ip(request: Request) -> Optional[str]:
    """First address of X-Forwarded-For, else the connection's peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def read_request_body(request: Request) -> Dict[str, Any]:
    """
    Parse a JSON or form body into a dict.

    Empty, unparseable or non-object bodies give an empty dict.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except (HTTPException, MultiPartException):
            return {}
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        return {}
    return body if isinstance(body, dict) else {}


def capture_request_context(
    request: Request,
    body: Dict[str, Any],
    params: Optional[Dict[str, Any]] = None,
) -> RequestContext:
    """Snapshot the request for an audit entry."""
    return RequestContext(
        protocol=request.url.scheme,
        ip=client_ip(request),
        method=request.method,
        path=request.url.path,
        base_url=request.scope.get("root_path", ""),
        params=params if params is not None else dict(request.path_params),
        query=dict(request.query_params),
        body=body,
    )
