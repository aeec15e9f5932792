from typing import Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from shortcode_app.config import Settings, settings as default_settings
from shortcode_app.context import HttpClientFactory, build_context, configure_logging
from shortcode_app.errors import InvalidShortcodeRequest, LoginRequired
from shortcode_app.api import admin, auth, docs, redirect, shortcodes
from shortcode_app.api.flag import create_flag_router


def create_app(
    settings: Optional[Settings] = None,
    http_client_factory: Optional[HttpClientFactory] = None
) -> FastAPI:
    """
    Build the application and its context.

    Route order matters: everything more specific than ``/{shortcode}``
    is registered before it, and the documentation catch-all comes last.
    """
    settings = settings or default_settings
    configure_logging(settings)
    context = build_context(settings, http_client_factory=http_client_factory)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Short links with redirect audit",
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = context

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        https_only=settings.session_https_only,
    )

    @app.exception_handler(InvalidShortcodeRequest)
    async def invalid_shortcode_request(request: Request, exc: InvalidShortcodeRequest):
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(LoginRequired)
    async def login_required(request: Request, exc: LoginRequired):
        query = urlencode({"returnTo": exc.return_to})
        return RedirectResponse(f"/auth/github?{query}", status_code=302)

    ######## Include routers
    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(shortcodes.router)
    app.include_router(create_flag_router(context.flag_token))
    app.include_router(redirect.router)
    app.include_router(docs.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
