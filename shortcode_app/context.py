"""
Application context: everything a request handler needs, built once per app.

Replaces module-level singletons so that each app (and each test) gets its
own storage, cache and outbound HTTP client factory.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

import httpx
from sqlalchemy.engine import Engine

from shortcode_app.cache.factory import CacheBackend, CacheFactory
from shortcode_app.cache.strategies import CacheStrategy
from shortcode_app.config import Settings
from shortcode_app.database.connection import Base, create_db_engine, create_session_factory
from shortcode_app.services.docs_renderer import DocsRenderer
from shortcode_app.services.github_oauth import GitHubOAuthClient
from shortcode_app.services.integrity import compute_flag_token
from shortcode_app.services.notifier import WebhookNotifier
from shortcode_app.services.short_code_strategies import RandomShortCodeStrategy
from shortcode_app.services.shortcode_service import ShortcodeService
from shortcode_app.services.user_service import UserService
from shortcode_app.storage.factory import CollectionBackend, CollectionSet

# Register tables with Base
from shortcode_app.models import CollectionRecord  # noqa: F401


logger = logging.getLogger(__name__)

HttpClientFactory = Callable[[], httpx.AsyncClient]


@dataclass
class AppContext:
    settings: Settings
    engine: Optional[Engine]
    collections: CollectionSet
    cache: CacheStrategy
    shortcodes: ShortcodeService
    users: UserService
    notifier: WebhookNotifier
    github: GitHubOAuthClient
    docs: DocsRenderer
    flag_token: str
    http_client_factory: HttpClientFactory


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_context(
    settings: Settings,
    http_client_factory: Optional[HttpClientFactory] = None
) -> AppContext:
    """
    Wire storage, cache, services and renderers from ``settings``.

    Raises:
        IntegrityTokenNotFound: if the index template has no usable token
    """
    if http_client_factory is None:
        http_client_factory = partial(httpx.AsyncClient, timeout=settings.http_timeout)

    backend = CollectionBackend(settings.collection_backend)
    engine = None
    session_factory = None
    if backend == CollectionBackend.SQL:
        engine = create_db_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        session_factory = create_session_factory(engine)
    collections = CollectionSet.create(backend, session_factory)

    cache = CacheFactory.create(CacheBackend(settings.cache_backend), settings)

    generator = RandomShortCodeStrategy(
        length=settings.short_code_length,
        max_retries=settings.max_retries,
    )
    shortcodes = ShortcodeService(
        collections=collections,
        generator=generator,
        cache=cache,
        allowed_statuses=tuple(settings.allowed_statuses),
        default_status=settings.default_status,
        cache_ttl=settings.cache_ttl,
    )

    docs = DocsRenderer(settings.templates_dir, settings.template_vars)
    flag_token = compute_flag_token(docs.index_path)

    logger.info("Using %s collections, flag endpoint ready", backend.value)
    return AppContext(
        settings=settings,
        engine=engine,
        collections=collections,
        cache=cache,
        shortcodes=shortcodes,
        users=UserService(collections.users),
        notifier=WebhookNotifier(settings.notify_hook_url, http_client_factory),
        github=GitHubOAuthClient(
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            callback_url=settings.github_callback_url,
            client_factory=http_client_factory,
        ),
        docs=docs,
        flag_token=flag_token,
        http_client_factory=http_client_factory,
    )
