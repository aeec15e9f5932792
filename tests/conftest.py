"""
Test configuration and fixtures for the shortcode service.
This centralizes all test setup, making individual tests clean.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortcode_app.cache.strategies import InMemoryCache
from shortcode_app.config import Settings
from shortcode_app.database.connection import Base
from shortcode_app.services.short_code_strategies import RandomShortCodeStrategy
from shortcode_app.services.shortcode_service import ShortcodeService
from shortcode_app.storage.factory import CollectionBackend, CollectionSet


HOOK_URL = "https://hooks.example.com/notify"

GITHUB_PROFILE = {"id": 4242, "login": "octo", "name": "Octo Cat"}


class OutboundHTTP:
    """
    Stands in for the outside world behind httpx.MockTransport.

    Records every request; answers GitHub and the webhook with canned data.
    """

    def __init__(self):
        self.requests = []
        self.hook_status = 204
        self.token_payload = {"access_token": "gho_test_token", "token_type": "bearer"}
        self.profile = dict(GITHUB_PROFILE)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url.startswith("https://github.com/login/oauth/access_token"):
            return httpx.Response(200, json=self.token_payload)
        if url.startswith("https://api.github.com/user"):
            return httpx.Response(200, json=self.profile)
        if url.startswith(HOOK_URL):
            return httpx.Response(self.hook_status)
        return httpx.Response(404)

    def client_factory(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def hook_payloads(self):
        return [json.loads(r.content) for r in self.requests if str(r.url) == HOOK_URL]


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Isolated settings: a throwaway SQLite file per test, no .env file."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        collection_backend="sql",
        cache_backend="memory",
        session_https_only=False,
        session_secret="test-secret",
        notify_hook_url=HOOK_URL,
        github_client_id="client-id",
        github_client_secret="client-secret",
        deployment="https://short.example.com",
        app_root="shorty",
    )


@pytest.fixture(scope="function")
def outbound():
    return OutboundHTTP()


@pytest.fixture(scope="function")
def app(settings, outbound):
    application = create_app(settings, http_client_factory=outbound.client_factory)
    yield application

    engine = application.state.context.engine
    if engine is not None:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def context(app):
    return app.state.context


@pytest.fixture(scope="function")
def client(app):
    """
    Test client for the app.
    Redirects are not followed so tests can inspect them.
    """
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def memory_collections():
    return CollectionSet.create(CollectionBackend.MEMORY)


@pytest.fixture(scope="function")
def shortcode_service(memory_collections):
    return ShortcodeService(
        collections=memory_collections,
        generator=RandomShortCodeStrategy(length=6, max_retries=5),
        cache=InMemoryCache(),
    )
