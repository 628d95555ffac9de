"""Pytest configuration and fixtures."""

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from deploy_console.api.client import BackendClient
from deploy_console.config import Settings
from deploy_console.core.events import EventBus
from deploy_console.core.navigation import Navigator
from deploy_console.core.session import AuthContext, SignupDraftStore
from deploy_console.core.storage import MemoryStore

Handler = Callable[[httpx.Request], Any]


class FakeBackend:
    """In-process stand-in for the deployment backend.

    Every request is recorded. Unknown routes answer 404.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def respond(
        self, method: str, path: str, json: Any = None, status_code: int = 200
    ) -> None:
        self.routes[(method, path)] = lambda request: httpx.Response(status_code, json=json)

    def fail(self, method: str, path: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[(method, path)] = handler

    def hold(self, method: str, path: str, json: Any = None) -> asyncio.Event:
        """Answer only after the returned event is set."""
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json=json)

        self.routes[(method, path)] = handler
        return release

    def handle(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        return handler(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def settings() -> Settings:
    """Settings with fast timers for tests."""
    return Settings(
        app_env="development",
        api_base_url="http://backend.test",
        github_app_install_url="https://github.com/apps/deployer/installations/new",
        otp_resend_cooldown_seconds=60,
        countdown_interval_seconds=1.0,
        dashboard_poll_interval_seconds=10.0,
        message_ttl_seconds=5.0,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def auth(store: MemoryStore) -> AuthContext:
    return AuthContext(store)


@pytest.fixture
def drafts(store: MemoryStore) -> SignupDraftStore:
    return SignupDraftStore(store)


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def navigator(events: EventBus) -> Navigator:
    return Navigator(events)


@pytest.fixture
def client(backend: FakeBackend, auth: AuthContext, settings: Settings) -> BackendClient:
    """API client wired to the fake backend (MockTransport holds no connections)."""
    return BackendClient(settings.api_base_url, auth, transport=backend.transport)


@pytest.fixture
def view_kwargs(
    client: BackendClient,
    auth: AuthContext,
    navigator: Navigator,
    settings: Settings,
    events: EventBus,
) -> dict[str, Any]:
    """Constructor arguments shared by every workflow view."""
    return {
        "client": client,
        "auth": auth,
        "navigator": navigator,
        "settings": settings,
        "events": events,
    }


@pytest.fixture
def deployment_payloads() -> list[dict[str, Any]]:
    """Dashboard records as the backend returns them."""
    return [
        {
            "_id": "64f0c0ffee0000000000aa01",
            "repoName": "shop",
            "fullName": "ann/shop",
            "branchName": "main",
            "environment": "production",
            "status": "success",
            "deployedUrl": "https://shop.example.app",
            "createdAt": "2024-05-01T10:00:00Z",
            "updatedAt": "2024-05-01T10:05:00Z",
            "commitHash": "a1b2c3d",
            "commitMessage": "Initial release",
        },
        {
            "_id": "64f0c0ffee0000000000aa02",
            "repoName": "blog",
            "fullName": "ann/blog",
            "branchName": "main",
            "environment": "staging",
            "status": "failed",
            "createdAt": "2024-05-03T09:00:00Z",
            "updatedAt": "2024-05-03T09:02:00Z",
        },
        {
            "_id": "64f0c0ffee0000000000aa03",
            "repoName": "api",
            "fullName": "ann/api",
            "branchName": "develop",
            "environment": "production",
            "status": "building",
            "createdAt": "2024-05-02T12:00:00Z",
            "updatedAt": "2024-05-02T12:01:00Z",
        },
        {
            "_id": "64f0c0ffee0000000000aa04",
            "repoName": "docs",
            "fullName": "ann/docs",
            "branchName": "main",
            "environment": "preview",
            "status": "queued",
            "createdAt": "2024-05-04T08:00:00Z",
            "updatedAt": "2024-05-04T08:00:00Z",
        },
    ]
