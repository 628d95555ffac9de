"""Base class for all workflow views."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from deploy_console.api.client import BackendClient
from deploy_console.config import Settings, settings as default_settings
from deploy_console.core.events import EventBus
from deploy_console.core.messages import MessageBoard
from deploy_console.core.navigation import Location, Navigator, Route
from deploy_console.core.session import AuthContext
from deploy_console.core.timers import TimerScope
from deploy_console.utils.logging import bind_view, get_logger

T = TypeVar("T")


class BaseWorkflow(ABC):
    """A view-scoped state machine that drives backend calls.

    Subclasses implement:
    - name: View identifier, used in logs and events
    - route: The route the view is mounted at
    - on_mount(): Work to do when the view opens (optional)

    Every request goes through ``_call`` so that ``teardown()`` can cancel it.
    Public operations catch errors at this boundary and turn them into a
    message on ``self.messages``; they return ``True`` on success.
    """

    def __init__(
        self,
        client: BackendClient,
        auth: AuthContext,
        navigator: Navigator,
        settings: Settings | None = None,
        events: EventBus | None = None,
    ):
        self.client = client
        self.auth = auth
        self.navigator = navigator
        self.settings = settings or default_settings
        self.events = events
        self.logger = get_logger(f"workflow.{self.name}")

        self.scope = TimerScope(self.name)
        self.messages = MessageBoard(
            self.name,
            self.scope.one_shot(),
            ttl=self.settings.message_ttl_seconds,
            events=events,
        )
        self.location: Location | None = None
        self.mounted = False

    @property
    @abstractmethod
    def name(self) -> str:
        """View name/identifier."""
        pass

    @property
    @abstractmethod
    def route(self) -> Route:
        """Route this view is mounted at."""
        pass

    @property
    def closed(self) -> bool:
        return self.scope.closed

    async def mount(self, location: Location | None = None) -> None:
        """Open the view at ``location``."""
        if self.mounted or self.closed:
            return
        self.location = location or Location(path=self.route.value)
        self.mounted = True
        self.logger.info("workflow.mounted", path=self.location.path)
        await self.on_mount(self.location)

    async def on_mount(self, location: Location) -> None:
        """Hook for view-specific startup work."""
        pass

    async def teardown(self) -> None:
        """Close the view, releasing its timers and in-flight requests."""
        if self.closed:
            return
        pending = self.scope.pending
        self.scope.close()
        self.mounted = False
        self.logger.info("workflow.torn_down", cancelled_requests=pending)

    @asynccontextmanager
    async def mounted_at(self, location: Location | None = None) -> AsyncIterator["BaseWorkflow"]:
        """Mount for the duration of a ``with`` block."""
        await self.mount(location)
        try:
            yield self
        finally:
            await self.teardown()

    async def _call(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a backend call owned by this view, tagging its logs with the view name."""
        with bind_view(self.name):
            return await self.scope.run(coro)
