"""Console entry point: wires settings, storage, the API client and the views."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx

from deploy_console import __version__
from deploy_console.api.client import BackendClient
from deploy_console.config import Settings, settings as default_settings
from deploy_console.core.events import EventBus
from deploy_console.core.navigation import Location, Navigator, Route
from deploy_console.core.session import AuthContext, SignupDraftStore
from deploy_console.core.storage import JsonFileStore, KeyValueStore
from deploy_console.utils.logging import configure_logging, get_logger
from deploy_console.workflows import (
    BaseWorkflow,
    DeploymentMonitor,
    DeploymentSourceSelector,
    SendCodeWorkflow,
    SignupWorkflow,
    VerificationWorkflow,
    WorkflowRegistry,
)

logger = get_logger(__name__)


class Console:
    """Everything the views share: settings, session, navigation and the API client."""

    def __init__(
        self,
        settings: Settings,
        store: KeyValueStore,
        client: BackendClient,
        events: EventBus,
        navigator: Navigator,
    ):
        self.settings = settings
        self.store = store
        self.client = client
        self.auth = client.auth
        self.drafts = SignupDraftStore(store)
        self.events = events
        self.navigator = navigator
        self.registry = WorkflowRegistry()
        self._register_routes()

    def _view_kwargs(self) -> dict:
        return {
            "client": self.client,
            "auth": self.auth,
            "navigator": self.navigator,
            "settings": self.settings,
            "events": self.events,
        }

    def _register_routes(self) -> None:
        self.registry.register(
            Route.SIGN_UP, lambda: SignupWorkflow(drafts=self.drafts, **self._view_kwargs())
        )
        self.registry.register(
            Route.SEND_OTP, lambda: SendCodeWorkflow(**self._view_kwargs())
        )
        self.registry.register(
            Route.VERIFY_OTP, lambda: VerificationWorkflow(**self._view_kwargs())
        )
        self.registry.register(
            Route.DEPLOY, lambda: DeploymentSourceSelector(**self._view_kwargs())
        )
        self.registry.register(
            Route.DASHBOARD, lambda: DeploymentMonitor(**self._view_kwargs())
        )

    async def open(self, location: Location | str) -> BaseWorkflow:
        """Create and mount the view for a location.

        Raises:
            LookupError: No view is registered for the path.
        """
        if isinstance(location, str):
            location = Location.from_url(location)
        view = self.registry.create(location.path)
        if view is None:
            raise LookupError(f"No view registered for {location.path}")
        await view.mount(location)
        return view

    async def aclose(self) -> None:
        await self.client.aclose()


def create_console(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    events: EventBus | None = None,
) -> Console:
    """Create and configure the console."""
    settings = settings or default_settings
    store = store if store is not None else JsonFileStore(settings.storage_path)
    events = events or EventBus()

    client = BackendClient(
        settings.api_base_url,
        AuthContext(store),
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )
    return Console(
        settings=settings,
        store=store,
        client=client,
        events=events,
        navigator=Navigator(events),
    )


@asynccontextmanager
async def lifespan(console: Console) -> AsyncGenerator[Console, None]:
    """Console lifespan handler."""
    # Startup
    configure_logging(console.settings)
    logger.info(
        "console.starting",
        version=__version__,
        environment=console.settings.app_env,
        api_base_url=console.settings.api_base_url,
    )

    try:
        yield console
    finally:
        # Shutdown
        await console.aclose()
        logger.info("console.shutdown")


async def watch_dashboard(console: Console) -> None:
    """Keep the dashboard open and log its stats after every refresh."""
    if not console.auth.is_authenticated:
        logger.error("console.not_authenticated", hint="sign up or verify first")
        return

    queue = console.events.subscribe()
    view = await console.open(Route.DASHBOARD.value)
    try:
        while True:
            event = await queue.get()
            if event.event_type == "deployments_refreshed":
                logger.info("dashboard.stats", **event.data["stats"])
    finally:
        console.events.unsubscribe(queue)
        await view.teardown()


async def _main() -> None:
    async with lifespan(create_console()) as console:
        await watch_dashboard(console)


def run() -> None:
    """Run the dashboard watcher until interrupted."""
    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        logger.info("console.interrupted")


if __name__ == "__main__":
    run()
