"""Route registry: which workflow serves which route."""

from collections.abc import Callable

from deploy_console.core.navigation import Route
from deploy_console.utils.logging import get_logger
from deploy_console.workflows.base import BaseWorkflow

logger = get_logger(__name__)

WorkflowFactory = Callable[[], BaseWorkflow]


class WorkflowRegistry:
    """Registry of workflow factories keyed by route."""

    def __init__(self):
        self._factories: dict[Route, WorkflowFactory] = {}

    def register(self, route: Route, factory: WorkflowFactory) -> None:
        """Register the factory for a route."""
        if route in self._factories:
            logger.warning("registry.overwrite", route=route.value)
        self._factories[route] = factory

    def get(self, route: Route | str) -> WorkflowFactory | None:
        """Get the factory for a route (or path)."""
        try:
            route = Route(route)
        except ValueError:
            return None
        return self._factories.get(route)

    def create(self, route: Route | str) -> BaseWorkflow | None:
        """Create a fresh workflow for a route."""
        factory = self.get(route)
        if factory:
            return factory()
        return None

    def list_routes(self) -> list[Route]:
        """List all registered routes."""
        return list(self._factories.keys())
