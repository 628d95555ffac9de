"""Routes, page locations and the navigator."""

from enum import Enum
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel, Field

from deploy_console.core.events import EventBus
from deploy_console.utils.logging import get_logger

logger = get_logger(__name__)


class Route(str, Enum):
    """Console routes."""

    SIGN_UP = "/"
    LOG_IN = "/login"
    DASHBOARD = "/dashboard"
    DEPLOY = "/deploy"
    PROJECT = "/project"
    SEND_OTP = "/send-otp"
    VERIFY_OTP = "/verify-otp"


class Location(BaseModel):
    """Where a view was opened: path, query parameters and navigation state."""

    path: str = Route.SIGN_UP.value
    query: dict[str, str] = Field(default_factory=dict)
    state: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_url(cls, url: str, state: dict[str, Any] | None = None) -> "Location":
        """Parse a URL such as ``/deploy?code=abc``.

        Repeated query parameters keep their first value.
        """
        parts = urlsplit(url)
        query: dict[str, str] = {}
        for key, value in parse_qsl(parts.query):
            query.setdefault(key, value)
        return cls(path=parts.path or Route.SIGN_UP.value, query=query, state=state or {})


class Navigator:
    """Records navigation requests and announces them on the event bus."""

    def __init__(self, events: EventBus | None = None):
        self.events = events
        self.history: list[Location] = []
        self.external_url: str | None = None

    @property
    def current(self) -> Location | None:
        return self.history[-1] if self.history else None

    def navigate(self, route: Route | str, state: dict[str, Any] | None = None) -> Location:
        """Navigate to a console route."""
        path = route.value if isinstance(route, Route) else route
        location = Location.from_url(path, state=state)
        self.history.append(location)
        logger.info("navigation.navigate", path=location.path)
        if self.events:
            self.events.publish_navigation(location.path, location.state)
        return location

    def redirect(self, url: str) -> None:
        """Leave the console for an external page."""
        self.external_url = url
        logger.info("navigation.redirect", url=url)
        if self.events:
            self.events.publish_navigation(url, external=True)
