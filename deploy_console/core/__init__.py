"""Core primitives for the deployment console."""

from deploy_console.core.events import Event, EventBus
from deploy_console.core.exceptions import (
    DeployConsoleError,
    FatalStateError,
    ServerError,
    SignupDraftMissingError,
    TransportError,
    ValidationError,
    ViewClosedError,
)
from deploy_console.core.navigation import Location, Navigator, Route
from deploy_console.core.session import AuthContext, SignupDraftStore
from deploy_console.core.storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "DeployConsoleError",
    "FatalStateError",
    "ServerError",
    "SignupDraftMissingError",
    "TransportError",
    "ValidationError",
    "ViewClosedError",
    "Event",
    "EventBus",
    "Location",
    "Navigator",
    "Route",
    "AuthContext",
    "SignupDraftStore",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
]
