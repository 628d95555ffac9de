"""Backend API client."""

from deploy_console.api.client import BackendClient
from deploy_console.api.middleware import RequestLoggingHooks

__all__ = ["BackendClient", "RequestLoggingHooks"]
