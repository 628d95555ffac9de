"""Custom exceptions for the deployment console."""

from typing import Any


class DeployConsoleError(Exception):
    """Base exception for the deployment console."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DeployConsoleError):
    """Input rejected locally, before any request is made."""

    pass


class TransportError(DeployConsoleError):
    """Request failed to complete or returned an unreadable body."""

    def __init__(self, message: str, method: str | None = None, path: str | None = None):
        details = {}
        if method:
            details["method"] = method
        if path:
            details["path"] = path
        super().__init__(message, details)


class ServerError(DeployConsoleError):
    """Backend reported a failure.

    ``server_message`` is the backend's own text, if it sent one. Callers
    show it verbatim and fall back to their own wording when it is ``None``.
    """

    def __init__(
        self,
        server_message: str | None,
        status_code: int | None = None,
        path: str | None = None,
    ):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if path:
            details["path"] = path
        super().__init__(server_message or "Request failed", details)
        self.server_message = server_message
        self.status_code = status_code


class FatalStateError(DeployConsoleError):
    """Local state is unusable; the flow has to be restarted."""

    pass


class SignupDraftMissingError(FatalStateError):
    """The stored signup draft is gone."""

    def __init__(self):
        super().__init__("Signup data not found. Please start over.")


class ViewClosedError(DeployConsoleError):
    """The owning view was torn down while work was pending."""

    def __init__(self, view: str):
        super().__init__(f"View closed: {view}", {"view": view})
        self.view = view
