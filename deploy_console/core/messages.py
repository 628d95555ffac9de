"""Transient user-visible messages."""

from typing import Literal

from pydantic import BaseModel

from deploy_console.core.events import EventBus
from deploy_console.core.timers import OneShotTimer

MessageKind = Literal["error", "success"]


class TransientMessage(BaseModel):
    text: str
    kind: MessageKind = "error"


class MessageBoard:
    """Holds the single message a view is showing and clears it after ``ttl`` seconds."""

    def __init__(
        self,
        view: str,
        timer: OneShotTimer,
        ttl: float = 5.0,
        events: EventBus | None = None,
    ):
        self.view = view
        self.ttl = ttl
        self.events = events
        self.current: TransientMessage | None = None
        self._timer = timer

    @property
    def error(self) -> str:
        if self.current and self.current.kind == "error":
            return self.current.text
        return ""

    @property
    def success(self) -> str:
        if self.current and self.current.kind == "success":
            return self.current.text
        return ""

    def show(self, text: str, kind: MessageKind = "error") -> None:
        """Show a message, replacing the current one and restarting its clock."""
        self.current = TransientMessage(text=text, kind=kind)
        if self.ttl > 0:
            self._timer.arm(self.ttl, self.clear)
        if self.events:
            self.events.publish_message(self.view, kind, text)

    def show_error(self, text: str) -> None:
        self.show(text, "error")

    def show_success(self, text: str) -> None:
        self.show(text, "success")

    def clear(self) -> None:
        """Dismiss the current message."""
        self.current = None
        self._timer.cancel()
