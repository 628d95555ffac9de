"""Event bus for workflow notifications (navigation, messages, refreshes)."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class Event:
    """A workflow event."""

    event_type: str
    data: dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class EventBus:
    """Fan-out bus: every subscriber queue receives every published event."""

    def __init__(self):
        self._subscribers: list[asyncio.Queue[Event]] = []

    def subscribe(self) -> asyncio.Queue[Event]:
        """Subscribe to all events."""
        queue: asyncio.Queue[Event] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[Event]) -> None:
        """Stop delivering events to a queue."""
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def publish(self, event: Event) -> None:
        """Publish an event to every subscriber."""
        for queue in self._subscribers:
            queue.put_nowait(event)

    def publish_navigation(
        self, path: str, state: dict[str, Any] | None = None, external: bool = False
    ) -> None:
        """Publish a navigation event."""
        self.publish(
            Event(
                event_type="navigation",
                data={"path": path, "state": state or {}, "external": external},
            )
        )

    def publish_message(self, view: str, kind: str, text: str) -> None:
        """Publish a user-visible message event."""
        self.publish(
            Event(event_type="message", data={"view": view, "kind": kind, "text": text})
        )

    def publish_deployments_refreshed(self, count: int, stats: dict[str, int]) -> None:
        """Publish a dashboard refresh event."""
        self.publish(
            Event(
                event_type="deployments_refreshed",
                data={"count": count, "stats": stats},
            )
        )
