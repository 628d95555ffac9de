"""Request logging hooks for the backend HTTP client."""

import time

import httpx

from deploy_console.utils.logging import get_logger

logger = get_logger(__name__)


class RequestLoggingHooks:
    """httpx event hooks that tag and log every request.

    Query strings and bodies are left out of the log: they carry OTPs,
    passwords and OAuth codes.
    """

    async def on_request(self, request: httpx.Request) -> None:
        request_id = request.headers.get("X-Request-ID")
        if not request_id:
            request_id = str(time.time_ns())
            request.headers["X-Request-ID"] = request_id
        request.extensions["start_time"] = time.perf_counter()

        logger.info(
            "request.started",
            method=request.method,
            path=request.url.path,
            request_id=request_id,
        )

    async def on_response(self, response: httpx.Response) -> None:
        request = response.request
        start_time = request.extensions.get("start_time", time.perf_counter())
        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "request.completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            request_id=request.headers.get("X-Request-ID"),
        )

    def as_event_hooks(self) -> dict[str, list]:
        return {"request": [self.on_request], "response": [self.on_response]}
