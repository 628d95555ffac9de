"""Tests for logging configuration and view context."""

import httpx
import pytest
import structlog

from deploy_console.utils.logging import bind_view, configure_logging
from deploy_console.workflows.verification import SendCodeWorkflow


def test_context_is_merged_into_every_event(settings):
    configure_logging(settings)

    processors = structlog.get_config()["processors"]
    assert processors[0] is structlog.contextvars.merge_contextvars


def test_bind_view_is_scoped():
    with bind_view("dashboard"):
        assert structlog.contextvars.get_contextvars()["view"] == "dashboard"

    assert "view" not in structlog.contextvars.get_contextvars()


@pytest.mark.asyncio
async def test_requests_carry_the_view_name(view_kwargs: dict, backend):
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(structlog.contextvars.get_contextvars())
        return httpx.Response(200, json={"success": True})

    backend.routes[("POST", "/auth/send-otp")] = handler
    view = SendCodeWorkflow(**view_kwargs)

    async with view.mounted_at():
        assert await view.request_code("b@x.com") is True

    assert len(seen) == 1
    assert seen[0]["view"] == "send_code"
    assert "view" not in structlog.contextvars.get_contextvars()
