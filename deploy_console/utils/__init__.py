"""Utility functions for the deployment console."""

from deploy_console.utils.logging import bind_view, configure_logging, get_logger

__all__ = [
    "bind_view",
    "configure_logging",
    "get_logger",
]
