"""Core infrastructure: config, logging, middleware, exceptions."""

from invoicesense.core.config import Settings, get_settings
from invoicesense.core.logging import get_logger, request_id_ctx

__all__ = [
    "Settings",
    "get_logger",
    "get_settings",
    "request_id_ctx",
]
