"""Shared utilities used across features."""

from invoicesense.shared.schemas import ApiEnvelope, CamelModel

__all__ = [
    "ApiEnvelope",
    "CamelModel",
]
