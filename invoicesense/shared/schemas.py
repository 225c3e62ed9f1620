"""Shared Pydantic schemas for API responses."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the dashboard.

    Accepts both snake_case and camelCase on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


T = TypeVar("T")


class ApiEnvelope(CamelModel, Generic[T]):
    """Standard success envelope returned by every data endpoint."""

    success: bool = Field(True, description="Always true for successful responses")
    data: T = Field(..., description="Endpoint payload")
    message: str = Field("", description="Human-readable status message")
