"""
Shared Pydantic schemas used across multiple domains.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Optional


class CamelModel(BaseModel):
    """Base model that serializes field names in camelCase.

    Attribute access and construction keep the snake_case python names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        """Dumps the model with camelCase keys and JSON-safe values."""
        return self.model_dump(by_alias=True, mode="json")


class ApiResponse(BaseModel):
    """Envelope returned by every semantics endpoint.

    Attributes:
        success (bool): Whether the request produced a result.
        message (Optional[str]): Human-readable context (empty batches, failures).
        error (Optional[str]): Machine-readable error code on failure.
        data (Optional[Any]): The payload, null on failure.
    """

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    data: Optional[Any] = None
