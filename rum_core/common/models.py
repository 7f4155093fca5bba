"""Pydantic model bases shared by every rum_core module.

FrozenModel and MutableModel are the default bases for internal data. WireModel is
the base for records that mirror the browser wire format: they accept both the
snake_case field names and their camelCase aliases on input, keep unknown keys,
and serialize through ``to_context()`` using the camelCase aliases so the
assembly stage applies one naming conversion to every layer.
"""

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class FrozenModel(BaseModel):
    """Base class for immutable pydantic models that prevent attribute mutation after construction."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=False,
    )


class MutableModel(BaseModel):
    """Base class for mutable pydantic models that allow attribute mutation after construction."""

    model_config = ConfigDict(
        frozen=False,
        extra="forbid",
        arbitrary_types_allowed=False,
    )


class WireModel(BaseModel):
    """Immutable record in the collector's camelCase wire vocabulary."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_context(self) -> dict[str, Any]:
        """Dump to a fresh dict keyed by wire (camelCase) names, dropping unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)
