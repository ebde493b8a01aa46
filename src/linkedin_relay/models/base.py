# ABOUTME: Shared pydantic base model for records that travel over the wire.
# ABOUTME: Serializes snake_case fields as camelCase JSON for webhook payloads.

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model whose JSON form uses camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready camelCase representation of this record."""
        return self.model_dump(by_alias=True, mode="json")
