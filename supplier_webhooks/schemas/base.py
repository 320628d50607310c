"""
Base schemas with common functionality.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict


class BaseSchema(BaseModel):
    """Base schema for all pipeline models.

    Attributes are snake_case in Python; JSON uses the camelCase names the
    supplier dashboard already consumes (``styleId``, ``receivedAt``...).
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-safe dict using camelCase keys"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
