"""
Shared Model Base

All snapshot and result models are immutable and accept both the
snake_case names used in Python and the camelCase names used by the
dashboard feeds.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class TransitModel(BaseModel):
    """Frozen base model with camelCase aliases"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True

    def to_dict(self) -> dict:
        """Convert to camelCase dictionary for the presentation layer"""
        return self.model_dump(mode="json", by_alias=True)
