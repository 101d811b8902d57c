"""Reusable, strict base models for sync estimation data."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    A base model that converts field names to camel case when serializing.

    For example, the field name `cache_tip_number` in a Python model will be
    represented as `cacheTipNumber` when it is serialized to JSON.

    Subscribers of published samples (a wallet UI, another process) expect
    the camel case shape, so every wire-facing model derives from this one.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump the model as a JSON-compatible dict keyed by camel case aliases."""
        return self.model_dump(mode="json", by_alias=True)


class StrictBaseModel(CamelModel):
    """A strict, immutable pydantic base model."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
        "strict": True,
    }
