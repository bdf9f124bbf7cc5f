"""Shared pydantic base for every API schema."""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel, to_snake


class ApiSchema(BaseModel):
    """camelCase on the wire, snake_case in Python.

    Incoming keys are normalised first, so ``Name``, ``name`` and
    ``createdAt``/``created_at`` are all accepted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                to_snake(key) if isinstance(key, str) else key: value
                for key, value in data.items()
            }
        return data
