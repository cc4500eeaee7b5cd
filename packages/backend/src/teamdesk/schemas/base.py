"""Shared Pydantic base for the public API.

Learn: The API speaks camelCase JSON (teamName, createdAt, dueDate)
while Python code and the database use snake_case. An alias generator
bridges the two: responses are serialized by alias, and requests are
accepted in either spelling (populate_by_name).

Unknown request fields are ignored, which is what keeps a client-sent
teamName or createdBy from ever reaching the service layer.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }

    @field_validator("*", mode="after")
    @classmethod
    def _assume_utc(cls, value):
        """SQLite hands timestamps back naive; all stored times are UTC."""
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
