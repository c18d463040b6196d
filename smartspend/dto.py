# smartspend/dto.py
# Base classes for the DTOs mirrored from the API (Mongo "_id", camelCase keys).

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _to_date(value):
    """Accept '2025-03-01', '2025-03-01T00:00:00.000Z', date or datetime."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    return value


ApiDate = Annotated[date, BeforeValidator(_to_date)]
OptionalApiDate = Annotated[Optional[date], BeforeValidator(_to_date)]


class ApiModel(BaseModel):
    """Snake_case fields in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ApiDocument(ApiModel):
    """A stored API record: carries the Mongo id."""

    id: str = Field(alias="_id")

    @classmethod
    def parse_list(cls, items):
        return [cls.model_validate(item) for item in items or []]
