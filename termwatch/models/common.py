"""
Shared field types for the Beanie documents and API schemas.

All timestamps are stored as naive UTC datetimes. Clients may send ISO dates
("2024-06-01") or full date-times with an offset; both are normalized here so
range queries in the services compare like with like.
"""

import re
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from beanie import PydanticObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from termwatch.errors import InvalidUpdateError

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: Any) -> Any:
    """Accept ISO 8601 dates/date-times and return naive UTC datetimes."""
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return to_naive_utc(datetime.fromisoformat(text))
        except ValueError:
            raise ValueError(f"'{value}' is not a valid ISO 8601 date")
    # Let pydantic report anything else (numbers, dates) with its own message
    return value


def check_object_id(value: Any) -> Any:
    if value is None or not isinstance(value, str):
        return value
    if not OBJECT_ID_PATTERN.match(value):
        raise ValueError("must be a valid document id (24 hex characters)")
    return value


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
ObjectIdStr = Annotated[str, BeforeValidator(check_object_id)]


class CamelModel(BaseModel):
    """Base for request/response schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class RecordOut(CamelModel):
    """Common envelope fields for every stored record returned by the API."""

    id: PydanticObjectId = Field(serialization_alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def drop_empty_strings(data: Any, fields: tuple[str, ...]) -> Any:
    """
    Remove optional fields sent as "" (or null) so they are stored as absent.
    Works on raw payload dicts before validation; accepts camelCase or snake_case keys.
    """
    if not isinstance(data, dict):
        return data
    cleaned = dict(data)
    for name in fields:
        for key in (name, to_camel(name)):
            if key in cleaned and cleaned[key] in ("", None):
                del cleaned[key]
    return cleaned


def apply_changes(record: BaseModel, changes: dict) -> None:
    """
    Validate the record as it will look after the merge, then set only the
    changed fields on it, so state management persists just those with $set.
    """
    try:
        merged = type(record).model_validate(
            {**record.model_dump(exclude={"id", "revision_id"}), **changes}
        )
    except ValidationError as e:
        raise InvalidUpdateError(e.errors()) from e
    for key in changes:
        setattr(record, key, getattr(merged, key))
