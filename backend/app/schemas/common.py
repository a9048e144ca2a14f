"""Shared schema building blocks."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _require_iso_datetime(value: Any) -> Any:
    """
    Only ISO-8601 datetime strings (or datetime objects) count as timestamps.

    The string needs a date and a time joined by ``T``; numbers, numeric
    strings and date-only strings are rejected.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or "T" not in value:
        raise ValueError("must be an ISO-8601 datetime string")
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValueError("must be an ISO-8601 datetime string") from None


IsoDatetime = Annotated[datetime, BeforeValidator(_require_iso_datetime)]
"""Datetime that rejects unix timestamps, date-only strings and non-string inputs."""

Percentage = Annotated[float, Field(ge=0, le=100)]


class CamelModel(BaseModel):
    """Base for wire formats that use camelCase keys (reports, ideas, events)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
