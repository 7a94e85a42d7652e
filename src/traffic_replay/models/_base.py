"""Base model for datafeed and capture records.

Every feed model inherits from :class:`ReplayBaseModel` which provides:

* frozen instances, so a batch received from one poll is never mutated
  downstream.
* ``extra="ignore"`` so new feed fields do not break validation.
* numeric values accepted for string fields (squawks, version keys).
* A ``model_validator(mode="before")`` that drops ``None`` values for
  fields that carry a default, letting sparse feed records validate.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator


def parse_feed_timestamp(value: Any) -> datetime:
    """Parse an RFC 3339 timestamp string into an aware UTC datetime.

    Naive datetimes are assumed to already be UTC.

    Raises
    ------
    ValueError
        If *value* is not a datetime or an ISO formatted string.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"unsupported timestamp value: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


UtcDatetime = Annotated[datetime, BeforeValidator(parse_feed_timestamp)]
"""Annotated type that coerces RFC 3339 strings to UTC datetimes."""


class ReplayBaseModel(BaseModel):
    """Base for immutable feed and capture records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_null_defaults(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            field = cls.model_fields.get(key)
            if value is None and field is not None and not field.is_required():
                continue
            cleaned[key] = value
        return cleaned
