"""Next-task candidate exchanged between the proxy and the timer."""

from __future__ import annotations

from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lifeforge_cli.utils.durations import coerce_minutes

DEFAULT_LENGTH_MIN = 25


class NextTask(BaseModel):
    """A task the timer can adopt.

    Serialized with camelCase keys (``plannedStartISO``) on the wire; the
    Python attributes are snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    title: str = "Untitled"
    planned_start_iso: str | None = Field(default=None, alias="plannedStartISO")
    planned_end_iso: str | None = Field(default=None, alias="plannedEndISO")
    length_min: float = Field(default=DEFAULT_LENGTH_MIN, alias="lengthMin")

    @field_validator("length_min", mode="before")
    @classmethod
    def _default_length(cls, v: object) -> float:
        """Missing, zero or non-numeric lengths fall back to the default."""
        minutes = coerce_minutes(v)
        if not minutes:
            return DEFAULT_LENGTH_MIN
        return minutes

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, v: object) -> str:
        if not v or not isinstance(v, str):
            return "Untitled"
        return v

    def planned_start(self) -> datetime | None:
        """Parse ``planned_start_iso`` as an aware datetime (local time if naive)."""
        return parse_iso(self.planned_start_iso)

    def to_wire(self) -> dict:
        """Dump using the camelCase wire keys."""
        return self.model_dump(by_alias=True)


def parse_iso(value: str | None) -> datetime | None:
    """
    Parse an ISO 8601 date or datetime string.

    Date-only values (``2026-10-19``) become local midnight of that day; naive
    datetimes are interpreted in local time. Unparseable input yields None.
    """
    if not value or not isinstance(value, str):
        return None

    try:
        if is_date_only(value):
            parsed = datetime.combine(date.fromisoformat(value), time.min)
        else:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def is_date_only(value: str | None) -> bool:
    """True for ``YYYY-MM-DD`` strings without a time component."""
    return isinstance(value, str) and len(value) == 10
