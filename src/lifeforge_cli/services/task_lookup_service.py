"""Pick the next scheduled task from a Notion database.

Selection policy:

1. Pages whose date property is on or after *now*, ascending; the first wins.
2. Otherwise the first of the earliest pages (ascending, no filter) whose
   start is today or later. Date-only starts count as the whole day, so a
   task dated today still qualifies after midnight has passed.

Length precedence, first match wins:

1. Number property (rounded, at least 1 minute)
2. Duration label in a select / multi-select / rich-text property ("1h 30m")
3. End minus start, when both are datetimes
4. 25 minutes
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from lifeforge_cli.models.task import DEFAULT_LENGTH_MIN, NextTask, is_date_only, parse_iso
from lifeforge_cli.utils.durations import parse_duration_label, round_half_up

from .notion.client import NotionClientProtocol
from .notion.models import NotionPage

logger = logging.getLogger(__name__)

DATE_PROPERTY = "Date & Time"
LENGTH_PROPERTY = "Time Estimate"
TITLE_PROPERTY = "Name"

UPCOMING_PAGE_SIZE = 5
FALLBACK_PAGE_SIZE = 10


def derive_length_minutes(
    page: NotionPage,
    length_property: str = LENGTH_PROPERTY,
    start_iso: str | None = None,
    end_iso: str | None = None,
) -> int:
    """Resolve a task's length in minutes using the documented precedence."""
    number = page.number(length_property)
    if number is not None:
        return max(1, round_half_up(number))

    parsed = parse_duration_label(page.label(length_property))
    if parsed is not None:
        return parsed

    if start_iso and end_iso and not is_date_only(start_iso) and not is_date_only(end_iso):
        start, end = parse_iso(start_iso), parse_iso(end_iso)
        if start is not None and end is not None:
            minutes = round_half_up((end - start).total_seconds() / 60)
            if minutes > 0:
                return minutes

    return DEFAULT_LENGTH_MIN


def starts_today_or_later(start_iso: str | None, now: datetime) -> bool:
    """Whether a page start is still relevant at *now*."""
    start = parse_iso(start_iso)
    if start is None:
        return False
    if is_date_only(start_iso):
        return start.date() >= now.astimezone().date()
    return start >= now


class TaskLookupService:
    """Queries Notion and normalizes the earliest upcoming page into a NextTask."""

    def __init__(
        self,
        client: NotionClientProtocol,
        database_id: str,
        *,
        date_property: str = DATE_PROPERTY,
        length_property: str = LENGTH_PROPERTY,
        title_property: str = TITLE_PROPERTY,
    ):
        self.client = client
        self.database_id = database_id
        self.date_property = date_property
        self.length_property = length_property
        self.title_property = title_property

    def _sorts(self) -> list[dict[str, Any]]:
        return [{"property": self.date_property, "direction": "ascending"}]

    async def query_upcoming_raw(
        self, now: datetime, page_size: int = UPCOMING_PAGE_SIZE
    ) -> dict[str, Any]:
        """Raw query result for pages dated on or after *now*."""
        return await self.client.query_database(
            self.database_id,
            filter={
                "property": self.date_property,
                "date": {"on_or_after": now.isoformat()},
            },
            sorts=self._sorts(),
            page_size=page_size,
        )

    async def next_task(self, now: datetime | None = None) -> NextTask | None:
        """
        Return the earliest task scheduled now-or-later, or None.

        Raises:
            NotionAPIError: If Notion rejects or cannot serve a query
        """
        if now is None:
            now = datetime.now(timezone.utc)

        page = await self._find_upcoming(now)
        if page is None:
            page = await self._find_fallback(now)
        if page is None:
            logger.info("No upcoming task in database %s", self.database_id)
            return None

        return self.to_candidate(page)

    async def _find_upcoming(self, now: datetime) -> NotionPage | None:
        result = await self.query_upcoming_raw(now)
        pages = _pages(result)
        return pages[0] if pages else None

    async def _find_fallback(self, now: datetime) -> NotionPage | None:
        result = await self.client.query_database(
            self.database_id,
            sorts=self._sorts(),
            page_size=FALLBACK_PAGE_SIZE,
        )
        for page in _pages(result):
            start_iso, _ = page.dates(self.date_property)
            if starts_today_or_later(start_iso, now):
                return page
        return None

    def to_candidate(self, page: NotionPage) -> NextTask:
        """Normalize a page into the wire candidate shape."""
        start_iso, end_iso = page.dates(self.date_property)
        length_min = derive_length_minutes(page, self.length_property, start_iso, end_iso)

        planned_end_iso = end_iso
        if planned_end_iso is None:
            start = parse_iso(start_iso)
            if start is not None:
                planned_end_iso = (start + timedelta(minutes=length_min)).isoformat()

        return NextTask(
            id=page.id,
            title=page.title(self.title_property) or "Untitled",
            planned_start_iso=start_iso,
            planned_end_iso=planned_end_iso,
            length_min=length_min,
        )


def _pages(result: dict[str, Any]) -> list[NotionPage]:
    pages = []
    for raw in result.get("results") or []:
        if isinstance(raw, dict) and raw.get("id"):
            pages.append(NotionPage.model_validate(raw))
    return pages
