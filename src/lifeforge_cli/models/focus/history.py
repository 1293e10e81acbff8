"""Focus session history kept as a capped, append-only JSON log."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any

from lifeforge_cli.adapters.json_store import JsonKeyValueStore

from .state import FOCUS, Session, TimerMode

logger = logging.getLogger(__name__)

SESSIONS_KEY = "lf_sessions"
MAX_SESSIONS = 500


class SessionLog:
    """Ordered session records, newest last, oldest evicted past the cap."""

    def __init__(
        self,
        store: JsonKeyValueStore,
        key: str = SESSIONS_KEY,
        max_entries: int = MAX_SESSIONS,
    ):
        self.store = store
        self.key = key
        self.max_entries = max_entries

    def _load_raw(self) -> list[dict[str, Any]]:
        data = self.store.get(self.key, [])
        if not isinstance(data, list):
            logger.warning("Session log under %r is not a list; starting over", self.key)
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    def append(self, session: Session) -> bool:
        """
        Append a session and evict the oldest entries beyond the cap.

        Returns:
            Whether the log was persisted
        """
        entries = self._load_raw()
        entries.append(session.to_dict())
        if len(entries) > self.max_entries:
            del entries[: len(entries) - self.max_entries]
        return self.store.set(self.key, entries)

    def entries(self) -> list[Session]:
        """All readable sessions, oldest first."""
        sessions = []
        for raw in self._load_raw():
            try:
                sessions.append(Session.from_dict(raw))
            except TypeError:
                logger.debug("Skipping malformed session entry: %r", raw)
        return sessions

    def __len__(self) -> int:
        return len(self._load_raw())

    def get_recent_sessions(
        self, limit: int = 20, mode: TimerMode | None = None
    ) -> list[Session]:
        """
        Get recent sessions, newest first.

        Args:
            limit: Maximum number of sessions to return
            mode: Only return sessions of this mode (focus or break)
        """
        sessions = [s for s in reversed(self.entries()) if mode is None or s.mode == mode]
        return sessions[:limit]

    def get_daily_summary(self, day: date | None = None) -> dict[str, Any]:
        """Focus totals for one calendar day (local time)."""
        if day is None:
            day = datetime.now().astimezone().date()

        focus = [
            s
            for s in self.entries()
            if s.mode == FOCUS and _local_day(s) == day
        ]
        total_seconds = sum(s.duration_sec for s in focus)
        return {
            "date": day.isoformat(),
            "total_sessions": len(focus),
            "total_seconds": total_seconds,
            "total_minutes": total_seconds // 60,
        }

    def get_focus_by_day(self) -> dict[str, int]:
        """Map of ISO day -> focus seconds across the whole log."""
        totals: dict[str, int] = defaultdict(int)
        for s in self.entries():
            if s.mode == FOCUS:
                day = _local_day(s)
                if day is not None:
                    totals[day.isoformat()] += s.duration_sec
        return dict(totals)


def _local_day(session: Session) -> date | None:
    try:
        return session.start_datetime.astimezone().date()
    except ValueError:
        return None
