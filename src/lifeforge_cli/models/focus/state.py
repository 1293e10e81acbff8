"""Timer, session and daily-stat records for focus mode."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime
from typing import Any, Literal

TimerMode = Literal["focus", "break"]

FOCUS: TimerMode = "focus"
BREAK: TimerMode = "break"


@dataclass
class TimerState:
    """Countdown state owned by a single FocusEngine."""

    mode: TimerMode
    remaining_sec: int
    total_sec: int
    running: bool = False

    @property
    def minutes(self) -> int:
        return self.remaining_sec // 60

    @property
    def seconds(self) -> int:
        return self.remaining_sec % 60

    def progress(self) -> float:
        """Fraction of the countdown already elapsed, between 0 and 1."""
        if self.total_sec <= 0:
            return 0.0
        return min(1.0, max(0.0, 1 - self.remaining_sec / self.total_sec))

    def formatted(self) -> str:
        """Remaining time as ``MM:SS`` (minutes may exceed two digits)."""
        return f"{self.minutes:02d}:{self.seconds:02d}"


@dataclass(frozen=True)
class Session:
    """A finished countdown as stored in the session log."""

    id: str
    mode: TimerMode
    start_time: str  # ISO 8601
    end_time: str  # ISO 8601
    duration_sec: int
    task_id: str | None = None
    task_label: str | None = None

    @property
    def start_datetime(self) -> datetime:
        return datetime.fromisoformat(self.start_time.replace("Z", "+00:00"))

    @property
    def end_datetime(self) -> datetime:
        return datetime.fromisoformat(self.end_time.replace("Z", "+00:00"))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def new_session_id() -> str:
    """Opaque unique identifier for a session."""
    return str(uuid.uuid4())


@dataclass
class DailyStats:
    """Today's counters plus the rolling day streak."""

    date_key: str  # YYYY-MM-DD
    pomodoros_completed: int = 0
    focus_seconds: int = 0
    streak_count: int = 0
    last_active_day: str | None = None

    @classmethod
    def fresh(cls, day: date) -> DailyStats:
        return cls(date_key=day.isoformat())

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyStats:
        """
        Create from dictionary, ignoring unknown keys.

        Counters that are missing, null or not numeric read as 0 and a
        non-string ``last_active_day`` reads as None. A record without a
        string ``date_key`` raises TypeError.
        """
        date_key = data.get("date_key")
        if not isinstance(date_key, str):
            raise TypeError(f"date_key must be a string, got {date_key!r}")
        last_day = data.get("last_active_day")
        return cls(
            date_key=date_key,
            pomodoros_completed=_count(data.get("pomodoros_completed")),
            focus_seconds=_count(data.get("focus_seconds")),
            streak_count=_count(data.get("streak_count")),
            last_active_day=last_day if isinstance(last_day, str) else None,
        )

    def rolled_over(self, day: date) -> DailyStats:
        """Return stats for *day*; today's counters restart when the day changed."""
        if self.date_key == day.isoformat():
            return self
        return DailyStats(
            date_key=day.isoformat(),
            streak_count=self.streak_count,
            last_active_day=self.last_active_day,
        )


def _count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass
class SessionDraft:
    """Identifier and start time captured when a fresh countdown first starts."""

    id: str = field(default_factory=new_session_id)
    started_at: datetime | None = None
