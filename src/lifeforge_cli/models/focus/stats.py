"""Daily focus statistics and the consecutive-day streak."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from lifeforge_cli.adapters.json_store import JsonKeyValueStore

from .state import DailyStats

logger = logging.getLogger(__name__)

STATS_KEY = "lf_stats"


def next_streak(stats: DailyStats, today: date) -> int:
    """
    Streak value after completing a focus session on *today*.

    Same day as the last active day holds the streak (at least 1), the day
    after extends it by one, and any larger gap starts over at 1.
    """
    last_day = stats.last_active_day
    if last_day == today.isoformat():
        return stats.streak_count or 1
    if last_day == (today - timedelta(days=1)).isoformat():
        return (stats.streak_count or 0) + 1
    return 1


def record_focus_completion(
    stats: DailyStats, today: date, focus_seconds: int
) -> DailyStats:
    """Return new stats with one more pomodoro and *focus_seconds* added."""
    current = stats.rolled_over(today)
    return DailyStats(
        date_key=today.isoformat(),
        pomodoros_completed=current.pomodoros_completed + 1,
        focus_seconds=current.focus_seconds + max(0, int(focus_seconds)),
        streak_count=next_streak(stats, today),
        last_active_day=today.isoformat(),
    )


class StatsStore:
    """Loads and saves DailyStats under a fixed key."""

    def __init__(self, store: JsonKeyValueStore, key: str = STATS_KEY):
        self.store = store
        self.key = key

    def load(self, today: date) -> DailyStats:
        """Load stats, rolled over to *today*. Corrupted data yields fresh stats."""
        data = self.store.get(self.key)
        if not isinstance(data, dict):
            return DailyStats.fresh(today)

        try:
            stats = DailyStats.from_dict(data)
        except TypeError as e:
            logger.warning("Discarding malformed stats record: %s", e)
            return DailyStats.fresh(today)

        return stats.rolled_over(today)

    def save(self, stats: DailyStats) -> bool:
        return self.store.set(self.key, stats.to_dict())
