"""Focus mode - Pomodoro timer engine for LifeForge CLI."""

from .engine import FocusEngine
from .history import SessionLog
from .scheduler import AsyncioScheduler, Scheduler, TimerHandle
from .state import BREAK, FOCUS, DailyStats, Session, TimerMode, TimerState
from .stats import StatsStore, next_streak, record_focus_completion

__all__ = [
    "BREAK",
    "FOCUS",
    "AsyncioScheduler",
    "DailyStats",
    "FocusEngine",
    "Scheduler",
    "Session",
    "SessionLog",
    "StatsStore",
    "TimerHandle",
    "TimerMode",
    "TimerState",
    "next_streak",
    "record_focus_completion",
]
