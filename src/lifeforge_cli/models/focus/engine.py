"""Pomodoro state machine: countdown, focus/break switching and session recording.

A FocusEngine owns one TimerState and the day's DailyStats. It is driven by
user actions (start, pause, reset, skip_break, apply_task, edit_duration)
and by a 1 Hz tick that it schedules on its own Scheduler while running.
Persistence happens only when a countdown finishes: every finished
countdown is appended to the SessionLog, and finished focus countdowns also
update and save the DailyStats.

None of the public operations raise on bad input; out-of-range values are
clamped and unusable ones are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from lifeforge_cli.adapters.json_store import JsonKeyValueStore
from lifeforge_cli.models.config_models import AppConfig
from lifeforge_cli.models.task import DEFAULT_LENGTH_MIN, NextTask
from lifeforge_cli.utils.durations import coerce_minutes, round_half_up

from .history import SessionLog
from .scheduler import Scheduler, TimerHandle
from .state import (
    BREAK,
    FOCUS,
    DailyStats,
    Session,
    SessionDraft,
    TimerMode,
    TimerState,
    new_session_id,
)
from .stats import StatsStore, record_focus_completion

logger = logging.getLogger(__name__)

MIN_MINUTES = 1
MAX_MINUTES = 999
MIN_TASK_SECONDS = 60
TICK_INTERVAL = 1.0

EngineListener = Callable[[str], None]


def clamp_minutes(value: float) -> int:
    """Clamp to the editable range and drop any fractional minute."""
    return int(min(MAX_MINUTES, max(MIN_MINUTES, value)))


class FocusEngine:
    """Owns the countdown, the in-flight session and today's stats."""

    def __init__(
        self,
        scheduler: Scheduler,
        session_log: SessionLog,
        stats_store: StatsStore,
        focus_minutes: int = 25,
        break_minutes: int = 5,
    ):
        self.scheduler = scheduler
        self.session_log = session_log
        self.stats_store = stats_store
        self.focus_sec = clamp_minutes(focus_minutes) * 60
        self.break_sec = clamp_minutes(break_minutes) * 60

        self.state = TimerState(
            mode=FOCUS, remaining_sec=self.focus_sec, total_sec=self.focus_sec
        )
        self.stats: DailyStats = stats_store.load(scheduler.now().date())

        self.next_task: NextTask | None = None
        self.active_task: NextTask | None = None
        self.last_session: Session | None = None

        self._draft: SessionDraft | None = None
        self._end_armed = True
        self._tick_handle: TimerHandle | None = None
        self._autostart_handle: TimerHandle | None = None
        self._listeners: list[EngineListener] = []
        self._closed = False

    @classmethod
    def from_config(
        cls, config: AppConfig, storage_dir: Path, scheduler: Scheduler
    ) -> FocusEngine:
        """Build an engine with JSON stores under *storage_dir*."""
        store = JsonKeyValueStore(storage_dir)
        return cls(
            scheduler=scheduler,
            session_log=SessionLog(store, max_entries=config.storage.max_sessions),
            stats_store=StatsStore(store),
            focus_minutes=config.timer.focus_minutes,
            break_minutes=config.timer.break_minutes,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def mode(self) -> TimerMode:
        return self.state.mode

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def remaining_sec(self) -> int:
        return self.state.remaining_sec

    @property
    def total_sec(self) -> int:
        return self.state.total_sec

    @property
    def autostart_pending(self) -> bool:
        return self._autostart_handle is not None

    @property
    def session_in_flight(self) -> bool:
        return self._draft is not None

    def today_stats(self) -> DailyStats:
        """Stats as of the scheduler's current day."""
        return self.stats.rolled_over(self.scheduler.now().date())

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: EngineListener) -> None:
        """Register a callback invoked with an event name after each change."""
        self._listeners.append(listener)

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start (or resume) the countdown."""
        if self._closed or self.state.running:
            return

        self._cancel_autostart()
        if self._draft is None:
            self._draft = SessionDraft(started_at=self.scheduler.now())
            logger.debug("Session %s started (%s)", self._draft.id, self.state.mode)

        self.state.running = True
        self._schedule_tick()
        self._emit("started")

    def pause(self) -> None:
        """Pause the countdown, keeping the in-flight session."""
        if not self.state.running:
            return
        self.state.running = False
        self._cancel_tick()
        self._emit("paused")

    def toggle(self) -> None:
        """Start when paused, pause when running."""
        if self.state.running:
            self.pause()
        else:
            self.start()

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self.state.running:
            return

        if self.state.remaining_sec > 0:
            self.state.remaining_sec -= 1
        self._emit("tick")

        if self.state.remaining_sec == 0:
            self._finish_countdown()

    def reset(self) -> None:
        """Stop and restore the current mode's configured length, dropping the session."""
        self._cancel_autostart()
        self._draft = None
        self._enter(self.state.mode, self._configured_sec(self.state.mode))
        self._emit("reset")

    def skip_break(self) -> None:
        """Abandon a break and go straight back to focus. No-op during focus."""
        if self.state.mode != BREAK:
            return
        self._cancel_autostart()
        self._draft = None
        self._enter(FOCUS, self.focus_sec)
        self._emit("break_skipped")

    def set_next_task(self, candidate: NextTask | None) -> None:
        """Remember the latest candidate offered by the task proxy."""
        self.next_task = candidate
        self._emit("next_task")

    def apply_task(self, candidate: NextTask | dict[str, Any] | None = None) -> None:
        """
        Adopt a task's length and optionally schedule its auto-start.

        Forces focus mode with ``max(60, round(lengthMin) * 60)`` seconds and
        stops the countdown. A task with a planned start gets a one-shot
        auto-start at that time (right away if it is already past); applying
        another task cancels any pending auto-start first.

        Args:
            candidate: The task to adopt; defaults to the last offered one
        """
        if candidate is None:
            candidate = self.next_task
        if candidate is None:
            return
        if not isinstance(candidate, NextTask):
            try:
                candidate = NextTask.model_validate(candidate)
            except ValidationError as e:
                logger.debug("Ignoring malformed task candidate: %s", e)
                return

        minutes = coerce_minutes(candidate.length_min) or DEFAULT_LENGTH_MIN
        seconds = max(MIN_TASK_SECONDS, round_half_up(minutes) * 60)

        self._cancel_autostart()
        self._draft = None
        self.next_task = candidate
        self.active_task = candidate
        self._enter(FOCUS, seconds)

        planned = candidate.planned_start()
        if planned is not None:
            delay = max(0.0, (planned - self.scheduler.now()).total_seconds())
            self._autostart_handle = self.scheduler.call_later(delay, self._on_autostart)
            logger.info("Auto-start for %r scheduled in %.0fs", candidate.title, delay)

        self._emit("task_applied")

    def edit_duration(self, minutes: object) -> None:
        """
        Change the countdown to *minutes* while keeping the current seconds.

        Minutes are clamped to [1, 999]; non-numeric input is ignored. The
        zero-crossing guard is re-armed because the total changed.
        """
        value = coerce_minutes(minutes)
        if value is None:
            logger.debug("Ignoring duration edit: %r", minutes)
            return

        new_total = clamp_minutes(value) * 60 + self.state.seconds
        self.state.total_sec = new_total
        self.state.remaining_sec = new_total
        self._end_armed = True
        self._emit("duration_edited")

    def shutdown(self) -> None:
        """Stop all timers. The in-flight session, if any, is not recorded."""
        self._cancel_tick()
        self._cancel_autostart()
        self.state.running = False
        self._closed = True
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _configured_sec(self, mode: TimerMode) -> int:
        return self.focus_sec if mode == FOCUS else self.break_sec

    def _enter(self, mode: TimerMode, total_sec: int) -> None:
        """Begin a new countdown epoch, stopped, with the end guard armed."""
        self._cancel_tick()
        self.state.running = False
        self.state.mode = mode
        self.state.total_sec = total_sec
        self.state.remaining_sec = total_sec
        self._end_armed = True

    def _finish_countdown(self) -> None:
        if not self._end_armed:
            return
        self._end_armed = False
        self.state.running = False
        self._cancel_tick()

        ended_at = self.scheduler.now()
        draft = self._draft
        if draft is not None and draft.started_at is not None:
            started_at = draft.started_at
            elapsed = max(1, round((ended_at - started_at).total_seconds()))
        else:
            elapsed = self.state.total_sec
            started_at = ended_at - timedelta(seconds=elapsed)

        task = self.active_task
        session = Session(
            id=draft.id if draft is not None else new_session_id(),
            mode=self.state.mode,
            start_time=started_at.isoformat(),
            end_time=ended_at.isoformat(),
            duration_sec=elapsed,
            task_id=task.id if task else None,
            task_label=task.title if task else None,
        )
        self._draft = None
        self.last_session = session

        if not self.session_log.append(session):
            logger.warning("Session %s kept in memory only", session.id)

        if session.mode == FOCUS:
            self.stats = record_focus_completion(self.stats, ended_at.date(), elapsed)
            if not self.stats_store.save(self.stats):
                logger.warning("Daily stats kept in memory only")
            self._enter(BREAK, self.break_sec)
        else:
            self._enter(FOCUS, self.focus_sec)

        logger.info("%s session finished after %ss", session.mode, elapsed)
        self._emit("mode_end")

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        self._tick_handle = self.scheduler.call_later(TICK_INTERVAL, self._on_tick)

    def _on_tick(self) -> None:
        self._tick_handle = None
        if not self.state.running:
            return
        self.tick()
        if self.state.running:
            self._schedule_tick()

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _on_autostart(self) -> None:
        self._autostart_handle = None
        logger.info("Auto-starting planned task")
        self.start()

    def _cancel_autostart(self) -> None:
        if self._autostart_handle is not None:
            self._autostart_handle.cancel()
            self._autostart_handle = None
