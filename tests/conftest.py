"""Shared test fixtures and configuration.

Provides a manually advanced scheduler for the focus engine and keeps
config, data and log files inside pytest's tmp_path.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from lifeforge_cli.adapters.json_store import JsonKeyValueStore
from lifeforge_cli.models.focus.engine import FocusEngine
from lifeforge_cli.models.focus.history import SessionLog
from lifeforge_cli.models.focus.stats import StatsStore

TZ = timezone(timedelta(hours=2))
START = datetime(2026, 10, 19, 9, 0, 0, tzinfo=TZ)


# ---------------------------------------------------------------------------
# Manual scheduler
# ---------------------------------------------------------------------------


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls advance()."""

    def __init__(self, start: datetime = START):
        self.current = start
        self._pending: list[tuple[datetime, int, FakeHandle, object]] = []
        self._seq = 0

    def now(self) -> datetime:
        return self.current

    def call_later(self, delay, callback) -> FakeHandle:
        handle = FakeHandle()
        self._seq += 1
        due = self.current + timedelta(seconds=max(0.0, delay))
        self._pending.append((due, self._seq, handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._pending if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in order."""
        target = self.current + timedelta(seconds=seconds)
        while True:
            due = [p for p in self._pending if not p[2].cancelled and p[0] <= target]
            if not due:
                break
            item = min(due, key=lambda p: (p[0], p[1]))
            self._pending.remove(item)
            self.current = max(self.current, item[0])
            item[3]()
        self._pending = [p for p in self._pending if not p[2].cancelled]
        self.current = target


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def store(tmp_path) -> JsonKeyValueStore:
    return JsonKeyValueStore(tmp_path / "data")


@pytest.fixture()
def session_log(store) -> SessionLog:
    return SessionLog(store)


@pytest.fixture()
def stats_store(store) -> StatsStore:
    return StatsStore(store)


@pytest.fixture()
def engine(scheduler, session_log, stats_store) -> FocusEngine:
    return FocusEngine(scheduler, session_log, stats_store, focus_minutes=25, break_minutes=5)


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Point the application log file at tmp_path and reset the singleton."""
    import lifeforge_cli.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("lifeforge_cli").handlers.clear()
    with patch("lifeforge_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield
    app_logger = logging.getLogger("lifeforge_cli")
    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    app_logger.propagate = True
    logger_mod._logger = None


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only and
    clears the lru_cache so each test gets a fresh service instance.
    """
    from lifeforge_cli.services.config_service import get_config_service

    get_config_service.cache_clear()
    with patch(
        "lifeforge_cli.services.config_service.user_config_dir",
        return_value=str(tmp_path / "config"),
    ):
        with patch(
            "lifeforge_cli.services.config_service.user_data_dir",
            return_value=str(tmp_path / "data"),
        ):
            yield get_config_service()
    get_config_service.cache_clear()
