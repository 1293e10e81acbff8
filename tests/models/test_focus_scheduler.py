"""Tests for the asyncio-backed scheduler."""

from __future__ import annotations

import asyncio

import pytest

from lifeforge_cli.adapters.json_store import JsonKeyValueStore
from lifeforge_cli.models.focus.engine import FocusEngine
from lifeforge_cli.models.focus.history import SessionLog
from lifeforge_cli.models.focus.scheduler import AsyncioScheduler, Scheduler, TimerHandle
from lifeforge_cli.models.focus.stats import StatsStore


class TestAsyncioScheduler:
    def test_satisfies_protocol(self):
        assert isinstance(AsyncioScheduler(), Scheduler)

    def test_now_is_aware(self):
        assert AsyncioScheduler().now().tzinfo is not None

    @pytest.mark.asyncio
    async def test_call_later_fires(self):
        fired = asyncio.Event()
        handle = AsyncioScheduler().call_later(0.01, fired.set)

        assert isinstance(handle, TimerHandle)
        await asyncio.wait_for(fired.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_cancelled_callback_never_fires(self):
        calls: list[int] = []
        handle = AsyncioScheduler().call_later(0.01, lambda: calls.append(1))
        handle.cancel()
        handle.cancel()
        await asyncio.sleep(0.05)

        assert calls == []

    @pytest.mark.asyncio
    async def test_negative_delay_runs_soon(self):
        fired = asyncio.Event()
        AsyncioScheduler().call_later(-5, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1)


@pytest.mark.asyncio
async def test_engine_ticks_on_event_loop(tmp_path, monkeypatch):
    monkeypatch.setattr("lifeforge_cli.models.focus.engine.TICK_INTERVAL", 0.01)
    store = JsonKeyValueStore(tmp_path)
    engine = FocusEngine(AsyncioScheduler(), SessionLog(store), StatsStore(store))

    engine.start()
    await asyncio.sleep(0.1)
    engine.shutdown()
    remaining = engine.remaining_sec
    await asyncio.sleep(0.05)

    assert remaining < 1500
    assert engine.remaining_sec == remaining
