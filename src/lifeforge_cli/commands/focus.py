"""Interactive full-screen Pomodoro timer."""

import asyncio
import contextlib

import typer
from rich.live import Live

from lifeforge_cli.models.focus.engine import FocusEngine
from lifeforge_cli.models.focus.keyboard import KeyReader
from lifeforge_cli.models.focus.scheduler import AsyncioScheduler
from lifeforge_cli.models.focus.ui import TimerDisplay, show_exit_summary
from lifeforge_cli.services.api.client import ProxyClient
from lifeforge_cli.services.config_service import get_config_service
from lifeforge_cli.utils.ui.console import get_console

console = get_console()


class FocusController:
    """Maps key presses to engine actions and owns the next-task request."""

    def __init__(self, engine: FocusEngine, client: ProxyClient | None = None):
        self.engine = engine
        self.client = client
        self.status = ""
        self._refresh_task: asyncio.Task | None = None

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def refresh_next_task(self) -> bool:
        """Start fetching the next task; False if disabled or already fetching."""
        if self.client is None or self.refresh_in_flight:
            return False
        self.status = "Fetching next task…"
        self._refresh_task = asyncio.create_task(self._refresh())
        return True

    async def _refresh(self) -> None:
        candidate = await self.client.fetch_next_task_or_none()
        self.engine.set_next_task(candidate)
        if candidate is None:
            self.status = "No upcoming task"
        else:
            self.status = f"Next task: {candidate.title} (press 'a' to apply)"

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False when the user asked to quit."""
        engine = self.engine
        if key in (" ", "p"):
            engine.toggle()
        elif key == "r":
            engine.reset()
        elif key == "s":
            engine.skip_break()
        elif key == "a":
            if engine.next_task is None:
                self.status = "No task to apply"
            else:
                engine.apply_task(engine.next_task)
                self.status = f"Applied: {engine.next_task.title}"
        elif key == "n":
            self.refresh_next_task()
        elif key in ("+", "="):
            engine.edit_duration(engine.state.minutes + 1)
        elif key in ("-", "_"):
            engine.edit_duration(engine.state.minutes - 1)
        elif key == "q":
            return False
        return True

    async def close(self) -> None:
        """Cancel the outstanding request and stop every engine timer."""
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._refresh_task
        self.engine.shutdown()
        if self.client is not None:
            await self.client.close()


async def run_focus(
    controller: FocusController,
    display: TimerDisplay,
    refresh_per_second: int = 4,
) -> None:
    """Drive the display and keyboard until the user quits."""
    engine = controller.engine
    try:
        with KeyReader() as keys, Live(
            display.create_layout(engine),
            console=display.console,
            refresh_per_second=refresh_per_second,
            screen=True,
        ) as live:
            controller.refresh_next_task()
            while all(controller.handle_key(key) for key in keys.poll()):
                live.update(display.create_layout(engine, controller.status))
                await asyncio.sleep(1 / refresh_per_second)
    finally:
        await controller.close()


def focus(
    focus_minutes: int | None = typer.Option(
        None, "--focus", "-f", min=1, max=999, help="Focus length in minutes"
    ),
    break_minutes: int | None = typer.Option(
        None, "--break", "-b", min=1, max=999, help="Break length in minutes"
    ),
    fetch: bool | None = typer.Option(
        None, "--fetch/--no-fetch", help="Ask the task proxy for the next task"
    ),
    auto_start: bool = typer.Option(
        False, "--start", help="Start the first countdown immediately"
    ),
) -> None:
    """Run the full-screen focus timer."""
    config_service = get_config_service()
    config = config_service.config
    if focus_minutes is not None:
        config = config.model_copy(
            update={"timer": config.timer.model_copy(update={"focus_minutes": focus_minutes})}
        )
    if break_minutes is not None:
        config = config.model_copy(
            update={"timer": config.timer.model_copy(update={"break_minutes": break_minutes})}
        )
    if fetch is None:
        fetch = config.proxy.fetch_on_start
    screen = get_console(color=config.output.color)

    async def _run() -> FocusEngine:
        engine = FocusEngine.from_config(
            config, config_service.storage_dir, AsyncioScheduler()
        )
        if config.timer.bell_on_mode_end:
            engine.add_listener(lambda event: screen.bell() if event == "mode_end" else None)
        client = ProxyClient(config.proxy.endpoint, config.proxy.timeout) if fetch else None
        controller = FocusController(engine, client)
        if auto_start:
            engine.start()
        await run_focus(controller, TimerDisplay(screen), config.output.refresh_per_second)
        return engine

    try:
        engine = asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Focus mode interrupted[/yellow]")
        return

    show_exit_summary(engine, screen)
