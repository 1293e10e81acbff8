"""Full-screen timer UI for focus mode."""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from .engine import FocusEngine
from .state import FOCUS, DailyStats

KEY_HINTS = (
    "space start/pause  •  r reset  •  s skip break  •  "
    "a apply task  •  n refresh  •  +/- minutes  •  q quit"
)


def format_duration(seconds: int) -> str:
    """Render seconds as ``1h 05m`` or ``25m``."""
    minutes = max(0, int(seconds)) // 60
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


class TimerDisplay:
    """Builds the fullscreen timer layout from an engine's current state."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def create_layout(self, engine: FocusEngine, status_line: str = "") -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        if engine.mode == FOCUS:
            title, color = "FOCUS", "cyan"
        else:
            title, color = "BREAK", "green"
        if not engine.running:
            title += "  (paused)"
            color = "yellow"

        header_text = Text(f"🍅  {title}", style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))

        body = self._create_body_content(engine, status_line)
        layout["body"].update(Align.center(body, vertical="middle"))

        footer_text = Text(KEY_HINTS, style="dim", justify="center")
        layout["footer"].update(Align.center(footer_text, vertical="middle"))

        return layout

    def _create_body_content(self, engine: FocusEngine, status_line: str) -> Group:
        components = []

        task = engine.active_task
        if task is not None:
            components.append(Text(task.title[:50], style="bold white", justify="center"))
            components.append(Text(""))

        remaining = engine.remaining_sec
        if not engine.running:
            timer_color = "yellow"
        elif remaining < 60:
            timer_color = "red"
        else:
            timer_color = "cyan"
        components.append(
            Text(engine.state.formatted(), style=f"bold {timer_color}", justify="center")
        )
        components.append(Text(""))

        progress_pct = int(engine.state.progress() * 100)
        bar_width = 40
        filled = int(bar_width * progress_pct / 100)
        progress_bar = "▓" * filled + "░" * (bar_width - filled)
        components.append(
            Text(f"{progress_bar}  {progress_pct}%", style="dim", justify="center")
        )
        components.append(Text(""))

        components.append(self._stats_text(engine.today_stats()))

        upcoming = engine.next_task
        if upcoming is not None and upcoming is not engine.active_task:
            line = f"Next: {upcoming.title} ({round(upcoming.length_min)}m)"
            if upcoming.planned_start_iso:
                line += f" at {upcoming.planned_start_iso}"
            components.append(Text(line, style="magenta", justify="center"))
        if engine.autostart_pending:
            components.append(Text("Auto-start scheduled", style="magenta dim", justify="center"))

        if status_line:
            components.append(Text(status_line, style="dim italic", justify="center"))

        return Group(*components)

    @staticmethod
    def _stats_text(stats: DailyStats) -> Text:
        return Text(
            f"Today: {stats.pomodoros_completed} pomodoros  •  "
            f"{format_duration(stats.focus_seconds)} focused  •  "
            f"streak {stats.streak_count}d",
            style="white",
            justify="center",
        )


def show_exit_summary(engine: FocusEngine, console: Console | None = None) -> None:
    """Print today's totals after the timer closes."""
    console = console or Console()
    stats = engine.today_stats()

    lines = [
        "[bold]Focus mode closed[/bold]",
        "",
        f"Pomodoros today: {stats.pomodoros_completed}",
        f"Focus time today: {format_duration(stats.focus_seconds)}",
        f"Streak: {stats.streak_count} day(s)",
    ]
    if engine.session_in_flight:
        lines += ["", "[yellow]The unfinished countdown was not recorded.[/yellow]"]

    console.print(Panel("\n".join(lines), border_style="cyan", padding=(1, 2)))
