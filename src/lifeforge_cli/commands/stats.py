"""Statistics and history commands for focus sessions."""

from datetime import timedelta

import typer
from rich.table import Table

from lifeforge_cli.models.focus.state import BREAK, FOCUS
from lifeforge_cli.models.focus.ui import format_duration

from .utils import console, get_session_log, get_stats_store, local_now


def render_progress_bar(value: float, max_value: float, width: int = 10) -> str:
    """Render a progress bar using block characters."""
    if max_value <= 0:
        ratio = 0.0
    else:
        ratio = min(value / max_value, 1.0)
    filled = int(ratio * width)
    return "█" * filled + "░" * (width - filled)


def show_stats(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format (pretty, json)"),
    days: int = typer.Option(7, "--days", "-d", min=1, help="Days of focus history to chart"),
) -> None:
    """Show today's pomodoros, focus time and streak."""
    now = local_now()
    stats = get_stats_store().load(now.date())
    session_log = get_session_log()
    by_day = session_log.get_focus_by_day()
    summary = session_log.get_daily_summary(now.date())

    if output == "json":
        console.print_json(
            data={
                "today": stats.to_dict(),
                "log_summary": summary,
                "focus_seconds_by_day": by_day,
            }
        )
        return

    console.print(f"\n[bold]🍅 Focus stats for {stats.date_key}[/bold]\n")
    console.print(f"Pomodoros completed: [green]{stats.pomodoros_completed}[/green]")
    console.print(f"Focus time: {format_duration(stats.focus_seconds)}")
    console.print(f"Streak: [cyan]{stats.streak_count}[/cyan] day(s)")
    console.print(f"[dim]Focus sessions in the log today: {summary['total_sessions']}[/dim]")
    if stats.last_active_day:
        console.print(f"[dim]Last active: {stats.last_active_day}[/dim]")

    recent_days = [(now.date() - timedelta(days=i)).isoformat() for i in range(days - 1, -1, -1)]
    peak = max((by_day.get(d, 0) for d in recent_days), default=0)
    if peak:
        console.print(f"\n[bold]Last {days} days[/bold]")
        for day in recent_days:
            seconds = by_day.get(day, 0)
            console.print(
                f"  {day}  {render_progress_bar(seconds, peak)}  {format_duration(seconds)}"
            )
    console.print()


def show_history(
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of sessions to show"),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Filter by mode: focus or break"),
    output: str = typer.Option("table", "--output", "-o", help="Output format (table, json)"),
) -> None:
    """Show recently finished sessions."""
    if mode is not None and mode not in (FOCUS, BREAK):
        console.print("[red]Invalid mode. Must be: focus or break[/red]")
        raise typer.Exit(2)

    sessions = get_session_log().get_recent_sessions(limit=limit, mode=mode)

    if output == "json":
        console.print_json(data=[s.to_dict() for s in sessions])
        return

    if not sessions:
        console.print("[yellow]No sessions recorded yet[/yellow]")
        return

    table = Table(title=f"Recent Sessions ({len(sessions)})", show_header=True)
    table.add_column("Started", style="cyan")
    table.add_column("Mode")
    table.add_column("Task")
    table.add_column("Duration", justify="right")

    for session in sessions:
        try:
            started = session.start_datetime.astimezone().strftime("%Y-%m-%d %H:%M")
        except ValueError:
            started = session.start_time
        table.add_row(
            started,
            session.mode.title(),
            (session.task_label or "—")[:30],
            _session_length(session.duration_sec),
        )

    console.print(table)


def _session_length(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s"
    return format_duration(seconds)
