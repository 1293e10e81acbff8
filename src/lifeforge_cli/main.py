"""Main entry point for LifeForge CLI."""

import typer

from lifeforge_cli import __version__
from lifeforge_cli.commands import config
from lifeforge_cli.commands.focus import focus
from lifeforge_cli.commands.next_command import next_task
from lifeforge_cli.commands.serve import serve
from lifeforge_cli.commands.stats import show_history, show_stats
from lifeforge_cli.utils.logger import get_logger, log_file_path
from lifeforge_cli.utils.typer_helpers import SuggestingGroup
from lifeforge_cli.utils.ui.console import get_console

app = typer.Typer(
    name="lifeforge",
    cls=SuggestingGroup,
    help="Pomodoro focus timer with streaks, fed by your Notion schedule",
    no_args_is_help=True,
)

console = get_console()


@app.callback()
def _init() -> None:
    """Set up file logging before any command runs."""
    get_logger()


app.add_typer(config.app, name="config", help="Configuration management")
app.command("focus")(focus)
app.command("next")(next_task)
app.command("stats")(show_stats)
app.command("history")(show_history)
app.command("serve")(serve)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]LifeForge CLI[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"Log file: {log_file_path()}", markup=False, highlight=False, soft_wrap=True)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
