"""Configuration management commands."""

from typing import Optional

import typer
from pydantic import BaseModel

from lifeforge_cli.services.config_service import get_config_service
from lifeforge_cli.utils.exit_codes import ERROR_INVALID_ARGS
from lifeforge_cli.utils.typer_helpers import SuggestingGroup

from .utils import console

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")


def _parse_value(value: str) -> str | int | float | bool | None:
    """Convert CLI text into the most specific JSON-compatible value."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null"):
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


@app.command("show")
def show_config() -> None:
    """Show the current configuration."""
    config_service = get_config_service()
    console.print(f"[dim]{config_service.config_path}[/dim]")
    console.print_json(data=config_service.config.model_dump())


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.focus_minutes)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError:
        console.print(f"[red]Configuration key '{key}' not found[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS) from None
    if isinstance(value, BaseModel):
        console.print_json(data=value.model_dump())
    else:
        console.print(value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.focus_minutes)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value = _parse_value(value)
    try:
        get_config_service().set(key, parsed_value)
    except KeyError:
        console.print(f"[red]Unknown configuration key '{key}'[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS) from None
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS) from None
    console.print(f"[green]✓[/green] Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if key is None and not yes:
        if not typer.confirm("Reset the whole configuration to defaults?"):
            console.print("[yellow]Cancelled.[/yellow]")
            raise typer.Exit(0)
    try:
        get_config_service().reset(key)
    except KeyError:
        console.print(f"[red]Unknown configuration key '{key}'[/red]")
        raise typer.Exit(ERROR_INVALID_ARGS) from None
    console.print(f"[green]✓[/green] Reset {key or 'configuration'} to defaults")
