"""Typer helper utilities."""

from difflib import get_close_matches

import typer
from typer.core import TyperGroup

from lifeforge_cli.utils.exit_codes import ERROR_INVALID_ARGS
from lifeforge_cli.utils.ui.console import get_console


def suggest_commands(attempted: str, available: list[str]) -> list[str]:
    """Up to three command names close to *attempted*."""
    return get_close_matches(attempted, available, n=3, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """Typer group that answers a mistyped command with "Did you mean ...?"."""

    def resolve_command(self, ctx, args):
        # Typer may raise its own vendored UsageError rather than click's,
        # so anything without a close match is re-raised untouched.
        try:
            return super().resolve_command(ctx, args)
        except Exception as e:
            suggestions = suggest_commands(args[0], list(self.commands)) if args else []
            if not suggestions:
                raise

            console = get_console()
            console.print(f'[red]Error:[/red] unknown command "{args[0]}" for "{ctx.info_name}"')
            console.print()
            if len(suggestions) == 1:
                console.print("[yellow]Did you mean this?[/yellow]")
            else:
                console.print("[yellow]Did you mean one of these?[/yellow]")
            for suggestion in suggestions:
                console.print(f"        {suggestion}")
            raise typer.Exit(ERROR_INVALID_ARGS) from e
