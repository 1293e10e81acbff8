"""Show the next task offered by the task proxy."""

import asyncio

import httpx
import typer
from rich.table import Table

from lifeforge_cli.services.api.client import get_client
from lifeforge_cli.utils.exit_codes import ERROR_NOT_FOUND

from .utils import console, handle_proxy_error


def next_task(
    output: str = typer.Option("table", "--output", "-o", help="Output format (table, json)"),
) -> None:
    """Show the next scheduled task from the proxy."""

    async def _fetch():
        client = get_client()
        try:
            return await client.get_next_task()
        finally:
            await client.close()

    try:
        candidate = asyncio.run(_fetch())
    except (httpx.HTTPError, ValueError) as e:
        handle_proxy_error(e, "fetching next task")
        return

    if output == "json":
        console.print_json(data={"next": candidate.to_wire() if candidate else None})
        return

    if candidate is None:
        console.print("[yellow]No upcoming task[/yellow]")
        raise typer.Exit(ERROR_NOT_FOUND)

    table = Table(title="Next task", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Title", candidate.title)
    table.add_row("Length", f"{round(candidate.length_min)} min")
    table.add_row("Planned start", candidate.planned_start_iso or "—")
    table.add_row("Planned end", candidate.planned_end_iso or "—")
    table.add_row("ID", candidate.id or "—")
    console.print(table)
