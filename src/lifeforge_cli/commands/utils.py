"""Helpers shared by the command modules."""

import logging
from datetime import datetime

import httpx
import typer

from lifeforge_cli.adapters.json_store import JsonKeyValueStore
from lifeforge_cli.models.focus.history import SessionLog
from lifeforge_cli.models.focus.stats import StatsStore
from lifeforge_cli.services.config_service import get_config_service
from lifeforge_cli.utils.exit_codes import ERROR_GENERAL, ERROR_NETWORK, get_exit_code_name
from lifeforge_cli.utils.ui.console import get_console

logger = logging.getLogger(__name__)

console = get_console()


def get_store() -> JsonKeyValueStore:
    """Key-value store in the configured storage directory."""
    return JsonKeyValueStore(get_config_service().storage_dir)


def get_session_log() -> SessionLog:
    config = get_config_service().config
    return SessionLog(get_store(), max_entries=config.storage.max_sessions)


def get_stats_store() -> StatsStore:
    return StatsStore(get_store())


def local_now() -> datetime:
    return datetime.now().astimezone()


def handle_proxy_error(exception: Exception, action: str) -> None:
    """Print a proxy failure and exit with a semantic code."""
    console.print(f"[red]Error {action}: {exception}[/red]")
    code = ERROR_NETWORK if isinstance(exception, httpx.HTTPError) else ERROR_GENERAL
    logger.error("Failed %s (%s): %s", action, get_exit_code_name(code), exception)
    raise typer.Exit(code)
