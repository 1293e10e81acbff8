"""FastAPI application serving the next Notion task to the focus timer."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lifeforge_cli import __version__
from lifeforge_cli.services.notion.client import (
    NotionAPIError,
    NotionClient,
    NotionClientProtocol,
)
from lifeforge_cli.services.notion.models import plain_title
from lifeforge_cli.services.task_lookup_service import TaskLookupService

from .error_handler import register_error_handlers
from .routes import router
from .settings import ProxySettings, get_settings

logger = logging.getLogger(__name__)


async def check_notion(settings: ProxySettings, notion: NotionClientProtocol) -> None:
    """Log whether the token and database are usable. Never raises."""
    logger.info("Booting lifeforge proxy %s: %s", __version__, settings.redacted())

    if not settings.NOTION_TOKEN:
        logger.warning("NOTION_TOKEN is empty.")
    if not settings.NOTION_DATABASE_ID:
        logger.warning("NOTION_DATABASE_ID is empty.")

    try:
        me = await notion.users_me()
        name = me.get("name") or (me.get("bot") or {}).get("owner", {}).get(
            "workspace_name"
        )
        logger.info("Token OK. Bot user: %s", name or "bot")
    except NotionAPIError as e:
        logger.error("Token check failed: %s", e.to_dict())

    try:
        db = await notion.retrieve_database(settings.NOTION_DATABASE_ID)
        logger.info("DB reachable: %s", plain_title(db) or "(untitled)")
        logger.info("Properties: %s", list((db.get("properties") or {}).keys()))
    except NotionAPIError as e:
        logger.error("DB retrieve failed: %s", e.to_dict())
        logger.warning("Hints: 403=DB not shared | 404=bad DB_ID | 400=Linked view id")


def create_app(
    settings: ProxySettings | None = None,
    notion_client: NotionClientProtocol | None = None,
    *,
    check_on_startup: bool = True,
) -> FastAPI:
    """
    Build the proxy application.

    Args:
        settings: Environment settings; read from the environment when omitted
        notion_client: Client to use; a NotionClient is created (and closed on
            shutdown) when omitted
        check_on_startup: Verify the token and database while starting up
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_client = notion_client is None
        notion = notion_client or NotionClient(settings.NOTION_TOKEN)
        app.state.settings = settings
        app.state.notion = notion
        app.state.lookup = TaskLookupService(
            notion,
            settings.NOTION_DATABASE_ID,
            date_property=settings.DATE_PROPERTY,
            length_property=settings.LENGTH_PROPERTY,
            title_property=settings.TITLE_PROPERTY,
        )

        if check_on_startup:
            await check_notion(settings, notion)

        yield

        logger.info("Shutting down lifeforge proxy")
        if owns_client:
            await notion.aclose()

    app = FastAPI(title="LifeForge Task Proxy", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)

    return app
