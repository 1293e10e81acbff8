import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lifeforge_cli.services.notion.client import NotionAPIError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI):
    @app.exception_handler(NotionAPIError)
    async def notion_error_handler(request: Request, exc: NotionAPIError):
        logger.error("Notion error on %s: %s", request.url.path, exc.to_dict())
        return JSONResponse(status_code=exc.status, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "status": 500,
                "code": type(exc).__name__,
                "message": str(exc),
                "body": None,
            },
        )
