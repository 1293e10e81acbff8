import platform
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from lifeforge_cli import __version__
from lifeforge_cli.services.notion.client import NotionClientProtocol
from lifeforge_cli.services.notion.models import plain_title
from lifeforge_cli.services.task_lookup_service import TaskLookupService

from .settings import ProxySettings

router = APIRouter()


def _notion(request: Request) -> NotionClientProtocol:
    return request.app.state.notion


def _lookup(request: Request) -> TaskLookupService:
    return request.app.state.lookup


def _settings(request: Request) -> ProxySettings:
    return request.app.state.settings


@router.get("/health")
async def health():
    return {
        "ok": True,
        "service": "lifeforge-proxy",
        "version": __version__,
        "python": platform.python_version(),
    }


@router.get("/tasks/next")
async def next_task(request: Request):
    """Earliest task scheduled now-or-later, consumed by the focus timer."""
    candidate = await _lookup(request).next_task()
    return {"next": candidate.to_wire() if candidate else None}


@router.get("/debug/env")
async def debug_env(request: Request):
    return _settings(request).redacted()


@router.get("/debug/me")
async def debug_me(request: Request):
    me = await _notion(request).users_me()
    return {"ok": True, "me": me}


@router.get("/debug/schema")
async def debug_schema(request: Request):
    settings = _settings(request)
    db = await _notion(request).retrieve_database(settings.NOTION_DATABASE_ID)
    return {
        "ok": True,
        "object": db.get("object"),
        "title": plain_title(db),
        "properties": list((db.get("properties") or {}).keys()),
    }


@router.get("/debug/search")
async def debug_search(request: Request, q: str = ""):
    result = await _notion(request).search_databases(q)
    results = [
        {
            "id_no_dashes": (d.get("id") or "").replace("-", ""),
            "id": d.get("id"),
            "title": plain_title(d) or "(untitled)",
            "url": d.get("url"),
            "parent_type": (d.get("parent") or {}).get("type"),
            "is_inline": d.get("is_inline"),
        }
        for d in result.get("results") or []
    ]
    return {"ok": True, "count": len(results), "results": results}


@router.get("/debug/next-raw")
async def debug_next_raw(request: Request):
    result = await _lookup(request).query_upcoming_raw(
        datetime.now(timezone.utc), page_size=1
    )
    results = result.get("results") or []
    sample = results[0] if results else None
    return {
        "ok": True,
        "count": len(results),
        "samplePropertyKeys": list((sample or {}).get("properties", {}).keys()),
        "sample": sample,
    }
