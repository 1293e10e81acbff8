"""Pydantic models for the parts of Notion API responses we read."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NotionPage(BaseModel):
    """A database row as returned by ``databases/{id}/query``.

    Only ``id`` and ``properties`` are modelled; property values stay raw
    dicts because their shape depends on the property type.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    url: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    def _prop(self, name: str) -> dict[str, Any]:
        value = self.properties.get(name)
        return value if isinstance(value, dict) else {}

    def title(self, name: str = "Name") -> str | None:
        """Plain text of the first title fragment."""
        fragments = self._prop(name).get("title") or []
        if fragments and isinstance(fragments[0], dict):
            return fragments[0].get("plain_text") or None
        return None

    def dates(self, name: str) -> tuple[str | None, str | None]:
        """``(start, end)`` ISO strings of a date property."""
        date = self._prop(name).get("date")
        if not isinstance(date, dict):
            return None, None
        return date.get("start"), date.get("end")

    def number(self, name: str) -> float | None:
        value = self._prop(name).get("number")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return None

    def label(self, name: str) -> str | None:
        """Text of a select, first multi-select option, or rich text property."""
        prop = self._prop(name)

        select = prop.get("select")
        if isinstance(select, dict) and select.get("name"):
            return select["name"]

        multi = prop.get("multi_select") or []
        if multi and isinstance(multi[0], dict) and multi[0].get("name"):
            return multi[0]["name"]

        rich = prop.get("rich_text") or []
        text = "".join(
            fragment.get("plain_text", "") for fragment in rich if isinstance(fragment, dict)
        )
        return text or None


def plain_title(obj: dict[str, Any]) -> str | None:
    """Plain text of a database or search result's ``title`` array."""
    title = obj.get("title") or []
    if title and isinstance(title[0], dict):
        return title[0].get("plain_text")
    return None
