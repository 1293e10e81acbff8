"""Notion integration: API client and page models."""

from .client import NotionAPIError, NotionClient, NotionClientProtocol
from .models import NotionPage

__all__ = ["NotionAPIError", "NotionClient", "NotionClientProtocol", "NotionPage"]
