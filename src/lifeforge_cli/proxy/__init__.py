"""HTTP proxy exposing the Notion task lookup to the timer."""

from .app import create_app

__all__ = ["create_app"]
