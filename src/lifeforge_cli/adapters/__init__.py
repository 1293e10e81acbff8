"""Storage adapters for LifeForge CLI."""

from .json_store import JsonKeyValueStore

__all__ = ["JsonKeyValueStore"]
