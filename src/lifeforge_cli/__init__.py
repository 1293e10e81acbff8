"""LifeForge CLI - Pomodoro focus timer fed by a Notion task proxy."""

__version__ = "0.3.0"
