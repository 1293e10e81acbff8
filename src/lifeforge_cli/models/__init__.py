"""Domain models for LifeForge CLI."""
