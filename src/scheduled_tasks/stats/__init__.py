"""Database statistics tasks."""
