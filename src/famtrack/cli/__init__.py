"""CLI layer for famtrack application."""
