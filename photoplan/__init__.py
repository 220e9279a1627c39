"""Photographic coverage path planning for survey UAV missions."""

__version__ = "0.1.0"
