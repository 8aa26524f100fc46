"""Shared type aliases and enums."""

from roadpath.types.base import Cost, Metric, travel_time_seconds

__all__ = ["Cost", "Metric", "travel_time_seconds"]
