"""Errors raised while building routes."""

from __future__ import annotations


class RouteError(ValueError):
    """A route could not be constructed from the given input."""


class DisconnectedWaypointsError(RouteError):
    """Two consecutive waypoints are not linked by any arc."""

    def __init__(self, current, following) -> None:
        super().__init__(
            f"No arc from '{current}' to '{following}': waypoints are not connected."
        )
        self.current = current
        self.following = following


class RouteConcatenationError(RouteError):
    """Routes cannot be joined into a single contiguous route."""
