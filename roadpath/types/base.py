"""Base aliases and enums shared by the graph, model and search layers."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from roadpath.graph.road_graph import Arc

#: Numeric cost of an arc or route (meters or seconds depending on the metric).
Cost = Union[int, float]


def travel_time_seconds(length: float, speed_kmh: float) -> float:
    """Return the time in seconds to cover ``length`` meters at ``speed_kmh``."""
    return length * 3600.0 / (speed_kmh * 1000.0)


class Metric(IntEnum):
    """Cost metric used to compare arcs and to drive a search."""

    #: Minimize length in meters.
    SHORTEST = 1
    #: Minimize free-flow travel time in seconds.
    FASTEST = 2

    def arc_cost(self, arc: Arc) -> Cost:
        """Return the cost of ``arc`` under this metric."""
        if self is Metric.SHORTEST:
            return arc.length
        return arc.minimum_travel_time

    @classmethod
    def from_string(cls, value: str) -> "Metric":
        """Parse a string into a Metric enum value.

        Args:
            value: Case-insensitive name (e.g., "shortest", "FASTEST").

        Returns:
            The corresponding Metric member.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.upper()]
        except KeyError:
            valid = ", ".join(m.name for m in cls)
            raise ValueError(
                f"Invalid metric '{value}'. Valid values are: {valid}"
            ) from None
