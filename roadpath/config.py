"""Configuration defaults for route construction and search."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RoutingConfig:
    """Tunable defaults used by the graph layer, routes and the search driver."""

    # Speed limit (km/h) given to arcs created without one
    default_max_speed_kmh: float = 50.0

    # Speed (km/h) converting straight-line distance into an A* time estimate.
    # None means the fastest arc of the searched graph.
    heuristic_max_speed_kmh: Optional[float] = None

    # Tolerances for comparing route lengths (meters)
    length_rel_tol: float = 1e-9
    length_abs_tol: float = 1e-6

    def __post_init__(self) -> None:
        if not self.default_max_speed_kmh > 0:
            raise ValueError(
                f"default_max_speed_kmh must be positive, got {self.default_max_speed_kmh}"
            )
        if self.heuristic_max_speed_kmh is not None and not self.heuristic_max_speed_kmh > 0:
            raise ValueError(
                "heuristic_max_speed_kmh must be positive or None, "
                f"got {self.heuristic_max_speed_kmh}"
            )


# Global configuration instance
ROUTING_CONFIG = RoutingConfig()
