"""Tests for `roadpath.config`."""

import pytest

from roadpath.config import ROUTING_CONFIG, RoutingConfig
from roadpath.graph import RoadGraph
from roadpath.model.route import Route


def test_defaults() -> None:
    config = RoutingConfig()
    assert config.default_max_speed_kmh == 50.0
    assert config.heuristic_max_speed_kmh is None
    assert config.length_rel_tol == 1e-9
    assert config.length_abs_tol == 1e-6
    assert ROUTING_CONFIG == config


@pytest.mark.parametrize(
    "kwargs",
    [
        {"default_max_speed_kmh": 0},
        {"default_max_speed_kmh": -5},
        {"heuristic_max_speed_kmh": 0},
        {"default_max_speed_kmh": float("nan")},
    ],
)
def test_rejects_non_positive_speeds(kwargs) -> None:
    with pytest.raises(ValueError, match="positive"):
        RoutingConfig(**kwargs)


def test_length_tolerance_drives_weak_route_equality() -> None:
    """Routes whose lengths differ by less than the tolerance compare equal."""
    g = RoadGraph()
    for node in ("A", "B", "C"):
        g.add_node(node)
    g.add_arc("A", "C", length=10.0)
    g.add_arc("A", "B", length=4.0)
    g.add_arc("B", "C", length=6.0005)
    direct = Route.shortest_from_nodes(g, ["A", "C"])
    detour = Route.shortest_from_nodes(g, ["A", "B", "C"])

    assert not direct.same_endpoints_and_length(detour)
    assert direct.same_endpoints_and_length(detour, RoutingConfig(length_abs_tol=1e-3))
