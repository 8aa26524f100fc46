"""roadpath: route and search-label primitives for road-network multigraphs.

Primary API:
    RoadGraph, Arc - Strict road multigraph with immutable arc records
    Route - Validated sequence of arcs, built from arcs, waypoints or a search
    SearchLabel - Per-node state and ordering for label-setting searches
    find_route() - Dijkstra / A* search returning a Route

Example:
    from roadpath import Metric, RoadGraph, Route

    g = RoadGraph(map_id="demo")
    for node in ("A", "B", "C"):
        g.add_node(node)
    g.add_arc("A", "B", length=10, max_speed=18)
    g.add_arc("B", "C", length=5, max_speed=6)
    g.add_arc("B", "C", length=8, max_speed=28.8)

    Route.shortest_from_nodes(g, ["A", "B", "C"]).length  # 15.0
    Route.fastest_from_nodes(g, ["A", "B", "C"]).length  # 18.0
"""

from __future__ import annotations

from roadpath import logging
from roadpath._version import __version__
from roadpath.algorithms.search import find_route, label_search, straight_line_heuristic
from roadpath.config import ROUTING_CONFIG, RoutingConfig
from roadpath.exceptions import (
    DisconnectedWaypointsError,
    RouteConcatenationError,
    RouteError,
)
from roadpath.graph import Arc, RoadGraph, from_networkx, graph_to_node_link, node_link_to_graph
from roadpath.model import Route, SearchLabel, cost_only, heuristic_total_cost
from roadpath.types.base import Cost, Metric

__all__ = [
    "__version__",
    # Graph
    "Arc",
    "RoadGraph",
    "from_networkx",
    "graph_to_node_link",
    "node_link_to_graph",
    # Model
    "Route",
    "SearchLabel",
    "cost_only",
    "heuristic_total_cost",
    # Search
    "find_route",
    "label_search",
    "straight_line_heuristic",
    # Types
    "Cost",
    "Metric",
    # Errors
    "RouteError",
    "DisconnectedWaypointsError",
    "RouteConcatenationError",
    # Configuration
    "RoutingConfig",
    "ROUTING_CONFIG",
    # Utilities
    "logging",
]
