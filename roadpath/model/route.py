"""Routes through a road-network multigraph.

A `Route` is an origin node plus an ordered tuple of `Arc` records rather than
a list of nodes: several arcs may join the same pair of nodes, so the nodes
alone do not say which road is taken. Arcs are references into the owning
`RoadGraph` and are never copied.

Routes are built once and never modified. Three states exist:
  - empty: no origin, no arcs (the "no route" value);
  - single node: an origin and no arcs;
  - regular: arcs that chain from the origin, each arc starting where the
    previous one ends.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from roadpath.config import ROUTING_CONFIG, RoutingConfig
from roadpath.exceptions import (
    DisconnectedWaypointsError,
    RouteConcatenationError,
    RouteError,
)
from roadpath.graph.road_graph import Arc, NodeID, RoadGraph
from roadpath.logging import get_logger
from roadpath.model.label import SearchLabel
from roadpath.types.base import Metric, travel_time_seconds

logger = get_logger(__name__)


class Route:
    """An immutable, ordered sequence of arcs through a `RoadGraph`.

    Prefer the named constructors (`empty`, `single_node`, `from_arcs`,
    `from_nodes`, `concatenate`, `from_labels`) over calling the class.

    Attributes:
        graph: Graph the route belongs to.
        origin: First node, or None for the empty route.
        arcs: Arcs in travel order.
    """

    __slots__ = ("_graph", "_origin", "_arcs")

    def __init__(
        self,
        graph: RoadGraph,
        arcs: Iterable[Arc] = (),
        origin: Optional[NodeID] = None,
    ) -> None:
        """Create a route without validating it.

        Args:
            graph: Graph containing the route.
            arcs: Arcs in travel order.
            origin: First node. Derived from the first arc when arcs are given.
        """
        self._graph = graph
        self._arcs: Tuple[Arc, ...] = tuple(arcs)
        self._origin = self._arcs[0].origin if self._arcs else origin

    #
    # Construction
    #
    @classmethod
    def empty(cls, graph: RoadGraph) -> Route:
        """Return the empty ("no route") value for ``graph``."""
        return cls(graph)

    @classmethod
    def single_node(cls, graph: RoadGraph, node: NodeID) -> Route:
        """Return a route made of a single node and no arcs.

        Raises:
            RouteError: If the node is not in the graph.
        """
        if node not in graph:
            raise RouteError(f"Node '{node}' is not in the graph.")
        return cls(graph, origin=node)

    @classmethod
    def from_arcs(cls, graph: RoadGraph, arcs: Iterable[Arc]) -> Route:
        """Wrap ``arcs`` as-is; use `is_valid` to check that they chain."""
        return cls(graph, arcs)

    @classmethod
    def from_nodes(
        cls, graph: RoadGraph, nodes: Sequence[NodeID], metric: Metric
    ) -> Route:
        """Build the route visiting ``nodes`` in order.

        For each consecutive pair of waypoints the arc minimizing ``metric``
        is chosen among the parallel arcs joining them. Equal candidates are
        resolved by the lowest arc index, i.e. the arc added to the graph
        first.

        Args:
            graph: Graph containing the nodes.
            nodes: Waypoints in travel order.
            metric: Metric used to pick between parallel arcs.

        Returns:
            The empty route for no waypoints, a single-node route for one.

        Raises:
            DisconnectedWaypointsError: If two consecutive waypoints are not
                linked by any arc, or a waypoint is not in the graph.
            RouteError: If the only waypoint is not in the graph.
        """
        nodes = list(nodes)
        if not nodes:
            return cls.empty(graph)
        if len(nodes) == 1:
            return cls.single_node(graph, nodes[0])

        arcs = []
        for current, following in zip(nodes, nodes[1:]):
            if current not in graph:
                raise DisconnectedWaypointsError(current, following)
            best: Optional[Arc] = None
            best_key: Optional[Tuple[float, int]] = None
            for arc in graph.out_arcs(current):
                if arc.destination != following:
                    continue
                key = (metric.arc_cost(arc), arc.index)
                if best_key is None or key < best_key:
                    best, best_key = arc, key
            if best is None:
                logger.debug(
                    f"No arc between waypoints '{current}' and '{following}' "
                    f"on map {graph.map_id}"
                )
                raise DisconnectedWaypointsError(current, following)
            arcs.append(best)

        logger.debug(
            f"Built {metric.name.lower()} route through {len(nodes)} waypoints "
            f"using {len(arcs)} arcs"
        )
        return cls(graph, arcs)

    @classmethod
    def shortest_from_nodes(cls, graph: RoadGraph, nodes: Sequence[NodeID]) -> Route:
        """`from_nodes` choosing the shortest arc between each waypoint pair."""
        return cls.from_nodes(graph, nodes, Metric.SHORTEST)

    @classmethod
    def fastest_from_nodes(cls, graph: RoadGraph, nodes: Sequence[NodeID]) -> Route:
        """`from_nodes` choosing the fastest arc between each waypoint pair."""
        return cls.from_nodes(graph, nodes, Metric.FASTEST)

    @classmethod
    def concatenate(cls, *routes: Route) -> Route:
        """Join routes end to end.

        Empty routes are skipped. Each remaining route must start where the
        previous one ends.

        Args:
            *routes: Routes to concatenate, in travel order.

        Returns:
            The combined route, built on the first route's graph.

        Raises:
            RouteConcatenationError: If no route is given, the routes come from
                graphs with different map identities, or they do not form a
                single contiguous route.
        """
        if not routes:
            raise RouteConcatenationError("Cannot concatenate an empty list of routes.")

        graph = routes[0].graph
        map_id = graph.map_id
        for route in routes[1:]:
            if route.graph.map_id != map_id:
                raise RouteConcatenationError(
                    f"Cannot concatenate routes from different graphs "
                    f"('{map_id}' and '{route.graph.map_id}')."
                )

        parts = [route for route in routes if not route.is_empty()]
        if not parts:
            return cls.empty(graph)

        for previous, following in zip(parts, parts[1:]):
            if previous.destination != following.origin:
                logger.debug(
                    f"Route ending at '{previous.destination}' cannot be followed "
                    f"by a route starting at '{following.origin}'"
                )
                raise RouteConcatenationError(
                    "Cannot concatenate routes that do not form a single route."
                )

        arcs = [arc for route in parts for arc in route.arcs]
        result = cls(graph, arcs, origin=parts[0].origin)
        if not result.is_valid():
            raise RouteConcatenationError(
                "Cannot concatenate routes that do not form a single route."
            )
        return result

    @classmethod
    def from_labels(
        cls,
        graph: RoadGraph,
        labels: Mapping[NodeID, SearchLabel],
        destination: NodeID,
    ) -> Route:
        """Rebuild the route found by a search from its predecessor arcs.

        Args:
            graph: Graph that was searched.
            labels: Labels produced by the search, keyed by node.
            destination: Node the route should end at.

        Returns:
            The route from the search origin to ``destination``; the empty
            route if ``destination`` was never reached.

        Raises:
            RouteError: If the predecessor arcs loop back on themselves.
        """
        label = labels.get(destination)
        if label is None or not label.is_reached:
            return cls.empty(graph)

        arcs = []
        node = destination
        while True:
            arc = labels[node].predecessor
            if arc is None:
                break
            arcs.append(arc)
            if len(arcs) > len(labels):
                raise RouteError(
                    f"Predecessor arcs leading to '{destination}' form a cycle."
                )
            node = arc.origin

        if not arcs:
            return cls(graph, origin=destination)
        arcs.reverse()
        return cls(graph, arcs)

    #
    # Accessors
    #
    @property
    def graph(self) -> RoadGraph:
        return self._graph

    @property
    def origin(self) -> Optional[NodeID]:
        return self._origin

    @property
    def destination(self) -> Optional[NodeID]:
        """Last node: the origin of a single-node route, None when empty."""
        if self._arcs:
            return self._arcs[-1].destination
        return self._origin

    @property
    def arcs(self) -> Tuple[Arc, ...]:
        return self._arcs

    @property
    def nodes(self) -> Tuple[NodeID, ...]:
        """Nodes visited, in order."""
        if self.is_empty():
            return ()
        return (self._origin,) + tuple(arc.destination for arc in self._arcs)

    def __iter__(self) -> Iterator[Arc]:
        return iter(self._arcs)

    #
    # Queries
    #
    def is_empty(self) -> bool:
        """True if the route has no origin (and thus no node at all)."""
        return self._origin is None

    def size(self) -> int:
        """Number of nodes in the route."""
        return 0 if self.is_empty() else 1 + len(self._arcs)

    def is_valid(self) -> bool:
        """Check that the arcs form a contiguous route from the origin.

        The empty route and single-node routes are valid. Otherwise the first
        arc must leave the origin and every arc must start where the previous
        one ends.
        """
        if self.is_empty():
            return not self._arcs
        node = self._origin
        for arc in self._arcs:
            if arc.origin != node:
                return False
            node = arc.destination
        return True

    @property
    def length(self) -> float:
        """Total length in meters."""
        return sum(arc.length for arc in self._arcs)

    def travel_time(self, speed: float) -> float:
        """Seconds needed to travel the route at a constant ``speed`` (km/h).

        Raises:
            ValueError: If ``speed`` is not positive.
        """
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}.")
        return travel_time_seconds(self.length, speed)

    @property
    def minimum_travel_time(self) -> float:
        """Seconds needed when driving every arc at its speed limit."""
        return sum(arc.minimum_travel_time for arc in self._arcs)

    def same_endpoints_and_length(
        self, other: Route, config: Optional[RoutingConfig] = None
    ) -> bool:
        """Weak equivalence: same origin, destination and length.

        Two different routes of equal length between the same nodes compare
        equal here; use ``==`` to compare arc sequences.
        """
        cfg = config or ROUTING_CONFIG
        return (
            self.origin == other.origin
            and self.destination == other.destination
            and math.isclose(
                self.length,
                other.length,
                rel_tol=cfg.length_rel_tol,
                abs_tol=cfg.length_abs_tol,
            )
        )

    def __eq__(self, other: Any) -> bool:
        """Structural equality: same map, origin and arcs."""
        if not isinstance(other, Route):
            return NotImplemented
        return (
            self._graph.map_id == other._graph.map_id
            and self._origin == other._origin
            and self._arcs == other._arcs
        )

    def __hash__(self) -> int:
        return hash((self._graph.map_id, self._origin, self._arcs))

    def __repr__(self) -> str:
        if self.is_empty():
            return "Route(empty)"
        return f"Route({' -> '.join(map(str, self.nodes))}, length={self.length})"

    def summary(self) -> Dict[str, Any]:
        """Return a JSON-friendly summary of the route."""
        return {
            "map_id": self._graph.map_id,
            "origin": self.origin,
            "destination": self.destination,
            "nodes": list(self.nodes),
            "arcs": [arc.key for arc in self._arcs],
            "length_m": self.length,
            "minimum_travel_time_s": self.minimum_travel_time,
        }
