"""Label-setting shortest-route search (Dijkstra and A*).

The search keeps one `SearchLabel` per visited node and a ``heapq`` priority
queue ordered by each label's total cost. Plain Dijkstra ranks labels by their
cost; A* plugs a straight-line estimate into the labels' total cost.

Notes:
    Arc costs must be non-negative. When a destination is given the search
    stops as soon as its label is finalized. Labels are created lazily, so
    nodes never reached have no label in the result.
"""

from __future__ import annotations

import math
from heapq import heappop, heappush
from itertools import count
from typing import Callable, Dict, List, Optional, Tuple

from roadpath.config import ROUTING_CONFIG, RoutingConfig
from roadpath.graph.road_graph import NodeID, RoadGraph
from roadpath.logging import get_logger
from roadpath.model.label import SearchLabel, TotalCostFn, heuristic_total_cost
from roadpath.model.route import Route
from roadpath.types.base import Cost, Metric

logger = get_logger(__name__)

EARTH_RADIUS_M = 6_371_000.0


def _haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = phi2 - phi1
    dlambda = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2.0) ** 2
        + (math.cos(phi1) * math.cos(phi2) * (math.sin(dlambda / 2.0) ** 2))
    )
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(max(0.0, a))))


def straight_line_heuristic(
    graph: RoadGraph,
    destination: NodeID,
    metric: Metric,
    config: Optional[RoutingConfig] = None,
) -> Callable[[NodeID], Cost]:
    """Return an admissible estimate of the remaining cost to ``destination``.

    Uses the great-circle distance between the ``y``/``x`` (latitude/longitude)
    node attributes. For `Metric.FASTEST` the distance is divided by the
    configured heuristic speed, or by the fastest arc of the graph. Nodes
    without coordinates get an estimate of 0, which degrades to Dijkstra.

    Args:
        graph: Graph being searched.
        destination: Target node.
        metric: Metric of the search.
        config: Routing defaults (heuristic speed).

    Returns:
        A function mapping a node to its estimated remaining cost.
    """
    cfg = config or ROUTING_CONFIG
    target = graph.nodes[destination]
    if "x" not in target or "y" not in target:
        return lambda node: 0.0

    speed_kmh: Optional[float] = None
    if metric is Metric.FASTEST:
        speed_kmh = cfg.heuristic_max_speed_kmh or graph.max_speed()
        if speed_kmh is None:
            return lambda node: 0.0

    def estimate(node: NodeID) -> Cost:
        attrs = graph.nodes[node]
        if "x" not in attrs or "y" not in attrs:
            return 0.0
        distance = _haversine_m(attrs["y"], attrs["x"], target["y"], target["x"])
        if speed_kmh is None:
            return distance
        return distance * 3600.0 / (speed_kmh * 1000.0)

    return estimate


def label_search(
    graph: RoadGraph,
    origin: NodeID,
    metric: Metric = Metric.SHORTEST,
    destination: Optional[NodeID] = None,
    heuristic: Optional[Callable[[NodeID], Cost]] = None,
) -> Dict[NodeID, SearchLabel]:
    """Run a label-setting search from ``origin``.

    Args:
        graph: Graph to search.
        origin: Start node.
        metric: Arc cost used for relaxation.
        destination: Optional target; the search stops once it is finalized.
        heuristic: Optional admissible, consistent estimate of the remaining
            cost; turns the search into A*.

    Returns:
        Labels of every node reached, keyed by node.

    Raises:
        KeyError: If ``origin`` or ``destination`` is not in the graph.
    """
    if origin not in graph:
        raise KeyError(f"Source node '{origin}' is not in the graph.")
    if destination is not None and destination not in graph:
        raise KeyError(f"Destination node '{destination}' is not in the graph.")

    total_cost_fn: Optional[TotalCostFn] = (
        heuristic_total_cost(heuristic) if heuristic is not None else None
    )
    labels: Dict[NodeID, SearchLabel] = {}

    def label_for(node: NodeID) -> SearchLabel:
        label = labels.get(node)
        if label is None:
            label = labels[node] = SearchLabel(node, total_cost_fn)
        return label

    # Entries are (total_cost, sequence, label); stale entries are skipped on pop
    sequence = count()
    start = label_for(origin)
    start.cost = 0
    min_pq: List[Tuple[Cost, int, SearchLabel]] = [
        (start.total_cost, next(sequence), start)
    ]

    settled = 0
    while min_pq:
        total_cost, _, label = heappop(min_pq)
        if label.finalized or total_cost != label.total_cost:
            continue
        label.finalized = True
        settled += 1
        if label.node == destination:
            break

        for arc in graph.out_arcs(label.node):
            successor = label_for(arc.destination)
            if successor.finalized:
                continue
            new_cost = label.cost + metric.arc_cost(arc)
            if successor.cost is None or new_cost < successor.cost:
                successor.cost = new_cost
                successor.predecessor = arc
                heappush(min_pq, (successor.total_cost, next(sequence), successor))

    logger.debug(
        f"{'A*' if heuristic is not None else 'Dijkstra'} search from '{origin}' "
        f"settled {settled} of {len(labels)} reached nodes"
    )
    return labels


def find_route(
    graph: RoadGraph,
    origin: NodeID,
    destination: NodeID,
    metric: Metric = Metric.SHORTEST,
    astar: bool = False,
    config: Optional[RoutingConfig] = None,
) -> Route:
    """Find the best route between two nodes.

    Args:
        graph: Graph to search.
        origin: Start node.
        destination: Target node.
        metric: `Metric.SHORTEST` (meters) or `Metric.FASTEST` (seconds).
        astar: Use the straight-line heuristic to guide the search.
        config: Routing defaults (heuristic speed).

    Returns:
        The optimal route, a single-node route when origin equals destination,
        or the empty route when the destination cannot be reached.

    Raises:
        KeyError: If either node is not in the graph.
    """
    heuristic = (
        straight_line_heuristic(graph, destination, metric, config) if astar else None
    )
    labels = label_search(graph, origin, metric, destination, heuristic)
    route = Route.from_labels(graph, labels, destination)
    if route.is_empty():
        logger.info(f"No route from '{origin}' to '{destination}' on map {graph.map_id}")
    return route
