"""Node-link serialization and NetworkX conversion for `RoadGraph`."""

from __future__ import annotations

from typing import Any, Dict, Optional

import networkx as nx

from roadpath.config import ROUTING_CONFIG, RoutingConfig
from roadpath.graph.road_graph import NodeID, RoadGraph
from roadpath.logging import get_logger

logger = get_logger(__name__)

MPH_TO_KMH = 1.609344


def graph_to_node_link(graph: RoadGraph) -> Dict[str, Any]:
    """Convert a RoadGraph into a node-link dict representation.

    The returned dict has the following structure:
        {
            "graph": {"map_id": ..., ... other graph attributes ...},
            "nodes": [
                {"id": node_id, "attr": { ... node attributes ... }},
                ...
            ],
            "links": [
                {
                    "source": <indexed_node>,
                    "target": <indexed_node>,
                    "key": <arc_id>,
                    "attr": {"length": ..., "max_speed": ..., ...}
                },
                ...
            ]
        }

    Links are listed in arc insertion order so that a round trip preserves
    arc indices.

    Args:
        graph: The RoadGraph to convert.

    Returns:
        A dict containing the 'graph' attributes, list of 'nodes', and list of 'links'.
    """
    node_dict = graph.get_nodes()
    node_list = list(node_dict.keys())
    node_map = {node_id: i for i, node_id in enumerate(node_list)}

    return {
        "graph": dict(graph.graph),
        "nodes": [
            {"id": node_id, "attr": dict(node_dict[node_id])} for node_id in node_list
        ],
        "links": [
            {
                "source": node_map[arc.origin],
                "target": node_map[arc.destination],
                "key": arc_id,
                "attr": dict(graph[arc.origin][arc.destination][arc_id]),
            }
            for arc_id, arc in graph.get_arcs().items()
        ],
    }


def node_link_to_graph(
    data: Dict[str, Any], config: Optional[RoutingConfig] = None
) -> RoadGraph:
    """Rebuild a RoadGraph from its node-link dict representation.

    Args:
        data: A dict in the format produced by `graph_to_node_link`.
        config: Routing defaults for arcs without a speed limit.

    Returns:
        The reconstructed RoadGraph, keeping the stored ``map_id`` if any.

    Raises:
        ValueError: If a link references an unknown node index or carries
            invalid arc attributes.
    """
    graph_attrs = dict(data.get("graph", {}))
    map_id = graph_attrs.pop("map_id", None)
    graph = RoadGraph(map_id=map_id, config=config, **graph_attrs)

    node_map: Dict[int, NodeID] = {}
    for idx, node_obj in enumerate(data.get("nodes", [])):
        node_id = node_obj["id"]
        graph.add_node(node_id, **node_obj.get("attr", {}))
        node_map[idx] = node_id

    for edge_obj in data.get("links", []):
        try:
            src_id = node_map[edge_obj["source"]]
            dst_id = node_map[edge_obj["target"]]
        except KeyError as exc:
            raise ValueError(f"Link references unknown node index {exc}.") from None
        graph.add_edge(
            src_id, dst_id, key=edge_obj.get("key", None), **edge_obj.get("attr", {})
        )

    return graph


def parse_max_speed(value: Any) -> Optional[float]:
    """Parse an OSM-style ``maxspeed`` tag into km/h.

    Accepts numbers, strings such as ``"50"`` or ``"30 mph"``, and lists of
    those (the highest parsable value wins). Returns None when nothing can be
    parsed (e.g. ``"none"`` or ``"signals"``).
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        speeds = [s for s in (parse_max_speed(v) for v in value) if s is not None]
        return max(speeds) if speeds else None
    if isinstance(value, (int, float)):
        return float(value) if value > 0 else None

    text = str(value).strip().lower()
    factor = 1.0
    if text.endswith("mph"):
        factor = MPH_TO_KMH
        text = text[: -len("mph")].strip()
    elif text.endswith("km/h"):
        text = text[: -len("km/h")].strip()
    try:
        speed = float(text) * factor
    except ValueError:
        return None
    return speed if speed > 0 else None


def from_networkx(
    nx_graph: nx.Graph,
    length_attr: str = "length",
    speed_attr: str = "maxspeed",
    map_id: Optional[str] = None,
    config: Optional[RoutingConfig] = None,
) -> RoadGraph:
    """Build a RoadGraph from any NetworkX graph.

    Node attributes are copied as-is (OSM graphs carry ``x``/``y``). Each edge
    becomes an arc; undirected edges become one arc per direction. Edge keys of
    multigraphs are not reused since they are only unique per node pair.

    Args:
        nx_graph: Source graph.
        length_attr: Edge attribute holding the length in meters.
        speed_attr: Edge attribute holding the speed limit (OSM ``maxspeed``).
        map_id: Map identity; defaults to the source graph's ``map_id`` or
            ``name`` attribute, else a generated one.
        config: Routing defaults for edges without a usable speed limit.

    Returns:
        A new RoadGraph.

    Raises:
        ValueError: If an edge has no ``length_attr``.
    """
    cfg = config or ROUTING_CONFIG
    if map_id is None:
        map_id = nx_graph.graph.get("map_id") or nx_graph.graph.get("name") or None
    graph = RoadGraph(map_id=map_id, config=cfg)

    for node_id, attrs in nx_graph.nodes(data=True):
        graph.add_node(node_id, **attrs)

    defaulted = 0
    for u, v, attrs in nx_graph.edges(data=True):
        if length_attr not in attrs:
            raise ValueError(f"Edge ({u}, {v}) has no '{length_attr}' attribute.")
        speed = parse_max_speed(attrs.get(speed_attr))
        if speed is None:
            defaulted += 1
        extra = {
            k: val
            for k, val in attrs.items()
            if k not in (length_attr, speed_attr, "length", "max_speed")
        }
        directions = [(u, v)] if nx_graph.is_directed() else [(u, v), (v, u)]
        for src, dst in directions:
            graph.add_arc(src, dst, attrs[length_attr], max_speed=speed, **extra)

    if defaulted:
        logger.debug(
            f"{defaulted} edge(s) without usable '{speed_attr}' got the default "
            f"speed limit of {cfg.default_max_speed_kmh} km/h"
        )
    logger.debug(
        f"Converted graph with {graph.number_of_nodes()} nodes and "
        f"{graph.number_of_edges()} arcs (map_id={graph.map_id})"
    )
    return graph
