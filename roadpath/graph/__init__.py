"""Road graph layer: nodes, immutable arcs and conversions."""

from roadpath.graph.io import from_networkx, graph_to_node_link, node_link_to_graph
from roadpath.graph.road_graph import Arc, ArcID, AttrDict, NodeID, RoadGraph

__all__ = [
    "Arc",
    "ArcID",
    "AttrDict",
    "NodeID",
    "RoadGraph",
    "from_networkx",
    "graph_to_node_link",
    "node_link_to_graph",
]
