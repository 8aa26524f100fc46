"""Strict road-network multigraph with immutable arc records.

`RoadGraph` extends `networkx.MultiDiGraph` to enforce explicit node
management and unique arc identifiers. Every edge carries a length and a speed
limit and is mirrored by a frozen `Arc` record; routes and search labels keep
references to those records, the graph stays their only owner.
"""

from __future__ import annotations

import base64
import math
import uuid
from dataclasses import dataclass, field
from pickle import dumps, loads
from typing import Any, Dict, Hashable, Iterable, List, Optional

import networkx as nx

from roadpath.config import ROUTING_CONFIG, RoutingConfig
from roadpath.types.base import travel_time_seconds

NodeID = Hashable
ArcID = Hashable
AttrDict = Dict[str, Any]


def new_base64_uuid() -> str:
    """Generate a 22-character, URL-safe, Base64-encoded UUID without padding."""
    return base64.urlsafe_b64encode(uuid.uuid4().bytes)[:-2].decode("ascii")


@dataclass(frozen=True)
class Arc:
    """Directed road segment between two nodes.

    Attributes:
        key: Unique arc identifier within its graph.
        origin: Node the arc leaves from.
        destination: Node the arc leads to.
        length: Length in meters.
        max_speed: Speed limit in km/h.
        index: Insertion sequence number inside the owning graph.
        attr: Extra road information (name, road type, ...). Not compared.
    """

    key: ArcID
    origin: NodeID
    destination: NodeID
    length: float
    max_speed: float
    index: int
    attr: AttrDict = field(default_factory=dict, compare=False, hash=False, repr=False)

    @property
    def minimum_travel_time(self) -> float:
        """Seconds needed to traverse the arc at its speed limit."""
        return travel_time_seconds(self.length, self.max_speed)


class RoadGraph(nx.MultiDiGraph):
    """A strict multi-directed road graph with unique arc IDs and a map identity.

    This class enforces:
      - No automatic creation of missing nodes when adding an arc.
      - No duplicate nodes or arc keys (raises ValueError).
      - Finite, non-negative arc lengths and finite, positive speed limits.
      - Removing nodes or arcs keeps the `Arc` records in sync.
      - A ``map_id`` identifying the map the graph was built from; routes can
        only be concatenated when their graphs share it.

    Inherits from:
        networkx.MultiDiGraph
    """

    def __init__(
        self,
        map_id: Optional[str] = None,
        config: Optional[RoutingConfig] = None,
        **kwargs,
    ) -> None:
        """Initialize an empty RoadGraph.

        Args:
            map_id: Map identity. A Base64 UUID is generated when omitted.
            config: Routing defaults (speed limit for arcs without one).
            **kwargs: Graph attributes stored on ``graph.graph``.

        Attributes:
            _arcs: Map arc key to its `Arc` record, in insertion order.
        """
        super().__init__(**kwargs)
        self.graph["map_id"] = map_id if map_id is not None else new_base64_uuid()
        self._config = config or ROUTING_CONFIG
        self._arcs: Dict[ArcID, Arc] = {}
        # Auto-assigned keys never reuse a value
        self._next_arc_id: int = 0
        # Sequence number of the next arc, whatever its key
        self._next_arc_index: int = 0

    @property
    def map_id(self) -> str:
        """Identity of the map this graph represents."""
        return self.graph["map_id"]

    def new_edge_key(self, u: NodeID, v: NodeID, key: Optional[int] = None) -> int:  # type: ignore[override]
        """Return a new unique integer arc key.

        Signature matches NetworkX's ``new_edge_key(self, u, v, key=None)``.
        """
        next_arc_id = self._next_arc_id
        self._next_arc_id += 1
        return next_arc_id

    def copy(self, as_view: bool = False) -> RoadGraph:
        """Create a pickle-based deep copy of this graph sharing its map identity.

        Args:
            as_view: Unsupported; NetworkX views do not carry the arc records.

        Returns:
            RoadGraph: A new, independent instance of the graph.

        Raises:
            ValueError: If ``as_view`` is True.
        """
        if as_view:
            raise ValueError("RoadGraph does not support graph views.")
        return loads(dumps(self))

    #
    # Node management
    #
    def add_node(self, node_for_adding: NodeID, **attr: Any) -> None:
        """Add a single node, disallowing duplicates.

        Args:
            node_for_adding: The node to add.
            **attr: Node attributes; ``x``/``y`` hold longitude/latitude.

        Raises:
            ValueError: If the node already exists in the graph.
        """
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)

    def remove_node(self, n: NodeID) -> None:
        """Remove a single node together with every arc entering or leaving it.

        Raises:
            ValueError: If the node does not exist in the graph.
        """
        if n not in self:
            raise ValueError(f"Node '{n}' does not exist.")
        to_delete = [
            key
            for key, arc in self._arcs.items()
            if arc.origin == n or arc.destination == n
        ]
        for key in to_delete:
            del self._arcs[key]

        super().remove_node(n)

    def remove_nodes_from(self, nodes: Iterable[NodeID]) -> None:
        """Remove several nodes; nodes not in the graph are ignored."""
        for n in list(nodes):
            if n in self:
                self.remove_node(n)

    #
    # Arc management
    #
    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: Optional[ArcID] = None,
        **attr: Any,
    ) -> ArcID:
        """Add a directed arc from u_for_edge to v_for_edge.

        The ``length`` attribute is required; ``max_speed`` defaults to the
        configured speed limit. Any other attribute is kept on the edge and on
        the arc's ``attr``.

        Args:
            u_for_edge: The origin node. Must exist in the graph.
            v_for_edge: The destination node. Must exist in the graph.
            key: The unique arc key. If None, a new integer key is generated.
            **attr: Edge attributes, including ``length`` and ``max_speed``.

        Returns:
            ArcID: The key associated with this new arc.

        Raises:
            ValueError: If either node does not exist, the key is already in
                use, the length is missing, negative or not finite, or the
                speed is not finite and positive.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")

        if "length" not in attr:
            raise ValueError(f"Arc from '{u_for_edge}' to '{v_for_edge}' has no length.")
        length = float(attr["length"])
        if not (math.isfinite(length) and length >= 0):
            raise ValueError(f"Arc length must be finite and non-negative, got {length}.")
        max_speed = attr.get("max_speed")
        max_speed = (
            self._config.default_max_speed_kmh if max_speed is None else float(max_speed)
        )
        if not (math.isfinite(max_speed) and max_speed > 0):
            raise ValueError(f"Arc speed limit must be finite and positive, got {max_speed}.")
        attr["length"] = length
        attr["max_speed"] = max_speed

        if key is None:
            key = self.new_edge_key(u_for_edge, v_for_edge)
        else:
            if key in self._arcs:
                raise ValueError(f"Arc with id '{key}' already exists.")
            if isinstance(key, int) and key >= self._next_arc_id:
                self._next_arc_id = key + 1

        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        extra = {k: v for k, v in attr.items() if k not in ("length", "max_speed")}
        self._arcs[key] = Arc(
            key=key,
            origin=u_for_edge,
            destination=v_for_edge,
            length=length,
            max_speed=max_speed,
            index=self._next_arc_index,
            attr=extra,
        )
        self._next_arc_index += 1
        return key

    def add_arc(
        self,
        origin: NodeID,
        destination: NodeID,
        length: float,
        max_speed: Optional[float] = None,
        key: Optional[ArcID] = None,
        **attr: Any,
    ) -> Arc:
        """Add an arc and return its `Arc` record.

        Same rules as `add_edge`, with length and speed as explicit arguments.
        """
        arc_key = self.add_edge(
            origin, destination, key=key, length=length, max_speed=max_speed, **attr
        )
        return self._arcs[arc_key]

    def add_edges_from(  # pyright: ignore[reportIncompatibleMethodOverride]
        self, ebunch_to_add: Iterable[tuple], **attr: Any
    ) -> List[ArcID]:
        """Add several arcs through `add_edge`.

        Each item is ``(u, v)``, ``(u, v, data)``, ``(u, v, key)`` or
        ``(u, v, key, data)``. Keyword attributes apply to every arc and are
        overridden by the per-arc ``data``; each arc still needs a length.

        Returns:
            List[ArcID]: Keys of the new arcs, in input order.

        Raises:
            ValueError: If an item has the wrong shape or `add_edge` rejects it.
        """
        keys = []
        for e in ebunch_to_add:
            key: Optional[ArcID] = None
            data: AttrDict = {}
            if len(e) == 4:
                u, v, key, data = e
            elif len(e) == 3:
                u, v, third = e
                if isinstance(third, dict):
                    data = third
                else:
                    key = third
            elif len(e) == 2:
                u, v = e
            else:
                raise ValueError(f"Arc tuple {e} must be a 2-tuple, 3-tuple or 4-tuple.")
            keys.append(self.add_edge(u, v, key=key, **{**attr, **data}))
        return keys

    def remove_edge(
        self,
        u: NodeID,
        v: NodeID,
        key: Optional[ArcID] = None,
    ) -> None:
        """Remove the arc ``key`` from u to v, or every arc from u to v.

        Raises:
            ValueError: If either node does not exist, the key is unknown or
                joins other nodes, or no arc goes from u to v.
        """
        if u not in self:
            raise ValueError(f"Source node '{u}' does not exist.")
        if v not in self:
            raise ValueError(f"Target node '{v}' does not exist.")

        if key is not None:
            if key not in self._arcs:
                raise ValueError(f"No arc with id='{key}' found from {u} to {v}.")
            arc = self._arcs[key]
            if arc.origin != u or arc.destination != v:
                raise ValueError(
                    f"Arc with id='{key}' is actually from {arc.origin} to "
                    f"{arc.destination}, not from {u} to {v}."
                )
            self.remove_arc_by_id(key)
        else:
            if v not in self.succ[u] or not self.succ[u][v]:
                raise ValueError(f"No arcs from '{u}' to '{v}' to remove.")
            for arc_key in tuple(self.succ[u][v]):
                self.remove_arc_by_id(arc_key)

    def remove_edges_from(self, ebunch: Iterable[tuple]) -> None:
        """Remove arcs given as ``(u, v)`` or ``(u, v, key, ...)`` tuples.

        Raises:
            ValueError: As `remove_edge`, for the first arc that cannot be removed.
        """
        for e in list(ebunch):
            self.remove_edge(*e[:3])

    def remove_arc_by_id(self, key: ArcID) -> None:
        """Remove an arc by its unique key.

        Routes already holding the `Arc` record keep it, but `Route.is_valid`
        no longer guarantees the road exists in the graph.

        Raises:
            ValueError: If no arc with this key exists in the graph.
        """
        if key not in self._arcs:
            raise ValueError(f"Arc with id='{key}' not found.")
        arc = self._arcs.pop(key)
        super().remove_edge(arc.origin, arc.destination, key=key)

    def clear_edges(self) -> None:
        """Remove every arc, keeping nodes and the map identity."""
        self._arcs.clear()
        super().clear_edges()

    def clear(self) -> None:
        """Remove every node and arc, keeping the map identity."""
        map_id = self.map_id
        self._arcs.clear()
        super().clear()
        self.graph["map_id"] = map_id

    #
    # Read access
    #
    def get_nodes(self) -> Dict[NodeID, AttrDict]:
        """Retrieve all nodes and their attributes as a dictionary."""
        return dict(self.nodes(data=True))

    def get_arcs(self) -> Dict[ArcID, Arc]:
        """Retrieve all arcs by key, in insertion order."""
        return self._arcs

    def get_arc(self, key: ArcID) -> Arc:
        """Return the arc with the given key.

        Raises:
            ValueError: If no arc with this key is found.
        """
        if key not in self._arcs:
            raise ValueError(f"Arc with id='{key}' not found.")
        return self._arcs[key]

    def has_arc(self, key: ArcID) -> bool:
        """Check whether an arc with the given key exists."""
        return key in self._arcs

    def out_arcs(self, node: NodeID) -> List[Arc]:
        """Return the arcs leaving ``node``.

        Arcs are grouped by neighbor and, within a neighbor, listed in
        insertion order.

        Raises:
            ValueError: If the node does not exist in the graph.
        """
        if node not in self._adj:
            raise ValueError(f"Node '{node}' does not exist.")
        return [
            self._arcs[key]
            for keys in self._adj[node].values()
            for key in keys
        ]

    def arcs_between(self, u: NodeID, v: NodeID) -> List[Arc]:
        """List all arcs from node u to node v (empty if none exist)."""
        if u not in self._adj or v not in self._adj[u]:
            return []
        return [self._arcs[key] for key in self._adj[u][v]]

    def max_speed(self) -> Optional[float]:
        """Highest speed limit over all arcs, or None for a graph without arcs."""
        if not self._arcs:
            return None
        return max(arc.max_speed for arc in self._arcs.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert the graph to a node-link dictionary suitable for JSON."""
        # Import here to avoid circular import
        from roadpath.graph.io import graph_to_node_link

        return graph_to_node_link(self)
