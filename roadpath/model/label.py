"""Per-node search state used by label-setting shortest-route searches.

A `SearchLabel` holds the tentative cost of reaching one node, whether that
cost is final, and the arc it was reached through. Labels order themselves by
total cost; the total cost is computed by a pluggable strategy so that an A*
driver can rank labels by ``cost + estimate`` without touching the stored cost.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from roadpath.graph.road_graph import Arc, NodeID
from roadpath.types.base import Cost

TotalCostFn = Callable[["SearchLabel"], Optional[Cost]]


def cost_only(label: SearchLabel) -> Optional[Cost]:
    """Default ordering strategy: the stored cost itself."""
    return label.cost


def heuristic_total_cost(heuristic: Callable[[NodeID], Cost]) -> TotalCostFn:
    """Build an A* ordering strategy: ``cost + heuristic(node)``.

    The heuristic is evaluated at most once per node.

    Args:
        heuristic: Admissible estimate of the remaining cost from a node.

    Returns:
        A total-cost function usable as ``SearchLabel(total_cost_fn=...)``.
    """
    estimates: Dict[NodeID, Cost] = {}

    def total_cost(label: SearchLabel) -> Optional[Cost]:
        if label.cost is None:
            return None
        node = label.node
        if node not in estimates:
            estimates[node] = heuristic(node)
        return label.cost + estimates[node]

    return total_cost


class SearchLabel:
    """Mutable per-node record of a shortest-route search.

    Attributes:
        node: Node this label belongs to (read-only).
        cost: Tentative cost from the search origin; None while unreached.
        predecessor: Arc through which the current cost was obtained.
        finalized: True once the cost is known to be optimal.
    """

    def __init__(self, node: NodeID, total_cost_fn: Optional[TotalCostFn] = None) -> None:
        self._node = node
        self._total_cost_fn = total_cost_fn or cost_only
        self._cost: Optional[Cost] = None
        self.predecessor: Optional[Arc] = None
        self.finalized: bool = False

    @property
    def node(self) -> NodeID:
        return self._node

    @property
    def cost(self) -> Optional[Cost]:
        return self._cost

    @cost.setter
    def cost(self, value: Cost) -> None:
        """Record a new tentative cost.

        Callers only ever lower the cost; this is not checked here.

        Raises:
            ValueError: If the label is finalized or the cost is negative.
        """
        if self.finalized:
            raise ValueError(f"Cost of finalized label for node '{self._node}' cannot change.")
        if value < 0:
            raise ValueError(f"Label cost must be non-negative, got {value}.")
        self._cost = value

    @property
    def is_reached(self) -> bool:
        """True once a cost has been assigned."""
        return self._cost is not None

    @property
    def total_cost(self) -> Optional[Cost]:
        """Cost used for ordering; None while unreached."""
        return self._total_cost_fn(self)

    def reset(self) -> None:
        """Return the label to its freshly constructed state."""
        self._cost = None
        self.predecessor = None
        self.finalized = False

    def __lt__(self, other: Any) -> bool:
        """Order by total cost; unreached labels come after every reached one."""
        if not isinstance(other, SearchLabel):
            return NotImplemented
        mine, theirs = self.total_cost, other.total_cost
        if mine is None:
            return False
        if theirs is None:
            return True
        return mine < theirs

    def __repr__(self) -> str:
        return (
            f"SearchLabel(node={self._node!r}, cost={self._cost}, "
            f"finalized={self.finalized})"
        )
