"""Route and search-label primitives."""

from roadpath.model.label import SearchLabel, cost_only, heuristic_total_cost
from roadpath.model.route import Route

__all__ = ["Route", "SearchLabel", "cost_only", "heuristic_total_cost"]
