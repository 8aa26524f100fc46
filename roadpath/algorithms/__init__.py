"""Search drivers built on `SearchLabel`."""

from roadpath.algorithms.search import (
    find_route,
    label_search,
    straight_line_heuristic,
)

__all__ = ["find_route", "label_search", "straight_line_heuristic"]
