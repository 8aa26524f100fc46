"""Shared road graphs for the test suite."""

from __future__ import annotations

import pytest

from roadpath.algorithms.search import _haversine_m
from roadpath.graph import RoadGraph


@pytest.fixture
def parallel_graph() -> RoadGraph:
    # Length / minimum travel time:
    #
    #      [10m, 2s]        [5m, 3s]
    #  A ─────────────► B ════════════► C
    #                     [8m, 1s]
    g = RoadGraph(map_id="parallel")
    for node in ("A", "B", "C"):
        g.add_node(node)
    g.add_arc("A", "B", length=10, max_speed=18, key="ab")
    g.add_arc("B", "C", length=5, max_speed=6, key="bc_short")
    g.add_arc("B", "C", length=8, max_speed=28.8, key="bc_fast")
    return g


@pytest.fixture
def square_graph() -> RoadGraph:
    #       [1]      [1]
    #   A ──────► B ──────► C
    #   │                   ▲
    #   │ [2]          [2]  │
    #   └───────► D ────────┘
    #
    # Plus C -> A [3] and an isolated node E.
    g = RoadGraph(map_id="square")
    for node in ("A", "B", "C", "D", "E"):
        g.add_node(node)
    g.add_arc("A", "B", length=100, max_speed=50, key=0)
    g.add_arc("B", "C", length=100, max_speed=50, key=1)
    g.add_arc("A", "D", length=200, max_speed=130, key=2)
    g.add_arc("D", "C", length=200, max_speed=130, key=3)
    g.add_arc("C", "A", length=300, max_speed=50, key=4)
    return g


@pytest.fixture
def grid_graph() -> RoadGraph:
    """4x4 grid of geo-located nodes with two-way arcs.

    Arc lengths are 1.2x the great-circle distance so straight-line estimates
    stay admissible. East-west arcs are slow streets, north-south arcs fast.
    """
    size = 4
    g = RoadGraph(map_id="grid")
    for i in range(size):
        for j in range(size):
            g.add_node((i, j), x=2.35 + 0.001 * j, y=48.85 + 0.001 * i)

    def link(u, v, speed):
        nu, nv = g.nodes[u], g.nodes[v]
        length = 1.2 * _haversine_m(nu["y"], nu["x"], nv["y"], nv["x"])
        g.add_arc(u, v, length=length, max_speed=speed)
        g.add_arc(v, u, length=length, max_speed=speed)

    for i in range(size):
        for j in range(size):
            if j + 1 < size:
                link((i, j), (i, j + 1), 30 if i != 0 else 90)
            if i + 1 < size:
                link((i, j), (i + 1, j), 50)
    return g
