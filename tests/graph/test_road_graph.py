import pytest

from roadpath.config import RoutingConfig
from roadpath.graph import Arc, RoadGraph


def test_init_empty_graph():
    """A new graph has no nodes, no arcs and a generated map identity."""
    g = RoadGraph()
    assert len(g) == 0
    assert g.get_arcs() == {}
    assert isinstance(g.map_id, str)
    assert len(g.map_id) == 22
    assert RoadGraph().map_id != g.map_id


def test_explicit_map_id_is_stored_on_graph_attributes():
    g = RoadGraph(map_id="toulouse", name="demo")
    assert g.map_id == "toulouse"
    assert g.graph == {"map_id": "toulouse", "name": "demo"}


def test_add_node_duplicate():
    """Adding a node that already exists should raise ValueError."""
    g = RoadGraph()
    g.add_node("A", x=1.0, y=2.0)
    with pytest.raises(ValueError, match="already exists"):
        g.add_node("A")
    assert g.get_nodes() == {"A": {"x": 1.0, "y": 2.0}}


def test_add_arc_requires_existing_nodes():
    g = RoadGraph()
    g.add_node("A")
    with pytest.raises(ValueError, match="Target node 'B' does not exist"):
        g.add_arc("A", "B", length=1)
    with pytest.raises(ValueError, match="Source node 'Z' does not exist"):
        g.add_arc("Z", "A", length=1)


def test_add_arc_builds_arc_record():
    g = RoadGraph()
    g.add_node("A")
    g.add_node("B")
    arc = g.add_arc("A", "B", length=1000, max_speed=50, name="Rue de la Paix")

    assert isinstance(arc, Arc)
    assert arc.key == 0
    assert (arc.origin, arc.destination) == ("A", "B")
    assert arc.length == 1000.0
    assert arc.max_speed == 50.0
    assert arc.index == 0
    assert arc.attr == {"name": "Rue de la Paix"}
    assert arc.minimum_travel_time == pytest.approx(72.0)
    # NetworkX edge data mirrors the record
    assert g["A"]["B"][0] == {"length": 1000.0, "max_speed": 50.0, "name": "Rue de la Paix"}
    assert g.get_arc(0) is arc


def test_arc_is_immutable():
    g = RoadGraph()
    g.add_node("A")
    g.add_node("B")
    arc = g.add_arc("A", "B", length=5)
    with pytest.raises(AttributeError):
        arc.length = 1  # type: ignore[misc]


def test_add_edge_requires_length():
    g = RoadGraph()
    g.add_node("A")
    g.add_node("B")
    with pytest.raises(ValueError, match="has no length"):
        g.add_edge("A", "B")


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"length": -1}, "non-negative"),
        ({"length": float("nan")}, "finite"),
        ({"length": float("inf")}, "finite"),
        ({"length": 1, "max_speed": 0}, "positive"),
        ({"length": 1, "max_speed": -30}, "positive"),
        ({"length": 1, "max_speed": float("nan")}, "finite"),
        ({"length": 1, "max_speed": "inf"}, "finite"),
    ],
)
def test_add_edge_rejects_invalid_values(kwargs, match):
    g = RoadGraph()
    g.add_node("A")
    g.add_node("B")
    with pytest.raises(ValueError, match=match):
        g.add_edge("A", "B", **kwargs)
    assert g.get_arcs() == {}
    assert g.number_of_edges() == 0


def test_missing_speed_uses_configured_default():
    g = RoadGraph(config=RoutingConfig(default_max_speed_kmh=30.0))
    g.add_node("A")
    g.add_node("B")
    arc = g.add_arc("A", "B", length=10)
    assert arc.max_speed == 30.0

    default_graph = RoadGraph()
    default_graph.add_node("A")
    default_graph.add_node("B")
    assert default_graph.add_arc("A", "B", length=10).max_speed == 50.0


def test_duplicate_arc_key_rejected():
    g = RoadGraph()
    g.add_node("A")
    g.add_node("B")
    g.add_arc("A", "B", length=1, key="k")
    with pytest.raises(ValueError, match="already exists"):
        g.add_arc("B", "A", length=1, key="k")


def test_auto_keys_skip_explicit_integer_keys():
    """Explicit integer keys push the auto counter forward."""
    g = RoadGraph()
    g.add_node("A")
    g.add_node("B")
    assert g.add_edge("A", "B", length=1) == 0
    assert g.add_edge("A", "B", key=10, length=1) == 10
    assert g.add_edge("A", "B", length=1) == 11
    assert [arc.index for arc in g.get_arcs().values()] == [0, 1, 2]


def test_out_arcs_and_arcs_between(parallel_graph):
    out_b = parallel_graph.out_arcs("B")
    assert [arc.key for arc in out_b] == ["bc_short", "bc_fast"]
    assert parallel_graph.out_arcs("C") == []
    assert [arc.key for arc in parallel_graph.arcs_between("B", "C")] == [
        "bc_short",
        "bc_fast",
    ]
    assert parallel_graph.arcs_between("C", "B") == []
    assert parallel_graph.arcs_between("Z", "B") == []


def test_out_arcs_unknown_node(parallel_graph):
    with pytest.raises(ValueError, match="does not exist"):
        parallel_graph.out_arcs("Z")


def test_get_arc_missing(parallel_graph):
    assert parallel_graph.has_arc("ab")
    assert not parallel_graph.has_arc("nope")
    with pytest.raises(ValueError, match="not found"):
        parallel_graph.get_arc("nope")


def test_max_speed(parallel_graph):
    assert parallel_graph.max_speed() == pytest.approx(28.8)
    assert RoadGraph().max_speed() is None


def test_copy_is_independent_and_keeps_map_id(parallel_graph):
    clone = parallel_graph.copy()
    assert clone is not parallel_graph
    assert clone.map_id == parallel_graph.map_id
    assert clone.get_arcs() == parallel_graph.get_arcs()

    clone.add_node("D")
    clone.add_arc("C", "D", length=1)
    assert "D" not in parallel_graph
    assert len(parallel_graph.get_arcs()) == 3

    with pytest.raises(ValueError, match="views"):
        parallel_graph.copy(as_view=True)


def test_add_edges_from_goes_through_add_edge():
    g = RoadGraph()
    for node in ("A", "B", "C"):
        g.add_node(node)
    keys = g.add_edges_from(
        [
            ("A", "B", {"length": 10}),
            ("B", "C", "bc", {"length": 5, "max_speed": 30}),
            ("C", "A"),
            ("A", "C", 7),
        ],
        length=1,
        max_speed=90,
    )

    assert keys == [0, "bc", 1, 7]
    assert g.get_arc(0).length == 10.0
    assert g.get_arc(0).max_speed == 90.0
    assert g.get_arc("bc").max_speed == 30.0
    assert g.get_arc(1).length == 1.0
    assert g.get_arc(7).origin == "A"
    assert [arc.index for arc in g.get_arcs().values()] == [0, 1, 2, 3]


def test_add_edges_from_validates_each_arc():
    g = RoadGraph()
    g.add_node("A")
    g.add_node("B")
    with pytest.raises(ValueError, match="has no length"):
        g.add_edges_from([("A", "B")])
    with pytest.raises(ValueError, match="2-tuple, 3-tuple or 4-tuple"):
        g.add_edges_from([("A",)])
    assert g.get_arcs() == {}


def test_remove_node_drops_its_arcs(parallel_graph):
    parallel_graph.remove_node("B")

    assert "B" not in parallel_graph
    assert parallel_graph.get_arcs() == {}
    assert parallel_graph.number_of_edges() == 0
    assert parallel_graph.out_arcs("A") == []
    assert parallel_graph.to_dict()["links"] == []

    with pytest.raises(ValueError, match="does not exist"):
        parallel_graph.remove_node("B")


def test_remove_nodes_from_ignores_unknown_nodes(square_graph):
    square_graph.remove_nodes_from(["D", "Z"])
    assert set(square_graph) == {"A", "B", "C", "E"}
    assert sorted(square_graph.get_arcs()) == [0, 1, 4]


def test_remove_edge_by_key(parallel_graph):
    parallel_graph.remove_edge("B", "C", key="bc_short")

    assert not parallel_graph.has_arc("bc_short")
    assert [arc.key for arc in parallel_graph.arcs_between("B", "C")] == ["bc_fast"]
    assert [link["key"] for link in parallel_graph.to_dict()["links"]] == [
        "ab",
        "bc_fast",
    ]
    # The key is free again
    arc = parallel_graph.add_arc("B", "C", length=4, key="bc_short")
    assert parallel_graph.get_arc("bc_short") is arc


def test_remove_edge_without_key_removes_all_parallel_arcs(parallel_graph):
    parallel_graph.remove_edge("B", "C")
    assert list(parallel_graph.get_arcs()) == ["ab"]
    assert parallel_graph.arcs_between("B", "C") == []


@pytest.mark.parametrize(
    "args, match",
    [
        (("Z", "C"), "Source node 'Z' does not exist"),
        (("B", "Z"), "Target node 'Z' does not exist"),
        (("B", "C", "nope"), "No arc with id='nope'"),
        (("B", "C", "ab"), "actually from A to B"),
        (("C", "B"), "No arcs from 'C' to 'B'"),
    ],
)
def test_remove_edge_errors(parallel_graph, args, match):
    with pytest.raises(ValueError, match=match):
        parallel_graph.remove_edge(*args)
    assert len(parallel_graph.get_arcs()) == 3
    assert parallel_graph.number_of_edges() == 3


def test_remove_arc_by_id(parallel_graph):
    parallel_graph.remove_arc_by_id("ab")
    assert not parallel_graph.has_arc("ab")
    assert parallel_graph.out_arcs("A") == []
    with pytest.raises(ValueError, match="not found"):
        parallel_graph.remove_arc_by_id("ab")


def test_remove_edges_from(parallel_graph):
    parallel_graph.remove_edges_from([("A", "B"), ("B", "C", "bc_fast", {})])
    assert list(parallel_graph.get_arcs()) == ["bc_short"]
    with pytest.raises(ValueError, match="No arcs from 'A' to 'B'"):
        parallel_graph.remove_edges_from([("A", "B")])


def test_clear_keeps_map_identity(parallel_graph):
    parallel_graph.clear_edges()
    assert parallel_graph.get_arcs() == {}
    assert set(parallel_graph) == {"A", "B", "C"}

    parallel_graph.clear()
    assert len(parallel_graph) == 0
    assert parallel_graph.map_id == "parallel"
