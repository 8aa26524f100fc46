import heapq

import pytest

from roadpath.model.label import SearchLabel, cost_only, heuristic_total_cost


def test_fresh_label_state():
    label = SearchLabel("A")
    assert label.node == "A"
    assert label.cost is None
    assert label.total_cost is None
    assert not label.is_reached
    assert label.finalized is False
    assert label.predecessor is None


def test_node_is_read_only():
    label = SearchLabel("A")
    with pytest.raises(AttributeError):
        label.node = "B"  # type: ignore[misc]


def test_cost_and_predecessor_updates(parallel_graph):
    label = SearchLabel("B")
    arc = parallel_graph.get_arc("ab")
    label.cost = 10
    label.predecessor = arc
    assert label.is_reached
    assert label.cost == 10
    assert label.total_cost == 10
    assert label.predecessor is arc


def test_lower_cost_is_accepted():
    label = SearchLabel("A")
    label.cost = 10
    label.cost = 7.5
    assert label.cost == 7.5


def test_negative_cost_rejected():
    label = SearchLabel("A")
    with pytest.raises(ValueError, match="non-negative"):
        label.cost = -1


def test_finalized_cost_is_frozen():
    label = SearchLabel("A")
    label.cost = 3
    label.finalized = True
    with pytest.raises(ValueError, match="finalized"):
        label.cost = 1
    assert label.cost == 3


def test_reset():
    label = SearchLabel("A")
    label.cost = 3
    label.predecessor = object()
    label.finalized = True
    label.reset()
    assert (label.cost, label.predecessor, label.finalized) == (None, None, False)
    label.cost = 4
    assert label.cost == 4


def test_orders_by_cost():
    cheap, dear = SearchLabel("A"), SearchLabel("B")
    cheap.cost = 3
    dear.cost = 5
    assert cheap < dear
    assert not dear < cheap
    assert min([dear, cheap]) is cheap
    assert sorted([dear, cheap]) == [cheap, dear]


def test_equal_costs_are_not_strictly_ordered():
    a, b = SearchLabel("A"), SearchLabel("B")
    a.cost = b.cost = 4
    assert not a < b
    assert not b < a


def test_unreached_labels_sort_last():
    reached, unreached, other = SearchLabel("A"), SearchLabel("B"), SearchLabel("C")
    reached.cost = 1_000_000
    assert reached < unreached
    assert not unreached < reached
    assert not unreached < other


def test_labels_work_in_heapq():
    labels = [SearchLabel(n) for n in "ABCDE"]
    for label, cost in zip(labels, [5, 1, 4, 2, 3]):
        label.cost = cost
    heap = []
    for label in labels:
        heapq.heappush(heap, label)
    assert [heapq.heappop(heap).node for _ in labels] == ["B", "D", "E", "C", "A"]


def test_compare_with_other_type():
    with pytest.raises(TypeError):
        SearchLabel("A") < 3  # noqa: B015


def test_default_strategy_is_cost_only():
    label = SearchLabel("A")
    label.cost = 2
    assert cost_only(label) == 2


def test_heuristic_strategy_changes_order_not_cost():
    estimates = {"near": 1.0, "far": 10.0}
    calls = []

    def heuristic(node):
        calls.append(node)
        return estimates[node]

    strategy = heuristic_total_cost(heuristic)
    near, far = SearchLabel("near", strategy), SearchLabel("far", strategy)
    assert near.total_cost is None

    near.cost = 6
    far.cost = 2
    assert near.total_cost == 7
    assert far.total_cost == 12
    assert near < far
    assert far.cost == 2

    # The estimate is computed once per node
    near.total_cost
    far.total_cost
    assert sorted(calls) == ["far", "near"]
