"""Tests for cycle detection"""

from activity_graph.graph.cycle_checker import find_cycle, find_cycle_with, would_create_cycle
from activity_graph.graph.types import Edge, Node


def chain(*ids: str):
    return [
        Edge(id=f"{s}-{t}", source=s, target=t)
        for s, t in zip(ids, ids[1:])
    ]


def test_closing_a_chain_is_a_cycle():
    edges = chain("a", "b", "c")
    nodes = ["a", "b", "c"]
    assert would_create_cycle("c", "a", edges, nodes)
    assert not would_create_cycle("a", "c", edges, nodes)


def test_self_loop_is_a_cycle():
    assert would_create_cycle("a", "a", [], ["a"])
    assert find_cycle_with("a", "a", [], ["a"]) == ["a", "a"]


def test_nodes_can_be_node_objects():
    nodes = [Node("a", "A"), Node("b", "B")]
    edges = chain("a", "b")
    assert would_create_cycle("b", "a", edges, nodes)


def test_diamond_is_not_a_cycle():
    edges = chain("a", "b", "d") + chain("a", "c", "d")
    nodes = ["a", "b", "c", "d"]
    assert not would_create_cycle("b", "c", edges, nodes)
    assert would_create_cycle("d", "a", edges, nodes)


def test_candidate_is_not_added_to_the_edges():
    edges = chain("a", "b")
    would_create_cycle("b", "a", edges, ["a", "b"])
    assert len(edges) == 1


def test_find_cycle_returns_closed_path():
    edges = chain("a", "b", "c", "a")
    cycle = find_cycle(edges, ["a", "b", "c"])
    assert cycle[0] == cycle[-1]
    assert set(cycle) == {"a", "b", "c"}
    assert find_cycle(chain("a", "b", "c"), ["a", "b", "c"]) is None


def test_deep_chain_does_not_hit_recursion_limit():
    ids = [f"n{i}" for i in range(5000)]
    edges = chain(*ids)
    assert would_create_cycle(ids[-1], ids[0], edges, ids)
    assert not would_create_cycle(ids[0], ids[-1], edges, ids)
