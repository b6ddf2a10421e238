"""Quick tests to verify the graph validator is working"""

import pytest

from activity_graph.graph.engine import GraphEngine
from activity_graph.graph.errors import GraphInvariantError, UnresolvedGroupLogicError
from activity_graph.graph.types import DependencyGroup, Edge, LogicType, Node, RelationKind
from activity_graph.validation import (
    GraphValidator,
    ValidationSeverity,
    get_validation_summary,
    raise_on_errors,
    validate_graph,
)


def make_node(node_id: str) -> Node:
    return Node(id=node_id, label=node_id.upper())


def test_healthy_graph_is_valid():
    engine = GraphEngine(strict=True)
    for node_id in ("a", "b", "c", "lonely"):
        engine.add_node(make_node(node_id))
    engine.add_edge("a", "c", relation="one_from_one")
    engine.add_edge("b", "c", relation="one_from_many", logic="OR", group_logic="AND")

    result = validate_graph(engine)

    assert result.is_valid
    assert result.error_count == 0
    assert [i.code for i in result.issues] == ["ISOLATED_NODE"]
    assert result.stats["edges"] == 2
    assert result.stats["multi_parent_groups"] == 1
    assert result.stats["one_from_many"] == 1
    assert get_validation_summary(engine) == "Valid graph | 0 error, 0 warning, 1 info"

    data = result.to_dict()
    assert (data["error_count"], data["warning_count"], data["info_count"]) == (0, 0, 1)


def test_broken_graph_reports_every_issue():
    nodes = [make_node("a"), make_node("b"), make_node("c")]
    edges = [
        Edge(id="ab", source="a", target="b"),
        Edge(id="ba", source="b", target="a"),                      # cycle
        Edge(id="cc", source="c", target="c"),                      # self-loop
        Edge(id="ax", source="a", target="x"),                      # missing target
        Edge(id="ac", source="a", target="c", relation=RelationKind.ONE_FROM_MANY),  # no logic
        Edge(id="ac2", source="a", target="c"),                     # not grouped
    ]
    groups = [
        DependencyGroup(target="b", edges=["ab"]),
        DependencyGroup(target="a", edges=["ba"], logic=LogicType.OR),   # stale logic
        DependencyGroup(target="c", edges=["cc", "ac", "gone"]),        # missing logic
    ]

    result = GraphValidator().validate_parts(nodes, edges, groups)

    print(f"\n{result.get_summary()}")
    for issue in result.issues:
        print(f"  [{issue.severity.value}] {issue.code}: {issue.message}")

    assert not result.is_valid
    assert {
        "CIRCULAR_DEPENDENCY",
        "SELF_LOOP",
        "DANGLING_EDGE",
        "EDGE_LOGIC_MISMATCH",
        "EDGE_NOT_GROUPED",
        "GROUP_LOGIC_STALE",
        "GROUP_LOGIC_MISSING",
        "GROUP_UNKNOWN_EDGE",
        "PARALLEL_EDGES",
    } <= {i.code for i in result.issues}

    cycle = next(i for i in result.issues if i.code == "CIRCULAR_DEPENDENCY")
    assert "a -> b -> a" in cycle.message or "b -> a -> b" in cycle.message


def test_strict_mode_fails_on_warnings():
    nodes = [make_node("a"), make_node("b")]
    edges = [Edge(id="ab", source="a", target="b", relation=RelationKind.ONE_FROM_MANY)]
    groups = [DependencyGroup(target="b", edges=["ab"])]

    assert GraphValidator().validate_parts(nodes, edges, groups).is_valid
    strict = GraphValidator(strict_mode=True).validate_parts(nodes, edges, groups)
    assert not strict.is_valid
    assert strict.issues[0].severity == ValidationSeverity.WARNING


def test_raise_on_errors_picks_error_kind():
    engine = GraphEngine(strict=False)
    for node_id in ("a", "b", "c"):
        engine.add_node(make_node(node_id))
    engine.add_edge("a", "c", relation="one_from_one")
    engine.add_edge("b", "c", relation="one_from_one", group_logic="AND")
    raise_on_errors(engine)

    engine.groups._groups["c"].logic = None
    with pytest.raises(UnresolvedGroupLogicError):
        raise_on_errors(engine)

    engine.groups._groups["c"].logic = LogicType.AND
    engine.store._edges["ghost"] = Edge(id="ghost", source="a", target="nowhere")
    with pytest.raises(GraphInvariantError) as exc:
        raise_on_errors(engine)
    assert type(exc.value) is GraphInvariantError
    assert any(i["code"] == "DANGLING_EDGE" for i in exc.value.params["issues"])
