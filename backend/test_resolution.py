"""Tests for the relation / logic resolvers"""

from activity_graph.graph.engine import GraphEngine
from activity_graph.graph.resolution import (
    DefaultLogicResolver,
    PromptResolver,
    ResolutionRequest,
)
from activity_graph.graph.types import LogicType, Node, RelationKind


def scripted(*answers):
    """input() replacement that replays answers and records the questions"""
    remaining = list(answers)
    asked = []

    def input_fn(question):
        asked.append(question)
        return remaining.pop(0)

    input_fn.asked = asked
    return input_fn


def request(*requirements, relation=None, logic=None):
    return ResolutionRequest(
        source="a",
        target="c",
        requirements=list(requirements),
        relation=relation,
        logic=logic,
    )


def test_default_resolver_only_fills_what_is_missing():
    resolver = DefaultLogicResolver(relation="many_from_one", logic="OR", group_logic="OR")

    resolution = resolver.resolve(request("relation"))
    assert resolution.relation == RelationKind.MANY_FROM_ONE
    assert resolution.logic is None
    assert resolution.group_logic is None

    resolution = resolver.resolve(request("logic", "group_logic", relation=RelationKind.ONE_FROM_MANY))
    assert resolution.relation == RelationKind.ONE_FROM_MANY
    assert resolution.logic == LogicType.OR
    assert resolution.group_logic == LogicType.OR


def test_prompt_resolver_asks_in_order():
    input_fn = scripted("one_from_many", "", "or")
    resolver = PromptResolver(input_fn=input_fn, defaults=DefaultLogicResolver(logic="AND"))

    resolution = resolver.resolve(request("relation", "group_logic"))

    assert resolution.relation == RelationKind.ONE_FROM_MANY
    assert resolution.logic == LogicType.AND
    assert resolution.group_logic == LogicType.OR
    assert len(input_fn.asked) == 3
    assert "multiple parents" in input_fn.asked[2]


def test_prompt_resolver_asks_again_on_bad_answer():
    input_fn = scripted("bogus", "MANY_FROM_ONE")
    resolution = PromptResolver(input_fn=input_fn).resolve(request("relation"))
    assert resolution.relation == RelationKind.MANY_FROM_ONE
    assert len(input_fn.asked) == 2


def test_prompt_resolver_cancel():
    resolver = PromptResolver(input_fn=scripted("one_from_one", "cancel"))
    assert resolver.resolve(request("relation", "group_logic")) is None


def test_prompt_resolver_drives_the_engine():
    engine = GraphEngine(
        resolver=PromptResolver(input_fn=scripted("one_from_one", "one_from_many", "and", "or")),
        strict=True,
    )
    for node_id in ("a", "b", "c"):
        engine.add_node(Node(node_id, node_id.upper()))

    engine.add_edge("a", "c")
    edge = engine.add_edge("b", "c")

    assert edge.relation == RelationKind.ONE_FROM_MANY
    assert edge.logic == LogicType.AND
    assert engine.group_for("c").logic == LogicType.OR
