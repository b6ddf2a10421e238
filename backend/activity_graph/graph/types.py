from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class RelationKind(str, Enum):
    ONE_FROM_ONE = "one_from_one"      # single prerequisite
    ONE_FROM_MANY = "one_from_many"    # one of several, combined via logic
    MANY_FROM_ONE = "many_from_one"    # one source feeding several targets


class LogicType(str, Enum):
    AND = "AND"
    OR = "OR"


def parse_relation(value) -> Optional[RelationKind]:
    """Accept a RelationKind, its string value, or None."""
    if value is None or isinstance(value, RelationKind):
        return value
    return RelationKind(str(value).strip().lower())


def parse_logic(value) -> Optional[LogicType]:
    """Accept a LogicType, 'and'/'OR'-style strings, or None."""
    if value is None or isinstance(value, LogicType):
        return value
    return LogicType(str(value).strip().upper())


def edge_label(relation: RelationKind, logic: Optional[LogicType] = None) -> str:
    if relation == RelationKind.ONE_FROM_MANY:
        return f"{relation.value} ({logic.value if logic else '?'})"
    return relation.value


@dataclass(frozen=True)
class Node:
    id: str
    label: str


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    relation: RelationKind = RelationKind.ONE_FROM_ONE
    logic: Optional[LogicType] = None  # only for one_from_many

    @property
    def label(self) -> str:
        return edge_label(self.relation, self.logic)


@dataclass
class DependencyGroup:
    """Incoming edges of one target node and the rule that combines them."""
    target: str
    edges: List[str] = field(default_factory=list)  # ordered, unique edge ids
    logic: Optional[LogicType] = None

    @property
    def size(self) -> int:
        return len(self.edges)

    @property
    def is_active(self) -> bool:
        return self.size > 0

    def copy(self) -> "DependencyGroup":
        return DependencyGroup(target=self.target, edges=list(self.edges), logic=self.logic)


@dataclass(frozen=True)
class LabeledNode:
    id: str
    label: str
    base_label: str
    parent_count: int = 0
    logic: Optional[LogicType] = None


@dataclass(frozen=True)
class NodeRemoval:
    node: Node
    removed_edges: List[Edge] = field(default_factory=list)

    @property
    def removed_edge_ids(self) -> List[str]:
        return [e.id for e in self.removed_edges]


@dataclass
class Activity:
    id: str
    name: str

    def to_node(self) -> Node:
        return Node(id=self.id, label=self.name)

    @classmethod
    def from_dict(cls, data: Dict) -> "Activity":
        return cls(id=str(data["id"]), name=str(data.get("name", "")))
