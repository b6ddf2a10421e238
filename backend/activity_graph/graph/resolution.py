"""
Relation / logic resolution collaborators.

When an edge is added without every decision made up front, the engine
builds a ResolutionRequest and asks a LogicResolver to fill the gaps.
A resolver returning None cancels the edge.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from activity_graph import config
from .types import LogicType, RelationKind, parse_logic, parse_relation

REQUIRES_RELATION = "relation"
REQUIRES_EDGE_LOGIC = "logic"
REQUIRES_GROUP_LOGIC = "group_logic"


@dataclass(frozen=True)
class ResolutionRequest:
    source: str
    target: str
    requirements: List[str]
    relation: Optional[RelationKind] = None
    logic: Optional[LogicType] = None
    group_size: int = 0                       # incoming edges before this one
    group_logic: Optional[LogicType] = None   # established rule, if any

    def requires(self, what: str) -> bool:
        return what in self.requirements


@dataclass(frozen=True)
class EdgeResolution:
    """Decisions returned by a resolver; plain strings are parsed into enums."""
    relation: Optional[RelationKind] = None
    logic: Optional[LogicType] = None
    group_logic: Optional[LogicType] = None

    def __post_init__(self):
        object.__setattr__(self, "relation", parse_relation(self.relation))
        object.__setattr__(self, "logic", parse_logic(self.logic))
        object.__setattr__(self, "group_logic", parse_logic(self.group_logic))

    @classmethod
    def of(cls, relation=None, logic=None, group_logic=None) -> "EdgeResolution":
        return cls(relation=relation, logic=logic, group_logic=group_logic)


class LogicResolver(ABC):
    @abstractmethod
    def resolve(self, request: ResolutionRequest) -> Optional[EdgeResolution]:
        """Return the missing decisions, or None to cancel the edge"""
        pass


class DefaultLogicResolver(LogicResolver):
    """Fills every missing decision with a fixed default."""

    def __init__(
        self,
        relation=None,
        logic=None,
        group_logic=None,
    ):
        self.relation = parse_relation(relation or config.DEFAULT_RELATION)
        self.logic = parse_logic(logic or config.DEFAULT_EDGE_LOGIC)
        self.group_logic = parse_logic(group_logic or config.DEFAULT_GROUP_LOGIC)

    def resolve(self, request: ResolutionRequest) -> Optional[EdgeResolution]:
        relation = request.relation or self.relation
        logic = request.logic
        if relation == RelationKind.ONE_FROM_MANY and logic is None:
            logic = self.logic
        group_logic = self.group_logic if request.requires(REQUIRES_GROUP_LOGIC) else None
        return EdgeResolution(relation=relation, logic=logic, group_logic=group_logic)


class CallbackResolver(LogicResolver):
    def __init__(self, callback: Callable[[ResolutionRequest], Optional[EdgeResolution]]):
        self.callback = callback

    def resolve(self, request: ResolutionRequest) -> Optional[EdgeResolution]:
        return self.callback(request)


class PromptResolver(LogicResolver):
    """
    Asks for each missing decision on a console.

    An empty answer takes the suggested default; 'cancel' aborts the edge.
    Invalid answers are asked again.
    """

    CANCEL = "cancel"

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        defaults: Optional[DefaultLogicResolver] = None,
    ):
        self.input_fn = input_fn
        self.defaults = defaults or DefaultLogicResolver()

    def _ask(self, question: str, default, parse):
        while True:
            answer = self.input_fn(f"{question} [{default.value}]: ").strip()
            if answer.lower() == self.CANCEL:
                return None
            if not answer:
                return default
            try:
                return parse(answer)
            except ValueError:
                continue

    def resolve(self, request: ResolutionRequest) -> Optional[EdgeResolution]:
        relation = request.relation
        if relation is None:
            options = ", ".join(r.value for r in RelationKind)
            relation = self._ask(
                f"Relation type for {request.source} -> {request.target} ({options})",
                self.defaults.relation,
                parse_relation,
            )
            if relation is None:
                return None

        logic = request.logic
        if relation == RelationKind.ONE_FROM_MANY and logic is None:
            logic = self._ask("Logic of this relation (AND/OR)", self.defaults.logic, parse_logic)
            if logic is None:
                return None

        group_logic = None
        if request.requires(REQUIRES_GROUP_LOGIC):
            group_logic = self._ask(
                f"'{request.target}' gets multiple parents. Group logic (AND/OR)",
                logic or self.defaults.group_logic,
                parse_logic,
            )
            if group_logic is None:
                return None

        return EdgeResolution(relation=relation, logic=logic, group_logic=group_logic)
