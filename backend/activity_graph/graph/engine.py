"""
Graph Engine - the only entry point for mutating the activity graph.

Composes the GraphStore, the cycle checker and the DependencyGroupManager.
Every transition checks all of its preconditions before the first write,
so a failed call leaves the graph exactly as it was.

Edges can be added in one shot (missing decisions come from a resolver)
or in two phases:

    proposal = engine.propose_edge("a", "c", relation="one_from_many", logic="AND")
    if not proposal.is_ready:
        ...ask the user about proposal.requirements...
    edge = engine.confirm_edge(proposal.id, EdgeResolution.of(group_logic="OR"))
"""

import logging
import time
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional

from activity_graph import config
from .cycle_checker import find_cycle_with
from .dependency_groups import DependencyGroupManager
from .errors import (
    CycleError,
    IncompleteResolutionError,
    UnknownEndpointError,
    UnknownProposalError,
)
from .resolution import (
    REQUIRES_EDGE_LOGIC,
    REQUIRES_GROUP_LOGIC,
    REQUIRES_RELATION,
    DefaultLogicResolver,
    EdgeResolution,
    LogicResolver,
    ResolutionRequest,
)
from .store import GraphStore
from .types import (
    DependencyGroup,
    Edge,
    LabeledNode,
    LogicType,
    Node,
    NodeRemoval,
    RelationKind,
    parse_logic,
    parse_relation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeProposal:
    """A validated, not yet committed edge waiting for its missing decisions."""
    id: str
    source: str
    target: str
    relation: Optional[RelationKind] = None
    logic: Optional[LogicType] = None
    group_logic: Optional[LogicType] = None
    requirements: List[str] = field(default_factory=list)
    group_size: int = 0
    current_group_logic: Optional[LogicType] = None
    created_at: float = 0.0

    @property
    def is_ready(self) -> bool:
        return not self.requirements

    def to_request(self) -> ResolutionRequest:
        return ResolutionRequest(
            source=self.source,
            target=self.target,
            requirements=list(self.requirements),
            relation=self.relation,
            logic=self.logic,
            group_size=self.group_size,
            group_logic=self.current_group_logic,
        )


class GraphEngine:

    def __init__(
        self,
        store: Optional[GraphStore] = None,
        groups: Optional[DependencyGroupManager] = None,
        resolver: Optional[LogicResolver] = None,
        strict: Optional[bool] = None,
        clock: Callable[[], float] = time.time,
        proposal_ttl: Optional[float] = None,
    ):
        self.store = store or GraphStore()
        self.groups = groups or DependencyGroupManager()
        self.resolver = resolver or DefaultLogicResolver()
        self.strict = config.GRAPH_STRICT_INVARIANTS if strict is None else strict
        self._clock = clock
        self.proposal_ttl = config.PROPOSAL_TTL_SECONDS if proposal_ttl is None else proposal_ttl
        self._proposals: Dict[str, EdgeProposal] = {}

    # ============================
    # NODES
    # ============================

    def add_node(self, node: Node) -> Node:
        self.store.add_node(node)
        logger.info(f"[Engine] Added node '{node.id}' ({node.label})")
        self._check_invariants()
        return node

    def remove_node(self, node_id: str) -> NodeRemoval:
        node, cascaded = self.store.remove_node(node_id)
        self.groups.on_node_removed(node_id, cascaded)

        stale = [
            p.id for p in self._proposals.values()
            if node_id in (p.source, p.target)
        ]
        for proposal_id in stale:
            del self._proposals[proposal_id]

        logger.info(
            f"[Engine] Removed node '{node_id}' with {len(cascaded)} edge(s)"
            + (f", dropped {len(stale)} pending proposal(s)" if stale else "")
        )
        self._check_invariants()
        return NodeRemoval(node=node, removed_edges=cascaded)

    # ============================
    # EDGES - one shot
    # ============================

    def add_edge(
        self,
        source: str,
        target: str,
        relation=None,
        logic=None,
        group_logic=None,
        resolver: Optional[LogicResolver] = None,
    ) -> Optional[Edge]:
        """
        Add an edge, asking the resolver for any decision not supplied.

        Raises CycleError before any decision is requested.
        Returns None when the resolver cancels; nothing is changed then.
        """
        relation = parse_relation(relation)
        logic = parse_logic(logic)
        group_logic = parse_logic(group_logic)

        self._check_edge(source, target)

        requirements = self._requirements(target, relation, logic, group_logic)
        if requirements:
            group = self.groups.get(target)
            request = ResolutionRequest(
                source=source,
                target=target,
                requirements=requirements,
                relation=relation,
                logic=logic,
                group_size=group.size if group else 0,
                group_logic=group.logic if group else None,
            )
            resolution = (resolver or self.resolver).resolve(request)
            if resolution is None:
                logger.info(f"[Engine] Edge {source} -> {target} cancelled during resolution")
                return None
            relation = relation or parse_relation(resolution.relation)
            logic = logic or parse_logic(resolution.logic)
            group_logic = group_logic or parse_logic(resolution.group_logic)

        return self._commit(source, target, relation, logic, group_logic)

    def remove_edge(self, edge_id: str) -> Edge:
        edge = self.store.remove_edge(edge_id)
        self.groups.on_edge_removed(edge.id, edge.target)
        logger.info(f"[Engine] Removed edge {edge.id}")
        self._check_invariants()
        return edge

    # ============================
    # EDGES - two phase
    # ============================

    def propose_edge(
        self,
        source: str,
        target: str,
        relation=None,
        logic=None,
        group_logic=None,
    ) -> EdgeProposal:
        relation = parse_relation(relation)
        logic = parse_logic(logic)
        group_logic = parse_logic(group_logic)

        self._check_edge(source, target)
        self._expire_proposals()

        group = self.groups.get(target)
        proposal = EdgeProposal(
            id=uuid.uuid4().hex,
            source=source,
            target=target,
            relation=relation,
            logic=logic,
            group_logic=group_logic,
            requirements=self._requirements(target, relation, logic, group_logic),
            group_size=group.size if group else 0,
            current_group_logic=group.logic if group else None,
            created_at=self._clock(),
        )
        self._proposals[proposal.id] = proposal

        logger.info(
            f"[Engine] Proposed edge {source} -> {target} ({proposal.id}), "
            f"needs: {proposal.requirements or 'nothing'}"
        )
        return proposal

    def confirm_edge(self, proposal_id: str, resolution: Optional[EdgeResolution] = None) -> Edge:
        proposal = self.get_proposal(proposal_id)
        resolution = resolution or EdgeResolution()

        merged = replace(
            proposal,
            relation=proposal.relation or parse_relation(resolution.relation),
            logic=proposal.logic or parse_logic(resolution.logic),
            group_logic=proposal.group_logic or parse_logic(resolution.group_logic),
        )

        edge = self._commit(
            merged.source,
            merged.target,
            merged.relation,
            merged.logic,
            merged.group_logic,
            proposal_id=proposal_id,
        )
        del self._proposals[proposal_id]
        return edge

    def cancel_edge(self, proposal_id: str) -> EdgeProposal:
        proposal = self.get_proposal(proposal_id)
        del self._proposals[proposal_id]
        logger.info(f"[Engine] Cancelled edge proposal {proposal_id}")
        return proposal

    def get_proposal(self, proposal_id: str) -> EdgeProposal:
        self._expire_proposals()
        try:
            return self._proposals[proposal_id]
        except KeyError:
            raise UnknownProposalError(proposal_id) from None

    def pending_proposals(self) -> List[EdgeProposal]:
        self._expire_proposals()
        return list(self._proposals.values())

    # ============================
    # READ SIDE
    # ============================

    @property
    def nodes(self) -> List[Node]:
        return self.store.nodes

    @property
    def edges(self) -> List[Edge]:
        return self.store.edges

    def group_for(self, node_id: str) -> Optional[DependencyGroup]:
        return self.groups.get(node_id)

    def label_for(self, node_id: str) -> str:
        node = self.store.get_node(node_id)
        return self.groups.label_for(node.id, node.label)

    def nodes_with_labels(self) -> List[LabeledNode]:
        labeled = []
        for node in self.store.nodes:
            group = self.groups.get(node.id)
            labeled.append(LabeledNode(
                id=node.id,
                label=self.groups.label_for(node.id, node.label),
                base_label=node.label,
                parent_count=group.size if group else 0,
                logic=group.logic if group else None,
            ))
        return labeled

    # ============================
    # INTERNALS
    # ============================

    def _check_edge(self, source: str, target: str) -> None:
        if not self.store.has_node(source):
            raise UnknownEndpointError(source, role="source")
        if not self.store.has_node(target):
            raise UnknownEndpointError(target, role="target")

        cycle = find_cycle_with(source, target, self.store.edges, self.store.node_ids)
        if cycle:
            logger.warning(f"[Engine] Rejected edge {source} -> {target}: cycle {' -> '.join(cycle)}")
            raise CycleError(source, target, cycle)

    def _requirements(
        self,
        target: str,
        relation: Optional[RelationKind],
        logic: Optional[LogicType],
        group_logic: Optional[LogicType],
    ) -> List[str]:
        missing = []
        if relation is None:
            missing.append(REQUIRES_RELATION)
        elif relation == RelationKind.ONE_FROM_MANY and logic is None:
            missing.append(REQUIRES_EDGE_LOGIC)
        if group_logic is None and self.groups.needs_group_logic(target):
            missing.append(REQUIRES_GROUP_LOGIC)
        return missing

    def _expire_proposals(self) -> None:
        if not self.proposal_ttl:
            return
        cutoff = self._clock() - self.proposal_ttl
        expired = [p.id for p in self._proposals.values() if p.created_at < cutoff]
        for proposal_id in expired:
            del self._proposals[proposal_id]
        if expired:
            logger.info(f"[Engine] Dropped {len(expired)} expired edge proposal(s)")

    def _new_edge_id(self, source: str, target: str) -> str:
        base = f"{source}-{target}-{int(self._clock() * 1000)}"
        edge_id = base
        n = 1
        while self.store.has_edge(edge_id):
            edge_id = f"{base}-{n}"
            n += 1
        return edge_id

    def _commit(
        self,
        source: str,
        target: str,
        relation: Optional[RelationKind],
        logic: Optional[LogicType],
        group_logic: Optional[LogicType],
        proposal_id: Optional[str] = None,
    ) -> Edge:
        # the graph may have changed since a proposal was made
        self._check_edge(source, target)

        missing = self._requirements(target, relation, logic, group_logic)
        if missing:
            raise IncompleteResolutionError(missing, proposal_id=proposal_id)

        if relation != RelationKind.ONE_FROM_MANY and logic is not None:
            logger.debug(f"[Engine] Dropping edge logic {logic.value} for {relation.value} relation")
            logic = None

        edge = Edge(
            id=self._new_edge_id(source, target),
            source=source,
            target=target,
            relation=relation,
            logic=logic,
        )
        label = edge.label

        self.store.add_edge(edge)
        try:
            self.groups.on_edge_added(edge, group_logic)
        except Exception:
            self.store.remove_edge(edge.id)
            raise

        logger.info(f"[Engine] Added edge {edge.id} ({label})")
        self._check_invariants()
        return edge

    def _check_invariants(self) -> None:
        if not self.strict:
            return
        # imported here to avoid a circular import
        from activity_graph.validation.graph_validator import raise_on_errors
        raise_on_errors(self)
