"""
Activity dependency graph: store, cycle checker, dependency groups and engine.
"""

from activity_graph.graph.types import (
    Activity,
    DependencyGroup,
    Edge,
    LabeledNode,
    LogicType,
    Node,
    NodeRemoval,
    RelationKind,
)
from activity_graph.graph.errors import (
    CycleError,
    DuplicateEdgeError,
    DuplicateNodeError,
    GraphError,
    GraphInvariantError,
    IncompleteResolutionError,
    UnknownEdgeError,
    UnknownEndpointError,
    UnknownNodeError,
    UnknownProposalError,
    UnresolvedGroupLogicError,
)
from activity_graph.graph.store import GraphStore
from activity_graph.graph.cycle_checker import find_cycle, would_create_cycle
from activity_graph.graph.dependency_groups import DependencyGroupManager
from activity_graph.graph.resolution import (
    CallbackResolver,
    DefaultLogicResolver,
    EdgeResolution,
    LogicResolver,
    PromptResolver,
    ResolutionRequest,
)
from activity_graph.graph.engine import EdgeProposal, GraphEngine

__all__ = [
    "Activity",
    "DependencyGroup",
    "Edge",
    "LabeledNode",
    "LogicType",
    "Node",
    "NodeRemoval",
    "RelationKind",
    "CycleError",
    "DuplicateEdgeError",
    "DuplicateNodeError",
    "GraphError",
    "GraphInvariantError",
    "IncompleteResolutionError",
    "UnknownEdgeError",
    "UnknownEndpointError",
    "UnknownNodeError",
    "UnknownProposalError",
    "UnresolvedGroupLogicError",
    "GraphStore",
    "find_cycle",
    "would_create_cycle",
    "DependencyGroupManager",
    "CallbackResolver",
    "DefaultLogicResolver",
    "EdgeResolution",
    "LogicResolver",
    "PromptResolver",
    "ResolutionRequest",
    "EdgeProposal",
    "GraphEngine",
]
