"""
Domain errors for the activity graph.

Every error carries a machine-readable name, a human description, the HTTP
status the API answers with, and the parameters that caused it.
"""

from typing import Any, Dict, List, Optional


class GraphError(Exception):
    error_name: str = "GraphError"
    description: str = "Activity graph error"
    status_code: int = 400

    def __init__(self, message: Optional[str] = None, **params: Any):
        self.params: Dict[str, Any] = params
        super().__init__(message or self.description)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {
            "errorName": self.error_name,
            "description": self.description,
            "message": self.message,
            "details": self.params,
        }


class CycleError(GraphError):
    error_name = "CycleError"
    description = "Edge would create a cycle in the dependency graph"
    status_code = 409

    def __init__(self, source: str, target: str, cycle: Optional[List[str]] = None):
        path = " -> ".join(cycle) if cycle else f"{target} -> ... -> {source} -> {target}"
        super().__init__(
            f"Edge '{source}' -> '{target}' would create a cycle: {path}",
            source=source,
            target=target,
            cycle=cycle or [],
        )


class UnknownEndpointError(GraphError):
    error_name = "UnknownEndpointError"
    description = "Edge references a node that is not in the graph"
    status_code = 422

    def __init__(self, node_id: str, role: str = "endpoint"):
        super().__init__(f"Edge {role} '{node_id}' is not in the graph", node_id=node_id, role=role)


class DuplicateNodeError(GraphError):
    error_name = "DuplicateNodeError"
    description = "A node with this id already exists"
    status_code = 409

    def __init__(self, node_id: str):
        super().__init__(f"Node '{node_id}' already exists", node_id=node_id)


class DuplicateEdgeError(GraphError):
    error_name = "DuplicateEdgeError"
    description = "An edge with this id already exists"
    status_code = 409

    def __init__(self, edge_id: str):
        super().__init__(f"Edge '{edge_id}' already exists", edge_id=edge_id)


class UnknownNodeError(GraphError):
    error_name = "UnknownNodeError"
    description = "Node not found"
    status_code = 404

    def __init__(self, node_id: str):
        super().__init__(f"Node '{node_id}' not found", node_id=node_id)


class UnknownEdgeError(GraphError):
    error_name = "UnknownEdgeError"
    description = "Edge not found"
    status_code = 404

    def __init__(self, edge_id: str):
        super().__init__(f"Edge '{edge_id}' not found", edge_id=edge_id)


class UnknownProposalError(GraphError):
    error_name = "UnknownProposalError"
    description = "Edge proposal not found"
    status_code = 404

    def __init__(self, proposal_id: str):
        super().__init__(f"Edge proposal '{proposal_id}' not found", proposal_id=proposal_id)


class IncompleteResolutionError(GraphError):
    error_name = "IncompleteResolutionError"
    description = "Edge needs more decisions before it can be added"
    status_code = 422

    def __init__(self, missing: List[str], proposal_id: Optional[str] = None):
        subject = f"Edge proposal '{proposal_id}'" if proposal_id else "Edge"
        super().__init__(
            f"{subject} is missing: {', '.join(missing)}",
            proposal_id=proposal_id,
            missing=list(missing),
        )


class InvalidActivityNameError(GraphError):
    error_name = "InvalidActivityNameError"
    description = "Activity name must be a non-empty string"
    status_code = 400

    def __init__(self, name: Any = None):
        super().__init__(self.description, name=name)


class UnknownActivityError(GraphError):
    error_name = "UnknownActivityError"
    description = "Activity is not in the available pool"
    status_code = 404

    def __init__(self, activity_id: str):
        super().__init__(f"Activity '{activity_id}' is not available", activity_id=activity_id)


class ActivitySourceError(GraphError):
    error_name = "ActivitySourceError"
    description = "Activity source request failed"
    status_code = 502


class GraphInvariantError(GraphError):
    error_name = "GraphInvariantError"
    description = "Graph invariant violated"
    status_code = 500


class UnresolvedGroupLogicError(GraphInvariantError):
    error_name = "UnresolvedGroupLogicError"
    description = "Dependency group has several edges but no combination logic"
    status_code = 500

    def __init__(self, target_id: str, size: int):
        super().__init__(
            f"Dependency group of '{target_id}' would hold {size} edges without AND/OR logic",
            target_id=target_id,
            size=size,
        )
