"""
Graph Validator - Checks the activity graph against its invariants.

Catches issues like:
- Edges pointing at missing nodes
- Self-loops and circular dependencies
- Dependency groups with several parents but no AND/OR logic
- Groups out of sync with the edge list
- Isolated activities
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from activity_graph.graph.cycle_checker import find_cycle
from activity_graph.graph.errors import GraphInvariantError, UnresolvedGroupLogicError
from activity_graph.graph.types import DependencyGroup, Edge, Node, RelationKind

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    ERROR = "error"      # invariant broken, strict engines refuse to continue
    WARNING = "warning"  # graph is usable but inconsistent
    INFO = "info"


@dataclass
class ValidationIssue:
    severity: ValidationSeverity
    code: str
    message: str
    node_id: Optional[str] = None
    edge_id: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"severity": self.severity.value, "code": self.code, "message": self.message}
        for key in ("node_id", "edge_id", "suggestion"):
            data[key] = getattr(self, key)
        return data


@dataclass
class GraphValidationResult:
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def count(self, severity: ValidationSeverity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    @property
    def error_count(self) -> int:
        return self.count(ValidationSeverity.ERROR)

    def to_dict(self) -> dict:
        data = {"is_valid": self.is_valid}
        for severity in ValidationSeverity:
            data[f"{severity.value}_count"] = self.count(severity)
        data["issues"] = [i.to_dict() for i in self.issues]
        data["stats"] = self.stats
        return data

    def get_summary(self) -> str:
        counts = ", ".join(
            f"{self.count(s)} {s.value}" for s in ValidationSeverity
        )
        return f"{'Valid' if self.is_valid else 'Invalid'} graph | {counts}"


GROUP_LOGIC_CODES = {"GROUP_LOGIC_MISSING", "GROUP_LOGIC_STALE"}


class GraphValidator:
    """
    Checks nodes, edges and dependency groups of a GraphEngine.

    In strict mode warnings also make the graph invalid.
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode

    def validate(self, engine) -> GraphValidationResult:
        """Validate anything exposing `store` and `groups` like GraphEngine."""
        return self.validate_parts(
            engine.store.nodes,
            engine.store.edges,
            engine.groups.groups(),
        )

    def validate_parts(
        self,
        nodes: Iterable[Node],
        edges: Iterable[Edge],
        groups: Iterable[DependencyGroup],
    ) -> GraphValidationResult:
        nodes = list(nodes)
        edges = list(edges)
        groups = list(groups)
        node_ids = {n.id for n in nodes}

        issues: List[ValidationIssue] = []
        issues.extend(self._check_duplicate_edge_ids(edges))
        issues.extend(self._check_dangling_edges(edges, node_ids))
        issues.extend(self._check_self_loops(edges))
        issues.extend(self._check_circular_dependencies(edges, nodes))
        issues.extend(self._check_group_logic(groups))
        issues.extend(self._check_group_membership(edges, groups))
        issues.extend(self._check_edge_logic(edges))
        issues.extend(self._check_parallel_edges(edges))
        issues.extend(self._check_isolated_nodes(nodes, edges))

        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        has_warnings = any(i.severity == ValidationSeverity.WARNING for i in issues)

        is_valid = not has_errors
        if self.strict_mode:
            is_valid = not has_errors and not has_warnings

        return GraphValidationResult(
            is_valid=is_valid,
            issues=issues,
            stats=self._calculate_stats(nodes, edges, groups),
        )

    def _check_duplicate_edge_ids(self, edges: List[Edge]) -> List[ValidationIssue]:
        issues = []
        seen: Dict[str, int] = defaultdict(int)
        for edge in edges:
            seen[edge.id] += 1
        for edge_id, count in seen.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DUPLICATE_EDGE_ID",
                    message=f"Edge id '{edge_id}' appears {count} times",
                    edge_id=edge_id,
                ))
        return issues

    def _check_dangling_edges(self, edges: List[Edge], node_ids: Set[str]) -> List[ValidationIssue]:
        issues = []
        for edge in edges:
            for role, endpoint in (("source", edge.source), ("target", edge.target)):
                if endpoint not in node_ids:
                    issues.append(ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="DANGLING_EDGE",
                        message=f"Edge '{edge.id}' references missing {role} node '{endpoint}'",
                        node_id=endpoint,
                        edge_id=edge.id,
                        suggestion="Remove the edge or add the missing activity",
                    ))
        return issues

    def _check_self_loops(self, edges: List[Edge]) -> List[ValidationIssue]:
        issues = []
        for edge in edges:
            if edge.source == edge.target:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="SELF_LOOP",
                    message=f"Edge '{edge.id}' makes '{edge.source}' depend on itself",
                    node_id=edge.source,
                    edge_id=edge.id,
                ))
        return issues

    def _check_circular_dependencies(self, edges: List[Edge], nodes: List[Node]) -> List[ValidationIssue]:
        # self-loops are reported on their own
        cycle = find_cycle([e for e in edges if e.source != e.target], nodes)
        if not cycle:
            return []
        return [ValidationIssue(
            severity=ValidationSeverity.ERROR,
            code="CIRCULAR_DEPENDENCY",
            message=f"Circular dependency detected: {' -> '.join(cycle)}",
            node_id=cycle[0],
            suggestion="Remove one of the edges in the cycle",
        )]

    def _check_group_logic(self, groups: List[DependencyGroup]) -> List[ValidationIssue]:
        issues = []
        for group in groups:
            if group.size > 1 and group.logic is None:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="GROUP_LOGIC_MISSING",
                    message=f"'{group.target}' has {group.size} parents but no AND/OR logic",
                    node_id=group.target,
                ))
            elif group.size <= 1 and group.logic is not None:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="GROUP_LOGIC_STALE",
                    message=f"'{group.target}' has {group.size} parent(s) but keeps logic {group.logic.value}",
                    node_id=group.target,
                ))
        return issues

    def _check_group_membership(self, edges: List[Edge], groups: List[DependencyGroup]) -> List[ValidationIssue]:
        issues = []
        edges_by_id = {e.id: e for e in edges}
        grouped: Set[Tuple[str, str]] = set()

        for group in groups:
            for edge_id in group.edges:
                edge = edges_by_id.get(edge_id)
                if edge is None or edge.target != group.target:
                    issues.append(ValidationIssue(
                        severity=ValidationSeverity.ERROR,
                        code="GROUP_UNKNOWN_EDGE",
                        message=f"Group of '{group.target}' references edge '{edge_id}' that does not feed it",
                        node_id=group.target,
                        edge_id=edge_id,
                    ))
                else:
                    grouped.add((group.target, edge_id))

        for edge in edges:
            if (edge.target, edge.id) not in grouped:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="EDGE_NOT_GROUPED",
                    message=f"Edge '{edge.id}' is missing from the group of '{edge.target}'",
                    node_id=edge.target,
                    edge_id=edge.id,
                ))
        return issues

    def _check_edge_logic(self, edges: List[Edge]) -> List[ValidationIssue]:
        issues = []
        for edge in edges:
            if edge.relation == RelationKind.ONE_FROM_MANY and edge.logic is None:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EDGE_LOGIC_MISMATCH",
                    message=f"Edge '{edge.id}' is one_from_many but has no logic",
                    edge_id=edge.id,
                    suggestion="Set AND or OR on the relation",
                ))
            elif edge.relation != RelationKind.ONE_FROM_MANY and edge.logic is not None:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EDGE_LOGIC_MISMATCH",
                    message=f"Edge '{edge.id}' is {edge.relation.value} but carries logic {edge.logic.value}",
                    edge_id=edge.id,
                ))
        return issues

    def _check_parallel_edges(self, edges: List[Edge]) -> List[ValidationIssue]:
        issues = []
        counts: Dict[Tuple[str, str], int] = defaultdict(int)
        for edge in edges:
            counts[(edge.source, edge.target)] += 1
        for (source, target), count in counts.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.INFO,
                    code="PARALLEL_EDGES",
                    message=f"'{source}' -> '{target}' appears {count} times",
                    node_id=target,
                    suggestion="Consider keeping a single dependency between the two activities",
                ))
        return issues

    def _check_isolated_nodes(self, nodes: List[Node], edges: List[Edge]) -> List[ValidationIssue]:
        connected = set()
        for edge in edges:
            connected.add(edge.source)
            connected.add(edge.target)
        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="ISOLATED_NODE",
                message=f"Activity '{node.label}' ({node.id}) has no dependencies",
                node_id=node.id,
            )
            for node in nodes
            if node.id not in connected
        ]

    def _calculate_stats(
        self,
        nodes: List[Node],
        edges: List[Edge],
        groups: List[DependencyGroup],
    ) -> Dict[str, int]:
        relation_counts: Dict[str, int] = defaultdict(int)
        for edge in edges:
            relation_counts[edge.relation.value] += 1

        return {
            "nodes": len(nodes),
            "edges": len(edges),
            "active_groups": sum(1 for g in groups if g.is_active),
            "multi_parent_groups": sum(1 for g in groups if g.size > 1),
            "one_from_one": relation_counts.get("one_from_one", 0),
            "one_from_many": relation_counts.get("one_from_many", 0),
            "many_from_one": relation_counts.get("many_from_one", 0),
        }


def validate_graph(engine, strict: bool = False) -> GraphValidationResult:
    """Convenience function to validate a graph engine."""
    validator = GraphValidator(strict_mode=strict)
    return validator.validate(engine)


def get_validation_summary(engine) -> str:
    """Get a quick validation summary string."""
    return validate_graph(engine).get_summary()


def raise_on_errors(engine) -> None:
    """Validate the graph and raise if any invariant is broken."""
    result = validate_graph(engine)
    if result.is_valid:
        return

    errors = [i for i in result.issues if i.severity == ValidationSeverity.ERROR]
    for issue in errors:
        logger.error(f"[Validator] [{issue.code}] {issue.message}")

    group_issue = next((i for i in errors if i.code in GROUP_LOGIC_CODES), None)
    if group_issue is not None:
        group = engine.groups.get(group_issue.node_id)
        raise UnresolvedGroupLogicError(group_issue.node_id, group.size if group else 0)

    raise GraphInvariantError(
        f"Graph validation failed with {result.error_count} errors:\n"
        + "\n".join(f"[{i.code}] {i.message}" for i in errors),
        issues=[i.to_dict() for i in errors],
    )
