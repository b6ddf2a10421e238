"""
Validation module for the activity graph.
"""

from activity_graph.validation.graph_validator import (
    GraphValidator,
    GraphValidationResult,
    ValidationIssue,
    ValidationSeverity,
    validate_graph,
    get_validation_summary,
    raise_on_errors,
)

__all__ = [
    "GraphValidator",
    "GraphValidationResult",
    "ValidationIssue",
    "ValidationSeverity",
    "validate_graph",
    "get_validation_summary",
    "raise_on_errors",
]
