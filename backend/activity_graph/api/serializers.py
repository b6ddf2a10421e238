from enum import Enum
from typing import Any


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize_model(obj: Any):
    """
    Safely serialize graph objects into JSON-compatible structures.
    Deterministic.
    Tolerant to primitives.
    """

    # Enums carry their value
    if isinstance(obj, Enum):
        return obj.value

    # Primitive values pass through
    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    # Lists / tuples: serialize each element
    if isinstance(obj, (list, tuple)):
        return [serialize_model(item) for item in obj]

    # Sets have no order; sort for stable output
    if isinstance(obj, (set, frozenset)):
        return sorted(serialize_model(item) for item in obj)

    # Dicts: serialize values
    if isinstance(obj, dict):
        return {k: serialize_model(v) for k, v in obj.items()}

    # Dataclass-like objects
    if hasattr(obj, "__dict__"):
        return {
            key: serialize_model(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    # Fallback (should rarely happen)
    return str(obj)


def serialize_edge(edge) -> dict:
    data = serialize_model(edge)
    data["label"] = edge.label
    return data


def serialize_proposal(proposal) -> dict:
    data = serialize_model(proposal)
    data["is_ready"] = proposal.is_ready
    return data


def serialize_graph(engine) -> dict:
    """Snapshot for the view layer: decorated nodes, labelled edges, groups."""
    return {
        "nodes": serialize_model(engine.nodes_with_labels()),
        "edges": [serialize_edge(e) for e in engine.edges],
        "groups": [
            serialize_model(g)
            for g in engine.groups.groups()
            if g.is_active
        ],
        "pending_proposals": [serialize_proposal(p) for p in engine.pending_proposals()],
    }
