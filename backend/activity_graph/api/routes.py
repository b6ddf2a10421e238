import logging
from typing import List, Optional

from fastapi import APIRouter, Response

from activity_graph.activities.board import ActivityBoard
from activity_graph.activities.source import get_activity_source
from activity_graph.api.serializers import (
    serialize_edge,
    serialize_graph,
    serialize_model,
    serialize_proposal,
)
from activity_graph.graph.resolution import EdgeResolution
from activity_graph.schemas import (
    ActivityResponse,
    AddEdgeRequest,
    CreateActivityRequest,
    GraphResponse,
    PlaceNodeRequest,
    ResolveEdgeRequest,
)
from activity_graph.validation import validate_graph

logger = logging.getLogger(__name__)

router = APIRouter()


_global_board: Optional[ActivityBoard] = None


def get_activity_board() -> ActivityBoard:
    """Get or create the global activity board"""
    global _global_board
    if _global_board is None:
        logger.info("[Routes] Creating global ActivityBoard")
        board = ActivityBoard(source=get_activity_source())
        # only cache a board whose pool was loaded
        board.refresh()
        _global_board = board
    return _global_board


def reset_activity_board(board: Optional[ActivityBoard] = None) -> None:
    """Replace (or drop) the global board; used by tests and on reload"""
    global _global_board
    _global_board = board


# ============================================================
# ACTIVITIES
# ============================================================

@router.get("/activities", response_model=List[ActivityResponse])
def list_activities():
    board = get_activity_board()
    return serialize_model(board.available())


@router.post("/activities", status_code=201, response_model=ActivityResponse)
def create_activity(request: CreateActivityRequest):
    board = get_activity_board()
    activity = board.create_activity(request.name)
    return serialize_model(activity)


# ============================================================
# GRAPH
# ============================================================

@router.get("/graph", response_model=GraphResponse)
def get_graph():
    return serialize_graph(get_activity_board().engine)


@router.get("/graph/validation")
def get_graph_validation():
    result = validate_graph(get_activity_board().engine)
    return result.to_dict()


@router.post("/graph/nodes", status_code=201)
def place_node(request: PlaceNodeRequest):
    board = get_activity_board()
    node = board.place_activity(request.activity_id)
    return {
        "id": node.id,
        "label": board.engine.label_for(node.id),
    }


@router.delete("/graph/nodes/{node_id}")
def remove_node(node_id: str):
    board = get_activity_board()
    removal = board.remove_activity(node_id)
    return {
        "node": serialize_model(removal.node),
        "removed_edges": removal.removed_edge_ids,
    }


# ============================================================
# EDGES - propose / confirm
# ============================================================

@router.post("/graph/edges", status_code=201)
def add_edge(request: AddEdgeRequest, response: Response):
    """
    Add a dependency between two activities.

    If a decision is missing (relation kind, AND/OR of a one_from_many
    relation, or the group logic of a target getting its second parent)
    the edge is kept as a proposal and 202 is returned with what is needed.
    """
    engine = get_activity_board().engine
    proposal = engine.propose_edge(
        request.source,
        request.target,
        relation=request.relation,
        logic=request.logic,
        group_logic=request.group_logic,
    )

    if not proposal.is_ready:
        response.status_code = 202
        return {
            "status": "needs_resolution",
            "proposal": serialize_proposal(proposal),
        }

    edge = engine.confirm_edge(proposal.id)
    return {
        "status": "created",
        "edge": serialize_edge(edge),
    }


@router.post("/graph/edges/proposals/{proposal_id}/confirm", status_code=201)
def confirm_edge(proposal_id: str, request: ResolveEdgeRequest):
    engine = get_activity_board().engine
    edge = engine.confirm_edge(
        proposal_id,
        EdgeResolution(
            relation=request.relation,
            logic=request.logic,
            group_logic=request.group_logic,
        ),
    )
    return {
        "status": "created",
        "edge": serialize_edge(edge),
    }


@router.delete("/graph/edges/proposals/{proposal_id}")
def cancel_edge(proposal_id: str):
    engine = get_activity_board().engine
    proposal = engine.cancel_edge(proposal_id)
    return {
        "status": "cancelled",
        "proposal": serialize_proposal(proposal),
    }


@router.delete("/graph/edges/{edge_id}")
def remove_edge(edge_id: str):
    engine = get_activity_board().engine
    edge = engine.remove_edge(edge_id)
    return {
        "status": "removed",
        "edge": serialize_edge(edge),
        "target_group": serialize_model(engine.group_for(edge.target)),
    }
