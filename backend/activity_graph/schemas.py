from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from activity_graph.graph.types import LogicType, RelationKind


class CreateActivityRequest(BaseModel):
    name: Optional[str] = None  # validated by the activity source (400 on blank)


class ActivityResponse(BaseModel):
    id: str
    name: str


class PlaceNodeRequest(BaseModel):
    activity_id: str


class AddEdgeRequest(BaseModel):
    """Any decision left out comes back as a proposal to confirm"""
    source: str
    target: str
    relation: Optional[RelationKind] = None
    logic: Optional[LogicType] = None  # one_from_many only
    group_logic: Optional[LogicType] = None  # needed when the target gets its 2nd parent


class ResolveEdgeRequest(BaseModel):
    relation: Optional[RelationKind] = None
    logic: Optional[LogicType] = None
    group_logic: Optional[LogicType] = None


class EdgeResponse(BaseModel):
    id: str
    source: str
    target: str
    relation: RelationKind
    logic: Optional[LogicType] = None
    label: str


class NodeResponse(BaseModel):
    id: str
    label: str
    base_label: str
    parent_count: int = 0
    logic: Optional[LogicType] = None


class GraphResponse(BaseModel):
    nodes: List[NodeResponse]
    edges: List[EdgeResponse]
    groups: List[Dict[str, Any]] = []
    pending_proposals: List[Dict[str, Any]] = []
