import logging
from typing import List, Optional

from activity_graph.graph.engine import GraphEngine
from activity_graph.graph.errors import DuplicateNodeError, UnknownActivityError
from activity_graph.graph.types import Activity, Node, NodeRemoval
from .source import ActivitySource, InMemoryActivitySource

logger = logging.getLogger(__name__)


class ActivityBoard:
    """
    The editing canvas: a graph engine plus the pool of activities not yet
    placed on it. Removing a node puts its activity back in the pool.
    """

    def __init__(self, source: Optional[ActivitySource] = None, engine: Optional[GraphEngine] = None):
        self.source = source or InMemoryActivitySource()
        self.engine = engine or GraphEngine()
        self._available: List[Activity] = []

    def refresh(self) -> List[Activity]:
        placed = set(self.engine.store.node_ids)
        self._available = [a for a in self.source.list_activities() if a.id not in placed]
        logger.info(f"[Board] {len(self._available)} activities available")
        return self.available()

    def available(self) -> List[Activity]:
        return list(self._available)

    def create_activity(self, name: str) -> Activity:
        activity = self.source.create_activity(name)
        self._available.append(activity)
        logger.info(f"[Board] Created activity {activity.id} ({activity.name})")
        return activity

    def place_activity(self, activity_id: str) -> Node:
        if self.engine.store.has_node(activity_id):
            raise DuplicateNodeError(activity_id)

        activity = next((a for a in self._available if a.id == activity_id), None)
        if activity is None:
            raise UnknownActivityError(activity_id)

        node = self.engine.add_node(activity.to_node())
        self._available = [a for a in self._available if a.id != activity_id]
        return node

    def remove_activity(self, node_id: str) -> NodeRemoval:
        removal = self.engine.remove_node(node_id)

        if all(a.id != node_id for a in self._available):
            self._available.append(Activity(id=removal.node.id, name=removal.node.label))
        logger.info(f"[Board] Activity {node_id} returned to the pool")
        return removal
