"""
Dependency Group Manager.

Keeps, per target node, the ids of its incoming edges and the AND/OR rule
combining them. A group with more than one edge always has a logic value;
a group with one edge or none never does.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .errors import UnresolvedGroupLogicError
from .types import DependencyGroup, Edge, LogicType, parse_logic

logger = logging.getLogger(__name__)


class DependencyGroupManager:

    def __init__(self):
        self._groups: Dict[str, DependencyGroup] = {}

    # ---- mutations ----

    def on_edge_added(self, edge: Edge, group_logic: Optional[LogicType] = None) -> DependencyGroup:
        group_logic = parse_logic(group_logic)
        group = self._groups.get(edge.target)
        current_size = group.size if group else 0

        if group and edge.id in group.edges:
            return group.copy()

        new_size = current_size + 1
        has_logic = group is not None and group.logic is not None

        # validate before touching anything
        if new_size > 1 and not has_logic and group_logic is None:
            raise UnresolvedGroupLogicError(edge.target, new_size)

        if group is None:
            group = DependencyGroup(target=edge.target)
            self._groups[edge.target] = group

        group.edges.append(edge.id)

        if new_size > 1 and not has_logic:
            group.logic = group_logic
            logger.info(
                f"[Groups] '{edge.target}' now has {new_size} parents, logic set to {group_logic.value}"
            )
        elif new_size > 1:
            if group_logic is not None and group_logic != group.logic:
                logger.debug(
                    f"[Groups] Ignoring logic {group_logic.value} for '{edge.target}', "
                    f"group keeps {group.logic.value}"
                )
        else:
            group.logic = None

        return group.copy()

    def on_edge_removed(self, edge_id: str, target_id: str) -> Optional[DependencyGroup]:
        group = self._groups.get(target_id)
        if group is None or edge_id not in group.edges:
            logger.debug(f"[Groups] Edge {edge_id} not in group of '{target_id}', nothing to do")
            return group.copy() if group else None

        group.edges.remove(edge_id)
        if group.size <= 1:
            if group.logic is not None:
                logger.info(f"[Groups] '{target_id}' back to {group.size} parent(s), logic cleared")
            group.logic = None

        return group.copy()

    def on_node_removed(self, node_id: str, cascaded_edges: Iterable[Edge]) -> None:
        for edge in cascaded_edges:
            if edge.target == node_id:
                continue  # the node's own group is dropped below
            self.on_edge_removed(edge.id, edge.target)
        self._groups.pop(node_id, None)

    # ---- queries ----

    def needs_group_logic(self, target_id: str) -> bool:
        """True when one more incoming edge would require a combination rule."""
        group = self._groups.get(target_id)
        return group is not None and group.size >= 1 and group.logic is None

    def get(self, target_id: str) -> Optional[DependencyGroup]:
        group = self._groups.get(target_id)
        return group.copy() if group else None

    def groups(self) -> List[DependencyGroup]:
        return [g.copy() for g in self._groups.values()]

    def label_for(self, node_id: str, base_label: str) -> str:
        group = self._groups.get(node_id)
        if group is None or group.size <= 1:
            return base_label
        return f"{base_label} [{group.logic.value} of {group.size} parents]"
