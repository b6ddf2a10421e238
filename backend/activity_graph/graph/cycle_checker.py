"""
Cycle detection over the activity graph.

Both functions build an adjacency view and run a depth-first search from
every node, marking nodes as visited and as "on stack". The search is
iterative so long dependency chains never hit the recursion limit.
"""

from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .types import Edge, Node


def _node_id(node) -> str:
    return node.id if isinstance(node, Node) else str(node)


def build_adjacency(
    edges: Iterable[Edge],
    extra: Optional[Tuple[str, str]] = None,
) -> Dict[str, List[str]]:
    adjacency: Dict[str, List[str]] = defaultdict(list)
    for edge in edges:
        adjacency[edge.source].append(edge.target)
    if extra is not None:
        source, target = extra
        adjacency[source].append(target)
    return adjacency


def _search(adjacency: Dict[str, List[str]], start_nodes: Iterable[str]) -> Optional[List[str]]:
    visited = set()
    on_stack = set()

    for start in start_nodes:
        if start in visited:
            continue

        path: List[str] = [start]
        stack: List[Tuple[str, Iterator[str]]] = [(start, iter(adjacency.get(start, ())))]
        visited.add(start)
        on_stack.add(start)

        while stack:
            node, neighbours = stack[-1]
            advanced = False
            for neighbour in neighbours:
                if neighbour in on_stack:
                    cycle_start = path.index(neighbour)
                    return path[cycle_start:] + [neighbour]
                if neighbour not in visited:
                    visited.add(neighbour)
                    on_stack.add(neighbour)
                    path.append(neighbour)
                    stack.append((neighbour, iter(adjacency.get(neighbour, ()))))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                path.pop()
                on_stack.discard(node)

    return None


def find_cycle(edges: Iterable[Edge], nodes: Iterable) -> Optional[List[str]]:
    """Return the first cycle found as a closed path (first == last), or None."""
    edges = list(edges)
    adjacency = build_adjacency(edges)
    starts = [_node_id(n) for n in nodes]
    # edges may point at ids missing from `nodes`; search those too
    starts.extend(e.source for e in edges)
    return _search(adjacency, starts)


def find_cycle_with(
    candidate_source: str,
    candidate_target: str,
    edges: Iterable[Edge],
    nodes: Iterable,
) -> Optional[List[str]]:
    """Cycle that the candidate edge would close, or None. Never mutates anything."""
    adjacency = build_adjacency(edges, extra=(candidate_source, candidate_target))
    starts = [_node_id(n) for n in nodes]
    starts.append(candidate_source)
    return _search(adjacency, starts)


def would_create_cycle(
    candidate_source: str,
    candidate_target: str,
    edges: Iterable[Edge],
    nodes: Iterable,
) -> bool:
    """True when adding candidate_source -> candidate_target would close a cycle (self-loops included)."""
    return find_cycle_with(candidate_source, candidate_target, edges, nodes) is not None
