"""
Graph preprocessing utilities.

This module provides the directed-graph routines behind hierarchical placement:
- Cycle detection and back-edge removal
- Topological sorting (Kahn's algorithm)
- Longest-path level assignment

Links are index pairs: ``(source, target)`` tuples, dicts with
``source``/``target`` keys, or objects with those attributes. Indices outside
``[0, n)`` are ignored. Every traversal uses an explicit stack or queue, so
deep dependency chains never hit the interpreter's recursion limit.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Optional, Sequence

LinkAccessor = Callable[[Any], int]


def _default_get_source(link: Any) -> int:
    """Default function to extract source index from a link."""
    if isinstance(link, (tuple, list)):
        return link[0]
    return link["source"] if isinstance(link, dict) else link.source


def _default_get_target(link: Any) -> int:
    """Default function to extract target index from a link."""
    if isinstance(link, (tuple, list)):
        return link[1]
    return link["target"] if isinstance(link, dict) else link.target


def _edge_list(
    n: int,
    links: Sequence[Any],
    get_source: Optional[LinkAccessor],
    get_target: Optional[LinkAccessor],
) -> list[tuple[int, int, int]]:
    """(source, target, link_index) triples in input order, skipping out-of-range."""
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target

    edges: list[tuple[int, int, int]] = []
    for i, link in enumerate(links):
        src = get_source(link)
        tgt = get_target(link)
        if 0 <= src < n and 0 <= tgt < n:
            edges.append((src, tgt, i))
    return edges


def _indexed_adjacency(
    n: int,
    links: Sequence[Any],
    get_source: Optional[LinkAccessor],
    get_target: Optional[LinkAccessor],
) -> list[list[tuple[int, int]]]:
    """Outgoing (neighbor, link_index) lists, skipping out-of-range indices."""
    adj: list[list[tuple[int, int]]] = [[] for _ in range(n)]
    for src, tgt, i in _edge_list(n, links, get_source, get_target):
        adj[src].append((tgt, i))
    return adj


# =============================================================================
# Cycle Detection and Removal
# =============================================================================


def detect_cycle(
    n: int,
    links: Sequence[Any],
    get_source: Optional[LinkAccessor] = None,
    get_target: Optional[LinkAccessor] = None,
) -> Optional[list[int]]:
    """
    Detect if a directed graph contains a cycle.

    Returns the first cycle found by a depth-first search that starts from
    nodes in index order, or None if the graph is acyclic.

    Args:
        n: Number of nodes
        links: List of directed edges
        get_source: Function to extract source index from link
        get_target: Function to extract target index from link

    Returns:
        Node indices forming the cycle, closed by repeating its first node,
        or None if acyclic.

    Example:
        >>> detect_cycle(3, [(0, 1), (1, 2), (2, 0)])
        [0, 1, 2, 0]
    """
    adj = _indexed_adjacency(n, links, get_source, get_target)

    # DFS states: 0=unvisited, 1=on stack, 2=finished
    state = [0] * n

    for start in range(n):
        if state[start] != 0:
            continue

        path: list[int] = [start]
        stack: list[int] = [0]  # next adjacency position for each path entry
        state[start] = 1

        while path:
            node = path[-1]
            pos = stack[-1]
            if pos < len(adj[node]):
                stack[-1] += 1
                neighbor, _ = adj[node][pos]
                if state[neighbor] == 1:
                    cycle_start = path.index(neighbor)
                    return path[cycle_start:] + [neighbor]
                if state[neighbor] == 0:
                    state[neighbor] = 1
                    path.append(neighbor)
                    stack.append(0)
            else:
                state[node] = 2
                path.pop()
                stack.pop()

    return None


def has_cycle(
    n: int,
    links: Sequence[Any],
    get_source: Optional[LinkAccessor] = None,
    get_target: Optional[LinkAccessor] = None,
) -> bool:
    """Check if a directed graph contains any cycle."""
    return detect_cycle(n, links, get_source, get_target) is not None


def remove_cycles(
    n: int,
    links: Sequence[Any],
    get_source: Optional[LinkAccessor] = None,
    get_target: Optional[LinkAccessor] = None,
) -> tuple[list[tuple[int, int]], set[int]]:
    """
    Make a directed graph acyclic by dropping its DFS back edges.

    The search starts from nodes in index order and follows links in input
    order, so the same input always drops the same edges. Self-loops are
    always back edges.

    Args:
        n: Number of nodes
        links: List of directed edges
        get_source: Function to extract source index from link
        get_target: Function to extract target index from link

    Returns:
        Tuple of (kept_links, dropped_indices) where:
        - kept_links: (source, target) pairs of the surviving in-range edges
        - dropped_indices: indices into ``links`` of the removed back edges

    Example:
        >>> remove_cycles(2, [(0, 1), (1, 0)])
        ([(0, 1)], {1})
    """
    edges = _edge_list(n, links, get_source, get_target)
    adj: list[list[tuple[int, int]]] = [[] for _ in range(n)]
    for src, tgt, link_idx in edges:
        adj[src].append((tgt, link_idx))

    state = [0] * n
    dropped: set[int] = set()

    for start in range(n):
        if state[start] != 0:
            continue

        path: list[int] = [start]
        stack: list[int] = [0]
        state[start] = 1

        while path:
            node = path[-1]
            pos = stack[-1]
            if pos < len(adj[node]):
                stack[-1] += 1
                neighbor, link_idx = adj[node][pos]
                if state[neighbor] == 1:
                    dropped.add(link_idx)
                elif state[neighbor] == 0:
                    state[neighbor] = 1
                    path.append(neighbor)
                    stack.append(0)
            else:
                state[node] = 2
                path.pop()
                stack.pop()

    kept = [(src, tgt) for src, tgt, link_idx in edges if link_idx not in dropped]
    return kept, dropped


# =============================================================================
# Topological Sort
# =============================================================================


def topological_sort(
    n: int,
    links: Sequence[Any],
    get_source: Optional[LinkAccessor] = None,
    get_target: Optional[LinkAccessor] = None,
) -> Optional[list[int]]:
    """
    Compute a topological ordering of nodes in a directed acyclic graph.

    Uses Kahn's algorithm. Ties are broken by node index.

    Args:
        n: Number of nodes
        links: List of directed edges
        get_source: Function to extract source index from link
        get_target: Function to extract target index from link

    Returns:
        List of node indices in topological order, or None if graph has cycles.

    Example:
        >>> topological_sort(3, [(0, 1), (1, 2)])
        [0, 1, 2]
    """
    adj = _indexed_adjacency(n, links, get_source, get_target)

    in_degree = [0] * n
    for src in range(n):
        for tgt, _ in adj[src]:
            in_degree[tgt] += 1

    queue: deque[int] = deque(i for i in range(n) if in_degree[i] == 0)
    result: list[int] = []

    while queue:
        node = queue.popleft()
        result.append(node)

        for neighbor, _ in adj[node]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    # If not all nodes processed, graph has a cycle
    if len(result) != n:
        return None

    return result


# =============================================================================
# Level Assignment
# =============================================================================


def assign_levels(
    n: int,
    links: Sequence[Any],
    get_source: Optional[LinkAccessor] = None,
    get_target: Optional[LinkAccessor] = None,
) -> list[int]:
    """
    Assign each node its longest-path depth below the dependency-free nodes.

    A link ``(parent, child)`` places child at least one level below parent:
    ``level(child) = 1 + max(level(parent))`` over all its parents, and nodes
    without parents sit at level 0. Each level is final before any child
    reads it, so diamonds take their deeper branch.

    The graph should be acyclic (see remove_cycles). Nodes left on a cycle
    are placed one level below their deepest parent that left the queue,
    or on level 0 when no such parent exists.

    Args:
        n: Number of nodes
        links: List of directed (parent, child) edges
        get_source: Function to extract source index from link
        get_target: Function to extract target index from link

    Returns:
        Level per node index.

    Example:
        >>> assign_levels(4, [(0, 1), (0, 2), (1, 3), (2, 3)])
        [0, 1, 1, 2]
    """
    if n == 0:
        return []

    adj = _indexed_adjacency(n, links, get_source, get_target)

    in_degree = [0] * n
    for src in range(n):
        for tgt, _ in adj[src]:
            in_degree[tgt] += 1

    levels = [0] * n
    queue: deque[int] = deque(i for i in range(n) if in_degree[i] == 0)

    while queue:
        node = queue.popleft()
        for child, _ in adj[node]:
            levels[child] = max(levels[child], levels[node] + 1)
            in_degree[child] -= 1
            if in_degree[child] == 0:
                queue.append(child)

    # Cycle leftovers keep the depth pushed onto them before the queue emptied
    return levels


def group_by_level(levels: Sequence[int]) -> list[list[int]]:
    """
    Group node indices by level, preserving index order within a level.

    Example:
        >>> group_by_level([0, 1, 0, 2])
        [[0, 2], [1], [3]]
    """
    if not levels:
        return []

    groups: list[list[int]] = [[] for _ in range(max(levels) + 1)]
    for i, level in enumerate(levels):
        groups[level].append(i)
    return groups


__all__ = [
    "detect_cycle",
    "has_cycle",
    "remove_cycles",
    "topological_sort",
    "assign_levels",
    "group_by_level",
]
