"""Tree and hypertree layouts over a minimum spanning forest."""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence, Set

import numpy as np
from scipy.sparse import csgraph

from ..graph.components import connected_components, sparse_adjacency
from ..graph.model import GraphView
from ..logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

TILE_SPACING = 2.2
HALF_WIDTH = 10.0
LEVEL_HEIGHT = 2.0


def spanning_forest(graph: GraphView) -> List[List[int]]:
    """Adjacency lists of a minimum spanning forest where heavier edges are cheaper."""

    weights = sparse_adjacency(graph)
    costs = weights.copy()
    costs.data = 1.0 / costs.data
    tree = csgraph.minimum_spanning_tree(costs).tocoo()
    adj: List[List[int]] = [[] for _ in range(graph.entity_count())]
    for a, b in sorted(zip(tree.row.tolist(), tree.col.tolist())):
        adj[a].append(b)
        adj[b].append(a)
    for row in adj:
        row.sort()
    return adj


class TreeArena:
    """Rooted tree stored as parent/children arrays over graph indices."""

    def __init__(self, adj: Sequence[Sequence[int]], root: int) -> None:
        self.root = root
        n = len(adj)
        self.parent = np.full(n, -1, dtype=int)
        self.children: List[List[int]] = [[] for _ in range(n)]
        self.order: List[int] = []
        self.parent[root] = root
        stack = [root]
        while stack:
            node = stack.pop()
            self.order.append(node)
            for nbor in adj[node]:
                if self.parent[nbor] == -1:
                    self.parent[nbor] = node
                    self.children[node].append(nbor)
                    stack.append(nbor)
        self.size = np.zeros(n, dtype=int)
        self.leaves = np.zeros(n, dtype=int)
        self.height = np.zeros(n, dtype=int)
        for node in reversed(self.order):
            kids = self.children[node]
            self.size[node] = 1 + sum(int(self.size[c]) for c in kids)
            self.leaves[node] = sum(int(self.leaves[c]) for c in kids) if kids else 1
            self.height[node] = 1 + max((int(self.height[c]) for c in kids), default=0)

    @property
    def depth(self) -> int:
        return int(self.height[self.root])


def root_score(adj: Sequence[Sequence[int]], node: int, arena: TreeArena) -> float:
    """Standard deviation of the branch sizes hanging off ``node``; lower is more balanced."""

    if len(adj[node]) <= 1:
        return math.inf
    total = int(arena.size[arena.root])
    branches = [int(arena.size[c]) for c in arena.children[node]]
    if node != arena.root:
        branches.append(total - int(arena.size[node]))
    return float(np.std(branches))


def choose_root(adj: Sequence[Sequence[int]], members: Sequence[int], selection: Set[int]) -> int:
    selected = sorted(set(members) & selection)
    if selected:
        return selected[0]
    arena = TreeArena(adj, int(members[0]))
    scores = [(root_score(adj, int(m), arena), int(m)) for m in members]
    return min(scores)[1]


def _place_regular(pos: np.ndarray, arena: TreeArena, cx: float, cy: float) -> None:
    pos[arena.root] = (cx, cy)
    stack = [(arena.root, cx - HALF_WIDTH, cx + HALF_WIDTH, cy + LEVEL_HEIGHT)]
    while stack:
        node, left, right, y = stack.pop()
        remaining = int(arena.leaves[node])
        for child in arena.children[node]:
            share = int(arena.leaves[child])
            split = left + (right - left) * share / max(remaining, 1)
            pos[child] = ((left + split) / 2.0, y)
            stack.append((child, left, split, y + LEVEL_HEIGHT))
            left = split
            remaining -= share


def _place_hyper(pos: np.ndarray, arena: TreeArena, cx: float, cy: float) -> None:
    angle_inc = 2.0 * math.pi / max(int(arena.leaves[arena.root]), 1)
    max_depth = max(arena.depth, 1)
    angle = 0.0
    begin = {}
    stack = [(arena.root, 0, False)]
    while stack:
        node, depth, closing = stack.pop()
        kids = arena.children[node]
        radius = depth / max_depth
        if not kids:
            pos[node] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))
            angle += angle_inc
        elif not closing:
            begin[node] = angle
            stack.append((node, depth, True))
            ordered = sorted(kids, key=lambda c: (-int(arena.size[c]), c))
            for child in reversed(ordered):
                stack.append((child, depth + 1, False))
        else:
            half = (begin[node] + angle) / 2.0
            pos[node] = (cx + radius * math.cos(half), cy + radius * math.sin(half))


def tree_layout(
    graph: GraphView,
    pos: np.ndarray,
    selection: Optional[Iterable[int]] = None,
    *,
    hyper: bool = False,
) -> List[int]:
    """Lay out every component as a tree tile; returns the chosen roots."""

    adj = spanning_forest(graph)
    chosen: Set[int] = set(int(s) for s in (selection or ()))
    components = connected_components(graph)
    side = int(math.sqrt(len(components)) + 1)
    roots: List[int] = []
    for slot, members in enumerate(components):
        root = choose_root(adj, members, chosen)
        arena = TreeArena(adj, root)
        tile_x, tile_y = slot % side, slot // side
        cx = tile_x * TILE_SPACING + (TILE_SPACING / 2.0 if tile_y % 2 == 1 else 0.0)
        cy = tile_y * TILE_SPACING
        if hyper:
            _place_hyper(pos, arena, cx, cy)
        else:
            _place_regular(pos, arena, cx, cy)
        roots.append(root)
    logger.info("%s layout placed %d trees", "Hypertree" if hyper else "Tree", len(roots))
    return roots


apply_debug_logging(globals(), logger=logger, skip={"root_score"})

__all__ = ["TreeArena", "choose_root", "root_score", "spanning_forest", "tree_layout"]
