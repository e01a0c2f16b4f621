"""Single-source shortest paths with tree and branch annotations."""

from __future__ import annotations

import heapq
import logging
import math
from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from ..graph.model import Graph, GraphView

logger = logging.getLogger(__name__)

ARM_ROOT = "arm"


class ShortestPathTree:
    """Dijkstra run from ``source`` over ``graph``.

    Edges cost 1.0 unless ``reciprocal_weights`` is set, in which case an edge
    costs ``1/weight``. The frontier is ordered by ``(distance, index)`` so ties
    resolve deterministically. When ``destinations`` is given the search stops
    as soon as all of them have been settled; nodes further out keep whatever
    tentative distance they had at that point.

    ``prev[source] == source`` and unreached nodes have ``prev == -1``.
    """

    def __init__(
        self,
        graph: GraphView,
        source: int,
        *,
        destinations: Optional[Iterable[int]] = None,
        reciprocal_weights: bool = False,
    ) -> None:
        self.graph = graph
        self.source = source
        n = graph.entity_count()
        self.dist = np.full(n, math.inf)
        self.prev = np.full(n, -1, dtype=int)
        self.dist[source] = 0.0
        self.prev[source] = source

        pending: Optional[Set[int]] = None
        if destinations is not None:
            pending = set(destinations)
            pending.discard(source)

        settled = np.zeros(n, dtype=bool)
        frontier: List[Tuple[float, int]] = [(0.0, source)]
        while frontier:
            du, u = heapq.heappop(frontier)
            if settled[u] or du > self.dist[u]:
                continue
            settled[u] = True
            for slot in range(graph.neighbor_count(u)):
                v = graph.neighbor(u, slot)
                w = graph.weight(u, v)
                # non-positive weights are not edges, as in edge_lengths
                if not w > 0.0:
                    continue
                step = 1.0 / w if reciprocal_weights else 1.0
                alt = du + step
                if alt < self.dist[v]:
                    self.dist[v] = alt
                    self.prev[v] = u
                    heapq.heappush(frontier, (alt, v))
            if pending is not None:
                pending.discard(u)
                if not pending:
                    break

        self._children: Optional[Dict[int, List[int]]] = None
        self._arm: Dict[int, str] = {}
        self._depth: Dict[int, int] = {}
        self._last_in_arm: Dict[str, int] = {}

    # -- paths ----------------------------------------------------------
    def distance_to(self, i: int) -> float:
        return float(self.dist[i])

    def path_to(self, i: int) -> Optional[List[int]]:
        """Node indices from the source to ``i``; ``None`` when unreachable."""

        if math.isinf(self.dist[i]):
            return None
        path = [i]
        while path[-1] != self.source:
            path.append(int(self.prev[path[-1]]))
        path.reverse()
        return path

    def create_tree(self) -> Graph:
        """Parent edges as an undirected-style graph keyed by entity."""

        tree = Graph()
        tree.add_entity(self.graph.entity(self.source))
        for child, parent in enumerate(self.prev):
            if parent >= 0 and parent != child:
                a, b = self.graph.entity(child), self.graph.entity(int(parent))
                tree.add_edge(a, b)
                tree.add_edge(b, a)
        return tree

    # -- tree annotations -------------------------------------------------
    def _ensure_arms(self) -> Dict[int, List[int]]:
        if self._children is not None:
            return self._children
        children: Dict[int, List[int]] = {}
        for child, parent in enumerate(self.prev):
            if parent >= 0 and child != self.source:
                children.setdefault(int(parent), []).append(child)
        self._children = children

        stack: List[Tuple[int, int, str]] = [(self.source, 0, ARM_ROOT)]
        while stack:
            node, depth, arm = stack.pop()
            self._depth[node] = depth
            self._arm[node] = arm
            kids = children.get(node, [])
            if len(kids) == 1:
                stack.append((kids[0], depth + 1, arm))
            elif kids:
                self._last_in_arm[arm + "."] = node
                for pos in range(len(kids) - 1, -1, -1):
                    stack.append((kids[pos], depth + 1, f"{arm}.{pos}"))
        return children

    def arm(self, i: int) -> Optional[str]:
        """Branch label of ``i``; a new arm starts below every node with several children."""

        self._ensure_arms()
        return self._arm.get(i)

    def depth(self, i: int) -> Optional[int]:
        self._ensure_arms()
        return self._depth.get(i)

    def last_in_arm(self, prefix: str) -> int:
        """Branching node that ends the arm ``prefix`` (given with a trailing dot)."""

        self._ensure_arms()
        try:
            return self._last_in_arm[prefix]
        except KeyError:
            raise KeyError(f"no branching node for arm prefix {prefix!r}") from None

    def _climb(self, start: int, end: int) -> float:
        total = 0.0
        node = start
        while node != end:
            parent = int(self.prev[node])
            if parent < 0 or node == self.source:
                raise ValueError(f"node {end} is not an ancestor of node {start}")
            total += 1.0 / self.graph.weight(parent, node)
            node = parent
        return total

    def arm_distance(self, i: int, j: int) -> float:
        """Tree distance between ``i`` and ``j`` measured along the arms.

        Negative when one node lies on the other's path to the source,
        otherwise the sum of both climbs up to their branching ancestor. Each
        climbed edge costs ``1/weight``.
        """

        if i == j:
            return 0.0
        arm_i, arm_j = self.arm(i), self.arm(j)
        if arm_i is None or arm_j is None:
            return math.inf
        dep_i, dep_j = self._depth[i], self._depth[j]
        if arm_i == arm_j:
            return -self._climb(i, j) if dep_i > dep_j else -self._climb(j, i)
        if arm_i.startswith(arm_j + "."):
            return -self._climb(i, j)
        if arm_j.startswith(arm_i + "."):
            return -self._climb(j, i)

        parts_i, parts_j = arm_i.split("."), arm_j.split(".")
        shared = [parts_i[0]]
        for a, b in zip(parts_i[1:], parts_j[1:]):
            if a != b:
                break
            shared.append(a)
        ancestor = self.last_in_arm(".".join(shared) + ".")
        return abs(self._climb(i, ancestor)) + abs(self._climb(j, ancestor))

    def tree_depth(self, root: Optional[int] = None) -> int:
        """Number of levels in the subtree below ``root`` (a leaf counts 1)."""

        children = self._ensure_arms()
        root = self.source if root is None else root
        best = 0
        stack = [(root, 1)]
        while stack:
            node, level = stack.pop()
            best = max(best, level)
            for child in children.get(node, ()):
                stack.append((child, level + 1))
        return best

    def leaf_count(self, root: Optional[int] = None) -> int:
        children = self._ensure_arms()
        root = self.source if root is None else root
        leaves = 0
        stack = [root]
        while stack:
            node = stack.pop()
            kids = children.get(node)
            if not kids:
                leaves += 1
            else:
                stack.extend(kids)
        return leaves


def single_source_distances(
    graph: GraphView,
    source: int,
    *,
    reciprocal_weights: bool = False,
) -> np.ndarray:
    return ShortestPathTree(graph, source, reciprocal_weights=reciprocal_weights).dist


__all__ = ["ARM_ROOT", "ShortestPathTree", "single_source_distances"]
