import math

import numpy as np
import pytest

from graphscale.config import CoreMetric, OracleConfig
from graphscale.distance import (
    HybridDistanceOracle,
    MatrixOracle,
    ResistiveDistance,
    ResistiveOracle,
    ShortestPathOracle,
    ShortestPathTree,
    build_oracle,
    floyd_warshall,
    pseudoinverse,
)
from graphscale.graph import Graph, GraphFactory, GraphKind, UndirectedGraph
from graphscale.types import DisconnectedGraphError


def _build_cohen() -> UndirectedGraph:
    return UndirectedGraph.from_edges(
        [("A", "B", 2.0), ("A", "C", 2.0), ("B", "C", 1.0), ("B", "D", 3.0)]
    )


def _build_pendant_forest() -> UndirectedGraph:
    """Cycle with chains of several lengths, a star, a pair and an isolated node."""

    edges = [("c0", "c1"), ("c1", "c2"), ("c2", "c3"), ("c3", "c4"), ("c4", "c0")]
    edges += [("c0", "a1"), ("a1", "a2"), ("a2", "a3")]
    edges += [("c2", "b1"), ("c2", "b2"), ("b2", "b3")]
    edges += [("hub", f"spoke{i}") for i in range(5)]
    edges += [("p", "q")]
    graph = UndirectedGraph.from_edges(edges)
    graph.add_entity("alone")
    return graph


def _build_weighted_tree_with_core() -> UndirectedGraph:
    return UndirectedGraph.from_edges(
        [
            ("u", "v", 2.0),
            ("v", "w", 0.5),
            ("w", "u", 4.0),
            ("w", "x", 3.0),
            ("x", "y", 1.5),
            ("u", "leaf", 0.25),
            ("v", "leaf2", 5.0),
        ]
    )


def _build_branching_tree() -> UndirectedGraph:
    return UndirectedGraph.from_edges(
        [("r", "a"), ("r", "b"), ("a", "a1"), ("a1", "a2"), ("b", "b1"), ("b", "b2")]
    )


def test_cohen_resistive_fixture():
    graph = _build_cohen()
    resistive = ResistiveDistance(graph)
    assert resistive.distance("B", "D") == pytest.approx(1.0 / 3.0)
    assert resistive.distance("B", "C") == pytest.approx(0.5)
    assert resistive.distance("C", "C") == pytest.approx(0.0, abs=1e-12)


def test_resistive_rejects_disconnected_graph():
    graph = UndirectedGraph.from_edges([("a", "b"), ("c", "d")])
    with pytest.raises(DisconnectedGraphError) as info:
        ResistiveDistance(graph)
    assert info.value.components == 2


def test_pseudoinverse_matches_numpy():
    rng = np.random.default_rng(4)
    matrix = rng.normal(size=(5, 3))
    assert np.allclose(pseudoinverse(matrix), np.linalg.pinv(matrix))


def test_pseudoinverse_of_zero_matrix_is_zero():
    zero = np.zeros((2, 2))
    result = pseudoinverse(zero)
    assert np.all(np.isfinite(result))
    assert np.array_equal(result, np.linalg.pinv(zero))


def test_resistive_distance_of_single_entity():
    graph = UndirectedGraph()
    graph.add_entity("solo")
    resistive = ResistiveDistance(graph)
    assert resistive.distance("solo", "solo") == 0.0
    assert resistive.matrix.shape == (1, 1)


def test_resistive_oracle_keeps_isolated_entities_finite():
    graph = _build_pendant_forest()
    oracle = ResistiveOracle(graph)
    alone = graph.index_of("alone")
    block = oracle.component_matrix(oracle.component_of(alone))
    assert block.shape == (1, 1)
    assert block[0, 0] == 0.0
    for comp in range(oracle.component_count):
        assert np.all(np.isfinite(oracle.component_matrix(comp)))
    assert oracle.distance("p", "q") == pytest.approx(1.0)


def test_floyd_warshall_does_not_modify_input():
    inf = math.inf
    dist = np.array([[0.0, 1.0, inf], [1.0, 0.0, 1.0], [inf, 1.0, 0.0]])
    original = dist.copy()
    result = floyd_warshall(dist)
    assert result[0, 2] == pytest.approx(2.0)
    assert np.array_equal(dist, original)


def test_shortest_paths_are_symmetric_with_zero_diagonal():
    graph = GraphFactory(rng=np.random.default_rng(0)).create(GraphKind.RING)
    oracle = ShortestPathOracle(graph)
    full = oracle.submatrix(range(graph.entity_count()))
    assert np.allclose(full, full.T)
    assert np.allclose(np.diag(full), 0.0)
    assert oracle.component_count == 1


def test_cross_component_distances_are_infinite():
    graph = _build_pendant_forest()
    oracle = ShortestPathOracle(graph)
    assert math.isinf(oracle.distance("c0", "hub"))
    assert math.isinf(oracle.distance("alone", "p"))
    assert oracle.distance("alone", "alone") == 0.0
    assert oracle.distance("a3", "b3") == pytest.approx(7.0)


@pytest.mark.parametrize("reciprocal", [False, True])
def test_hybrid_matches_floyd_warshall(reciprocal):
    for graph in (_build_pendant_forest(), _build_weighted_tree_with_core()):
        rows = range(graph.entity_count())
        brute = ShortestPathOracle(graph, reciprocal_weights=reciprocal).submatrix(rows)
        hybrid = HybridDistanceOracle(graph, reciprocal_weights=reciprocal).submatrix(rows)
        np.testing.assert_allclose(hybrid, brute, atol=1e-9)


def test_hybrid_resistive_matches_full_resistive():
    graph = _build_weighted_tree_with_core()
    rows = range(graph.entity_count())
    full = ResistiveOracle(graph).submatrix(rows)
    hybrid = HybridDistanceOracle(graph, core=CoreMetric.RESISTIVE, reciprocal_weights=True).submatrix(rows)
    np.testing.assert_allclose(hybrid, full, atol=1e-9)


def test_build_oracle_accepts_directed_graph():
    directed = Graph([("a", "b"), ("b", "c")])
    oracle = build_oracle(directed, OracleConfig())
    assert oracle.distance("a", "c") == pytest.approx(2.0)
    assert oracle.entities() == ["a", "b", "c"]


def test_matrix_oracle_groups_reachable_rows():
    graph = Graph()
    for name in "abc":
        graph.add_entity(name)
    inf = math.inf
    matrix = np.array([[0.0, 2.0, inf], [2.0, 0.0, inf], [inf, inf, 0.0]])
    oracle = MatrixOracle(graph, matrix)
    assert oracle.component_count == 2
    assert oracle.d(0, 1) == pytest.approx(2.0)
    assert math.isinf(oracle.d(1, 2))
    pairs = oracle.pair_distances(np.array([0, 1, 2]), np.array([1, 2, 2]))
    assert pairs[0] == pytest.approx(2.0)
    assert math.isinf(pairs[1])
    assert pairs[2] == 0.0


def test_matrix_oracle_joins_rows_through_one_sided_entries():
    graph = Graph()
    for name in "abc":
        graph.add_entity(name)
    inf = math.inf
    matrix = np.array([[0.0, 1.0, inf], [inf, 0.0, inf], [inf, 3.0, 0.0]])
    oracle = MatrixOracle(graph, matrix)
    assert oracle.component_count == 1
    members = sorted(int(i) for comp in oracle.components() for i in comp)
    assert members == [0, 1, 2]
    assert oracle.d(0, 1) == pytest.approx(1.0)
    assert oracle.d(2, 1) == pytest.approx(3.0)


def test_dijkstra_paths_and_early_stop():
    graph = UndirectedGraph.from_edges([("s", "a"), ("a", "b"), ("b", "c"), ("s", "c2"), ("x", "y")])
    s = graph.index_of("s")
    tree = ShortestPathTree(graph, s)
    assert tree.distance_to(graph.index_of("c")) == pytest.approx(3.0)
    assert tree.path_to(graph.index_of("c")) == [s, graph.index_of("a"), graph.index_of("b"), graph.index_of("c")]
    assert tree.path_to(s) == [s]
    assert tree.path_to(graph.index_of("x")) is None
    assert tree.prev[s] == s
    assert tree.prev[graph.index_of("y")] == -1

    partial = ShortestPathTree(graph, s, destinations=[graph.index_of("a")])
    assert partial.distance_to(graph.index_of("a")) == pytest.approx(1.0)
    assert math.isinf(partial.distance_to(graph.index_of("c")))


def test_dijkstra_reciprocal_weights_prefer_heavy_edges():
    graph = UndirectedGraph.from_edges([("s", "t", 1.0), ("s", "m", 4.0), ("m", "t", 4.0)])
    tree = ShortestPathTree(graph, graph.index_of("s"), reciprocal_weights=True)
    assert tree.distance_to(graph.index_of("t")) == pytest.approx(0.5)
    assert tree.path_to(graph.index_of("t")) == [0, 2, 1]


@pytest.mark.parametrize("reciprocal, expected", [(False, 1.0), (True, 0.5)])
def test_dijkstra_skips_zero_weight_edges(reciprocal, expected):
    graph = UndirectedGraph.from_edges([("a", "b", 0.0), ("b", "c", 2.0)])
    tree = ShortestPathTree(graph, graph.index_of("b"), reciprocal_weights=reciprocal)
    assert math.isinf(tree.distance_to(graph.index_of("a")))
    assert tree.distance_to(graph.index_of("c")) == pytest.approx(expected)
    assert tree.path_to(graph.index_of("a")) is None

    oracle = ShortestPathOracle(graph, reciprocal_weights=reciprocal)
    assert math.isinf(oracle.distance("b", "a"))
    assert oracle.distance("b", "c") == pytest.approx(expected)


def test_dijkstra_arms_and_tree_shape():
    graph = _build_branching_tree()
    idx = {name: graph.index_of(name) for name in ["r", "a", "b", "a1", "a2", "b1", "b2"]}
    tree = ShortestPathTree(graph, idx["r"])

    assert tree.arm(idx["r"]) == "arm"
    assert tree.arm(idx["a2"]) == "arm.0"
    assert tree.arm(idx["b"]) == "arm.1"
    assert tree.arm(idx["b2"]) == "arm.1.1"
    assert tree.depth(idx["a2"]) == 3
    assert tree.last_in_arm("arm.") == idx["r"]
    assert tree.last_in_arm("arm.1.") == idx["b"]

    assert tree.arm_distance(idx["a2"], idx["a2"]) == 0.0
    assert tree.arm_distance(idx["a2"], idx["a"]) == pytest.approx(-2.0)
    assert tree.arm_distance(idx["a"], idx["a2"]) == pytest.approx(-2.0)
    assert tree.arm_distance(idx["b1"], idx["r"]) == pytest.approx(-2.0)
    assert tree.arm_distance(idx["a2"], idx["b1"]) == pytest.approx(5.0)
    assert tree.arm_distance(idx["b1"], idx["b2"]) == pytest.approx(2.0)

    assert tree.tree_depth() == 4
    assert tree.leaf_count() == 3
    assert tree.leaf_count(idx["b"]) == 2

    parents = tree.create_tree()
    assert parents.entity_count() == 7
    assert parents.edge_count() == 12


def test_last_in_arm_unknown_prefix():
    tree = ShortestPathTree(_build_branching_tree(), 0)
    with pytest.raises(KeyError):
        tree.last_in_arm("arm.7.")
