import logging
import math

import numpy as np
import pytest

from graphscale import (
    CancellationToken,
    LayoutAlgorithm,
    LayoutCancelled,
    LayoutConfig,
    StressConfig,
    UndirectedGraph,
    algorithm_info,
    execute_layout,
    is_efficient,
    layout_coordinates,
)
from graphscale.graph import GraphFactory, GraphKind
from graphscale.layout import (
    AlgorithmCategory,
    pack_components,
    pack_components_minimal,
    reattach_pendants,
    snake_regions,
    tree_layout,
)
from graphscale.layout.cleanup import scrub_non_finite


def _build_forest() -> UndirectedGraph:
    """Ring, path, pair and isolated node: four components."""

    graph = GraphFactory(rng=np.random.default_rng(2)).create(GraphKind.RING, {"ringsize": 6, "edgenbors": 2})
    for i in range(4):
        graph.add_edge(f"p{i}", f"p{i + 1}")
    graph.add_edge("u", "v")
    graph.add_entity("solo")
    return graph


def _build_branching_tree() -> UndirectedGraph:
    return UndirectedGraph.from_edges(
        [("r", "a"), ("r", "b"), ("a", "a1"), ("a", "a2"), ("b", "b1"), ("b", "b2")]
    )


def _quick_config() -> LayoutConfig:
    return LayoutConfig(random_seed=7, stress=StressConfig(max_iterations=50))


@pytest.mark.parametrize("algorithm", list(LayoutAlgorithm))
def test_every_algorithm_produces_finite_coordinates(algorithm):
    graph = _build_forest()
    coords = {}
    result = execute_layout(algorithm, graph, coords, config=_quick_config())
    assert result.coords is coords
    assert result.components == 4
    assert set(coords) == set(graph.entities())
    assert all(math.isfinite(x) and math.isfinite(y) for x, y in coords.values())
    assert result.warnings == []


def test_stress_reported_for_full_distance_algorithms():
    graph = _build_forest()
    direct = execute_layout(LayoutAlgorithm.DIRECT_ABSOLUTE, graph, config=_quick_config())
    assert direct.stress is not None and direct.stress >= 0.0
    pivots = execute_layout(LayoutAlgorithm.PIVOT_MDS_5, graph, config=_quick_config())
    assert pivots.stress is None
    tree = execute_layout(LayoutAlgorithm.TREE, graph, config=_quick_config())
    assert tree.stress is None


def test_same_seed_gives_same_layout():
    graph = _build_forest()
    first = layout_coordinates(LayoutAlgorithm.STOCHASTIC_VELOCITY, graph, config=_quick_config())
    second = layout_coordinates(LayoutAlgorithm.STOCHASTIC_VELOCITY, graph, config=_quick_config())
    assert first == second


@pytest.mark.parametrize(
    "algorithm",
    [LayoutAlgorithm.DIRECT_ABSOLUTE, LayoutAlgorithm.STOCHASTIC_EXHAUSTIVE, LayoutAlgorithm.STOCHASTIC_VELOCITY],
)
def test_selection_moves_only_selected_entities(algorithm):
    graph = GraphFactory(rng=np.random.default_rng(0)).create(GraphKind.BINARY_TREE, {"depth": 3})
    rng = np.random.default_rng(1)
    coords = {e: tuple(rng.random(2) * 3.0) for e in graph.entities()}
    selection = {"r0", "r00", "r01"}
    before = dict(coords)
    execute_layout(algorithm, graph, coords, selection=selection, config=_quick_config())
    for entity in graph.entities():
        if entity not in selection:
            assert coords[entity] == before[entity]
    assert any(coords[e] != before[e] for e in selection)


def test_two_node_component_sits_at_target_distance():
    graph = UndirectedGraph.from_edges([("a", "b")])
    coords = execute_layout(LayoutAlgorithm.DIRECT_ABSOLUTE, graph, config=_quick_config()).coords
    assert coords["a"] == (0.0, 0.0)
    assert coords["b"] == (1.0, 0.0)


def test_layout_coordinates_leaves_input_untouched():
    graph = _build_branching_tree()
    given = {"r": (5.0, 5.0)}
    out = layout_coordinates(LayoutAlgorithm.TREE, graph, given)
    assert given == {"r": (5.0, 5.0)}
    assert out["r"] == (0.0, 0.0)


def test_cancelled_run_raises_and_keeps_coordinates_finite():
    graph = _build_forest()
    token = CancellationToken()
    token.cancel("user request")
    coords = {}
    with pytest.raises(LayoutCancelled, match="user request"):
        execute_layout(LayoutAlgorithm.DIRECT_ABSOLUTE, graph, coords, config=_quick_config(), cancel=token)
    assert set(coords) == set(graph.entities())
    assert all(math.isfinite(v) for xy in coords.values() for v in xy)


def test_reattached_pendant_overwrites_non_finite_input():
    graph = _build_branching_tree()
    coords = {e: (0.0, 0.0) for e in graph.entities()}
    coords["a1"] = (math.nan, 1.0)
    result = execute_layout(LayoutAlgorithm.REATTACH_PENDANTS, graph, coords, config=_quick_config())
    assert all(math.isfinite(v) for xy in coords.values() for v in xy)
    assert result.warnings == []


def test_untouched_non_finite_input_is_scrubbed_with_warning():
    graph = _build_branching_tree()
    graph.add_entity("solo")
    coords = {e: (0.0, 0.0) for e in graph.entities()}
    coords["solo"] = (math.inf, 0.0)
    result = execute_layout(LayoutAlgorithm.REATTACH_PENDANTS, graph, coords, config=_quick_config())
    assert all(math.isfinite(v) for xy in coords.values() for v in xy)
    assert len(result.warnings) == 1
    assert "non-finite" in result.warnings[0]


def test_scrub_warning_names_algorithm_and_count(caplog):
    caplog.set_level(logging.WARNING, logger="graphscale.layout.orchestrator")
    graph = _build_branching_tree()
    graph.add_entity("solo")
    graph.add_entity("other")
    coords = {e: (0.0, 0.0) for e in graph.entities()}
    coords["solo"] = (math.inf, 0.0)
    coords["other"] = (0.0, math.nan)
    result = execute_layout(LayoutAlgorithm.REATTACH_PENDANTS, graph, coords, config=_quick_config())
    expected = "reattach_pendants: replaced non-finite coordinates of 2 entities"
    assert result.warnings == [expected]
    records = [r for r in caplog.records if r.name == "graphscale.layout.orchestrator" and r.levelno == logging.WARNING]
    assert [r.getMessage() for r in records] == [expected]
    assert records[0].args == ("reattach_pendants", 2)


def test_snake_regions_spiral_around_largest():
    regions = snake_regions([10, 5, 5])
    assert regions == [(0.0, 0.0, 1.0, 1.0), (1.0, 0.0, 1.5, 0.5), (1.0, 0.5, 1.5, 1.0)]
    assert snake_regions([]) == []


def test_pack_components_keeps_components_apart():
    pos = np.random.default_rng(0).random((7, 2)) * 50.0
    components = [[0, 1, 2, 3], [4, 5], [6]]
    regions = pack_components(pos, components)
    for members, (x0, y0, x1, y1) in zip(components, regions):
        pts = pos[members]
        assert (pts[:, 0] >= x0).all() and (pts[:, 0] <= x1).all()
        assert (pts[:, 1] >= y0).all() and (pts[:, 1] <= y1).all()


def test_pack_components_minimal_uses_grid():
    pos = np.zeros((6, 2))
    pack_components_minimal(pos, [[5], [0, 1, 2], [3, 4]])
    assert tuple(pos[0]) == (0.0, 0.0)
    assert tuple(pos[3]) == (0.0, 1.0)
    assert tuple(pos[5]) == (1.0, 0.0)


def test_pendants_spiral_around_hub():
    graph = UndirectedGraph.from_edges([("hub", "x"), ("hub", "y"), ("hub", "z")])
    pos = np.zeros((4, 2))
    moved = reattach_pendants(graph, pos, np.random.default_rng(0))
    assert moved == 3
    radii = np.linalg.norm(pos[1:] - pos[0], axis=1)
    assert radii == pytest.approx([0.56, 1.04, 1.52])


def test_pendants_avoid_existing_edges():
    graph = UndirectedGraph.from_edges([("c", "n1"), ("c", "n2"), ("n1", "n2"), ("c", "leaf")])
    pos = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
    reattach_pendants(graph, pos, np.random.default_rng(0))
    leaf = pos[graph.index_of("leaf")]
    assert np.linalg.norm(leaf) == pytest.approx(0.28 * 0.32)
    assert abs(math.atan2(leaf[1], leaf[0])) > math.radians(8.0)


def test_scrub_non_finite_rows():
    pos = np.array([[0.0, 1.0], [np.nan, 0.0], [np.inf, -np.inf]])
    fixed = scrub_non_finite(pos, np.random.default_rng(0))
    assert fixed.tolist() == [1, 2]
    assert np.isfinite(pos).all()
    assert tuple(pos[0]) == (0.0, 1.0)


def test_algorithm_catalogue():
    info = algorithm_info(LayoutAlgorithm.CLASSICAL_MDS)
    assert info.category is AlgorithmCategory.SPECTRAL
    assert info.stable
    assert algorithm_info(LayoutAlgorithm.PACK_COMPONENTS).category is AlgorithmCategory.UTILITY
    assert algorithm_info("tree").category is AlgorithmCategory.TREE
    small = _build_branching_tree()
    assert is_efficient(LayoutAlgorithm.DIRECT_ABSOLUTE, small)
    big = GraphFactory(rng=np.random.default_rng(0)).create(GraphKind.MESH, {"size": 15})
    assert not is_efficient(LayoutAlgorithm.DIRECT_ABSOLUTE, big)
    assert is_efficient(LayoutAlgorithm.PIVOT_MDS_1, big)


def test_tree_layout_levels():
    graph = _build_branching_tree()
    pos = np.zeros((graph.entity_count(), 2))
    roots = tree_layout(graph, pos)
    assert roots == [graph.index_of("r")]
    assert tuple(pos[graph.index_of("r")]) == (0.0, 0.0)
    assert pos[graph.index_of("a"), 1] == pytest.approx(2.0)
    assert pos[graph.index_of("b"), 1] == pytest.approx(2.0)
    assert pos[graph.index_of("a1"), 1] == pytest.approx(4.0)
    assert pos[graph.index_of("a"), 0] < pos[graph.index_of("b"), 0]


def test_tree_layout_respects_selected_root():
    graph = _build_branching_tree()
    pos = np.zeros((graph.entity_count(), 2))
    roots = tree_layout(graph, pos, {graph.index_of("a")})
    assert roots == [graph.index_of("a")]
    assert tuple(pos[graph.index_of("a")]) == (0.0, 0.0)


def test_hypertree_puts_leaves_on_outer_ring():
    graph = GraphFactory(rng=np.random.default_rng(0)).create(GraphKind.BINARY_TREE, {"depth": 3})
    pos = np.zeros((graph.entity_count(), 2))
    tree_layout(graph, pos, hyper=True)
    center = pos[graph.index_of("r")]
    assert tuple(center) == (0.0, 0.0)
    leaves = [i for i in range(graph.entity_count()) if graph.degree(i) == 1]
    assert len(leaves) == 8
    assert np.linalg.norm(pos[leaves], axis=1) == pytest.approx([0.75] * 8)


def test_tree_tiles_offset_odd_rows():
    graph = UndirectedGraph.from_edges([("a", "b"), ("c", "d"), ("e", "f")])
    pos = np.zeros((6, 2))
    tiles = tree_layout(graph, pos)
    assert len(tiles) == 3
    third = tiles[2]
    assert pos[third, 0] == pytest.approx(1.1)
    assert pos[third, 1] == pytest.approx(2.2)
