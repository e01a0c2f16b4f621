import numpy as np
import pytest

from graphscale.config import StochasticConfig
from graphscale.distance import build_oracle
from graphscale.graph import GraphFactory, GraphKind, UndirectedGraph
from graphscale.stochastic import StochasticEmbedder, StochasticMode


def _build_ring_graph():
    return GraphFactory(rng=np.random.default_rng(1)).create(GraphKind.RING, {"ringsize": 6, "edgenbors": 2})


def test_mode_flags():
    assert not StochasticMode.EXHAUSTIVE.sampled
    assert not StochasticMode.EXHAUSTIVE.uses_velocity
    assert StochasticMode.EXHAUSTIVE_VELOCITY.uses_velocity
    assert StochasticMode.STOCHASTIC_VELOCITY.sampled
    assert StochasticMode.STOCHASTIC_VELOCITY_ANNEALING.sampled


def test_exhaustive_pair_reaches_target_distance():
    graph = UndirectedGraph.from_edges([("a", "b")])
    oracle = build_oracle(graph)
    pos = np.array([[0.0, 0.0], [3.0, 0.0]])
    StochasticEmbedder(StochasticMode.EXHAUSTIVE, oracle).run(pos, [0, 1], iterations=1)
    assert np.allclose(pos, [[1.0, 0.0], [2.0, 0.0]])


@pytest.mark.parametrize("mode", list(StochasticMode))
def test_every_mode_keeps_positions_finite(mode):
    graph = _build_ring_graph()
    oracle = build_oracle(graph)
    n = graph.entity_count()
    pos = np.random.default_rng(3).random((n, 2)) * 4.0
    embedder = StochasticEmbedder(mode, oracle, StochasticConfig(neighbors=3), np.random.default_rng(4))
    assert embedder.run(pos, range(n)) == n
    assert np.isfinite(pos).all()


@pytest.mark.parametrize("mode", [StochasticMode.EXHAUSTIVE, StochasticMode.STOCHASTIC_VELOCITY])
def test_pinned_rows_are_not_written(mode):
    graph = _build_ring_graph()
    oracle = build_oracle(graph)
    n = graph.entity_count()
    pos = np.random.default_rng(5).random((n, 2))
    pinned = [0, 1, 2, 3]
    before = pos[pinned].copy()
    StochasticEmbedder(mode, oracle, rng=np.random.default_rng(6)).run(pos, range(n), pinned, iterations=10)
    assert np.array_equal(pos[pinned], before)


def test_broken_rows_are_reset_before_use():
    graph = UndirectedGraph.from_edges([("a", "b"), ("b", "c")])
    oracle = build_oracle(graph)
    pos = np.array([[0.0, 0.0], [np.nan, np.inf], [2.0, 0.0]])
    StochasticEmbedder(StochasticMode.EXHAUSTIVE_VELOCITY, oracle, rng=np.random.default_rng(0)).run(pos, [0, 1, 2])
    assert np.isfinite(pos).all()


def test_disconnected_members_are_pushed_apart():
    graph = UndirectedGraph.from_edges([("a", "b"), ("c", "d")])
    oracle = build_oracle(graph)
    pos = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 0.5], [1.0, 0.5]])
    config = StochasticConfig(repulsion_distance=10.0)
    StochasticEmbedder(StochasticMode.EXHAUSTIVE, oracle, config).run(pos, range(4), iterations=20)
    gap = np.linalg.norm(pos[0] - pos[2])
    assert gap > 0.5


def test_config_iterations_default():
    graph = _build_ring_graph()
    oracle = build_oracle(graph)
    n = graph.entity_count()
    pos = np.zeros((n, 2)) + np.random.default_rng(2).random((n, 2))
    embedder = StochasticEmbedder(
        StochasticMode.EXHAUSTIVE, oracle, StochasticConfig(iterations=4), np.random.default_rng(0)
    )
    assert embedder.run(pos, range(n)) == 4
    assert embedder.run(pos, []) == 0
