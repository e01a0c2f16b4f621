"""Example: generate a ring graph and compare a few layout algorithms."""

from graphscale import (
    GraphFactory,
    GraphKind,
    LayoutAlgorithm,
    LayoutConfig,
    StressConfig,
    execute_layout,
    is_efficient,
)

ALGORITHMS = [
    LayoutAlgorithm.CLASSICAL_MDS,
    LayoutAlgorithm.PIVOT_MDS_20,
    LayoutAlgorithm.DIRECT_ABSOLUTE,
    LayoutAlgorithm.STOCHASTIC_VELOCITY,
    LayoutAlgorithm.INCREMENTAL_PERCENTILE,
]


def main() -> None:
    graph = GraphFactory().create(GraphKind.RING, {"ringsize": 12, "edgenbors": 4})
    print(f"Ring: {graph.entity_count()} entities, {graph.edge_count()} edges")

    config = LayoutConfig(random_seed=123, stress=StressConfig(max_iterations=300))
    coords = {}
    for algorithm in ALGORITHMS:
        if not is_efficient(algorithm, graph):
            print(f"{algorithm.value}: skipped, graph too large")
            continue
        # each run starts from the previous result
        result = execute_layout(algorithm, graph, coords, config=config)
        label = "n/a" if result.stress is None else f"{result.stress:.6f}"
        print(f"{algorithm.value}: stress {label}")

    for name in list(coords)[:5]:
        x, y = coords[name]
        print(f"{name}: ({x:.4f}, {y:.4f})")


if __name__ == "__main__":
    main()
