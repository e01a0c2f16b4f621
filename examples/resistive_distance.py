"""Example: resistive versus shortest-path distances on a small weighted graph."""

from graphscale import (
    CoreMetric,
    LayoutAlgorithm,
    LayoutConfig,
    OracleConfig,
    ResistiveDistance,
    ShortestPathOracle,
    UndirectedGraph,
    layout_coordinates,
)

EDGES = [
    ("A", "B", 2.0),
    ("A", "C", 2.0),
    ("B", "C", 1.0),
    ("B", "D", 3.0),
]


def main() -> None:
    graph = UndirectedGraph.from_edges(EDGES)
    resistive = ResistiveDistance(graph)
    paths = ShortestPathOracle(graph, reciprocal_weights=True)

    names = graph.entities()
    print("pair   resistive   shortest path (1/w)")
    for i, a in enumerate(names):
        for b in names[i + 1 :]:
            print(f"{a}-{b}    {resistive.distance(a, b):.4f}      {paths.distance(a, b):.4f}")

    config = LayoutConfig(
        random_seed=1,
        oracle=OracleConfig(core=CoreMetric.RESISTIVE, reciprocal_weights=True),
    )
    coords = layout_coordinates(LayoutAlgorithm.CLASSICAL_MDS, graph, config=config)
    for name, (x, y) in coords.items():
        print(f"{name}: ({x:.6f}, {y:.6f})")


if __name__ == "__main__":
    main()
