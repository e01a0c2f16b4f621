import logging

from .cancellation import CancellationToken
from .config import (
    CoreMetric,
    LayoutConfig,
    OracleConfig,
    SpectralConfig,
    StochasticConfig,
    StressConfig,
    StressWeighting,
)
from .distance import (
    DistanceOracle,
    HybridDistanceOracle,
    MatrixOracle,
    ResistiveDistance,
    ResistiveOracle,
    ShortestPathOracle,
    ShortestPathTree,
    build_oracle,
)
from .graph import Graph, GraphFactory, GraphKind, GraphSize, GraphView, TwoPlusDegreeGraph, UndirectedGraph, connected_components
from .layout import (
    AlgorithmInfo,
    LayoutAlgorithm,
    LayoutResult,
    algorithm_info,
    execute_layout,
    is_efficient,
    layout_coordinates,
)
from .spectral import classical_mds, landmark_mds, pivot_mds
from .stochastic import StochasticEmbedder, StochasticMode
from .stress import StressMajorizer, arrange_incrementally
from .types import (
    Coord,
    CoordinateMap,
    DisconnectedGraphError,
    Entity,
    GraphLayoutError,
    LayoutCancelled,
    UnknownEntity,
)

logger = logging.getLogger(__name__)

if not logging.getLogger().handlers:  # pragma: no cover - depends on host application
    logging.basicConfig(level=logging.INFO)

__version__ = "0.1.0"

__all__ = [
    'AlgorithmInfo',
    'CancellationToken',
    'Coord',
    'CoordinateMap',
    'CoreMetric',
    'DisconnectedGraphError',
    'DistanceOracle',
    'Entity',
    'Graph',
    'GraphFactory',
    'GraphKind',
    'GraphLayoutError',
    'GraphSize',
    'GraphView',
    'HybridDistanceOracle',
    'LayoutAlgorithm',
    'LayoutCancelled',
    'LayoutConfig',
    'LayoutResult',
    'MatrixOracle',
    'OracleConfig',
    'ResistiveDistance',
    'ResistiveOracle',
    'ShortestPathOracle',
    'ShortestPathTree',
    'SpectralConfig',
    'StochasticConfig',
    'StochasticEmbedder',
    'StochasticMode',
    'StressConfig',
    'StressMajorizer',
    'StressWeighting',
    'TwoPlusDegreeGraph',
    'UndirectedGraph',
    'UnknownEntity',
    'algorithm_info',
    'arrange_incrementally',
    'build_oracle',
    'classical_mds',
    'connected_components',
    'execute_layout',
    'is_efficient',
    'landmark_mds',
    'layout_coordinates',
    'pivot_mds',
]
