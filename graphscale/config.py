"""Layout configuration objects passed explicitly to every stage."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any, Optional


class StressWeighting(enum.IntEnum):
    """Exponent ``k`` of the stress objective."""

    ABSOLUTE = 0
    SEMIPROPORTIONAL = 1
    PROPORTIONAL = 2


class CoreMetric(enum.Enum):
    """Metric used by the hybrid oracle for the pendant-free core."""

    SHORTEST_PATH = "shortest_path"
    RESISTIVE = "resistive"


@dataclass(frozen=True)
class StressConfig:
    """Parameters of the stress majorizer."""

    weighting: StressWeighting = StressWeighting.ABSOLUTE
    velocity_min: float = 0.1
    iterations_multiplier: int = 3
    min_iterations: int = 200
    max_iterations: Optional[int] = None
    distance_floor: float = 0.01
    weight_floor: float = 0.001
    repulsion_distance: float = 10.0
    workers: int = 16
    threaded_threshold_per_worker: int = 10
    rescue_probability: float = 0.1

    def __post_init__(self) -> None:
        if int(self.weighting) not in (0, 1, 2):
            raise ValueError(f"stress weighting must be 0, 1 or 2, got {self.weighting!r}")
        object.__setattr__(self, "weighting", StressWeighting(int(self.weighting)))
        if not 0.0 <= self.rescue_probability <= 1.0:
            raise ValueError("rescue_probability must lie in [0, 1]")
        if self.workers < 1:
            raise ValueError("workers must be positive")

    @property
    def threaded_threshold(self) -> int:
        return self.workers * self.threaded_threshold_per_worker

    def iteration_budget(self, moved: int) -> int:
        """Iteration cap for a direct run over ``moved`` nodes."""

        its = max(moved * self.iterations_multiplier, self.min_iterations)
        if self.max_iterations is not None and self.max_iterations > 0:
            its = min(its, self.max_iterations)
        return its


@dataclass(frozen=True)
class StochasticConfig:
    neighbors: int = 5
    repulsion_distance: float = 10.0
    iterations: Optional[int] = None
    weight: float = 1.0


@dataclass(frozen=True)
class SpectralConfig:
    landmark_min: int = 40
    landmark_max: int = 200
    pivot_min: int = 5
    pivot_min_component: int = 20
    power_max_iterations: int = 1000
    power_tolerance: float = 1e-12


@dataclass(frozen=True)
class OracleConfig:
    core: CoreMetric = CoreMetric.SHORTEST_PATH
    reciprocal_weights: bool = False


@dataclass(frozen=True)
class LayoutConfig:
    """Aggregate configuration for :func:`graphscale.execute_layout`."""

    random_seed: Optional[int] = None
    stress: StressConfig = field(default_factory=StressConfig)
    stochastic: StochasticConfig = field(default_factory=StochasticConfig)
    spectral: SpectralConfig = field(default_factory=SpectralConfig)
    oracle: OracleConfig = field(default_factory=OracleConfig)
    packing_margin: float = 1.0 / 6.0
    random_reset_span: float = 1000.0

    def replace(self, **changes: Any) -> "LayoutConfig":
        return dataclasses.replace(self, **changes)


__all__ = [
    "CoreMetric",
    "LayoutConfig",
    "OracleConfig",
    "SpectralConfig",
    "StochasticConfig",
    "StressConfig",
    "StressWeighting",
]
