"""Layout orchestration: algorithm catalogue, dispatch and post-processing."""

from .algorithms import AlgorithmCategory, AlgorithmInfo, LayoutAlgorithm, algorithm_info, is_efficient
from .cleanup import randomize_missing, reattach_pendants, scrub_non_finite
from .orchestrator import LayoutResult, execute_layout, layout_coordinates
from .packing import fit_into, pack_components, pack_components_minimal, snake_regions
from .tree import TreeArena, choose_root, spanning_forest, tree_layout

__all__ = [
    "AlgorithmCategory",
    "AlgorithmInfo",
    "LayoutAlgorithm",
    "LayoutResult",
    "TreeArena",
    "algorithm_info",
    "choose_root",
    "execute_layout",
    "fit_into",
    "is_efficient",
    "layout_coordinates",
    "pack_components",
    "pack_components_minimal",
    "randomize_missing",
    "reattach_pendants",
    "scrub_non_finite",
    "snake_regions",
    "spanning_forest",
    "tree_layout",
]
