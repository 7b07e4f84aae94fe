"""Pareto ranking, diversity and distance primitives.

This package provides the pure numpy kernels behind the candidate-level API.
"""

from gepa_selection.primitives.distance import (
    distances_to,
    mean_pairwise_distance,
    pairwise_distances,
    sharing_kernel,
)
from gepa_selection.primitives.pareto import (
    crowding_distance,
    crowding_distance_by_rank,
    dominates,
    dominates_matrix,
    non_dominated_sort,
)

__all__ = [
    "dominates",
    "dominates_matrix",
    "non_dominated_sort",
    "crowding_distance",
    "crowding_distance_by_rank",
    "pairwise_distances",
    "distances_to",
    "mean_pairwise_distance",
    "sharing_kernel",
]
