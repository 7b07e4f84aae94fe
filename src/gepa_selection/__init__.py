"""gepa-selection: multi-objective selection for evolving prompt candidates.

A pure numpy implementation of the ranking and selection layer of a GEPA
(Genetic-Pareto) optimizer: NSGA-II non-dominated sorting, crowding distance,
niche-based fitness sharing, elite extraction and tournament selection.
Candidates arrive already evaluated and normalized (higher is better); every
stage returns new candidate values and never mutates its input.

Example (one generation):
    >>> import numpy as np
    >>> from gepa_selection import Candidate, environmental_selection, select, select_elites
    >>> rng = np.random.default_rng(42)
    >>> population = [
    ...     Candidate(id=f"p{i}", normalized_objectives={"accuracy": a, "speed": 1 - a})
    ...     for i, a in enumerate(rng.uniform(0, 1, size=20))
    ... ]
    >>> survivors = environmental_selection(population, target_size=10)
    >>> len(survivors)
    10
    >>> elites = select_elites(survivors)
    >>> parents = select(survivors, count=16, rng=rng)
    >>> len(parents)
    16
"""

from gepa_selection.candidate import BOUNDARY, Candidate, CandidateMetadata, is_boundary
from gepa_selection.config import (
    AdaptiveSharingConfig,
    EliteConfig,
    NicheRadiusConfig,
    SharingConfig,
    TournamentConfig,
)
from gepa_selection.dominance import (
    Dominance,
    assign_pareto_ranks,
    compare,
    dominates,
    epsilon_dominates,
    fast_non_dominated_sort,
)
from gepa_selection.errors import (
    EmptyPopulationError,
    InvalidOptionError,
    MissingOptionError,
    MissingRankingError,
    SelectionError,
)
from gepa_selection.registry import (
    ComparatorRegistry,
    NicheRadiusRegistry,
    list_comparators,
    list_niche_radius_strategies,
)
from gepa_selection.results import SharingOutcome, SharingResult
from gepa_selection.selection import (
    adaptive_tournament_size,
    diversity_compare,
    pareto_compare,
    population_diversity,
    run_tournament,
    select,
    select_diverse_elites,
    select_elites,
    select_elites_preserve_frontier,
    select_pareto_front_1,
)
from gepa_selection.sharing import (
    adaptive_apply_sharing,
    apply_sharing,
    calculate_niche_radius,
    niche_count,
    niche_counts,
    sharing_diversity,
    sharing_function,
)
from gepa_selection.survival import (
    assign_crowding_distances,
    environmental_selection,
    identify_boundary_solutions,
    select_by_crowding_distance,
)

__all__ = [
    # Data model
    "Candidate",
    "CandidateMetadata",
    "BOUNDARY",
    "is_boundary",
    # Dominance
    "Dominance",
    "dominates",
    "compare",
    "epsilon_dominates",
    "fast_non_dominated_sort",
    "assign_pareto_ranks",
    # Crowding distance and survival
    "assign_crowding_distances",
    "select_by_crowding_distance",
    "environmental_selection",
    "identify_boundary_solutions",
    # Fitness sharing
    "sharing_function",
    "niche_count",
    "niche_counts",
    "apply_sharing",
    "calculate_niche_radius",
    "sharing_diversity",
    "adaptive_apply_sharing",
    # Elite selection
    "select_elites",
    "select_pareto_front_1",
    "select_elites_preserve_frontier",
    "select_diverse_elites",
    # Tournament selection
    "select",
    "run_tournament",
    "pareto_compare",
    "diversity_compare",
    "population_diversity",
    "adaptive_tournament_size",
    # Configuration
    "SharingConfig",
    "NicheRadiusConfig",
    "AdaptiveSharingConfig",
    "EliteConfig",
    "TournamentConfig",
    # Registry system
    "ComparatorRegistry",
    "NicheRadiusRegistry",
    "list_comparators",
    "list_niche_radius_strategies",
    # Result types
    "SharingResult",
    "SharingOutcome",
    # Errors
    "SelectionError",
    "EmptyPopulationError",
    "MissingOptionError",
    "InvalidOptionError",
    "MissingRankingError",
]
