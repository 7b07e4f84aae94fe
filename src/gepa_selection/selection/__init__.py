"""Parent and elite selection strategies."""

from gepa_selection.registry import ComparatorRegistry
from gepa_selection.selection.comparators import (
    diversity_comparator,
    diversity_compare,
    pareto_comparator,
    pareto_compare,
)
from gepa_selection.selection.elite import (
    select_diverse_elites,
    select_elites,
    select_elites_preserve_frontier,
    select_pareto_front_1,
)
from gepa_selection.selection.tournament import (
    adaptive_tournament_size,
    population_diversity,
    run_tournament,
    select,
)

# Register built-in tournament comparators
ComparatorRegistry.register("pareto", pareto_comparator)
ComparatorRegistry.register("diversity", diversity_comparator)

__all__ = [
    "adaptive_tournament_size",
    "diversity_comparator",
    "diversity_compare",
    "pareto_comparator",
    "pareto_compare",
    "population_diversity",
    "run_tournament",
    "select",
    "select_diverse_elites",
    "select_elites",
    "select_elites_preserve_frontier",
    "select_pareto_front_1",
]
