"""Protocol definitions for pluggable selection strategies.

Two seams of the selection engine accept user-supplied strategies:

1. **Tournament comparators**: decide which of two candidates wins a tournament
   bout. The built-ins prefer better Pareto rank ('pareto') or larger crowding
   distance ('diversity').

2. **Niche radius strategies**: derive the fitness-sharing radius from the
   current population. The built-ins are 'fixed', 'population_based',
   'objective_range' and 'adaptive'.

Example usage:
    ```python
    def fitness_compare(a: Candidate, b: Candidate) -> bool:
        return (a.fitness or 0.0) > (b.fitness or 0.0)

    ComparatorRegistry.register("fitness", lambda: fitness_compare)
    parents = select(population, count=10, config=TournamentConfig(strategy="fitness"), rng=rng)
    ```
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from gepa_selection.candidate import Candidate


@runtime_checkable
class Comparator(Protocol):
    """Protocol for tournament comparators.

    A comparator is a strict "a beats b" relation. It must be irreflexive
    (comparator(a, a) is False) and must not contain cycles over a fixed
    population snapshot, otherwise tournament winners depend on draw order.

    Parameters:
        a: Challenger candidate.
        b: Current tournament leader.

    Returns:
        True if a strictly beats b, False otherwise (including ties).
    """

    def __call__(self, a: Candidate, b: Candidate) -> bool:
        """Return True if a strictly beats b."""
        ...


@runtime_checkable
class NicheRadiusStrategy(Protocol):
    """Protocol for niche radius strategies.

    Parameters:
        population: Non-empty population the radius is computed for.

    Returns:
        A positive niche radius in normalized objective space.
    """

    def __call__(self, population: Sequence[Candidate]) -> float:
        """Compute the niche radius for the population."""
        ...
