"""Tournament comparators.

A comparator answers "does a strictly beat b?". Both built-ins compare on
two keys lexicographically, so neither can produce a cycle over a fixed
population snapshot:

- pareto_compare: lower Pareto rank first, then larger crowding distance
- diversity_compare: larger crowding distance first, then lower Pareto rank

Absent ranks count as the worst possible rank and absent crowding distances
as 0.0. Two boundary candidates tie on distance.
"""

from gepa_selection.candidate import Candidate, distance_or_zero, rank_or_worst
from gepa_selection.protocols import Comparator


def pareto_compare(a: Candidate, b: Candidate) -> bool:
    """Return True if a beats b on rank, or on crowding distance at equal rank.

    Examples:
        >>> from gepa_selection import BOUNDARY
        >>> front1 = Candidate(id="a", pareto_rank=1, crowding_distance=0.2)
        >>> front2 = Candidate(id="b", pareto_rank=2, crowding_distance=BOUNDARY)
        >>> pareto_compare(front1, front2), pareto_compare(front2, front1)
        (True, False)
    """
    rank_a, rank_b = rank_or_worst(a), rank_or_worst(b)
    if rank_a != rank_b:
        return rank_a < rank_b
    return distance_or_zero(a) > distance_or_zero(b)


def diversity_compare(a: Candidate, b: Candidate) -> bool:
    """Return True if a beats b on crowding distance, or on rank at equal distance."""
    distance_a, distance_b = distance_or_zero(a), distance_or_zero(b)
    if distance_a != distance_b:
        return distance_a > distance_b
    return rank_or_worst(a) < rank_or_worst(b)


def pareto_comparator() -> Comparator:
    """Factory for the 'pareto' comparator registered in ComparatorRegistry."""
    return pareto_compare


def diversity_comparator() -> Comparator:
    """Factory for the 'diversity' comparator registered in ComparatorRegistry."""
    return diversity_compare
