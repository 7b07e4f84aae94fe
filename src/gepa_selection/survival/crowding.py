"""Crowding distance assignment and NSGA-II environmental selection.

This module applies the crowding distance primitive to candidate populations:

- assign_crowding_distances: annotate every candidate within its own front
- select_by_crowding_distance: trim a ranked population by (rank, distance)
- environmental_selection: merge parents and offspring and keep the best fronts
- identify_boundary_solutions: ids of candidates carrying the boundary sentinel

Boundary candidates (extremal on some objective of their front) receive
BOUNDARY, which sorts ahead of every finite distance, so truncation never
drops them while a finite-distance member of the same front remains.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

import numpy as np

from gepa_selection.candidate import Candidate, is_boundary, objective_matrix, require_ranking, selection_key
from gepa_selection.dominance import fast_non_dominated_sort
from gepa_selection.errors import InvalidOptionError
from gepa_selection.primitives import crowding_distance, crowding_distance_by_rank

logger = logging.getLogger(__name__)


def assign_crowding_distances(ranked_population: Sequence[Candidate]) -> list[Candidate]:
    """Annotate every candidate with its crowding distance within its Pareto front.

    Args:
        ranked_population: Candidates with pareto_rank assigned.

    Returns:
        New candidate values with crowding_distance set, in input order.
        Members of fronts with at most two candidates all receive BOUNDARY.

    Raises:
        MissingRankingError: If any candidate has no pareto_rank.

    Example:
        >>> ranked = assign_pareto_ranks(population)
        >>> annotated = assign_crowding_distances(ranked)
        >>> all(c.crowding_distance is not None for c in annotated)
        True
    """
    require_ranking(ranked_population, crowding=False)

    ranks = np.array([candidate.pareto_rank for candidate in ranked_population], dtype=np.int64)
    distances = crowding_distance_by_rank(objective_matrix(ranked_population), ranks)

    return [
        dataclasses.replace(candidate, crowding_distance=float(distance))
        for candidate, distance in zip(ranked_population, distances, strict=True)
    ]


def select_by_crowding_distance(population: Sequence[Candidate], count: int) -> list[Candidate]:
    """Keep the count best candidates by rank, then by crowding distance.

    Args:
        population: Candidates with pareto_rank and crowding_distance.
        count: Number of survivors, between 1 and len(population).

    Returns:
        The selected candidates, best first.

    Raises:
        InvalidOptionError: If count is not positive or exceeds the population size.
        MissingRankingError: If any candidate lacks rank or distance.
    """
    if count < 1:
        raise InvalidOptionError("count", count, "must be positive")
    if count > len(population):
        raise InvalidOptionError("count", count, f"cannot exceed population size ({len(population)})")
    require_ranking(population)

    return sorted(population, key=selection_key)[:count]


def environmental_selection(combined_population: Sequence[Candidate], target_size: int) -> list[Candidate]:
    """Select the next generation from merged parents and offspring (NSGA-II).

    Fronts are added whole in ascending rank order while they fit. The first
    front that would overflow target_size is sorted by crowding distance,
    descending with BOUNDARY first, and only as many members as needed are
    kept. Survivors are then re-annotated with crowding distances computed
    among the surviving members of each front, so re-applying the selection
    with the same target_size returns the same candidates unchanged.

    Args:
        combined_population: Parents and offspring with normalized_objectives.
        target_size: Desired population size, at least 1.

    Returns:
        min(target_size, len(combined_population)) candidates with pareto_rank
        and crowding_distance set, ordered front by front.

    Raises:
        InvalidOptionError: If target_size is less than 1.

    Example:
        >>> next_generation = environmental_selection(parents + offspring, target_size=100)
        >>> len(next_generation)
        100
    """
    if target_size < 1:
        raise InvalidOptionError("target_size", target_size, "must be positive")
    if not combined_population:
        return []

    survivors: list[Candidate] = []
    for rank, front in fast_non_dominated_sort(combined_population).items():
        remaining = target_size - len(survivors)
        if remaining <= 0:
            break

        if len(front) <= remaining:
            survivors.extend(front)
            continue

        # Marginal front: keep the least crowded members
        cd = crowding_distance(objective_matrix(front))
        keep = np.argsort(-cd, kind="stable")[:remaining]
        survivors.extend(front[i] for i in keep)
        logger.debug("Truncated front %d from %d to %d candidates", rank, len(front), remaining)
        break

    return assign_crowding_distances(survivors)


def identify_boundary_solutions(population: Sequence[Candidate]) -> list[str]:
    """Return the ids of candidates whose crowding distance is the boundary sentinel.

    Args:
        population: Candidates, typically after assign_crowding_distances.

    Returns:
        Ids in population order. Candidates without a crowding distance are
        never reported.
    """
    return [candidate.id for candidate in population if is_boundary(candidate.crowding_distance)]
