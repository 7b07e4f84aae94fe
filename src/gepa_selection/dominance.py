"""Pareto dominance and non-dominated sorting over candidates.

All objectives are compared on normalized_objectives, where higher is better.
An objective missing from one candidate is read as 0.0 rather than rejected.

Example:
    >>> fronts = fast_non_dominated_sort(population)
    >>> pareto_optimal = fronts[1]
    >>> all(c.pareto_rank == 1 for c in pareto_optimal)
    True
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from enum import Enum

import numpy as np

from gepa_selection.candidate import Candidate, objective_matrix
from gepa_selection.errors import InvalidOptionError
from gepa_selection.primitives import dominates as dominates_vector
from gepa_selection.primitives import non_dominated_sort

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 0.01


class Dominance(Enum):
    """Outcome of a three-way Pareto comparison of a against b."""

    DOMINATES = "dominates"
    DOMINATED_BY = "dominated_by"
    NON_DOMINATED = "non_dominated"


def _pair_vectors(a: Candidate, b: Candidate) -> tuple[np.ndarray, np.ndarray]:
    keys = sorted(set(a.normalized_objectives) | set(b.normalized_objectives))
    matrix = objective_matrix([a, b], keys)
    return matrix[0], matrix[1]


def dominates(a: Candidate, b: Candidate) -> bool:
    """Check if candidate a Pareto-dominates candidate b.

    a dominates b when it scores at least as well on every objective of
    either candidate and strictly better on at least one.

    Args:
        a: First candidate.
        b: Second candidate.

    Returns:
        True if a dominates b. False for candidates without objectives.

    Examples:
        >>> better = Candidate(id="a", normalized_objectives={"acc": 0.9, "cost": 0.8})
        >>> worse = Candidate(id="b", normalized_objectives={"acc": 0.7, "cost": 0.8})
        >>> dominates(better, worse), dominates(worse, better)
        (True, False)
    """
    va, vb = _pair_vectors(a, b)
    return dominates_vector(va, vb)


def compare(a: Candidate, b: Candidate) -> Dominance:
    """Classify the dominance relationship between two candidates.

    Returns:
        Dominance.DOMINATES if a dominates b, Dominance.DOMINATED_BY if b
        dominates a, Dominance.NON_DOMINATED otherwise.
    """
    va, vb = _pair_vectors(a, b)
    if dominates_vector(va, vb):
        return Dominance.DOMINATES
    if dominates_vector(vb, va):
        return Dominance.DOMINATED_BY
    return Dominance.NON_DOMINATED


def epsilon_dominates(a: Candidate, b: Candidate, epsilon: float = DEFAULT_EPSILON) -> bool:
    """Check if candidate a epsilon-dominates candidate b.

    A relaxed dominance test for noisy objectives: a must be no worse than
    b - epsilon everywhere and better than b + epsilon somewhere.

    Args:
        a: First candidate.
        b: Second candidate.
        epsilon: Non-negative tolerance. Default 0.01.

    Returns:
        True if a epsilon-dominates b.

    Raises:
        InvalidOptionError: If epsilon is negative.
    """
    if epsilon < 0:
        raise InvalidOptionError("epsilon", epsilon, "must be non-negative")
    va, vb = _pair_vectors(a, b)
    if va.size == 0:
        return False
    return bool(np.all(va >= vb - epsilon) and np.any(va > vb + epsilon))


def fast_non_dominated_sort(population: Sequence[Candidate]) -> dict[int, list[Candidate]]:
    """Classify candidates into Pareto fronts using NSGA-II fast non-dominated sorting.

    Front 1 holds the candidates no one dominates; front k holds those that
    are non-dominated once fronts 1..k-1 are removed. Complexity O(M * N^2).

    Args:
        population: Candidates with normalized_objectives.

    Returns:
        Mapping of rank to the candidates in that front, in ascending rank
        order. Each candidate is a new value with pareto_rank set; within a
        front, candidates keep their input order. Empty input gives {}.

    Examples:
        >>> fronts = fast_non_dominated_sort(candidates)
        >>> sorted(fronts)
        [1, 2, 3]
    """
    if not population:
        return {}

    ranks = non_dominated_sort(objective_matrix(population))

    fronts: dict[int, list[Candidate]] = {}
    for rank in range(1, int(ranks.max()) + 1):
        fronts[rank] = [
            dataclasses.replace(population[i], pareto_rank=rank) for i in np.flatnonzero(ranks == rank)
        ]

    logger.debug(
        "Sorted %d candidates into %d fronts (front 1: %d)", len(population), len(fronts), len(fronts[1])
    )
    return fronts


def assign_pareto_ranks(population: Sequence[Candidate]) -> list[Candidate]:
    """Return the population with pareto_rank set, in input order.

    Args:
        population: Candidates with normalized_objectives.

    Returns:
        New candidate values carrying their Pareto rank.
    """
    if not population:
        return []
    ranks = non_dominated_sort(objective_matrix(population))
    return [dataclasses.replace(c, pareto_rank=int(r)) for c, r in zip(population, ranks, strict=True)]
