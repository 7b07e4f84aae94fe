"""Deterministic elite extraction.

Elites are the best candidates by (Pareto rank ascending, crowding distance
descending), with boundary candidates first within a front. Three variants
build on that ordering:

- select_elites: a fixed count or ratio of the population
- select_elites_preserve_frontier: exactly elite_count, keeping the whole
  first front whenever it fits
- select_diverse_elites: skips candidates that nearly duplicate an elite
  already chosen in objective space
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from gepa_selection.candidate import (
    Candidate,
    distance_or_zero,
    objective_matrix,
    rank_or_worst,
    require_ranking,
    selection_key,
)
from gepa_selection.config import EliteConfig
from gepa_selection.dominance import assign_pareto_ranks
from gepa_selection.errors import MissingOptionError
from gepa_selection.primitives import distances_to
from gepa_selection.survival import assign_crowding_distances

logger = logging.getLogger(__name__)


def select_elites(population: Sequence[Candidate], config: EliteConfig | None = None) -> list[Candidate]:
    """Select the top candidates by rank and crowding distance.

    The number of elites is max(min_elites, elite_count or round(n * elite_ratio)),
    capped at the population size. The ratio is rounded half up.

    Args:
        population: Candidates with pareto_rank and crowding_distance.
        config: Elite options. Defaults to EliteConfig() (15% of the population).

    Returns:
        The elites, best first. An empty population gives an empty list.

    Raises:
        MissingRankingError: If any candidate lacks rank or crowding distance.

    Example:
        >>> elites = select_elites(population, EliteConfig(elite_ratio=0.1))
        >>> len(elites) == round(len(population) * 0.1)
        True
    """
    config = config or EliteConfig()
    if not population:
        return []
    require_ranking(population)

    n = len(population)
    desired = config.elite_count if config.elite_count is not None else math.floor(n * config.elite_ratio + 0.5)
    count = min(max(config.min_elites, desired), n)
    return sorted(population, key=selection_key)[:count]


def select_pareto_front_1(population: Sequence[Candidate]) -> list[Candidate]:
    """Return the non-dominated candidates, in input order.

    Existing ranks are trusted when every candidate has one; otherwise ranks
    are derived from normalized_objectives first.
    """
    if any(c.pareto_rank is None for c in population):
        population = assign_pareto_ranks(population)
    return [c for c in population if c.pareto_rank == 1]


def select_elites_preserve_frontier(population: Sequence[Candidate], config: EliteConfig) -> list[Candidate]:
    """Select exactly elite_count elites without losing first-front candidates.

    Ranks and crowding distances are derived from normalized_objectives, so
    stale annotations on the input are ignored. Then:

    - if front 1 has more than elite_count members, the least crowded of them are kept;
    - if it has fewer, all of it is kept and the remaining slots are filled from
      later fronts by rank, then crowding distance;
    - if it has exactly elite_count members, it is returned as is.

    Args:
        population: Candidates with normalized_objectives.
        config: Must set elite_count.

    Returns:
        min(elite_count, len(population)) candidates, best first.

    Raises:
        MissingOptionError: If config.elite_count is None.
    """
    if config.elite_count is None:
        raise MissingOptionError("elite_count", "select_elites_preserve_frontier")
    if not population:
        return []

    ranked = assign_crowding_distances(assign_pareto_ranks(population))
    # Front 1 sorts ahead of every later front, so the prefix covers all three cases
    return sorted(ranked, key=selection_key)[: config.elite_count]


def select_diverse_elites(population: Sequence[Candidate], config: EliteConfig) -> list[Candidate]:
    """Select up to elite_count elites that are pairwise distinct in objective space.

    Candidates are scanned by (rank ascending, crowding distance descending,
    generation descending). A candidate is accepted only if its Euclidean
    distance to every elite accepted so far exceeds similarity_threshold.

    Args:
        population: Candidates with pareto_rank and crowding_distance.
        config: Must set elite_count; similarity_threshold defaults to 0.01.

    Returns:
        The accepted elites in scan order. Fewer than elite_count when the
        population does not contain enough distinct candidates.

    Raises:
        MissingOptionError: If config.elite_count is None.
        MissingRankingError: If any candidate lacks rank or crowding distance.
    """
    if config.elite_count is None:
        raise MissingOptionError("elite_count", "select_diverse_elites")
    require_ranking(population)
    if not population:
        return []

    ordered = sorted(population, key=lambda c: (rank_or_worst(c), -distance_or_zero(c), -c.generation))
    points = objective_matrix(ordered)

    accepted: list[int] = []
    for i in range(len(ordered)):
        if len(accepted) == config.elite_count:
            break
        if not accepted or distances_to(points[i], points[accepted]).min() > config.similarity_threshold:
            accepted.append(i)

    if len(accepted) < config.elite_count:
        logger.debug(
            "Only %d of %d requested elites are more than %.4f apart",
            len(accepted),
            config.elite_count,
            config.similarity_threshold,
        )
    return [ordered[i] for i in accepted]
