"""Tournament selection of parents from a ranked population.

Each winner is found by drawing tournament_size distinct candidates uniformly
at random and folding them with a comparator. Winners are drawn
independently, so the same candidate may be selected more than once and
count may exceed the population size.

The adaptive strategy scales the tournament size with population diversity:
a converged population gets small tournaments (weak selection pressure,
preserving what variation is left) and a diverse one gets large tournaments.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from gepa_selection.candidate import Candidate, distance_or_zero, is_boundary, require_ranking
from gepa_selection.config import TournamentConfig
from gepa_selection.errors import EmptyPopulationError, InvalidOptionError
from gepa_selection.protocols import Comparator
from gepa_selection.registry import ComparatorRegistry
from gepa_selection.selection.comparators import pareto_compare

logger = logging.getLogger(__name__)


def select(
    population: Sequence[Candidate],
    count: int,
    config: TournamentConfig | None = None,
    rng: np.random.Generator | None = None,
) -> list[Candidate]:
    """Select count parents by repeated tournaments.

    Args:
        population: Candidates with pareto_rank and crowding_distance.
        count: Number of winners to return. May exceed len(population).
        config: Strategy and tournament sizes. Defaults to TournamentConfig()
            (pareto comparator, tournament size 3). Any strategy other than
            'adaptive' is looked up in ComparatorRegistry.
        rng: Random number generator. A fresh default_rng() when None.

    Returns:
        Exactly count winners, sampled independently with replacement.

    Raises:
        EmptyPopulationError: If population is empty.
        InvalidOptionError: If count is not positive, a tournament size exceeds
            the population size, or the strategy is not registered.
        MissingRankingError: If any candidate lacks rank or crowding distance.

    Example:
        >>> rng = np.random.default_rng(42)
        >>> parents = select(population, count=20, config=TournamentConfig(tournament_size=2), rng=rng)
        >>> len(parents)
        20
    """
    config = config or TournamentConfig()
    if not population:
        raise EmptyPopulationError("tournament selection")
    if count < 1:
        raise InvalidOptionError("count", count, "must be positive")
    require_ranking(population)

    n = len(population)
    if config.is_adaptive:
        if config.max_tournament_size > n:
            raise InvalidOptionError(
                "max_tournament_size", config.max_tournament_size, f"cannot exceed population size ({n})"
            )
        diversity = population_diversity(population)
        tournament_size = adaptive_tournament_size(
            diversity, config.min_tournament_size, config.max_tournament_size, config.diversity_threshold
        )
        logger.debug("Adaptive tournament: diversity=%.3f, size=%d", diversity, tournament_size)
        comparator: Comparator = pareto_compare
    else:
        if config.tournament_size > n:
            raise InvalidOptionError("tournament_size", config.tournament_size, f"cannot exceed population size ({n})")
        tournament_size = config.tournament_size
        try:
            comparator = ComparatorRegistry.get(config.strategy)
        except KeyError as err:
            raise InvalidOptionError("strategy", config.strategy, err.args[0]) from err

    rng = rng if rng is not None else np.random.default_rng()
    return [run_tournament(population, tournament_size, comparator, rng) for _ in range(count)]


def run_tournament(
    population: Sequence[Candidate],
    tournament_size: int,
    comparator: Comparator,
    rng: np.random.Generator,
) -> Candidate:
    """Run a single tournament and return its winner.

    Args:
        population: Candidates to draw from.
        tournament_size: Number of distinct competitors, at most len(population).
        comparator: Strict "a beats b" relation.
        rng: Random number generator.

    Returns:
        The competitor no later challenger beat.
    """
    competitors = rng.choice(len(population), size=tournament_size, replace=False)

    best = population[competitors[0]]
    for idx in competitors[1:]:
        challenger = population[idx]
        if comparator(challenger, best):
            best = challenger
    return best


def population_diversity(population: Sequence[Candidate]) -> float:
    """Measure the spread of crowding distances as a value in [0, 1).

    Uses tanh of the coefficient of variation (std / mean) of the finite
    crowding distances, with absent distances read as 0.0. Boundary
    candidates are ignored.

    Returns:
        0.0 when fewer than two finite distances remain or their mean is 0.0
        (including an all-boundary population).

    Examples:
        >>> population_diversity([Candidate(id=str(i), crowding_distance=0.5) for i in range(4)])
        0.0
    """
    distances = np.array(
        [distance_or_zero(c) for c in population if not is_boundary(c.crowding_distance)], dtype=np.float64
    )
    if len(distances) < 2:
        return 0.0

    mean = distances.mean()
    if mean == 0.0:
        return 0.0
    return float(np.tanh(distances.std() / mean))


def adaptive_tournament_size(
    diversity: float, min_size: int, max_size: int, diversity_threshold: float
) -> int:
    """Interpolate the tournament size from population diversity.

    At or below diversity_threshold the size is min_size. Above it the size
    grows linearly towards max_size, reached as diversity approaches 1.0:

        min_size + floor((max_size - min_size) * (diversity - threshold) / (1 - threshold))

    The result is clamped to [min_size, max_size] and is non-decreasing in
    diversity.

    Examples:
        >>> adaptive_tournament_size(0.2, 2, 7, 0.5)
        2
        >>> adaptive_tournament_size(0.8, 2, 7, 0.5)
        5
    """
    if diversity <= diversity_threshold:
        return min_size

    fraction = (diversity - diversity_threshold) / (1.0 - diversity_threshold)
    size = min_size + math.floor((max_size - min_size) * fraction)
    return max(min_size, min(size, max_size))
