"""Niche-based fitness sharing.

Fitness sharing discounts a candidate's fitness by how crowded its
neighbourhood is in normalized objective space, so that densely populated
regions stop dominating parent selection:

    shared_fitness = raw_fitness / niche_count
    niche_count    = sum(sh(d(candidate, other)) for other in population)
    sh(d)          = max(0, 1 - (d / niche_radius) ** sharing_alpha)

The niche radius can be fixed or derived from the population by one of the
strategies registered in NicheRadiusRegistry:

- fixed: a constant radius
- population_based: base_radius / sqrt(n), shrinking as the population grows
- objective_range: a fraction of the unit-hypercube diagonal
- adaptive: half the mean pairwise distance, never below a floor

Example:
    >>> radius = calculate_niche_radius(population, NicheRadiusConfig(strategy="adaptive"))
    >>> result = adaptive_apply_sharing(population, AdaptiveSharingConfig(sharing=SharingConfig(niche_radius=radius)))
    >>> result.applied
    True
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from gepa_selection.candidate import Candidate, is_boundary, objective_keys, objective_matrix
from gepa_selection.config import (
    AdaptiveSharingConfig,
    DiversityMetric,
    NicheRadiusConfig,
    SharingConfig,
)
from gepa_selection.errors import InvalidOptionError
from gepa_selection.primitives import distances_to, mean_pairwise_distance, pairwise_distances, sharing_kernel
from gepa_selection.protocols import NicheRadiusStrategy
from gepa_selection.registry import NicheRadiusRegistry
from gepa_selection.results import SharingOutcome, SharingResult

logger = logging.getLogger(__name__)


def sharing_function(distance: float, niche_radius: float, sharing_alpha: float) -> float:
    """Evaluate sh(d) = max(0, 1 - (d / niche_radius) ** sharing_alpha).

    Args:
        distance: Non-negative distance between two candidates.
        niche_radius: Positive niche radius.
        sharing_alpha: Positive slope; 1.0 is linear, larger values flatten the kernel near 0.

    Returns:
        Sharing weight in [0, 1]: 1.0 at distance 0, 0.0 at or beyond the radius.

    Examples:
        >>> sharing_function(0.0, 0.1, 1.0)
        1.0
        >>> sharing_function(0.05, 0.1, 1.0)
        0.5
        >>> sharing_function(0.2, 0.1, 1.0)
        0.0
    """
    return float(sharing_kernel(np.asarray(distance, dtype=np.float64), niche_radius, sharing_alpha))


def niche_count(candidate: Candidate, population: Sequence[Candidate], config: SharingConfig | None = None) -> float:
    """Count how crowded the neighbourhood of one candidate is.

    Every member of the population contributes sh(d), where d is the Euclidean
    distance between normalized objective vectors. A candidate that is itself
    a member contributes sh(0) = 1.0 through that sum; one measured against a
    population it does not belong to gets the same 1.0 added explicitly.
    Repeated members each contribute, so N copies of one point count N.

    Args:
        candidate: The candidate whose niche is measured.
        population: Population to measure against; may or may not contain candidate.
        config: Niche radius and sharing alpha. Defaults to SharingConfig().

    Returns:
        Niche count, at least 1.0.
    """
    config = config or SharingConfig()
    own = 0.0 if any(other is candidate for other in population) else 1.0
    if not population:
        return own

    keys = objective_keys([candidate, *population])
    point = objective_matrix([candidate], keys)[0]
    distances = distances_to(point, objective_matrix(population, keys))
    return own + float(sharing_kernel(distances, config.niche_radius, config.sharing_alpha).sum())


def niche_counts(population: Sequence[Candidate], config: SharingConfig | None = None) -> np.ndarray:
    """Compute the niche count of every candidate at once.

    Equivalent to [niche_count(c, population, config) for c in population].

    Returns:
        Float array of shape (len(population),).
    """
    config = config or SharingConfig()
    if not population:
        return np.array([], dtype=np.float64)

    # The zero diagonal contributes each member's own 1.0.
    shares = sharing_kernel(pairwise_distances(objective_matrix(population)), config.niche_radius, config.sharing_alpha)
    return shares.sum(axis=1)


def apply_sharing(population: Sequence[Candidate], config: SharingConfig | None = None) -> list[Candidate]:
    """Replace each candidate's fitness with its shared fitness.

    Args:
        population: Candidates with fitness; an absent fitness counts as 0.0.
        config: Sharing options. Defaults to SharingConfig().

    Returns:
        New candidate values in input order with fitness = raw / niche_count.
        When config.preserve_raw_fitness is set, metadata.raw_fitness and
        metadata.niche_count record the inputs of the discount.

    Example:
        >>> twins = [Candidate(id=i, fitness=10.0, normalized_objectives={"acc": 0.5, "lat": 0.5}) for i in "ab"]
        >>> [c.fitness for c in apply_sharing(twins)]
        [5.0, 5.0]
    """
    config = config or SharingConfig()
    counts = niche_counts(population, config)

    shared: list[Candidate] = []
    for candidate, count in zip(population, counts, strict=True):
        raw = 0.0 if candidate.fitness is None else candidate.fitness
        changes: dict[str, Any] = {"fitness": raw / float(count)}
        if config.preserve_raw_fitness:
            changes["metadata"] = dataclasses.replace(candidate.metadata, raw_fitness=raw, niche_count=float(count))
        shared.append(dataclasses.replace(candidate, **changes))
    return shared


def fixed_radius(radius: float = 0.1) -> NicheRadiusStrategy:
    """Create a strategy that always returns radius."""

    def strategy(population: Sequence[Candidate]) -> float:
        return radius

    return strategy


def population_based_radius(base_radius: float = 0.3) -> NicheRadiusStrategy:
    """Create a strategy returning base_radius / sqrt(population size).

    Larger populations pack the objective space more densely, so the radius
    shrinks to keep the expected number of neighbours roughly constant.
    """

    def strategy(population: Sequence[Candidate]) -> float:
        return base_radius / math.sqrt(len(population))

    return strategy


def objective_range_radius(fraction: float = 0.1) -> NicheRadiusStrategy:
    """Create a strategy returning fraction of the unit-hypercube diagonal.

    With objectives normalized to [0, 1] the largest possible distance is
    sqrt(number_of_objectives). A population without objectives is treated
    as one-dimensional.
    """

    def strategy(population: Sequence[Candidate]) -> float:
        n_obj = max(len(objective_keys(population)), 1)
        return fraction * math.sqrt(n_obj)

    return strategy


def adaptive_radius(floor: float = 0.1, scale: float = 0.5) -> NicheRadiusStrategy:
    """Create a strategy proportional to the typical spacing of the population.

    Returns max(floor, scale * mean pairwise distance), so a converged
    population never drives the radius towards zero.
    """

    def strategy(population: Sequence[Candidate]) -> float:
        return max(floor, scale * mean_pairwise_distance(objective_matrix(population)))

    return strategy


# Maps each built-in strategy to the NicheRadiusConfig fields its factory takes.
_STRATEGY_OPTIONS: dict[str, Callable[[NicheRadiusConfig], dict[str, float]]] = {
    "fixed": lambda config: {"radius": config.radius},
    "population_based": lambda config: {"base_radius": config.base_radius},
    "objective_range": lambda config: {"fraction": config.fraction},
    "adaptive": lambda config: {"floor": config.adaptive_floor, "scale": config.adaptive_scale},
}

NicheRadiusRegistry.register("fixed", fixed_radius)
NicheRadiusRegistry.register("population_based", population_based_radius)
NicheRadiusRegistry.register("objective_range", objective_range_radius)
NicheRadiusRegistry.register("adaptive", adaptive_radius)


def calculate_niche_radius(population: Sequence[Candidate], config: NicheRadiusConfig | None = None) -> float:
    """Derive a niche radius for the population.

    The strategy named by config.strategy is looked up in NicheRadiusRegistry.
    Built-in strategies receive their options from config; strategies
    registered by callers are created with their factory defaults.

    Args:
        population: Candidates with normalized_objectives.
        config: Strategy and options. Defaults to NicheRadiusConfig()
            ('objective_range' with fraction 0.1).

    Returns:
        The niche radius, or config.radius for an empty population.

    Raises:
        InvalidOptionError: If config.strategy is not registered.
    """
    config = config or NicheRadiusConfig()
    if not population:
        return config.radius

    options = _STRATEGY_OPTIONS.get(config.strategy)
    try:
        strategy = NicheRadiusRegistry.get(config.strategy, **(options(config) if options else {}))
    except KeyError as err:
        raise InvalidOptionError("strategy", config.strategy, err.args[0]) from err

    radius = float(strategy(population))
    logger.debug("Niche radius %.4f from strategy '%s' (n=%d)", radius, config.strategy, len(population))
    return radius


def sharing_diversity(population: Sequence[Candidate], metric: DiversityMetric = "crowding") -> float:
    """Score how spread out a population is, for deciding whether to share fitness.

    Args:
        population: Candidates to score.
        metric: 'crowding' averages the finite crowding distances (absent
            distances count as 0.0; 0.0 when no distance is finite).
            'pairwise_distance' averages the distance between every pair of
            candidates and divides by the unit-hypercube diagonal.

    Returns:
        Non-negative diversity score.

    Raises:
        InvalidOptionError: If metric is not recognised.
    """
    if metric == "crowding":
        finite = [
            0.0 if c.crowding_distance is None else c.crowding_distance
            for c in population
            if not is_boundary(c.crowding_distance)
        ]
        return float(np.mean(finite)) if finite else 0.0

    if metric == "pairwise_distance":
        keys = objective_keys(population)
        if not keys:
            return 0.0
        return mean_pairwise_distance(objective_matrix(population, keys)) / math.sqrt(len(keys))

    raise InvalidOptionError("diversity_metric", metric, "must be 'crowding' or 'pairwise_distance'")


def adaptive_apply_sharing(
    population: Sequence[Candidate], config: AdaptiveSharingConfig | None = None
) -> SharingResult:
    """Apply fitness sharing only when the population has lost diversity.

    Args:
        population: Candidates to share fitness across.
        config: Diversity threshold, diversity metric and the sharing options
            used when sharing is applied. Defaults to AdaptiveSharingConfig().

    Returns:
        SharingResult with outcome APPLIED and the shared population when the
        diversity score is below config.diversity_threshold, otherwise outcome
        SKIPPED and the population unchanged. An empty population is SKIPPED.
    """
    config = config or AdaptiveSharingConfig()
    if not population:
        return SharingResult(population=(), outcome=SharingOutcome.SKIPPED, diversity=0.0)

    diversity = sharing_diversity(population, config.diversity_metric)
    if diversity < config.diversity_threshold:
        logger.debug(
            "Applying fitness sharing: %s diversity %.4f < %.4f",
            config.diversity_metric,
            diversity,
            config.diversity_threshold,
        )
        return SharingResult(
            population=tuple(apply_sharing(population, config.sharing)),
            outcome=SharingOutcome.APPLIED,
            diversity=diversity,
        )

    logger.debug(
        "Skipping fitness sharing: %s diversity %.4f >= %.4f",
        config.diversity_metric,
        diversity,
        config.diversity_threshold,
    )
    return SharingResult(population=tuple(population), outcome=SharingOutcome.SKIPPED, diversity=diversity)
