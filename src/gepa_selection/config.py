"""Per-operation configuration for the selection engine.

Each operation takes one frozen configuration dataclass with named fields and
documented defaults. Values that can be checked without a population are
validated on construction; population-dependent limits (e.g. tournament size
against population size) are checked at the top of the operation itself.

Example:
    >>> from gepa_selection.config import TournamentConfig
    >>> config = TournamentConfig(strategy="adaptive", min_tournament_size=2, max_tournament_size=5)
    >>> TournamentConfig(tournament_size=1)
    Traceback (most recent call last):
        ...
    gepa_selection.errors.InvalidOptionError: invalid tournament_size=1: must be at least 2
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from gepa_selection.errors import InvalidOptionError

DiversityMetric = Literal["crowding", "pairwise_distance"]

DEFAULT_NICHE_RADIUS = 0.1
DEFAULT_SHARING_ALPHA = 1.0
DEFAULT_SHARING_DIVERSITY_THRESHOLD = 0.3
DEFAULT_ELITE_RATIO = 0.15
DEFAULT_SIMILARITY_THRESHOLD = 0.01


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise InvalidOptionError(name, value, "must be positive")


def _require_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise InvalidOptionError(name, value, "must be within [0, 1]")


@dataclass(frozen=True)
class SharingConfig:
    """Options for apply_sharing and niche_count.

    Attributes:
        niche_radius: Distance beyond which two candidates do not share fitness. Default 0.1.
        sharing_alpha: Slope of the sharing function. Default 1.0 (linear).
        preserve_raw_fitness: Record raw fitness and niche count in metadata. Default True.
    """

    niche_radius: float = DEFAULT_NICHE_RADIUS
    sharing_alpha: float = DEFAULT_SHARING_ALPHA
    preserve_raw_fitness: bool = True

    def __post_init__(self) -> None:
        _require_positive("niche_radius", self.niche_radius)
        _require_positive("sharing_alpha", self.sharing_alpha)


@dataclass(frozen=True)
class NicheRadiusConfig:
    """Options for calculate_niche_radius.

    Attributes:
        strategy: Name of a registered radius strategy. Built-ins are 'fixed',
            'population_based', 'objective_range' (default) and 'adaptive'.
        radius: Radius returned by 'fixed', and for an empty population. Default 0.1.
        base_radius: Numerator of 'population_based' (base_radius / sqrt(n)). Default 0.3.
        fraction: Fraction of the unit-hypercube diagonal used by 'objective_range'. Default 0.1.
        adaptive_floor: Smallest radius 'adaptive' will return. Default 0.1.
        adaptive_scale: Multiplier applied to the mean pairwise distance by 'adaptive'. Default 0.5.
    """

    strategy: str = "objective_range"
    radius: float = DEFAULT_NICHE_RADIUS
    base_radius: float = 0.3
    fraction: float = 0.1
    adaptive_floor: float = DEFAULT_NICHE_RADIUS
    adaptive_scale: float = 0.5

    def __post_init__(self) -> None:
        if not self.strategy:
            raise InvalidOptionError("strategy", self.strategy, "must be a registered strategy name")
        for name in ("radius", "base_radius", "fraction", "adaptive_floor", "adaptive_scale"):
            _require_positive(name, getattr(self, name))


@dataclass(frozen=True)
class AdaptiveSharingConfig:
    """Options for adaptive_apply_sharing.

    Attributes:
        diversity_threshold: Sharing is applied only when diversity falls below this. Default 0.3.
        diversity_metric: 'crowding' (mean finite crowding distance, default) or
            'pairwise_distance' (mean pairwise distance over the hypercube diagonal).
        sharing: Options forwarded to apply_sharing when sharing is applied.
    """

    diversity_threshold: float = DEFAULT_SHARING_DIVERSITY_THRESHOLD
    diversity_metric: DiversityMetric = "crowding"
    sharing: SharingConfig = field(default_factory=SharingConfig)

    def __post_init__(self) -> None:
        if self.diversity_threshold < 0:
            raise InvalidOptionError("diversity_threshold", self.diversity_threshold, "must be non-negative")
        if self.diversity_metric not in ("crowding", "pairwise_distance"):
            raise InvalidOptionError(
                "diversity_metric", self.diversity_metric, "must be 'crowding' or 'pairwise_distance'"
            )


@dataclass(frozen=True)
class EliteConfig:
    """Options for the elite selectors.

    Attributes:
        elite_ratio: Fraction of the population kept by select_elites when
            elite_count is not given. Default 0.15.
        elite_count: Absolute number of elites. Overrides elite_ratio, and is
            required by select_elites_preserve_frontier and select_diverse_elites.
        min_elites: Lower bound on the number of elites from select_elites. Default 1.
        similarity_threshold: Objective-space distance an elite must exceed to every
            other elite in select_diverse_elites. Default 0.01.
    """

    elite_ratio: float = DEFAULT_ELITE_RATIO
    elite_count: int | None = None
    min_elites: int = 1
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD

    def __post_init__(self) -> None:
        _require_unit_interval("elite_ratio", self.elite_ratio)
        if self.elite_count is not None and self.elite_count < 1:
            raise InvalidOptionError("elite_count", self.elite_count, "must be at least 1")
        if self.min_elites < 0:
            raise InvalidOptionError("min_elites", self.min_elites, "must be non-negative")
        if self.similarity_threshold < 0:
            raise InvalidOptionError("similarity_threshold", self.similarity_threshold, "must be non-negative")


@dataclass(frozen=True)
class TournamentConfig:
    """Options for TournamentSelector.select.

    Attributes:
        strategy: 'pareto' (default), 'diversity', 'adaptive', or the name of any
            comparator registered in ComparatorRegistry.
        tournament_size: Competitors per tournament for fixed strategies. Default 3.
        min_tournament_size: Smallest adaptive tournament. Default 2.
        max_tournament_size: Largest adaptive tournament. Default 7.
        diversity_threshold: Diversity at or below which the adaptive tournament
            uses min_tournament_size. Default 0.5.
    """

    strategy: str = "pareto"
    tournament_size: int = 3
    min_tournament_size: int = 2
    max_tournament_size: int = 7
    diversity_threshold: float = 0.5

    def __post_init__(self) -> None:
        if not self.strategy:
            raise InvalidOptionError("strategy", self.strategy, "must be a strategy name")
        if self.tournament_size < 2:
            raise InvalidOptionError("tournament_size", self.tournament_size, "must be at least 2")
        if self.min_tournament_size < 2:
            raise InvalidOptionError("min_tournament_size", self.min_tournament_size, "must be at least 2")
        if self.min_tournament_size > self.max_tournament_size:
            raise InvalidOptionError(
                "min_tournament_size",
                self.min_tournament_size,
                f"cannot exceed max_tournament_size ({self.max_tournament_size})",
            )
        _require_unit_interval("diversity_threshold", self.diversity_threshold)

    @property
    def is_adaptive(self) -> bool:
        return self.strategy == "adaptive"
