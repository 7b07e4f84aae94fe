"""Candidate data structures for GEPA selection.

This module provides the value objects that flow through every selection stage:

- Candidate: an immutable prompt variant with its objective scores and ranking annotations
- CandidateMetadata: a typed annotation record written independently by later stages
- BOUNDARY: the crowding-distance sentinel for extremal candidates

Both classes are frozen dataclasses. Stages never mutate a candidate; they build a
new one with dataclasses.replace and carry the unchanged fields forward.
Hashing skips the score mappings, so candidates can be collected in sets and
used as dict keys while equality still compares every field.

The boundary sentinel is math.inf. Infinity compares above every finite distance,
inf + inf stays inf, and -inf sorts first in ascending keys, so no comparison in
this package can produce NaN. Serialisers that cannot encode infinity must map
BOUNDARY explicitly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

import numpy as np

from gepa_selection.errors import MissingRankingError

BOUNDARY: float = math.inf


def is_boundary(distance: float | None) -> bool:
    """Return True if distance is the boundary sentinel."""
    return distance is not None and math.isinf(distance)


def _frozen_scores(name: str, scores: Mapping[str, float]) -> Mapping[str, float]:
    if not isinstance(scores, Mapping):
        raise TypeError(f"{name} must be a mapping, got {type(scores).__name__}")
    copied: dict[str, float] = {}
    for key, value in scores.items():
        if not isinstance(key, str):
            raise TypeError(f"{name} keys must be strings, got {type(key).__name__}")
        value = float(value)
        if math.isnan(value):
            raise ValueError(f"{name}[{key!r}] is NaN")
        copied[key] = value
    return MappingProxyType(copied)


@dataclass(frozen=True)
class CandidateMetadata:
    """Annotations attached to a candidate by later pipeline stages.

    Attributes:
        raw_fitness: Fitness before fitness sharing discounted it, or None.
        niche_count: Niche count computed by fitness sharing, or None.
        extra: Read-only mapping for caller-owned annotations (e.g. mutation notes).
    """

    raw_fitness: float | None = None
    niche_count: float | None = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.extra, Mapping):
            raise TypeError(f"extra must be a mapping, got {type(self.extra).__name__}")
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))


@dataclass(frozen=True)
class Candidate:
    """Immutable prompt candidate carrying multi-objective scores.

    Attributes:
        id: Stable unique identifier, unchanged across stages.
        prompt: Opaque payload; never interpreted by the selection engine.
        generation: Evolutionary cycle that produced the candidate.
        created_at: Creation timestamp.
        parent_ids: Ids of the candidates this one was derived from.
        fitness: Scalar fitness, or None until computed. Fitness sharing overwrites it.
        objectives: Raw objective scores keyed by objective name.
        normalized_objectives: Objective scores in [0, 1], higher is better.
        pareto_rank: Pareto front index (1 = best front), or None if not sorted.
        crowding_distance: Non-negative crowding distance or BOUNDARY, or None if not computed.
        metadata: Annotations written by later stages.

    Example:
        >>> c = Candidate(id="c1", prompt="Think step by step.", normalized_objectives={"accuracy": 0.9})
        >>> c.normalized_objectives["accuracy"]
        0.9
        >>> import dataclasses
        >>> ranked = dataclasses.replace(c, pareto_rank=1)
        >>> c.pareto_rank is None
        True
    """

    id: str
    prompt: str = ""
    generation: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    parent_ids: tuple[str, ...] = ()
    fitness: float | None = None
    objectives: Mapping[str, float] = field(default_factory=dict, hash=False)
    normalized_objectives: Mapping[str, float] = field(default_factory=dict, hash=False)
    pareto_rank: int | None = None
    crowding_distance: float | None = None
    metadata: CandidateMetadata = field(default_factory=CandidateMetadata)

    def __post_init__(self) -> None:
        """Validate fields and freeze the score mappings.

        Raises:
            TypeError: If a field has the wrong container type.
            ValueError: If a field is out of range.
        """
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"id must be a non-empty string, got {self.id!r}")
        if self.generation < 0:
            raise ValueError(f"generation must be non-negative, got {self.generation}")

        object.__setattr__(self, "parent_ids", tuple(self.parent_ids))
        object.__setattr__(self, "objectives", _frozen_scores("objectives", self.objectives))
        object.__setattr__(
            self, "normalized_objectives", _frozen_scores("normalized_objectives", self.normalized_objectives)
        )

        if self.fitness is not None:
            object.__setattr__(self, "fitness", float(self.fitness))

        if self.pareto_rank is not None:
            if not isinstance(self.pareto_rank, (int, np.integer)) or isinstance(self.pareto_rank, bool):
                raise TypeError(f"pareto_rank must be an integer, got {type(self.pareto_rank).__name__}")
            if self.pareto_rank < 1:
                raise ValueError(f"pareto_rank must be >= 1, got {self.pareto_rank}")
            object.__setattr__(self, "pareto_rank", int(self.pareto_rank))

        if self.crowding_distance is not None:
            distance = float(self.crowding_distance)
            if math.isnan(distance) or distance < 0:
                raise ValueError(f"crowding_distance must be non-negative or BOUNDARY, got {self.crowding_distance}")
            object.__setattr__(self, "crowding_distance", distance)

        if not isinstance(self.metadata, CandidateMetadata):
            raise TypeError(f"metadata must be CandidateMetadata, got {type(self.metadata).__name__}")

    @property
    def is_boundary(self) -> bool:
        """Return True if the candidate carries the boundary crowding distance."""
        return is_boundary(self.crowding_distance)


def objective_keys(population: Iterable[Candidate]) -> list[str]:
    """Return the sorted union of normalized-objective names across a population."""
    keys: set[str] = set()
    for candidate in population:
        keys.update(candidate.normalized_objectives)
    return sorted(keys)


def objective_matrix(population: Sequence[Candidate], keys: Sequence[str] | None = None) -> np.ndarray:
    """Stack normalized objectives into a (n, n_obj) array.

    Missing keys are filled with 0.0, matching the comparison convention used
    throughout the package.

    Args:
        population: Candidates to stack.
        keys: Column order. Defaults to objective_keys(population).

    Returns:
        Float array of shape (len(population), len(keys)).

    Example:
        >>> a = Candidate(id="a", normalized_objectives={"acc": 0.9, "lat": 0.1})
        >>> b = Candidate(id="b", normalized_objectives={"acc": 0.5})
        >>> objective_matrix([a, b])
        array([[0.9, 0.1],
               [0.5, 0. ]])
    """
    if keys is None:
        keys = objective_keys(population)
    matrix = np.zeros((len(population), len(keys)), dtype=np.float64)
    for i, candidate in enumerate(population):
        scores = candidate.normalized_objectives
        for j, key in enumerate(keys):
            matrix[i, j] = scores.get(key, 0.0)
    return matrix


def rank_or_worst(candidate: Candidate) -> float:
    """Pareto rank, with an absent rank treated as the worst possible."""
    return math.inf if candidate.pareto_rank is None else candidate.pareto_rank


def distance_or_zero(candidate: Candidate) -> float:
    """Crowding distance, with an absent distance treated as 0.0."""
    return 0.0 if candidate.crowding_distance is None else candidate.crowding_distance


def selection_key(candidate: Candidate) -> tuple[float, float]:
    """Ascending sort key: better rank first, then larger crowding distance (BOUNDARY first)."""
    return (rank_or_worst(candidate), -distance_or_zero(candidate))


def require_ranking(population: Iterable[Candidate], *, crowding: bool = True) -> None:
    """Fail fast on the first candidate missing ranking metadata.

    Args:
        population: Candidates to check.
        crowding: Also require crowding_distance, not just pareto_rank.

    Raises:
        MissingRankingError: Naming the first offending candidate and field.
    """
    for candidate in population:
        if candidate.pareto_rank is None:
            raise MissingRankingError(candidate.id, "pareto_rank")
        if crowding and candidate.crowding_distance is None:
            raise MissingRankingError(candidate.id, "crowding_distance")
