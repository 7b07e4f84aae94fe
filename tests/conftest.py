"""Shared test fixtures for gepa-selection tests.

This module provides common fixtures used across test modules:
- rng: Seeded random number generator
- make_candidate: Factory for candidates with two normalized objectives
- rank_and_crowd: Annotates a population with ranks and crowding distances
- tradeoff_front: Scenario A, three mutually non-dominated candidates
- layered_population: Three fronts with a known structure
- random_population: Larger random population, ranked and crowding-annotated
"""

from collections.abc import Callable

import numpy as np
import pytest

from gepa_selection import Candidate, assign_crowding_distances, assign_pareto_ranks


def _candidate(cid: str, acc: float, lat: float, **fields) -> Candidate:
    """Build a candidate with 'acc' and 'lat' normalized objectives."""
    return Candidate(id=cid, normalized_objectives={"acc": acc, "lat": lat}, **fields)


def _rank_and_crowd(population: list[Candidate]) -> list[Candidate]:
    """Annotate a population with Pareto ranks and crowding distances."""
    return assign_crowding_distances(assign_pareto_ranks(population))


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for deterministic tests."""
    return np.random.default_rng(42)


@pytest.fixture
def make_candidate() -> Callable[..., Candidate]:
    """Factory fixture for two-objective candidates."""
    return _candidate


@pytest.fixture
def rank_and_crowd() -> Callable[[list[Candidate]], list[Candidate]]:
    """Annotate a population with Pareto ranks and crowding distances."""
    return _rank_and_crowd


@pytest.fixture
def tradeoff_front() -> list[Candidate]:
    """Three candidates trading accuracy against latency (one front)."""
    return [
        _candidate("a", 0.9, 0.1),
        _candidate("b", 0.5, 0.5),
        _candidate("c", 0.1, 0.9),
    ]


@pytest.fixture
def layered_population() -> list[Candidate]:
    """Seven candidates forming three fronts.

    Front 1: f1a, f1b, f1c
    Front 2: f2a, f2b (each dominated by a front 1 member)
    Front 3: f3a, f3b (dominated by front 2)
    """
    return [
        _candidate("f3a", 0.2, 0.2),
        _candidate("f1a", 0.9, 0.3),
        _candidate("f2a", 0.6, 0.3),
        _candidate("f1b", 0.6, 0.6),
        _candidate("f2b", 0.3, 0.6),
        _candidate("f1c", 0.3, 0.9),
        _candidate("f3b", 0.1, 0.3),
    ]


@pytest.fixture
def random_population(rng: np.random.Generator) -> list[Candidate]:
    """Forty random candidates with three objectives, ranked and crowding-annotated."""
    scores = rng.uniform(0, 1, size=(40, 3))
    population = [
        Candidate(
            id=f"r{i}",
            generation=i % 4,
            fitness=float(row.sum()),
            normalized_objectives={"acc": row[0], "lat": row[1], "cost": row[2]},
        )
        for i, row in enumerate(scores)
    ]
    return _rank_and_crowd(population)
