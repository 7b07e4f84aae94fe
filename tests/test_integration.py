"""End-to-end tests running the selection stages the way a generational loop does."""

import logging

import numpy as np
import pytest

from gepa_selection import (
    AdaptiveSharingConfig,
    Candidate,
    EliteConfig,
    SharingConfig,
    TournamentConfig,
    adaptive_apply_sharing,
    calculate_niche_radius,
    environmental_selection,
    list_comparators,
    list_niche_radius_strategies,
    select,
    select_elites,
    select_elites_preserve_frontier,
)


def evaluate(rng: np.random.Generator, generation: int, n: int, parents: list[Candidate] | None = None):
    """Stand-in for evaluator and normalizer: random scores on a noisy trade-off curve."""
    population = []
    for i in range(n):
        acc = rng.uniform(0, 1)
        population.append(
            Candidate(
                id=f"g{generation}-{i}",
                prompt=f"prompt {generation}.{i}",
                generation=generation,
                parent_ids=(parents[i % len(parents)].id,) if parents else (),
                fitness=acc,
                objectives={"accuracy": acc, "latency_ms": 100 * acc},
                normalized_objectives={"accuracy": acc, "speed": float(np.clip(1 - acc + rng.normal(0, 0.1), 0, 1))},
            )
        )
    return population


class TestGenerationalLoop:
    """A few generations through every stage."""

    def test_three_generations(self, rng: np.random.Generator) -> None:
        population_size = 20
        population = environmental_selection(evaluate(rng, 0, population_size), population_size)

        for generation in range(1, 4):
            radius = calculate_niche_radius(population)
            shared = adaptive_apply_sharing(
                population, AdaptiveSharingConfig(sharing=SharingConfig(niche_radius=radius))
            ).population
            elites = select_elites(shared, EliteConfig(elite_ratio=0.1))
            parents = select(shared, population_size, TournamentConfig(tournament_size=2), rng)
            offspring = evaluate(rng, generation, population_size, parents)

            population = environmental_selection([*population, *offspring], population_size)

            assert len(elites) == 2
            assert len(parents) == population_size
            assert len(population) == population_size
            assert len({c.id for c in population}) == population_size
            assert min(c.pareto_rank for c in population) == 1

    def test_elites_survive_environmental_selection(self, rng: np.random.Generator) -> None:
        """Front 1 elites of the parents survive when offspring are all dominated."""
        parents = environmental_selection(evaluate(rng, 0, 10), 10)
        elites = select_elites_preserve_frontier(parents, EliteConfig(elite_count=3))
        dominated = [
            Candidate(id=f"weak{i}", generation=1, normalized_objectives={"accuracy": 0.0, "speed": 0.0})
            for i in range(10)
        ]

        survivors = environmental_selection([*parents, *dominated], 10)

        assert {c.id for c in elites} <= {c.id for c in survivors}

    def test_stages_log_at_debug(self, rng: np.random.Generator, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="gepa_selection"):
            population = environmental_selection(evaluate(rng, 0, 30), 10)
            adaptive_apply_sharing(population)
            select(population, 5, TournamentConfig(strategy="adaptive", max_tournament_size=4), rng)

        messages = " ".join(record.getMessage() for record in caplog.records)
        assert "fronts" in messages
        assert "fitness sharing" in messages
        assert "Adaptive tournament" in messages


class TestBuiltinRegistrations:
    """Importing the package registers the built-in strategies."""

    def test_comparators(self) -> None:
        assert {"pareto", "diversity"} <= set(list_comparators())

    def test_niche_radius_strategies(self) -> None:
        assert {"fixed", "population_based", "objective_range", "adaptive"} <= set(list_niche_radius_strategies())
