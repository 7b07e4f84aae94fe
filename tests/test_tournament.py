"""Tests for tournament selection and comparators."""

import itertools
from collections.abc import Callable

import numpy as np
import pytest

from gepa_selection import (
    BOUNDARY,
    Candidate,
    ComparatorRegistry,
    EmptyPopulationError,
    InvalidOptionError,
    MissingRankingError,
    TournamentConfig,
    adaptive_tournament_size,
    diversity_compare,
    pareto_compare,
    population_diversity,
    run_tournament,
    select,
)


@pytest.fixture
def population_of_5() -> list[Candidate]:
    """Five ranked candidates with distinct (rank, distance) pairs."""
    return [
        Candidate(id="best", pareto_rank=1, crowding_distance=BOUNDARY),
        Candidate(id="good", pareto_rank=1, crowding_distance=0.8),
        Candidate(id="mid", pareto_rank=2, crowding_distance=BOUNDARY),
        Candidate(id="poor", pareto_rank=2, crowding_distance=0.3),
        Candidate(id="worst", pareto_rank=3, crowding_distance=0.1),
    ]


class TestParetoCompare:
    """Tests for pareto_compare."""

    def test_lower_rank_wins(self) -> None:
        a = Candidate(id="a", pareto_rank=1, crowding_distance=0.0)
        b = Candidate(id="b", pareto_rank=2, crowding_distance=BOUNDARY)

        assert pareto_compare(a, b)
        assert not pareto_compare(b, a)

    def test_distance_breaks_rank_tie(self) -> None:
        a = Candidate(id="a", pareto_rank=1, crowding_distance=0.9)
        b = Candidate(id="b", pareto_rank=1, crowding_distance=0.2)

        assert pareto_compare(a, b)
        assert not pareto_compare(b, a)

    def test_boundary_tie_is_non_decision(self) -> None:
        a = Candidate(id="a", pareto_rank=1, crowding_distance=BOUNDARY)
        b = Candidate(id="b", pareto_rank=1, crowding_distance=BOUNDARY)

        assert not pareto_compare(a, b)
        assert not pareto_compare(b, a)

    def test_absent_rank_always_loses(self) -> None:
        ranked = Candidate(id="a", pareto_rank=50)
        unranked = Candidate(id="b", crowding_distance=BOUNDARY)

        assert pareto_compare(ranked, unranked)
        assert not pareto_compare(unranked, ranked)

    def test_absent_distance_is_zero(self) -> None:
        a = Candidate(id="a", pareto_rank=1, crowding_distance=0.01)
        b = Candidate(id="b", pareto_rank=1)

        assert pareto_compare(a, b)


class TestDiversityCompare:
    """Tests for diversity_compare."""

    def test_larger_distance_wins_over_rank(self) -> None:
        a = Candidate(id="a", pareto_rank=3, crowding_distance=BOUNDARY)
        b = Candidate(id="b", pareto_rank=1, crowding_distance=0.5)

        assert diversity_compare(a, b)
        assert not diversity_compare(b, a)

    def test_rank_breaks_distance_tie(self) -> None:
        a = Candidate(id="a", pareto_rank=1, crowding_distance=BOUNDARY)
        b = Candidate(id="b", pareto_rank=2, crowding_distance=BOUNDARY)

        assert diversity_compare(a, b)
        assert not diversity_compare(b, a)


class TestComparatorConsistency:
    """Both comparators are strict orders over a fixed snapshot."""

    @pytest.mark.parametrize("comparator", [pareto_compare, diversity_compare])
    def test_irreflexive_asymmetric_transitive(self, comparator, random_population: list[Candidate]) -> None:
        sample = random_population[:12]

        for a in sample:
            assert not comparator(a, a)
        for a, b in itertools.permutations(sample, 2):
            if comparator(a, b):
                assert not comparator(b, a)
        for a, b, c in itertools.permutations(sample, 3):
            if comparator(a, b) and comparator(b, c):
                assert comparator(a, c)


class TestRunTournament:
    """Tests for run_tournament."""

    def test_full_tournament_returns_best(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        """When everyone competes the overall best always wins."""
        for _ in range(10):
            assert run_tournament(population_of_5, 5, pareto_compare, rng).id == "best"

    def test_diversity_comparator(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        """Boundary rank-1 beats boundary rank-2 under diversity comparison."""
        assert run_tournament(population_of_5, 5, diversity_compare, rng).id == "best"

    def test_winner_is_from_population(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        winner = run_tournament(population_of_5, 2, pareto_compare, rng)

        assert winner in population_of_5

    def test_worst_never_wins_a_pair(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        """Competitors are distinct, so the worst candidate always meets someone better."""
        for _ in range(50):
            assert run_tournament(population_of_5, 2, pareto_compare, rng).id != "worst"


class TestSelect:
    """Tests for select."""

    def test_scenario_count_exceeds_population(
        self, population_of_5: list[Candidate], rng: np.random.Generator
    ) -> None:
        """Ten winners can be drawn from five candidates."""
        parents = select(population_of_5, 10, TournamentConfig(tournament_size=2), rng=rng)

        assert len(parents) == 10
        assert all(p in population_of_5 for p in parents)

    def test_default_config(self, random_population: list[Candidate], rng: np.random.Generator) -> None:
        assert len(select(random_population, 7, rng=rng)) == 7

    def test_selection_pressure(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        """Better candidates win more often than worse ones."""
        parents = select(population_of_5, 500, TournamentConfig(tournament_size=3), rng=rng)
        wins = {c.id: 0 for c in population_of_5}
        for p in parents:
            wins[p.id] += 1

        assert wins["best"] > wins["good"] > wins["mid"]
        assert wins["worst"] == 0

    def test_reproducible_with_seed(self, random_population: list[Candidate]) -> None:
        first = select(random_population, 20, rng=np.random.default_rng(7))
        second = select(random_population, 20, rng=np.random.default_rng(7))

        assert [c.id for c in first] == [c.id for c in second]

    def test_diversity_strategy(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        config = TournamentConfig(strategy="diversity", tournament_size=5)

        assert {c.id for c in select(population_of_5, 5, config, rng)} == {"best"}

    def test_registered_strategy(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        """User comparators plug in by name."""
        saved = ComparatorRegistry._registry.copy()
        try:
            ComparatorRegistry.register("worst_rank", lambda: lambda a, b: a.pareto_rank > b.pareto_rank)
            parents = select(population_of_5, 3, TournamentConfig(strategy="worst_rank", tournament_size=5), rng)
        finally:
            ComparatorRegistry._registry = saved

        assert {c.id for c in parents} == {"worst"}

    def test_adaptive_strategy(self, random_population: list[Candidate], rng: np.random.Generator) -> None:
        config = TournamentConfig(strategy="adaptive", min_tournament_size=2, max_tournament_size=5)

        assert len(select(random_population, 12, config, rng)) == 12

    def test_unknown_strategy_raises(self, population_of_5: list[Candidate], rng: np.random.Generator) -> None:
        with pytest.raises(InvalidOptionError, match="invalid strategy='random'"):
            select(population_of_5, 3, TournamentConfig(strategy="random"), rng)

    def test_empty_population_raises(self, rng: np.random.Generator) -> None:
        with pytest.raises(EmptyPopulationError, match="requires a non-empty population"):
            select([], 3, rng=rng)

    @pytest.mark.parametrize("count", [0, -2])
    def test_non_positive_count_raises(
        self, population_of_5: list[Candidate], rng: np.random.Generator, count: int
    ) -> None:
        with pytest.raises(InvalidOptionError, match=f"invalid count={count}: must be positive"):
            select(population_of_5, count, rng=rng)

    def test_tournament_larger_than_population_raises(
        self, population_of_5: list[Candidate], rng: np.random.Generator
    ) -> None:
        with pytest.raises(InvalidOptionError, match=r"cannot exceed population size \(5\)"):
            select(population_of_5, 3, TournamentConfig(tournament_size=6), rng)

    def test_adaptive_max_larger_than_population_raises(
        self, population_of_5: list[Candidate], rng: np.random.Generator
    ) -> None:
        config = TournamentConfig(strategy="adaptive", max_tournament_size=7)

        with pytest.raises(InvalidOptionError, match="invalid max_tournament_size=7"):
            select(population_of_5, 3, config, rng)

    def test_missing_ranking_raises(self, rng: np.random.Generator) -> None:
        population = [Candidate(id="a", pareto_rank=1, crowding_distance=1.0), Candidate(id="b", pareto_rank=1)]

        with pytest.raises(MissingRankingError, match="candidate 'b' has no crowding_distance"):
            select(population, 2, TournamentConfig(tournament_size=2), rng)


class TestPopulationDiversity:
    """Tests for population_diversity."""

    def test_uniform_distances_have_zero_diversity(self) -> None:
        population = [Candidate(id=str(i), crowding_distance=0.5) for i in range(4)]

        assert population_diversity(population) == 0.0

    def test_all_boundary_is_zero(self) -> None:
        population = [Candidate(id=str(i), crowding_distance=BOUNDARY) for i in range(4)]

        assert population_diversity(population) == 0.0

    def test_fewer_than_two_finite_is_zero(self) -> None:
        population = [Candidate(id="a", crowding_distance=BOUNDARY), Candidate(id="b", crowding_distance=0.4)]

        assert population_diversity(population) == 0.0

    def test_all_zero_distances(self) -> None:
        population = [Candidate(id=str(i), crowding_distance=0.0) for i in range(3)]

        assert population_diversity(population) == 0.0

    def test_tanh_of_coefficient_of_variation(self) -> None:
        """Distances 1 and 3: mean 2, std 1, diversity tanh(0.5)."""
        population = [
            Candidate(id="a", crowding_distance=1.0),
            Candidate(id="b", crowding_distance=3.0),
            Candidate(id="edge", crowding_distance=BOUNDARY),
        ]

        assert population_diversity(population) == pytest.approx(np.tanh(0.5))

    def test_absent_distance_is_zero(self) -> None:
        population = [Candidate(id="a"), Candidate(id="b", crowding_distance=2.0)]

        assert population_diversity(population) == pytest.approx(np.tanh(1.0))

    def test_bounded(self, random_population: list[Candidate]) -> None:
        assert 0.0 <= population_diversity(random_population) < 1.0


class TestAdaptiveTournamentSize:
    """Tests for adaptive_tournament_size."""

    @pytest.mark.parametrize(
        ("diversity", "expected"),
        [(0.0, 2), (0.5, 2), (0.65, 3), (0.8, 5), (0.99, 6), (1.0, 7)],
    )
    def test_curve(self, diversity: float, expected: int) -> None:
        assert adaptive_tournament_size(diversity, 2, 7, 0.5) == expected

    def test_monotonic_and_bounded(self) -> None:
        sizes = [adaptive_tournament_size(d, 3, 9, 0.3) for d in np.linspace(0, 1, 101)]

        assert sizes == sorted(sizes)
        assert min(sizes) >= 3
        assert max(sizes) <= 9

    def test_threshold_one_always_min(self) -> None:
        assert adaptive_tournament_size(0.999, 2, 7, 1.0) == 2

    def test_min_equals_max(self) -> None:
        assert adaptive_tournament_size(0.9, 4, 4, 0.5) == 4

    def test_ranked_population_uses_curve(self, layered_population: list[Candidate], rank_and_crowd: Callable) -> None:
        """Layered fronts are all boundary or a single finite value, so diversity is minimal."""
        population = rank_and_crowd(layered_population)

        assert adaptive_tournament_size(population_diversity(population), 2, 7, 0.5) == 2
