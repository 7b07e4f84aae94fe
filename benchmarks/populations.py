"""Candidate populations derived from the ZDT test suite.

The ZDT (Zitzler-Deb-Thiele) problems have two minimized objectives with
known Pareto fronts (convex, concave and discontinuous). Sampling decision
vectors and normalizing the resulting objectives into [0, 1], higher is
better, gives realistic multi-front populations for the selection engine.

References:
    Zitzler, E., Deb, K., & Thiele, L. (2000). Comparison of multiobjective
    evolutionary algorithms: Empirical results. Evolutionary computation, 8(2), 173-195.
"""

import numpy as np
from pymoo.problems import get_problem

from gepa_selection import Candidate

N_VARS: int = 30
PROBLEMS: tuple[str, ...] = ("zdt1", "zdt2", "zdt3")
OBJECTIVE_NAMES: tuple[str, str] = ("quality", "efficiency")


def evaluate(problem_name: str, x: np.ndarray) -> np.ndarray:
    """Evaluate a batch of decision vectors, shape (n, N_VARS), on a ZDT problem.

    Returns:
        Minimized objectives, shape (n, 2).
    """
    return get_problem(problem_name, n_var=N_VARS).evaluate(x)


def normalize(minimized: np.ndarray) -> np.ndarray:
    """Min-max scale minimized objectives into [0, 1] where higher is better."""
    lo = minimized.min(axis=0)
    hi = minimized.max(axis=0)
    span = np.where(hi > lo, hi - lo, 1.0)
    return (hi - minimized) / span


def sample_population(problem_name: str, n: int, rng: np.random.Generator, generation: int = 0) -> list[Candidate]:
    """Sample n evaluated and normalized candidates for a ZDT problem.

    Half of the decision vectors are pulled towards the Pareto set so that
    the population spans both near-optimal and clearly dominated fronts.

    Args:
        problem_name: One of PROBLEMS.
        n: Population size.
        rng: Random number generator.
        generation: Generation stamped on every candidate.

    Returns:
        Candidates with raw and normalized objectives set.
    """
    x = rng.uniform(0.0, 1.0, size=(n, N_VARS))
    x[: n // 2, 1:] *= rng.uniform(0.0, 0.1, size=(n // 2, 1))

    minimized = evaluate(problem_name, x)
    normalized = normalize(minimized)

    return [
        Candidate(
            id=f"{problem_name}-{generation}-{i}",
            generation=generation,
            objectives=dict(zip(OBJECTIVE_NAMES, minimized[i], strict=True)),
            normalized_objectives=dict(zip(OBJECTIVE_NAMES, normalized[i], strict=True)),
        )
        for i in range(n)
    ]
