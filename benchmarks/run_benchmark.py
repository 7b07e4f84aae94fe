"""Benchmark runner for the selection engine on ZDT-derived populations.

For every ZDT problem and seed this script samples a combined parent and
offspring population and measures:

- agreement of fast_non_dominated_sort with pymoo's NonDominatedSorting
- sorting time of both implementations
- hypervolume of environmental_selection survivors versus random truncation

Usage:
    uv run python benchmarks/run_benchmark.py
"""

import json
import logging
import sys
import time
from collections import defaultdict
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import numpy as np
from pymoo.util.nds.non_dominated_sorting import NonDominatedSorting

from benchmarks.metrics import hypervolume
from benchmarks.populations import PROBLEMS, sample_population
from gepa_selection import assign_pareto_ranks, environmental_selection
from gepa_selection.candidate import objective_matrix

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


# Experiment parameters
POP_SIZE = 100
N_RUNS = 10
SEEDS = list(range(N_RUNS))


def pymoo_ranks(normalized: np.ndarray) -> np.ndarray:
    """Rank maximized objectives with pymoo (which minimizes), 1-based."""
    ranks = np.zeros(len(normalized), dtype=np.int64)
    for k, front in enumerate(NonDominatedSorting().do(-normalized)):
        ranks[front] = k + 1
    return ranks


def run_once(problem_name: str, seed: int) -> dict:
    """Benchmark one problem and seed.

    Args:
        problem_name: Name of the ZDT problem.
        seed: Random seed for reproducibility.

    Returns:
        Result record for the JSON report.
    """
    rng = np.random.default_rng(seed)
    combined = sample_population(problem_name, 2 * POP_SIZE, rng)
    normalized = objective_matrix(combined)

    start_time = time.perf_counter()
    ranked = assign_pareto_ranks(combined)
    sort_time = time.perf_counter() - start_time

    start_time = time.perf_counter()
    reference = pymoo_ranks(normalized)
    pymoo_sort_time = time.perf_counter() - start_time

    ranks = np.array([c.pareto_rank for c in ranked])
    agree = bool(np.array_equal(ranks, reference))
    if not agree:
        logger.warning("Front assignment differs from pymoo on %s (seed=%d)", problem_name.upper(), seed)

    start_time = time.perf_counter()
    survivors = environmental_selection(combined, POP_SIZE)
    selection_time = time.perf_counter() - start_time

    random_subset = normalized[rng.choice(len(combined), size=POP_SIZE, replace=False)]

    return {
        "problem": problem_name.upper(),
        "seed": seed,
        "n_fronts": int(ranks.max()),
        "fronts_agree": agree,
        "sort_seconds": sort_time,
        "pymoo_sort_seconds": pymoo_sort_time,
        "selection_seconds": selection_time,
        "hypervolume_selected": hypervolume(objective_matrix(survivors)),
        "hypervolume_random": hypervolume(random_subset),
    }


def run_benchmark() -> dict:
    """Run the full benchmark suite.

    Returns:
        Dictionary containing metadata and results.
    """
    metadata = {
        "timestamp": datetime.now(UTC).isoformat(),
        "parameters": {
            "pop_size": POP_SIZE,
            "combined_size": 2 * POP_SIZE,
            "n_runs": N_RUNS,
            "seeds": SEEDS,
        },
    }

    results = []
    total_runs = len(PROBLEMS) * N_RUNS
    current_run = 0

    for problem_name in PROBLEMS:
        for seed in SEEDS:
            current_run += 1
            logger.info(f"Running [{current_run}/{total_runs}]: {problem_name.upper()} (seed={seed})")

            record = run_once(problem_name, seed)
            results.append(record)

            logger.info(
                f"  HV selected: {record['hypervolume_selected']:.4f}, "
                f"random: {record['hypervolume_random']:.4f}, fronts: {record['n_fronts']}"
            )

    return {"metadata": metadata, "results": results}


def print_summary(results: dict) -> None:
    """Print a summary table of the benchmark results.

    Args:
        results: The benchmark results dictionary.
    """
    data = defaultdict(lambda: defaultdict(list))
    for r in results["results"]:
        for key, value in r.items():
            data[r["problem"]][key].append(value)

    print("\n" + "=" * 80)
    print("BENCHMARK SUMMARY")
    print("=" * 80)
    print(f"\nParameters: pop_size={POP_SIZE}, combined={2 * POP_SIZE}, runs={N_RUNS}")
    print()

    header = f"{'Problem':<10}{'HV selected':>22}{'HV random':>22}{'pymoo agree':>14}"
    print(header)
    print("-" * 68)
    for problem in sorted(data):
        row = data[problem]
        selected = f"{np.mean(row['hypervolume_selected']):.4f} +/- {np.std(row['hypervolume_selected']):.4f}"
        rand = f"{np.mean(row['hypervolume_random']):.4f} +/- {np.std(row['hypervolume_random']):.4f}"
        agree = f"{sum(row['fronts_agree'])}/{len(row['fronts_agree'])}"
        print(f"{problem:<10}{selected:>22}{rand:>22}{agree:>14}")
    print("-" * 68)

    print("\nTiming (mean milliseconds per run):")
    print(f"{'Problem':<10}{'sort':>12}{'pymoo sort':>12}{'selection':>12}")
    print("-" * 46)
    for problem in sorted(data):
        row = data[problem]
        print(
            f"{problem:<10}"
            f"{1000 * np.mean(row['sort_seconds']):>12.2f}"
            f"{1000 * np.mean(row['pymoo_sort_seconds']):>12.2f}"
            f"{1000 * np.mean(row['selection_seconds']):>12.2f}"
        )
    print()


def main() -> None:
    """Main entry point for the benchmark."""
    logger.info("Starting ZDT selection benchmark")
    logger.info(f"Parameters: pop_size={POP_SIZE}, runs={N_RUNS}")

    results = run_benchmark()

    output_path = Path(__file__).parent / "results" / "benchmark_results.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(results, f, indent=2)

    logger.info(f"Results saved to {output_path}")

    print_summary(results)


if __name__ == "__main__":
    main()
