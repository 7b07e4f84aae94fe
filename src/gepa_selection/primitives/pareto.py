"""Pareto ranking and diversity kernels on objective arrays.

All functions here work on plain numpy arrays of normalized objectives where
higher is better. Candidate-level wrappers live in gepa_selection.dominance and
gepa_selection.survival.
"""

import numpy as np


def dominates(a: np.ndarray, b: np.ndarray) -> bool:
    """Check if solution a Pareto-dominates solution b (maximization).

    A solution a dominates b if and only if:
      - a[i] >= b[i] for ALL objectives (a is at least as good everywhere)
      - a[i] > b[i] for AT LEAST ONE objective (a is strictly better somewhere)

    Args:
        a: Objective values for solution a. Shape (n_obj,).
        b: Objective values for solution b. Shape (n_obj,).

    Returns:
        True if a dominates b, False otherwise. Always False for zero objectives.

    Examples:
        >>> dominates(np.array([0.9, 0.8]), np.array([0.5, 0.8]))
        True
        >>> dominates(np.array([0.9, 0.1]), np.array([0.1, 0.9]))
        False
    """
    return bool(np.all(a >= b) and np.any(a > b))


def dominates_matrix(objectives: np.ndarray) -> np.ndarray:
    """Compute pairwise dominance for all individuals (vectorized).

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Boolean array of shape (n, n) where result[i, j] = True iff
        individual i dominates individual j.

    Examples:
        >>> objs = np.array([[1.0, 1.0], [0.5, 0.5], [1.0, 0.5]])
        >>> dom = dominates_matrix(objs)
        >>> dom[0, 1]
        True
        >>> dom[2, 0]
        False
    """
    a = objectives[:, np.newaxis, :]  # (n, 1, n_obj)
    b = objectives[np.newaxis, :, :]  # (1, n, n_obj)

    all_geq = np.all(a >= b, axis=2)
    any_gt = np.any(a > b, axis=2)

    return all_geq & any_gt


def non_dominated_sort(objectives: np.ndarray) -> np.ndarray:
    """Assign each individual to a Pareto front using Deb's fast algorithm.

    Time complexity: O(M * N^2) where M = number of objectives, N = population size.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).

    Returns:
        Integer array of shape (n,) where rank[i] is the front of individual i.
        Rank 1 = non-dominated (first front), rank 2 = dominated only by
        front 1, etc.

    Examples:
        >>> objs = np.array([[0.9, 0.9], [0.5, 0.5], [0.1, 0.1]])
        >>> non_dominated_sort(objs)
        array([1, 2, 3])
    """
    n = objectives.shape[0]

    if n == 0:
        return np.array([], dtype=np.int64)

    dom_matrix = dominates_matrix(objectives)

    # domination_count[i] = number of individuals that dominate i
    domination_count = dom_matrix.sum(axis=0).astype(np.int64)

    ranks = np.zeros(n, dtype=np.int64)

    current_rank = 1
    remaining = np.arange(n)

    while len(remaining) > 0:
        front_mask = domination_count[remaining] == 0
        front = remaining[front_mask]

        if len(front) == 0:
            # Unreachable for a strict partial order; keep the loop finite anyway.
            ranks[remaining] = current_rank
            break

        ranks[front] = current_rank
        remaining = remaining[~front_mask]

        for idx in front:
            domination_count[remaining] -= dom_matrix[idx, remaining].astype(np.int64)

        current_rank += 1

    return ranks


def crowding_distance(front_objectives: np.ndarray) -> np.ndarray:
    """Compute crowding distance for individuals in a single Pareto front.

    Higher values indicate more isolated solutions (preferred for diversity).
    On every objective with a non-zero range the minimum and maximum members
    receive infinite distance and interior members accumulate the normalized
    gap between their neighbours. An objective on which all members agree
    contributes nothing and marks no boundaries.

    Args:
        front_objectives: Objective values for individuals in ONE front only.
            Shape (n_front, n_obj).

    Returns:
        Array of shape (n_front,) containing crowding distances.

    Examples:
        >>> objs = np.array([[0.9, 0.1], [0.5, 0.5], [0.1, 0.9]])
        >>> cd = crowding_distance(objs)
        >>> bool(np.isinf(cd[0]) and np.isinf(cd[2]))
        True
        >>> float(cd[1])
        2.0
    """
    n_front = front_objectives.shape[0]

    if n_front == 0:
        return np.array([], dtype=np.float64)

    if n_front <= 2:
        # One or two members are always both extremes
        return np.full(n_front, np.inf)

    n_obj = front_objectives.shape[1]
    distances = np.zeros(n_front, dtype=np.float64)

    for m in range(n_obj):
        sorted_indices = np.argsort(front_objectives[:, m], kind="stable")

        obj_min = front_objectives[sorted_indices[0], m]
        obj_max = front_objectives[sorted_indices[-1], m]
        obj_range = obj_max - obj_min

        if obj_range <= 0:
            continue

        distances[sorted_indices[0]] = np.inf
        distances[sorted_indices[-1]] = np.inf

        for i in range(1, n_front - 1):
            prev_idx = sorted_indices[i - 1]
            curr_idx = sorted_indices[i]
            next_idx = sorted_indices[i + 1]

            neighbor_dist = front_objectives[next_idx, m] - front_objectives[prev_idx, m]
            distances[curr_idx] += neighbor_dist / obj_range

    return distances


def crowding_distance_by_rank(objectives: np.ndarray, ranks: np.ndarray) -> np.ndarray:
    """Compute crowding distance for all individuals across all fronts.

    Args:
        objectives: Objective values for all individuals. Shape (n, n_obj).
        ranks: Pareto front ranks for all individuals. Shape (n,).

    Returns:
        Array of shape (n,) containing crowding distances, each computed
        within the individual's own front.
    """
    cd = np.zeros(len(objectives), dtype=np.float64)
    for r in np.unique(ranks):
        mask = ranks == r
        cd[mask] = crowding_distance(objectives[mask])
    return cd
