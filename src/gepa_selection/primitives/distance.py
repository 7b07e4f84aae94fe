"""Euclidean distance kernels in normalized objective space."""

import numpy as np


def pairwise_distances(objectives: np.ndarray) -> np.ndarray:
    """Compute the Euclidean distance between every pair of individuals.

    Args:
        objectives: Objective values. Shape (n, n_obj).

    Returns:
        Symmetric array of shape (n, n) with zeros on the diagonal.

    Examples:
        >>> pairwise_distances(np.array([[0.0, 0.0], [0.3, 0.4]]))
        array([[0. , 0.5],
               [0.5, 0. ]])
    """
    diff = objectives[:, np.newaxis, :] - objectives[np.newaxis, :, :]
    return np.sqrt(np.sum(diff * diff, axis=2))


def distances_to(point: np.ndarray, objectives: np.ndarray) -> np.ndarray:
    """Compute the Euclidean distance from one point to every row of objectives.

    Args:
        point: Objective values of the reference individual. Shape (n_obj,).
        objectives: Objective values of the others. Shape (n, n_obj).

    Returns:
        Array of shape (n,).
    """
    diff = objectives - point[np.newaxis, :]
    return np.sqrt(np.sum(diff * diff, axis=1))


def mean_pairwise_distance(objectives: np.ndarray) -> float:
    """Average distance over all unordered pairs; 0.0 for fewer than two individuals."""
    n = objectives.shape[0]
    if n < 2:
        return 0.0
    upper = np.triu_indices(n, k=1)
    return float(pairwise_distances(objectives)[upper].mean())


def sharing_kernel(distances: np.ndarray, niche_radius: float, sharing_alpha: float) -> np.ndarray:
    """Evaluate the fitness-sharing function sh(d) = max(0, 1 - (d / radius) ** alpha).

    Args:
        distances: Distances of any shape.
        niche_radius: Positive niche radius.
        sharing_alpha: Positive sharing slope.

    Returns:
        Array with the same shape as distances, values in [0, 1].
    """
    return np.maximum(0.0, 1.0 - np.power(distances / niche_radius, sharing_alpha))
