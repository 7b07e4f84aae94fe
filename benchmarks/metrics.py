"""Quality metrics for selected candidate sets.

This module provides metrics for evaluating how well a selected subset covers
the objective space, primarily using the hypervolume indicator.
"""

import numpy as np
from pymoo.indicators.hv import HV


def hypervolume(normalized_objectives: np.ndarray, ref_point: np.ndarray | None = None) -> float:
    """Compute the hypervolume indicator of maximized, normalized objectives.

    pymoo's indicator assumes minimization, so objectives in [0, 1] (higher is
    better) are mapped to 1 - x before measuring. The reference point sits
    slightly beyond the worst corner of the unit hypercube.

    Args:
        normalized_objectives: (n, n_obj) objective values in [0, 1].
        ref_point: Reference point in the minimized space. Defaults to 1.1 on
            every objective.

    Returns:
        Hypervolume value (higher is better).

    Raises:
        ValueError: If the array is empty or not 2D.
    """
    if normalized_objectives.size == 0:
        raise ValueError("objectives array cannot be empty")

    if normalized_objectives.ndim != 2:
        raise ValueError(f"objectives must be 2D array, got shape {normalized_objectives.shape}")

    if ref_point is None:
        ref_point = np.full(normalized_objectives.shape[1], 1.1)

    indicator = HV(ref_point=ref_point)
    return float(indicator(1.0 - normalized_objectives))
