"""Survivor selection for the generational loop."""

from gepa_selection.survival.crowding import (
    assign_crowding_distances,
    environmental_selection,
    identify_boundary_solutions,
    select_by_crowding_distance,
)

__all__ = [
    "assign_crowding_distances",
    "environmental_selection",
    "identify_boundary_solutions",
    "select_by_crowding_distance",
]
