"""Result types for operations that can decline to act.

- SharingOutcome: whether adaptive fitness sharing was applied or skipped
- SharingResult: the population returned by adaptive_apply_sharing with its outcome

The outcome is explicit so callers never confuse "sharing ran and changed
nothing" with "sharing was skipped because the population was diverse enough".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gepa_selection.candidate import Candidate


class SharingOutcome(Enum):
    """Whether adaptive_apply_sharing discounted fitness."""

    APPLIED = "applied"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SharingResult:
    """Population returned by adaptive_apply_sharing.

    Attributes:
        population: Candidates with shared fitness (APPLIED) or the input unchanged (SKIPPED).
        outcome: SharingOutcome.APPLIED or SharingOutcome.SKIPPED.
        diversity: Diversity score that drove the decision.

    Example:
        >>> result = adaptive_apply_sharing(population)
        >>> if result.skipped:
        ...     logger.debug("population diverse enough (%.3f)", result.diversity)
    """

    population: tuple[Candidate, ...]
    outcome: SharingOutcome
    diversity: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "population", tuple(self.population))
        if not isinstance(self.outcome, SharingOutcome):
            raise TypeError(f"outcome must be a SharingOutcome, got {type(self.outcome).__name__}")

    @property
    def applied(self) -> bool:
        return self.outcome is SharingOutcome.APPLIED

    @property
    def skipped(self) -> bool:
        return self.outcome is SharingOutcome.SKIPPED

    def __len__(self) -> int:
        return len(self.population)
