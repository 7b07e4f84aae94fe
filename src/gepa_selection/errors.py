"""Error kinds raised by the selection engine.

Every error subclasses SelectionError, which is itself a ValueError, so callers
can either catch the broad class or branch on the specific kind:

- EmptyPopulationError: an operation that must produce a result got no candidates
- MissingOptionError: a required configuration option was not supplied
- InvalidOptionError: an option is out of range or not recognised
- MissingRankingError: a candidate lacks pareto_rank or crowding_distance

Each error keeps its context as attributes so the generational loop can decide
whether to re-run an earlier stage or abort the generation.
"""

from __future__ import annotations

from typing import Any


class SelectionError(ValueError):
    """Base class for all selection engine validation failures."""


class EmptyPopulationError(SelectionError):
    """Raised when an operation that requires candidates receives none.

    Attributes:
        operation: Name of the operation that was called.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} requires a non-empty population")


class MissingOptionError(SelectionError):
    """Raised when a required configuration option is absent.

    Attributes:
        option: Name of the missing option.
        operation: Name of the operation that requires it.
    """

    def __init__(self, option: str, operation: str) -> None:
        self.option = option
        self.operation = operation
        super().__init__(f"{operation} requires '{option}' to be set")


class InvalidOptionError(SelectionError):
    """Raised when an option value is out of range or unrecognised.

    Attributes:
        option: Name of the offending option.
        value: The rejected value.
        reason: Human-readable constraint that was violated.
    """

    def __init__(self, option: str, value: Any, reason: str) -> None:
        self.option = option
        self.value = value
        self.reason = reason
        super().__init__(f"invalid {option}={value!r}: {reason}")


class MissingRankingError(SelectionError):
    """Raised when a candidate lacks the ranking metadata an operation needs.

    Attributes:
        candidate_id: Id of the first offending candidate.
        field: Either 'pareto_rank' or 'crowding_distance'.
    """

    def __init__(self, candidate_id: str, field: str) -> None:
        self.candidate_id = candidate_id
        self.field = field
        super().__init__(f"candidate '{candidate_id}' has no {field}; run the ranking stage first")
