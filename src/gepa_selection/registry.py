"""Registry system for tournament comparators and niche radius strategies.

Instead of hardcoding strategy implementations, factories that create configured
strategies are registered by name and retrieved by the configuration objects
that mention them (TournamentConfig.strategy, NicheRadiusConfig.strategy).

There are two independent registries:
1. **ComparatorRegistry**: tournament comparators (Comparator protocol)
2. **NicheRadiusRegistry**: niche radius strategies (NicheRadiusStrategy protocol)

Basic usage:
    ```python
    from gepa_selection.registry import ComparatorRegistry, list_comparators

    def fitness_factory():
        def compare(a, b):
            return (a.fitness or 0.0) > (b.fitness or 0.0)
        return compare

    ComparatorRegistry.register("fitness", fitness_factory)

    compare = ComparatorRegistry.get("fitness")
    available = list_comparators()  # ["diversity", "fitness", "pareto"]
    ```

Configurable factories:
    ```python
    from gepa_selection.registry import NicheRadiusRegistry

    NicheRadiusRegistry.register("tiny", lambda scale=0.01: lambda population: scale)
    strategy = NicheRadiusRegistry.get("tiny", scale=0.02)
    ```
"""

from collections.abc import Callable

from gepa_selection.protocols import Comparator, NicheRadiusStrategy


class ComparatorRegistry:
    """Registry for tournament comparator strategies.

    The registry stores factory functions that accept keyword arguments and
    return Comparator callables.

    Class Attributes:
        _registry: Dictionary mapping strategy names to factory functions.
    """

    _registry: dict[str, Callable[..., Comparator]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., Comparator]) -> None:
        """Register a comparator factory.

        Args:
            name: Unique name for the strategy. Will overwrite if already exists.
            factory: Callable that returns a Comparator.
        """
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs) -> Comparator:
        """Get a configured comparator by name.

        Args:
            name: Name of the registered strategy.
            **kwargs: Configuration parameters passed to the factory function.

        Returns:
            A Comparator callable.

        Raises:
            KeyError: If the strategy name is not registered. Error message
                includes list of available strategies.
        """
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry.keys())) or "none"
            raise KeyError(f"Comparator '{name}' not found. Available comparators: {available}")
        factory = cls._registry[name]
        return factory(**kwargs)

    @classmethod
    def list(cls) -> list[str]:
        """Return sorted list of registered comparator names."""
        return sorted(cls._registry.keys())


class NicheRadiusRegistry:
    """Registry for niche radius strategies.

    The registry stores factory functions that accept keyword arguments and
    return NicheRadiusStrategy callables.

    Class Attributes:
        _registry: Dictionary mapping strategy names to factory functions.
    """

    _registry: dict[str, Callable[..., NicheRadiusStrategy]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., NicheRadiusStrategy]) -> None:
        """Register a niche radius strategy factory.

        Args:
            name: Unique name for the strategy. Will overwrite if already exists.
            factory: Callable that returns a NicheRadiusStrategy.
        """
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs) -> NicheRadiusStrategy:
        """Get a configured niche radius strategy by name.

        Args:
            name: Name of the registered strategy.
            **kwargs: Configuration parameters passed to the factory function.

        Returns:
            A NicheRadiusStrategy callable.

        Raises:
            KeyError: If the strategy name is not registered.
        """
        if name not in cls._registry:
            available = ", ".join(sorted(cls._registry.keys())) or "none"
            raise KeyError(f"Niche radius strategy '{name}' not found. Available strategies: {available}")
        factory = cls._registry[name]
        return factory(**kwargs)

    @classmethod
    def list(cls) -> list[str]:
        """Return sorted list of registered niche radius strategy names."""
        return sorted(cls._registry.keys())


def list_comparators() -> list[str]:
    """List all registered tournament comparators.

    Convenience function that returns ComparatorRegistry.list().
    """
    return ComparatorRegistry.list()


def list_niche_radius_strategies() -> list[str]:
    """List all registered niche radius strategies.

    Convenience function that returns NicheRadiusRegistry.list().
    """
    return NicheRadiusRegistry.list()
