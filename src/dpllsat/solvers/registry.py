"""
Name-to-class mapping of the solvers the CLI can select with ``--solver``.
"""

import logging
from collections.abc import Callable

from dpllsat.utils.exceptions import ConfigurationError

from .base import SolverBase

logger = logging.getLogger(__name__)


class SolverRegistry:
    """Solver classes keyed by the name given to ``register_solver``."""

    _solvers: dict[str, type[SolverBase]] = {}

    @classmethod
    def register(cls, name: str, solver_cls: type[SolverBase]) -> None:
        if not (isinstance(solver_cls, type) and issubclass(solver_cls, SolverBase)):
            raise TypeError(f"{solver_cls!r} is not a SolverBase subclass")

        previous = cls._solvers.get(name)
        if previous is not None and previous is not solver_cls:
            logger.warning(f"Solver '{name}' now refers to {solver_cls.__name__}")

        solver_cls.solver_name = name
        cls._solvers[name] = solver_cls

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._solvers)

    @classmethod
    def get(cls, name: str) -> type[SolverBase]:
        """
        Look up a solver class.

        Raises:
            ConfigurationError: If nothing is registered under ``name``
        """
        try:
            return cls._solvers[name]
        except KeyError:
            available = ", ".join(cls.names()) or "none"
            raise ConfigurationError(
                f"Unknown solver '{name}' (available: {available})"
            ) from None

    @classmethod
    def create(cls, name: str, **kwargs) -> SolverBase:
        """Instantiate the solver registered as ``name``."""
        return cls.get(name)(**kwargs)


def register_solver(name: str) -> Callable[[type[SolverBase]], type[SolverBase]]:
    """Class decorator that registers a solver under ``name``."""

    def decorator(solver_cls: type[SolverBase]) -> type[SolverBase]:
        SolverRegistry.register(name, solver_cls)
        return solver_cls

    return decorator
