"""
Common solver interface.

A solver collects clauses, decides them with ``solve`` and reports the outcome
as a ``SolverResult``. The CLI only talks to solvers through this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dpllsat.formula import Assignment
from dpllsat.utils.cnf import assignment_to_model


class SolverStatus(Enum):
    """Verdict of a finished search."""

    SATISFIABLE = "satisfiable"
    UNSATISFIABLE = "unsatisfiable"


@dataclass
class SolverResult:
    """
    Outcome of one ``solve`` call.

    ``assignment`` holds the model for a satisfiable formula and is None
    otherwise. ``satisfied_clauses`` counts the clauses the model makes true,
    so it equals ``total_clauses`` for every correct model.
    """

    status: SolverStatus
    assignment: Assignment | None = None
    runtime: float = 0.0
    satisfied_clauses: int = 0
    total_clauses: int = 0
    statistics: dict[str, Any] = field(default_factory=dict)

    @property
    def solution(self) -> list[int] | None:
        """The assignment as signed 1-based literals, or None without a model."""
        if self.assignment is None:
            return None
        return assignment_to_model(self.assignment)

    @property
    def is_sat(self) -> bool:
        return self.status is SolverStatus.SATISFIABLE

    @property
    def is_unsat(self) -> bool:
        return self.status is SolverStatus.UNSATISFIABLE

    def __str__(self) -> str:
        if self.is_sat:
            return (
                f"SATISFIABLE: {self.satisfied_clauses}/{self.total_clauses} clauses "
                f"in {self.runtime:.4f}s"
            )
        return f"UNSATISFIABLE: refuted in {self.runtime:.4f}s"


class SolverBase(ABC):
    """Interface every registered solver implements."""

    solver_name: str = ""

    @abstractmethod
    def add_clause(self, clause) -> None:
        """
        Add one clause.

        Args:
            clause: ``Literal`` values or non-zero DIMACS integers

        Raises:
            InvalidClauseError: If an element is not a valid literal
        """

    def add_clauses(self, clauses) -> None:
        """Add each clause of an iterable in order."""
        for clause in clauses:
            self.add_clause(clause)

    @abstractmethod
    def solve(self) -> SolverResult:
        """Decide satisfiability of every clause added so far."""

    @abstractmethod
    def get_model(self) -> list[int] | None:
        """Signed 1-based model from the last satisfiable solve, else None."""

    @abstractmethod
    def get_statistics(self) -> dict[str, Any]:
        """Counters from the last solve."""

    @abstractmethod
    def configure(self, config: dict[str, Any]) -> None:
        """
        Apply solver parameters.

        Raises:
            ConfigurationError: If a parameter is not known to the solver
        """
