"""
DPLL satisfiability search.

The search works on a private copy of the formula at every recursion level and
threads one assignment list through all levels. Values written on a branch that
later fails are not rolled back; they are either overwritten on the successful
path or belong to variables the final formula no longer constrains.
"""

import logging
import sys
import time
from dataclasses import dataclass
from typing import Any

import numpy as np

from dpllsat.formula import (
    Assignment,
    Clause,
    Formula,
    Literal,
    Not,
    Var,
    copy_formula,
    count_satisfied_clauses,
    variable_count,
)
from dpllsat.utils.cnf import assignment_to_model
from dpllsat.utils.exceptions import ConfigurationError, InvalidClauseError

from .base import SolverBase, SolverResult, SolverStatus
from .config import get_config
from .registry import register_solver

# Set up logging
logger = logging.getLogger(__name__)

# Stack frames kept free for callers above check_sat
RECURSION_HEADROOM = 1000


@dataclass
class SearchStats:
    """Counters collected during one search."""

    decisions: int = 0
    propagations: int = 0
    conflicts: int = 0
    max_depth: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "decisions": self.decisions,
            "propagations": self.propagations,
            "conflicts": self.conflicts,
            "max_depth": self.max_depth,
        }


def simplify(formula: Formula, var: int, truth: bool) -> None:
    """
    Simplify a formula in place under ``var = truth``.

    Clauses containing the literal made true are dropped. The literal made
    false is stripped from every other clause. Both removals swap the doomed
    element with the last one and pop, so clause and literal order is not kept.
    A unit clause holding the false literal is left behind as an empty clause.
    """
    truthy_lit = Var(var) if truth else Not(var)
    falsey_lit = Not(var) if truth else Var(var)

    clause_index = 0
    while clause_index < len(formula):
        clause = formula[clause_index]

        if truthy_lit in clause:
            formula[clause_index] = formula[-1]
            formula.pop()
            continue

        literal_index = 0
        while literal_index < len(clause):
            if clause[literal_index] == falsey_lit:
                clause[literal_index] = clause[-1]
                clause.pop()
                continue
            literal_index += 1

        clause_index += 1


def unit_propagate(formula: Formula, assignment: Assignment, stats: SearchStats | None = None) -> None:
    """
    Resolve unit clauses until none remain.

    Each unit clause forces its variable; the value is written to
    ``assignment`` and the formula is simplified with it. The first unit
    clause in formula order is taken each round.
    """
    while True:
        unit = next((clause for clause in formula if len(clause) == 1), None)
        if unit is None:
            return

        lit = unit[0]
        assignment[lit.index] = lit.truth
        if stats is not None:
            stats.propagations += 1
        simplify(formula, lit.index, lit.truth)


def find_dominant_variable(formula: Formula, num_vars: int) -> int:
    """
    Find the variable with the most literal occurrences in the formula.

    Both polarities count, and a variable repeated inside one clause counts
    once per occurrence. Ties go to the lowest index.
    """
    if num_vars == 0:
        return 0
    indices = [lit.index for clause in formula for lit in clause]
    freqs = np.bincount(np.asarray(indices, dtype=np.int64), minlength=num_vars)
    # argmax returns the first maximum, which is the lowest tied index
    return int(np.argmax(freqs))


def dpll(formula: Formula, assignment: Assignment, stats: SearchStats | None = None) -> bool:
    """
    Run the DPLL procedure on ``formula``.

    The caller's formula is left untouched. On success ``assignment`` holds a
    model of the formula for every variable it mentions.

    Args:
        formula: Clauses to satisfy
        assignment: Shared truth-value buffer sized to the variable count
        stats: Optional counters updated during the search

    Returns:
        True if the formula is satisfiable, False otherwise
    """
    return _search(formula, assignment, stats, 0)


def _search(formula: Formula, assignment: Assignment, stats: SearchStats | None, depth: int) -> bool:
    formula = copy_formula(formula)
    if stats is not None and depth > stats.max_depth:
        stats.max_depth = depth

    unit_propagate(formula, assignment, stats)

    if not formula:
        return True

    if any(not clause for clause in formula):
        if stats is not None:
            stats.conflicts += 1
        return False

    # Split on the most used variable, trying true before false
    var = find_dominant_variable(formula, len(assignment))
    if stats is not None:
        stats.decisions += 1
    logger.debug("Branching on variable %d at depth %d", var, depth)

    formula.append([Var(var)])
    if _search(formula, assignment, stats, depth + 1):
        return True

    formula[-1] = [Not(var)]
    return _search(formula, assignment, stats, depth + 1)


def _ensure_recursion_limit(depth: int, headroom: int) -> int:
    """Raise the interpreter recursion limit if needed and return the previous one."""
    previous = sys.getrecursionlimit()
    needed = depth + headroom
    if previous < needed:
        logger.debug(f"Raising recursion limit to {needed}")
        sys.setrecursionlimit(needed)
    return previous


def check_sat(
    formula: Formula,
    stats: SearchStats | None = None,
    recursion_headroom: int = RECURSION_HEADROOM,
) -> Assignment | None:
    """
    Solve a satisfiability problem given as a CNF formula.

    Args:
        formula: CNF formula with zero-based literals
        stats: Optional counters updated during the search
        recursion_headroom: Stack frames reserved above the deepest search level

    Returns:
        A satisfying assignment with one entry per variable up to the highest
        index used, or None if the formula is unsatisfiable
    """
    n_vars = variable_count(formula)
    assignment = [False] * n_vars

    # One recursion level per decision, plus the top call
    previous_limit = _ensure_recursion_limit(n_vars + 1, recursion_headroom)
    try:
        satisfiable = dpll(formula, assignment, stats)
    finally:
        sys.setrecursionlimit(previous_limit)

    return assignment if satisfiable else None


@register_solver("dpll")
class DPLLSolver(SolverBase):
    """
    Complete DPLL solver with unit propagation and most-frequent-variable branching.
    """

    def __init__(self, **kwargs):
        """
        Initialize the DPLL solver.

        Args:
            **kwargs: Configuration overrides (e.g. ``recursion_headroom``)
        """
        config = get_config()
        self.recursion_headroom = config.get("solver.recursion_headroom", RECURSION_HEADROOM)

        self.configure(kwargs)

        self.clauses: Formula = []
        self.assignment: Assignment | None = None
        self.solve_time = 0.0

        self.stats: dict[str, Any] = {
            "decisions": 0,
            "propagations": 0,
            "conflicts": 0,
            "max_depth": 0,
            "num_vars": 0,
            "total_clauses": 0,
            "solver_name": "dpll",
        }

    def add_clause(self, clause) -> None:
        """
        Add a single clause to the solver.

        Args:
            clause: Literals, either ``Literal`` values or non-zero DIMACS integers
        """
        self.clauses.append(self._to_clause(clause))
        self.stats["total_clauses"] = len(self.clauses)

    def solve(self) -> SolverResult:
        """
        Decide satisfiability of the clauses added so far.

        Returns:
            SolverResult with the assignment on success
        """
        search_stats = SearchStats()
        start_time = time.time()
        self.assignment = check_sat(self.clauses, search_stats, self.recursion_headroom)
        self.solve_time = time.time() - start_time

        self.stats.update(search_stats.as_dict())
        self.stats["num_vars"] = variable_count(self.clauses)
        self.stats["runtime"] = self.solve_time

        logger.info(
            f"DPLL finished in {self.solve_time:.4f}s: "
            f"{'SAT' if self.assignment is not None else 'UNSAT'}, "
            f"{search_stats.decisions} decisions, {search_stats.conflicts} conflicts"
        )

        if self.assignment is None:
            return SolverResult(
                status=SolverStatus.UNSATISFIABLE,
                runtime=self.solve_time,
                total_clauses=len(self.clauses),
                statistics=self.stats,
            )

        return SolverResult(
            status=SolverStatus.SATISFIABLE,
            assignment=self.assignment,
            runtime=self.solve_time,
            satisfied_clauses=count_satisfied_clauses(self.clauses, self.assignment),
            total_clauses=len(self.clauses),
            statistics=self.stats,
        )

    def get_model(self) -> list[int] | None:
        """
        Get the satisfying assignment if one exists.

        Returns:
            Signed 1-based literals, or None if unsolved or unsatisfiable
        """
        if self.assignment is None:
            return None
        return assignment_to_model(self.assignment)

    def get_statistics(self) -> dict[str, Any]:
        return self.stats

    def configure(self, config: dict[str, Any]) -> None:
        """
        Configure the solver with the given parameters.

        Args:
            config: Dictionary of configuration parameters

        Raises:
            ConfigurationError: If a parameter is not known to the solver
        """
        for key, value in config.items():
            if key != "recursion_headroom":
                raise ConfigurationError(f"Unknown configuration parameter for DPLL: {key}")
            self.recursion_headroom = int(value)
            logger.debug(f"Set {key}={value} for DPLL solver")

    @staticmethod
    def _to_clause(clause) -> Clause:
        clause = list(clause)
        literals = []
        for lit in clause:
            if isinstance(lit, Literal):
                if not _is_integer(lit.index) or lit.index < 0:
                    raise InvalidClauseError(clause=clause)
                literals.append(Literal(int(lit.index), bool(lit.negated)))
            elif _is_integer(lit) and lit != 0:
                literals.append(Literal.from_dimacs(int(lit)))
            else:
                raise InvalidClauseError(clause=clause)
        return literals


def _is_integer(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)
