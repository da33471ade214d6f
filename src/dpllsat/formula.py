"""
Formula model shared by the parser, the solvers and the CLI.

Literals are zero-based and tagged: ``Var(i)`` is true when variable ``i`` is
true, ``Not(i)`` is true when it is false. A clause is a list of literals (OR),
a formula is a list of clauses (AND), and an assignment is a dense list of
booleans indexed by variable.
"""

from typing import List, NamedTuple


class Literal(NamedTuple):
    """A variable index together with its polarity."""

    index: int
    negated: bool = False

    @property
    def truth(self) -> bool:
        """Value the variable must take for this literal to be true."""
        return not self.negated

    def __neg__(self) -> "Literal":
        return Literal(self.index, not self.negated)

    def __repr__(self) -> str:
        return f"{'Not' if self.negated else 'Var'}({self.index})"

    def to_dimacs(self) -> int:
        """Convert to the 1-based signed integer used by DIMACS."""
        return -(self.index + 1) if self.negated else self.index + 1

    @classmethod
    def from_dimacs(cls, value: int) -> "Literal":
        """Build a literal from a non-zero 1-based signed integer."""
        if value == 0:
            raise ValueError("0 is a clause terminator, not a literal")
        if value > 0:
            return cls(value - 1, False)
        return cls(-value - 1, True)


def Var(index: int) -> Literal:
    return Literal(index, False)


def Not(index: int) -> Literal:
    return Literal(index, True)


Clause = List[Literal]
Formula = List[Clause]
Assignment = List[bool]


def variable_count(formula: Formula) -> int:
    """One more than the highest variable index in the formula, 0 if none."""
    n_vars = 0
    for clause in formula:
        for lit in clause:
            if lit.index >= n_vars:
                n_vars = lit.index + 1
    return n_vars


def copy_formula(formula: Formula) -> Formula:
    """Copy the formula down to its clauses; literals are immutable."""
    return [list(clause) for clause in formula]


def is_clause_satisfied(clause: Clause, assignment: Assignment) -> bool:
    return any(assignment[lit.index] == lit.truth for lit in clause)


def count_satisfied_clauses(formula: Formula, assignment: Assignment) -> int:
    """
    Count the clauses made true by a complete assignment.

    Args:
        formula: List of clauses
        assignment: Truth value per variable index; must cover every index

    Returns:
        Number of satisfied clauses
    """
    return sum(1 for clause in formula if is_clause_satisfied(clause, assignment))


def satisfies(formula: Formula, assignment: Assignment) -> bool:
    """Return True if the assignment is a model of every clause."""
    return all(is_clause_satisfied(clause, assignment) for clause in formula)
