"""
dpllsat: a DPLL satisfiability solver for DIMACS CNF formulas.
"""

from dpllsat.formula import Assignment, Clause, Formula, Literal, Not, Var
from dpllsat.solvers import DPLLSolver, SolverResult, SolverStatus, check_sat

__version__ = "0.1.0"

__all__ = [
    "Assignment",
    "Clause",
    "Formula",
    "Literal",
    "Not",
    "Var",
    "DPLLSolver",
    "SolverResult",
    "SolverStatus",
    "check_sat",
]
