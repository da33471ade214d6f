"""
SAT solver package with unified interface.
"""

from .base import SolverBase, SolverResult, SolverStatus
from .config import SolverConfig, get_config, load_config
from .dpll import (
    DPLLSolver,
    SearchStats,
    check_sat,
    dpll,
    find_dominant_variable,
    simplify,
    unit_propagate,
)
from .registry import SolverRegistry, register_solver

__all__ = [
    "SolverBase",
    "SolverResult",
    "SolverStatus",
    "SolverRegistry",
    "register_solver",
    "get_config",
    "load_config",
    "SolverConfig",
    "DPLLSolver",
    "SearchStats",
    "check_sat",
    "dpll",
    "find_dominant_variable",
    "simplify",
    "unit_propagate",
]
