"""
Utilities for the dpllsat package.
"""

from dpllsat.utils import cnf, exceptions, logging_utils
from dpllsat.utils.cnf import (
    assignment_to_model,
    format_assignment,
    formula_to_dimacs,
    load_cnf_file,
    parse_dimacs,
    save_cnf_file,
)

__all__ = [
    "load_cnf_file",
    "save_cnf_file",
    "parse_dimacs",
    "formula_to_dimacs",
    "format_assignment",
    "assignment_to_model",
    "cnf",
    "exceptions",
    "logging_utils",
]
