"""
CNF file handling utilities.

This module provides functions for loading and parsing CNF formulas in DIMACS
format, writing formulas back to DIMACS, and formatting satisfying assignments
as signed variable lists.
"""

import os
import re
from collections.abc import Iterable, Iterator
from typing import Any, TextIO

from dpllsat.formula import Assignment, Formula, Literal, variable_count
from dpllsat.utils.exceptions import (
    BadClauseError,
    BadHeaderError,
    ClauseCountError,
    InputEncodingError,
    MissingHeaderError,
    VariableCountError,
)

# ASCII digits only, with an optional sign
_INTEGER = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")

# Literals are signed 32-bit values, counts are unsigned 64-bit values
LITERAL_MIN = -(2**31)
LITERAL_MAX = 2**31 - 1
COUNT_MAX = 2**64 - 1


def load_cnf_file(file_path: str) -> tuple[Formula, dict[str, Any]]:
    """
    Load a CNF formula from a DIMACS file.

    Args:
        file_path: Path to the CNF file in DIMACS format

    Returns:
        Tuple of (formula, metadata), see ``parse_dimacs``

    Raises:
        FileNotFoundError: If the file doesn't exist
        DimacsFormatError: If the file format is invalid
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"CNF file not found: {file_path}")

    with open(file_path, encoding="utf-8") as f:
        return parse_dimacs(f)


def _parse_int(token: str, low: int, high: int, pattern: re.Pattern = _INTEGER) -> int | None:
    """Return the token's value, or None if it is not an integer in [low, high]."""
    if not pattern.fullmatch(token):
        return None
    value = int(token)
    if value < low or value > high:
        return None
    return value


def _parse_count(token: str, line_number: int) -> int:
    value = _parse_int(token, 0, COUNT_MAX, _UNSIGNED)
    if value is None:
        raise BadHeaderError(f"bad header: invalid count {token!r}", line_number)
    return value


def _numbered_lines(source: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Enumerate lines from 1, reporting undecodable input as a format error."""
    lines = iter(source)
    line_number = 0
    while True:
        try:
            line = next(lines)
        except StopIteration:
            return
        except UnicodeDecodeError as e:
            raise InputEncodingError(f"input is not valid UTF-8: {e}") from e
        line_number += 1
        yield line_number, line


def _parse_header(lines: Iterator[tuple[int, str]], metadata: dict[str, Any]) -> tuple[int, int]:
    """Consume lines up to and including the ``p cnf`` problem line."""
    for line_number, line in lines:
        if line.startswith("c"):
            metadata["comments"].append(line[1:].strip())
            continue

        tokens = line.split()
        if not tokens:
            continue

        if tokens[0] != "p":
            break

        if len(tokens) != 4 or tokens[1] != "cnf":
            raise BadHeaderError(line_number=line_number)

        return _parse_count(tokens[2], line_number), _parse_count(tokens[3], line_number)

    raise MissingHeaderError()


def parse_dimacs(source: str | TextIO) -> tuple[Formula, dict[str, Any]]:
    """
    Parse a CNF formula from DIMACS format.

    Comment lines start with ``c``. The first other non-blank line must be the
    problem line ``p cnf <variables> <clauses>``. After it, every token is an
    integer; ``0`` ends a clause, so clauses may span lines or share one, and a
    lone ``0`` is an empty clause. Literals after the final ``0`` are dropped.

    Args:
        source: DIMACS content as a string or file-like object

    Returns:
        Tuple of (formula, metadata)
        - formula: List of clauses of zero-based literals
        - metadata: Dictionary with ``num_variables``, ``num_clauses`` and ``comments``

    Raises:
        MissingHeaderError: No problem line before the first non-comment line
        BadHeaderError: Malformed problem line
        BadClauseError: Clause token that is not a 32-bit signed integer
        VariableCountError: Literal beyond the declared variable count
        ClauseCountError: Clause count differs from the declared count
        InputEncodingError: Source bytes are not valid UTF-8
    """
    if isinstance(source, str):
        source = source.splitlines()

    metadata = {"comments": [], "num_variables": 0, "num_clauses": 0}
    lines = _numbered_lines(source)

    num_variables, num_clauses = _parse_header(lines, metadata)
    metadata["num_variables"] = num_variables
    metadata["num_clauses"] = num_clauses

    formula = []
    current_clause = []

    for line_number, line in lines:
        if line.startswith("c"):
            metadata["comments"].append(line[1:].strip())
            continue

        for token in line.split():
            value = _parse_int(token, LITERAL_MIN, LITERAL_MAX)
            if value is None:
                raise BadClauseError(line_number=line_number)

            if value == 0:
                formula.append(current_clause)
                current_clause = []
                continue

            if abs(value) > num_variables:
                raise VariableCountError(line_number=line_number)

            current_clause.append(Literal.from_dimacs(value))

    if len(formula) != num_clauses:
        raise ClauseCountError(
            f"unexpected number of clauses: expected {num_clauses}, found {len(formula)}"
        )

    return formula, metadata


def formula_to_dimacs(
    formula: Formula,
    num_variables: int | None = None,
    comments: list[str] | None = None,
) -> str:
    """
    Convert a formula to DIMACS format.

    Args:
        formula: List of clauses of zero-based literals
        num_variables: Number of variables (computed if not provided)
        comments: List of comment lines to include

    Returns:
        DIMACS format string representation
    """
    if comments is None:
        comments = []

    if num_variables is None:
        num_variables = variable_count(formula)

    lines = [f"c {comment}" for comment in comments]
    lines.append(f"p cnf {num_variables} {len(formula)}")
    for clause in formula:
        lines.append(" ".join([str(lit.to_dimacs()) for lit in clause] + ["0"]))

    return "\n".join(lines) + "\n"


def save_cnf_file(
    file_path: str,
    formula: Formula,
    num_variables: int | None = None,
    comments: list[str] | None = None,
) -> None:
    """
    Save a CNF formula to a DIMACS file.

    Args:
        file_path: Path to save the CNF file
        formula: List of clauses of zero-based literals
        num_variables: Number of variables (computed if not provided)
        comments: List of comment lines to include
    """
    dimacs_str = formula_to_dimacs(formula, num_variables, comments)

    with open(file_path, "w", encoding="utf-8") as f:
        f.write(dimacs_str)


def assignment_to_model(assignment: Assignment) -> list[int]:
    """Signed 1-based literal per variable: positive if true, negative if false."""
    return [i + 1 if truth else -(i + 1) for i, truth in enumerate(assignment)]


def format_assignment(assignment: Assignment) -> str:
    """
    Format an assignment as space-separated signed 1-based variables.

    >>> format_assignment([True, False, True, False])
    '1 -2 3 -4'
    """
    return " ".join(str(lit) for lit in assignment_to_model(assignment))
