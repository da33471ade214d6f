"""
Custom exception classes for SAT solving operations.

Unsatisfiability is a normal solver outcome and is reported through results,
not exceptions. The classes here cover malformed DIMACS input, malformed
clauses handed to a solver, and configuration problems.
"""


class SATBaseException(Exception):
    """Base exception class for all SAT solver related exceptions."""
    pass


class DimacsFormatError(SATBaseException):
    """
    Raised when DIMACS CNF input cannot be parsed.

    Attributes:
        line_number: 1-based input line where the problem was found, if known
    """
    default_message = "malformed DIMACS input"

    def __init__(self, message=None, line_number=None):
        self.line_number = line_number
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self):
        if self.line_number is not None:
            return f"{self.message} (line {self.line_number})"
        return self.message


class MissingHeaderError(DimacsFormatError):
    """Raised when no ``p cnf`` problem line precedes the clauses."""
    default_message = "no header"


class BadHeaderError(DimacsFormatError):
    """Raised when the problem line is not ``p cnf <vars> <clauses>``."""
    default_message = "bad header"


class BadClauseError(DimacsFormatError):
    """Raised when a clause token is not an integer."""
    default_message = "bad clause"


class VariableCountError(DimacsFormatError):
    """Raised when a literal refers to a variable beyond the declared count."""
    default_message = "unexpected number of variables"


class ClauseCountError(DimacsFormatError):
    """Raised when the number of clauses differs from the declared count."""
    default_message = "unexpected number of clauses"


class InputEncodingError(DimacsFormatError):
    """Raised when the input bytes cannot be decoded as UTF-8 text."""
    default_message = "input is not valid UTF-8"


class InvalidClauseError(SATBaseException):
    """
    Raised when an invalid clause is detected (e.g. a zero, non-integer or
    negative-index literal).
    """
    def __init__(self, message="Invalid clause detected", clause=None):
        self.clause = clause
        self.message = message
        if clause is not None:
            self.message = f"{message}: {clause}"
        super().__init__(self.message)


class ConfigurationError(SATBaseException):
    """
    Raised when there's a problem with solver configuration.
    """
    pass
