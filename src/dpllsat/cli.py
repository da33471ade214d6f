#!/usr/bin/env python
"""
Command-line interface: read a DIMACS CNF formula and print a satisfying assignment.

Exit status is 0 when a model is printed, 1 on malformed input or an
unsatisfiable formula, and 2 when ``--verify`` rejects the model.
"""
import argparse
import logging
import sys
import traceback

from dpllsat.formula import satisfies, variable_count
from dpllsat.solvers import SolverRegistry
from dpllsat.solvers.config import load_config
from dpllsat.utils.cnf import format_assignment, load_cnf_file, parse_dimacs
from dpllsat.utils.exceptions import ConfigurationError, SATBaseException
from dpllsat.utils.logging_utils import StructuredLogger

logger = logging.getLogger(__name__)

STDIN_SOURCE = "<stdin>"


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="dpllsat",
        description="Decide satisfiability of a DIMACS CNF formula",
    )

    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="DIMACS CNF file to solve (default: read standard input)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML or JSON configuration file",
    )

    parser.add_argument(
        "--solver",
        type=str,
        default=None,
        help="Registered solver to use (default: solver.name from the configuration)",
    )

    parser.add_argument(
        "--verify",
        action="store_true",
        help="Check the model against the formula before printing it",
    )

    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Write a structured record of the run to this directory",
    )

    parser.add_argument(
        "--log-format",
        choices=[StructuredLogger.FORMAT_JSON, StructuredLogger.FORMAT_CSV],
        default=None,
        help="Format of the structured run record (default: json)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase verbosity (can be used multiple times)",
    )

    return parser.parse_args(argv)


def setup_logging(verbosity, config):
    """Set up logging based on verbosity level, falling back to the configured level."""
    levels = {1: logging.INFO, 2: logging.DEBUG}
    if verbosity:
        level = levels.get(verbosity, logging.DEBUG)
    else:
        level = logging.getLevelName(str(config.get("logging.level", "WARNING")).upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown logging level: {config.get('logging.level')}")

    logging.basicConfig(
        level=level,
        format=config.get("logging.format"),
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)


def create_run_logger(args, config):
    """Return a StructuredLogger when a log directory is given, else None."""
    log_dir = args.log_dir or config.get("logging.dir")
    if not log_dir:
        return None
    return StructuredLogger(
        output_dir=log_dir,
        experiment_name=config.get("logging.run_name", "dpllsat"),
        format_type=args.log_format or config.get("logging.format_type", "json"),
    )


def read_formula(path):
    """Parse the formula from ``path``, or from standard input when it is None."""
    if path is None:
        return parse_dimacs(sys.stdin)
    return load_cnf_file(path)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
        setup_logging(args.verbose, config)
        run_logger = create_run_logger(args, config)
    except (ConfigurationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    source = args.input or STDIN_SOURCE
    try:
        return _run(args, config, source, run_logger)
    finally:
        if run_logger is not None:
            run_logger.finalize()


def _run(args, config, source, run_logger):
    try:
        formula, metadata = read_formula(args.input)
    except (SATBaseException, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        if run_logger is not None:
            run_logger.log_exception(
                source, type(e).__name__, str(e), traceback.format_exc()
            )
        return 1

    logger.info(
        f"Loaded {source}: {metadata['num_variables']} variables, "
        f"{len(formula)} clauses"
    )

    try:
        solver = SolverRegistry.create(args.solver or config.get("solver.name"))
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    solver.add_clauses(formula)
    result = solver.solve()
    logger.info(str(result))

    if run_logger is not None:
        run_logger.log_solve(
            source,
            result.status.value,
            variable_count(formula),
            len(formula),
            result.runtime,
            result.statistics,
        )

    if not result.is_sat:
        logger.info("Formula is unsatisfiable")
        return 1

    if args.verify and not satisfies(formula, result.assignment):
        print("error: solver returned an assignment that does not satisfy the formula", file=sys.stderr)
        return 2

    print(format_assignment(result.assignment))
    return 0


if __name__ == "__main__":
    sys.exit(main())
