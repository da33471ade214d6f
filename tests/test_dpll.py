"""
Unit tests for the DPLL search and its building blocks.

Covers in-place simplification, unit propagation, the branching heuristic and
the check_sat entry point, including randomized checks against brute force.
"""

import itertools
import random
import sys
import unittest

from dpllsat.formula import Not, Var, copy_formula, satisfies
from dpllsat.solvers.dpll import (
    SearchStats,
    check_sat,
    dpll,
    find_dominant_variable,
    simplify,
    unit_propagate,
)


def brute_force_sat(formula, num_vars):
    """Return True if any complete assignment satisfies the formula."""
    for values in itertools.product([False, True], repeat=num_vars):
        if satisfies(formula, list(values)):
            return True
    return False


def random_formula(rng, num_vars, num_clauses, max_width=3):
    formula = []
    for _ in range(num_clauses):
        width = rng.randint(1, max_width)
        clause = []
        for _ in range(width):
            index = rng.randrange(num_vars)
            clause.append(Not(index) if rng.random() < 0.5 else Var(index))
        formula.append(clause)
    return formula


class TestSimplify(unittest.TestCase):
    """Test cases for in-place formula simplification."""

    def test_true_and_false_literals(self):
        """Satisfied clauses are dropped and false literals stripped."""
        formula = [[Var(1), Var(2)], [Not(1), Var(3)]]
        simplify(formula, 1, True)
        self.assertEqual(formula, [[Var(3)]])

    def test_false_unit_becomes_empty_clause(self):
        """A unit clause whose literal is falsified is left empty."""
        formula = [[Var(1)], [Var(2)]]
        simplify(formula, 1, False)
        self.assertEqual(formula, [[], [Var(2)]])

    def test_strips_every_occurrence(self):
        """Repeated false literals are all removed."""
        formula = [[Var(0), Not(1), Var(0)]]
        simplify(formula, 0, False)
        self.assertEqual(formula, [[Not(1)]])

    def test_tautology_removed_once_assigned(self):
        """A clause holding both polarities is satisfied either way."""
        for truth in (True, False):
            formula = [[Var(0), Not(0)], [Var(1)]]
            simplify(formula, 0, truth)
            self.assertEqual(formula, [[Var(1)]])

    def test_unrelated_variable_untouched(self):
        """Clauses without the variable keep their literals."""
        formula = [[Var(0), Not(2)], [Var(3)]]
        simplify(formula, 1, True)
        self.assertEqual(formula, [[Var(0), Not(2)], [Var(3)]])

    def test_works_in_place(self):
        """The formula and surviving clause objects are reused."""
        clause = [Not(0), Var(1)]
        formula = [clause]
        simplify(formula, 0, True)
        self.assertIs(formula[0], clause)
        self.assertEqual(clause, [Var(1)])

    def test_duplicates_do_not_change_result(self):
        """Simplifying a clause with duplicates matches the deduplicated clause."""
        rng = random.Random(7)

        def normalized(formula):
            return sorted(sorted(set(clause)) for clause in formula)

        for _ in range(200):
            formula = random_formula(rng, num_vars=4, num_clauses=5, max_width=4)
            deduplicated = [list(dict.fromkeys(clause)) for clause in formula]
            var = rng.randrange(4)
            truth = rng.random() < 0.5

            simplify(formula, var, truth)
            simplify(deduplicated, var, truth)
            self.assertEqual(normalized(formula), normalized(deduplicated))


class TestUnitPropagate(unittest.TestCase):
    """Test cases for unit propagation."""

    def test_propagates_to_fixpoint(self):
        """Chained unit clauses are all resolved."""
        formula = [
            [Var(1)],
            [Not(2)],
            [Var(1), Var(2)],
            [Not(1), Var(2), Var(3)],
            [Var(0), Not(3), Var(4)],
        ]
        assignment = [False] * 5

        unit_propagate(formula, assignment)

        self.assertEqual(formula, [[Var(0), Var(4)]])
        self.assertEqual(assignment, [False, True, False, True, False])

    def test_conflict_leaves_empty_clause(self):
        """Contradicting units leave an empty clause behind."""
        formula = [[Var(0)], [Not(0)]]
        assignment = [False]

        unit_propagate(formula, assignment)

        self.assertEqual(formula, [[]])
        self.assertEqual(assignment, [True])

    def test_no_units(self):
        """Without unit clauses nothing changes."""
        formula = [[Var(0), Var(1)], [Not(0), Not(1)]]
        assignment = [False, False]

        unit_propagate(formula, assignment)

        self.assertEqual(formula, [[Var(0), Var(1)], [Not(0), Not(1)]])

    def test_counts_propagations(self):
        """Each resolved unit clause is counted."""
        stats = SearchStats()
        unit_propagate([[Var(0)], [Not(0), Var(1)]], [False, False], stats)
        self.assertEqual(stats.propagations, 2)


class TestFindDominantVariable(unittest.TestCase):
    """Test cases for the branching heuristic."""

    def test_unique_maximum(self):
        """The most frequent variable wins regardless of polarity."""
        formula = [
            [Var(0), Var(1), Var(2)],
            [Not(0), Var(1)],
            [Not(1), Var(2)],
            [Var(0), Not(1), Not(2)],
        ]
        self.assertEqual(find_dominant_variable(formula, 3), 1)

    def test_tie_goes_to_lowest_index(self):
        """Equal counts resolve to the smaller index."""
        self.assertEqual(find_dominant_variable([[Var(2), Var(1)]], 3), 1)
        self.assertEqual(find_dominant_variable([[Var(0), Var(1)], [Not(1), Not(0)]], 2), 0)

    def test_repeated_literal_counts_each_time(self):
        """A variable repeated inside one clause counts per occurrence."""
        formula = [[Var(1), Var(1)], [Var(0)]]
        self.assertEqual(find_dominant_variable(formula, 2), 1)

    def test_degenerate_inputs(self):
        """No occurrences yields index 0."""
        self.assertEqual(find_dominant_variable([], 1), 0)
        self.assertEqual(find_dominant_variable([], 0), 0)

    def test_returns_plain_int(self):
        """The result is a Python int usable as a list index."""
        self.assertIs(type(find_dominant_variable([[Var(3)]], 4)), int)


class TestCheckSat(unittest.TestCase):
    """Test cases for the solve entry point."""

    def test_empty_formula(self):
        """An empty formula is satisfied by the empty assignment."""
        self.assertEqual(check_sat([]), [])

    def test_satisfiable_example(self):
        """Branching picks variable 1 and tries true first."""
        formula = [
            [Var(0), Var(0), Var(1)],
            [Not(0), Not(1), Not(1)],
            [Not(0), Var(1), Var(1)],
        ]
        self.assertEqual(check_sat(formula), [False, True])

    def test_unsatisfiable_example(self):
        """Three pairwise XOR constraints over three variables cannot hold."""
        formula = [
            [Var(0), Var(1)],
            [Not(0), Not(1)],
            [Var(1), Var(2)],
            [Not(1), Not(2)],
            [Var(2), Var(0)],
            [Not(2), Not(0)],
        ]
        self.assertIsNone(check_sat(formula))

    def test_empty_clause_is_unsatisfiable(self):
        """Any empty clause makes the formula unsatisfiable."""
        self.assertIsNone(check_sat([[]]))
        self.assertIsNone(check_sat([[Var(0), Var(1)], [], [Not(1)]]))

    def test_tautology(self):
        """A clause with both polarities is satisfiable."""
        result = check_sat([[Var(0), Not(0)]])
        self.assertEqual(len(result), 1)

    def test_assignment_sized_by_highest_index(self):
        """Unreferenced lower variables still get an entry."""
        result = check_sat([[Var(4)]])
        self.assertEqual(result, [False, False, False, False, True])

    def test_caller_formula_not_mutated(self):
        """The search works on copies of the input."""
        formula = [[Var(0), Var(1)], [Not(0)], [Not(1), Var(2)]]
        original = copy_formula(formula)
        check_sat(formula)
        self.assertEqual(formula, original)

    def test_deterministic(self):
        """Repeated calls give the same verdict and witness."""
        rng = random.Random(11)
        formula = random_formula(rng, num_vars=8, num_clauses=30)
        self.assertEqual(check_sat(formula), check_sat(formula))

    def test_matches_brute_force(self):
        """Verdicts agree with exhaustive search and witnesses are models."""
        rng = random.Random(2021)
        for _ in range(300):
            num_vars = rng.randint(1, 6)
            formula = random_formula(rng, num_vars, rng.randint(1, 14))
            if rng.random() < 0.05:
                formula.append([])

            result = check_sat(formula)
            expected = brute_force_sat(formula, num_vars)

            self.assertEqual(result is not None, expected, formula)
            if result is not None:
                self.assertTrue(satisfies(formula, result), formula)

    def test_deep_search(self):
        """Searches deeper than the default recursion limit complete."""
        pairs = 1200
        formula = [[Var(2 * i), Var(2 * i + 1)] for i in range(pairs)]
        stats = SearchStats()

        result = check_sat(formula, stats)

        self.assertIsNotNone(result)
        self.assertTrue(satisfies(formula, result))
        self.assertEqual(stats.decisions, pairs)
        self.assertEqual(stats.max_depth, pairs)

    def test_recursion_limit_restored(self):
        """The interpreter recursion limit is put back after a deep search."""
        limit = sys.getrecursionlimit()
        pairs = limit + 200
        formula = [[Var(2 * i), Var(2 * i + 1)] for i in range(pairs)]

        result = check_sat(formula)

        self.assertTrue(satisfies(formula, result))
        self.assertEqual(sys.getrecursionlimit(), limit)


class TestDpll(unittest.TestCase):
    """Test cases for the recursive search controller."""

    def test_records_conflicts_and_decisions(self):
        """An unsatisfiable search branches and hits conflicts."""
        formula = [
            [Var(0), Var(1)],
            [Not(0), Not(1)],
            [Var(1), Var(2)],
            [Not(1), Not(2)],
            [Var(2), Var(0)],
            [Not(2), Not(0)],
        ]
        stats = SearchStats()
        self.assertFalse(dpll(formula, [False] * 3, stats))
        self.assertGreater(stats.decisions, 0)
        self.assertGreater(stats.conflicts, 0)

    def test_success_writes_witness(self):
        """On success the shared assignment is a model."""
        formula = [[Var(0), Var(1)], [Not(0)]]
        assignment = [False, False]
        self.assertTrue(dpll(formula, assignment))
        self.assertEqual(assignment, [False, True])


if __name__ == "__main__":
    unittest.main()
