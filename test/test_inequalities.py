"""
test/test_inequalities.py

Tests for lattecount/inequalities.py .
"""

import ddt
import unittest

import sympy

from lattecount.exceptions import MalformedInequality
from lattecount.inequalities import *

x, y = sympy.symbols("x y")


@ddt.ddt
class TestLattECountInequalities(unittest.TestCase):
    """Check the conversion of constraint strings to `<= 0` form."""

    @ddt.data(("x + y <= 10", x + y - 10, False),
              ("x >= 1", 1 - x, False),
              ("2 x == y", 2 * x - y, True),
              ("x = 3", x - 3, True),
              ("x+y<=10", x + y - 10, False))
    @ddt.unpack
    def test_parse_inequality(self, text, expression, equality):
        constraint = parse_inequality(text)
        self.assertEqual(sympy.expand(constraint.expression - expression), 0)
        self.assertEqual(constraint.equality, equality)

    @ddt.data("x + y", "x < 3", "1 <= x <= 3", "x >= y = 2", "<= 3")
    def test_malformed(self, text):
        with self.assertRaises(MalformedInequality):
            parse_inequality(text)

    def test_variable_order_follows_text(self):
        constraint = parse_inequality("y + x <= 10")
        self.assertEqual(constraint.variables, [y, x])

    def test_cancelled_variables_are_recorded(self):
        """The recorded variables describe the text, not the difference."""
        constraint = parse_inequality("x + y <= x + 2")
        self.assertEqual(constraint.variables, [x, y])
        self.assertEqual(constraint.expression, y - 2)

    def test_linearity_indices(self):
        constraints = parse_inequalities(
            ["x + y <= 10", "x == 1", "y >= 1", "x + y = 4"]
        )
        self.assertEqual(linearity_indices(constraints), [2, 4])

    @ddt.data((x + y <= 10, x + y - 10, False),
              (x >= 1, 1 - x, False),
              (sympy.Eq(x, 1), x - 1, True),
              (x - 3, x - 3, False))
    @ddt.unpack
    def test_from_relational(self, relation, expression, equality):
        constraint = from_relational(relation)
        self.assertEqual(sympy.expand(constraint.expression - expression), 0)
        self.assertEqual(constraint.equality, equality)

    def test_strict_relations_are_rejected(self):
        with self.assertRaises(MalformedInequality):
            from_relational(x < 3)
