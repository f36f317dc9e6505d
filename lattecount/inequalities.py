"""
lattecount/inequalities.py

Parsing of human-readable constraints like "x + y <= 10" into expressions
which are required to be nonpositive (or zero).
"""

import re
from typing import List

import sympy

from .exceptions import MalformedInequality
from .io.base import ParsedConstraint
from .polynomials import ordered_symbols, parse_polynomial


relation_pattern = re.compile(r"\s*(>=|<=|==|=)\s*")
"""
Recognized relations, longest first so that ">=" is never read as "=".
"""


def parse_inequality(text: str) -> ParsedConstraint:
    """
    Rewrites a single constraint into the form `expression <= 0`:

        L >= R  becomes  R - L <= 0,
        L <= R  becomes  L - R <= 0,
        L == R  becomes  L - R == 0  (also accepted as L = R).

    Raises MalformedInequality unless `text` contains exactly one relation.
    """
    relations = relation_pattern.findall(text)
    if 1 != len(relations):
        raise MalformedInequality(
            f"Expected exactly one of >=, <=, ==, = in {text!r}, "
            f"found {len(relations)}."
        )
    relation = relations[0]
    left_text, right_text = relation_pattern.split(text)[::2]
    if left_text.strip() == "" or right_text.strip() == "":
        raise MalformedInequality(f"Constraint {text!r} is missing a side.")

    try:
        left = parse_polynomial(left_text)
        right = parse_polynomial(right_text)
    except ValueError as e:
        raise MalformedInequality(f"Can't parse constraint {text!r}.") from e

    if relation == ">=":
        expression = right - left
    else:
        expression = left - right

    return ParsedConstraint(
        expression=expression,
        equality=relation in ("==", "="),
        variables=ordered_symbols(sympy.Tuple(left, right), text=text),
    )


def parse_inequalities(texts: List[str]) -> List[ParsedConstraint]:
    """Parses each of `texts` in turn.  See `parse_inequality`."""
    return [parse_inequality(text) for text in texts]


def linearity_indices(constraints: List[ParsedConstraint]) -> List[int]:
    """1-based indices of the equality constraints among `constraints`."""
    return [1 + index for index, constraint in enumerate(constraints)
            if constraint.equality]


def from_relational(relation: sympy.Basic) -> ParsedConstraint:
    """
    Rewrites a sympy relation (`x + y <= 10`, `sympy.Eq(x, 1)`) or a bare
    expression (read as `<= 0`) in the same form as `parse_inequality`.
    """
    if isinstance(relation, sympy.GreaterThan):
        expression = relation.rhs - relation.lhs
    elif isinstance(relation, (sympy.LessThan, sympy.Equality)):
        expression = relation.lhs - relation.rhs
    elif isinstance(relation, sympy.core.relational.Relational):
        raise MalformedInequality(
            f"Only >=, <=, and == are supported, not {relation}."
        )
    else:
        expression = relation
    return ParsedConstraint(
        expression=expression,
        equality=isinstance(relation, sympy.Equality),
        variables=ordered_symbols(relation, text=str(relation)),
    )
