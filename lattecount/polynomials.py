"""
lattecount/polynomials.py

Thin layer over `sympy` for the handful of polynomial manipulations we need:
parsing constraint sides and LattE output, inspecting degrees, and pulling out
linear coefficients in a fixed variable order.
"""

import re
from tokenize import TokenError
from typing import List, Optional, Tuple

import sympy
from sympy.parsing.sympy_parser import convert_xor, implicit_multiplication, \
    parse_expr, rationalize, standard_transformations


transformations = standard_transformations + (
    implicit_multiplication,  # "3 t" means 3 * t, but "xy" stays one symbol
    convert_xor,              # "t^2" means t ** 2
    rationalize,              # "0.5 x" gets an exact coefficient
)
"""Parser settings matching the way LattE and people write polynomials."""


identifier_pattern = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def identifiers(text: str) -> List[str]:
    """
    Lists the distinct identifiers appearing in `text`, in order of first
    appearance.
    """
    seen = []
    for match in identifier_pattern.finditer(text):
        if match.group(0) not in seen:
            seen.append(match.group(0))
    return seen


def parse_polynomial(text: str) -> sympy.Expr:
    """
    Parses `text` into a sympy expression.  Every identifier is read as a
    plain symbol, so that names like `I`, `E`, or `S` aren't mistaken for
    sympy constants.
    """
    local_dict = {name: sympy.Symbol(name) for name in identifiers(text)}
    try:
        return parse_expr(text, local_dict=local_dict,
                          transformations=transformations)
    except (SyntaxError, TokenError, TypeError) as e:
        raise ValueError(f"Can't parse {text!r} as a polynomial.") from e


def render_polynomial(expression: sympy.Expr) -> str:
    """Renders `expression` back into the caret notation LattE uses."""
    return str(expression).replace("**", "^")


def ordered_symbols(expression: sympy.Expr,
                    text: Optional[str] = None) -> List[sympy.Symbol]:
    """
    Lists the free symbols of `expression`.  If the source `text` is known,
    they're ordered by first appearance in it; otherwise, alphabetically.
    """
    symbols = sorted(expression.free_symbols, key=lambda s: s.name)
    if text is None:
        return symbols
    positions = {name: index for index, name in enumerate(identifiers(text))}
    return sorted(symbols, key=lambda s: positions.get(s.name, len(positions)))


def degree(expression: sympy.Expr) -> int:
    """
    Total degree of `expression`.  Non-polynomial input (e.g., 1/x) is
    reported as having infinite degree.
    """
    symbols = ordered_symbols(expression)
    if 0 == len(symbols):
        return 0
    try:
        return sympy.Poly(expression, *symbols).total_degree()
    except sympy.PolynomialError:
        return float("inf")


def is_linear(expression: sympy.Expr) -> bool:
    return degree(expression) <= 1


def linear_coefficients(
        expression: sympy.Expr,
        variables: List[sympy.Symbol],
) -> Tuple[sympy.Rational, List[sympy.Rational]]:
    """
    Splits the linear `expression` into its constant term and the list of its
    coefficients against `variables`, in order.  Absent variables get 0.
    """
    expanded = sympy.expand(expression)
    constant = expanded.subs({v: 0 for v in variables})
    coefficients = [expanded.coeff(v, 1).subs({w: 0 for w in variables})
                    for v in variables]
    return sympy.Rational(constant), [sympy.Rational(c) for c in coefficients]
