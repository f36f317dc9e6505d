"""
lattecount/matrices.py

Conversion of linear constraints, halfspace systems, and vertex lists into the
integer tables that LattE consumes.
"""

from typing import List

import numpy as np
import sympy

from .exceptions import NonLinearConstraint
from .inequalities import linearity_indices
from .io.base import CoefficientMatrix, ParsedConstraint
from .polynomials import is_linear, linear_coefficients, ordered_symbols, \
    render_polynomial
from .utilities import exact, integralize


def collect_variables(constraints: List[ParsedConstraint]) -> List[sympy.Symbol]:
    """
    Lists the symbols appearing across `constraints`, in order of first
    appearance.
    """
    variables = []
    for constraint in constraints:
        free_symbols = constraint.expression.free_symbols
        # symbols which cancelled out of the expression don't count
        for variable in [*constraint.variables,
                         *ordered_symbols(constraint.expression)]:
            if variable in free_symbols and variable not in variables:
                variables.append(variable)
    return variables


def build_coefficient_matrix(
        constraints: List[ParsedConstraint]
) -> CoefficientMatrix:
    """
    Converts a list of constraints `expression <= 0` (or `== 0`) into the
    table with rows

        [-constant, -coefficient_1, ..., -coefficient_n],

    i.e., the [b, -A] form of A x <= b.  Raises NonLinearConstraint if any of
    the expressions is not linear.
    """
    for index, constraint in enumerate(constraints):
        if not is_linear(constraint.expression):
            raise NonLinearConstraint(
                f"All polynomials must be linear; constraint {1 + index} is "
                f"{render_polynomial(constraint.expression)} <= 0."
            )

    variables = collect_variables(constraints)
    rows = []
    for constraint in constraints:
        constant, coefficients = linear_coefficients(constraint.expression,
                                                     variables)
        rows.append(integralize([-constant, *[-c for c in coefficients]]))

    return CoefficientMatrix(
        rows=rows,
        variables=[v.name for v in variables],
        linearity=linearity_indices(constraints),
    )


def halfspace_matrix(A, b) -> CoefficientMatrix:
    """
    Builds the table [b | -A] for the system A x <= b.
    """
    A = np.asarray(A, dtype=object)
    b = np.asarray(b, dtype=object).reshape(-1)
    if A.ndim != 2 or A.shape[0] != b.shape[0]:
        raise ValueError(f"A (shape {A.shape}) and b (shape {b.shape}) don't "
                         f"describe a system A x <= b.")
    rows = [integralize([b_entry, *[-exact(a) for a in A_row]])
            for A_row, b_entry in zip(A.tolist(), b.tolist())]
    return CoefficientMatrix(rows=rows)


def vertex_matrix(points) -> CoefficientMatrix:
    """
    Homogenizes a list of vertices by prefixing each with a 1.
    """
    return CoefficientMatrix(
        rows=[[1, *[exact(x) for x in point]] for point in points]
    )
