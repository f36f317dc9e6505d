"""
lattecount/io/base.py

Bare dataclasses which house the different polytope specifications accepted
by `count`.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import sympy

from ..exceptions import InconsistentVertexDimension, \
    UnrecognizedSpecification


class Specification:
    """
    Common ancestor of the polytope specifications.  Exactly one of these is
    handed to the encoder per call.
    """
    pass


@dataclass
class RawCode(Specification):
    """LattE code, passed through verbatim."""

    text: str


@dataclass
class VertexList(Specification):
    """
    A polytope described as the convex hull of `points`, each a tuple of
    rational coordinates of common length.
    """

    points: List[Tuple]

    def __post_init__(self):
        points = []
        for point in self.points:
            if isinstance(point, (str, bytes)) or \
                    not hasattr(point, "__len__"):
                raise UnrecognizedSpecification(
                    f"Vertex {point!r} is not a coordinate sequence."
                )
            points.append(tuple(point))
        if 0 == len(points):
            raise UnrecognizedSpecification("Vertex list is empty.")
        if len({len(point) for point in points}) != 1:
            raise InconsistentVertexDimension(
                "If providing a vertex specification, each point must have "
                "the same number of coordinates."
            )
        self.points = points

    @property
    def dimension(self) -> int:
        return len(self.points[0])


@dataclass
class HalfspaceSystem(Specification):
    """
    A polytope described as the solution set of A x <= b.
    """

    A: List[List]
    b: List


@dataclass
class SymbolicConstraints(Specification):
    """
    A polytope described by strings like "x + y <= 10", one per constraint.
    """

    expressions: List[str]


@dataclass
class ParsedConstraint:
    """
    The result of interpreting one constraint: `expression` <= 0, or
    `expression` == 0 when `equality` is set.

    `variables` records the order in which the symbols of `expression` first
    appeared in the source text.
    """

    expression: sympy.Expr
    equality: bool = False
    variables: List[sympy.Symbol] = field(default_factory=list)


@dataclass
class LinearSystem(Specification):
    """
    A polytope described by already-parsed constraints, each understood as
    `constraint.expression` <= 0 (or == 0).
    """

    constraints: List[ParsedConstraint]


@dataclass
class CoefficientMatrix:
    """
    The integer table handed to LattE.  Each row reads

        row[0] + sum_i row[i] * variables[i - 1] >= 0,

    which is the `[b, -A]` convention for A x <= b.  `linearity` lists the
    1-based indices of those rows which are instead equalities.
    """

    rows: List[List[int]]
    variables: List[str] = field(default_factory=list)
    linearity: List[int] = field(default_factory=list)

    @property
    def shape(self) -> Tuple[int, int]:
        return len(self.rows), (len(self.rows[0]) if self.rows else
                                1 + len(self.variables))

