"""
lattecount/classify.py

Decides which kind of polytope specification a loosely-typed input describes.

The rules are applied in a fixed order, first match wins:

 1. a string is raw LattE code;
 2. a pair (A, b) (a mapping with keys "A" and "b", or a 2-sequence of a
    matrix and a vector) is a halfspace system A x <= b, and any `vrep`
    request is dropped;
 3. anything else, when `vrep` was requested, is a vertex list;
 4. a sequence of neither strings nor sympy expressions is *also* taken to be
    a vertex list, with a warning, and `vrep` is switched on;
 5. a sequence of strings is a list of symbolic constraints;
 6. a sequence of sympy expressions or relations is a list of linear
    constraints, bare expressions being read as `<= 0`.

NOTE: Rule 4 is a guess.  It's the most common alternative form, but nothing
      verifies that an arbitrary sequence really is a list of vertices.
"""

from collections.abc import Mapping
from typing import Tuple
import warnings

import numpy as np
import sympy

from .exceptions import UnrecognizedSpecification
from .inequalities import from_relational
from .io.base import HalfspaceSystem, LinearSystem, ParsedConstraint, RawCode, \
    Specification, SymbolicConstraints, VertexList
from .options import CountOptions


def _ndim(value):
    try:
        return np.ndim(value)
    except ValueError:  # ragged
        return None


def as_halfspace_system(spec):
    """
    Returns the HalfspaceSystem described by `spec`, or None if it isn't one.
    """
    if isinstance(spec, Mapping):
        if len(spec) == 2 and "A" in spec and "b" in spec:
            return HalfspaceSystem(A=spec["A"], b=spec["b"])
        return None
    if isinstance(spec, (list, tuple)) and len(spec) == 2 and \
            _ndim(spec[0]) == 2 and _ndim(spec[1]) == 1:
        return HalfspaceSystem(A=spec[0], b=spec[1])
    return None


def is_sequence(spec) -> bool:
    return isinstance(spec, (list, tuple, np.ndarray))


def is_text_sequence(spec) -> bool:
    return is_sequence(spec) and len(spec) > 0 and \
        all(isinstance(item, str) for item in spec)


def is_expression_sequence(spec) -> bool:
    return is_sequence(spec) and len(spec) > 0 and \
        all(isinstance(item, (sympy.Basic, ParsedConstraint)) for item in spec)


def classify_specification(
        spec,
        options: CountOptions,
        stacklevel: int = 2,
) -> Tuple[Specification, CountOptions]:
    """
    Wraps `spec` in the appropriate Specification subclass.  Returns it
    alongside `options`, which are updated to request `--vrep` whenever the
    result is a VertexList, and never for a HalfspaceSystem.  The vertex
    fallback warning is attributed `stacklevel` frames up, as with
    `warnings.warn`.

    Raises UnrecognizedSpecification when no rule applies.
    """
    if isinstance(spec, Specification):
        if isinstance(spec, VertexList) and "vrep" not in options:
            options = options.with_option("vrep")
        if isinstance(spec, HalfspaceSystem) and "vrep" in options:
            options = options.with_option("vrep", False)
        return spec, options

    if isinstance(spec, str):
        return RawCode(text=spec), options

    halfspace_system = as_halfspace_system(spec)
    if halfspace_system is not None:
        # the [b | -A] rows are not homogenized vertices
        if "vrep" in options:
            options = options.with_option("vrep", False)
        return halfspace_system, options

    if "vrep" in options:
        if not is_sequence(spec):
            raise UnrecognizedSpecification(
                f"Expected a list of vertices, got {type(spec).__name__}."
            )
        return VertexList(points=list(spec)), options

    if is_sequence(spec) and not is_text_sequence(spec) and \
            not is_expression_sequence(spec):
        warnings.warn("Undeclared vertex specification, setting vrep = True.",
                      UserWarning, stacklevel=stacklevel)
        return VertexList(points=list(spec)), options.with_option("vrep")

    if is_text_sequence(spec):
        return SymbolicConstraints(expressions=list(spec)), options

    if is_expression_sequence(spec):
        return LinearSystem(constraints=[
            item if isinstance(item, ParsedConstraint)
            else from_relational(item)
            for item in spec
        ]), options

    raise UnrecognizedSpecification(
        f"Can't make a polytope out of a {type(spec).__name__}."
    )
