"""
lattecount/backend/latte.py

Communication interface for LattE's `count`, a program for counting the
lattice points in a polytope.

More information about LattE: https://www.math.ucdavis.edu/~latte/
"""

import os
from subprocess import Popen
import sys
from typing import List, Optional, Tuple

from .backend_abc import Backend
from ..exceptions import ExternalToolFailure
from ..inequalities import parse_inequalities
from ..io.base import CoefficientMatrix, HalfspaceSystem, LinearSystem, \
    RawCode, Specification, SymbolicConstraints, VertexList
from ..matrices import build_coefficient_matrix, halfspace_matrix, \
    vertex_matrix
from ..options import CountOptions
from ..polynomials import parse_polynomial


LATTE_ENV = "LATTE_PATH"
"""Environment variable naming the directory which holds LattE's binaries."""


LATTE_PATH = os.getenv(LATTE_ENV)
"""User's LattE directory.  If unset, `count` is looked up on the PATH."""


CODE_FILENAME = "countCode.latte"
STDOUT_FILENAME = "countOut"
STDERR_FILENAME = "countErr"
COUNT_FILENAME = "numOfLatticePoints"
RATIONAL_FILENAME = CODE_FILENAME + ".rat"
STATS_FILENAME = "latte_stats"


BIG_INTEGER_DIGITS = 10
"""Counts with at least this many digits are returned as strings."""


def count_path() -> str:
    return "count" if LATTE_PATH is None else os.path.join(LATTE_PATH, "count")


def is_windows() -> bool:
    return sys.platform.startswith("win")


def cygwin_path(path: str) -> str:
    """Rewrites a Windows path `C:\\a\\b` as `/cygdrive/c/a/b`."""
    path = path.replace("\\", "/")
    if len(path) >= 2 and path[1] == ":":
        return f"/cygdrive/{path[0].lower()}{path[2:]}"
    return path


def count_invocation(code_path: str, flags: List[str]) -> List[str]:
    """
    Builds the argument vector for a `count` run.  On Windows, LattE lives
    inside cygwin and has to be reached through its `env.exe`.
    """
    if is_windows():
        return ["cmd.exe", "/c", "env.exe", count_path(), *flags,
                cygwin_path(code_path)]
    return [count_path(), *flags, code_path]


class LattEBackend(Backend):
    def count(self, code_path: str, flags: List[str], working_directory: str,
              chatty: bool = False):
        invocation = count_invocation(code_path, flags)
        if chatty:
            print("=== COUNT CALL ===")
            print(" ".join(invocation))

        with open(os.path.join(working_directory, STDOUT_FILENAME), "wb") \
                as stdout, \
                open(os.path.join(working_directory, STDERR_FILENAME), "wb") \
                as stderr:
            try:
                proc = Popen(invocation, cwd=working_directory,
                             stdout=stdout, stderr=stderr)
            except OSError as e:
                raise ExternalToolFailure(
                    f"Couldn't run LattE's `count` ({count_path()}); set "
                    f"{LATTE_ENV} to the directory containing it.",
                    working_directory=working_directory,
                ) from e
            returncode = proc.wait()

        if returncode != 0:
            stderr_text = read_text(working_directory, STDERR_FILENAME)
            message = f"`count` exited with status {returncode}; see " \
                      f"{working_directory}."
            if chatty:
                message += "\n" + stderr_text
            raise ExternalToolFailure(
                message,
                returncode=returncode,
                stderr=stderr_text,
                working_directory=working_directory,
            )


#
# encoding
#


def encode_matrix(matrix: CoefficientMatrix) -> str:
    """
    Format `matrix` for consumption by `count`: a header line with the table
    dimensions, the rows, and then the `linearity` directive if any rows are
    equalities.
    """
    rows, columns = matrix.shape
    output = f"{rows} {columns}\n"
    for row in matrix.rows:
        output += " ".join([str(x) for x in row]) + "\n"
    if 0 < len(matrix.linearity):
        output += f"linearity {len(matrix.linearity)} " \
                  f"{' '.join([str(i) for i in matrix.linearity])}\n"
    return output


def encode_vertices(points) -> str:
    """Format the vertex list `points` for consumption by `count --vrep`."""
    return encode_matrix(vertex_matrix(points))


def encode_halfspaces(A, b) -> str:
    """Format the system A x <= b for consumption by `count`."""
    return encode_matrix(halfspace_matrix(A, b))


def encode_specification(
        specification: Specification
) -> Tuple[str, Optional[List[str]]]:
    """
    Produces the `count` input for `specification`, together with the names
    of the variables its columns stand for (when those are known).
    """
    if isinstance(specification, RawCode):
        return specification.text, None
    if isinstance(specification, HalfspaceSystem):
        return encode_halfspaces(specification.A, specification.b), None
    if isinstance(specification, VertexList):
        return encode_vertices(specification.points), None
    if isinstance(specification, SymbolicConstraints):
        constraints = parse_inequalities(specification.expressions)
    elif isinstance(specification, LinearSystem):
        constraints = specification.constraints
    else:
        raise TypeError(f"Unknown specification type "
                        f"{type(specification).__name__}.")
    matrix = build_coefficient_matrix(constraints)
    return encode_matrix(matrix), matrix.variables


#
# decoding
#


def read_text(working_directory: str, filename: str) -> str:
    """Reads an output file of `count`, complaining if it's missing."""
    path = os.path.join(working_directory, filename)
    try:
        with open(path, "r") as f:
            return f.read()
    except FileNotFoundError as e:
        raise ExternalToolFailure(
            f"`count` did not produce {filename}; see {working_directory}.",
            working_directory=working_directory,
        ) from e


def read_lines(working_directory: str, filename: str) -> List[str]:
    return read_text(working_directory, filename).splitlines()


def decode_count(lines: List[str]):
    """
    Parse the contents of `numOfLatticePoints`.  Small counts come back as
    `int`s; counts of BIG_INTEGER_DIGITS or more digits come back as strings.
    """
    text = "".join(lines).strip()
    if not text.lstrip("-").isdigit():
        raise ExternalToolFailure(f"Can't read a count out of {text!r}.")
    if len(text) < BIG_INTEGER_DIGITS:
        return int(text)
    return text


def decode_ehrhart_polynomial(lines: List[str], as_polynomial=True):
    """
    Parse the stdout of `count --ehrhart-polynomial`, where the polynomial is
    printed on the next-to-last line.
    """
    if len(lines) < 2:
        raise ExternalToolFailure("`count` printed no Ehrhart polynomial.")
    raw_polynomial = lines[-2].replace(" * ", " ")
    if raw_polynomial[:5] == " + 1 ":
        raw_polynomial = raw_polynomial[5:]
    raw_polynomial = raw_polynomial.strip()
    if not as_polynomial:
        return raw_polynomial
    return parse_polynomial(raw_polynomial)


def decode_ehrhart_series(lines: List[str]) -> str:
    """
    Parse the `.rat` file of `count --ehrhart-series`, which reads
    `x := <rational function>:`.  Always raw, since the series is generally
    not a polynomial.
    """
    output = "".join(lines).strip()
    return output[5:-1]


def decode_generating_function(lines: List[str],
                               variables: Optional[List[str]] = None) -> str:
    """
    Parse the `.rat` file of `count --multivariate-generating-function`.  If
    `variables` are supplied, LattE's `x[0], x[1], ...` are replaced by them.
    """
    output = "".join(lines)
    for index, variable in enumerate(variables or []):
        output = output.replace(f"x[{index}]", variable)
    return output


def decode_taylor_series(lines: List[str], as_polynomial=True):
    """
    Parse the stdout of `count --ehrhart-taylor=n`, which prints one term of
    the series per line.
    """
    output = " + ".join(lines)
    output = output.replace("t", " t")
    if not as_polynomial:
        return output
    return parse_polynomial(output)


OUTPUT_KINDS = [
    "ehrhart_polynomial",
    "ehrhart_series",
    "multivariate_generating_function",
    "ehrhart_taylor",
]
"""Options which change what `count` outputs, in order of precedence."""


def output_kind(options: CountOptions) -> str:
    """
    Names the first of OUTPUT_KINDS requested in `options`, or "count" for a
    plain count.
    """
    return next((kind for kind in OUTPUT_KINDS if kind in options), "count")


def decode_output(options: CountOptions, working_directory: str,
                  as_polynomial=True, variables=None):
    """
    Reads back the result of a `count` run with `options` from the files left
    in `working_directory`.
    """
    kind = output_kind(options)
    if kind == "ehrhart_polynomial":
        return decode_ehrhart_polynomial(
            read_lines(working_directory, STDOUT_FILENAME), as_polynomial
        )
    if kind == "ehrhart_series":
        return decode_ehrhart_series(
            read_lines(working_directory, RATIONAL_FILENAME)
        )
    if kind == "multivariate_generating_function":
        return decode_generating_function(
            read_lines(working_directory, RATIONAL_FILENAME),
            variables if as_polynomial else None,
        )
    if kind == "ehrhart_taylor":
        return decode_taylor_series(
            read_lines(working_directory, STDOUT_FILENAME), as_polynomial
        )
    return decode_count(read_lines(working_directory, COUNT_FILENAME))
