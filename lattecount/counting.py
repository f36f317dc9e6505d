"""
lattecount/counting.py

Counting the lattice points in a polytope (and computing its Ehrhart
polynomial, Ehrhart series, ...) with LattE's `count`.
"""

import os
import tempfile
import warnings

import lattecount.backend
from .backend.latte import CODE_FILENAME, STATS_FILENAME, STDERR_FILENAME, \
    STDOUT_FILENAME, decode_output, encode_specification, output_kind
from .classify import classify_specification
from .options import build_options
from .utilities import make_working_directory, memoize


def _echo(working_directory, filename):
    path = os.path.join(working_directory, filename)
    if os.path.exists(path):
        with open(path, "r") as f:
            print(f.read())


def _count(spec, directory, chatty, as_polynomial, kwargs, stacklevel):
    # warnings are attributed `stacklevel` frames up from here, to the caller
    # of the public entry point
    options = build_options(**kwargs)
    options.check_supported()

    if "ehrhart_series" in options and as_polynomial:
        warnings.warn("sympy can't handle rational functions; reverting to raw "
                      "output.", UserWarning, stacklevel=stacklevel)
        as_polynomial = False

    specification, options = classify_specification(
        spec, options, stacklevel=stacklevel + 1
    )
    code, variables = encode_specification(specification)

    # `count` runs inside the working directory, so its paths must not be
    # relative to ours
    directory = os.path.abspath(
        tempfile.gettempdir() if directory is None else directory
    )
    working_directory = make_working_directory(directory)
    code_path = os.path.join(working_directory, CODE_FILENAME)
    with open(code_path, "w") as f:
        f.write(code)

    if chatty:
        print("=== COUNT CODE ===")
        print(code)

    lattecount.backend.backend.count(
        code_path, options.to_flags(), working_directory, chatty=chatty
    )

    if chatty:
        _echo(working_directory, STDERR_FILENAME)
        _echo(working_directory, STDOUT_FILENAME)

    result = decode_output(options, working_directory,
                           as_polynomial=as_polynomial, variables=variables)

    if chatty and output_kind(options) == "count":
        _echo(working_directory, STATS_FILENAME)

    return result


def count_core(spec, directory=None, chatty=False, as_polynomial=True,
               **kwargs):
    """
    Counts the lattice points in the polytope described by `spec`, which may
    be any of:

     + a list of strings, each an (in)equality like "x + y <= 10";
     + a list of vertices, each a sequence of coordinates;
     + a pair (A, b) or a mapping {"A": A, "b": b}, describing A x <= b;
     + a single string of raw LattE code;
     + a list of sympy expressions (read as `<= 0`) or relations.

    Remaining keyword arguments become `count` flags, with underscores
    replaced by dashes: `count(spec, ehrhart_taylor=2)` runs
    `count --ehrhart-taylor=2`.  Flags which take no value are passed as
    `flag=True`.

    Returns an `int` for counts of fewer than 10 digits and a string of digits
    otherwise.  With `ehrhart_polynomial` or `ehrhart_taylor`, returns a sympy
    expression in `t` (or, if `as_polynomial` is False, its raw string).  With
    `ehrhart_series` or `multivariate_generating_function`, returns a string.

    Each call works in a fresh timestamped subdirectory of `directory` (by
    default, the system temporary directory), which is left behind afterward.
    If `chatty` is toggled, echoes LattE's input and output.
    """
    return _count(spec, directory, chatty, as_polynomial, kwargs,
                  stacklevel=3)


fcount = count_core
"""Unmemoized `count_core`, for when the side effects are wanted."""


@memoize
def count(spec, directory=None, chatty=False, as_polynomial=True, **kwargs):
    """
    Memoized `count_core`: repeated calls with equal arguments don't rerun.
    """
    # one frame deeper than count_core, for the memoizing wrapper
    return _count(spec, directory, chatty, as_polynomial, kwargs,
                  stacklevel=4)
