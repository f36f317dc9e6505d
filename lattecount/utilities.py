"""
lattecount/utilities.py

Depository for generic python utility snippets.
"""

from datetime import datetime
from fractions import Fraction
from functools import wraps
import math
import os
from typing import List

import numpy as np
import sympy


def exact(value):
    """
    Converts a number of any of the flavors we're likely to be handed (python,
    numpy, sympy) into an `int` when it's integral and a `Fraction` otherwise.

    NOTE: This can be poorly behaved if your rationals don't have exact floating
          point representations!
    """
    if isinstance(value, sympy.Basic):
        value = sympy.Rational(value)
        value = Fraction(int(value.p), int(value.q))
    elif isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool):
        raise TypeError(f"Expected a number, got {value!r}.")
    value = Fraction(value)
    return value.numerator if value.denominator == 1 else value


def lcm(*numbers):
    assert 1 <= len(numbers)
    ret = numbers[0]
    for number in numbers[1:]:
        ret = ret * number // math.gcd(ret, number)
    return ret


def integralize(row) -> List[int]:
    """
    Rescales `row` by the (positive) lcm of its denominators, so that it
    consists of integers but describes the same half-space.
    """
    row = [Fraction(exact(x)) for x in row]
    row_lcm = abs(lcm(*[x.denominator for x in row])) if row else 1
    return [int(x * row_lcm) for x in row]


def canonicalize(value):
    """
    Rewrites `value` into something hashable which compares equal exactly when
    the inputs do, for use as a cache key.
    """
    if isinstance(value, np.ndarray):
        return ("ndarray", value.shape, tuple(value.flat))
    if isinstance(value, dict):
        # keys may be of mixed, mutually unorderable types
        return ("dict", tuple(sorted(((k, canonicalize(v))
                                      for k, v in value.items()),
                                     key=lambda item: repr(item[0]))))
    if isinstance(value, (list, tuple)):
        return (type(value).__name__, tuple(canonicalize(v) for v in value))
    if isinstance(value, (set, frozenset)):
        return ("set", frozenset(canonicalize(v) for v in value))
    if hasattr(value, "__dataclass_fields__"):
        return (type(value).__name__,
                tuple((name, canonicalize(getattr(value, name)))
                      for name in value.__dataclass_fields__))
    return value


def memoize(function, cache=None):
    """
    Wraps `function` so that repeated calls with equal arguments are answered
    from `cache` (any mutable mapping; an unbounded `dict` by default).  The
    key is the canonicalized tuple of positional and sorted keyword arguments.
    """
    cache = {} if cache is None else cache

    @wraps(function)
    def memoized_function(*args, **kwargs):
        key = (canonicalize(args), canonicalize(kwargs))
        if key not in cache:
            cache[key] = function(*args, **kwargs)
        return cache[key]

    memoized_function.cache = cache
    memoized_function.cache_clear = cache.clear
    return memoized_function


def time_stamp() -> str:
    return datetime.now().strftime("%Y_%m_%d_%H_%M_%S_%f")


def make_working_directory(parent: str) -> str:
    """
    Creates and returns a fresh, timestamped subdirectory of `parent`.
    """
    stamp = time_stamp()
    path = os.path.join(parent, stamp)
    suffix = 0
    while True:
        try:
            os.makedirs(path)
            return path
        except FileExistsError:
            suffix += 1
            path = os.path.join(parent, f"{stamp}_{suffix}")
