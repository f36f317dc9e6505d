"""
test/test_counting.py

Tests for lattecount/counting.py , run against a brute-force stand-in for
LattE so that they don't require LattE to be installed.
"""

from contextlib import redirect_stdout
from fractions import Fraction
import io
import itertools
import os
import shutil
import tempfile
import warnings

import ddt
import unittest

import numpy as np
from scipy.spatial import ConvexHull
import sympy

import lattecount
import lattecount.backend
from lattecount.backend.backend_abc import Backend
from lattecount.backend.latte import CODE_FILENAME, COUNT_FILENAME, \
    RATIONAL_FILENAME, STATS_FILENAME, STDERR_FILENAME, STDOUT_FILENAME
from lattecount.counting import *
from lattecount.exceptions import ExternalToolFailure, \
    InconsistentVertexDimension, MalformedInequality, NonLinearConstraint, \
    UnrecognizedSpecification, UnsupportedOption

t = sympy.Symbol("t")


class BruteForceBackend(Backend):
    """
    Counts lattice points by checking every point of a bounding box.  Only
    understands the flags `--vrep`, `--dilation`, `--ehrhart-taylor`, and (by
    emitting a canned answer) the rational function flags.
    """

    def __init__(self, radius=120, rational_output="x := 1/(1-t)^3:"):
        self.radius = radius
        self.rational_output = rational_output
        self.calls = []

    @staticmethod
    def read_code(code_path):
        with open(code_path, "r") as f:
            lines = [line.split() for line in f.read().splitlines()
                     if line.strip() != ""]
        rows, _ = int(lines[0][0]), int(lines[0][1])
        table = [[Fraction(x) for x in line] for line in lines[1:1 + rows]]
        linearity = []
        for line in lines[1 + rows:]:
            if line[0] == "linearity":
                linearity = [int(x) - 1 for x in line[2:]]
        return table, linearity

    def count_hyperplanes(self, table, linearity, dilation):
        table = np.array(table, dtype=float)
        b, negative_A = table[:, 0] * dilation, table[:, 1:]
        axis = np.arange(-self.radius, self.radius + 1)
        points = np.array(list(itertools.product(axis,
                                                 repeat=negative_A.shape[1])))
        values = points @ negative_A.T + b
        inside = np.all(values >= -1e-9, axis=1)
        for index in linearity:
            inside &= np.abs(values[:, index]) <= 1e-9
        return int(np.sum(inside))

    @staticmethod
    def count_vertices(table, dilation):
        table = np.array(table, dtype=float)
        vertices = table[:, 1:] / table[:, :1] * dilation
        hull = ConvexHull(vertices)
        axes = [np.arange(np.floor(low), np.ceil(high) + 1)
                for low, high in zip(vertices.min(axis=0),
                                     vertices.max(axis=0))]
        points = np.array(list(itertools.product(*axes)))
        values = points @ hull.equations[:, :-1].T + hull.equations[:, -1]
        return int(np.sum(np.all(values <= 1e-9, axis=1)))

    def lattice_points(self, code_path, flags, dilation):
        table, linearity = self.read_code(code_path)
        if "--vrep" in flags:
            return self.count_vertices(table, dilation)
        return self.count_hyperplanes(table, linearity, dilation)

    def count(self, code_path, flags, working_directory, chatty=False):
        self.calls.append((code_path, flags))
        settings = dict(flag[2:].split("=") for flag in flags if "=" in flag)
        dilation = int(settings.get("dilation", 1))

        def write(filename, contents):
            with open(os.path.join(working_directory, filename), "w") as f:
                f.write(contents)

        write(STDERR_FILENAME, "brute force\n")
        if "ehrhart-taylor" in settings:
            terms = ["1"] + [
                f"{self.lattice_points(code_path, flags, k * dilation)}t^{k}"
                for k in range(1, int(settings["ehrhart-taylor"]))
            ]
            write(STDOUT_FILENAME, "\n".join(terms) + "\n")
            return
        write(STDOUT_FILENAME, "done\n")
        if "--ehrhart-series" in flags or \
                "--multivariate-generating-function" in flags:
            write(RATIONAL_FILENAME, self.rational_output + "\n")
            return
        write(COUNT_FILENAME,
              f"{self.lattice_points(code_path, flags, dilation)}\n")
        write(STATS_FILENAME, "Computation done.\n")


@ddt.ddt
class TestLattECountCounting(unittest.TestCase):
    """Check `count` end to end, with LattE swapped for a brute force count."""

    triangle = ["x + y <= 10", "x >= 1", "y >= 1"]
    square = [(1, 1), (10, 1), (1, 10), (10, 10)]

    def setUp(self):
        self.directory = tempfile.mkdtemp()
        self.original_backend = lattecount.backend.backend
        self.backend = BruteForceBackend()
        lattecount.backend.backend = self.backend
        count.cache_clear()

    def tearDown(self):
        lattecount.backend.backend = self.original_backend
        count.cache_clear()
        shutil.rmtree(self.directory)

    def count(self, spec, **kwargs):
        return fcount(spec, directory=self.directory, **kwargs)

    def written_code(self):
        code_path, _ = self.backend.calls[-1]
        with open(code_path, "r") as f:
            return f.read()

    def test_triangle(self):
        self.assertEqual(self.count(self.triangle), 45)
        self.assertEqual(self.written_code(),
                         "3 3\n10 -1 -1\n-1 1 0\n-1 0 1\n")

    def test_dilated_triangle(self):
        self.assertEqual(self.count(self.triangle, dilation=10), 3321)
        self.assertEqual(self.backend.calls[-1][1], ["--dilation=10"])

    def test_undeclared_vertices(self):
        with self.assertWarns(UserWarning):
            result = self.count(self.square)
        self.assertEqual(result, 100)
        self.assertIn("--vrep", self.backend.calls[-1][1])
        self.assertEqual(self.written_code().splitlines()[0], "4 3")

    def test_declared_vertices(self):
        self.assertEqual(self.count(self.square, vrep=True), 100)

    def test_vertex_warning_names_the_caller(self):
        for function in [fcount, count]:
            with self.assertWarns(UserWarning) as context:
                function(self.square, directory=self.directory)
            self.assertEqual(os.path.basename(context.filename),
                             "test_counting.py")

    def test_each_vertex_fallback_warns(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("default")
            fcount(self.square, directory=self.directory)
            fcount([(0, 0), (2, 0), (0, 2)], directory=self.directory)
        fallbacks = [w for w in caught
                     if "Undeclared vertex" in str(w.message)]
        self.assertEqual(2, len(fallbacks))

    def test_halfspace_system_ignores_vrep(self):
        square = {"A": [[-1, 0], [1, 0], [0, -1], [0, 1]],
                  "b": [-1, 10, -1, 10]}
        self.assertEqual(self.count(square, vrep=True), 100)
        self.assertNotIn("--vrep", self.backend.calls[-1][1])

    def test_inconsistent_vertices(self):
        with self.assertRaises(InconsistentVertexDimension):
            self.count([(1, 1), (2, 2, 2)], vrep=True)
        self.assertEqual([], os.listdir(self.directory))

    @ddt.data(({"A": [[1, 0], [0, 1], [1, 1], [-1, 0], [0, -1]],
                "b": [1, 1, 1, 0, 0]},
               [(0, 0), (1, 0), (0, 1)]),
              ({"A": [[-1, 0], [1, 0], [0, -1], [0, 1]],
                "b": [-1, 10, -1, 10]},
               [(1, 1), (10, 1), (1, 10), (10, 10)]),
              (["x >= 0", "y >= 0", "x + 2 y <= 4"],
               [(0, 0), (4, 0), (0, 2)]))
    @ddt.unpack
    def test_representations_agree(self, hyperplanes, vertices):
        """Counting by inequalities and by vertices gives the same answer."""
        self.assertEqual(self.count(hyperplanes),
                         self.count(vertices, vrep=True))

    def test_raw_code(self):
        """Check the example from p. 10 of the LattE manual."""
        code = "\n5 3\n1 -1  0\n1  0 -1\n1 -1 -1\n0  1  0\n0  0  1\n"
        self.assertEqual(self.count(code), 3)
        self.assertEqual(self.written_code(), code)

    def test_equalities(self):
        self.assertEqual(self.count(["x + y == 4", "x >= 0", "y >= 0"]), 5)
        self.assertEqual(self.written_code().splitlines()[-1], "linearity 1 1")

    def test_sympy_relations(self):
        x, y = sympy.symbols("x y")
        self.assertEqual(self.count([x + y <= 10, x >= 1, y >= 1]), 45)

    def test_ehrhart_taylor(self):
        polynomial = self.count(self.triangle, ehrhart_taylor=2)
        self.assertEqual(polynomial, 1 + 45 * t)
        self.assertEqual(len(sympy.Poly(polynomial, t).terms()), 2)
        self.assertEqual(self.count(self.triangle, ehrhart_taylor=2,
                                    as_polynomial=False), "1 + 45 t^1")

    def test_ehrhart_series_is_raw(self):
        with self.assertWarns(UserWarning) as context:
            series = self.count(self.triangle, ehrhart_series=True)
        self.assertEqual(series, "1/(1-t)^3")
        self.assertEqual(os.path.basename(context.filename),
                         "test_counting.py")

    def test_generating_function_variables(self):
        self.backend.rational_output = "x[0]*x[1]/((1-x[0])*(1-x[1]))"
        result = self.count(["a + b <= 10", "a >= 1", "b >= 1"],
                            multivariate_generating_function=True)
        self.assertEqual(result, "a*b/((1-a)*(1-b))")

    def test_unsupported_option_fails_early(self):
        with self.assertRaises(UnsupportedOption):
            self.count(self.triangle, simplified_ehrhart_polynomial=True)
        self.assertEqual([], os.listdir(self.directory))
        self.assertEqual([], self.backend.calls)

    @ddt.data((["x * y <= 10", "x >= 1"], NonLinearConstraint),
              (["x + y < 10", "x >= 1"], MalformedInequality))
    @ddt.unpack
    def test_bad_constraints_fail_early(self, spec, error):
        with self.assertRaises(error):
            self.count(spec)
        self.assertEqual([], os.listdir(self.directory))
        self.assertEqual([], self.backend.calls)

    def test_relative_directory(self):
        original_directory = os.getcwd()
        os.chdir(self.directory)
        try:
            self.assertEqual(fcount(self.triangle, directory="runs"), 45)
        finally:
            os.chdir(original_directory)
        code_path, _ = self.backend.calls[-1]
        self.assertTrue(os.path.isabs(code_path))
        self.assertTrue(os.path.exists(code_path))
        self.assertEqual(["runs"], os.listdir(self.directory))

    def test_working_directory_is_kept(self):
        self.count(self.triangle)
        working_directories = os.listdir(self.directory)
        self.assertEqual(1, len(working_directories))
        self.assertIn(CODE_FILENAME, os.listdir(
            os.path.join(self.directory, working_directories[0])))

    def test_missing_output_is_a_failure(self):
        self.backend.count = lambda *args, **kwargs: None
        with self.assertRaises(ExternalToolFailure):
            self.count(self.triangle)

    def test_memoization(self):
        first = count(self.triangle, directory=self.directory)
        second = count(self.triangle, directory=self.directory)
        self.assertEqual(first, second)
        self.assertEqual(1, len(self.backend.calls))
        count(self.triangle, directory=self.directory, dilation=2)
        self.assertEqual(2, len(self.backend.calls))

    def test_mapping_with_mixed_keys(self):
        with self.assertRaises(UnrecognizedSpecification):
            count({1: [1], "A": [[1]]}, directory=self.directory)

    def test_chatty(self):
        output = io.StringIO()
        with redirect_stdout(output):
            self.count(self.triangle, chatty=True)
        self.assertIn("10 -1 -1", output.getvalue())
        self.assertIn("brute force", output.getvalue())
        self.assertIn("Computation done.", output.getvalue())

    def test_top_level_import(self):
        self.assertIs(lattecount.count, count)
        self.assertIs(lattecount.fcount, fcount)
