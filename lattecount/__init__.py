"""
lattecount/__init__.py

Top-level imports for `lattecount`.
"""

from lattecount.backend.latte import LattEBackend
import lattecount.backend

lattecount.backend.backend = LattEBackend()

from lattecount.counting import count, count_core, fcount
from lattecount.exceptions import ExternalToolFailure, \
    InconsistentVertexDimension, MalformedInequality, NonLinearConstraint, \
    UnrecognizedSpecification, UnsupportedOption
