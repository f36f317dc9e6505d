"""
lattecount/exceptions.py

Exception classes used throughout the project.
"""


class LattECountError(Exception):
    """Common ancestor of every error signaled by `lattecount`."""
    pass


class NonLinearConstraint(LattECountError, ValueError):
    """
    Signaled when a supplied constraint has total degree > 1.

    LattE only consumes linear systems, so this is raised before any file is
    written.
    """
    pass


class MalformedInequality(LattECountError, ValueError):
    """
    Signaled when a constraint string contains no relational operator, or
    more than one.
    """
    pass


class InconsistentVertexDimension(LattECountError, ValueError):
    """Emitted when the points of a vertex list disagree in length."""
    pass


class UnsupportedOption(LattECountError, ValueError):
    """
    Signaled when a LattE flag is requested which `lattecount` knows about but
    can't decode the output of.
    """
    pass


class UnrecognizedSpecification(LattECountError, TypeError):
    """Emitted when a specification matches none of the known shapes."""
    pass


class ExternalToolFailure(LattECountError, RuntimeError):
    """
    Signaled when `count` can't be run, exits abnormally, or fails to produce
    the output file we went looking for.

    The working directory is left in place for inspection.
    """

    def __init__(self, message, returncode=None, stderr=None,
                 working_directory=None):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
        self.working_directory = working_directory
