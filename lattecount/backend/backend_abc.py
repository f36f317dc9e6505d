"""
lattecount/backend/backend_abc.py

A generic backend specification for lattice point counting.
"""

from abc import ABC, abstractmethod
from typing import List


class Backend(ABC):
    """
    Generic backend interface for lattice point counting procedures.
    """

    @abstractmethod
    def count(self, code_path: str, flags: List[str], working_directory: str,
              chatty: bool = False):  # -> None
        """
        Runs a counting pass over the LattE code stored at `code_path`, with
        the command-line `flags`.  Output files are left in
        `working_directory` under the names LattE's `count` uses:
        `numOfLatticePoints`, `countOut` (stdout), `countErr` (stderr),
        `<code file>.rat`, and `latte_stats`.

        Signals `ExternalToolFailure` if the count can't be carried out.
        """
        pass
