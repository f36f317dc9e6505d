"""
lattecount/options.py

Translation of python keyword arguments into LattE `count` command-line flags.
"""

from copy import copy
from dataclasses import dataclass, field
from enum import Enum
import numbers
from typing import Dict, List

from .exceptions import UnsupportedOption
from .utilities import exact


class OptionKind(Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    STRING = "string"


@dataclass(frozen=True)
class OptionDefinition:
    """
    A `count` flag, named in its python (underscored) form.  Unsupported
    options are ones whose output we don't know how to decode.
    """

    name: str
    kind: OptionKind
    supported: bool = True

    @property
    def flag(self) -> str:
        return "--" + self.name.replace("_", "-")

    def serialize(self, value) -> List[str]:
        """
        Renders `value` as a list of zero or one command-line flags.
        """
        if self.kind is OptionKind.BOOLEAN:
            return [self.flag] if value else []
        if self.kind is OptionKind.INTEGER:
            value = exact(value)
            if not isinstance(value, int):
                raise ValueError(f"{self.name} must be an integer, "
                                 f"got {value}.")
        return [f"{self.flag}={value}"]


KNOWN_OPTIONS: Dict[str, OptionDefinition] = {
    definition.name: definition for definition in [
        OptionDefinition("vrep", OptionKind.BOOLEAN),
        OptionDefinition("homog", OptionKind.BOOLEAN),
        OptionDefinition("cdd", OptionKind.BOOLEAN),
        OptionDefinition("dilation", OptionKind.INTEGER),
        OptionDefinition("ehrhart_polynomial", OptionKind.BOOLEAN),
        OptionDefinition("ehrhart_series", OptionKind.BOOLEAN),
        OptionDefinition("ehrhart_taylor", OptionKind.INTEGER),
        OptionDefinition("multivariate_generating_function",
                         OptionKind.BOOLEAN),
        OptionDefinition("simplified_ehrhart_polynomial", OptionKind.BOOLEAN,
                         supported=False),
        OptionDefinition("all_primal", OptionKind.BOOLEAN),
        OptionDefinition("irrational_primal", OptionKind.BOOLEAN),
        OptionDefinition("irrational_all_primal", OptionKind.BOOLEAN),
        OptionDefinition("exponential", OptionKind.BOOLEAN),
        OptionDefinition("maxdet", OptionKind.INTEGER),
        OptionDefinition("triangulation", OptionKind.STRING),
        OptionDefinition("redundancy_check", OptionKind.STRING),
    ]
}
"""
The `count` options we know the types of.  Anything else gets its type
inferred from the value it's passed with.
"""


def lookup_option(name: str, value=None) -> OptionDefinition:
    """
    Finds (or, for unfamiliar names, invents) the definition for `name`.
    """
    name = name.replace("-", "_")
    if name in KNOWN_OPTIONS:
        return KNOWN_OPTIONS[name]
    if isinstance(value, bool):
        return OptionDefinition(name, OptionKind.BOOLEAN)
    if isinstance(value, numbers.Integral):
        return OptionDefinition(name, OptionKind.INTEGER)
    return OptionDefinition(name, OptionKind.STRING)


@dataclass
class CountOptions:
    """
    The ordered collection of options for a single `count` call.
    """

    values: Dict[str, object] = field(default_factory=dict)

    def __contains__(self, name) -> bool:
        name = name.replace("-", "_")
        return name in self.values and \
            (lookup_option(name, self.values[name]).kind
             is not OptionKind.BOOLEAN or
             bool(self.values[name]))

    def __getitem__(self, name):
        return self.values[name.replace("-", "_")]

    def with_option(self, name, value=True):  # -> CountOptions
        """
        Returns a copy of these options with `name` set to `value`.
        """
        clone = copy(self)
        clone.values = {**self.values, name.replace("-", "_"): value}
        return clone

    def check_supported(self):
        """
        Raises UnsupportedOption if any of these options can't be decoded.
        """
        for name in self.values:
            definition = lookup_option(name, self.values[name])
            if not definition.supported and name in self:
                raise UnsupportedOption(
                    f"The option {definition.flag} is not supported."
                )

    def to_flags(self) -> List[str]:
        """Renders these options as `count` command-line arguments."""
        flags = []
        for name, value in self.values.items():
            flags += lookup_option(name, value).serialize(value)
        return flags


def build_options(**kwargs) -> CountOptions:
    """
    Converts python keyword arguments, e.g. `ehrhart_taylor=2`, into
    CountOptions.  Integer options are validated here, before anything runs.
    """
    options = CountOptions(values={k.replace("-", "_"): v
                                   for k, v in kwargs.items()})
    options.to_flags()
    return options
