r"""
Optspec spec strings.

A spec string declares one option in a single compact token:

    NAME[ATTR][=TYPE]

- NAME: "token" or "token|token" (short and long forms split on the pipe).
  Tokens are made of ASCII letters, digits and hyphens. Without a pipe, a
  one-character token is the short name and a longer token is the long name.
  With a pipe either side may be left empty (e.g. "|verbose"), but not both.
- ATTR: a run of arity markers.
  • ":" require (exactly one value)
  • "+" multiple (one or more values)
  • "?" optional (zero or one value)
  • "*" zero-or-more (recognized, not implemented)
  No marker means flag.
- TYPE: "s"/"string" or "i"/"integer", introduced by "=".

Markers may co-occur; they are resolved by priority rather than rejected:
require, then multiple, then optional, then the unsupported zero-or-more
marker, then flag. "a:+" is a required option, "a?*" an optional one.

Quick example:
    >>> parse_spec("o|output:=s")
    SpecParts(short='o', long='output', arity=<Arity.REQUIRE: 'require'>, type='string')
"""
import re
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from .faults import MalformedSpecError, UnsupportedAttributeError


class Arity(Enum):
    """
    how many values an option accepts.
    """
    REQUIRE = "require"
    OPTIONAL = "optional"
    MULTIPLE = "multiple"
    FLAG = "flag"


class SpecParts(NamedTuple):
    """
    structured result of parse_spec().

    short/long are None when the spec does not declare them; type is the
    canonical type name ("string" or "number") or None.
    """
    short: str | None
    long: str | None
    arity: Arity
    type: str | None


# Marker -> arity, in priority order. None marks the unsupported marker.
ATTRIBUTES = MappingProxyType({
    ":": Arity.REQUIRE,
    "+": Arity.MULTIPLE,
    "?": Arity.OPTIONAL,
    "*": None,
})

TYPE_ALIASES = MappingProxyType({
    "s": "string",
    "string": "string",
    "i": "number",
    "integer": "number",
})

_PATTERN = re.compile(r"""
    (?P<name>
        [a-zA-Z0-9-]*
        (?:
            \|
            [a-zA-Z0-9-]*
        )?
    )
    (?P<attributes>[:+?*]*)
    (?:=(?P<type>string|integer|[si]))?
""", re.VERBOSE)


def _split_name(name, text):
    """
    Resolve the NAME part into (short, long).
    """
    if "|" in name:
        short, long = name.split("|", 1)
        short, long = short or None, long or None
    elif len(name) == 1:
        short, long = name, None
    else:
        short, long = None, name or None

    if short is None and long is None:
        raise MalformedSpecError(f"spec {text!r} does not declare an option name", spec=text)
    return short, long


def _resolve_arity(attributes, text):
    """
    Pick the arity for a run of markers; the first marker in priority order wins.
    """
    for marker, arity in ATTRIBUTES.items():
        if marker not in attributes:
            continue
        if arity is None:
            raise UnsupportedAttributeError(
                f"spec {text!r} uses the zero-or-more attribute {marker!r}, which is not implemented",
                spec=text,
            )
        return arity
    return Arity.FLAG


def parse_spec(text, /):
    """
    Parse a spec string into its parts.

    Parameters
    - text: str
      The spec string. Surrounding whitespace is ignored.

    Returns
    - SpecParts(short, long, arity, type)

    Raises
    - TypeError: when text is not a string.
    - MalformedSpecError: when text does not match NAME[ATTR][=TYPE] or declares no name.
    - UnsupportedAttributeError: when the winning marker is the zero-or-more "*".
    """
    if not isinstance(text, str):
        raise TypeError("parse_spec() argument must be a string")

    if not (match := _PATTERN.fullmatch(text.strip())):
        raise MalformedSpecError(f"cannot parse spec {text!r}", spec=text)

    arity = _resolve_arity(match["attributes"], text)
    short, long = _split_name(match["name"], text)
    type = TYPE_ALIASES[match["type"]] if match["type"] else None

    return SpecParts(short, long, arity, type)


__all__ = (
    "Arity",
    "SpecParts",
    "ATTRIBUTES",
    "TYPE_ALIASES",
    "parse_spec",
)
