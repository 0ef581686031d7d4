"""
Optspec value types.

Overview
- A value type handler is any object with two methods:
  • test(raw) -> bool: whether raw is acceptable for the type.
  • parse(raw) -> value: the typed value for an accepted raw input.
- Handlers live in a static, process-wide registry keyed by type name. Option
  descriptors look their handler up by name when a single value is set; an
  unknown name simply means "no handler" (the value is stored untouched).

Built-ins (registered at import)
- "string"  → StringType
- "number"  → NumberType
- "boolean" → BooleanType
- "file"    → FileType

Registering more types
    >>> @register("port")
    ... class PortType:
    ...     def test(self, raw):
    ...         return str(raw).isdigit() and 0 < int(raw) < 65536
    ...     def parse(self, raw):
    ...         return int(raw)

Numeric helpers
- is_numeric(raw) and truncate(raw) implement the fast path used when values
  are pushed onto a numeric, multi-valued option: anything numeric is accepted
  and truncated toward zero ("3.9" → 3, "-3.9" → -3).
"""
import math
import os.path
import re
import sys
import warnings
from decimal import Decimal
from numbers import Real
from types import MappingProxyType

from .faults import ValueTypeOverrideWarning
from .utils import Unset, rename

_REGISTRY = {}

_NUMERIC = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*")
_INTEGRAL = re.compile(r"\s*[+-]?\d+\s*")


def _max_digits():
    return sys.get_int_max_str_digits() or sys.int_info.default_max_str_digits


def _bounded(number, /):
    """
    Internal: whether the integer part of a finite Decimal fits the interpreter's
    int/str digit limit.
    """
    return number.is_zero() or number.adjusted() < _max_digits()


def is_numeric(raw, /):
    """
    Whether raw is a number or a decimal numeric string.

    Numbers must be finite; bool is not considered numeric. Strings may carry a
    sign, a fraction, an exponent and surrounding whitespace ("3", "-2.5",
    " 1e3 ", ".5"). Hexadecimal, "inf" and "nan" are rejected, and so is any
    magnitude whose integer part has more digits than sys.get_int_max_str_digits()
    allows ("1e200000").
    """
    if isinstance(raw, bool):
        return False
    if isinstance(raw, Decimal):
        return raw.is_finite() and _bounded(raw)
    if isinstance(raw, Real):
        return math.isfinite(raw) and _bounded(Decimal(int(raw)))
    if isinstance(raw, str):
        return _NUMERIC.fullmatch(raw) is not None and _bounded(Decimal(raw.strip()))
    return False


def truncate(raw, /):
    """
    Integer value of a numeric raw input, truncated toward zero.

    Fractional parts are discarded, not rounded: "3.9" → 3 and "-3.9" → -3.
    Strings go through Decimal so long digit runs stay exact.

    Raises
    - ValueError: when raw is not numeric (see is_numeric()).
    """
    if not is_numeric(raw):
        raise ValueError(f"{raw!r} is not numeric")
    if isinstance(raw, str):
        return int(Decimal(raw.strip()))
    return int(raw)


def register(name, handler=Unset, /):
    """
    Register a value type handler under a name.

    Forms
    - register(name, handler): register an existing handler object.
    - @register(name): class decorator; an instance of the class is registered
      and the class is returned unchanged.

    Re-registering a name replaces the previous handler and issues a
    ValueTypeOverrideWarning.

    Raises
    - TypeError: when name is not a string or the handler lacks test/parse.
    - ValueError: when name is empty.
    """
    if not isinstance(name, str):
        raise TypeError("register() name must be a string")
    elif not (name := name.strip()):
        raise ValueError("register() name cannot be empty")

    if handler is Unset:
        @rename("register")
        def wrapper(cls, /):
            register(name, cls())
            return cls
        return wrapper

    if not callable(getattr(handler, "test", None)) or not callable(getattr(handler, "parse", None)):
        raise TypeError("value type handlers must provide test() and parse() methods")

    if name in _REGISTRY and _REGISTRY[name] is not handler:
        warnings.warn(
            ValueTypeOverrideWarning(f"value type {name!r} was already registered; replacing it", type=name),
            stacklevel=2,
        )
    _REGISTRY[name] = handler
    return handler


def unregister(name, /):
    """
    Remove a handler from the registry; returns it, or None if the name was unknown.
    """
    return _REGISTRY.pop(name, None)


def resolve(name, /):
    """
    Handler registered under name, or None (unknown names and None are not errors).
    """
    if name is None:
        return None
    return _REGISTRY.get(name)


def registered():
    """
    Read-only snapshot of the registry (name → handler).
    """
    return MappingProxyType(dict(_REGISTRY))


@register("string")
class StringType:
    """
    Any string is accepted and stored as-is.
    """

    def test(self, raw):
        return isinstance(raw, str)

    def parse(self, raw):
        return raw


@register("number")
class NumberType:
    """
    Numbers and decimal numeric strings.

    parse() keeps integral literals as int ("42" → 42) and turns everything
    else into float ("2.5" → 2.5, "1e3" → 1000.0). Strings beyond the float
    range ("1e400") fail test().
    """

    def test(self, raw):
        if not is_numeric(raw):
            return False
        if isinstance(raw, str) and not _INTEGRAL.fullmatch(raw):
            return math.isfinite(float(raw))
        return True

    def parse(self, raw):
        if isinstance(raw, str):
            if _INTEGRAL.fullmatch(raw):
                return int(raw)
            return float(raw)
        return raw


@register("boolean")
class BooleanType:
    """
    Booleans and their usual textual spellings (case-insensitive).
    """
    TRUTHY = frozenset({"true", "yes", "on", "1"})
    FALSY = frozenset({"false", "no", "off", "0"})

    def test(self, raw):
        if isinstance(raw, bool):
            return True
        return isinstance(raw, str) and raw.strip().lower() in self.TRUTHY | self.FALSY

    def parse(self, raw):
        if isinstance(raw, bool):
            return raw
        return raw.strip().lower() in self.TRUTHY


@register("file")
class FileType:
    """
    Paths of existing regular files; parsed to an absolute path.
    """

    def test(self, raw):
        return isinstance(raw, str | os.PathLike) and os.path.isfile(raw)

    def parse(self, raw):
        return os.path.abspath(raw)


__all__ = (
    # Registry
    "register",
    "unregister",
    "resolve",
    "registered",

    # Numeric helpers
    "is_numeric",
    "truncate",

    # Built-in handlers
    "StringType",
    "NumberType",
    "BooleanType",
    "FileType",
)
