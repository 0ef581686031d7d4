r"""
Optspec option descriptor.

Overview
- Option: one declared command-line option — its names, arity, value type and
  the value(s) collected for it while arguments are matched.
  • Built from a spec string (see optspec.specs) or from scratch through fluent mutators.
  • A scanner/matcher discovers values and feeds them with set_value() (single-valued
    arities) or push_value() (multiple); the descriptor validates and stores them.
  • A results aggregator keys the stored value by resolve_id().

- Value sources
  • Fixed(values): a concrete collection of acceptable values or suggestions.
  • Lazy(producer): a zero-argument producer, called when the source is resolved.
  • lazy(producer): factory/decorator form of Lazy.
  valid_values()/suggestions() take either form (plain iterables are wrapped in Fixed);
  get_valid_values()/get_suggestions() resolve them explicitly.

Arity
- Exactly one of REQUIRE, OPTIONAL, MULTIPLE, FLAG (a single tag; setting one replaces
  the previous one). FLAG is the default. Entering MULTIPLE prepares an empty list.

Typing
- set_value() validates through the handler registered for value_type (see
  optspec.valuetypes) and stores handler.parse(raw); without a handler raw is stored as-is.
- push_value() only knows the numeric fast path: for value_type "number" the raw value
  must be numeric and is truncated toward zero before being appended ("3.9" → 3).

Quick example:
    >>> option = Option("o|output:=s").set_value_name("file")
    >>> option.readable_spec()
    '-o, --output <file>'
    >>> option.set_value("out.txt")
    >>> option.resolve_id(), option.value
    ('output', 'out.txt')

Public API
- Classes: Option, Fixed, Lazy
- Factories: lazy
"""
import functools
import operator
import re
from collections import defaultdict
from collections.abc import Iterable, Set
from typing import final

from rich.text import Text

from .faults import InvalidValueError, NonNumericError
from .specs import Arity, parse_spec
from .utils import *
from .valuetypes import is_numeric, resolve, truncate


class OptionType(type):
    """
    Metaclass that gives descriptor classes stable, readable representations.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens), used in
      messages.
    - Provide __repr__/__rich_repr__ built from the names listed in __displayable__.
    """
    __displayable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(short='v', long='verbose', key=None, arity=<Arity.FLAG: 'flag'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__displayable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


@final
class Fixed(metaclass=OptionType):
    """
    A concrete collection of values.

    Sets are kept as frozensets; any other iterable is materialized into a tuple
    (order preserved). Strings are rejected to avoid splitting them into characters.
    """
    __displayable__ = ("values",)

    values = mirror("values")

    def __init__(self, values, /):
        if isinstance(values, str) or not isinstance(values, Iterable):
            raise TypeError(f"{type(self).__typename__} values must be a non-string iterable")
        self._values = frozenset(values) if isinstance(values, Set) else tuple(values)

    def resolve(self):
        return self._values

    def __eq__(self, other):
        if not isinstance(other, Fixed):
            return NotImplemented
        return self._values == other._values

    def __hash__(self):
        return hash(self._values)


@final
class Lazy(metaclass=OptionType):
    """
    A zero-argument producer of values, invoked on every resolve().
    """
    __displayable__ = ("producer",)

    producer = mirror("producer")

    def __init__(self, producer, /):
        if not callable(producer):
            raise TypeError(f"{type(self).__typename__} producer must be callable")
        self._producer = producer

    def resolve(self):
        return self._producer()


def lazy(producer, /):
    """
    Wrap a zero-argument producer into a Lazy source.

    Usable as a decorator:
        @lazy
        def branches():
            return ["main", "develop"]

        option.suggestions(branches)
    """
    return Lazy(producer)


def _source(option, name, source, /):
    """
    Internal: normalize a valid-values/suggestions source into Fixed or Lazy.
    """
    if isinstance(source, Fixed | Lazy):
        return source
    if isinstance(source, Iterable) and not isinstance(source, str):
        return Fixed(source)
    raise TypeError(
        f"{type(option).__typename__} {name!r} must be an iterable, Fixed(...) or Lazy(...); "
        "wrap producers with lazy()"
    )


def _styles():
    """
    Internal: style table for rich rendering, overridable through __styles__ in __main__.
    """
    return defaultdict(str, {
        "option-name": "bold #00E5FF",  # neon cyan switch names
        "option-separator": "#6B6F7A",  # muted comma between names
        "option-value": "#FFB400",  # amber value placeholder
    } | getattr(__import__("__main__"), "__styles__", {}))


class Option(metaclass=OptionType):
    """
    Declarative descriptor for a single command-line option.

    Attributes
    - short: str | None — single-character name, invoked as -x.
    - long: str | None — multi-character name, invoked as --name.
    - key: str | None — result key override (see resolve_id()).
    - description: str | Text | None — help text, presentation only.
    - value_name: str | None — placeholder used by readable_spec(), presentation only.

    Read-only properties
    - arity: Arity tag.
    - value_type: registered type name or None (untyped).
    - value: current value; a fresh list copy for multiple options.
    """
    __displayable__ = (
        "short",
        "long",
        "key",
        "arity",
        "value_type",
        "value",
    )

    arity = mirror("arity")
    value_type = mirror("value_type")
    value = mirror("value")

    def __init__(self, spec=Unset, /):
        """
        Construct an option, optionally from a spec string.

        Parameters
        - spec: Unset | str
          NAME[ATTR][=TYPE] spec string (see optspec.specs). When omitted the option
          starts empty: no names, FLAG arity, untyped, value None.

        Raises
        - TypeError: when spec is given but is not a string (None included).
        - MalformedSpecError / UnsupportedAttributeError: propagated from the parser.
        """
        if not isinstance(spec, str | Unset):
            raise TypeError(f"{type(self).__typename__} spec must be a string")

        self.short = None
        self.long = None
        self.key = None
        self.description = None
        self.value_name = None

        self._arity = Arity.FLAG
        self._value_type = None
        self._value = None
        self._valid_values = Unset
        self._suggestions = Unset

        if spec is not Unset:
            self.init_from_spec(spec)

    def init_from_spec(self, spec, /):
        """
        Apply a spec string: names, arity and (when declared) value type.
        """
        parts = parse_spec(spec)

        self.short = parts.short
        self.long = parts.long

        match parts.arity:
            case Arity.REQUIRE:
                self.set_require()
            case Arity.MULTIPLE:
                self.set_multiple()
            case Arity.OPTIONAL:
                self.set_optional()
            case _:
                self.set_flag()

        if parts.type is not None:
            self.isa(parts.type)
        return self

    # --- identity ---

    def resolve_id(self):
        """
        Key used to store this option's value in a results mapping.

        Precedence: key, then long, then short; None when nothing is set.
        """
        return self.key or self.long or self.short or None

    def set_key(self, key, /):
        if not isinstance(key, str | None):
            raise TypeError(f"{type(self).__typename__} 'key' must be a string")
        elif isinstance(key, str) and not (key := key.strip()):
            raise ValueError(f"{type(self).__typename__} 'key' cannot be empty")
        self.key = key
        return self

    # --- arity ---

    def set_require(self):
        self._arity = Arity.REQUIRE
        return self

    def set_multiple(self):
        self._arity = Arity.MULTIPLE
        # Keep values that were already accumulated.
        if not isinstance(self._value, list):
            self._value = []
        return self

    def set_optional(self):
        self._arity = Arity.OPTIONAL
        return self

    def set_flag(self):
        self._arity = Arity.FLAG
        return self

    def is_flag(self):
        return self._arity is Arity.FLAG

    def is_multiple(self):
        return self._arity is Arity.MULTIPLE

    def is_required(self):
        return self._arity is Arity.REQUIRE

    def is_optional(self):
        return self._arity is Arity.OPTIONAL

    # --- typing ---

    def isa(self, name, /):
        """
        Set the value type by name (fluent).

        Any name is accepted: "string" and "number" are built in, others resolve
        through the value type registry when a value is set. None clears the type.
        """
        if not isinstance(name, str | None):
            raise TypeError(f"{type(self).__typename__} value type must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} value type cannot be empty")
        self._value_type = name
        return self

    def set_type_string(self):
        return self.isa("string")

    def set_type_number(self):
        return self.isa("number")

    def is_type(self, name, /):
        return self._value_type == name

    def is_type_string(self):
        return self.is_type("string")

    def is_type_number(self):
        return self.is_type("number")

    def handler(self):
        """
        Value type handler registered for value_type, or None.
        """
        return resolve(self._value_type)

    # --- values ---

    def check_type(self, raw, /):
        """
        Numeric fast path used by push_value().

        For value_type "number", raw must be numeric and is truncated toward zero
        (fractions are discarded, never rounded). Other types pass raw through.

        Raises
        - NonNumericError: when a numeric option receives a non-numeric value.
        """
        if not self.is_type_number():
            return raw
        if not is_numeric(raw):
            raise NonNumericError(
                f"{self.readable_spec() or type(self).__typename__} expects a number, got {raw!r}",
                type=self._value_type,
                value=raw,
            )
        return truncate(raw)

    def set_value(self, raw, /):
        """
        Store a single value (REQUIRE, OPTIONAL and FLAG options).

        With a registered handler for value_type, raw must pass handler.test() and
        handler.parse(raw) is stored; otherwise raw is stored unchanged. Each call
        replaces the previous value.

        Raises
        - InvalidValueError: when the handler rejects raw; carries 'type' and 'value'.
        """
        if (handler := self.handler()) is None:
            self._value = raw
            return
        if not handler.test(raw):
            raise InvalidValueError(
                f"invalid value {raw!r} for type {self._value_type!r}",
                type=self._value_type,
                value=raw,
            )
        self._value = handler.parse(raw)

    def push_value(self, raw, /):
        """
        Append one value (MULTIPLE options), preserving discovery order.

        The value goes through check_type() first; a rejected value leaves the
        values collected so far untouched. A descriptor holding no value starts
        a new list.
        """
        value = self.check_type(raw)
        if self._value is None:
            self._value = []
        self._value.append(value)

    # --- metadata ---

    def set_description(self, description, /):
        if not isinstance(description, str | Text | None):
            raise TypeError(f"{type(self).__typename__} 'description' must be a string")
        self.description = description
        return self

    def set_value_name(self, name, /):
        if not isinstance(name, str | None):
            raise TypeError(f"{type(self).__typename__} 'value_name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} 'value_name' cannot be empty")
        self.value_name = name
        return self

    def valid_values(self, source, /):
        """
        Assign the acceptable values (Fixed, Lazy, or a plain iterable). Not enforced here.
        """
        self._valid_values = _source(self, "valid_values", source)
        return self

    def suggestions(self, source, /):
        """
        Assign completion hints (Fixed, Lazy, or a plain iterable).
        """
        self._suggestions = _source(self, "suggestions", source)
        return self

    def get_valid_values(self):
        if self._valid_values is Unset:
            return None
        return self._valid_values.resolve()

    def get_suggestions(self):
        if self._suggestions is Unset:
            return None
        return self._suggestions.resolve()

    # --- rendering ---

    def _fragments(self):
        """
        Internal: (text, style) pieces of the readable spec.
        """
        fragments = []
        if self.short and self.long:
            fragments += [("-" + self.short, "option-name"), (", ", "option-separator"), ("--" + self.long, "option-name")]
        elif self.short:
            fragments.append(("-" + self.short, "option-name"))
        elif self.long:
            fragments.append(("--" + self.long, "option-name"))

        name = self.value_name or "value"
        match self._arity:
            case Arity.REQUIRE:
                fragments.append((f" <{name}>", "option-value"))
            case Arity.MULTIPLE:
                fragments.append((f" <{name}>+", "option-value"))
            case Arity.OPTIONAL:
                fragments.append((f" [<{name}>]", "option-value"))
        return fragments

    def readable_spec(self):
        """
        Usage fragment such as "-v, --verbose", "-o <file>" or "--tag <value>+".
        """
        return "".join(fragment for fragment, _ in self._fragments())

    def describe(self):
        """
        Multi-line diagnostic: id, readable spec, description and current value.
        """
        lines = ["* key:%-8s spec:%s  desc:%s" % (
            self.resolve_id() or "",
            self.readable_spec(),
            self.description or "",
        )]
        if isinstance(self._value, list | tuple):
            lines.append(f"  values => ({len(self._value)})")
            lines.extend(f"    [{index}] => {item}" for index, item in enumerate(self._value))
        else:
            lines.append(f"  value => {self._value}")
        return "\n".join(lines) + "\n"

    def __str__(self):
        return self.describe()

    def __rich__(self):
        styles = _styles()
        return Text.assemble(*((fragment, styles[style]) for fragment, style in self._fragments()))


__all__ = (
    # Classes
    "Option",
    "Fixed",
    "Lazy",

    # Factories
    "lazy",
)

# Keep the metaclass out of star-imports and docs; not part of the public API.
del OptionType
