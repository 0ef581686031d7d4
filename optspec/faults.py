"""
Optspec faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue an option
  descriptor can surface (errors and warnings), grouped by domain.
- OptionException / OptionWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Propagation
- Descriptors raise these faults synchronously from the call that detected the
  problem. Nothing here logs or retries; recovery (re-prompting, reporting) is
  the caller's job, usually through trigger().

Integration
- Hosts can restyle the output through __styles__, relabel codes through
  __codes__, document them through __docs__ and name the program through
  __prog__, all looked up in __main__.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by option descriptors (stable identifiers).

    grouping
    - spec strings (1121x)
      • MALFORMED_SPEC, UNSUPPORTED_ATTRIBUTE
    - values (1122x)
      • NON_NUMERIC_VALUE, INVALID_VALUE
    - warnings (1221x)
      • VALUE_TYPE_OVERRIDE
    """
    # --- spec string errors (11xxx) ---
    MALFORMED_SPEC              = 11211
    UNSUPPORTED_ATTRIBUTE       = 11212

    # --- value errors (11xxx) ---
    NON_NUMERIC_VALUE           = 11221
    INVALID_VALUE               = 11222

    # --- warnings (12xxx) ---
    VALUE_TYPE_OVERRIDE         = 12211

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    Build the rich renderable shared by errors and warnings.

    palette maps the logical parts ("title", "message", ...) to the style keys
    looked up in the merged style table.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = text(options.get("prog", getattr(main, "__prog__", "optspec")), "prog-name")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(options["code"].normalize(), "code"),
        " | ",
        text(options["title"].title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(options.get("hint"), "hint"))

    if fancy:
        try:
            width = int((console.width - 4) * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    return Group(header, message, hint)


class OptionException(Exception):
    """
    base type for every error raised by option descriptors.

    subclasses declare their own __defaults__ (code, title, hint); anything passed
    as keyword options at construction (or later through trigger()) overrides them.
    the context keys used across the package are 'spec', 'value' and 'type'.
    """
    __defaults__ = MappingProxyType({})

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(type(self).__defaults__ | options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedSpecError(OptionException):
    __defaults__ = MappingProxyType({
        "code": FaultCode.MALFORMED_SPEC,
        "title": "malformed spec",
        "hint": "use NAME[ATTR][=TYPE], e.g. 'v|verbose', 'o|output:=s' or 'n|number+=i'",
    })


class UnsupportedAttributeError(OptionException):
    __defaults__ = MappingProxyType({
        "code": FaultCode.UNSUPPORTED_ATTRIBUTE,
        "title": "unsupported attribute",
        "hint": "zero-or-more ('*') is not implemented; use '+' (one or more) or '?' (zero or one)",
    })


class NonNumericError(OptionException):
    __defaults__ = MappingProxyType({
        "code": FaultCode.NON_NUMERIC_VALUE,
        "title": "non-numeric value",
        "hint": "pass a decimal number such as 3 or 3.5",
    })


class InvalidValueError(OptionException):
    __defaults__ = MappingProxyType({
        "code": FaultCode.INVALID_VALUE,
        "title": "invalid value",
        "hint": "check the expected value type of the option",
    })


class OptionWarning(ABC, Warning):
    """
    base type for warnings emitted by option descriptors and the type registry.
    """
    __defaults__ = MappingProxyType({})

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(type(self).__defaults__ | options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ValueTypeOverrideWarning(OptionWarning):
    __defaults__ = MappingProxyType({
        "code": FaultCode.VALUE_TYPE_OVERRIDE,
        "title": "value type override",
        "hint": "unregister the previous handler first to silence this warning",
    })


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, errors are
      raised and warnings are issued through the warnings module.

    typical options
    - shell, fancy, colorful, deferred, prog, ratio, title, code, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "OptionException",
    "MalformedSpecError",
    "UnsupportedAttributeError",
    "NonNumericError",
    "InvalidValueError",
    "OptionWarning",
    "ValueTypeOverrideWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
