"""
Argonaut faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the package
  reports. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- ArgumentFault / ArgumentWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- Three disjoint error families:
  • RegistrationError: logical errors found while building a Registry.
  • ParseError: data-dependent errors found while scanning tokens.
  • AccessError: misuse of a ParsedArguments query (unknown name, wrong kind).
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse errors include the ordinal position of the
  offending token (“at third position”) so users can learn by trying.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The registry and the match engine raise faults; they never print.
- A hosting tool may call trigger(fault, shell=True, ...) to render it via rich
  and exit, or let the exception propagate.
"""
import copy
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, rename

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - parsing (111xx)
      • MISSING_REQUIRED_ARGUMENT, MISSING_PARAMETER, UNEXPECTED_ARGUMENT, DUPLICATED_FLAG
    - registration (131xx)
      • DUPLICATE_LONG_NAME, DUPLICATE_SHORT_NAME, DUPLICATE_NAME, MULTIPLE_TRAILS,
        MULTIPLE_PASSALONGS, MISSING_LONG_NAME
    - access (141xx)
      • UNKNOWN_NAME, WRONG_KIND
    - warnings (12xxx)
      • REPEATED_FLAG

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- parsing errors (111xx) ---
    MISSING_REQUIRED_ARGUMENT = 11101
    MISSING_PARAMETER         = 11102
    UNEXPECTED_ARGUMENT       = 11103
    DUPLICATED_FLAG           = 11104

    # --- registration errors (131xx) ---
    DUPLICATE_LONG_NAME       = 13101
    DUPLICATE_SHORT_NAME      = 13102
    DUPLICATE_NAME            = 13103
    MULTIPLE_TRAILS           = 13104
    MULTIPLE_PASSALONGS       = 13105
    MISSING_LONG_NAME         = 13106

    # --- access errors (141xx) ---
    UNKNOWN_NAME              = 14101
    WRONG_KIND                = 14102

    # --- warnings (12xxx) ---
    REPEATED_FLAG             = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _option(name, /):
    """
    internal: read-only property over one entry of a fault's options.
    """
    @rename(name)
    def getter(self):
        return self.options.get(name)

    return property(getter)


class _Fault:
    """
    shared body of errors and warnings: message + read-only options, rich rendering.

    recognized options
    - title, code, hint: header, stable code and one-line hint.
    - shell, fancy, colorful, deferred: presentation flags used by trigger().
    - any identity the reporter wants to carry (token, index, name, flag...).
    """
    __palette__ = {}
    __accent__ = ""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    title = _option("title")
    code = _option("code")
    hint = _option("hint")

    def __rich__(self):
        main = __import__("__main__")
        styles = defaultdict(str, type(self).__palette__ | getattr(main, "__styles__", {}))
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style])

        prog = getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "argonaut")
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
            " | ",
            text(str(self.options.get("title", "")).title(), type(self).__accent__ + "-title"),
            " ]"
        )
        message = text(self.message, type(self).__accent__ + "-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint"), "hint"))

        if fancy:
            width = None
            if "ratio" in self.options:
                width = int((console.width - 4) * self.options["ratio"])
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ArgumentFault(_Fault, Exception):
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "error-title": "bold #FF4DA6",  # friendly pinky title

        # body
        "error-message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    }
    __accent__ = "error"

    def __str__(self):
        return str(self.message)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)


# --- registration errors ----------------------------------------------------

class RegistrationError(ArgumentFault, ValueError):
    """raised by Registry.register()/register_many(); the registry is left unchanged."""
    spec = _option("spec")
    conflict = _option("conflict")


class DuplicateLongNameError(RegistrationError):
    name = _option("name")


class DuplicateShortNameError(RegistrationError):
    name = _option("name")


class DuplicateNameError(RegistrationError):
    name = _option("name")


class MultipleTrailsError(RegistrationError): ...
class MultiplePassAlongsError(RegistrationError): ...
class MissingLongNameError(RegistrationError): ...


# --- parse errors -----------------------------------------------------------

class ParseError(ArgumentFault):
    """raised by the match engine; the scan stops at the first one."""
    index = _option("index")


class MissingRequiredArgumentError(ParseError):
    name = _option("name")
    names = _option("names")


class MissingParameterError(ParseError):
    name = _option("name")
    flag = _option("flag")


class UnexpectedArgumentError(ParseError):
    token = _option("token")


class DuplicatedFlagError(ParseError):
    name = _option("name")
    flag = _option("flag")


# --- access errors ----------------------------------------------------------

class AccessError(ArgumentFault, KeyError):
    """raised by ParsedArguments queries; a KeyError so Mapping.get() and `in` keep working."""
    name = _option("name")


class UnknownNameError(AccessError): ...


class WrongKindError(AccessError):
    kind = _option("kind")
    expected = _option("expected")


# --- warnings ---------------------------------------------------------------

class ArgumentWarning(_Fault, Warning):
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #FFB400",  # amber fault code for warnings
        "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

        # body
        "warning-message": "#D6D6DE",  # slightly lighter gray body
        "hint-arrow": "#B8EFAF dim",  # softer green arrow
        "hint": "italic #B8EFAF",  # softer green hint text
    }
    __accent__ = "warning"

    def __str__(self):
        return str(self.message)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)


class RepeatedFlagWarning(ArgumentWarning):
    name = _option("name")
    flag = _option("flag")
    index = _option("index")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors are
      raised and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, deferred, and any other context the reporter may want
      to show (e.g., token/index/name).
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

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgumentFault",
    "RegistrationError",
    "DuplicateLongNameError",
    "DuplicateShortNameError",
    "DuplicateNameError",
    "MultipleTrailsError",
    "MultiplePassAlongsError",
    "MissingLongNameError",
    "ParseError",
    "MissingRequiredArgumentError",
    "MissingParameterError",
    "UnexpectedArgumentError",
    "DuplicatedFlagError",
    "AccessError",
    "UnknownNameError",
    "WrongKindError",
    "ArgumentWarning",
    "RepeatedFlagWarning",
    "trigger",
    "getdoc",
)
