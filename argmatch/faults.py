"""
Argmatch faults (user-input errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing matching error.
- NoError: falsy singleton handed back by Command.get_matches() when matching succeeded.
- CommandException: base type for matching errors. Errors are returned as data
  (never raised by the matcher) so the caller decides how to surface them; they
  still are real exceptions, so `raise error` or trigger() works when wanted.
- ConversionError: typed lookups on ArgMatches that fail to convert a raw value.
  This is a usage error of the host program, not a matching error.
- trigger(): caller-side helper to surface a fault (raise it, or print it and exit).

Caller idiom
    matches, error = command.get_matches()
    if error.has_error():
        print(error.message)

Programmer errors (malformed declarations, duplicated names, misplaced
multiple positionals) are not part of this taxonomy: they raise TypeError or
ValueError while the Command tree is being declared.
"""
import copy
import functools
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType
from typing import final

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the matcher (stable identifiers).

    grouping (by high-level domain)
    - switches (flags/options) (1111x)
      • UNKNOWN_ARGUMENT, MISSING_VALUE, FLAG_VALUE
    - positionals (1112x)
      • UNEXPECTED_POSITIONAL
    - validation (1113x)
      • MISSING_REQUIRED_ARGUMENT, MISSING_REQUIRED_SUBCOMMAND

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- switch errors ---
    UNKNOWN_ARGUMENT            = 11111
    MISSING_VALUE               = 11112
    FLAG_VALUE                  = 11113

    # --- positional errors ---
    UNEXPECTED_POSITIONAL       = 11121

    # --- validation errors ---
    MISSING_REQUIRED_ARGUMENT   = 11131
    MISSING_REQUIRED_SUBCOMMAND = 11132

    def normalize(self):
        """
        label shown for this code in rendered faults.

        a host may define __codes__ (FaultCode -> label) in __main__; codes it
        does not list fall back to their numeric value.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


@final
class NoErrorType:
    """
    successful-match marker (singleton).

    shares the read surface of CommandException (has_error(), message, code)
    so callers can check results uniformly without isinstance tests.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    message = ""
    code = None

    def has_error(self):
        return False

    def __bool__(self):
        return False

    def __repr__(self):
        return "NoError"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "NoError"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'NoErrorType' is not an acceptable base type")


NoError = NoErrorType()


class CommandException(Exception):
    """
    base class for matching errors carried as data.

    attributes
    - message: the exact user-facing sentence (also str(self)).
    - options: read-only mapping with the rendering/context payload
      (title, code, hint, command, token, argument, ...).
    """
    code = Unset
    title = "matching error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(
            {"code": type(self).code, "title": type(self).title} | options
        )

    def has_error(self):
        return True

    def __eq__(self, other):
        if not isinstance(other, CommandException):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self):
        return hash((type(self), self.message))

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r})"

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        palette = defaultdict(str, {
            "fault-prog": "bold #F5F5F5",
            "fault-title": "bold #FF5F87",
            "fault-code": "#5FD7FF",
            "fault-message": "#D0D0D0",
            "fault-hint": "italic #87D787",
        } | getattr(main, "__styles__", {}))

        def style(key):
            return palette[key] if colorful else ""

        prog = getattr(main, "__prog__", None) or self.options.get("command") or ""
        code = self.options["code"]
        header = Text()
        if prog:
            header.append(str(prog), style("fault-prog")).append(": ")
        header.append(self.options["title"].title(), style("fault-title"))
        if code:
            header.append(" [").append(code.normalize(), style("fault-code")).append("]")

        body = [Text(self.message, style("fault-message"))]
        if hint := self.options.get("hint"):
            body.append(Text.assemble("  hint: ", (str(hint), style("fault-hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, /, **overrides):
        return type(self)(self.message, **(dict(self.options) | overrides))


class UnknownArgumentError(CommandException):
    code = FaultCode.UNKNOWN_ARGUMENT
    title = "unknown argument"


class MissingValueError(CommandException):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class FlagValueError(CommandException):
    code = FaultCode.FLAG_VALUE
    title = "flag cannot take a value"


class UnexpectedPositionalError(CommandException):
    code = FaultCode.UNEXPECTED_POSITIONAL
    title = "unexpected positional"


class MissingRequiredArgumentError(CommandException):
    code = FaultCode.MISSING_REQUIRED_ARGUMENT
    title = "missing required argument"


class MissingRequiredSubcommandError(CommandException):
    code = FaultCode.MISSING_REQUIRED_SUBCOMMAND
    title = "missing required subcommand"


class ConversionError(ValueError):
    """
    a stored raw value could not be converted by a typed ArgMatches lookup.

    attributes
    - name: the argument name that was looked up.
    - value: the raw string that failed to convert.
    - type: the requested converter.
    """

    def __init__(self, name, value, type, /):
        self.name = name
        self.value = value
        self.type = type
        super().__init__(
            "cannot convert value %r of argument %r to %s" % (value, name, getattr(type, "__name__", repr(type)))
        )


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - shell=True prints the rendered fault to stderr and exits with status 1;
      otherwise the fault is raised.
    - NoError is accepted and ignored, so `trigger(error)` is safe after any match.
    """
    if fault is NoError:
        return
    if not (callable(getattr(fault, "__trigger__", None)) and callable(getattr(fault, "__replace__", None))):
        raise TypeError(f"trigger() cannot surface {type(fault).__name__!r} objects")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "NoErrorType",
    "NoError",
    "CommandException",
    "UnknownArgumentError",
    "MissingValueError",
    "FlagValueError",
    "UnexpectedPositionalError",
    "MissingRequiredArgumentError",
    "MissingRequiredSubcommandError",
    "ConversionError",
    "trigger",
)
