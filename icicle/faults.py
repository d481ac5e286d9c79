"""
Icicle faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped
  by domain so messages and searches stay predictable.
- CommandException / CommandWarning: base types that carry a message plus
  options (command, token, index, hint, ...) and know how to render themselves
  in a lowercased, position-first, actionable way.
- trigger(): surface a fault, raising it (library use) or rendering it
  (shell use).

Integration
- The matcher raises structural faults while resolving tokens; nothing is
  printed there.
- Typed getters raise TypeCoercionError lazily, on first access.
- Actions may raise ActionError to report a domain failure; the shell layer
  (Command.run) renders it and turns it into a non-zero exit status.
"""
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
    canonical fault codes used across the library (stable identifiers).

    grouping
    - switches (options) (1111x)
      • MALFORMED_OPTION, UNKNOWN_OPTION, DUPLICATED_OPTION
    - positionals (1112x)
      • UNEXPECTED_ARGUMENT, MISSING_ARGUMENTS
    - values (1113x)
      • TYPE_COERCION
    - delegated (1114x)
      • ACTION_FAILURE
    - warnings (12xxx)
      • EMPTY_OPTION_VALUE
    """
    # --- switch errors ---
    MALFORMED_OPTION            = 11111
    UNKNOWN_OPTION              = 11112
    DUPLICATED_OPTION           = 11115

    # --- positional errors ---
    UNEXPECTED_ARGUMENT         = 11121
    MISSING_ARGUMENTS           = 11125

    # --- value errors ---
    TYPE_COERCION               = 11131

    # --- delegated errors ---
    ACTION_FAILURE              = 11141

    # --- warnings ---
    EMPTY_OPTION_VALUE          = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    main = __import__("__main__")
    tool = options.get("tool")
    return getattr(main, "__prog__", getattr(tool, "name", "icicle"))


def _render(fault, palette, kind):
    """
    shared rich layout for exceptions and warnings: header, message, hint.
    """
    options = fault.options
    colorful = options.get("colorful", False)
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_program(options), styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")

    return Group(header, *renders)


class CommandException(Exception):
    """
    base of every error the library reports to a user.

    `message` is a short lowercase sentence; `options` is a read-only mapping
    with the context needed to render and inspect the fault (for example
    command, token, index, hint, title, code).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(CommandException): ...
class MalformedOptionError(CommandException): ...
class DuplicatedOptionError(CommandException): ...
class ArgumentCountMismatchError(CommandException): ...
class TypeCoercionError(CommandException): ...


class ActionError(CommandException):
    """
    raised by actions to report a domain failure.

    the shell layer renders it like any other fault and exits with status 1;
    title and code default to "action failed" / ACTION_FAILURE.
    """

    def __init__(self, message=Unset, /, **options):
        options.setdefault("title", "action failed")
        options.setdefault("code", FaultCode.ACTION_FAILURE)
        super().__init__(message, **options)


class CommandWarning(ABC, Warning):
    """
    base of every non-fatal notice; emitted through the warnings module.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyOptionValueWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace before triggering.
    - in shell mode the fault is rendered on stderr (errors then exit with 1);
      otherwise errors are raised and warnings go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "CommandException",
    "UnknownOptionError",
    "MalformedOptionError",
    "DuplicatedOptionError",
    "ArgumentCountMismatchError",
    "TypeCoercionError",
    "ActionError",
    "CommandWarning",
    "EmptyOptionValueWarning",
    "FaultCode",
    "trigger",
)
