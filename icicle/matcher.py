"""
Icicle tokenizer/matcher: raw tokens -> resolved command + parsed arguments.

phases
- descent
  • starting at the given command, consume tokens while they name a child
    (name or alias); the deepest node reached is the resolved command.
- help short-circuit
  • a literal '--help' among the remaining tokens (before a '--' separator)
    resolves to a help request, whatever else was given.
  • a resolved command without an action also resolves to a help request.
- binding
  • '--' ends option parsing; every later token is positional.
  • '-' alone and negative numbers ('-5', '-2.5', '-1e3') are positional.
  • any other token starting with '-' is an option: <name>[=<value>], split
    on the first '='.
  • positionals fill the named slots left to right; an array slot takes the
    tail.

faults (raised, never printed here)
- MalformedOptionError: bad spelling, a valued option without '=<value>',
  or a value given to a valueless option.
- UnknownOptionError: the name is not declared on the resolved command.
- DuplicatedOptionError: the same option (under any alias) given twice.
- ArgumentCountMismatchError: too few or too many positionals.

positions in messages are 1-based over the whole token list, so "third
position" points at the token the user actually typed.
"""
import difflib
import enum
import re
import warnings
from typing import NamedTuple

from .faults import *
from .namespace import ParsedArguments
from .utils import *

_OPTION = re.compile(r"(?P<input>--?[^\W\d_](-?[^\W_]+)*)(=(?P<value>.*))?", re.DOTALL)
_NUMBER = re.compile(r"-(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


class HelpReason(enum.Enum):
    """
    Why a resolution ended in help instead of an action.
    """
    REQUESTED = "requested"
    MISSING_ACTION = "missing-action"


class Resolution(NamedTuple):
    """
    Outcome of matching tokens against a command tree.

    - command: the resolved (deepest matched) command.
    - route: commands from the starting node down to `command`.
    - arguments: bound arguments; for help requests, the leftover tokens as
      raw positionals (no validation is done).
    - reason: None for a normal dispatch, otherwise a HelpReason.
    """
    command: object
    route: tuple
    arguments: ParsedArguments
    reason: HelpReason | None = None

    @property
    def help(self):
        return self.reason is not None


def _positional(token):
    return token == "-" or not token.startswith("-") or bool(_NUMBER.fullmatch(token))


def _hint(route, what="the expected usage"):
    return "run '%s --help' to see %s" % (" ".join(step.name for step in route), what)


def descend(command, tokens, /):
    """
    Greedy descent: return the route of consecutively matched commands.

    The route always starts with `command`; len(route) - 1 tokens were
    consumed.
    """
    route = [command]
    for token in tokens:
        if (child := route[-1].child(token)) is None:
            break
        route.append(child)
    return tuple(route)


def _bind_options(command, route, tokens, offset):
    declared = {}
    aliases = {}
    for option in command.options:
        for name in option.names:
            declared[name] = option
        for key in (*option.names, *option.bare):
            aliases[key] = option.canonical

    options = {}
    positionals = []
    literal = False

    for index, token in enumerate(tokens, offset):
        if literal or _positional(token):
            positionals.append((index, token))
            continue
        if token == "--":
            literal = True
            continue

        if not (match := _OPTION.fullmatch(token)):
            raise MalformedOptionError(
                "bad form of option %r at %s position" % (token, ordinal(index)),
                title="malformed option",
                code=FaultCode.MALFORMED_OPTION,
                command=command,
                token=token,
                index=index,
                hint="options are written -x=<value> or --name=<value>; " + _hint(route, "valid spellings"),
            )

        input = match["input"]
        value = match["value"]  # None when there is no '=', '' when nothing follows it

        try:
            option = declared[input]
        except KeyError:
            suggestions = difflib.get_close_matches(input, declared.keys(), 5)
            try:
                hint = "did you mean %r? you can also %s" % (suggestions[0], _hint(route, "all options"))
            except IndexError:
                hint = _hint(route, "all available options")
            raise UnknownOptionError(
                "unknown option %r at %s position" % (input, ordinal(index)),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                command=command,
                token=token,
                index=index,
                suggestions=suggestions,
                hint=hint,
            ) from None

        if option.valued and value is None:
            raise MalformedOptionError(
                "option %r at %s position requires an inline value" % (input, ordinal(index)),
                title="missing option value",
                code=FaultCode.MALFORMED_OPTION,
                command=command,
                token=token,
                index=index,
                hint="use the inline form: %s=<value>" % input,
            )
        if not option.valued and value is not None:
            raise MalformedOptionError(
                "option %r at %s position does not take a value" % (input, ordinal(index)),
                title="unexpected option value",
                code=FaultCode.MALFORMED_OPTION,
                command=command,
                token=token,
                index=index,
                hint="remove everything from '=' (for example: %s)" % input,
            )
        if option.canonical in options:
            raise DuplicatedOptionError(
                "option %r at %s position was already provided" % (input, ordinal(index)),
                title="duplicated option",
                code=FaultCode.DUPLICATED_OPTION,
                command=command,
                token=token,
                index=index,
                hint="keep a single %s; each option can be specified only once" % option.canonical,
            )
        if value == "":
            warnings.warn(EmptyOptionValueWarning(
                "empty inline value for option %r at %s position" % (input, ordinal(index)),
                title="empty inline value",
                code=FaultCode.EMPTY_OPTION_VALUE,
                command=command,
                token=token,
                index=index,
                hint="add a value after '=' (for example: %s=<value>)" % input,
            ), stacklevel=4)

        options[option.canonical] = value if option.valued else "true"

    return options, aliases, positionals


def _check_count(command, route, positionals, end):
    slots = command.arguments
    required = sum(slot.required for slot in slots)
    capacity = sum(not slot.array for slot in slots)
    array = any(slot.array for slot in slots)

    if len(positionals) < required:
        raise ArgumentCountMismatchError(
            "%r expects at least %d argument%s but %d %s given" % (
                command.name, required, "s" * (required != 1),
                len(positionals), "was" if len(positionals) == 1 else "were",
            ),
            title="missing arguments",
            code=FaultCode.MISSING_ARGUMENTS,
            command=command,
            token=None,
            index=end,
            expected=required,
            received=len(positionals),
            hint="add the missing arguments; " + _hint(route, "the expected order"),
        )

    if not array and len(positionals) > capacity:
        index, token = positionals[capacity]
        suggestions = difflib.get_close_matches(token, [name for child in command.children for name in child.names], 5)
        try:
            hint = "did you mean the command %r? you can also %s" % (suggestions[0], _hint(route, "available commands"))
        except IndexError:
            hint = "remove this extra value or " + _hint(route)
        raise ArgumentCountMismatchError(
            "unexpected argument %r at %s position" % (token, ordinal(index)),
            title="unexpected argument",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            command=command,
            token=token,
            index=index,
            expected=capacity,
            received=len(positionals),
            suggestions=suggestions,
            hint=hint,
        )


def resolve(command, tokens, /):
    """
    Match `tokens` against the tree rooted at `command`.

    Returns a Resolution; raises a CommandException subclass for structural
    faults (unknown/malformed/duplicated options, wrong argument count).
    """
    tokens = list(tokens)
    route = descend(command, tokens)
    command = route[-1]
    remaining = tokens[len(route) - 1:]
    offset = len(route)

    head = remaining[:remaining.index("--")] if "--" in remaining else remaining
    if "--help" in head or not command.has_action:
        leftovers = [token for token in remaining if token != "--help"]
        return Resolution(
            command,
            route,
            ParsedArguments({}, leftovers, command=command, aliases={}),
            HelpReason.REQUESTED if "--help" in head else HelpReason.MISSING_ACTION,
        )

    options, aliases, positionals = _bind_options(command, route, remaining, offset)
    _check_count(command, route, positionals, offset + len(remaining))

    return Resolution(
        command,
        route,
        ParsedArguments(options, [token for _, token in positionals], command=command, aliases=aliases),
    )


__all__ = (
    "HelpReason",
    "Resolution",
    "descend",
    "resolve",
)
