"""
Icicle command layer: build, compose, and run nested CLI commands.

What this module provides
- Command: one node of the command tree, with:
  • Options (Option), positional slots (Argument), a description and aliases.
  • Children (subcommands) forming a tree rooted at the program.
  • An optional action, called with ParsedArguments on dispatch.
  • An optional help handler, inherited by every node below it.
- Factories and helpers:
  • command(...): wrap a callable into a Command (direct or decorator form).
  • invoke(obj, prompt): convenience runner for Commands or plain callables.

Quick start
    from icicle import Command

    program = Command("human")

    program.command("greet", "Greets everyone by name") \\
        .array_argument("Names") \\
        .action(lambda arguments: [print(f"Hello, {name}!") for name in arguments])

    program.command("add") \\
        .option("-x, --x", "First number") \\
        .option("-y, --y", "Second number") \\
        .action(add)

    if __name__ == "__main__":
        raise SystemExit(program.run())

Lifecycle
- The builder methods mutate a node and return it, so a chain keeps working on
  the node it started with; command(name) returns the new child instead.
- Misuse of the builder is a programmer error and fails immediately with
  TypeError/ValueError.
- The first parse seals the whole tree: from then on it is read-only and any
  builder call raises TypeError.

Design notes
- The tree holds no parent references; the matcher carries the route it
  walked, which is all help rendering needs.
- "No action" is not an error: such a node answers with its help.
"""
import copy
import functools
import inspect
import operator
import os.path
import re
import shlex
import sys
import warnings
from collections.abc import Iterable

from .arguments import ArgumentKind, Argument, Option
from .faults import *
from .faults import console
from .helper import print_help
from .matcher import resolve
from .utils import *


class CommandType(type):
    """
    Metaclass giving commands read-only introspection and stable reprs.

    - Every name in __introspectable__ becomes a read-only property over the
      matching "_name" field (containers come back as copies).
    - __displayable__ (if set) narrows which properties __rich_repr__ shows.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='add', aliases=[], descr=None, children=[...])
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, /):
    """
    Command names and aliases: non-empty, no whitespace, no leading '-'.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} name must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} name cannot be empty")
    elif not re.fullmatch(r"[^\s-]\S*", name):
        raise ValueError(f"{cls.__typename__} name {name!r} cannot contain whitespace or start with '-'")
    return name


def _sanitize_descr(cls, descr, /):
    if not isinstance(descr, str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return coalesce(descr)


def _sanitize_flag(cls, name, value, /):
    if not isinstance(value, bool | Unset):
        raise TypeError(f"{cls.__typename__} {name!r} must be a boolean")
    return value


class Command(metaclass=CommandType):
    """
    A node of the command tree.

    Responsibilities
    - Schema: name, aliases, description, options, positional slots.
    - Composition: ordered children, looked up by name or alias.
    - Dispatch: parse() resolves tokens, dispatch() runs the action or help,
      run() is the shell layer turning faults into messages and exit codes.

    Runtime flags (inherited by children created through command())
    - shell: invoke() renders faults and exits instead of raising.
    - fancy: help and faults are drawn inside panels.
    - colorful: help and faults are styled.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
        "options",
        "arguments",
        "children",
        "shell",
        "fancy",
        "colorful",
    )

    __displayable__ = (
        "name",
        "aliases",
        "descr",
        "children",
    )

    def __init__(self, name=Unset, /, descr=Unset, *, shell=Unset, fancy=Unset, colorful=Unset):
        """
        Create a detached node.

        Parameters
        - name: str | Unset
          Defaults to the basename of sys.argv[0] (the running program).
        - descr: str | Unset
          Short description, shown in help and in the parent's command list.
        - shell, fancy, colorful: bool | Unset
          Runtime flags; Unset means False for a root node.
        """
        self._name = _sanitize_name(type(self), coalesce(name, os.path.basename(sys.argv[0]).lstrip("-") or "program"))
        self._descr = _sanitize_descr(type(self), descr)
        self._aliases = []
        self._options = []
        self._arguments = []
        self._children = []
        self._action = None
        self._helper = None
        self._sealed = False
        self._shell = bool(_sanitize_flag(type(self), "shell", shell))
        self._fancy = bool(_sanitize_flag(type(self), "fancy", fancy))
        self._colorful = bool(_sanitize_flag(type(self), "colorful", colorful))

    # ── Introspection ─────────────────────────────────────────────────────────

    @property
    def names(self):
        """
        The name followed by every alias.
        """
        return (self._name, *self._aliases)

    @property
    def has_action(self):
        return self._action is not None

    @property
    def sealed(self):
        return self._sealed

    def child(self, name, /):
        """
        Return the child answering to `name` (name or alias), or None.
        """
        for child in self._children:
            if name in child.names:
                return child
        return None

    def find(self, *route):
        """
        Walk a route of child names from this node; KeyError when a step is missing.
        """
        command = self
        for step in route:
            if (command := command.child(step)) is None:
                raise KeyError(f"{type(self).__typename__} {self._name!r} has no route {' '.join(route)!r}")
        return command

    # ── Builder ───────────────────────────────────────────────────────────────

    def _ensure_open(self):
        if self._sealed:
            raise TypeError(f"{type(self).__typename__} {self._name!r} is sealed; build the tree before parsing")

    def _ensure_free(self, names):
        for name in names:
            if self.child(name) is not None:
                raise ValueError(f"{type(self).__typename__} name {name!r} is already in use under {self._name!r}")

    def desc(self, descr, /):
        """
        Set the description; returns self.
        """
        self._ensure_open()
        self._descr = _sanitize_descr(type(self), descr)
        return self

    def alias(self, name, /):
        """
        Add another name this command answers to; returns self.

        Clashes with siblings are detected when the tree is sealed.
        """
        self._ensure_open()
        if (name := _sanitize_name(type(self), name)) in self.names:
            raise ValueError(f"{type(self).__typename__} {self._name!r} already answers to {name!r}")
        self._aliases.append(name)
        return self

    def option(self, names, descr=Unset, /, *, valued=True):
        """
        Declare an option; returns self.

        `names` is "-x, --x", an iterable of names, or a ready Option (then
        descr/valued must be left out).
        """
        self._ensure_open()
        if isinstance(names, Option):
            if descr is not Unset or valued is not True:
                raise TypeError(f"{type(self).__typename__} option() takes no metadata with a ready option")
            option = names
        elif isinstance(names, str):
            option = Option(names, descr=descr, valued=valued)
        elif isinstance(names, Iterable):
            option = Option(*names, descr=descr, valued=valued)
        else:
            raise TypeError(f"{type(self).__typename__} option names must be a string or an iterable of strings")

        for other in self._options:
            if clash := (set(option.names) & set(other.names)) or (option.bare & other.bare):
                raise ValueError(f"{type(self).__typename__} {self._name!r} option name {sorted(clash)[0]!r} is already in use")

        self._options.append(option)
        return self

    def _append_argument(self, argument):
        if any(existing.array for existing in self._arguments):
            kind = "array argument" if argument.array else "argument"
            raise TypeError(f"{type(self).__typename__} {self._name!r} cannot declare an {kind} after its array argument")
        if argument.required and any(not existing.required for existing in self._arguments):
            raise TypeError(f"{type(self).__typename__} {self._name!r} cannot declare a required argument after an optional one")
        self._arguments.append(argument)
        return self

    def argument(self, descr=Unset, /, *, required=True):
        """
        Declare a single positional slot; returns self.
        """
        self._ensure_open()
        return self._append_argument(Argument(descr, ArgumentKind.SINGLE, required=required))

    def array_argument(self, descr=Unset, /):
        """
        Declare the trailing array slot (all remaining positionals); returns self.
        """
        self._ensure_open()
        return self._append_argument(Argument(descr, ArgumentKind.ARRAY))

    def action(self, callback, /):
        """
        Attach the action, called as callback(arguments); returns self.

        The action's return value is handed back by dispatch(); an int is
        used as the exit status by run().
        """
        self._ensure_open()
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} action must be callable")
        if self._action is not None:
            raise TypeError(f"{type(self).__typename__} {self._name!r} action cannot be overridden")
        self._action = callback
        return self

    def helper(self, callback, /):
        """
        Attach a help handler, called as callback(reason, command, arguments)
        instead of printing the built-in help; applies to this node and every
        node below it that has no handler of its own. Returns self.
        """
        self._ensure_open()
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} helper must be callable")
        if self._helper is not None:
            raise TypeError(f"{type(self).__typename__} {self._name!r} helper cannot be overridden")
        self._helper = callback
        return self

    def command(self, name, descr=Unset, /):
        """
        Create, attach and return a child command (the chain continues on it).

        The child inherits this node's runtime flags.
        """
        self._ensure_open()
        child = type(self)(name, descr, shell=self._shell, fancy=self._fancy, colorful=self._colorful)
        self._ensure_free(child.names)
        self._children.append(child)
        return child

    def use(self, other, /):
        """
        Attach an already built command as a child; returns self.
        """
        self._ensure_open()
        if not isinstance(other, Command):
            raise TypeError(f"{type(self).__typename__} use() argument must be a command")
        if other is self or other in self._children:
            raise ValueError(f"{type(self).__typename__} {other.name!r} cannot be attached twice")
        self._ensure_free(other.names)
        self._children.append(other)
        return self

    def _verify(self, ancestors=()):
        """
        Check the subtree for cycles and sibling name clashes, changing nothing.
        """
        if self in ancestors:
            raise ValueError(f"{type(self).__typename__} {self._name!r} cannot contain itself")
        seen = set()
        for child in self._children:
            if clash := seen & set(child.names):
                raise ValueError(f"{type(self).__typename__} name {sorted(clash)[0]!r} is already in use under {self._name!r}")
            seen.update(child.names)
            child._verify((*ancestors, self))

    def _seal(self):
        """
        Freeze this node and its subtree once the whole of it is valid.
        """
        self._verify()
        pending = [self]
        while pending:
            node = pending.pop()
            node._sealed = True
            pending.extend(node._children)

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def parse(self, prompt=Unset, /):
        """
        Resolve a prompt against this subtree (sealing it first).

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used verbatim.

        Returns
        - Resolution(command, route, arguments, reason)

        Raises
        - UnknownOptionError, MalformedOptionError, DuplicatedOptionError,
          ArgumentCountMismatchError for structural faults.
        """
        self._seal()
        return resolve(self, _tokenize(prompt))

    def dispatch(self, prompt=Unset, /):
        """
        Parse, then run the resolved action or fall back to help.

        Returns the action's result unchanged (None after help); exceptions
        from the matcher and from the action propagate as they are.
        """
        resolution = self.parse(prompt)
        if resolution.help:
            for step in reversed(resolution.route):
                if step._helper is not None:
                    step._helper(resolution.reason, resolution.command, resolution.arguments)
                    break
            else:
                command = resolution.command
                print_help(command, resolution.route, colorful=command.colorful, fancy=command.fancy)
            return None
        return resolution.command._action(resolution.arguments)

    def run(self, prompt=Unset, /):
        """
        Shell layer: dispatch and translate the outcome into an exit status.

        - CommandWarnings raised meanwhile are rendered on stderr.
        - Any CommandException (structural faults, TypeCoercionError from a
          typed getter, ActionError from the action) is rendered on stderr and
          yields 1.
        - An int returned by the action is the status; anything else is 0.
        """
        fault = None
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                result = self.dispatch(prompt)
            except CommandException as exception:
                fault = exception

        for warning in caught:
            if isinstance(warning.message, CommandWarning):
                trigger(warning.message, tool=self, shell=True, fancy=self.fancy, colorful=self.colorful)
            else:
                warnings.showwarning(warning.message, warning.category, warning.filename, warning.lineno)

        if fault is not None:
            console.print(copy.replace(fault, tool=self, fancy=self.fancy, colorful=self.colorful))
            return 1
        return result if type(result) is int else 0

    def __invoke__(self, prompt=Unset):
        """
        Execute this command: in shell mode exit with run()'s status,
        otherwise dispatch and raise faults to the caller.
        """
        if self.shell:
            sys.exit(self.run(prompt))
        try:
            return self.dispatch(prompt)
        except CommandException as fault:
            trigger(fault, tool=self, shell=False)


def _tokenize(prompt):
    """
    Normalize a prompt (Unset, str or iterable of str) into a token list.
    """
    if prompt is Unset:
        return sys.argv[1:]
    elif isinstance(prompt, str):
        return shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("prompt must be a string or an iterable of strings")


def command(source=Unset, /, name=Unset, descr=Unset, **flags):
    """
    Wrap a callable into a Command whose action is that callable.

    Invocation modes
    - Direct:     greet = command(greet_function, "greet")
    - Decorator:  @command  or  @command(name="greet", colorful=True)

    The name defaults to the callable's __name__ (underscores become dashes)
    and the description to its docstring.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        default = getattr(source, "__name__", None)
        return Command(
            coalesce(name, default.replace("_", "-") if isinstance(default, str) else Unset),
            coalesce(descr, inspect.getdoc(source) or Unset),
            **flags
        ).action(source)

    return wrapper(source) if source is not Unset else wrapper


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for commands or callables.

    - If 'object' implements __invoke__, call it with prompt.
    - If 'object' is a plain callable, wrap it as a Command and then invoke.
    - Otherwise, raise TypeError.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    if callable(object):
        return invoke(command(object), prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Command",
    "command",
    "invoke",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
