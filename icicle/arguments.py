r"""
Icicle argument descriptors.

Overview
- Option: a named option with one or more aliases (e.g. -x/--x), a short
  description and whether it carries a value (`-x=5`) or is a bare switch
  (`-v`).
- Argument: a positional slot, either SINGLE (one token, required or
  optional) or ARRAY (every remaining positional token).
- ArgumentKind: the SINGLE/ARRAY tag.

Introspection & representation
- ArgumentType metaclass exposes the fields listed in __introspectable__ as
  read-only properties and provides stable __repr__/__rich_repr__.

Validation highlights
- Option names must match r"--?[^\W\d_](-?[^\W_]+)*" and be unique within one
  option; "--help" is reserved for the help trigger.
- descr strings are trimmed; empty strings are rejected.

Descriptors are immutable values: once built, a node only stores them.
"""
import enum
import functools
import operator
import re

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable value types.

    - __typename__ is derived from the class name (camel-case split with
      hyphens) and used in error messages.
    - Every name in __introspectable__ becomes a read-only property over the
      matching "_name" field.
    """
    __introspectable__ = ()

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
            - option(names=['-x', '--x'], descr='first number', valued=True)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_descr(cls, descr, /):
    """
    Trim a description; Unset becomes None, empty strings are rejected.
    """
    if not isinstance(descr, str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return coalesce(descr)


class ArgumentKind(enum.Enum):
    """
    Shape of a positional slot.
    """
    SINGLE = "single"
    ARRAY = "array"


class Option(metaclass=ArgumentType):
    """
    Named option descriptor.

    Names are given individually or comma separated ("-x, --x"). A valued
    option is written `-x=<value>`; a valueless one (valued=False) is a bare
    switch and reads back as the string "true" when present.
    """

    __introspectable__ = (
        "names",
        "descr",
        "valued",
    )

    def __init__(self, *names, descr=Unset, valued=True):
        names = split_names(*names)
        if not names:
            raise TypeError(f"{type(self).__typename__} must specify at least one name")

        seen = []
        for name in names:
            if not name:
                raise ValueError(f"{type(self).__typename__} names cannot be empty-strings")
            elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
                raise ValueError(f"{type(self).__typename__} name {name!r} is not a valid option name (e.g. -x or --name)")
            elif name == "--help":
                raise ValueError(f"{type(self).__typename__} name '--help' is reserved")
            elif name in seen:
                raise ValueError(f"{type(self).__typename__} names cannot contain duplicates")
            seen.append(name)

        if not isinstance(valued, bool):
            raise TypeError(f"{type(self).__typename__} 'valued' must be a boolean")

        self._names = tuple(seen)
        self._descr = _sanitize_descr(type(self), descr)
        self._valued = valued

    @property
    def canonical(self):
        """
        The key used in ParsedArguments.options: the longest declared name
        (first one wins on ties), so "-x, --x" is stored as "--x".
        """
        return max(self._names, key=len)

    @property
    def bare(self):
        """
        Names stripped of their leading dashes ("-x", "--x" -> {"x"}).
        """
        return {name.lstrip("-") for name in self._names}

    def __eq__(self, other):
        if not isinstance(other, Option):
            return NotImplemented
        return (self._names, self._descr, self._valued) == (other._names, other._descr, other._valued)

    def __hash__(self):
        return hash((self._names, self._descr, self._valued))


class Argument(metaclass=ArgumentType):
    """
    Positional slot descriptor.

    - Argument("file") is a required single slot.
    - Argument("file", required=False) is an optional single slot.
    - Argument("names", kind=ArgumentKind.ARRAY) takes all remaining
      positionals; it is never "required" (zero tokens are fine).
    """

    __introspectable__ = (
        "descr",
        "kind",
        "required",
    )

    def __init__(self, descr=Unset, /, kind=ArgumentKind.SINGLE, *, required=True):
        if not isinstance(kind, ArgumentKind):
            raise TypeError(f"{type(self).__typename__} 'kind' must be an argument kind")
        if not isinstance(required, bool):
            raise TypeError(f"{type(self).__typename__} 'required' must be a boolean")

        self._descr = _sanitize_descr(type(self), descr)
        self._kind = kind
        self._required = required and kind is ArgumentKind.SINGLE

    @property
    def array(self):
        return self._kind is ArgumentKind.ARRAY

    def __eq__(self, other):
        if not isinstance(other, Argument):
            return NotImplemented
        return (self._descr, self._kind, self._required) == (other._descr, other._kind, other._required)

    def __hash__(self):
        return hash((self._descr, self._kind, self._required))


__all__ = (
    "ArgumentKind",
    "Option",
    "Argument",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
