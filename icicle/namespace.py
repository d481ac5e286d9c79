"""
Icicle parsed arguments: the per-invocation data handed to an action.

ParsedArguments keeps raw strings only. Coercion happens on access, through
any `str -> T` callable, so the same value can be read at several types:

    >>> arguments.get("x", type=int)
    5
    >>> arguments.get_or("-x", "--x")
    '5'

Missing options read back as the given default (None unless told otherwise);
values that cannot be converted raise TypeCoercionError at that moment,
never during parsing.
"""
from collections.abc import Iterable, Mapping

from .faults import FaultCode, TypeCoercionError
from .utils import *

_BOOLEANS = {"true": True, "false": False}


def convert(value, type=str, /):
    """
    Convert one raw string with a `str -> T` callable.

    `bool` is special-cased: only "true"/"false" (any case) are accepted,
    since bool("false") would be True.
    """
    if type is bool:
        try:
            return _BOOLEANS[value.lower()]
        except KeyError:
            raise ValueError(f"invalid boolean literal {value!r}") from None
    return type(value)


class ParsedArguments:
    """
    Options and positionals bound to one resolved command.

    - options: mapping canonical option name -> raw value (present ones only).
    - positionals: ordered raw positional tokens (named slots first, then the
      array tail when the command declares one).

    Option lookups accept any declared name of the option and its bare form
    ("x" for "-x"/"--x").
    """

    def __init__(self, options=(), positionals=(), /, command=None, aliases=Unset):
        if not isinstance(options, Mapping):
            options = dict(options)
        if not isinstance(positionals, Iterable) or isinstance(positionals, str):
            raise TypeError("parsed arguments 'positionals' must be an iterable of strings")

        self._options = dict(options)
        self._positionals = list(positionals)
        self._command = command

        if aliases is Unset:
            # Standalone construction: every key answers to itself and its bare form.
            aliases = {}
            for key in self._options:
                aliases.setdefault(key, key)
                aliases.setdefault(key.lstrip("-"), key)
        self._aliases = dict(aliases)

    @property
    def command(self):
        """
        The command these arguments were bound to (None when built by hand).
        """
        return self._command

    @property
    def options(self):
        return dict(self._options)

    @property
    def positionals(self):
        return list(self._positionals)

    def _lookup(self, name):
        if not isinstance(name, str):
            raise TypeError("option name must be a string")
        return self._aliases.get(name, name)

    def _coerce(self, value, type, label):
        try:
            return convert(value, type)
        except (TypeError, ValueError) as exception:
            typename = getattr(type, "__name__", repr(type))
            raise TypeCoercionError(
                "cannot read %s value %r as %s" % (label, value, typename),
                title="type coercion failed",
                code=FaultCode.TYPE_COERCION,
                command=self._command,
                token=value,
                hint="pass a value that %s accepts" % typename,
                exception=exception,
            ) from exception

    def has(self, name, /):
        """
        Whether the option answering to `name` was given.
        """
        return self._lookup(name) in self._options

    def has_or(self, name, other, /):
        return self.has(name) or self.has(other)

    def get(self, name, /, type=str, default=None):
        """
        Read an option as `type`; `default` when the option was not given.

        Raises TypeCoercionError when the raw value does not convert.
        """
        try:
            value = self._options[key := self._lookup(name)]
        except KeyError:
            return default
        return self._coerce(value, type, "option %r" % key)

    def get_or(self, name, other, /, type=str, default=None):
        """
        Read the first given of two names (typically the short and long form).
        """
        if self.has(name):
            return self.get(name, type=type, default=default)
        return self.get(other, type=type, default=default)

    def has_at(self, index, /):
        return 0 <= index < len(self._positionals)

    def at(self, index, /, type=str, default=None):
        """
        Read the positional at `index` as `type`; `default` when out of range.
        """
        if not self.has_at(index):
            return default
        return self._coerce(self._positionals[index], type, "%s positional" % ordinal(index + 1))

    def range(self, start, stop, /, type=str):
        """
        Read positionals [start, stop) as a list of `type`.

        Raises IndexError when the range does not fit the positionals.
        """
        if not 0 <= start <= stop <= len(self._positionals):
            raise IndexError("positional range %d..%d is out of bounds" % (start, stop))
        return [
            self._coerce(value, type, "%s positional" % ordinal(index + 1))
            for index, value in enumerate(self._positionals[start:stop], start)
        ]

    def iter(self):
        return iter(self._positionals)

    def join(self, separator=" ", /):
        """
        Positionals as one display string (for echoing input back).
        """
        return separator.join(self._positionals)

    def __iter__(self):
        return iter(self._positionals)

    def __len__(self):
        return len(self._positionals)

    def __getitem__(self, index):
        return self._positionals[index]

    def __eq__(self, other):
        if not isinstance(other, ParsedArguments):
            return NotImplemented
        return (self._options, self._positionals) == (other._options, other._positionals)

    def __repr__(self):
        return "parsed-arguments(options=%r, positionals=%r)" % (self._options, self._positionals)

    def __rich_repr__(self):
        yield "options", self._options
        yield "positionals", self._positionals


__all__ = (
    "ParsedArguments",
    "convert",
)
