"""
Icicle utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided", distinct from None.
- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.
- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated helpers.
- mirror("attr")
  • Read-only property over a private backing field (self._attr), returning
    copies of containers so the public surface cannot mutate a node.
- ordinal(number)
  • Human-friendly ordinal label ("first", "second", "11th") for position-first messages.
- split_names(text)
  • Split a "-x, --x" declaration into its names.

Names not in __all__ are internal and may change without notice.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for parameters that were not provided.

    - bool(Unset) is False, but Unset is not None.
    - repr(Unset) -> "Unset".
    - UnsetType() always yields the same instance; subclassing is forbidden.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object unless it is Unset, in which case return default.

    Falsey values are kept as-is:
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable (rename(f, "x")) or return a
    decorator doing so (@rename("x")).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Copy container values one level at a time, leaving leaves untouched.

    Command nodes and descriptors are leaves here: callers get fresh lists and
    dicts, but the very same node objects inside them.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_detach, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Set):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the backing attribute "_{name}".

    Containers are returned as detached copies, so appending to
    `command.children` never grows the tree.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return an ordinal label for a 1-based position.

    1..10 are spelled out ("first"…"tenth"); others use numeric suffixes
    with the teens exception (11th, 12th, 13th, 111th…).
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def split_names(*names):
    """
    Flatten option name declarations into a tuple of trimmed names.

    Accepts any mix of single names and comma separated lists:
    - split_names("-x, --x")       -> ("-x", "--x")
    - split_names("-x", "--x")     -> ("-x", "--x")
    Empty fragments are kept (as "") so the caller can reject them.
    """
    result = []
    for name in names:
        if not isinstance(name, str):
            raise TypeError("option names must be strings")
        result.extend(fragment.strip() for fragment in name.split(","))
    return tuple(result)


Unset = UnsetType()
"""
Sentinel for "not provided"; see UnsetType.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "split_names",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
