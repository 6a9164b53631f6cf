"""
Flagpole argument records.

Overview
- Records
  • Option[_T]: flag-bound, value-bearing record (matcher + value slot), e.g. -d/--double.
  • Flag: flag-bound, presence-only record (matcher, no slot), e.g. -v/--verbose.
  • Positional[_T]: position-bound, value-bearing record (slot, no matcher).
  All share an identity made of a name (used in error messages and lookups),
  a help text (descriptive only) and a matched marker set by the parser.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    selected fields via read-only properties declared in __introspectable__.

Ownership
- Records are created by the parser (ArgumentParser.add_option/add_flag/add_positional)
  and live as long as it does. Callers keep the returned reference to seed
  defaults, adjust help, and read values back after parsing.

Metadata (sanitized on construction)
- name: required non-empty string (trimmed).
- help: Unset | str (trimmed, non-empty when provided); Unset reads as None.
- matcher: a Matcher, or the flag literals to build one; must hold at least one flag.
- type/default/choices: forwarded to the ValueSlot.

Quick example:
    >>> double = Option("DUBFLAG", Matcher("d", "double"), type=float, default=25.0)
    >>> double.value
    25.0
    >>> verbose = Flag("VERBOSE", ("v", "verbose"))
    >>> verbose.value
    False
"""
import builtins
import functools
import operator
import re
from collections.abc import Iterable

from .matchers import Matcher
from .slots import ValueSlot
from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns record classes into introspectable descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help collaborators.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
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
            - option(name='DUBFLAG', matcher=matcher('d', 'double'), value=25.0, matched=False)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the identity shared by every record.

    - name: required string, non-empty after trimming.
    - help: optional string, non-empty after trimming when provided. Unset becomes None.

    Raises
    - TypeError: if 'name' or 'help' has the wrong type.
    - ValueError: if 'name' or 'help' is empty after trimming.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name
    metadata["help"] = _sanitize_help(cls, metadata["help"])


def _sanitize_help(cls, help, /):
    if not isinstance(help, str | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    return coalesce(help)


def _sanitize_flagged_metadata(cls, metadata, /):
    """
    Internal: normalize the matcher of flag-bound records (Option, Flag).

    Accepted forms
    - a Matcher instance (kept as-is),
    - a single flag literal ('v' or "verbose"),
    - an iterable of mixed literals ('v', "verbose").

    Raises
    - TypeError: when the matcher cannot be built or holds no flag at all.
    """
    matcher = metadata["matcher"]
    if isinstance(matcher, str):
        matcher = Matcher(matcher)
    elif isinstance(matcher, Iterable) and not isinstance(matcher, Matcher):
        matcher = Matcher(*matcher)
    elif not isinstance(matcher, Matcher):
        raise TypeError(f"{cls.__typename__} 'matcher' must be a matcher or flag literals")
    if not matcher:
        raise TypeError(f"{cls.__typename__} must specify at least one flag")
    metadata["matcher"] = matcher


class Argument(metaclass=ArgumentType):
    """
    Identity shared by every record: name, help and the matched marker.
    """
    takes_value = False

    def __init__(self, name, /, help=Unset):
        metadata = {"name": name, "help": help}
        _sanitize_metadata(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._matched = False

    @property
    def name(self):
        return self._name

    @property
    def help(self):
        return self._help

    @help.setter
    def help(self, help):
        self._help = _sanitize_help(type(self), help)

    @property
    def matched(self):
        """
        True once the parser bound this record to a token.
        """
        return self._matched


class Option[_T](Argument):
    """
    Flag-bound, value-bearing record.

    The matcher decides which tokens name this option; the slot converts the
    token's value. A matched option always consumed exactly one value.
    """
    takes_value = True

    __introspectable__ = (
        "matcher",
    )

    __displayable__ = (
        "name",
        "matcher",
        "value",
        "matched",
    )

    def __init__(self, name, matcher, /, type=str, default=Unset, choices=(), help=Unset):
        super().__init__(name, help)
        metadata = {"matcher": matcher}
        _sanitize_flagged_metadata(builtins.type(self), metadata)
        self._matcher = metadata["matcher"]
        self._slot = ValueSlot(type, default, choices)

    @property
    def slot(self):
        return self._slot

    @property
    def type(self):
        return self._slot.type

    @property
    def value(self):
        return self._slot.value

    @value.setter
    def value(self, value):
        self._slot.value = value

    default = value


class Flag(Argument):
    """
    Flag-bound, presence-only record.

    A flag carries no slot: its value is whether it was seen. Several flags can
    share one short cluster ("-abc").
    """
    __introspectable__ = (
        "matcher",
    )

    __displayable__ = (
        "name",
        "matcher",
        "matched",
    )

    def __init__(self, name, matcher, /, help=Unset):
        super().__init__(name, help)
        metadata = {"matcher": matcher}
        _sanitize_flagged_metadata(type(self), metadata)
        self._matcher = metadata["matcher"]

    @property
    def value(self):
        return self._matched


class Positional[_T](Argument):
    """
    Position-bound, value-bearing record.

    Positionals have no matcher; they receive non-flag tokens in registration
    order, each one at most once.
    """
    takes_value = True

    __displayable__ = (
        "name",
        "value",
        "matched",
    )

    def __init__(self, name, /, type=str, default=Unset, choices=(), help=Unset):
        super().__init__(name, help)
        self._slot = ValueSlot(type, default, choices)

    @property
    def slot(self):
        return self._slot

    @property
    def type(self):
        return self._slot.type

    @property
    def value(self):
        return self._slot.value

    @value.setter
    def value(self, value):
        self._slot.value = value

    default = value


__all__ = (
    "Argument",
    "Option",
    "Flag",
    "Positional",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
