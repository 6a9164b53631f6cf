"""
Flagpole flag matchers.

Overview
- ShortFlag / LongFlag
  • Tagged flag literals: a ShortFlag is exactly one character ('v'), a
    LongFlag is one non-empty name ("verbose"). Both are str subclasses, so they
    print and compare like the text they wrap; the type is the tag. Prefixes are
    never part of the literal, they belong to the parser syntax.
- Matcher
  • Immutable pair (frozenset of short characters, frozenset of long names)
    identifying one option record.
  • Matching is exact set membership, nothing else (no prefixes, no abbreviations).

Construction
- Matcher('v', "verbose")                  mixed literals, classified by length
- Matcher(ShortFlag("v"), LongFlag("x"))   explicit tags (e.g. a one-letter long name)
- Matcher.split("vV", ["verbose"])         separate short/long iterables
- Matcher.from_chars("vV")                 shorts only
- Matcher.from_strings(["verbose"])        longs only

Literals are validated on construction: non-string values raise TypeError,
empty strings and whitespace raise ValueError.
"""
from collections.abc import Iterable

from .utils import mirror


class ShortFlag(str):
    """
    A single-character flag literal, matched inside short clusters ("-abc").
    """
    __slots__ = ()

    def __new__(cls, char):
        if not isinstance(char, str):
            raise TypeError("short flag must be a string")
        if len(char) != 1:
            raise ValueError(f"short flag must be exactly one character, got {char!r}")
        if char.isspace():
            raise ValueError("short flag cannot be whitespace")
        return super().__new__(cls, char)

    def __repr__(self):
        return f"ShortFlag({str(self)!r})"


class LongFlag(str):
    """
    A named flag literal, matched after the long prefix ("--name").
    """
    __slots__ = ()

    def __new__(cls, name):
        if not isinstance(name, str):
            raise TypeError("long flag must be a string")
        if not name:
            raise ValueError("long flag cannot be an empty string")
        if any(char.isspace() for char in name):
            raise ValueError(f"long flag cannot contain whitespace, got {name!r}")
        return super().__new__(cls, name)

    def __repr__(self):
        return f"LongFlag({str(self)!r})"


def _classify(flag):
    """
    Turn one mixed literal into its tagged form.

    - ShortFlag / LongFlag pass through unchanged.
    - A one-character string is short, a longer string is long.
    """
    if isinstance(flag, ShortFlag | LongFlag):
        return flag
    if not isinstance(flag, str):
        raise TypeError(f"flag literals must be strings, got {type(flag).__name__}")
    if len(flag) == 1:
        return ShortFlag(flag)
    return LongFlag(flag)


class Matcher:
    """
    Immutable set of short characters and long names identifying one option.

    Instances are built once per record and never mutated; queries are pure
    membership tests and are safe to run from any thread.
    """
    __slots__ = ("_shorts", "_longs")

    shorts = mirror("shorts")
    longs = mirror("longs")

    def __init__(self, *flags):
        shorts = []
        longs = []
        for flag in map(_classify, flags):
            (shorts if isinstance(flag, ShortFlag) else longs).append(flag)
        self._freeze(shorts, longs)

    def _freeze(self, shorts, longs):
        # Plain str members: lookups come from token slices, never from tagged literals.
        object.__setattr__(self, "_shorts", frozenset(map(str, shorts)))
        object.__setattr__(self, "_longs", frozenset(map(str, longs)))

    @classmethod
    def split(cls, shorts=(), longs=(), /):
        """
        Build a matcher from an iterable of short characters and an iterable of
        long names.

        A plain string is accepted for shorts ("vV" is two short flags); a plain
        string for longs is rejected since it would silently split into letters.
        """
        if isinstance(longs, str):
            raise TypeError("Matcher.split() long flags must be an iterable of strings, not a string")
        if not isinstance(shorts, Iterable) or not isinstance(longs, Iterable):
            raise TypeError("Matcher.split() arguments must be iterables")
        self = cls.__new__(cls)
        self._freeze(list(map(ShortFlag, shorts)), list(map(LongFlag, longs)))
        return self

    @classmethod
    def from_chars(cls, chars, /):
        return cls.split(chars, ())

    @classmethod
    def from_strings(cls, names, /):
        return cls.split((), names)

    def match_short(self, char, /):
        return char in self._shorts

    def match_long(self, name, /):
        return name in self._longs

    def match(self, flag, /):
        """
        Exact membership test against either set.

        ShortFlag/LongFlag are dispatched by tag; a plain one-character string
        is tested against the short set, any other string against the long set.
        """
        if isinstance(flag, ShortFlag):
            return self.match_short(flag)
        if isinstance(flag, LongFlag):
            return self.match_long(flag)
        if isinstance(flag, str) and len(flag) == 1:
            return self.match_short(flag)
        return self.match_long(flag)

    def __iter__(self):
        """
        Yield tagged flags: shorts first, then longs, each sorted for stable output.
        """
        yield from map(ShortFlag, sorted(self._shorts))
        yield from map(LongFlag, sorted(self._longs))

    def __bool__(self):
        return bool(self._shorts or self._longs)

    def __eq__(self, other):
        if not isinstance(other, Matcher):
            return NotImplemented
        return self._shorts == other._shorts and self._longs == other._longs

    def __hash__(self):
        return hash((self._shorts, self._longs))

    def __setattr__(self, name, value, /):
        raise AttributeError("matcher is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("matcher is immutable")

    def __repr__(self):
        return "matcher(%s)" % ", ".join(map(repr, map(str, self)))

    def __rich_repr__(self):
        for flag in self:
            yield str(flag)


__all__ = (
    "ShortFlag",
    "LongFlag",
    "Matcher",
)
