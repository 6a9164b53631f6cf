"""
Flagpole registry: the ordered store of argument records owned by one parser.

Layout
- options: flag-bound records (Option and Flag) in registration order.
- positionals: position-bound records (Positional) in registration order.

Lookups
- match_short(char) / match_long(name) / match_option(flag): linear scan of
  the options, first record whose matcher accepts the flag wins. Overlapping
  flags across records are a caller mistake: they are neither detected nor
  rejected, registration order silently decides.
- next_positional(): the first positional not yet matched, or None.
- registry[name]: lookup by record name, for callers that did not keep the
  reference returned at registration time.

Both scans are O(number of records); parsers hold tens of records at most and
every token triggers at most one lookup, so no index is maintained.
"""
import logging

from .records import Argument, Option, Flag, Positional

logger = logging.getLogger(__name__)


class Registry:
    """
    Ordered, exclusively owned collection of option and positional records.
    """
    __slots__ = ("_options", "_positionals")

    def __init__(self):
        self._options = []
        self._positionals = []

    @property
    def options(self):
        return tuple(self._options)

    @property
    def positionals(self):
        return tuple(self._positionals)

    def add(self, record, /):
        """
        Take ownership of a record and return it for the caller to keep.
        """
        if isinstance(record, Positional):
            self._positionals.append(record)
        elif isinstance(record, Option | Flag):
            self._options.append(record)
        else:
            raise TypeError(f"registry accepts only argument records, got {type(record).__name__}")
        logger.debug("registered %r", record)
        return record

    def match_short(self, char, /):
        for record in self._options:
            if record.matcher.match_short(char):
                return record
        return None

    def match_long(self, name, /):
        for record in self._options:
            if record.matcher.match_long(name):
                return record
        return None

    def match_option(self, flag, /):
        """
        Return the first option whose matcher accepts `flag` (see Matcher.match), or None.
        """
        for record in self._options:
            if record.matcher.match(flag):
                return record
        return None

    def next_positional(self):
        for record in self._positionals:
            if not record.matched:
                return record
        return None

    def __getitem__(self, name, /):
        for record in self:
            if record.name == name:
                return record
        raise KeyError(name)

    def __contains__(self, object, /):
        if isinstance(object, Argument):
            return any(record is object for record in self)
        return any(record.name == object for record in self)

    def __iter__(self):
        yield from self._options
        yield from self._positionals

    def __len__(self):
        return len(self._options) + len(self._positionals)

    def __repr__(self):
        return "registry(options=%r, positionals=%r)" % (self._options, self._positionals)

    def __rich_repr__(self):
        yield "options", self.options
        yield "positionals", self.positionals


__all__ = (
    "Registry",
)
