"""
Flagpole parser: declare records, then bind a token list to them in one pass.

What this module provides
- Syntax: the immutable token grammar of one parser (prefixes, separator,
  terminator, and which value forms are allowed).
- ArgumentParser: owns the registry, exposes the registration calls and runs
  the parsing engine.
- ParseResult: the outcome of a parse, truthy on success, carrying the fault
  otherwise.

Quick start
    from flagpole import ArgumentParser

    parser = ArgumentParser("This is a test program", "This is the big epilogue")
    verbose = parser.add_flag("VERBOSE", ("v", "verbose"), help="say more")
    double = parser.add_option("DOUBLE", ("d", "double"), type=float, default=25.0)
    path = parser.add_positional("PATH")

    result = parser.parseargs(["-vd", "3.5", "./README.md"])
    if not result:
        result.trigger(shell=True)  # prints the fault through rich and exits
    print(verbose.value, double.value, path.value)

Token classification (first rule that applies wins)
1. terminator: the exact terminator token ("--") switches every later token to
   positional and is itself consumed.
2. long flag: "--name", "--name=value" or "--name value".
3. short cluster: "-abc", "-ovalue" or "-o value"; presence flags may be chained,
   the first value-bearing flag consumes the rest of the cluster (or the next token).
4. positional: everything else, given to the first positional not yet matched.

Design notes
- The first fault aborts the parse and is returned, never raised: callers decide
  whether to print, raise or exit (see ParseResult.trigger).
- Values are converted by the record's slot; a slot never raises, it reports a
  plain failure which the engine attributes to the flag or positional.
- Flag lookups are exact; nothing is abbreviated or reordered.
"""
import difflib
import logging
import os.path
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple

from .faults import *
from .records import Option, Flag, Positional
from .registry import Registry
from .utils import *

logger = logging.getLogger(__name__)


class Syntax(NamedTuple):
    """
    Token grammar of a parser, fixed at construction.

    - long_prefix: marks long flags ("--name").
    - short_prefix: marks short clusters ("-abc").
    - long_separator: splits "--name=value"; "" disables joined long values.
    - terminator: forces every later token positional; None disables it.
      With the defaults it equals the long prefix, so a bare "--" is always the
      terminator and never a flag.
    - joined_long / joined_short: accept "--name=value" / "-nvalue".
    - separate_long / separate_short: accept "--name value" / "-n value".
    """
    long_prefix: str = "--"
    short_prefix: str = "-"
    long_separator: str = "="
    terminator: str | None = "--"
    joined_long: bool = True
    joined_short: bool = True
    separate_long: bool = True
    separate_short: bool = True


def _sanitize_syntax(syntax, /):
    """
    Internal: validate a Syntax and coerce its permissions to bool.

    Raises
    - TypeError: when prefixes/separator are not strings, or the terminator is
      neither a string nor None.
    - ValueError: when a prefix or the terminator is an empty string.
    """
    for field in ("long_prefix", "short_prefix"):
        if not isinstance(value := getattr(syntax, field), str):
            raise TypeError(f"syntax {field!r} must be a string")
        elif not value:
            raise ValueError(f"syntax {field!r} cannot be empty")
    if not isinstance(syntax.long_separator, str):
        raise TypeError("syntax 'long_separator' must be a string")
    if not isinstance(terminator := syntax.terminator, str | None):
        raise TypeError("syntax 'terminator' must be a string or None")
    elif isinstance(terminator, str) and not terminator:
        raise ValueError("syntax 'terminator' cannot be empty (use None to disable it)")
    return syntax._replace(
        joined_long=bool(syntax.joined_long),
        joined_short=bool(syntax.joined_short),
        separate_long=bool(syntax.separate_long),
        separate_short=bool(syntax.separate_short),
    )


def _sanitize_text(field, text, /):
    if not isinstance(text, str | Unset):
        raise TypeError(f"argument-parser {field!r} must be a string")
    elif isinstance(text, str) and not (text := text.strip()):
        raise ValueError(f"argument-parser {field!r} cannot be empty")
    return coalesce(text)


def _sanitized(tokens):
    """
    Yield tokens unchanged, validating their type.

    Tokens are never trimmed or dropped: an empty or blank token is a value like
    any other.

    Raises
    - TypeError: if tokens is a bare string or an element is not a string.
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("parseargs() argument must be an iterable of strings")
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parseargs() argument must be an iterable of strings")
        yield token


class ParseResult:
    """
    Outcome of one parse: truthy when every token was bound, falsy otherwise.

    attributes
    - fault: the ParseFault that stopped the parse, or None.
    - message: the fault message, or "" on success.
    - parser: the parser that produced this result (used for rendering).
    """
    __slots__ = ("_fault", "_parser")

    def __init__(self, fault=None, parser=None):
        self._fault = fault
        self._parser = parser

    @property
    def fault(self):
        return self._fault

    @property
    def parser(self):
        return self._parser

    @property
    def ok(self):
        return self._fault is None

    @property
    def message(self):
        return "" if self._fault is None else self._fault.message

    def __bool__(self):
        return self._fault is None

    def trigger(self, **options):
        """
        Surface the fault, if any (see faults.trigger for the options).

        - shell=False (default): raise the fault.
        - shell=True: print it through rich on stderr, then exit(1) unless deferred=True.
        """
        if self._fault is None:
            return
        trigger(self._fault, parser=self._parser, **options)

    def __repr__(self):
        if self._fault is None:
            return "parse-result(ok=True)"
        return "parse-result(ok=False, fault=%s(%r))" % (type(self._fault).__name__, self._fault.message)

    def __rich_repr__(self):
        yield "ok", self.ok
        if self._fault is not None:
            yield "fault", self._fault


class ArgumentParser:
    """
    Owner of a registry of records and runner of the parsing engine.

    Lifecycle
    - Construct with optional description/epilog/prog and the syntax options.
    - Register records with add_option / add_flag / add_positional; keep the
      returned references.
    - Call parseargs (or parsecli / parseprompt) once, check the result, read
      values from the references.

    The parser is not thread-safe and is meant to be run once per invocation:
    records keep their matched marker, so a second parse sees positionals that
    are already filled.
    """

    def __init__(self, description=Unset, epilog=Unset, prog=Unset, /, *, syntax=Unset, **options):
        """
        Parameters
        - description / epilog / prog: Unset | str
          Read by help collaborators and fault rendering only. prog is filled
          from argv[0] by parsecli() when left unset.
        - syntax: Unset | Syntax
          Complete grammar to use; defaults to Syntax().
        - **options: individual Syntax fields (long_prefix, short_prefix,
          long_separator, terminator, joined_long, joined_short, separate_long,
          separate_short) overriding the given or default syntax.
        """
        if not isinstance(syntax, Syntax | Unset):
            raise TypeError("argument-parser 'syntax' must be a Syntax")
        if unknown := set(options) - set(Syntax._fields):
            raise TypeError(f"argument-parser got unexpected syntax options: {', '.join(sorted(unknown))}")

        self._description = _sanitize_text("description", description)
        self._epilog = _sanitize_text("epilog", epilog)
        self._prog = _sanitize_text("prog", prog)
        self._syntax = _sanitize_syntax(coalesce(syntax, Syntax())._replace(**options))
        self._registry = Registry()
        self._fault = None
        self._tokens = deque()
        self._index = 0

    @property
    def description(self):
        return self._description

    @property
    def epilog(self):
        return self._epilog

    @property
    def prog(self):
        return self._prog

    @property
    def syntax(self):
        return self._syntax

    @property
    def registry(self):
        return self._registry

    @property
    def fault(self):
        """
        The fault of the last parse, or None.
        """
        return self._fault

    @property
    def error(self):
        """
        The message of the last parse's fault, or "" when it succeeded.
        """
        return "" if self._fault is None else self._fault.message

    def add_option(self, name, matcher, /, type=str, default=Unset, choices=(), help=Unset):
        """
        Register a value-bearing option and return it.

        - matcher: a Matcher, or the mixed flag literals to build one
          (('d', "double") is -d and --double).
        - type: the value type; its conversion rule comes from slots.converter.
        - default: value held until a parse replaces it.
        - choices: allowed values (after conversion); empty means any.
        """
        return self._registry.add(Option(name, matcher, type=type, default=default, choices=choices, help=help))

    def add_flag(self, name, matcher, /, help=Unset):
        """
        Register a presence-only flag and return it.
        """
        return self._registry.add(Flag(name, matcher, help=help))

    def add_positional(self, name, /, type=str, default=Unset, choices=(), help=Unset):
        """
        Register a positional and return it. Positionals fill in registration order.
        """
        return self._registry.add(Positional(name, type=type, default=default, choices=choices, help=help))

    def _pull(self):
        """
        Consume the next token as a separate value; Unset when the stream is exhausted.
        """
        if not self._tokens:
            return Unset
        self._index += 1
        return self._tokens.popleft()

    def _bind(self, record, input, value):
        """
        Hand a value to the record's slot; return the fault on failure, None otherwise.
        """
        if record.slot.parse(value):
            logger.debug("bound %r to %s", value, record.name)
            return None
        return InvalidValueError(
            "Flag '%s' received an invalid value" % input,
            title="invalid value",
            code=FaultCode.INVALID_VALUE,
            hint="expected a value of type %s for %r" % (getattr(record.type, "__name__", "value"), input),
            input=input,
            token=value,
            index=self._index,
            argument=record,
            docs=getdoc(FaultCode.INVALID_VALUE),
        )

    def _bind_joined(self, record, input, value, *, allowed):
        if not allowed:
            return JoinedValueDisallowedError(
                "Flag '%s' was passed a joined argument, but these are disallowed" % input,
                title="joined value disallowed",
                code=FaultCode.JOINED_VALUE_DISALLOWED,
                hint="pass the value of %r as the next token instead" % input,
                input=input,
                token=value,
                index=self._index,
                argument=record,
                docs=getdoc(FaultCode.JOINED_VALUE_DISALLOWED),
            )
        return self._bind(record, input, value)

    def _bind_separate(self, record, input, *, allowed):
        if (value := self._pull()) is Unset:
            return MissingValueError(
                "Flag '%s' requires an argument but received none" % input,
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="add a value after %r" % input,
                input=input,
                index=self._index,
                argument=record,
                docs=getdoc(FaultCode.MISSING_VALUE),
            )
        if not allowed:
            return SeparateValueDisallowedError(
                "Flag '%s' was passed a separate argument, but these are disallowed" % input,
                title="separate value disallowed",
                code=FaultCode.SEPARATE_VALUE_DISALLOWED,
                hint="join the value to %r instead" % input,
                input=input,
                token=value,
                index=self._index,
                argument=record,
                docs=getdoc(FaultCode.SEPARATE_VALUE_DISALLOWED),
            )
        return self._bind(record, input, value)

    def _unmatched(self, input, candidates):
        suggestions = difflib.get_close_matches(input, candidates, 3)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "check the spelling of the flag"
        return UnmatchedFlagError(
            "Flag could not be matched: %s" % input,
            title="unmatched flag",
            code=FaultCode.UNMATCHED_FLAG,
            hint=hint,
            input=input,
            index=self._index,
            suggestions=suggestions,
            docs=getdoc(FaultCode.UNMATCHED_FLAG),
        )

    def _parse_long(self, token):
        syntax = self._syntax
        chunk = token[len(syntax.long_prefix):]

        # Split at the first separator only; the value may contain more of them.
        if syntax.long_separator and syntax.long_separator in chunk:
            input, _, value = chunk.partition(syntax.long_separator)
        else:
            input, value = chunk, Unset

        if (record := self._registry.match_long(input)) is None:
            return self._unmatched(input, [name for record in self._registry.options for name in record.matcher.longs])
        record._matched = True

        if record.takes_value:
            if value is not Unset:
                return self._bind_joined(record, input, value, allowed=syntax.joined_long)
            return self._bind_separate(record, input, allowed=syntax.separate_long)

        if value is not Unset:
            return UnexpectedValueError(
                "Passed an argument into a non-argument flag: %s" % token,
                title="unexpected value",
                code=FaultCode.UNEXPECTED_VALUE,
                hint="remove everything from %r (for example: %s%s)" % (syntax.long_separator, syntax.long_prefix, input),
                input=input,
                token=token,
                index=self._index,
                argument=record,
                docs=getdoc(FaultCode.UNEXPECTED_VALUE),
            )
        logger.debug("flag %s set", record.name)
        return None

    def _parse_short(self, token):
        syntax = self._syntax
        chunk = token[len(syntax.short_prefix):]

        for position, input in enumerate(chunk, start=1):
            if (record := self._registry.match_short(input)) is None:
                return self._unmatched(input, [char for record in self._registry.options for char in record.matcher.shorts])
            record._matched = True

            if record.takes_value:
                # The rest of the cluster is this flag's value, never more flags.
                if value := chunk[position:]:
                    return self._bind_joined(record, input, value, allowed=syntax.joined_short)
                return self._bind_separate(record, input, allowed=syntax.separate_short)
            logger.debug("flag %s set", record.name)
        return None

    def _parse_positional(self, token):
        if (record := self._registry.next_positional()) is None:
            return NoPositionalSlotError(
                "Passed in argument, but no positional arguments were ready to receive it: %s" % token,
                title="unexpected positional",
                code=FaultCode.NO_POSITIONAL_SLOT,
                hint="remove this extra value, or put a terminator before values that start with a prefix",
                token=token,
                index=self._index,
                docs=getdoc(FaultCode.NO_POSITIONAL_SLOT),
            )
        if not record.slot.parse(token):
            return PositionalInvalidValueError(
                "Positional '%s' received an invalid value" % record.name,
                title="invalid positional value",
                code=FaultCode.POSITIONAL_INVALID_VALUE,
                hint="expected a value of type %s for %s" % (getattr(record.type, "__name__", "value"), record.name),
                input=record.name,
                token=token,
                index=self._index,
                argument=record,
                docs=getdoc(FaultCode.POSITIONAL_INVALID_VALUE),
            )
        record._matched = True
        logger.debug("bound %r to %s", token, record.name)
        return None

    def parseargs(self, tokens, /):
        """
        Bind every token to a record, in order, stopping at the first fault.

        Parameters
        - tokens: Iterable[str]
          The invocation tokens, program name excluded.

        Returns
        - ParseResult: truthy on success; otherwise carries the first fault.
          The same fault is kept on self.fault / self.error until the next parse.

        Raises
        - TypeError: only for a malformed call (tokens not an iterable of strings).
        """
        syntax = self._syntax
        self._tokens = deque(_sanitized(tokens))
        self._index = 0
        self._fault = None

        terminated = False
        while self._tokens:
            token = self._pull()

            if not terminated and token == syntax.terminator:
                logger.debug("terminator at position %d", self._index)
                terminated = True
                continue
            elif not terminated and token.startswith(syntax.long_prefix) and len(token) > len(syntax.long_prefix):
                fault = self._parse_long(token)
            elif not terminated and token.startswith(syntax.short_prefix) and len(token) > len(syntax.short_prefix):
                fault = self._parse_short(token)
            else:
                fault = self._parse_positional(token)

            if fault is not None:
                logger.debug("parse stopped at position %d: %s", self._index, fault.message)
                self._tokens.clear()
                self._fault = fault
                return ParseResult(fault, self)

        return ParseResult(None, self)

    def parsecli(self, argv=Unset, /):
        """
        Parse a process argument vector: argv[0] names the program, the rest are tokens.

        - argv: Unset (use sys.argv) | Sequence[str]
        - prog is taken from argv[0] (basename) when it was not given.
        """
        argv = list(coalesce(argv, sys.argv))
        if not argv:
            return self.parseargs(())
        if self._prog is None and isinstance(argv[0], str) and argv[0]:
            self._prog = os.path.basename(argv[0])
        return self.parseargs(argv[1:])

    def parseprompt(self, prompt, /):
        """
        Parse a shell-like command line string (split with shlex, program name excluded).
        """
        if not isinstance(prompt, str):
            raise TypeError("parseprompt() argument must be a string")
        return self.parseargs(shlex.split(prompt))

    def __iter__(self):
        return iter(self._registry)

    def __getitem__(self, name, /):
        return self._registry[name]

    def __repr__(self):
        return "argument-parser(prog=%r, description=%r, syntax=%r, records=%d)" % (
            self._prog, self._description, self._syntax, len(self._registry)
        )

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "description", self._description
        yield "epilog", self._epilog
        yield "syntax", self._syntax
        yield "registry", self._registry


__all__ = (
    "Syntax",
    "ParseResult",
    "ArgumentParser",
)
