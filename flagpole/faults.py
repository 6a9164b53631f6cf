"""
Flagpole faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse failure.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ParseFault: base type that carries message + options and knows how to render
  itself through rich.
- One subclass per failure kind the parsing engine can report.
- trigger(): central entry point to surface a fault (raise, or print and exit).
- getdoc(): optional description lookup for a code from the host application.

Contract with the engine
- The engine builds faults and hands them back inside a ParseResult. It never
  raises, prints or exits on its own; surfacing is always the caller's choice.
- Every fault names what it blames: the flag text (input), the raw token
  (token) or the positional record (argument), plus the 1-based token index.

Integration
- Callers check the result and, when they want CLI behavior, call
  trigger(fault, shell=True) or ParseResult.trigger(shell=True).
- In non-shell mode, faults are raised; in shell mode, they are rendered via rich.
"""
import sys
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
    canonical fault codes used by the parser (stable identifiers).

    grouping (by high-level domain)
    - flags (1111x)
      • UNMATCHED_FLAG, JOINED_VALUE_DISALLOWED, SEPARATE_VALUE_DISALLOWED,
        UNEXPECTED_VALUE, MISSING_VALUE
    - positionals (1112x)
      • NO_POSITIONAL_SLOT
    - conversions (1113x)
      • INVALID_VALUE, POSITIONAL_INVALID_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- flag errors (1111x) ---
    UNMATCHED_FLAG              = 11112
    JOINED_VALUE_DISALLOWED     = 11113
    SEPARATE_VALUE_DISALLOWED   = 11114
    UNEXPECTED_VALUE            = 11115
    MISSING_VALUE               = 11117

    # --- positional errors (1112x) ---
    NO_POSITIONAL_SLOT          = 11121

    # --- conversion errors (1113x) ---
    INVALID_VALUE               = 11131
    POSITIONAL_INVALID_VALUE    = 11132

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseFault(Exception):
    """
    base class of every failure the parsing engine reports.

    attributes
    - message: str, the one-line description (also str(fault)).
    - options: read-only mapping with the context of the failure
      (title, code, hint, input, token, index, argument, docs) and, once
      surfaced, the rendering flags (shell, fancy, colorful, deferred, parser).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def index(self):
        return self.options.get("index")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

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

        parser = self.options.get("parser")
        prog = getattr(main, "__prog__", getattr(parser, "prog", None)) or "flagpole"
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            text(prog, styler("prog-name")),
            " — ",
            text(code.normalize() if code else "?", styler("code")),
            " | ",
            text(str(self.options.get("title", "parse error")).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            width = self.options.get("width")
            return Panel(Group(*renders), title=header, title_align="left", width=width)

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        if self.options.get("deferred"):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnmatchedFlagError(ParseFault): ...
class JoinedValueDisallowedError(ParseFault): ...
class SeparateValueDisallowedError(ParseFault): ...
class MissingValueError(ParseFault): ...
class InvalidValueError(ParseFault): ...
class UnexpectedValueError(ParseFault): ...
class NoPositionalSlotError(ParseFault): ...
class PositionalInvalidValueError(InvalidValueError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseFault).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, the fault is raised.

    typical options
    - parser, shell, fancy, colorful, deferred, and any other context the
      renderer may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseFault",
    "UnmatchedFlagError",
    "JoinedValueDisallowedError",
    "SeparateValueDisallowedError",
    "MissingValueError",
    "InvalidValueError",
    "UnexpectedValueError",
    "NoPositionalSlotError",
    "PositionalInvalidValueError",
    "FaultCode",
    "trigger",
    "getdoc",
)
