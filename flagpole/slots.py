"""
Flagpole value slots: typed storage with a uniform "parse from text" capability.

Overview
- ValueSlot[_T]
  • Holds one value of type _T and knows how to convert a token into it.
  • parse(text) -> bool is the only capability the parser relies on, so slots
    of any type coexist in one registry.
  • On success the stored value is replaced; on failure it is left untouched
    (the default, if nothing was ever parsed) and False is returned.
  • Conversion never raises for a bad value: any exception raised by the rule
    is reported as a plain False.

- Conversion rules (converter(type))
  • str: the text itself.
  • int: base-10 int(text).
  • bool: true/false, yes/no, on/off, 1/0 (case-insensitive).
  • enum.Enum subclasses: member name, then member value as text.
  • anything else callable (float, complex, Decimal, Fraction, Path, user
    functions, ...): called with the text.
  • register(type, rule) installs a rule for a custom type.

Whole-input rule
- Empty text is always rejected.
- For every type but str, leading or trailing whitespace is rejected: the value
  must span the entire token, with nothing left unconsumed around it.

Choices
- When a slot is given choices, a converted value outside them is a failure.

Formatting
- render(value) renders a value back to the text its rule accepts, so that
  parse(render(v)) reproduces v for lossless types.
"""
import builtins
import enum

from .utils import Unset, coalesce, rename

_TRUTHY = frozenset({"true", "yes", "on", "1"})
_FALSY = frozenset({"false", "no", "off", "0"})


def _parse_bool(text):
    if (lowered := text.lower()) in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"invalid boolean literal: {text!r}")


def _parse_int(text):
    return int(text, 10)


def _parse_str(text):
    return text


_rules = {
    str: _parse_str,
    int: _parse_int,
    bool: _parse_bool,
}


def register(type, rule=Unset, /):
    """
    Install the text conversion rule used for `type`.

    Forms
    - register(Point, Point.fromtext)
    - @register(Point)
      def parse_point(text): ...

    The rule receives the whole token and must return the converted value or
    raise (any exception means "invalid value").
    """
    if not isinstance(type, builtins.type):
        raise TypeError("register() first argument must be a type")
    if rule is Unset:
        @rename("register")
        def wrapper(rule, /):
            return register(type, rule)
        return wrapper
    if not callable(rule):
        raise TypeError("register() rule must be callable")
    _rules[type] = rule
    return rule


def _enum_rule(cls):
    @rename(f"parse_{cls.__name__.lower()}")
    def rule(text):
        try:
            return cls[text]
        except KeyError:
            pass
        for member in cls:
            if str(member.value) == text:
                return member
        raise ValueError(f"{text!r} is not a valid {cls.__name__}")
    return rule


def converter(type, /):
    """
    Resolve the conversion rule for `type`.

    Lookup order: registered rule for the exact type, enum member lookup for
    Enum subclasses, then the callable itself.
    """
    try:
        return _rules[type]
    except (KeyError, TypeError):
        pass
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return _enum_rule(type)
    if not callable(type):
        raise TypeError(f"value type must be callable, got {type!r}")
    return type


def render(value, /):
    """
    Render a value as text its conversion rule accepts.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return value.name
    return str(value)


class ValueSlot[_T]:
    """
    Storage for one typed value plus the rule that parses it from text.
    """
    __slots__ = ("_type", "_rule", "_strict", "_choices", "_value")

    def __init__(self, type=str, default=Unset, choices=()):
        self._type = type
        self._rule = converter(type)
        # Only plain text may carry surrounding whitespace.
        self._strict = not (isinstance(type, builtins.type) and issubclass(type, str))
        if isinstance(choices, str):
            raise TypeError("slot 'choices' must be a collection of values, not a string")
        self._choices = tuple(choices)
        self._value = default

    @property
    def type(self):
        return self._type

    @property
    def choices(self):
        return self._choices

    @property
    def value(self):
        return coalesce(self._value)

    @value.setter
    def value(self, value):
        self._value = value

    # Defaults and values share storage: a default is simply the value held
    # before any successful parse.
    default = value

    @property
    def filled(self):
        """
        True once a value (default or parsed) is held.
        """
        return self._value is not Unset

    def parse(self, text, /):
        """
        Try to convert `text`; store and return True on success, return False otherwise.
        """
        if not isinstance(text, str) or not text:
            return False
        if self._strict and text != text.strip():
            return False
        try:
            value = self._rule(text)
        except Exception:
            return False
        if self._choices and value not in self._choices:
            return False
        self._value = value
        return True

    def __repr__(self):
        return "value-slot(type=%s, value=%r)" % (getattr(self._type, "__name__", repr(self._type)), self._value)

    def __rich_repr__(self):
        yield "type", self._type
        yield "value", self._value
        if self._choices:
            yield "choices", self._choices


__all__ = (
    "ValueSlot",
    "converter",
    "register",
    "render",
)
