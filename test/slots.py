"""
Value slot behavioral tests (conversion rules, whole-input rule, choices).

Scope
- Validate the built-in conversion rules and the registration of custom ones.
- Validate that a failed parse leaves the stored value untouched.
- Validate choices, defaults and render() round-trips for lossless types.

Conventions
- Test method names follow CamelCase per project convention.
- Custom types registered here are local to this module.
"""

from __future__ import annotations

import enum
import unittest
from decimal import Decimal
from fractions import Fraction
from pathlib import Path
from unittest import TestCase

from flagpole import ValueSlot, converter, register, render


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class Level(enum.IntEnum):
    LOW = 1
    HIGH = 2


class Point:
    def __init__(self, x, y):
        self.x, self.y = x, y


@register(Point)
def parse_point(text):
    x, y = text.split(",")
    return Point(int(x), int(y))


class TestConversion(TestCase):
    """Behavioral tests for the per-type conversion rules."""

    def testString(self):
        slot = ValueSlot(str)
        self.assertTrue(slot.parse("hello"))
        self.assertEqual(slot.value, "hello")
        self.assertTrue(slot.parse("  padded  "))
        self.assertEqual(slot.value, "  padded  ")

    def testInteger(self):
        slot = ValueSlot(int)
        self.assertTrue(slot.parse("42"))
        self.assertEqual(slot.value, 42)
        self.assertTrue(slot.parse("-7"))
        self.assertEqual(slot.value, -7)

    def testIntegerRejectsPartialInput(self):
        slot = ValueSlot(int, 5)
        for text in ("4x", "x4", "0x10", "4.0", " 42", "42 ", "\t42"):
            self.assertFalse(slot.parse(text), text)
        self.assertEqual(slot.value, 5)

    def testFloat(self):
        slot = ValueSlot(float)
        self.assertTrue(slot.parse("3.5"))
        self.assertEqual(slot.value, 3.5)
        self.assertTrue(slot.parse("1e3"))
        self.assertEqual(slot.value, 1000.0)
        self.assertFalse(slot.parse("3.5abc"))
        self.assertFalse(slot.parse("3.5 "))
        self.assertEqual(slot.value, 1000.0)

    def testBoolean(self):
        slot = ValueSlot(bool)
        for text, expected in (("true", True), ("NO", False), ("On", True), ("off", False), ("1", True), ("0", False)):
            self.assertTrue(slot.parse(text), text)
            self.assertIs(slot.value, expected)
        self.assertFalse(slot.parse("maybe"))

    def testNumericLibraryTypes(self):
        slot = ValueSlot(Decimal)
        self.assertTrue(slot.parse("1.10"))
        self.assertEqual(slot.value, Decimal("1.10"))
        slot = ValueSlot(Fraction)
        self.assertTrue(slot.parse("3/4"))
        self.assertEqual(slot.value, Fraction(3, 4))
        slot = ValueSlot(complex)
        self.assertTrue(slot.parse("1+2j"))
        self.assertEqual(slot.value, 1 + 2j)

    def testPath(self):
        slot = ValueSlot(Path)
        self.assertTrue(slot.parse("a/b"))
        self.assertEqual(slot.value, Path("a/b"))

    def testEnum(self):
        slot = ValueSlot(Color)
        self.assertTrue(slot.parse("RED"))
        self.assertIs(slot.value, Color.RED)
        self.assertTrue(slot.parse("green"))
        self.assertIs(slot.value, Color.GREEN)
        self.assertFalse(slot.parse("blue"))
        slot = ValueSlot(Level)
        self.assertTrue(slot.parse("2"))
        self.assertIs(slot.value, Level.HIGH)

    def testCallable(self):
        def even(text):
            if (number := int(text)) % 2:
                raise ValueError("odd")
            return number
        slot = ValueSlot(even)
        self.assertTrue(slot.parse("4"))
        self.assertFalse(slot.parse("5"))
        self.assertEqual(slot.value, 4)

    def testAnyExceptionIsFailure(self):
        def broken(text):
            raise RuntimeError("broken rule")
        self.assertFalse(ValueSlot(broken).parse("anything"))

    def testRegisteredRule(self):
        slot = ValueSlot(Point)
        self.assertTrue(slot.parse("1,2"))
        self.assertEqual((slot.value.x, slot.value.y), (1, 2))
        self.assertFalse(slot.parse("1;2"))
        self.assertIs(converter(Point), parse_point)

    def testRegisterRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            register("Point", parse_point)
        with self.assertRaises(TypeError):
            register(Point, 42)

    def testUnconvertibleType(self):
        with self.assertRaises(TypeError):
            ValueSlot(42)
        with self.assertRaises(TypeError):
            converter(None)

    def testEmptyInputIsRejected(self):
        for type in (str, int, float, bool, Path):
            self.assertFalse(ValueSlot(type).parse(""), type)

    def testNonStringInputIsRejected(self):
        self.assertFalse(ValueSlot(int).parse(42))


class TestSlotState(TestCase):
    """Behavioral tests for defaults, choices and stored values."""

    def testDefault(self):
        slot = ValueSlot(int, 7)
        self.assertEqual(slot.value, 7)
        self.assertEqual(slot.default, 7)
        self.assertTrue(slot.filled)

    def testUnsetDefault(self):
        slot = ValueSlot(int)
        self.assertIsNone(slot.value)
        self.assertFalse(slot.filled)
        self.assertTrue(slot.parse("1"))
        self.assertTrue(slot.filled)

    def testNoneIsARealDefault(self):
        slot = ValueSlot(int, None)
        self.assertTrue(slot.filled)
        self.assertIsNone(slot.value)

    def testSetterBypassesConversion(self):
        slot = ValueSlot(int)
        slot.value = "not converted"
        self.assertEqual(slot.value, "not converted")

    def testChoices(self):
        slot = ValueSlot(int, 1, choices=(1, 2, 3))
        self.assertEqual(slot.choices, (1, 2, 3))
        self.assertTrue(slot.parse("2"))
        self.assertFalse(slot.parse("5"))
        self.assertEqual(slot.value, 2)

    def testChoicesMustBeACollection(self):
        with self.assertRaises(TypeError):
            ValueSlot(str, choices="abc")

    def testRepr(self):
        self.assertEqual(repr(ValueSlot(float, 2.5)), "value-slot(type=float, value=2.5)")


class TestRender(TestCase):
    """Behavioral tests for render() and its round-trip with parse()."""

    def testRender(self):
        self.assertEqual(render(True), "true")
        self.assertEqual(render(False), "false")
        self.assertEqual(render(Color.RED), "RED")
        self.assertEqual(render(Level.HIGH), "HIGH")
        self.assertEqual(render(3.5), "3.5")
        self.assertEqual(render("text"), "text")

    def testRoundTrip(self):
        samples = {
            int: (0, -1, 2 ** 64, 1234567890),
            float: (0.1, -2.5, 1e-300, 123456.789),
            bool: (True, False),
            Color: tuple(Color),
            Level: tuple(Level),
            Decimal: (Decimal("1.10"), Decimal("-0.001")),
            Fraction: (Fraction(3, 4), Fraction(-7, 2)),
        }
        for type, values in samples.items():
            slot = ValueSlot(type)
            for value in values:
                self.assertTrue(slot.parse(render(value)), (type, value))
                self.assertEqual(slot.value, value)


if __name__ == '__main__':
    unittest.main()
