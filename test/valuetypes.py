"""
Value type registry and built-in handler tests.

Scope
- Validate registry operations (register/decorator form/unregister/resolve/registered).
- Validate the numeric helpers used by the multi-value fast path.
- Validate the built-in handlers.

Conventions
- Test method names follow CamelCase per project convention.
- Every handler registered by a test is unregistered through addCleanup.
"""

from __future__ import annotations

import os
import tempfile
import unittest
import warnings
from decimal import Decimal
from unittest import TestCase

from optspec.faults import ValueTypeOverrideWarning
from optspec.valuetypes import (
    BooleanType,
    FileType,
    NumberType,
    StringType,
    is_numeric,
    register,
    registered,
    resolve,
    truncate,
    unregister,
)


class _Always:
    def test(self, raw):
        return True

    def parse(self, raw):
        return raw


class TestRegistry(TestCase):
    """Static, name-keyed handler registry."""

    def testBuiltinsRegistered(self):
        self.assertIsInstance(resolve("string"), StringType)
        self.assertIsInstance(resolve("number"), NumberType)
        self.assertIsInstance(resolve("boolean"), BooleanType)
        self.assertIsInstance(resolve("file"), FileType)

    def testUnknownResolvesToNone(self):
        self.assertIsNone(resolve("no-such-type"))
        self.assertIsNone(resolve(None))

    def testRegisterInstance(self):
        handler = _Always()
        self.addCleanup(unregister, "always")
        self.assertIs(register("always", handler), handler)
        self.assertIs(resolve("always"), handler)

    def testRegisterDecoratorReturnsClass(self):
        self.addCleanup(unregister, "always-too")

        @register("always-too")
        class AlwaysToo(_Always):
            pass

        self.assertIsInstance(AlwaysToo, type)
        self.assertIsInstance(resolve("always-too"), AlwaysToo)

    def testRegisterRejectsIncompleteHandler(self):
        with self.assertRaises(TypeError):
            register("broken", object())

    def testRegisterRejectsEmptyName(self):
        with self.assertRaises(ValueError):
            register("  ", _Always())

    def testOverrideWarns(self):
        self.addCleanup(unregister, "twice")
        register("twice", _Always())
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            register("twice", _Always())
        self.assertTrue(any(issubclass(w.category, ValueTypeOverrideWarning) for w in caught))

    def testUnregister(self):
        handler = register("gone", _Always())
        self.assertIs(unregister("gone"), handler)
        self.assertIsNone(resolve("gone"))
        self.assertIsNone(unregister("gone"))

    def testRegisteredIsReadOnlySnapshot(self):
        snapshot = registered()
        self.assertIn("string", snapshot)
        with self.assertRaises(TypeError):
            snapshot["string"] = _Always()  # type: ignore[index]


class TestNumericHelpers(TestCase):
    """is_numeric() and truncate()."""

    def testNumericInputs(self):
        for raw in ("3", "-2.5", "+7", " 1e3 ", ".5", "5.", 4, 2.5, Decimal("1.5")):
            with self.subTest(raw=raw):
                self.assertTrue(is_numeric(raw))

    def testNonNumericInputs(self):
        for raw in ("abc", "", "0x1A", "inf", "nan", "1_000", True, None, float("nan"), [1]):
            with self.subTest(raw=raw):
                self.assertFalse(is_numeric(raw))

    def testTruncatesTowardZero(self):
        self.assertEqual(truncate("3.9"), 3)
        self.assertEqual(truncate("-3.9"), -3)
        self.assertEqual(truncate(9.99), 9)
        self.assertEqual(truncate("1e3"), 1000)

    def testTruncateIsExactForLongDigits(self):
        self.assertEqual(truncate("12345678901234567890.7"), 12345678901234567890)

    def testTruncateRejectsNonNumeric(self):
        with self.assertRaises(ValueError):
            truncate("abc")

    def testHugeMagnitudesNotNumeric(self):
        huge = ("1e5000", "1e200000", "-1e200000", "9" * 5000, Decimal("1e200000"), 10 ** 5000)
        for index, raw in enumerate(huge):
            with self.subTest(index=index):
                self.assertFalse(is_numeric(raw))
        with self.assertRaises(ValueError):
            truncate("1e200000")

    def testLargeButBoundedMagnitudes(self):
        self.assertTrue(is_numeric("1e300"))
        self.assertTrue(is_numeric("1e-200000"))
        self.assertTrue(is_numeric("0e200000"))
        self.assertEqual(truncate("1e-200000"), 0)
        self.assertEqual(truncate("1e300"), 10 ** 300)


class TestBuiltinHandlers(TestCase):
    """Behavior of the built-in handlers."""

    def testNumberParse(self):
        number = NumberType()
        self.assertEqual(number.parse("42"), 42)
        self.assertIsInstance(number.parse("42"), int)
        self.assertEqual(number.parse("1e3"), 1000.0)
        self.assertEqual(number.parse(2.5), 2.5)

    def testNumberRejectsFloatOverflow(self):
        number = NumberType()
        self.assertFalse(number.test("1e400"))
        self.assertFalse(number.test("-1e400"))
        self.assertTrue(number.test("1e300"))
        self.assertTrue(number.test("1" + "0" * 400))

    def testBoolean(self):
        boolean = BooleanType()
        for raw, expected in (("yes", True), ("OFF", False), ("1", True), ("false", False), (True, True)):
            with self.subTest(raw=raw):
                self.assertTrue(boolean.test(raw))
                self.assertIs(boolean.parse(raw), expected)
        self.assertFalse(boolean.test("maybe"))

    def testFile(self):
        file = FileType()
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "data.txt")
            with open(path, "w") as stream:
                stream.write("data")
            self.assertTrue(file.test(path))
            self.assertFalse(file.test(directory))
            self.assertEqual(file.parse(path), os.path.abspath(path))
        self.assertFalse(file.test(3))


if __name__ == "__main__":
    unittest.main()
