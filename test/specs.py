"""
Spec-string parser behavioral tests.

Scope
- Validate name resolution (short/long/pipe forms, empty pipe sides).
- Validate arity markers and their priority when several co-occur.
- Validate inline type annotations and their aliases.
- Validate malformed and unsupported spec strings.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from optspec import Arity, SpecParts, parse_spec
from optspec.faults import FaultCode, MalformedSpecError, UnsupportedAttributeError


class TestNames(TestCase):
    """Name extraction from the NAME part."""

    def testSingleCharacterIsShort(self):
        self.assertEqual(parse_spec("v"), SpecParts("v", None, Arity.FLAG, None))

    def testMultiCharacterIsLong(self):
        self.assertEqual(parse_spec("verbose"), SpecParts(None, "verbose", Arity.FLAG, None))

    def testPipeSplitsShortAndLong(self):
        parts = parse_spec("v|verbose")
        self.assertEqual((parts.short, parts.long), ("v", "verbose"))

    def testHyphensAndDigitsAllowed(self):
        parts = parse_spec("2|dry-run")
        self.assertEqual((parts.short, parts.long), ("2", "dry-run"))

    def testEmptyShortSideLeftUnset(self):
        parts = parse_spec("|verbose")
        self.assertIsNone(parts.short)
        self.assertEqual(parts.long, "verbose")

    def testEmptyLongSideLeftUnset(self):
        parts = parse_spec("v|")
        self.assertEqual(parts.short, "v")
        self.assertIsNone(parts.long)

    def testSurroundingWhitespaceIgnored(self):
        self.assertEqual(parse_spec("  o|output:  ").long, "output")


class TestAttributes(TestCase):
    """Arity markers and their fixed priority order."""

    def testNoMarkerIsFlag(self):
        self.assertIs(parse_spec("f|force").arity, Arity.FLAG)

    def testColonIsRequire(self):
        self.assertIs(parse_spec("name:").arity, Arity.REQUIRE)

    def testPlusIsMultiple(self):
        self.assertIs(parse_spec("tag+").arity, Arity.MULTIPLE)

    def testQuestionMarkIsOptional(self):
        self.assertIs(parse_spec("color?").arity, Arity.OPTIONAL)

    def testRequireWinsOverEverything(self):
        self.assertIs(parse_spec("a:+?").arity, Arity.REQUIRE)
        self.assertIs(parse_spec("a?+:").arity, Arity.REQUIRE)

    def testMultipleWinsOverOptional(self):
        self.assertIs(parse_spec("a?+").arity, Arity.MULTIPLE)

    def testOptionalWinsOverZeroOrMore(self):
        self.assertIs(parse_spec("a*?").arity, Arity.OPTIONAL)

    def testZeroOrMoreUnsupported(self):
        for spec in ("a*", "all*", "a|all*=i", "*"):
            with self.subTest(spec=spec), self.assertRaises(UnsupportedAttributeError) as context:
                parse_spec(spec)
        self.assertIs(context.exception.options["code"], FaultCode.UNSUPPORTED_ATTRIBUTE)

    def testUnsupportedDistinctFromMalformed(self):
        self.assertFalse(issubclass(UnsupportedAttributeError, MalformedSpecError))
        self.assertFalse(issubclass(MalformedSpecError, UnsupportedAttributeError))


class TestTypes(TestCase):
    """Inline =TYPE annotations."""

    def testStringAliases(self):
        for spec in ("o:=s", "o:=string"):
            with self.subTest(spec=spec):
                self.assertEqual(parse_spec(spec).type, "string")

    def testIntegerAliases(self):
        for spec in ("a|alpha=i", "a|alpha=integer", "n+=i"):
            with self.subTest(spec=spec):
                self.assertEqual(parse_spec(spec).type, "number")

    def testPipeWithNumericType(self):
        self.assertEqual(parse_spec("a|alpha=i"), SpecParts("a", "alpha", Arity.FLAG, "number"))

    def testNoTypeIsNone(self):
        self.assertIsNone(parse_spec("o|output:").type)


class TestMalformed(TestCase):
    """Spec strings the grammar cannot match."""

    def testMalformedSpecs(self):
        for spec in ("", "   ", "a b", "a|b|c", "o:=float", "o=", "a_b", ":", "|"):
            with self.subTest(spec=spec), self.assertRaises(MalformedSpecError):
                parse_spec(spec)

    def testMalformedCarriesSpec(self):
        with self.assertRaises(MalformedSpecError) as context:
            parse_spec("o:=float")
        self.assertEqual(context.exception.options["spec"], "o:=float")
        self.assertIs(context.exception.options["code"], FaultCode.MALFORMED_SPEC)

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            parse_spec(None)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
