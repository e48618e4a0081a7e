# python
"""
ArgMatches behavioral tests.

Scope
- Direct population through set_flag/add_value/set_value/set_subcommand.
- Typed lookups (get_one/get_many with a converter) and ConversionError.
- Fallback to declared defaults.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argmatch import Arg, ArgMatches, Char, ConversionError


class TestDirectPopulation(TestCase):
    """ArgMatches used without any Command."""

    def testFlags(self):
        matches = ArgMatches()
        matches.set_flag("verbose", True)
        self.assertTrue(matches.get_flag("verbose"))
        self.assertFalse(matches.get_flag("quiet"))
        matches.set_flag("verbose", False)
        self.assertFalse(matches.get_flag("verbose"))
        self.assertIn("verbose", matches)

    def testSingleValue(self):
        matches = ArgMatches()
        matches.add_value("output", "file.txt")
        self.assertEqual(matches.get_one("output"), "file.txt")

    def testManyValuesKeepOrder(self):
        matches = ArgMatches()
        matches.add_value("files", "file1.txt")
        matches.add_value("files", "file2.txt")
        self.assertEqual(matches.get_many("files"), ["file1.txt", "file2.txt"])
        self.assertEqual(matches.get_one("files"), "file1.txt")

    def testSetValueReplaces(self):
        matches = ArgMatches()
        matches.add_value("output", "a")
        matches.add_value("output", "b")
        matches.set_value("output", "c")
        self.assertEqual(matches.get_many("output"), ["c"])

    def testMissingValues(self):
        matches = ArgMatches()
        self.assertIsNone(matches.get_one("output"))
        self.assertEqual(matches.get_many("output"), [])
        self.assertNotIn("output", matches)
        self.assertFalse(matches.contains("output"))

    def testGetManyReturnsFreshList(self):
        matches = ArgMatches()
        matches.add_value("files", "a")
        matches.get_many("files").append("b")
        self.assertEqual(matches.get_many("files"), ["a"])

    def testSubcommand(self):
        matches, child = ArgMatches(), ArgMatches()
        self.assertIsNone(matches.subcommand())
        self.assertIsNone(matches.subcommand_name)
        child.set_flag("force")
        matches.set_subcommand("sync", child)
        name, sub = matches.subcommand()
        self.assertEqual(name, "sync")
        self.assertIs(sub, child)
        self.assertEqual(matches.subcommand_name, "sync")

    def testHelpRequestedIsRecursive(self):
        matches, child = ArgMatches(), ArgMatches()
        matches.set_subcommand("sync", child)
        self.assertFalse(matches.help_requested)
        child.set_flag("help")
        self.assertTrue(matches.help_requested)


class TestTypedLookups(TestCase):
    """Conversion of raw strings on lookup."""

    def setUp(self):
        self.matches = ArgMatches()
        self.matches.add_value("fps", "60")
        self.matches.add_value("ratio", "1.5")
        self.matches.add_value("level", "high")
        for raw in ("yes", "off", "1", "FALSE"):
            self.matches.add_value("switches", raw)

    def testIntAndFloat(self):
        self.assertEqual(self.matches.get_one("fps", int), 60)
        self.assertEqual(self.matches.get_one("ratio", float), 1.5)
        self.assertEqual(self.matches.get_one("ratio", type=float), 1.5)

    def testBooleanTable(self):
        self.assertEqual(self.matches.get_many("switches", bool), [True, False, True, False])

    def testCustomConverter(self):
        self.assertEqual(self.matches.get_one("level", str.upper), "HIGH")

    def testConversionFailure(self):
        with self.assertRaises(ConversionError) as context:
            self.matches.get_one("level", int)
        self.assertEqual(context.exception.name, "level")
        self.assertEqual(context.exception.value, "high")
        self.assertIs(context.exception.type, int)
        self.assertIsInstance(context.exception, ValueError)

    def testBooleanConversionFailure(self):
        with self.assertRaises(ConversionError):
            self.matches.get_one("level", bool)

    def testAbsentValueIsNotConverted(self):
        self.assertIsNone(self.matches.get_one("missing", int))
        self.assertEqual(self.matches.get_many("missing", int), [])


class TestDefaults(TestCase):
    """Lookups fall back to the declared defaults."""

    def setUp(self):
        self.matches = ArgMatches([
            Arg.flag("verbose").default_value(True),
            Arg.flag("quiet"),
            Arg.option("fps").default_value(60),
            Arg.option("format").default_value("mp4"),
            Arg.option("sep").default_value(Char(",")),
            Arg.option("scale").default_value(0.5),
        ])

    def testFlagDefault(self):
        self.assertTrue(self.matches.get_flag("verbose"))
        self.assertFalse(self.matches.get_flag("quiet"))
        self.matches.set_flag("verbose", False)
        self.assertFalse(self.matches.get_flag("verbose"))

    def testDefaultsAreRawStrings(self):
        self.assertEqual(self.matches.get_one("fps"), "60")
        self.assertEqual(self.matches.get_one("fps", int), 60)
        self.assertEqual(self.matches.get_one("format"), "mp4")
        self.assertEqual(self.matches.get_one("sep"), ",")
        self.assertEqual(self.matches.get_one("scale", float), 0.5)

    def testDefaultsDoNotCountAsSupplied(self):
        self.assertNotIn("fps", self.matches)
        self.assertEqual(self.matches.get_many("fps"), [])

    def testSuppliedValueWinsOverDefault(self):
        self.matches.add_value("fps", "30")
        self.assertEqual(self.matches.get_one("fps", int), 30)


class TestValueSemantics(TestCase):

    def testStructuralEquality(self):
        first, second = ArgMatches(), ArgMatches()
        for matches in (first, second):
            matches.set_flag("verbose")
            matches.add_value("files", "a")
        self.assertEqual(first, second)
        second.add_value("files", "b")
        self.assertNotEqual(first, second)

    def testUnhashable(self):
        with self.assertRaises(TypeError):
            hash(ArgMatches())

    def testRepr(self):
        matches = ArgMatches()
        matches.set_flag("verbose")
        matches.add_value("files", "a")
        self.assertEqual(repr(matches), "ArgMatches(verbose=True, files=['a'])")


if __name__ == '__main__':
    unittest.main()
