"""
Descriptor and registry entry tests (typed values, validation, type erasure).

Scope
- Validate declaration-time sanitation of Flag/Positional metadata.
- Validate set_value_from_token: conversion, storage, choices, custom validators.
- Validate that Entry exposes descriptors uniformly regardless of value type.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Flag, Positional, Entry, Result, Error).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from flagship import Entry, Error, ErrorKind, Flag, Positional, Result


def port_range(value):
    if 1024 <= value <= 65535:
        return Result.ok()
    return Result.err(Error.validation_failed("port", "must be between 1024 and 65535"))


class TestFlagDeclaration(TestCase):
    """Declaration-time checks raise TypeError/ValueError."""

    def testDefaultInitializesValue(self):
        threads = Flag("threads", "Worker threads", type=int, default=4)
        self.assertTrue(threads.has_value)
        self.assertEqual(threads.value, 4)
        self.assertEqual(threads.default, 4)

    def testFluentSettersReturnTheFlag(self):
        port = Flag("port", "Port", type=int)
        self.assertIs(port.set_short_name("p"), port)
        self.assertIs(port.set_required(), port)
        self.assertIs(port.set_default(8080), port)
        self.assertIs(port.set_choices((80, 8080)), port)
        self.assertIs(port.set_validator(port_range), port)
        self.assertIs(port.set_long_descr("Binds on all interfaces."), port)
        self.assertEqual(port.short_name, "p")
        self.assertTrue(port.required)
        self.assertEqual(port.choices, (80, 8080))
        self.assertEqual(port.long_descr, "Binds on all interfaces.")

    def testInvalidNamesRaise(self):
        with self.assertRaises(ValueError):
            Flag("--port")
        with self.assertRaises(ValueError):
            Flag("")
        with self.assertRaises(TypeError):
            Flag(42)
        with self.assertRaises(ValueError):
            Flag("port").set_short_name("-p")

    def testUnsupportedTypeRaises(self):
        with self.assertRaises(TypeError):
            Flag("items", type=list)

    def testDefaultMustMatchType(self):
        with self.assertRaises(TypeError):
            Flag("threads", type=int, default="4")
        with self.assertRaises(TypeError):
            Flag("threads", type=int, default=True)

    def testIntegerDefaultIsWidenedForFloat(self):
        ratio = Flag("ratio", type=float, default=1)
        self.assertIsInstance(ratio.default, float)
        self.assertEqual(ratio.value, 1.0)

    def testDuplicateChoicesRaise(self):
        with self.assertRaises(ValueError):
            Flag("format", choices=("json", "json"))
        with self.assertRaises(TypeError):
            Flag("format", choices="json")

    def testNonCallableValidatorRaises(self):
        with self.assertRaises(TypeError):
            Flag("port", type=int, validator=42)

    def testRepresentation(self):
        port = Flag("port", "Port", type=int, short_name="p")
        self.assertTrue(repr(port).startswith("flag(long_name='port', short_name='p'"))


class TestFlagValues(TestCase):
    """set_value_from_token composes conversion with validation."""

    def testConversionAndStorage(self):
        port = Flag("port", type=int)
        self.assertTrue(port.set_value_from_token("9000"))
        self.assertEqual(port.value, 9000)

    def testConversionFailurePropagatesUntouched(self):
        threads = Flag("threads", type=int, default=4)
        result = threads.set_value_from_token("many")
        self.assertIs(result.error.kind, ErrorKind.INVALID_FLAG_VALUE)
        self.assertTrue(result.error.message.startswith("Invalid integer format"))
        self.assertEqual(threads.value, 4)

    def testChoiceRejection(self):
        output = Flag("format", choices=("json", "xml", "yaml"))
        result = output.set_value_from_token("html")
        self.assertIs(result.error.kind, ErrorKind.VALIDATION_FAILED)
        self.assertEqual(result.error.message, "Validation failed for format: value not in allowed choices")
        self.assertTrue(output.set_value_from_token("yaml"))

    def testCustomValidatorResultIsPropagatedVerbatim(self):
        port = Flag("port", type=int, validator=port_range)
        result = port.set_value_from_token("80")
        self.assertEqual(result.error, Error.validation_failed("port", "must be between 1024 and 65535"))
        self.assertTrue(port.set_value_from_token("8080"))

    def testChoicesAreCheckedBeforeValidator(self):
        calls = []

        def record(value):
            calls.append(value)
            return Result.ok()

        level = Flag("level", type=int, choices=(1, 2, 3), validator=record)
        self.assertFalse(level.set_value_from_token("7"))
        self.assertEqual(calls, [])
        self.assertTrue(level.set_value_from_token("2"))
        self.assertEqual(calls, [2])

    def testEmptySlotIsVacuouslyValid(self):
        config = Flag("config", required=True, choices=("a", "b"))
        self.assertTrue(config.validate())

    def testValidatorMustReturnResult(self):
        port = Flag("port", type=int, validator=lambda value: True)
        with self.assertRaises(TypeError):
            port.set_value_from_token("8080")

    def testResetRestoresDefault(self):
        threads = Flag("threads", type=int, default=4)
        threads.set_value_from_token("16")
        threads.reset()
        self.assertEqual(threads.value, 4)
        verbose = Flag("verbose", type=bool)
        verbose.set_value_from_token("true")
        verbose.reset()
        self.assertFalse(verbose.has_value)
        self.assertIsNone(verbose.value)


class TestPositional(TestCase):
    """Positionals convert and validate but carry no defaults or choices."""

    def testRequiredByDefault(self):
        self.assertTrue(Positional("input").required)
        self.assertFalse(Positional("output", required=False).required)

    def testConversionAndValidator(self):
        count = Positional("count", type=int, validator=lambda value: (
            Result.ok() if value > 0 else Result.err(Error.validation_failed("count", "must be positive"))
        ))
        self.assertTrue(count.set_value_from_token("3"))
        self.assertEqual(count.value, 3)
        self.assertIs(count.set_value_from_token("0").error.kind, ErrorKind.VALIDATION_FAILED)
        self.assertIs(count.set_value_from_token("x").error.kind, ErrorKind.INVALID_FLAG_VALUE)

    def testResetEmptiesTheSlot(self):
        source = Positional("source")
        source.set_value_from_token("a.txt")
        source.reset()
        self.assertFalse(source.has_value)


class TestEntry(TestCase):
    """Entries hide the value type behind uniform closures."""

    def testHeterogeneousEntries(self):
        entries = {
            "port": Entry(Flag("port", "Port", type=int, short_name="p")),
            "verbose": Entry(Flag("verbose", "Chatty", type=bool)),
            "name": Entry(Flag("name", "Name", required=True)),
        }
        self.assertTrue(entries["port"].set_value("8080"))
        self.assertTrue(entries["verbose"].set_value("yes"))
        self.assertEqual(entries["port"].get_value_as_string(), "8080")
        self.assertEqual(entries["verbose"].get_value_as_string(), "true")
        self.assertEqual(entries["name"].get_value_as_string(), "")
        self.assertTrue(entries["verbose"].is_boolean())
        self.assertFalse(entries["port"].is_boolean())
        self.assertTrue(entries["name"].is_required())
        self.assertFalse(entries["name"].has_value())
        self.assertEqual(entries["port"].get_short_name(), "p")
        self.assertIsNone(entries["verbose"].get_short_name())
        self.assertEqual(entries["port"].get_description(), "Port")

    def testShortNameSetLaterIsVisible(self):
        flag = Flag("count", type=int)
        entry = Entry(flag)
        flag.set_short_name("c")
        self.assertEqual(entry.get_short_name(), "c")

    def testPositionalEntry(self):
        entry = Entry(Positional("input", "Input file"))
        self.assertEqual(entry.kind, "positional")
        self.assertEqual(entry.name, "input")
        self.assertIsNone(entry.get_short_name())
        self.assertTrue(entry.is_required())

    def testRenderProducesHelpLine(self):
        entry = Entry(Flag("port", "Port to listen on", type=int, short_name="p", required=True))
        self.assertIn("-p, --port", entry.render().plain)
        self.assertIn("(required)", entry.render().plain)

    def testRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            Entry("port")


if __name__ == "__main__":
    unittest.main()
