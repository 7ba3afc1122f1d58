"""
Result/Error model tests (two-state results, factories, provenance).

Scope
- Validate that a Result exposes exactly one side and fails loudly otherwise.
- Validate the message format produced by every Error factory.
- Validate immutability, equality and recorded source locations.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from flagship import Error, ErrorKind, Location, Result, ResultAccessError


class TestResult(TestCase):
    """Behavioral tests for Result."""

    def testOkCarriesValue(self):
        result = Result.ok(8080)
        self.assertTrue(result)
        self.assertTrue(result.is_ok)
        self.assertFalse(result.is_err)
        self.assertEqual(result.value, 8080)

    def testOkWithoutPayload(self):
        result = Result.ok()
        self.assertTrue(result)
        self.assertIsNone(result.value)

    def testErrCarriesError(self):
        error = Error.unknown_flag("--nope")
        result = Result.err(error)
        self.assertFalse(result)
        self.assertTrue(result.is_err)
        self.assertIs(result.error, error)

    def testWrongSideAccessRaises(self):
        with self.assertRaises(ResultAccessError):
            Result.ok(1).error
        with self.assertRaises(ResultAccessError):
            Result.err(Error.unknown_flag("--nope")).value

    def testValueOrAndMap(self):
        failure = Result.err(Error.missing_flag_value("port"))
        self.assertEqual(Result.ok(2).value_or(0), 2)
        self.assertEqual(failure.value_or(0), 0)
        self.assertEqual(Result.ok(2).map(lambda x: x * 10).value, 20)
        self.assertIs(failure.map(lambda x: x * 10), failure)

    def testConstructionIsGuarded(self):
        with self.assertRaises(TypeError):
            Result(1)
        with self.assertRaises(TypeError):
            Result.err("not an error")
        with self.assertRaises(ValueError):
            Result.err(Error())

    def testResultsAreImmutable(self):
        with self.assertRaises(AttributeError):
            Result.ok(1)._value = 2


class TestErrorFactories(TestCase):
    """Every factory fixes the kind and the wording of its message."""

    def testDefaultErrorIsNone(self):
        error = Error()
        self.assertIs(error.kind, ErrorKind.NONE)
        self.assertEqual(error.message, "")
        self.assertFalse(error)

    def testMessages(self):
        cases = (
            (Error.unknown_flag("--nope"), ErrorKind.UNKNOWN_FLAG, "Unknown flag: --nope"),
            (Error.missing_required_flag("config"), ErrorKind.MISSING_REQUIRED_FLAG, "Required flag missing: --config"),
            (Error.missing_subcommand(), ErrorKind.MISSING_REQUIRED_FLAG, "A subcommand is required"),
            (Error.missing_required_positional("input"), ErrorKind.MISSING_REQUIRED_POSITIONAL, "Required positional missing: input"),
            (Error.invalid_flag_value("port", "abc"), ErrorKind.INVALID_FLAG_VALUE, "Invalid value for --port: abc"),
            (Error.too_many_positionals(), ErrorKind.TOO_MANY_POSITIONALS, "Too many positional arguments"),
            (Error.missing_flag_value("output"), ErrorKind.MISSING_FLAG_VALUE, "Missing value for flag: --output"),
            (Error.validation_failed("port", "out of range"), ErrorKind.VALIDATION_FAILED, "Validation failed for port: out of range"),
        )
        for error, kind, message in cases:
            with self.subTest(message=message):
                self.assertIs(error.kind, kind)
                self.assertEqual(error.message, message)
                self.assertEqual(str(error), message)

    def testTooManyPositionalsNamesTheToken(self):
        error = Error.too_many_positionals("file2.txt")
        self.assertTrue(error.message.startswith("Too many positional arguments"))
        self.assertIn("'file2.txt'", error.message)

    def testFactoriesRecordTheirCaller(self):
        error = Error.unknown_flag("--nope")
        self.assertIsInstance(error.location, Location)
        self.assertEqual(error.location.function, "testFactoriesRecordTheirCaller")
        self.assertTrue(error.format(location=True).endswith(f":{error.location.line}]"))
        self.assertEqual(error.format(), "Unknown flag: --nope")

    def testEqualityIgnoresLocation(self):
        first = Error.unknown_flag("--nope")
        second = Error.unknown_flag("--nope")
        self.assertNotEqual(first.location.line, second.location.line)
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertNotEqual(first, Error.unknown_flag("--other"))

    def testErrorsAreImmutable(self):
        error = Error.unknown_flag("--nope")
        with self.assertRaises(AttributeError):
            error.message = "changed"

    def testConstructorValidatesKind(self):
        with self.assertRaises(TypeError):
            Error(21101, "Unknown flag: --nope")


class TestErrorKind(TestCase):
    """Kinds are stable codes with friendly titles."""

    def testTitles(self):
        self.assertEqual(ErrorKind.UNKNOWN_FLAG.title, "unknown flag")
        self.assertEqual(ErrorKind.TOO_MANY_POSITIONALS.title, "too many positionals")

    def testNormalizeFallsBackToNumericCode(self):
        self.assertEqual(ErrorKind.UNKNOWN_FLAG.normalize(), str(int(ErrorKind.UNKNOWN_FLAG)))

    def testReservedKindExists(self):
        self.assertIn("PARSER_NOT_INITIALIZED", ErrorKind.__members__)


if __name__ == "__main__":
    unittest.main()
