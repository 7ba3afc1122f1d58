"""
Runner tests (caller-side glue: exit statuses and printed output).

Scope
- Validate exit statuses for success, help, version and failures.
- Validate that help follows the selected subcommand path.

Conventions
- Test method names follow CamelCase per project convention.
- Consoles write to in-memory buffers so nothing reaches the terminal.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from flagship import EXIT_OK, EXIT_USAGE, Parser, invoke


def build():
    parser = Parser("myapp", "1.0.0", "A test application")
    parser.add_help_flag().add_version_flag()
    parser.flag("count", "How many", type=int, short_name="c")
    deploy = parser.subcommand("deploy", "Ship it")
    deploy.add_help_flag()
    deploy.flag("target", "Where to", required=True)
    return parser


class TestInvoke(TestCase):
    """Behavioral tests for invoke()."""

    def setUp(self):
        self.out = Console(file=io.StringIO(), width=100, color_system=None)
        self.err = Console(file=io.StringIO(), width=100, color_system=None)

    def run_with(self, parser, prompt):
        return invoke(parser, prompt, console=self.out, stderr=self.err)

    def testSuccessPrintsNothing(self):
        parser = build()
        self.assertEqual(self.run_with(parser, ["-c", "3"]), EXIT_OK)
        self.assertEqual(parser.get("count"), 3)
        self.assertEqual(self.out.file.getvalue(), "")
        self.assertEqual(self.err.file.getvalue(), "")

    def testHelp(self):
        self.assertEqual(self.run_with(build(), "--help"), EXIT_OK)
        self.assertIn("USAGE:", self.out.file.getvalue())
        self.assertTrue(self.out.file.getvalue().startswith("myapp v1.0.0"))

    def testSubcommandHelp(self):
        self.assertEqual(self.run_with(build(), "deploy -h"), EXIT_OK)
        self.assertTrue(self.out.file.getvalue().startswith("myapp deploy"))
        self.assertIn("--target", self.out.file.getvalue())

    def testVersion(self):
        self.assertEqual(self.run_with(build(), ["-V"]), EXIT_OK)
        self.assertEqual(self.out.file.getvalue().strip(), "myapp v1.0.0")

    def testFailureGoesToStderr(self):
        self.assertEqual(self.run_with(build(), ["--nope"]), EXIT_USAGE)
        self.assertIn("Unknown flag: --nope", self.err.file.getvalue())
        self.assertEqual(self.out.file.getvalue(), "")

    def testFailureInsideSubcommandNamesTheChain(self):
        self.assertEqual(self.run_with(build(), ["deploy"]), EXIT_USAGE)
        self.assertIn("myapp deploy", self.err.file.getvalue())
        self.assertIn("Required flag missing: --target", self.err.file.getvalue())

    def testRejectsNonParsers(self):
        with self.assertRaises(TypeError):
            invoke(object(), [])


if __name__ == "__main__":
    unittest.main()
