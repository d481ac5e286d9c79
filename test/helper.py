# python
"""
Help renderer behavioral tests (layout, routes, styling, output).

Scope
- Validate the fixed section order and entry formats.
- Validate that empty sections keep their headers.
- Validate usage lines built from the route.
- Validate colorful and fancy rendering paths.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import TestCase

from icicle import Command, format_help, render_help, print_help


def build():
    tool = Command("tool", "A tool") \
        .option("-x, --x", "First number") \
        .option("-v, --verbose", "Verbose", valued=False) \
        .argument("Input") \
        .argument() \
        .argument("Output", required=False) \
        .array_argument("Rest")
    tool.command("sub", "Sub").alias("s")
    tool.command("other")
    return tool


class TestFormatHelp(TestCase):
    """Behavioral tests for the plain help layout."""

    def testFullLayout(self):
        self.assertEqual(format_help(build()), "\n".join((
            "usage: tool [--options] [<arguments>] [<command>]",
            "A tool",
            "",
            "arguments:",
            "  Input",
            "  argument 2",
            "  optional: Output",
            "  all arguments: Rest",
            "",
            "options:",
            "  -x, --x: First number",
            "  -v, --verbose (flag): Verbose",
            "",
            "commands:",
            "  sub, s: Sub",
            "  other",
        )))

    def testEmptySectionsKeepHeaders(self):
        self.assertEqual(format_help(Command("bare")), "\n".join((
            "usage: bare",
            "",
            "arguments:",
            "",
            "options:",
            "",
            "commands:",
        )))

    def testArrayWithoutDescription(self):
        self.assertIn("  all arguments: ...", format_help(Command("tool").array_argument()))

    def testUsageFollowsRoute(self):
        tool = build()
        sub = tool.child("sub")
        self.assertTrue(format_help(sub, (tool, sub)).startswith("usage: tool sub\nSub\n"))

    def testUsageDefaultsToCommandAlone(self):
        sub = build().child("s")
        self.assertTrue(format_help(sub).startswith("usage: sub\n"))

    def testRenderingDoesNotSealTree(self):
        tool = build()
        format_help(tool)
        self.assertFalse(tool.sealed)


class TestRenderHelp(TestCase):
    """Behavioral tests for styled rendering."""

    def testPlainHasNoStyles(self):
        self.assertFalse([span for span in render_help(build()).spans if span.style])

    def testColorfulAddsStylesOnly(self):
        colorful = render_help(build(), colorful=True)
        self.assertTrue(colorful.spans)
        self.assertEqual(colorful.plain, format_help(build()))


class TestPrintHelp(TestCase):
    """Behavioral tests for help output."""

    def testPrintsToStdout(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            print_help(build())
        self.assertEqual(stdout.getvalue(), format_help(build()) + "\n")

    def testFancyWrapsInPanel(self):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            print_help(build(), fancy=True)
        self.assertIn("TOOL HELP", stdout.getvalue())
        self.assertIn("all arguments: Rest", stdout.getvalue())


if __name__ == "__main__":
    unittest.main()
