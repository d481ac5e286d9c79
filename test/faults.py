# python
"""
Faults module behavioral tests (codes, options, triggering, rendering).

Scope
- Validate fault codes and their host normalization.
- Validate read-only options and copy.replace merging.
- Validate trigger(): raise/warn outside shell mode, render (and exit) inside it.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import copy
import io
import unittest
from unittest import TestCase

from icicle import (
    ActionError,
    CommandException,
    CommandWarning,
    EmptyOptionValueWarning,
    FaultCode,
    MalformedOptionError,
    trigger,
)


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11112)
        self.assertEqual(FaultCode.EMPTY_OPTION_VALUE, 12111)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MALFORMED_OPTION.normalize(), "11111")


class TestCommandException(TestCase):
    """Behavioral tests for CommandException and its subclasses."""

    def testMessageAndOptions(self):
        fault = MalformedOptionError("bad form", token="-x", index=2)
        self.assertEqual(fault.message, "bad form")
        self.assertEqual(fault.options["token"], "-x")
        self.assertEqual(str(fault), "bad form")

    def testOptionsAreReadOnly(self):
        fault = MalformedOptionError("bad form", token="-x")
        with self.assertRaises(TypeError):
            fault.options["token"] = "-y"

    def testReplaceMergesOptions(self):
        fault = MalformedOptionError("bad form", token="-x")
        replaced = copy.replace(fault, hint="try -x=1")
        self.assertIsInstance(replaced, MalformedOptionError)
        self.assertEqual(dict(replaced.options), {"token": "-x", "hint": "try -x=1"})
        self.assertNotIn("hint", fault.options)

    def testActionErrorDefaults(self):
        fault = ActionError("the disk is full")
        self.assertIsInstance(fault, CommandException)
        self.assertEqual(fault.options["title"], "action failed")
        self.assertEqual(fault.options["code"], FaultCode.ACTION_FAILURE)

    def testActionErrorOverrides(self):
        fault = ActionError("nope", title="denied")
        self.assertEqual(fault.options["title"], "denied")


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(MalformedOptionError) as context:
            trigger(MalformedOptionError("bad form"), shell=False)
        self.assertFalse(context.exception.options["shell"])

    def testRendersAndExitsInShell(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(ActionError("the disk is full", hint="free some space"), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Action Failed", stderr.getvalue())
        self.assertIn("11141", stderr.getvalue())
        self.assertIn("the disk is full", stderr.getvalue())
        self.assertIn("free some space", stderr.getvalue())

    def testRendersToolName(self):
        class Tool:
            name = "human"

        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit):
            trigger(ActionError("boom"), shell=True, tool=Tool())
        self.assertIn("human", stderr.getvalue())

    def testWarningRendersInShell(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            trigger(EmptyOptionValueWarning(
                "empty inline value for option '-x'",
                title="empty inline value",
                code=FaultCode.EMPTY_OPTION_VALUE,
            ), shell=True)
        self.assertIn("12111", stderr.getvalue())
        self.assertIn("empty inline value for option '-x'", stderr.getvalue())

    def testWarningWarnsOutsideShell(self):
        with self.assertWarns(CommandWarning):
            trigger(EmptyOptionValueWarning("empty inline value"), shell=False)

    def testRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


if __name__ == "__main__":
    unittest.main()
