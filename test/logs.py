# python
"""
Diagnostics wiring tests.

Scope
- configure_logging(): handler installation, levels, replacement on repeated calls.
- Matcher diagnostics reach the configured handler in console and JSON modes.
- Nothing is emitted at the default WARNING level.

Conventions
- Test method names follow CamelCase per project convention.
- sys.stderr is swapped for a StringIO before configure_logging() binds its handler.
"""

from __future__ import annotations

import io
import json
import logging
import sys
import unittest
from unittest import TestCase, mock

from argmatch import Command, arg, configure_logging
from argmatch.logs import ROOT, get_logger


class TestConfigureLogging(TestCase):

    def setUp(self):
        self.logger = logging.getLogger(ROOT)
        self.stream = io.StringIO()
        patcher = mock.patch.object(sys, "stderr", self.stream)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.reset)

    def reset(self):
        for handler in list(self.logger.handlers):
            if getattr(handler, "_argmatch", False):
                self.logger.removeHandler(handler)
        self.logger.setLevel(logging.NOTSET)
        self.logger.propagate = True

    def testHandlerInstalled(self):
        handler = configure_logging()
        self.assertIn(handler, self.logger.handlers)
        self.assertEqual(self.logger.level, logging.WARNING)
        self.assertFalse(self.logger.propagate)

    def testVerboseEnablesDebug(self):
        configure_logging(verbose=True)
        self.assertEqual(self.logger.level, logging.DEBUG)

    def testRepeatedCallsReplaceHandler(self):
        first = configure_logging()
        second = configure_logging(verbose=True)
        self.assertNotIn(first, self.logger.handlers)
        self.assertEqual([h for h in self.logger.handlers if getattr(h, "_argmatch", False)], [second])

    def testQuietByDefault(self):
        configure_logging()
        Command("app").arg(arg("-v --verbose")).get_matches(["app", "-v", "--nope"])
        self.assertEqual(self.stream.getvalue(), "")

    def testConsoleDiagnostics(self):
        configure_logging(verbose=True)
        Command("app").subcommand(Command("start")).get_matches(["app", "start"])
        output = self.stream.getvalue()
        self.assertIn("dispatch", output)
        self.assertIn("argmatch.matcher", output)

    def testJsonDiagnostics(self):
        configure_logging(verbose=True, log_json=True)
        Command("app").get_matches(["app", "--nope"])
        events = [json.loads(line) for line in self.stream.getvalue().splitlines() if line.strip()]
        failed = [event for event in events if event["event"] == "match failed"]
        self.assertEqual(len(failed), 1)
        self.assertEqual(failed[0]["command"], "app")
        self.assertEqual(failed[0]["code"], 11111)
        self.assertEqual(failed[0]["level"], "debug")

    def testGetLoggerUsesStdlibName(self):
        configure_logging(verbose=True, log_json=True)
        get_logger("argmatch.custom").info("hello", answer=42)
        event = json.loads(self.stream.getvalue().strip())
        self.assertEqual(event["logger"], "argmatch.custom")
        self.assertEqual(event["answer"], 42)


if __name__ == '__main__':
    unittest.main()
