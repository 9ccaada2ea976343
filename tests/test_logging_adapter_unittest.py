import logging
import os
import sys
import unittest
from unittest.mock import patch

from huifu_console.config import config
from huifu_console.logging_adapter import ConsoleFormatter, format_line, resolve_level, setup_console_logging


class ConsoleLoggingTest(unittest.TestCase):
    def tearDown(self):
        config.reset()
        setup_console_logging("INFO")

    def test_format_line_appends_extra(self):
        line = format_line({"ts": "t", "level": "INFO", "source": "huifu_console.api", "message": "hi",
                            "extra": {"status": 500}})
        self.assertEqual(line, '[t][INFO][huifu_console.api] hi | {"status":500}')
        self.assertEqual(format_line({"ts": "t", "level": "INFO", "source": "s", "message": "m"}), "[t][INFO][s] m")

    def test_formatter_renders_extra(self):
        record = logging.LogRecord("huifu_console.api", logging.WARNING, __file__, 1, "GET /configs -> %s", (500,), None)
        record.console_extra = {"command": "list_configs"}
        line = ConsoleFormatter().format(record)
        self.assertIn("[WARNING][huifu_console.api] GET /configs -> 500", line)
        self.assertTrue(line.endswith('| {"command":"list_configs"}'))

    def test_formatter_appends_traceback(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("huifu_console.ui", logging.ERROR, __file__, 1, "refresh failed", (),
                                       sys.exc_info())
        line = ConsoleFormatter().format(record)
        self.assertTrue(line.startswith("["))
        self.assertIn("ValueError: bad", line)

    def test_resolve_level(self):
        self.assertEqual(resolve_level("warning"), logging.WARNING)
        self.assertEqual(resolve_level("nonsense"), logging.INFO)
        self.assertEqual(resolve_level(None), logging.INFO)

    def test_setup_installs_handlers_once(self):
        logger = setup_console_logging("debug")
        setup_console_logging("debug")
        self.assertEqual(logger.name, "huifu_console")
        self.assertEqual(len(logger.handlers), 1)
        self.assertFalse(logger.propagate)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(logging.getLogger("tornado.access").level, logging.DEBUG)

    def test_setup_reads_log_level_setting(self):
        with patch.dict(os.environ, {"HUIFU_CONSOLE_LOG_LEVEL": "error"}, clear=True):
            logger = setup_console_logging()
        self.assertEqual(logger.level, logging.ERROR)


if __name__ == "__main__":
    unittest.main()
