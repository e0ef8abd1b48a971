import contextvars
import logging
import os
import unittest
from configparser import RawConfigParser
from unittest.mock import patch

from debinstall import debinstall_logging
from debinstall.debinstall_logging import (
    AttemptIDFilter,
    annotate_logger,
    apply_logging_config,
    attempt,
    attempt_id_var,
    init_logging,
)

CONFIG_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "data", "config"))


class TestDebinstallLogging(unittest.TestCase):
    def setUp(self):
        self.raw_config = RawConfigParser()
        self.raw_config.read(os.path.join(CONFIG_DIR, "logging.conf"))
        self.root_handlers = list(logging.getLogger().handlers)
        self.root_level = logging.getLogger().level

    def tearDown(self):
        """Restore the root logger so that other tests are not affected"""
        root_logger = logging.getLogger()
        root_logger.handlers = self.root_handlers
        root_logger.setLevel(self.root_level)
        custom = logging.getLogger("debinstall.custom")
        custom.handlers = []
        custom.propagate = True
        custom.setLevel(logging.NOTSET)
        debinstall_logging._configured = False

    def test_attempt_id_filter(self):
        record = logging.LogRecord("debinstall.test", logging.INFO, __file__, 1, "message", None, None)

        def with_attempt():
            attempt_id_var.set("abcd1234")
            return AttemptIDFilter().filter(record)

        self.assertTrue(contextvars.copy_context().run(with_attempt))
        self.assertEqual(record.attemptid, "abcd1234")
        self.assertEqual(record.attemptidf, "(attempt=abcd1234)")

    def test_attempt_id_filter_without_attempt(self):
        record = logging.LogRecord("debinstall.test", logging.INFO, __file__, 1, "message", None, None)

        self.assertTrue(contextvars.Context().run(AttemptIDFilter().filter, record))
        self.assertEqual(record.attemptidf, "")

    def test_attempt(self):
        with attempt() as attempt_id:
            self.assertEqual(len(attempt_id), 8)
            self.assertEqual(attempt_id_var.get(), attempt_id)

            with attempt() as inner_id:
                self.assertNotEqual(inner_id, attempt_id)
            self.assertEqual(attempt_id_var.get(), attempt_id)

        self.assertEqual(attempt_id_var.get(""), "")

    def test_attempt_reset_on_error(self):
        with self.assertRaises(RuntimeError):
            with attempt():
                raise RuntimeError("failed")

        self.assertEqual(attempt_id_var.get(""), "")

    def test_annotate_logger(self):
        logger = logging.getLogger("debinstall.test_annotate")
        handler = logging.StreamHandler()
        logger.addHandler(handler)

        annotate_logger(logger)
        annotate_logger(logger)

        self.assertEqual(sum(isinstance(f, AttemptIDFilter) for f in handler.filters), 1)
        logger.removeHandler(handler)

    def test_apply_logging_config(self):
        apply_logging_config(self.raw_config)

        root_logger = logging.getLogger()
        self.assertEqual(root_logger.level, logging.WARNING)
        self.assertEqual(len(root_logger.handlers), 1)
        self.assertIsInstance(root_logger.handlers[0], logging.StreamHandler)
        self.assertTrue(any(isinstance(f, AttemptIDFilter) for f in root_logger.handlers[0].filters))

        custom_logger = logging.getLogger("debinstall.custom")
        self.assertEqual(custom_logger.level, logging.DEBUG)
        self.assertEqual(len(custom_logger.handlers), 1)
        self.assertFalse(custom_logger.propagate)

    def test_apply_keeps_other_loggers_enabled(self):
        other = logging.getLogger("debinstall.not_configured")

        apply_logging_config(self.raw_config)

        self.assertFalse(other.disabled)

    def test_invalid_config_restored(self):
        self.raw_config.set("handler_console", "class", "NoSuchHandler")
        custom_logger = logging.getLogger("debinstall.custom")
        custom_logger.setLevel(logging.ERROR)
        root_level = logging.getLogger().level

        self.assertRaises(Exception, apply_logging_config, self.raw_config)

        self.assertEqual(logging.getLogger().level, root_level)
        self.assertEqual(logging.getLogger().handlers, self.root_handlers)
        self.assertEqual(custom_logger.level, logging.ERROR)

    @patch("debinstall.debinstall_logging._safe_get_config")
    def test_init_logging(self, mock_safe_get_config):
        mock_safe_get_config.return_value = self.raw_config
        debinstall_logging._configured = False

        logger = init_logging("custom")

        self.assertEqual(logger.name, "debinstall.custom")
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)

        # Configuration is only applied once
        init_logging("other")
        mock_safe_get_config.assert_called_once()

    @patch("debinstall.debinstall_logging._safe_get_config")
    def test_init_logging_without_config(self, mock_safe_get_config):
        mock_safe_get_config.return_value = RawConfigParser()
        debinstall_logging._configured = False
        root_handlers = list(logging.getLogger().handlers)

        init_logging("custom")

        self.assertEqual(logging.getLogger().handlers, root_handlers)

    @patch("debinstall.debinstall_logging._safe_get_config")
    def test_init_logging_bad_config_restores(self, mock_safe_get_config):
        self.raw_config.set("handler_console", "class", "NoSuchHandler")
        mock_safe_get_config.return_value = self.raw_config
        debinstall_logging._configured = False
        root_level = logging.getLogger().level

        with self.assertLogs("debinstall.custom", level="ERROR") as log:
            init_logging("custom")

        self.assertIn("Logging configuration error", log.output[0])
        self.assertEqual(logging.getLogger().level, root_level)


if __name__ == "__main__":
    unittest.main()
