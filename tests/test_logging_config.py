"""
Tests for logging_config module
"""

import unittest

from logging_config import logger


class TestOperationLogger(unittest.TestCase):

    def test_operation_end_success(self):
        with self.assertLogs("cascade_migration", level="INFO") as captured:
            logger.log_operation_start("assemble_page", page="/about/index")
            logger.log_operation_end("assemble_page", True, page="/about/index", warnings=2)

        start, end = captured.records
        self.assertEqual(start.getMessage(), "Starting assemble_page")
        self.assertEqual(end.levelname, "INFO")
        self.assertEqual(end.structured["operation"]["results"]["warnings"], 2)

    def test_operation_end_failure(self):
        with self.assertLogs("cascade_migration", level="INFO") as captured:
            logger.log_operation_end("assemble_page", False, error="bad mapping")

        self.assertEqual(captured.records[0].levelname, "ERROR")
        self.assertIn("FAILED", captured.records[0].getMessage())

    def test_http_error_logged_as_error(self):
        with self.assertLogs("cascade_migration", level="ERROR") as captured:
            logger.log_api_call("POST", "https://cms.example.com/api/v1/read/block/x", 500, 0.2)

        self.assertEqual(captured.records[0].structured["api_call"]["status_code"], 500)

    def test_lookup_is_debug(self):
        with self.assertLogs("cascade_migration", level="DEBUG") as captured:
            logger.log_lookup("file", "/images/a.png", None, "rest")

        self.assertIn("not found", captured.records[0].getMessage())

    def test_lookup_records_asset_kind(self):
        with self.assertLogs("cascade_migration", level="DEBUG") as captured:
            logger.log_lookup("block", "/_blocks/special", "blk-1", "project")

        lookup = captured.records[0].structured["lookup"]
        self.assertEqual(lookup["kind"], "block")
        self.assertEqual(lookup["id"], "blk-1")
        self.assertEqual(lookup["source"], "project")


if __name__ == "__main__":
    unittest.main()
