"""
Tests for cascade_rest.metadata module

Tests metadata field constants and dynamic field lookup
"""

import unittest

from cascade_rest.metadata import (
    get_dynamic_field,
    STANDARD_METADATA_FIELD_IDENTIFIERS,
    CALENDAR_METADATA_FIELD_IDENTIFIERS,
    LONG_METADATA_FIELDS,
)
from cascade_migration.page_metadata import DynamicMetadataField


class TestMetadataFields(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.dynamic_fields = [
            {"name": "category", "fieldValues": [{"value": "news"}]},
            {"name": "priority", "fieldValues": [{"value": "high"}]},
            {"name": "empty-field", "fieldValues": []},
        ]

    def test_get_dynamic_field_found(self):
        """Test finding existing dynamic field"""
        self.assertEqual(get_dynamic_field("priority", self.dynamic_fields), 1)

    def test_get_dynamic_field_not_found(self):
        """Test finding non-existent dynamic field"""
        self.assertIsNone(get_dynamic_field("nonexistent", self.dynamic_fields))
        self.assertIsNone(get_dynamic_field("category", []))

    def test_get_dynamic_field_objects(self):
        fields = [DynamicMetadataField("audience", ["students"]), DynamicMetadataField("topic")]
        self.assertEqual(get_dynamic_field("topic", fields), 1)

    def test_calendar_and_long_fields_are_standard(self):
        for name in CALENDAR_METADATA_FIELD_IDENTIFIERS + LONG_METADATA_FIELDS:
            self.assertIn(name, STANDARD_METADATA_FIELD_IDENTIFIERS)

    def test_long_fields(self):
        self.assertIn("summary", LONG_METADATA_FIELDS)
        self.assertNotIn("title", LONG_METADATA_FIELDS)


if __name__ == "__main__":
    unittest.main()
