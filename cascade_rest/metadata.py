"""
Metadata field knowledge for Cascade Server REST API

Standard (wired) metadata field names, the subset holding calendar values,
the fields allowed to hold long text, and dynamic field lookup.
"""

from typing import List, Optional


# Wired metadata fields present on every metadata set
STANDARD_METADATA_FIELD_IDENTIFIERS = [
    "author",
    "displayName",
    "endDate",
    "keywords",
    "metaDescription",
    "reviewDate",
    "startDate",
    "summary",
    "teaser",
    "title",
]

CALENDAR_METADATA_FIELD_IDENTIFIERS = [
    "startDate",
    "endDate",
    "reviewDate",
]

# Fields stored as long text in Cascade; everything else is capped at 250
LONG_METADATA_FIELDS = [
    "keywords",
    "metaDescription",
    "summary",
    "teaser",
]


def get_dynamic_field(name: str, field_list: List) -> Optional[int]:
    """Find the index of a dynamic metadata field by name

    Accepts REST payload dicts ({"name": ..., "fieldValues": [...]}) as well
    as objects exposing a ``name`` attribute.
    """
    for idx, field in enumerate(field_list):
        field_name = field.get("name") if isinstance(field, dict) else field.name
        if field_name == name:
            return idx
    return None
