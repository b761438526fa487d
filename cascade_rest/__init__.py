"""
Cascade REST API Library

The read side of the Cascade Server REST API used by page migration.

Usage:
    import cascade_rest

    result = cascade_rest.read_single_asset(cms_path, auth, "block", "asset_id")

    # Or import specific modules
    from cascade_rest.core import read_asset_by_path
    from cascade_rest.metadata import STANDARD_METADATA_FIELD_IDENTIFIERS

Modules:
    core: read operations (by id, by site and path)
    metadata: metadata field constants and dynamic field lookup
"""

from .core import read_single_asset, read_asset_by_path

from .metadata import (
    get_dynamic_field,
    STANDARD_METADATA_FIELD_IDENTIFIERS,
    CALENDAR_METADATA_FIELD_IDENTIFIERS,
    LONG_METADATA_FIELDS,
)

__version__ = "1.0.0"


def get_version():
    """Return the package version"""
    return __version__


__all__ = [
    "read_single_asset",
    "read_asset_by_path",
    "get_dynamic_field",
    "STANDARD_METADATA_FIELD_IDENTIFIERS",
    "CALENDAR_METADATA_FIELD_IDENTIFIERS",
    "LONG_METADATA_FIELDS",
    "get_version",
]
