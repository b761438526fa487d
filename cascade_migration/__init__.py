"""
Cascade page migration

Turns a source HTML/XML page into a Cascade page asset using a project's
XPath-to-field mappings.

Usage:
    from cascade_migration import load_project_file, setup_page_object, CascadeDestination

    project = load_project_file("project.json")
    destination = CascadeDestination(project, cms_path, auth)
    page = setup_page_object("export/about/index.xml", project, destination)
    payload = {"asset": {"page": page.to_dict()}}

Modules:
    page_assembler: page identity and top-level assembly
    structured_data: structured data tree building and flattening
    page_metadata: wired and dynamic metadata
    special_block: special block merge
    destination: file/block lookups and block reads
    project: project information and project file loading
    xml_analyzer: document parsing and XPath evaluation
    content_cleaner: markup normalization and link rewriting
    migration_logger: per-page migration log
"""

from .destination import CascadeDestination
from .exceptions import (
    MigrationError,
    MappingConfigurationError,
    DocumentParseError,
    PathExpressionError,
    ProjectFileError,
)
from .fields import ChooserType, MetadataField, StructuredField
from .migration_logger import MigrationLogger
from .page_assembler import Page, setup_page_object
from .page_metadata import Metadata, DynamicMetadataField
from .project import ContentTypeInformation, ProjectInformation, load_project_file
from .structured_data import StructuredDataNode

__version__ = "1.0.0"

__all__ = [
    "CascadeDestination",
    "MigrationError",
    "MappingConfigurationError",
    "DocumentParseError",
    "PathExpressionError",
    "ProjectFileError",
    "ChooserType",
    "MetadataField",
    "StructuredField",
    "MigrationLogger",
    "Page",
    "setup_page_object",
    "Metadata",
    "DynamicMetadataField",
    "ContentTypeInformation",
    "ProjectInformation",
    "load_project_file",
    "StructuredDataNode",
]
