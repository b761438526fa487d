"""
Assemble a Cascade page from one source document.

The page's metadata and structured data are built independently from the
project's mappings. Pages whose content type has no Data Definition take
their single mapped field as the XHTML body. The special block is merged
last.
"""

import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from bs4 import UnicodeDammit

from logging_config import logger

from .content_cleaner import strip_page_extension, tidy_full_html
from .exceptions import DocumentParseError, MappingConfigurationError, MigrationError
from .migration_logger import MigrationLogger
from .page_metadata import Metadata, create_page_metadata
from .special_block import assign_special_block_content
from .structured_data import StructuredDataNode, create_page_structured_data
from .xml_analyzer import all_characters_legal, parse_document, remove_illegal_characters


@dataclass
class Page:
    name: str
    parent_folder_path: str
    site_name: str
    content_type_path: str
    metadata: Metadata = field(default_factory=Metadata)
    structured_data: Optional[List[StructuredDataNode]] = None
    xhtml: Optional[str] = None

    @property
    def path(self) -> str:
        """Root-relative path of the page in the site."""
        return posixpath.join("/", self.parent_folder_path.strip("/"), self.name)

    def to_dict(self) -> dict:
        """Page in the form the Cascade REST API expects under asset.page."""
        page = {
            "name": self.name,
            "parentFolderPath": self.parent_folder_path,
            "siteName": self.site_name,
            "contentTypePath": self.content_type_path,
            "metadata": self.metadata.to_dict(),
        }
        if self.structured_data is not None:
            page["structuredData"] = {
                "structuredDataNodes": [node.to_dict() for node in self.structured_data]
            }
        else:
            page["xhtml"] = self.xhtml or ""
        return page


def get_page_identity(page_file: Path, xml_directory: Path) -> Tuple[str, str]:
    """
    Work out a page's name and parent folder from where its file sits.

    Args:
        page_file: Source document
        xml_directory: Root of the source export

    Returns:
        (page name, parent folder path); the parent is "/" at the root

    Raises:
        MappingConfigurationError: If the file lies outside ``xml_directory``
    """
    try:
        relative_path = Path(page_file).resolve().relative_to(Path(xml_directory).resolve())
    except ValueError as e:
        raise MappingConfigurationError(
            f"Page file is not inside the export directory {xml_directory}", str(page_file)
        ) from e

    path = strip_page_extension(relative_path.as_posix())
    if not all_characters_legal(path):
        path = remove_illegal_characters(path)

    parent_folder_path, _, page_name = path.rpartition("/")
    if parent_folder_path == "":
        parent_folder_path = "/"
    return page_name, parent_folder_path


def read_source_document(page_file: Path) -> str:
    """
    Read a source document whatever its encoding.

    Legacy exports are often Latin-1 or Windows-1252; UnicodeDammit checks
    declared encodings first, then guesses.
    """
    with open(page_file, 'rb') as f:
        raw = f.read()
    if not raw:
        return ""

    dammit = UnicodeDammit(raw, ['utf-8', 'windows-1252'])
    if dammit.unicode_markup is None:
        raise DocumentParseError("Document encoding could not be detected", str(page_file))
    return dammit.unicode_markup


def body_from_structured_data(nodes: List[StructuredDataNode]) -> str:
    """
    XHTML body for a page without a Data Definition.

    The mappings may produce at most one node; its text is the body.
    """
    if len(nodes) > 1:
        raise MappingConfigurationError(
            "The mappings for a page without Data Definition contain more than one field."
        )
    if not nodes:
        return ""
    return nodes[0].text or ""


def setup_page_object(page_file, project, destination,
                      migration_log: Optional[MigrationLogger] = None) -> Page:
    """
    Create a Page from a source document and the project's mappings.

    Args:
        page_file: Path to the source document
        project: ProjectInformation
        destination: CascadeDestination (or any object with the same lookups)
        migration_log: Log for skipped and trimmed values; one is created if omitted

    Returns:
        The assembled Page

    Raises:
        MappingConfigurationError: If the mappings cannot produce a valid page
        DocumentParseError: If the document cannot be parsed
    """
    page_file = Path(page_file)
    page_name, parent_folder_path = get_page_identity(page_file, project.xml_directory)
    content_type = project.content_type

    page = Page(
        name=page_name,
        parent_folder_path=parent_folder_path,
        site_name=project.site_name,
        content_type_path=project.content_type_path,
    )
    if migration_log is None:
        migration_log = MigrationLogger(page_path=page.path, file_path=str(page_file))
    elif migration_log.page_path is None:
        migration_log.page_path = page.path

    logger.log_operation_start("assemble_page", page=page.path, file=str(page_file))

    try:
        page_file_contents = tidy_full_html(read_source_document(page_file))
        document = parse_document(page_file_contents, str(page_file))

        page.metadata = create_page_metadata(
            project, document, content_type.metadata_fields.keys(), migration_log
        )
        structured_data = create_page_structured_data(
            project, document, page.path, destination, migration_log
        )

        if content_type.uses_data_definition:
            page.structured_data = structured_data
        else:
            page.xhtml = body_from_structured_data(structured_data)

        assign_special_block_content(document, page, project, destination, migration_log)
    except MigrationError as e:
        migration_log.error(str(e))
        logger.log_operation_end("assemble_page", False, page=page.path, error=str(e))
        raise

    logger.log_operation_end("assemble_page", True, page=page.path, **migration_log.get_stats())
    return page
