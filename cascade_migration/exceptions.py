"""
Exceptions raised while assembling a Cascade page from a source document.

Only configuration and parse errors abort a page. Bad values inside a
document are logged to the page's MigrationLogger and skipped instead.
"""

from typing import Optional


class MigrationError(Exception):
    """Base exception for page migration errors."""

    def __init__(self, message: str, file_path: Optional[str] = None) -> None:
        super().__init__(message)
        self.file_path = file_path

    def __str__(self) -> str:
        msg = super().__str__()
        if self.file_path:
            msg = f"{msg}\nFile: {self.file_path}"
        return msg


class MappingConfigurationError(MigrationError):
    """The project's field mappings cannot produce a valid page."""


class DocumentParseError(MigrationError):
    """The source document could not be parsed at all."""


class PathExpressionError(MigrationError):
    """An XPath expression failed to compile or evaluate."""

    def __init__(self, message: str, xpath: str) -> None:
        super().__init__(message)
        self.xpath = xpath


class ProjectFileError(MigrationError):
    """A project file is missing or malformed."""
