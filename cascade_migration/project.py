"""
Project information for a page migration.

A project names the source directory, the destination site and content
type, the field mappings and the lookup tables built while earlier assets
(files, blocks) were migrated. Projects are stored as JSON:

    {
        "xmlDirectory": "/data/export",
        "siteName": "www",
        "contentTypePath": "/Page",
        "contentTypes": {
            "/Page": {
                "usesDataDefinition": true,
                "metadataFields": [{"identifier": "title"}, {"identifier": "audience", "dynamic": true}]
            }
        },
        "fieldMapping": [
            {"xpath": "//title", "field": {"kind": "metadata", "identifier": "title"}},
            {"xpath": "//div[@id='main']", "field": {"kind": "structured", "identifier": "main/body", "wysiwyg": true}}
        ],
        "staticValues": [
            {"field": {"kind": "metadata", "identifier": "author"}, "value": "Web Team"}
        ],
        "blockIdToPath": {"1234": "/_blocks/sidebar"},
        "templateToBlock": {"/xslt/news.xslt": "/_blocks/news-feed"},
        "specialBlockIds": ["5678"],
        "existingFiles": {"/images/logo.png": "abc123"},
        "existingXhtmlBlocks": {"/_blocks/sidebar": "def456"}
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Set

from .exceptions import MappingConfigurationError, ProjectFileError
from .fields import ChooserType, Field, MetadataField, StructuredField


@dataclass
class ContentTypeInformation:
    path: str
    uses_data_definition: bool = True
    metadata_fields: Dict[str, MetadataField] = field(default_factory=dict)


@dataclass
class ProjectInformation:
    xml_directory: Path
    site_name: str
    content_type_path: str
    content_types: Dict[str, ContentTypeInformation] = field(default_factory=dict)
    # XPath -> destination field; None marks an unmapped expression
    field_mapping: Dict[str, Optional[Field]] = field(default_factory=dict)
    static_value_mapping: Dict[Field, str] = field(default_factory=dict)
    block_id_to_path_map: Dict[str, str] = field(default_factory=dict)
    template_to_block_mapping: Dict[str, str] = field(default_factory=dict)
    special_block_ids: Set[str] = field(default_factory=set)
    existing_cascade_files: Dict[str, str] = field(default_factory=dict)
    existing_cascade_xhtml_blocks: Dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> ContentTypeInformation:
        content_type = self.content_types.get(self.content_type_path)
        if content_type is None:
            raise MappingConfigurationError(
                f"Content type {self.content_type_path} is not described in the project"
            )
        return content_type


def field_from_dict(data: dict) -> Field:
    """Build a StructuredField or MetadataField from its project-file form."""
    kind = data.get("kind")
    identifier = data.get("identifier")
    if not identifier:
        raise ProjectFileError(f"Field without identifier: {data}")

    label = data.get("label", identifier)
    if kind == "structured":
        try:
            chooser_type = ChooserType(data.get("chooserType", "none"))
        except ValueError as e:
            raise ProjectFileError(f"Unknown chooser type for field {identifier}: {e}") from e
        return StructuredField(identifier, label, chooser_type, bool(data.get("wysiwyg", False)))
    if kind == "metadata":
        return MetadataField(identifier, label, bool(data.get("dynamic", False)))
    raise ProjectFileError(f"Unknown field kind {kind!r} for field {identifier}")


def project_from_dict(data: dict, base_dir: Optional[Path] = None) -> ProjectInformation:
    """
    Build ProjectInformation from a decoded project file.

    Args:
        data: Decoded JSON project
        base_dir: Directory relative xmlDirectory values are resolved against
    """
    try:
        xml_directory = Path(data["xmlDirectory"])
        site_name = data["siteName"]
        content_type_path = data["contentTypePath"]
    except KeyError as e:
        raise ProjectFileError(f"Project is missing required key {e}") from e
    if base_dir is not None and not xml_directory.is_absolute():
        xml_directory = base_dir / xml_directory

    content_types = {}
    for path, content_type in (data.get("contentTypes") or {}).items():
        metadata_fields = {}
        for field_data in content_type.get("metadataFields") or []:
            metadata_field = field_from_dict({"kind": "metadata", **field_data})
            metadata_fields[metadata_field.identifier] = metadata_field
        content_types[path] = ContentTypeInformation(
            path=path,
            uses_data_definition=bool(content_type.get("usesDataDefinition", True)),
            metadata_fields=metadata_fields,
        )

    field_mapping = {}
    for entry in data.get("fieldMapping") or []:
        field_data = entry.get("field")
        field_mapping[entry["xpath"]] = field_from_dict(field_data) if field_data else None

    static_value_mapping = {
        field_from_dict(entry["field"]): entry.get("value", "")
        for entry in data.get("staticValues") or []
    }

    return ProjectInformation(
        xml_directory=xml_directory,
        site_name=site_name,
        content_type_path=content_type_path,
        content_types=content_types,
        field_mapping=field_mapping,
        static_value_mapping=static_value_mapping,
        block_id_to_path_map=dict(data.get("blockIdToPath") or {}),
        template_to_block_mapping=dict(data.get("templateToBlock") or {}),
        special_block_ids=set(data.get("specialBlockIds") or []),
        existing_cascade_files=dict(data.get("existingFiles") or {}),
        existing_cascade_xhtml_blocks=dict(data.get("existingXhtmlBlocks") or {}),
    )


def load_project_file(project_path) -> ProjectInformation:
    """Read a JSON project file; a relative xmlDirectory is taken from the file's folder."""
    project_path = Path(project_path)
    try:
        with open(project_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ProjectFileError("Project file not found", str(project_path)) from e
    except json.JSONDecodeError as e:
        raise ProjectFileError(f"Project file is not valid JSON: {e}", str(project_path)) from e
    return project_from_dict(data, base_dir=project_path.parent)
