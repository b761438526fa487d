"""
Structured data mapping for Cascade pages.

Mapped values are first collected in a mutable StructuredDataGroup tree
keyed by identifier, then flattened into immutable StructuredDataNode
objects in the shape the Cascade REST API uses.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .config import REGION_BLOCK_CHOOSERS, SPECIAL_BLOCK_REGION_XPATH
from .content_cleaner import rewrite_links, tidy_content_conditionally
from .exceptions import MappingConfigurationError, PathExpressionError
from .fields import ChooserType, StructuredField
from .migration_logger import MigrationLogger
from .xml_analyzer import (
    content_reference_xpath,
    evaluate_xpath,
    evaluate_xpath_list,
    get_first_src_attribute,
    template_reference_xpath,
)


@dataclass(frozen=True)
class StructuredDataNode:
    """A text leaf, an asset leaf (file or block) or a group of nodes."""
    type: str
    identifier: str
    text: Optional[str] = None
    asset_type: Optional[str] = None
    file_path: Optional[str] = None
    block_path: Optional[str] = None
    structured_data_nodes: Tuple["StructuredDataNode", ...] = ()

    @classmethod
    def text_node(cls, identifier: str, text: Optional[str]) -> "StructuredDataNode":
        return cls(type="text", identifier=identifier, text=text)

    @classmethod
    def file_node(cls, identifier: str, path: str) -> "StructuredDataNode":
        return cls(type="asset", identifier=identifier, asset_type="file", file_path=path)

    @classmethod
    def block_node(cls, identifier: str, path: str) -> "StructuredDataNode":
        return cls(type="asset", identifier=identifier, asset_type="block", block_path=path)

    @classmethod
    def group_node(cls, identifier: str, children: List["StructuredDataNode"]) -> "StructuredDataNode":
        return cls(type="group", identifier=identifier, structured_data_nodes=tuple(children))

    def to_dict(self) -> dict:
        node = {"type": self.type, "identifier": self.identifier}
        if self.type == "text":
            node["text"] = self.text if self.text is not None else ""
        elif self.type == "asset":
            node["assetType"] = self.asset_type
            if self.asset_type == "file":
                node["filePath"] = self.file_path
            else:
                node["blockPath"] = self.block_path
        else:
            node["structuredDataNodes"] = [child.to_dict() for child in self.structured_data_nodes]
        return node

    @classmethod
    def from_dict(cls, data: dict) -> "StructuredDataNode":
        """Build a node from a REST payload node (e.g. a block read back from Cascade)."""
        return cls(
            type=data.get("type", "text"),
            identifier=data.get("identifier", ""),
            text=data.get("text"),
            asset_type=data.get("assetType"),
            file_path=data.get("filePath"),
            block_path=data.get("blockPath"),
            structured_data_nodes=tuple(
                cls.from_dict(child) for child in data.get("structuredDataNodes") or []
            ),
        )


class StructuredDataGroup:
    """
    Mutable group used while collecting values.

    Maps are used instead of node lists for fast insert and lookup; dict
    insertion order keeps flattening deterministic.
    """

    def __init__(self):
        # leaf identifier -> values for that field
        self.content_fields: Dict[str, List[StructuredDataNode]] = {}
        # group identifier -> nested group
        self.groups: Dict[str, "StructuredDataGroup"] = {}

    def insert(self, path: Union[str, List[str]], node: StructuredDataNode,
               accumulate: bool = False) -> None:
        """
        Insert a leaf node at a slash-separated field path.

        Intermediate groups are created as needed. With ``accumulate`` the
        node is appended to the identifier's values (block choosers),
        otherwise it replaces them.
        """
        segments = path.split("/") if isinstance(path, str) else list(path)
        identifier = segments[-1] if segments else ""
        if not identifier:
            raise MappingConfigurationError(f"Field path {path!r} has an empty identifier")
        if node.identifier != identifier:
            raise ValueError(f"Node {node.identifier!r} does not match field path {path!r}")

        current = self
        for group_identifier in segments[:-1]:
            if not group_identifier:
                continue
            current = current.groups.setdefault(group_identifier, StructuredDataGroup())

        if accumulate:
            current.content_fields.setdefault(identifier, []).append(node)
        else:
            current.content_fields[identifier] = [node]

    def flatten(self) -> List[StructuredDataNode]:
        """Leaves first (first-touched order), then one group node per nested group."""
        result = []
        for nodes in self.content_fields.values():
            result.extend(nodes)
        for group_identifier, group in self.groups.items():
            result.append(StructuredDataNode.group_node(group_identifier, group.flatten()))
        return result


def assign_field_value(root: StructuredDataGroup, field: StructuredField,
                       field_value: Optional[str], destination) -> None:
    """
    Put one field value into the tree according to the field's chooser type.

    File references are kept only when the destination already has the
    file; empty file and block references are dropped without logging.
    """
    identifier = field.leaf_identifier

    if field.chooser_type is ChooserType.NONE:
        field_value = tidy_content_conditionally(field_value)
        root.insert(field.identifier, StructuredDataNode.text_node(identifier, field_value))

    elif field.chooser_type is ChooserType.FILE:
        field_value = tidy_content_conditionally(field_value)
        path = get_first_src_attribute(field_value)
        if path is None:
            path = field_value
        if path and path.strip():
            path = path.strip()
            if destination.resolve_asset_id(path) is not None:
                root.insert(field.identifier, StructuredDataNode.file_node(identifier, path))

    elif field.chooser_type is ChooserType.BLOCK:
        if field_value and field_value.strip():
            root.insert(
                field.identifier,
                StructuredDataNode.block_node(identifier, field_value.strip()),
                accumulate=field.accumulates,
            )


def populate_block_choosers(root: StructuredDataGroup, identifier: str, region_xpath: str,
                            document, project, destination) -> None:
    """
    Fill a multiple block chooser with the blocks referenced by widgets
    inside a document region.

    Image and content-block widgets are looked up by ContentID, XSLT
    widgets by Template. The special block is left out of the region it
    is read from, since it is merged into the page separately.
    """
    field = StructuredField(identifier, identifier, ChooserType.BLOCK)

    for block_id in evaluate_xpath_list(document, content_reference_xpath(region_xpath)):
        block_id = block_id.strip()
        if region_xpath == SPECIAL_BLOCK_REGION_XPATH and block_id in project.special_block_ids:
            continue
        assign_field_value(root, field, project.block_id_to_path_map.get(block_id), destination)

    for template_path in evaluate_xpath_list(document, template_reference_xpath(region_xpath)):
        assign_field_value(
            root, field, project.template_to_block_mapping.get(template_path.strip()), destination
        )


def create_page_structured_data(project, document, asset_path: str, destination,
                                migration_log: MigrationLogger) -> List[StructuredDataNode]:
    """
    Build the page's structured data nodes from the project's mappings.

    Args:
        project: ProjectInformation with mappings and lookup tables
        document: Parsed source document
        asset_path: Root-relative CMS path of the page, used to rewrite links
        destination: Destination used to check that chosen files exist
        migration_log: Log for skipped values

    Returns:
        Flattened list of structured data nodes
    """
    root = StructuredDataGroup()

    for xpath, field in project.field_mapping.items():
        if not isinstance(field, StructuredField):
            continue

        try:
            field_value = evaluate_xpath(document, xpath)
        except PathExpressionError as e:
            migration_log.warning(f"{e}. Skipping field \"{field.identifier}\".", xpath)
            continue
        if field_value is None and field.chooser_type is ChooserType.NONE:
            migration_log.warning(
                f"No value found for field \"{field.identifier}\". Skipping this field.", xpath
            )
            continue
        if field.wysiwyg:
            field_value = rewrite_links(field_value, asset_path)

        assign_field_value(root, field, field_value, destination)

    for field, static_value in project.static_value_mapping.items():
        if isinstance(field, StructuredField):
            # Escape ampersands to keep the value valid XML
            assign_field_value(root, field, static_value.replace("&", "&amp;"), destination)

    for identifier, region_xpath in REGION_BLOCK_CHOOSERS:
        populate_block_choosers(root, identifier, region_xpath, document, project, destination)

    return root.flatten()
