"""
Lookups against the destination Cascade site.

The project's tables of already-migrated files and blocks are consulted
first. When a CMS connection is given, misses fall back to the REST read
endpoints and the answers are cached for the rest of the run.
"""

from typing import Dict, List, Optional, Tuple

from cascade_rest.core import read_asset_by_path, read_single_asset
from logging_config import logger

from .page_metadata import Metadata
from .structured_data import StructuredDataNode

BlockContent = Tuple[List[StructuredDataNode], Metadata]


class CascadeDestination:
    """Resolve asset ids and read blocks for one project."""

    def __init__(self, project, cms_path: Optional[str] = None, auth: Optional[dict] = None):
        self.project = project
        self.cms_path = cms_path
        self.auth = auth
        self._file_ids: Dict[str, Optional[str]] = {}
        self._block_ids: Dict[str, Optional[str]] = {}

    @property
    def connected(self) -> bool:
        return bool(self.cms_path and self.auth)

    def _read_id_by_path(self, asset_type: str, payload_key: str, path: str) -> Optional[str]:
        if not self.connected:
            return None
        payload = read_asset_by_path(
            self.cms_path, self.auth, asset_type, self.project.site_name, path
        )
        if not payload:
            return None
        return payload.get("asset", {}).get(payload_key, {}).get("id")

    def resolve_asset_id(self, path: str) -> Optional[str]:
        """Id of the file asset at ``path``, or None if the site has no such file."""
        asset_id = self.project.existing_cascade_files.get(path)
        if asset_id is not None:
            logger.log_lookup("file", path, asset_id, "project")
            return asset_id
        if path not in self._file_ids:
            self._file_ids[path] = self._read_id_by_path("file", "file", path)
            logger.log_lookup("file", path, self._file_ids[path], "rest")
        return self._file_ids[path]

    def resolve_existing_block_id(self, path: str) -> Optional[str]:
        """Id of the XHTML/Data Definition block at ``path``, or None."""
        block_id = self.project.existing_cascade_xhtml_blocks.get(path)
        if block_id is not None:
            logger.log_lookup("block", path, block_id, "project")
            return block_id
        if path not in self._block_ids:
            self._block_ids[path] = self._read_id_by_path(
                "block", "xhtmlDataDefinitionBlock", path
            )
            logger.log_lookup("block", path, self._block_ids[path], "rest")
        return self._block_ids[path]

    def fetch_block_content(self, block_id: str) -> Optional[BlockContent]:
        """
        Read a block's structured data nodes and metadata.

        Returns:
            (nodes, metadata), or None when the block cannot be read
        """
        if not self.connected:
            logger.logger.debug(f"Not connected; cannot read block {block_id}")
            return None

        payload = read_single_asset(self.cms_path, self.auth, "block", block_id)
        if not payload:
            return None

        block = payload.get("asset", {}).get("xhtmlDataDefinitionBlock")
        if block is None:
            logger.logger.warning(f"Block {block_id} is not an XHTML/Data Definition block")
            return None

        structured_data = block.get("structuredData") or {}
        nodes = [
            StructuredDataNode.from_dict(node)
            for node in structured_data.get("structuredDataNodes") or []
        ]
        return nodes, Metadata.from_dict(block.get("metadata") or {})
