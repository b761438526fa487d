"""
Special block handling.

A page may embed one "special" block in its article region. Its metadata
replaces the page's and its structured data is appended to the page's.
"""

from typing import Optional

from .config import SPECIAL_BLOCK_REGION_XPATH
from .migration_logger import MigrationLogger
from .xml_analyzer import content_reference_xpath, evaluate_xpath_list


def find_special_block_reference(document) -> Optional[str]:
    """ContentID of the first image/content-block widget in the article region."""
    block_ids = evaluate_xpath_list(document, content_reference_xpath(SPECIAL_BLOCK_REGION_XPATH))
    if not block_ids:
        return None
    return block_ids[0].strip() or None


def assign_special_block_content(document, page, project, destination,
                                 migration_log: MigrationLogger) -> bool:
    """
    Merge the special block's content into the page.

    Uses only the first reference found, even if the region holds more.
    Nothing happens unless the reference resolves to a block path and the
    path to an existing block that can be read.

    Returns:
        True if block content was merged
    """
    special_block_id_field = find_special_block_reference(document)
    if special_block_id_field is None:
        return False

    special_block_path = project.block_id_to_path_map.get(special_block_id_field)
    if special_block_path is None:
        return False

    special_block_id = destination.resolve_existing_block_id(special_block_path)
    if special_block_id is None:
        return False

    block_content = destination.fetch_block_content(special_block_id)
    if block_content is None:
        return False
    block_nodes, block_metadata = block_content

    if page.structured_data is not None:
        page.structured_data = list(page.structured_data) + list(block_nodes)
    elif block_nodes:
        migration_log.warning(
            f"Special block {special_block_path} has structured data but the page has no "
            f"Data Definition. Only its metadata is used."
        )

    page.metadata = block_metadata
    migration_log.info(f"Merged special block {special_block_path}", special_block_id_field)
    return True
