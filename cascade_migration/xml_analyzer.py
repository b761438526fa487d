"""
XML Analysis Utilities for source page migration.

Provides functions to:
- Parse a (tidied) source document once for repeated XPath evaluation
- Evaluate XPath expressions to a single string or a list of strings
- Build the widget-reference XPaths used to find blocks inside a region
- Check and clean asset paths for characters Cascade does not allow
"""

import re
from typing import List, Optional, Union

from bs4 import BeautifulSoup
from lxml import etree

from .config import (
    CONTENT_REFERENCE_CONTROL_TYPES,
    TEMPLATE_REFERENCE_CONTROL_TYPE,
    LEGAL_PATH_CHARACTERS,
)
from .exceptions import DocumentParseError, PathExpressionError

Document = Union[str, etree._Element]

_XML_DECLARATION = re.compile(r'^\s*<\?xml[^>]*\?>')


def parse_document(contents: str, file_path: str = None) -> etree._Element:
    """
    Parse document contents into an element tree for XPath evaluation.

    Namespaces are stripped so mapping XPaths can use bare tag names
    (``//div``) against XHTML documents.

    Args:
        contents: Document markup, ideally already tidied
        file_path: Source file, used in error messages only

    Returns:
        Root element

    Raises:
        DocumentParseError: If nothing parseable remains
    """
    if contents is None or not contents.strip():
        raise DocumentParseError("Document is empty", file_path)

    # The declared encoding no longer applies once the text is decoded
    contents = _XML_DECLARATION.sub('', contents)

    parser = etree.XMLParser(recover=True, resolve_entities=False, huge_tree=True)
    try:
        root = etree.fromstring(contents.encode('utf-8'), parser)
    except etree.XMLSyntaxError as e:
        raise DocumentParseError(f"Document could not be parsed: {e}", file_path) from e
    if root is None:
        raise DocumentParseError("Document has no root element", file_path)

    for elem in root.iter():
        if isinstance(elem.tag, str) and elem.tag.startswith('{'):
            elem.tag = etree.QName(elem).localname
    etree.cleanup_namespaces(root)
    return root


def _inner_markup(elem: etree._Element) -> str:
    parts = [elem.text or '']
    for child in elem:
        parts.append(etree.tostring(child, encoding='unicode', with_tail=True))
    return ''.join(parts)


def _to_string(value) -> str:
    if isinstance(value, etree._Element):
        return _inner_markup(value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return str(value)


def _evaluate(document: Document, xpath: str):
    root = parse_document(document) if isinstance(document, str) else document
    try:
        return root.xpath(xpath)
    except (etree.XPathError, TypeError) as e:
        raise PathExpressionError(f"Cannot evaluate XPath {xpath!r}: {e}", xpath) from e


def evaluate_xpath(document: Document, xpath: str) -> Optional[str]:
    """
    Evaluate an XPath expression and return its first value.

    Element results are returned as their inner markup, text and attribute
    results as plain strings, number and boolean results as strings.

    Returns:
        The value, or None when the expression selects nothing
    """
    result = _evaluate(document, xpath)
    if isinstance(result, list):
        if not result:
            return None
        return _to_string(result[0])
    return _to_string(result)


def evaluate_xpath_list(document: Document, xpath: str) -> List[str]:
    """Evaluate an XPath expression and return every value in document order."""
    result = _evaluate(document, xpath)
    if isinstance(result, list):
        return [_to_string(item) for item in result]
    return [_to_string(result)]


def content_reference_xpath(region_xpath: str) -> str:
    """
    XPath selecting the ContentID of every image/content-block widget in a region.

    The union keeps document order, so the first value is the first widget
    in the region.
    """
    return ' | '.join(
        f"{region_xpath}//ControlWidget[ControlType='{control_type}']/ContentID/text()"
        for control_type in CONTENT_REFERENCE_CONTROL_TYPES
    )


def template_reference_xpath(region_xpath: str) -> str:
    """XPath selecting the Template of every XSLT widget in a region."""
    return (
        f"{region_xpath}//ControlWidget[ControlType='{TEMPLATE_REFERENCE_CONTROL_TYPE}']"
        f"/Template/text()"
    )


def get_first_src_attribute(html: Optional[str]) -> Optional[str]:
    """Return the value of the first ``src`` attribute in the markup, if any."""
    if not html:
        return None
    tag = BeautifulSoup(html, 'html.parser').find(src=True)
    if tag is None:
        return None
    return tag['src']


def all_characters_legal(path: str) -> bool:
    return re.fullmatch(f'[{LEGAL_PATH_CHARACTERS}]*', path) is not None


def remove_illegal_characters(path: str) -> str:
    """
    Make a path safe for Cascade: whitespace becomes '-', anything else
    outside the legal set is dropped.
    """
    path = re.sub(r'\s+', '-', path.strip())
    return re.sub(f'[^{LEGAL_PATH_CHARACTERS}]', '', path)
