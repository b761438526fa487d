"""
Content cleaning for source pages and mapped field values.

Markup that is already well-formed is returned untouched; anything else is
re-serialized through BeautifulSoup so it can be parsed as XML and stored in
Cascade. Links inside rich text are rewritten to CMS-managed paths.
"""

import posixpath
import re
from html.entities import name2codepoint
from typing import Optional

from bs4 import BeautifulSoup
from lxml import etree

from .config import PAGE_FILE_EXTENSIONS

XML_ENTITIES = {'amp', 'lt', 'gt', 'quot', 'apos'}

_NAMED_ENTITY = re.compile(r'&([A-Za-z][A-Za-z0-9]*);')
_LINK_ATTRIBUTE = re.compile(r'(?<![\w-])(href|src)=([\'"])([^\'"]*)\2', re.IGNORECASE)
_URL_SCHEME = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*:')


def replace_html_entities(content: str) -> str:
    """
    Replace HTML named entities (&nbsp;, &copy;, ...) with the characters
    they stand for. The five XML entities are kept as they are.
    """
    def replace_entity(match):
        name = match.group(1)
        if name in XML_ENTITIES or name not in name2codepoint:
            return match.group(0)
        return chr(name2codepoint[name])

    return _NAMED_ENTITY.sub(replace_entity, content)


def _is_well_formed(content: str) -> bool:
    try:
        etree.fromstring(content.encode('utf-8'))
    except etree.XMLSyntaxError:
        return False
    return True


def tidy_content_conditionally(content: Optional[str]) -> Optional[str]:
    """
    Normalize a markup fragment (a single field value).

    Plain text and well-formed fragments pass through unchanged, so the
    function is idempotent.
    """
    if content is None:
        return None
    if '<' not in content and '&' not in content:
        return content
    if _is_well_formed(f'<fragment>{content}</fragment>'):
        return content

    soup = BeautifulSoup(replace_html_entities(content), 'html.parser')
    return soup.decode(formatter='minimal')


def tidy_full_html(content: Optional[str]) -> Optional[str]:
    """
    Normalize a whole source document.

    Documents that already parse as XML are returned unchanged. Others are
    repaired with the XML tree builder, which keeps tag-name case intact
    (widget elements such as ``ControlWidget`` are matched case-sensitively).
    """
    if content is None or not content.strip():
        return content
    if _is_well_formed(content):
        return content

    soup = BeautifulSoup(replace_html_entities(content), 'xml')
    return soup.decode(formatter='minimal')


def strip_page_extension(path: str) -> str:
    for extension in PAGE_FILE_EXTENSIONS:
        if path.lower().endswith(extension):
            return path[:-len(extension)]
    return path


def rewrite_links(content: Optional[str], base_path: str) -> Optional[str]:
    """
    Rewrite href/src values in rich text to CMS-managed paths.

    Rules:
    - External URLs (any scheme, or protocol-relative), anchors, mailto:
      and tel: links are left alone
    - Relative paths are resolved against the folder of ``base_path``
    - Page extensions (.xml, .html, .htm) are removed from href paths;
      a query string or hash fragment is preserved

    Args:
        content: Rich text markup
        base_path: Root-relative path of the page being migrated,
            e.g. /about/index

    Returns:
        Markup with rewritten links
    """
    if not content:
        return content

    base_folder = posixpath.dirname(base_path) or '/'

    def replace_link(match):
        attribute, quote, value = match.groups()
        if not value or value.startswith('#') or value.startswith('//'):
            return match.group(0)
        if _URL_SCHEME.match(value):
            return match.group(0)

        # Split off ?query and #fragment so only the path is rewritten
        split_at = min([i for i in (value.find('?'), value.find('#')) if i != -1] or [len(value)])
        path, suffix = value[:split_at], value[split_at:]
        if not path:
            return match.group(0)

        if not path.startswith('/'):
            path = posixpath.normpath(posixpath.join(base_folder, path))
        if attribute.lower() == 'href':
            path = strip_page_extension(path)

        return f'{attribute}={quote}{path}{suffix}{quote}'

    return _LINK_ATTRIBUTE.sub(replace_link, content)
