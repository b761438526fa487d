"""
Configuration for migrating source pages into Cascade page assets.
"""

from datetime import timedelta, timezone

# Source regions holding widget references that become block choosers
HEADER_XPATH = '//div[@id="header-image"]'
ARTICLE_XPATH = '//div[@id="article"]'
ASIDE_XPATH = '//div[@class="aside"]'

# Block chooser identifier -> region it is populated from (order matters)
REGION_BLOCK_CHOOSERS = [
    ("header", HEADER_XPATH),
    ("article", ARTICLE_XPATH),
    ("aside", ASIDE_XPATH),
]

# Region scanned for the special block; the first reference wins
SPECIAL_BLOCK_REGION_XPATH = ARTICLE_XPATH

# Widget control types that reference content blocks by id
CONTENT_REFERENCE_CONTROL_TYPES = ["Image", "ContentBlock"]

# Widget control type that references an XSLT template
TEMPLATE_REFERENCE_CONTROL_TYPE = "XmlDataTransform"

# Metadata value length limits
DEFAULT_METADATA_MAX_LENGTH = 250
LONG_METADATA_MAX_LENGTH = 65535

# Calendar metadata values are read as year-month-day in Central Standard Time
METADATA_DATE_FORMAT = "%Y-%m-%d"
METADATA_DATE_TIMEZONE = timezone(timedelta(hours=-6), "CST")

# Source page extensions stripped from page names and internal links
PAGE_FILE_EXTENSIONS = [".xml", ".html", ".htm"]

# Characters allowed in Cascade asset paths
LEGAL_PATH_CHARACTERS = r"A-Za-z0-9_\-./"
