"""
Destination field types that mapping entries point at.

A field identifier may contain slashes; everything before the last slash
names the Data Definition groups the field lives in.
"""

from dataclasses import dataclass
from enum import Enum

from cascade_rest.metadata import CALENDAR_METADATA_FIELD_IDENTIFIERS


class ChooserType(Enum):
    NONE = "none"
    FILE = "file"
    BLOCK = "block"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Field:
    identifier: str
    label: str = ""

    @property
    def leaf_identifier(self) -> str:
        return self.identifier.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class StructuredField(Field):
    """A Data Definition field: text, file chooser or block chooser."""

    chooser_type: ChooserType = ChooserType.NONE
    wysiwyg: bool = False

    @property
    def accumulates(self) -> bool:
        # Block choosers are multi-valued; text and file fields keep the last value
        return self.chooser_type is ChooserType.BLOCK


@dataclass(frozen=True)
class MetadataField(Field):
    """A Metadata Set field, either wired (standard) or dynamic."""

    dynamic: bool = False

    @property
    def is_standard_slot(self) -> bool:
        return not self.dynamic

    @property
    def is_date_slot(self) -> bool:
        return (
            self.is_standard_slot
            and self.identifier in CALENDAR_METADATA_FIELD_IDENTIFIERS
        )
