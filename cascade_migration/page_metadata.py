"""
Metadata mapping for Cascade pages.

Wired metadata fields are assigned through STANDARD_SLOTS; every other
metadata field becomes a dynamic field holding a single value.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union

from cascade_rest.metadata import (
    STANDARD_METADATA_FIELD_IDENTIFIERS,
    LONG_METADATA_FIELDS,
    get_dynamic_field,
)

from .config import (
    DEFAULT_METADATA_MAX_LENGTH,
    LONG_METADATA_MAX_LENGTH,
    METADATA_DATE_FORMAT,
    METADATA_DATE_TIMEZONE,
)
from .exceptions import MappingConfigurationError, PathExpressionError
from .fields import MetadataField
from .migration_logger import MigrationLogger
from .xml_analyzer import evaluate_xpath

DateValue = Union[datetime, str]

# Formats Cascade uses when a metadata date is read back over REST
_REST_DATE_FORMATS = ["%b %d, %Y %I:%M:%S %p", "%b %d, %Y, %I:%M:%S %p"]


@dataclass
class DynamicMetadataField:
    name: str
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "fieldValues": [{"value": value} for value in self.values],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DynamicMetadataField":
        return cls(
            name=data["name"],
            values=[fv.get("value") for fv in data.get("fieldValues") or []],
        )


@dataclass
class Metadata:
    """A page or block metadata record: wired slots plus dynamic fields."""
    author: Optional[str] = None
    display_name: Optional[str] = None
    end_date: Optional[DateValue] = None
    keywords: Optional[str] = None
    meta_description: Optional[str] = None
    review_date: Optional[DateValue] = None
    start_date: Optional[DateValue] = None
    summary: Optional[str] = None
    teaser: Optional[str] = None
    title: Optional[str] = None
    dynamic_fields: List[DynamicMetadataField] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {}
        for name, slot in STANDARD_SLOTS.items():
            value = getattr(self, slot.attribute)
            if value is None:
                continue
            data[name] = value.isoformat() if isinstance(value, datetime) else value
        data["dynamicFields"] = [f.to_dict() for f in self.dynamic_fields]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Metadata":
        metadata = cls()
        for name, slot in STANDARD_SLOTS.items():
            value = data.get(name)
            if value is None:
                continue
            slot.assign(metadata, _read_rest_date(value) if slot.is_date else value)
        metadata.dynamic_fields = [
            DynamicMetadataField.from_dict(f) for f in data.get("dynamicFields") or []
        ]
        return metadata


@dataclass(frozen=True)
class MetadataSlot:
    """Where a wired metadata field lives on Metadata and what it holds."""
    attribute: str
    is_date: bool = False

    def assign(self, metadata: Metadata, value) -> None:
        setattr(metadata, self.attribute, value)


STANDARD_SLOTS: Dict[str, MetadataSlot] = {
    "author": MetadataSlot("author"),
    "displayName": MetadataSlot("display_name"),
    "endDate": MetadataSlot("end_date", is_date=True),
    "keywords": MetadataSlot("keywords"),
    "metaDescription": MetadataSlot("meta_description"),
    "reviewDate": MetadataSlot("review_date", is_date=True),
    "startDate": MetadataSlot("start_date", is_date=True),
    "summary": MetadataSlot("summary"),
    "teaser": MetadataSlot("teaser"),
    "title": MetadataSlot("title"),
}


def _read_rest_date(value: str) -> DateValue:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    for date_format in _REST_DATE_FORMATS:
        try:
            return datetime.strptime(value, date_format)
        except ValueError:
            continue
    return value


def parse_metadata_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a year-month-day value in the reference time zone.

    Single-digit months and days are accepted ("2020-1-5").

    Returns:
        Timezone-aware datetime at midnight, or None when unparseable
    """
    if value is None:
        return None
    try:
        parsed = datetime.strptime(value.strip(), METADATA_DATE_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=METADATA_DATE_TIMEZONE)


def trim_metadata_field_value(field_name: str, field_value: Optional[str],
                              migration_log: MigrationLogger) -> Optional[str]:
    """Cut a value down to the field's maximum length, logging when it happens."""
    max_length = DEFAULT_METADATA_MAX_LENGTH
    if field_name in LONG_METADATA_FIELDS:
        max_length = LONG_METADATA_MAX_LENGTH

    if field_value is None or len(field_value) <= max_length:
        return field_value

    migration_log.warning(
        f"Cascade metadata field \"{field_name}\" contains {len(field_value)} characters. "
        f"Trimming to {max_length}."
    )
    return field_value[:max_length]


def assign_metadata_value(metadata: Metadata, dynamic_fields: List[DynamicMetadataField],
                          field: MetadataField, field_value: Optional[str],
                          migration_log: MigrationLogger) -> None:
    """
    Assign a value to a wired slot, or record it as a dynamic field.

    A dynamic field replaces any earlier value of the same name, so each
    name appears once.
    """
    field_name = field.identifier

    if field.is_date_slot:
        date_value = parse_metadata_date(field_value)
        if date_value is None:
            migration_log.warning(
                f"Cascade metadata field \"{field_name}\" contains value {field_value} that cannot "
                f"be parsed into a calendar format. The proper format is YYYY-MM-DD. "
                f"Skipping this field."
            )
            return
        _standard_slot(field_name).assign(metadata, date_value)

    elif field.is_standard_slot:
        _standard_slot(field_name).assign(metadata, field_value)

    else:
        idx = get_dynamic_field(field_name, dynamic_fields)
        if idx is not None:
            dynamic_fields.pop(idx)
        dynamic_fields.append(DynamicMetadataField(field_name, [field_value]))


def _standard_slot(field_name: str) -> MetadataSlot:
    slot = STANDARD_SLOTS.get(field_name)
    if slot is None:
        raise MappingConfigurationError(
            f"Metadata field \"{field_name}\" is mapped as a wired field but Cascade has no "
            f"such field. Mark it dynamic in the project."
        )
    return slot


def create_page_metadata(project, document, metadata_field_names: Iterable[str],
                         migration_log: MigrationLogger) -> Metadata:
    """
    Build the page's metadata from the project's mappings.

    Args:
        project: ProjectInformation with field and static value mappings
        document: Parsed source document
        metadata_field_names: All field names of the content type's Metadata Set
        migration_log: Log for trimmed and skipped values

    Returns:
        Metadata record
    """
    metadata = Metadata()

    # Every dynamic field is sent, empty unless a mapping fills it
    dynamic_fields = [
        DynamicMetadataField(name, [""])
        for name in metadata_field_names
        if name not in STANDARD_METADATA_FIELD_IDENTIFIERS
    ]

    for xpath, field in project.field_mapping.items():
        if not isinstance(field, MetadataField):
            continue
        try:
            field_value = evaluate_xpath(document, xpath)
        except PathExpressionError as e:
            migration_log.warning(f"{e}. Skipping field \"{field.identifier}\".", xpath)
            continue
        field_value = trim_metadata_field_value(field.identifier, field_value, migration_log)
        assign_metadata_value(metadata, dynamic_fields, field, field_value, migration_log)

    for field, static_value in project.static_value_mapping.items():
        if isinstance(field, MetadataField):
            # Escape ampersands to keep the value valid XML
            field_value = trim_metadata_field_value(
                field.identifier, static_value.replace("&", "&amp;"), migration_log
            )
            assign_metadata_value(metadata, dynamic_fields, field, field_value, migration_log)

    metadata.dynamic_fields = dynamic_fields
    return metadata
