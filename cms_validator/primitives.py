"""Primitive validators and the data_type → validator mapping for leaf fields."""

import logging
import re
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictStr,
    StrictBool,
    StringConstraints,
)

from cms_validator.models import CompileMode, DataType, RichTextKind, get_data_type
from cms_validator.schemas import FieldDescriptor

logger = logging.getLogger(__name__)

FULL_TIMESTAMP_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{3})?Z?")
DATE_ONLY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

Uid = Annotated[str, StringConstraints(strict=True, min_length=1)]
StrictNumber = Annotated[float, Strict(), Field(allow_inf_nan=False)]


def _check_iso_date(value: str) -> str:
    """Accept full ISO timestamps and date-only values."""
    if FULL_TIMESTAMP_PATTERN.fullmatch(value) or DATE_ONLY_PATTERN.fullmatch(value):
        return value
    raise ValueError("Invalid ISO date/datetime format")


IsoDate = Annotated[StrictStr, AfterValidator(_check_iso_date)]

# Assets in upsert mode are referenced by their uid only.
AssetUid = Uid


class Asset(BaseModel):
    """Expanded asset object as returned by the delivery API."""

    model_config = ConfigDict(extra="allow")

    uid: Uid
    url: StrictStr | None = None


class Reference(BaseModel):
    """Reference to another entry (or embedded global field)."""

    model_config = ConfigDict(extra="allow")

    uid: Uid
    content_type_uid: StrictStr | None = Field(None, alias="_content_type_uid")


class Link(BaseModel):
    """Link field value. The CMS stores the target under 'href'."""

    model_config = ConfigDict(extra="allow")

    title: StrictStr | None = None
    href: StrictStr | None = None


class TaxonomyTerm(BaseModel):
    taxonomy_uid: StrictStr
    term_uid: StrictStr


Taxonomy = list[TaxonomyTerm]


class RichTextNode(BaseModel):
    """
    Node of a JSON rich text document.

    Children are nodes of the same shape. Nesting depth is bounded only by the
    recursion limit of pydantic-core.
    """

    model_config = ConfigDict(extra="allow")

    type: StrictStr | None = None
    text: StrictStr | None = None
    children: list["RichTextNode"] | None = None
    attrs: dict[str, Any] | None = None
    uid: StrictStr | None = None


class RichTextDocument(BaseModel):
    """Root of a JSON rich text document."""

    model_config = ConfigDict(extra="allow")

    type: Literal["doc"]
    uid: StrictStr | None = None
    attrs: dict[str, Any] | None = None
    children: list[RichTextNode]


RichTextNode.model_rebuild()


def compile_pattern(pattern: str | None) -> re.Pattern[str] | None:
    """
    Compile a field's format regex, ignoring patterns Python cannot parse.

    Args:
        pattern: Raw regex from the field definition.

    Returns:
        re.Pattern | None: Compiled pattern, or None when absent or invalid.
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.debug(f"Ignoring invalid format pattern {pattern!r}: {e}")
        return None


def parse_instant(value: str | None) -> datetime | None:
    """
    Parse an ISO date or timestamp into an aware datetime.

    Date-only values and timestamps without an offset are read as UTC.

    Args:
        value: ISO formatted date string.

    Returns:
        datetime | None: Parsed instant, or None when the value is not a valid date.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _pattern_validator(pattern: re.Pattern[str]) -> Callable[[str], str]:
    def check(value: str) -> str:
        if pattern.search(value) is None:
            raise ValueError(f"String does not match pattern {pattern.pattern!r}")
        return value

    return check


def _date_range_validator(
    start: datetime | None, end: datetime | None
) -> Callable[[str], str]:
    def check(value: str) -> str:
        instant = parse_instant(value)
        if instant is None:
            raise ValueError("Invalid ISO date/datetime format")
        if start and instant < start:
            raise ValueError("Date out of allowed range")
        if end and instant > end:
            raise ValueError("Date out of allowed range")
        return value

    return check


def map_text(field: FieldDescriptor, mode: CompileMode) -> Any:
    """Map a text field: HTML rich text, select, regex-constrained or plain."""
    if field.rich_text_kind is RichTextKind.MARKUP:
        return StrictStr

    values = field.enum_values
    if values:
        return Literal[tuple(values)]

    pattern = compile_pattern(field.format)
    if pattern is None:
        return StrictStr
    return Annotated[StrictStr, AfterValidator(_pattern_validator(pattern))]


def map_date(field: FieldDescriptor, mode: CompileMode) -> Any:
    """Map an isodate field, applying startDate/endDate bounds when configured."""
    start = parse_instant(field.start_date)
    end = parse_instant(field.end_date)
    if field.start_date and start is None:
        logger.debug(f"Ignoring unparsable startDate {field.start_date!r}")
    if field.end_date and end is None:
        logger.debug(f"Ignoring unparsable endDate {field.end_date!r}")
    if start is None and end is None:
        return IsoDate
    return Annotated[IsoDate, AfterValidator(_date_range_validator(start, end))]


def map_json(field: FieldDescriptor, mode: CompileMode) -> Any:
    """Map a json field: JSON RTE documents are validated, anything else is opaque."""
    if field.rich_text_kind is RichTextKind.DOCUMENT_TREE:
        return RichTextDocument
    return Any


def map_file(field: FieldDescriptor, mode: CompileMode) -> Any:
    """Map a file field. Upsert payloads carry asset uids instead of asset objects."""
    if mode == CompileMode.UPSERT:
        return AssetUid
    return Asset


_PRIMITIVE_MAPPERS: dict[DataType, Callable[[FieldDescriptor, CompileMode], Any]] = {
    DataType.TEXT: map_text,
    DataType.NUMBER: lambda field, mode: StrictNumber,
    DataType.BOOLEAN: lambda field, mode: StrictBool,
    DataType.ISODATE: map_date,
    DataType.JSON: map_json,
    DataType.FILE: map_file,
    DataType.LINK: lambda field, mode: Link,
    # References keep their object shape in both modes.
    DataType.REFERENCE: lambda field, mode: Reference,
    DataType.GLOBAL_FIELD: lambda field, mode: Reference,
    DataType.TAXONOMY: lambda field, mode: Taxonomy,
}


def map_primitive(field: FieldDescriptor, mode: CompileMode = CompileMode.READ) -> Any:
    """
    Map a leaf field to its base validator type.

    Group and blocks fields are structural and handled by the compiler; any tag
    without a primitive mapper (including unknown CMS field types) accepts any value.

    Args:
        field: Field definition to map.
        mode: Compilation mode; only affects file fields.

    Returns:
        Any: A type usable as a pydantic annotation.
    """
    data_type = get_data_type(field.data_type)
    mapper = _PRIMITIVE_MAPPERS.get(data_type) if data_type else None
    if mapper is None:
        logger.debug(
            f"No primitive mapper for data_type {field.data_type!r} "
            f"(field '{field.uid}'), accepting any value"
        )
        return Any
    return mapper(field, mode)
