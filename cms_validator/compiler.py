"""Compile CMS content-type definitions into pydantic validators."""

import logging
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    ValidationError,
    create_model,
    model_validator,
)
from pydantic.fields import FieldInfo

from cms_validator.models import CompileMode, DataType, get_data_type
from cms_validator.primitives import Reference, map_primitive
from cms_validator.schemas import Block, ContentType, FieldDescriptor

logger = logging.getLogger(__name__)


class ContentModelError(ValueError):
    """Raised when a content-type definition cannot be compiled."""


class EntryMetadata(BaseModel):
    """System metadata the CMS attaches to group instances and block items."""

    model_config = ConfigDict(extra="allow")

    uid: StrictStr | None = None


class BlockItem(BaseModel):
    """
    Base for one item of a modular blocks field.

    Each declared field is one block variant keyed by the block uid. An item must
    carry exactly one of the variant keys; other keys pass through unchecked.
    """

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def require_single_variant(cls, data: Any) -> Any:
        """Reject items matching none, or more than one, of the block variants."""
        if not isinstance(data, dict):
            return data

        variants = [field.alias for field in cls.model_fields.values()]
        present = [key for key in data if key in variants]
        if len(present) != 1:
            raise ValueError(
                f"Block item must contain exactly one of {variants}, "
                f"got keys {list(data)}"
            )
        return data


class CompiledField(BaseModel):
    """Validator compiled from a single field definition."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    uid: str
    annotation: Any = Field(..., description="Pydantic annotation of the value.")
    required: bool
    description: str

    @property
    def validator(self) -> Any:
        """Annotated type validating the field value on its own."""
        return Annotated[self.annotation, Field(description=self.description)]

    def field_info(self) -> FieldInfo:
        """Build the pydantic field used when the value sits inside an object."""
        default = ... if self.required else None
        return Field(default, alias=self.uid, description=self.description)


def _pascal_case(value: str) -> str:
    parts = [part for part in value.replace("-", "_").split("_") if part]
    return "".join(part[:1].upper() + part[1:] for part in parts) or "Field"


def _parse_field(field: FieldDescriptor | dict[str, Any]) -> FieldDescriptor:
    if isinstance(field, FieldDescriptor):
        return field
    try:
        return FieldDescriptor.model_validate(field)
    except ValidationError as e:
        raise ContentModelError(f"Invalid field definition: {e}") from e


def _parse_content_type(content_type: ContentType | dict[str, Any]) -> ContentType:
    if isinstance(content_type, ContentType):
        return content_type
    if not isinstance(content_type, dict):
        raise ContentModelError("Invalid content type schema")
    try:
        return ContentType.model_validate(content_type)
    except ValidationError as e:
        raise ContentModelError(f"Invalid content type schema: {e}") from e


def _parse_mode(mode: CompileMode | str) -> CompileMode:
    try:
        return CompileMode(mode)
    except ValueError as e:
        raise ContentModelError(f"Unknown compile mode: {mode!r}") from e


def _build_object_model(
    name: str,
    fields: list[FieldDescriptor],
    mode: CompileMode,
    extra: str = "allow",
    with_metadata: bool = False,
) -> type[BaseModel]:
    """
    Build an object validator keyed by field uid.

    Python attribute names are positional; field uids are carried as aliases so
    any uid (including ones clashing with BaseModel attributes) round-trips.
    """
    definitions: dict[str, Any] = {}
    seen: set[str] = set()
    for index, field in enumerate(fields):
        if field.uid in seen:
            raise ContentModelError(f"Duplicate field uid '{field.uid}' in {name}")
        seen.add(field.uid)
        compiled = _compile_field(field, mode)
        definitions[f"field_{index}"] = (compiled.annotation, compiled.field_info())

    if with_metadata:
        definitions["metadata_"] = (
            Optional[EntryMetadata],
            Field(None, alias="_metadata"),
        )

    return create_model(name, __config__=ConfigDict(extra=extra), **definitions)


def _compile_group(field: FieldDescriptor, mode: CompileMode) -> Any:
    group = _build_object_model(
        f"{_pascal_case(field.uid)}Group",
        field.fields or [],
        mode,
        with_metadata=field.multiple,
    )
    if not field.multiple:
        return group
    if field.max_instance and field.max_instance > 0:
        return Annotated[list[group], Field(max_length=field.max_instance)]
    return list[group]


def _compile_block(block: Block, mode: CompileMode) -> Any:
    if block.is_reference:
        return Reference
    return _build_object_model(
        _pascal_case(block.uid),
        block.fields or [],
        mode,
        with_metadata=True,
    )


def _compile_blocks(field: FieldDescriptor, mode: CompileMode) -> Any:
    blocks = field.blocks or []
    if not blocks:
        return list[Any]

    variants: dict[str, Any] = {}
    seen: set[str] = set()
    for index, block in enumerate(blocks):
        if block.uid in seen:
            raise ContentModelError(
                f"Duplicate block uid '{block.uid}' in field '{field.uid}'"
            )
        seen.add(block.uid)
        # Variant values are not nullable; absence is governed by BlockItem.
        variants[f"block_{index}"] = (
            _compile_block(block, mode),
            Field(None, alias=block.uid, description=block.title or block.uid),
        )

    item = create_model(
        f"{_pascal_case(field.uid)}Block", __base__=BlockItem, **variants
    )
    return list[item]


def _compile_field(field: FieldDescriptor, mode: CompileMode) -> CompiledField:
    data_type = get_data_type(field.data_type)

    if data_type is DataType.GROUP:
        annotation = _compile_group(field, mode)
    elif data_type is DataType.BLOCKS:
        annotation = _compile_blocks(field, mode)
    else:
        annotation = map_primitive(field, mode)
        if field.multiple:
            annotation = list[annotation]

    # The CMS sends null for empty optional fields.
    if not field.mandatory:
        annotation = Optional[annotation]

    return CompiledField(
        uid=field.uid,
        annotation=annotation,
        required=field.mandatory,
        description=field.description,
    )


def compile_field(
    field: FieldDescriptor | dict[str, Any],
    mode: CompileMode | str = CompileMode.READ,
) -> CompiledField:
    """
    Compile a single field definition, recursing into groups and blocks.

    Args:
        field: Field definition (model or raw CMS dict).
        mode: Compilation mode, propagated unchanged into nested fields.

    Returns:
        CompiledField: Validator for the field value with its description attached.

    Raises:
        ContentModelError: If the field definition is malformed.
    """
    return _compile_field(_parse_field(field), _parse_mode(mode))


def compile_content_type(
    content_type: ContentType | dict[str, Any],
    mode: CompileMode | str = CompileMode.READ,
) -> type[BaseModel]:
    """
    Compile a content type into an entry validator.

    An empty field list is valid; a missing one is a configuration error.

    Args:
        content_type: Content type definition (model or raw CMS dict).
        mode: Compilation mode (read or upsert).

    Returns:
        type[BaseModel]: Model validating entries keyed by top-level field uid.

    Raises:
        ContentModelError: If the content type has no field list or is malformed.
    """
    parsed = _parse_content_type(content_type)
    if parsed.fields is None:
        raise ContentModelError("Invalid content type schema: missing field list")

    compile_mode = _parse_mode(mode)
    name = f"{_pascal_case(parsed.uid or 'content_type')}Entry"
    # Entries carry system keys (uid, locale, ...) that are not part of the schema.
    model = _build_object_model(name, parsed.fields, compile_mode, extra="ignore")
    logger.debug(
        f"Compiled content type '{parsed.uid}' with {len(parsed.fields)} fields "
        f"in {compile_mode} mode"
    )
    return model
