"""Pydantic schemas for CMS content-type definitions and CLI arguments."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cms_validator.models import CompileMode, RichTextKind


class EnumChoice(BaseModel):
    """One selectable value of a select field."""

    value: str | int | float
    key: str | None = None


class FieldEnum(BaseModel):
    """Select-field configuration."""

    choices: list[EnumChoice] = Field(default_factory=list)
    advanced: bool = False


class FieldMetadata(BaseModel):
    """Editor metadata attached to a field definition."""

    description: str | None = None
    instruction: str | None = None
    markdown: bool = False
    allow_rich_text: bool = False
    allow_json_rte: bool = False
    multiline: bool = False
    rich_text_type: str | None = None
    default_value: Any = None


class TaxonomyConfig(BaseModel):
    """Taxonomy binding of a taxonomy field."""

    taxonomy_uid: str
    max_terms: int | None = None
    mandatory: bool = False
    non_localizable: bool = False


class Block(BaseModel):
    """One variant of a modular blocks field."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str
    title: str | None = None
    reference_to: str | None = Field(
        None,
        description="Global field uid when the block embeds a global field.",
    )
    fields: list["FieldDescriptor"] | None = Field(None, alias="schema")

    @property
    def is_reference(self) -> bool:
        """Whether the block is a bare global field reference."""
        return bool(self.reference_to)


class FieldDescriptor(BaseModel):
    """A single field of a content type schema."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str
    data_type: str
    display_name: str | None = None
    mandatory: bool = False
    multiple: bool = False
    unique: bool = False
    enum: FieldEnum | None = None
    fields: list["FieldDescriptor"] | None = Field(
        None,
        alias="schema",
        description="Nested fields of a group field.",
    )
    blocks: list[Block] | None = None
    field_metadata: FieldMetadata | None = None
    format: str | None = Field(None, description="Regex constraint for text fields.")
    reference_to: str | list[str] | None = None
    start_date: str | None = Field(None, alias="startDate")
    end_date: str | None = Field(None, alias="endDate")
    max_instance: int | None = None
    extensions: list[str] | None = None
    extension_uid: str | None = None
    taxonomies: list[TaxonomyConfig] | None = None

    @property
    def description(self) -> str:
        """Human-readable label: description > display_name > uid."""
        if self.field_metadata and self.field_metadata.description:
            return self.field_metadata.description
        return self.display_name or self.uid

    @property
    def enum_values(self) -> list[str | int | float]:
        """Allowed literal values of a select field, in declared order."""
        if not self.enum:
            return []
        return [choice.value for choice in self.enum.choices]

    @property
    def rich_text_kind(self) -> RichTextKind:
        """Rich text representation configured for the field."""
        metadata = self.field_metadata
        if metadata and metadata.allow_json_rte:
            return RichTextKind.DOCUMENT_TREE
        if metadata and metadata.allow_rich_text:
            return RichTextKind.MARKUP
        return RichTextKind.PLAIN


class ContentType(BaseModel):
    """A content type: a named, ordered list of top-level fields."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str | None = None
    title: str | None = None
    fields: list[FieldDescriptor] | None = Field(None, alias="schema")


class CliArgs(BaseModel):
    """CLI arguments."""

    content_type: Path
    entry: Path | None = None
    mode: CompileMode = CompileMode.READ
    draft: bool = False


Block.model_rebuild()
