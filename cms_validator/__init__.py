from cms_validator.compiler import (
    CompiledField,
    ContentModelError,
    compile_content_type,
    compile_field,
)
from cms_validator.draft import to_draft
from cms_validator.models import CompileMode, DataType
from cms_validator.schemas import ContentType, FieldDescriptor
from cms_validator.validation import (
    ValidationOutcome,
    extract_missing_fields,
    validate,
    validate_draft,
    validate_entry,
)

__all__ = [
    "CompiledField",
    "ContentModelError",
    "compile_content_type",
    "compile_field",
    "to_draft",
    "CompileMode",
    "DataType",
    "ContentType",
    "FieldDescriptor",
    "ValidationOutcome",
    "extract_missing_fields",
    "validate",
    "validate_draft",
    "validate_entry",
]
