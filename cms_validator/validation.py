"""Run compiled validators and explain failures."""

import logging
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import ErrorDetails

from cms_validator.compiler import CompiledField, compile_content_type
from cms_validator.draft import to_draft
from cms_validator.models import CompileMode
from cms_validator.schemas import ContentType

logger = logging.getLogger(__name__)

MISSING_KIND = "missing"


class ValidationIssue(BaseModel):
    """A single violated constraint."""

    path: list[str | int] = Field(
        default_factory=list,
        description="Location in the document: field uids and list indices.",
    )
    kind: str = Field(..., description="Issue code, e.g. 'missing' or 'string_type'.")
    message: str

    @classmethod
    def from_error(cls, error: ErrorDetails) -> "ValidationIssue":
        """Build an issue from a pydantic error entry."""
        return cls(path=list(error["loc"]), kind=error["type"], message=error["msg"])

    @property
    def dotted_path(self) -> str:
        """Path rendered as 'content.1.image'."""
        return ".".join(str(part) for part in self.path)


class ValidationFailure(BaseModel):
    """All issues collected while validating a document."""

    issues: list[ValidationIssue] = Field(default_factory=list)


class ValidationOutcome(BaseModel):
    """Result of a validation run: accepted data or the collected issues."""

    success: bool
    data: Any = None
    error: ValidationFailure | None = None


def _adapter(validator: type[BaseModel] | CompiledField | Any) -> TypeAdapter:
    if isinstance(validator, CompiledField):
        return TypeAdapter(validator.validator)
    return TypeAdapter(validator)


def validate(
    validator: type[BaseModel] | CompiledField | Any, candidate: Any
) -> ValidationOutcome:
    """
    Validate a candidate document without raising on constraint violations.

    Every violation in the document is collected. On success the candidate is
    returned as given.

    Args:
        validator: Compiled entry model, compiled field, or any pydantic type.
        candidate: Document to check.

    Returns:
        ValidationOutcome: Success with the data, or failure with all issues.
    """
    try:
        _adapter(validator).validate_python(candidate)
    except PydanticValidationError as e:
        issues = [ValidationIssue.from_error(error) for error in e.errors()]
        logger.debug(f"Validation failed with {len(issues)} issues")
        return ValidationOutcome(success=False, error=ValidationFailure(issues=issues))
    return ValidationOutcome(success=True, data=candidate)


def extract_missing_fields(outcome: ValidationOutcome | ValidationFailure) -> list[str]:
    """
    List the dotted paths of required fields absent from a failed document.

    Args:
        outcome: Failed outcome (or its failure payload).

    Returns:
        list[str]: Paths such as 'seo.meta_title' or 'content.0.text_block.text',
        in the order the issues were reported. Empty for successful outcomes.
    """
    failure = outcome.error if isinstance(outcome, ValidationOutcome) else outcome
    if failure is None:
        return []
    return [
        issue.dotted_path for issue in failure.issues if issue.kind == MISSING_KIND
    ]


def validate_entry(
    content_type: ContentType | dict[str, Any],
    entry: Any,
    mode: CompileMode | str = CompileMode.READ,
) -> ValidationOutcome:
    """Compile a content type and validate a complete entry against it."""
    return validate(compile_content_type(content_type, mode), entry)


def validate_draft(
    content_type: ContentType | dict[str, Any],
    entry: Any,
    mode: CompileMode | str = CompileMode.READ,
) -> ValidationOutcome:
    """Compile a content type and validate a partial (draft) entry against it."""
    return validate(to_draft(compile_content_type(content_type, mode)), entry)
