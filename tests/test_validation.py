"""Tests for validation outcomes and missing-field extraction."""

from cms_validator.compiler import compile_content_type
from cms_validator.validation import (
    ValidationFailure,
    ValidationIssue,
    extract_missing_fields,
    validate,
    validate_draft,
    validate_entry,
)

BLOG_POST = {
    "uid": "blog_post",
    "schema": [
        {"uid": "title", "data_type": "text", "mandatory": True},
        {"uid": "body", "data_type": "text", "mandatory": True},
    ],
}

LANDING_PAGE = {
    "uid": "landing_page",
    "schema": [
        {"uid": "title", "data_type": "text", "mandatory": True},
        {
            "uid": "seo",
            "data_type": "group",
            "mandatory": True,
            "schema": [
                {"uid": "meta_title", "data_type": "text", "mandatory": True},
                {"uid": "meta_description", "data_type": "text"},
            ],
        },
        {
            "uid": "content",
            "data_type": "blocks",
            "mandatory": True,
            "blocks": [
                {
                    "uid": "text_block",
                    "schema": [{"uid": "text", "data_type": "text", "mandatory": True}],
                },
                {
                    "uid": "image_block",
                    "schema": [
                        {"uid": "image", "data_type": "file", "mandatory": True}
                    ],
                },
            ],
        },
        {"uid": "published", "data_type": "boolean"},
    ],
}


def test_validate_success_returns_candidate_unchanged() -> None:
    """Successful outcomes carry the candidate as given."""
    entry = {"title": "Test", "body": "Content", "uid": "blt123"}
    outcome = validate(compile_content_type(BLOG_POST), entry)
    assert outcome.success
    assert outcome.data is entry
    assert outcome.error is None


def test_validate_collects_all_issues() -> None:
    """Validation does not stop at the first violation."""
    outcome = validate(
        compile_content_type(LANDING_PAGE),
        {"title": 1, "seo": {"meta_description": 2}, "published": "yes"},
    )
    assert not outcome.success
    assert [issue.path for issue in outcome.error.issues] == [
        ["title"],
        ["seo", "meta_title"],
        ["seo", "meta_description"],
        ["content"],
        ["published"],
    ]
    assert [issue.kind for issue in outcome.error.issues] == [
        "string_type",
        "missing",
        "string_type",
        "missing",
        "bool_type",
    ]


def test_validate_never_raises_on_wrong_document_type() -> None:
    """Non-object documents produce a failure outcome."""
    outcome = validate(compile_content_type(BLOG_POST), ["not", "an", "entry"])
    assert not outcome.success
    assert outcome.error.issues


def test_extract_missing_fields_top_level() -> None:
    """Reports each absent required field once, in declaration order."""
    outcome = validate(compile_content_type(BLOG_POST), {})
    assert extract_missing_fields(outcome) == ["title", "body"]


def test_extract_missing_fields_nested_paths() -> None:
    """Nested paths are dot-joined with plain list indices."""
    outcome = validate(
        compile_content_type(LANDING_PAGE),
        {
            "seo": {},
            "content": [
                {"text_block": {"text": "ok"}},
                {"image_block": {}},
                {"text_block": {}},
            ],
        },
    )
    assert extract_missing_fields(outcome) == [
        "title",
        "seo.meta_title",
        "content.1.image_block.image",
        "content.2.text_block.text",
    ]


def test_extract_missing_fields_ignores_other_issues() -> None:
    """Type errors, including null for required fields, are not reported as missing."""
    outcome = validate(compile_content_type(BLOG_POST), {"title": None, "body": 3})
    assert not outcome.success
    assert extract_missing_fields(outcome) == []


def test_extract_missing_fields_on_success() -> None:
    """Successful outcomes have nothing missing."""
    outcome = validate(compile_content_type(BLOG_POST), {"title": "a", "body": "b"})
    assert extract_missing_fields(outcome) == []


def test_extract_missing_fields_from_failure_payload() -> None:
    """The failure payload can be projected directly."""
    failure = ValidationFailure(
        issues=[
            ValidationIssue(path=["content", 0, "hero", "title"], kind="missing", message="Field required"),
            ValidationIssue(path=["title"], kind="string_type", message="Input should be a valid string"),
        ]
    )
    assert extract_missing_fields(failure) == ["content.0.hero.title"]


def test_outcome_serializes_to_wire_shape() -> None:
    """Outcomes dump to {success, error: {issues: [{path, kind, message}]}}."""
    outcome = validate(compile_content_type(BLOG_POST), {"title": "a"})
    dumped = outcome.model_dump(exclude_none=True)
    assert dumped["success"] is False
    assert dumped["error"]["issues"][0]["path"] == ["body"]
    assert dumped["error"]["issues"][0]["kind"] == "missing"
    assert dumped["error"]["issues"][0]["message"]


def test_validate_entry_and_draft() -> None:
    """Convenience wrappers compile and validate in one call."""
    assert validate_entry(BLOG_POST, {"title": "Test", "body": "Content"}).success
    assert not validate_entry(BLOG_POST, {"title": "Only title"}).success
    assert validate_draft(BLOG_POST, {"title": "Only title"}).success


def test_validate_entry_upsert_mode() -> None:
    """Upsert entries reference assets by uid."""
    content_type = {
        "uid": "blog_post",
        "schema": [
            {"uid": "title", "data_type": "text", "mandatory": True},
            {"uid": "featured_image", "data_type": "file", "mandatory": True},
            {"uid": "gallery", "data_type": "file", "multiple": True},
        ],
    }
    entry = {
        "title": "My Post",
        "featured_image": "asset123",
        "gallery": ["asset456", "asset789"],
    }
    assert validate_entry(content_type, entry, mode="upsert").success
    assert not validate_entry(content_type, entry).success
