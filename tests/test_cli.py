"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cms_validator.cli import app, resolve_mode
from cms_validator.models import CompileMode

runner = CliRunner()

BLOG_POST = {
    "uid": "blog_post",
    "schema": [
        {"uid": "title", "data_type": "text", "mandatory": True},
        {"uid": "body", "data_type": "text", "mandatory": True},
        {"uid": "cover", "data_type": "file"},
    ],
}


def _write(tmp_path: Path, name: str, payload: object) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(payload))
    return path


def test_validate_command_accepts_valid_entry(tmp_path: Path) -> None:
    """Valid entries exit with status 0."""
    content_type = _write(tmp_path, "ct.json", BLOG_POST)
    entry = _write(tmp_path, "entry.json", {"title": "Hi", "body": "There"})

    result = runner.invoke(app, ["validate", str(content_type), str(entry)])

    assert result.exit_code == 0
    assert '"success": true' in result.output


def test_validate_command_reports_missing_fields(tmp_path: Path) -> None:
    """Invalid entries exit with status 1 and list missing fields."""
    content_type = _write(tmp_path, "ct.json", BLOG_POST)
    entry = _write(tmp_path, "entry.json", {"title": "Hi"})

    result = runner.invoke(app, ["validate", str(content_type), str(entry)])

    assert result.exit_code == 1
    assert "Missing required fields: body" in result.output


def test_validate_command_draft(tmp_path: Path) -> None:
    """--draft relaxes top-level requiredness."""
    content_type = _write(tmp_path, "ct.json", BLOG_POST)
    entry = _write(tmp_path, "entry.json", {"title": "Hi"})

    result = runner.invoke(
        app, ["validate", str(content_type), str(entry), "--draft"]
    )

    assert result.exit_code == 0


def test_validate_command_upsert_mode(tmp_path: Path) -> None:
    """--mode upsert expects asset uids."""
    content_type = _write(tmp_path, "ct.json", BLOG_POST)
    entry = _write(
        tmp_path, "entry.json", {"title": "Hi", "body": "There", "cover": "blt1"}
    )

    read = runner.invoke(app, ["validate", str(content_type), str(entry)])
    upsert = runner.invoke(
        app, ["validate", str(content_type), str(entry), "--mode", "upsert"]
    )

    assert read.exit_code == 1
    assert upsert.exit_code == 0


def test_validate_command_rejects_content_type_without_schema(tmp_path: Path) -> None:
    """Configuration errors exit with status 2."""
    content_type = _write(tmp_path, "ct.json", {"uid": "broken"})
    entry = _write(tmp_path, "entry.json", {})

    result = runner.invoke(app, ["validate", str(content_type), str(entry)])

    assert result.exit_code == 2
    assert "Invalid content type schema" in result.output


def test_validate_command_unreadable_entry(tmp_path: Path) -> None:
    """Unparsable input files exit with status 2."""
    content_type = _write(tmp_path, "ct.json", BLOG_POST)
    entry = tmp_path / "entry.json"
    entry.write_text("not json")

    result = runner.invoke(app, ["validate", str(content_type), str(entry)])

    assert result.exit_code == 2


def test_schema_command(tmp_path: Path) -> None:
    """Prints the inlined JSON schema of the entry validator."""
    content_type = _write(tmp_path, "ct.json", BLOG_POST)

    result = runner.invoke(app, ["schema", str(content_type), "--draft"])

    assert result.exit_code == 0
    schema = json.loads(result.stdout)
    assert set(schema["properties"]) == {"title", "body", "cover"}
    assert "required" not in schema


def test_resolve_mode_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """CMS_VALIDATOR_MODE supplies the default compile mode."""
    monkeypatch.setenv("CMS_VALIDATOR_MODE", "upsert")
    assert resolve_mode(None) is CompileMode.UPSERT
    assert resolve_mode(CompileMode.READ) is CompileMode.READ

    monkeypatch.setenv("CMS_VALIDATOR_MODE", "preview")
    assert resolve_mode(None) is CompileMode.READ

    monkeypatch.delenv("CMS_VALIDATOR_MODE")
    assert resolve_mode(None) is CompileMode.READ
