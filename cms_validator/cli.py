import json
import logging
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import BaseModel

from cms_validator.compiler import ContentModelError, compile_content_type
from cms_validator.core import inline_json_schema, load_json
from cms_validator.draft import to_draft
from cms_validator.loggy import get_log_level, setup_logging
from cms_validator.models import CompileMode
from cms_validator.schemas import CliArgs
from cms_validator.validation import extract_missing_fields, validate

logger = logging.getLogger(__name__)

app = typer.Typer(help="Validate CMS entries against content-type definitions.")


def resolve_mode(mode: CompileMode | None) -> CompileMode:
    """Use the explicit mode, else CMS_VALIDATOR_MODE, else read mode."""
    if mode is not None:
        return mode
    env_mode = os.getenv("CMS_VALIDATOR_MODE", CompileMode.READ)
    try:
        return CompileMode(env_mode.lower())
    except ValueError:
        logger.warning(f"Invalid CMS_VALIDATOR_MODE '{env_mode}', defaulting to read")
        return CompileMode.READ


def _load(path: Path) -> object:
    try:
        return load_json(path)
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Could not read {path}: {e}", err=True)
        raise typer.Exit(code=2)


def _compile(cli_args: CliArgs) -> type[BaseModel]:
    try:
        model = compile_content_type(_load(cli_args.content_type), cli_args.mode)
    except ContentModelError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    return to_draft(model) if cli_args.draft else model


@app.callback()
def main() -> None:
    """Configure environment and logging for every command."""
    load_dotenv()
    setup_logging(get_log_level())


@app.command("validate")
def validate_command(
    content_type: Path = typer.Argument(..., help="Content type definition (JSON)"),
    entry: Path = typer.Argument(..., help="Entry to validate (JSON, may be fenced)"),
    mode: CompileMode | None = typer.Option(
        None, "--mode", "-m", help="Compile mode (defaults to CMS_VALIDATOR_MODE)"
    ),
    draft: bool = typer.Option(
        False, "--draft", help="Treat top-level fields as optional"
    ),
):
    """Validate an entry and report missing required fields."""
    cli_args = CliArgs(
        content_type=content_type,
        entry=entry,
        mode=resolve_mode(mode),
        draft=draft,
    )
    logger.info(
        f"Validating {cli_args.entry} against {cli_args.content_type} "
        f"({cli_args.mode} mode{', draft' if cli_args.draft else ''})"
    )

    model = _compile(cli_args)
    outcome = validate(model, _load(cli_args.entry))
    typer.echo(outcome.model_dump_json(indent=2, exclude_none=True))

    if not outcome.success:
        missing = extract_missing_fields(outcome)
        if missing:
            typer.echo(f"Missing required fields: {', '.join(missing)}", err=True)
        logger.info(f"Entry is invalid ({len(outcome.error.issues)} issues)")
        raise typer.Exit(code=1)

    logger.info("Entry is valid")


@app.command("schema")
def schema_command(
    content_type: Path = typer.Argument(..., help="Content type definition (JSON)"),
    mode: CompileMode | None = typer.Option(
        None, "--mode", "-m", help="Compile mode (defaults to CMS_VALIDATOR_MODE)"
    ),
    draft: bool = typer.Option(
        False, "--draft", help="Treat top-level fields as optional"
    ),
):
    """Print the JSON schema of the compiled entry validator."""
    cli_args = CliArgs(content_type=content_type, mode=resolve_mode(mode), draft=draft)
    model = _compile(cli_args)
    typer.echo(json.dumps(inline_json_schema(model), indent=2))


if __name__ == "__main__":
    app()
