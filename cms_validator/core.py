"""Helpers for handing compiled validators to, and reading entries from, LLMs."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter

from cms_validator.compiler import CompiledField

logger = logging.getLogger(__name__)


def inline_json_schema(validator: type[BaseModel] | CompiledField) -> dict[str, Any]:
    """
    Builds an LLM-friendly JSON schema by inlining $ref/$defs.

    Self-referential definitions (rich text nodes) cannot be inlined; they are kept
    under $defs and referenced from the inlined schema.

    Args:
        validator: Compiled entry model or compiled field.

    Returns:
        dict[str, Any]: JSON schema with field descriptions and inline definitions.
    """
    if isinstance(validator, CompiledField):
        schema = TypeAdapter(validator.validator).json_schema()
    else:
        schema = validator.model_json_schema()
    defs = schema.pop("$defs", {})
    recursive: set[str] = set()

    def _resolve(node: Any, active: tuple[str, ...]) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if ref and ref.startswith("#/$defs/"):
                key = ref.split("/")[-1]
                if key in active:
                    recursive.add(key)
                    return node
                resolved = defs.get(key, {})
                merged = {**resolved, **{k: v for k, v in node.items() if k != "$ref"}}
                return _resolve(merged, active + (key,))
            return {k: _resolve(v, active) for k, v in node.items()}
        if isinstance(node, list):
            return [_resolve(item, active) for item in node]
        return node

    inlined = _resolve(schema, ())

    kept: dict[str, Any] = {}
    while recursive - set(kept):
        for key in sorted(recursive - set(kept)):
            kept[key] = _resolve(defs.get(key, {}), (key,))
    if kept:
        inlined["$defs"] = kept
    return inlined


def extract_json_payload(raw_text: str) -> str:
    """
    Extract a JSON payload from text that may include prose or fenced code.

    Args:
        raw_text (str): Raw text possibly containing a JSON block.

    Returns:
        str: Extracted JSON payload as a string.
    """
    text = raw_text.strip()
    if not text:
        return text

    fence_start = text.find("```")
    if fence_start != -1:
        fence_end = text.find("```", fence_start + 3)
        if fence_end != -1:
            fenced = text[fence_start + 3 : fence_end]
            return fenced.strip().removeprefix("json").strip()

    return text


def load_json(path: Path) -> Any:
    """
    Read a JSON document from disk, tolerating markdown fences around it.

    Args:
        path (Path): File holding a content type or an entry.

    Returns:
        Any: Decoded JSON value.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the payload is not valid JSON.
    """
    logger.debug(f"Loading JSON from {path}")
    return json.loads(extract_json_payload(path.read_text()))
