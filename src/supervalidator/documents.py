"""
documents.py: YAML loading and JSON Schema checks for rule and template files.

Usage:
    from supervalidator.documents import load_document, validate_document

    template = load_document(Path("messages.yaml"))
    issues = validate_document(template, "template.schema.json", source="messages.yaml")
    for issue in issues:
        print(issue)

JSON is a subset of YAML, so ``.json`` files load through the same path.

PyYAML quirk: the bare keys ``on:`` and ``off:`` are parsed as booleans. Keys
are mapped back to strings after loading so such field names stay usable.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from supervalidator.config import SCHEMAS_DIR
from supervalidator.types import SchemaIssue

logger = logging.getLogger(__name__)

TEMPLATE_SCHEMA = "template.schema.json"
RULES_SCHEMA = "rules.schema.json"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _bundled_schema(name: str) -> dict[str, Any]:
    """Schema shipped in the package for template or rule files."""
    return json.loads((SCHEMAS_DIR / name).read_text())


def _stringify_keys(obj: Any) -> Any:
    """Recursively turn non-string mapping keys (``True``, ``1``) into strings."""
    if isinstance(obj, dict):
        result: dict[str, Any] = {}
        for k, v in obj.items():
            if isinstance(k, bool):
                k = "on" if k else "off"
            result[str(k)] = _stringify_keys(v)
        return result
    if isinstance(obj, list):
        return [_stringify_keys(item) for item in obj]
    return obj


def _issue_path(error: ValidationError) -> str:
    """Location of a schema error in the document, e.g. ``max.string`` or ``address.route``."""
    path = ""
    for step in error.absolute_path:
        if isinstance(step, int):
            path += f"[{step}]"
        else:
            path += f".{step}" if path else str(step)
    return path


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_document(path: Path) -> Any:
    """Parse a YAML (or JSON) file.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file cannot be parsed
    """
    with path.open() as fh:
        raw = yaml.safe_load(fh)
    logger.debug("Loaded document %s", path)
    return _stringify_keys(raw)


def validate_document(
    doc: Any,
    schema_name: str,
    *,
    source: str = "",
) -> list[SchemaIssue]:
    """
    Validate a parsed document against the named schema.

    Args:
        doc:         Parsed YAML/JSON content.
        schema_name: Filename of the schema (e.g. ``"template.schema.json"``).
        source:      Label used in issue messages, usually the file path.

    Returns:
        A list of :class:`SchemaIssue` objects (empty on success).
    """
    if doc is None:
        return [SchemaIssue(message="Document is empty", source=source)]

    validator = Draft202012Validator(_bundled_schema(schema_name))

    return [
        SchemaIssue(message=error.message, path=_issue_path(error), source=source)
        for error in sorted(validator.iter_errors(doc), key=_issue_path)
    ]
