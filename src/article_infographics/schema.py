"""Helpers to load and validate the bundled JSON schemas."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"
MODEL_RESPONSE_SCHEMA = "llm_response.json"
PROCESSED_CONTENT_SCHEMA = "processed_content.json"


@lru_cache(maxsize=None)
def load_schema(name: str = PROCESSED_CONTENT_SCHEMA) -> Dict[str, Any]:
    """Load and cache a schema from the package's schemas directory."""
    return json.loads((SCHEMAS_DIR / name).read_text(encoding="utf-8"))


def format_errors(errors: Iterable[ValidationError]) -> str:
    """Turn jsonschema errors into a concise human-readable string."""
    parts = []
    for err in errors:
        location = ".".join(str(piece) for piece in err.absolute_path) or "<root>"
        parts.append(f"{location}: {err.message}")
    return "; ".join(parts)


def _errors_for(payload: Any, schema_name: str) -> list[ValidationError]:
    validator = Draft202012Validator(load_schema(schema_name))
    return list(validator.iter_errors(payload))


def has_valid_slides(payload: Any) -> bool:
    """True when a parsed model response is an object with a non-empty slides array."""
    return not _errors_for(payload, MODEL_RESPONSE_SCHEMA)


def validate_processed_content(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a ProcessedContent payload against the downstream contract.

    Raises ValueError with a readable message if validation fails.
    """
    errors = _errors_for(payload, PROCESSED_CONTENT_SCHEMA)
    if errors:
        raise ValueError(f"Schema validation failed: {format_errors(errors)}")
    return payload
