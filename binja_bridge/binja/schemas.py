"""JSON schemas for plugin responses the tools read field by field.

Schemas describe field types only; a field that is missing is left to the
tool's own fallback, a field of the wrong type is rejected at the client.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Mapping

from jsonschema import Draft202012Validator

_STRING_OR_NUMBER: Dict[str, Any] = {"type": ["string", "integer"]}

RESPONSE_SCHEMAS: Mapping[str, Dict[str, Any]] = {
    "status": {
        "type": "object",
        "properties": {"filename": {"type": ["string", "null"]}},
    },
    "entry_points": {
        "type": "object",
        "properties": {
            "entry_points": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["address"],
                    "properties": {
                        "address": _STRING_OR_NUMBER,
                        "name": {"type": ["string", "null"]},
                    },
                },
            }
        },
    },
    "sections": {
        "type": "object",
        "properties": {
            "sections": {"type": "array", "items": {"type": "object"}},
        },
    },
    "binaries": {
        "type": "object",
        "properties": {
            "binaries": {"type": "array", "items": {"type": "object"}},
        },
    },
    "select_binary": {
        "type": "object",
        "properties": {"selected": {"type": ["object", "null"]}},
    },
    "batch_rename": {
        "type": "object",
        "properties": {
            "total": {"type": "integer"},
            "renamed": {"type": "integer"},
        },
    },
    "patch": {
        "type": "object",
        "properties": {
            "status": {"type": "string"},
            "original_bytes": {"type": ["string", "null"]},
            "patched_bytes": {"type": ["string", "null"]},
            "bytes_written": {"type": ["integer", "null"]},
            "bytes_requested": {"type": ["integer", "null"]},
            "saved_to_file": {"type": ["boolean", "null"]},
            "saved_path": {"type": ["string", "null"]},
            "warning": {"type": ["string", "null"]},
        },
    },
    "platforms": {
        "type": "object",
        "properties": {
            "platforms": {"type": ["array", "null"], "items": {"type": "string"}},
        },
    },
    "stack_frame_vars": {
        "type": "object",
        "properties": {"stack_frame_vars": {"type": "array"}},
    },
}


@lru_cache(maxsize=None)
def validator_for(schema_key: str) -> Draft202012Validator:
    try:
        schema = RESPONSE_SCHEMAS[schema_key]
    except KeyError:
        raise ValueError(f"No response schema registered for {schema_key!r}") from None
    return Draft202012Validator(schema)


def validate_response(schema_key: str, payload: Any) -> List[str]:
    """Return validation error messages for *payload* (empty when valid)."""

    validator = validator_for(schema_key)
    errors = sorted(validator.iter_errors(payload), key=lambda err: [str(part) for part in err.path])
    return [err.message for err in errors]


__all__ = ["RESPONSE_SCHEMAS", "validate_response", "validator_for"]
