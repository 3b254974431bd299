"""Schema helpers for persisted listing preferences."""

from __future__ import annotations

import json
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..errors import MalformedPersistedState

PREFERENCES_SCHEMA_ID = "adminlist/preferences@1"

PREFERENCES_SCHEMA: dict[str, Any] = {
    "$id": "adminlist/preferences.schema.json",
    "type": "object",
    "required": ["schema", "values"],
    "properties": {
        "schema": {"const": PREFERENCES_SCHEMA_ID},
        "values": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
    },
    "additionalProperties": True,
}

PAGE_OFFSET_SCHEMA: dict[str, Any] = {
    "type": "string",
    "pattern": r"^\s*[0-9]+\s*$",
}

COLUMN_VISIBILITY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": {"type": "boolean"},
}

_preferences_validator = Draft202012Validator(PREFERENCES_SCHEMA)
_page_offset_validator = Draft202012Validator(PAGE_OFFSET_SCHEMA)
_column_visibility_validator = Draft202012Validator(COLUMN_VISIBILITY_SCHEMA)


def empty_preferences() -> dict[str, Any]:
    return {"schema": PREFERENCES_SCHEMA_ID, "values": {}}


def validate_preferences(data: Any) -> dict[str, Any]:
    """Validate the decoded preference file and return it."""

    try:
        _preferences_validator.validate(data)
    except ValidationError as exc:
        raise MalformedPersistedState(f"preference file: {exc.message}") from exc
    return data


def decode_page_offset(raw: str) -> int:
    try:
        _page_offset_validator.validate(raw)
    except ValidationError as exc:
        raise MalformedPersistedState(f"page offset {raw!r}: {exc.message}") from exc
    page = int(raw)
    if page < 1:
        raise MalformedPersistedState(f"page offset {raw!r} is below 1")
    return page


def encode_page_offset(page: int) -> str:
    return str(int(page))


def decode_column_visibility(raw: str) -> dict[str, bool]:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedPersistedState(f"column visibility {raw!r} is not JSON") from exc
    try:
        _column_visibility_validator.validate(payload)
    except ValidationError as exc:
        raise MalformedPersistedState(f"column visibility: {exc.message}") from exc
    return dict(payload)


def encode_column_visibility(visibility: dict[str, bool]) -> str:
    return json.dumps({str(k): bool(v) for k, v in visibility.items()}, sort_keys=True)


__all__ = [
    "COLUMN_VISIBILITY_SCHEMA",
    "PAGE_OFFSET_SCHEMA",
    "PREFERENCES_SCHEMA",
    "decode_column_visibility",
    "decode_page_offset",
    "empty_preferences",
    "encode_column_visibility",
    "encode_page_offset",
    "validate_preferences",
]
