"""
Schema Validation Utilities

Validates decoded question-set records before they become QuestionSet
instances.

Two levels:
- Basic checks (always): required fields present, lists of strings
- Strict mode: full JSON Schema validation via jsonschema
"""

from __future__ import annotations

from typing import Any

import jsonschema

from mistipad.errors import MistipadError


QUESTION_SET_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "QuestionSet",
    "type": "object",
    "required": ["id", "title", "questions", "answers"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "title": {"type": "string"},
        "questions": {"type": "array", "items": {"type": "string"}},
        "answers": {"type": "array", "items": {"type": "string"}},
        "imagePaths": {"type": "array", "items": {"type": "string"}},
    },
}

COLLECTION_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "QuestionSetCollection",
    "type": "array",
    "items": QUESTION_SET_SCHEMA,
}


class ValidationError(MistipadError):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_question_set(data: Any, *, strict: bool = False, path: str = "") -> None:
    """
    Validate one question-set record.

    Args:
        data: Decoded JSON value
        strict: If True, also run the full JSON Schema
        path: Location prefix used in error messages

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Question set must be an object, got {type(data).__name__}",
            path=path,
        )

    required = ["id", "questions", "answers"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing]
        )

    set_id = data.get("id")
    if not isinstance(set_id, str) or not set_id:
        raise ValidationError(
            f"Invalid id: {set_id!r} (must be a non-empty string)",
            path=_join(path, "id")
        )

    if "title" in data and not isinstance(data["title"], str):
        raise ValidationError(
            f"Invalid title: {data['title']!r} (must be a string)",
            path=_join(path, "title")
        )

    for name in ("questions", "answers", "imagePaths"):
        if name not in data:
            continue
        _validate_string_list(data[name], _join(path, name))

    if strict:
        try:
            jsonschema.validate(data, QUESTION_SET_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=_join(path, ".".join(str(p) for p in e.absolute_path)),
                errors=[e.message]
            )


def validate_collection(data: Any, *, strict: bool = False) -> None:
    """
    Validate a decoded collection (a JSON array of question-set records).

    Raises:
        ValidationError: If data is not a list or any record is invalid
    """
    if not isinstance(data, list):
        raise ValidationError(
            f"Collection must be an array, got {type(data).__name__}"
        )
    for i, record in enumerate(data):
        validate_question_set(record, strict=strict, path=f"[{i}]")


def _validate_string_list(value: Any, path: str) -> None:
    if not isinstance(value, list):
        raise ValidationError(f"{path} must be a list", path=path)
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise ValidationError(
                f"{path}[{i}] must be a string, got {type(item).__name__}",
                path=f"{path}[{i}]"
            )


def _join(prefix: str, name: str) -> str:
    if not prefix:
        return name
    if not name:
        return prefix
    return f"{prefix}.{name}"
