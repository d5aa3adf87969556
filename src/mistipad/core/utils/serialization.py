"""
Serialization Utilities

Provides to/from JSON utilities for question-set collections.

A collection is persisted wholesale as one UTF-8 JSON array; there is no
partial update and no schema version field.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from ..models.question_set import QuestionSet
from ..schemas.validator import validate_collection, validate_question_set, ValidationError


# ─────────────────────────────────────────────────────────────────────────────
# Single Record
# ─────────────────────────────────────────────────────────────────────────────

def serialize_question_set(qset: QuestionSet) -> dict[str, Any]:
    """
    Serialize a QuestionSet to a dictionary.

    Args:
        qset: QuestionSet instance to serialize

    Returns:
        Dictionary suitable for JSON serialization
    """
    return qset.to_dict()


def deserialize_question_set(data: dict[str, Any], *, validate: bool = True) -> QuestionSet:
    """
    Deserialize a QuestionSet from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate the record first

    Returns:
        QuestionSet instance, normalized to equal-length lists

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_question_set(data)
    return QuestionSet.from_dict(data)


# ─────────────────────────────────────────────────────────────────────────────
# Collections
# ─────────────────────────────────────────────────────────────────────────────

def encode_collection(sets: Iterable[QuestionSet]) -> bytes:
    """
    Encode a collection to UTF-8 JSON bytes.

    Args:
        sets: Question sets in collection order

    Returns:
        JSON array bytes
    """
    payload = [serialize_question_set(qset) for qset in sets]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_collection(data: bytes, *, validate: bool = True) -> list[QuestionSet]:
    """
    Decode a collection from UTF-8 JSON bytes.

    Args:
        data: Bytes previously produced by encode_collection()
        validate: Whether to validate every record

    Returns:
        List of QuestionSet instances in stored order

    Raises:
        ValidationError: If the bytes are not valid JSON or a record is invalid
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Collection is not valid JSON: {e}", errors=[str(e)])

    if validate:
        validate_collection(payload)
    elif not isinstance(payload, list):
        raise ValidationError(f"Collection must be an array, got {type(payload).__name__}")

    try:
        return [QuestionSet.from_dict(record) for record in payload]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValidationError(f"Malformed question set: {e}", errors=[str(e)])
