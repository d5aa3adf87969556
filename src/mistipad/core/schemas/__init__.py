"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_question_set,
    validate_collection,
    ValidationError,
    QUESTION_SET_SCHEMA,
    COLLECTION_SCHEMA,
)

__all__ = [
    "validate_question_set",
    "validate_collection",
    "ValidationError",
    "QUESTION_SET_SCHEMA",
    "COLLECTION_SCHEMA",
]
