"""
Utils Package

Serialization functions for question sets and collections.
"""

from .serialization import (
    serialize_question_set,
    deserialize_question_set,
    encode_collection,
    decode_collection,
)

__all__ = [
    "serialize_question_set",
    "deserialize_question_set",
    "encode_collection",
    "decode_collection",
]
