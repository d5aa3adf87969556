"""
Core Models Package

Data model for question sets. QuestionSet is a mutable dataclass: sets are
edited in place while they live in the active collection.
"""

from .question_set import QuestionSet, UNTITLED_TITLE, image_filename, new_set_id

__all__ = [
    "QuestionSet",
    "UNTITLED_TITLE",
    "image_filename",
    "new_set_id",
]
