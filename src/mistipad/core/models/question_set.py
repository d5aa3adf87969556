"""
Module: question_set

Purpose:
    Provides the QuestionSet dataclass - a titled, ordered list of
    question/answer pairs with an optional image per question. This is the
    record persisted in both the active and the trashed collections.

Key Functions:
    - QuestionSet.new(): Fresh set with one blank question/answer pair
    - QuestionSet.add_question(): Append a pair and an empty image slot
    - QuestionSet.remove_blank_questions(): Drop empty pairs without images
    - QuestionSet.normalize(): Enforce the parallel-length invariant
    - QuestionSet.to_dict() / QuestionSet.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - mistipad.core.utils.serialization
    - mistipad.storage.persistence
    - mistipad.manager
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

UNTITLED_TITLE = "Untitled Question Set"


def new_set_id() -> str:
    """Return a fresh identifier in upper-case UUID form."""
    return str(uuid.uuid4()).upper()


def image_filename(set_id: str, question_index: int) -> str:
    """
    Build the image filename for one question of a set.

    Args:
        set_id: Identifier of the owning set
        question_index: 0-based question position

    Returns:
        Filename like "<set_id>-q0.png"

    Raises:
        ValueError: If question_index is negative
    """
    if question_index < 0:
        raise ValueError(f"question_index must be >= 0: {question_index}")
    return f"{set_id}-q{question_index}.png"


@dataclass
class QuestionSet:
    """
    A titled list of question/answer pairs (mutable).

    Attributes:
        id: Opaque identifier, assigned at creation and never changed
        title: Free text, may be empty
        questions: Question texts, in display order
        answers: Answer texts, parallel to questions
        image_paths: Image filenames, parallel to questions ("" = no image)

    Invariants:
        - len(questions) == len(answers) == len(image_paths) once normalized.
          The manager normalizes before every save.

    Example:
        >>> qs = QuestionSet(id="A", title="Math", questions=["2+2"], answers=["4"])
        >>> qs.normalize()
        >>> qs.image_paths
        ['']
    """

    id: str
    title: str = ""
    questions: list[str] = field(default_factory=list)
    answers: list[str] = field(default_factory=list)
    image_paths: list[str] = field(default_factory=list)

    @classmethod
    def new(cls, title: str = "") -> "QuestionSet":
        """Create a set with a fresh id and one blank question/answer pair."""
        return cls(id=new_set_id(), title=title, questions=[""], answers=[""], image_paths=[""])

    @property
    def display_title(self) -> str:
        """Title shown in lists; blank titles read as 'Untitled Question Set'."""
        return self.title if self.title.strip() else UNTITLED_TITLE

    # ─────────────────────────────────────────────────────────────────────────
    # Editing
    # ─────────────────────────────────────────────────────────────────────────

    def normalize(self) -> None:
        """
        Pad or truncate answers and image_paths to the number of questions.

        Missing answers and image references become "". Entries beyond
        len(questions) are dropped.
        """
        count = len(self.questions)
        self.answers = _fit(self.answers, count)
        self.image_paths = _fit(self.image_paths, count)

    def add_question(self, question: str = "", answer: str = "") -> int:
        """
        Append a question/answer pair with no image.

        Returns:
            Index of the new question
        """
        self.normalize()
        self.questions.append(question)
        self.answers.append(answer)
        self.image_paths.append("")
        return len(self.questions) - 1

    def remove_blank_questions(self) -> int:
        """
        Remove pairs whose question and answer are blank and have no image.

        Whitespace-only text counts as blank.

        Returns:
            Number of pairs removed
        """
        self.normalize()
        keep = [
            i for i in range(len(self.questions))
            if self.questions[i].strip() or self.answers[i].strip() or self.image_paths[i]
        ]
        removed = len(self.questions) - len(keep)
        if removed:
            self.questions = [self.questions[i] for i in keep]
            self.answers = [self.answers[i] for i in keep]
            self.image_paths = [self.image_paths[i] for i in keep]
        return removed

    def image_filename(self, question_index: int) -> str:
        """Filename used when storing the image of question_index."""
        return image_filename(self.id, question_index)

    def referenced_images(self) -> set[str]:
        """Non-empty image filenames referenced by this set."""
        return {path for path in self.image_paths if path}

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-compatible dictionary.

        Field names follow the persisted blob format (camelCase imagePaths).
        """
        return {
            "id": self.id,
            "title": self.title,
            "questions": list(self.questions),
            "answers": list(self.answers),
            "imagePaths": list(self.image_paths),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuestionSet":
        """
        Create from a dictionary produced by to_dict().

        imagePaths may be absent (older records); it is padded to the
        number of questions.

        Raises:
            KeyError: If id, questions or answers is missing
        """
        qset = cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            questions=list(data["questions"]),
            answers=list(data["answers"]),
            image_paths=list(data.get("imagePaths", [])),
        )
        qset.normalize()
        return qset


def _fit(values: list[str], count: int) -> list[str]:
    if len(values) >= count:
        return list(values[:count])
    return list(values) + [""] * (count - len(values))
