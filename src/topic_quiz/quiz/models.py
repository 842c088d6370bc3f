"""Immutable quiz data structures and their JSON wire shape."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator

__all__ = [
    "OPTION_KEYS",
    "QUESTION_COUNT",
    "Option",
    "Question",
    "Quiz",
]

OPTION_KEYS: tuple[str, ...] = ("A", "B", "C", "D")
QUESTION_COUNT = 5


@dataclass(frozen=True)
class Option:
    """One labelled answer choice."""

    key: str
    text: str


@dataclass(frozen=True)
class Question:
    """A multiple-choice question with options A-D and one correct key."""

    id: str
    text: str
    options: tuple[Option, ...]
    correct_answer: str
    explanation: str | None = None

    def option_text(self, key: str | None) -> str | None:
        for option in self.options:
            if option.key == key:
                return option.text
        return None

    @property
    def correct_text(self) -> str:
        return self.option_text(self.correct_answer) or ""

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "question": self.text,
            "options": {option.key: option.text for option in self.options},
            "correctAnswer": self.correct_answer,
        }
        if self.explanation is not None:
            payload["explanation"] = self.explanation
        return payload


@dataclass(frozen=True)
class Quiz:
    """Five questions generated for one topic."""

    id: str
    topic: str
    questions: tuple[Question, ...]
    created_at: datetime

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    @property
    def question_ids(self) -> tuple[str, ...]:
        return tuple(question.id for question in self.questions)

    def get(self, question_id: str) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "topic": self.topic,
            "questions": [question.to_dict() for question in self.questions],
            "createdAt": self.created_at.isoformat(),
        }
