"""Builders for valid quiz payloads and Quiz objects."""

from __future__ import annotations

import copy
import json
from datetime import datetime, timezone
from typing import Any, Dict

from topic_quiz.quiz.models import Quiz
from topic_quiz.quiz.validator import validate_questions

CORRECT_KEYS = ["A", "B", "C", "D", "A"]


def make_question(index: int, answer: str = "A") -> Dict[str, Any]:
    return {
        "id": str(index + 1),
        "question": f"Question number {index + 1}?",
        "options": {
            "A": f"Alpha {index + 1}",
            "B": f"Bravo {index + 1}",
            "C": f"Charlie {index + 1}",
            "D": f"Delta {index + 1}",
        },
        "correctAnswer": answer,
        "explanation": f"Because of reason {index + 1}.",
    }


def make_payload() -> Dict[str, Any]:
    return {
        "questions": [
            make_question(i, answer) for i, answer in enumerate(CORRECT_KEYS)
        ]
    }


def payload_json(payload: Dict[str, Any] | None = None) -> str:
    return json.dumps(payload if payload is not None else make_payload())


def make_quiz(topic: str = "Photosynthesis") -> Quiz:
    return Quiz(
        id="quiz_test",
        topic=topic,
        questions=tuple(validate_questions(copy.deepcopy(make_payload()))),
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )
