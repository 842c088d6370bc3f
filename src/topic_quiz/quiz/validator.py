"""Structural validation of untrusted quiz payloads.

Model replies and quiz files are decoded into plain JSON values first and
only become :class:`~topic_quiz.quiz.models.Question` objects after passing
through :func:`validate_questions`. Checks run in a fixed order and the
first violation is raised as a :class:`StructuralError` naming the rule.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Mapping

from ..errors import StructuralError
from .models import OPTION_KEYS, QUESTION_COUNT, Option, Question, Quiz

__all__ = ["validate_questions", "parse_quiz"]


def validate_questions(payload: Any) -> list[Question]:
    """Return exactly ``QUESTION_COUNT`` normalized questions from ``payload``.

    Blank or missing ids are replaced by the 1-based position, and the
    whole set is renumbered when such a fill-in would repeat a supplied id.
    Extra questions are rejected rather than truncated.
    """

    if not isinstance(payload, Mapping):
        raise StructuralError(
            "payload_object",
            f"expected a JSON object, got {_type_name(payload)}",
        )
    raw_questions = payload.get("questions")
    if not isinstance(raw_questions, list):
        raise StructuralError(
            "questions_list", "'questions' must be a list"
        )
    if len(raw_questions) != QUESTION_COUNT:
        raise StructuralError(
            "question_count",
            f"expected exactly {QUESTION_COUNT} questions, "
            f"got {len(raw_questions)}",
        )

    questions = [
        _validate_question(entry, index)
        for index, entry in enumerate(raw_questions)
    ]
    return _assign_ids(questions)


def parse_quiz(payload: Any) -> Quiz:
    """Rebuild a :class:`Quiz` from its serialized form."""

    questions = validate_questions(payload)
    quiz_id = payload.get("id")
    if not isinstance(quiz_id, str) or not quiz_id.strip():
        raise StructuralError("quiz_id", "'id' must be a non-empty string")
    topic = payload.get("topic")
    if not isinstance(topic, str) or not topic.strip():
        raise StructuralError("topic", "'topic' must be a non-empty string")
    created_raw = payload.get("createdAt")
    try:
        created_at = datetime.fromisoformat(str(created_raw))
    except ValueError as exc:
        raise StructuralError(
            "created_at", f"'createdAt' is not an ISO-8601 timestamp: {exc}"
        ) from exc
    return Quiz(
        id=quiz_id.strip(),
        topic=topic.strip(),
        questions=tuple(questions),
        created_at=created_at,
    )


def _validate_question(entry: Any, index: int) -> Question:
    if not isinstance(entry, Mapping):
        raise StructuralError(
            "question_object",
            f"expected an object, got {_type_name(entry)}",
            index,
        )
    text = entry.get("question")
    if not isinstance(text, str) or not text.strip():
        raise StructuralError(
            "question_text", "question text must be a non-empty string", index
        )

    raw_options = entry.get("options")
    if not isinstance(raw_options, Mapping):
        raise StructuralError(
            "options_object", "'options' must be an object keyed A-D", index
        )
    options: list[Option] = []
    for key in OPTION_KEYS:
        value = raw_options.get(key)
        if not isinstance(value, str) or not value.strip():
            raise StructuralError(
                "option_text", f"option {key} must be non-empty text", index
            )
        options.append(Option(key, value.strip()))

    answer = entry.get("correctAnswer")
    if answer not in OPTION_KEYS:
        raise StructuralError(
            "correct_answer",
            f"correctAnswer must be one of {', '.join(OPTION_KEYS)}, "
            f"got {answer!r}",
            index,
        )

    explanation = entry.get("explanation")
    if explanation is not None and not isinstance(explanation, str):
        raise StructuralError(
            "explanation", "explanation must be a string when present", index
        )

    return Question(
        id=_supplied_id(entry.get("id")),
        text=text.strip(),
        options=tuple(options),
        correct_answer=answer,
        explanation=explanation.strip() if explanation else explanation,
    )


def _supplied_id(raw: Any) -> str:
    """Return the stripped id the payload carries, or "" when it has none."""

    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        return ""
    return str(raw).strip()


def _assign_ids(questions: list[Question]) -> list[Question]:
    """Reject repeated supplied ids and fill the missing ones by position.

    If a positional id would clash with a supplied one, every question is
    renumbered by position.
    """

    seen: set[str] = set()
    for index, question in enumerate(questions):
        if not question.id:
            continue
        if question.id in seen:
            raise StructuralError(
                "duplicate_id", f"id '{question.id}' is repeated", index
            )
        seen.add(question.id)

    ids = [q.id or str(i + 1) for i, q in enumerate(questions)]
    if len(set(ids)) != len(ids):
        ids = [str(i + 1) for i in range(len(questions))]
    return [
        q if q.id == qid else replace(q, id=qid)
        for q, qid in zip(questions, ids)
    ]


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__
