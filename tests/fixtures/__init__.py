"""Shared testing fixtures and stubs for the topic_quiz test suite."""

from .openai import OpenAIStub  # noqa: F401
from .quizzes import (  # noqa: F401
    CORRECT_KEYS,
    make_payload,
    make_question,
    make_quiz,
    payload_json,
)

__all__ = [
    "CORRECT_KEYS",
    "OpenAIStub",
    "make_payload",
    "make_question",
    "make_quiz",
    "payload_json",
]
