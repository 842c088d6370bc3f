from .models import OPTION_KEYS, QUESTION_COUNT, Option, Question, Quiz
from .validator import parse_quiz, validate_questions
from .generator import QuizGenerator, build_prompts, decode_payload
from .results import Band, QuestionOutcome, Result, render_result, summarize
from .session import (
    CompletedSession,
    QuizSession,
    SessionRunResult,
    SessionState,
    parse_session_command,
    run_quiz_session,
)

__all__ = [
    "OPTION_KEYS",
    "QUESTION_COUNT",
    "Option",
    "Question",
    "Quiz",
    "parse_quiz",
    "validate_questions",
    "QuizGenerator",
    "build_prompts",
    "decode_payload",
    "Band",
    "QuestionOutcome",
    "Result",
    "render_result",
    "summarize",
    "CompletedSession",
    "QuizSession",
    "SessionRunResult",
    "SessionState",
    "parse_session_command",
    "run_quiz_session",
]
