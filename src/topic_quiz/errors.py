"""Error taxonomy shared by the generation pipeline and quiz sessions."""

from __future__ import annotations

from typing import Sequence

__all__ = [
    "QuizError",
    "GenerationError",
    "InvalidInput",
    "NotConfigured",
    "UpstreamError",
    "MalformedResponse",
    "StructuralError",
    "SessionError",
    "InvalidQuestion",
    "InvalidOption",
    "InvalidIndex",
    "IncompleteAnswers",
    "SessionClosed",
    "CLIENT_ERROR",
    "SERVER_MISCONFIGURATION",
    "SERVER_ERROR",
]

CLIENT_ERROR = "client_error"
SERVER_MISCONFIGURATION = "server_misconfiguration"
SERVER_ERROR = "server_error"


class QuizError(RuntimeError):
    """Base class for every error raised by topic_quiz."""

    kind = "quiz_error"

    @property
    def message(self) -> str:
        return str(self)


class GenerationError(QuizError):
    """Raised when a quiz could not be generated."""

    status_class = SERVER_ERROR


class InvalidInput(GenerationError):
    """The topic was empty or whitespace only."""

    kind = "invalid_input"
    status_class = CLIENT_ERROR


class NotConfigured(GenerationError):
    """No credential is available for the model service."""

    kind = "not_configured"
    status_class = SERVER_MISCONFIGURATION


class UpstreamError(GenerationError):
    """The model service failed, timed out or was unreachable."""

    kind = "upstream_error"


class MalformedResponse(GenerationError):
    """The model reply could not be decoded as JSON."""

    kind = "malformed_response"


class StructuralError(GenerationError):
    """A decoded payload does not have the required quiz shape.

    ``rule`` names the failed check; ``index`` is the 0-based position of
    the offending question, or None for payload-level checks.
    """

    kind = "structural_error"

    def __init__(self, rule: str, detail: str, index: int | None = None):
        self.rule = rule
        self.index = index
        where = f"question {index + 1}: " if index is not None else ""
        super().__init__(f"Invalid quiz payload ({rule}): {where}{detail}")


class SessionError(QuizError):
    """Raised when a quiz session is used outside its contract."""


class InvalidQuestion(SessionError):
    kind = "invalid_question"


class InvalidOption(SessionError):
    kind = "invalid_option"


class InvalidIndex(SessionError):
    kind = "invalid_index"


class SessionClosed(SessionError):
    """The session was already submitted."""

    kind = "session_closed"


class IncompleteAnswers(SessionError):
    """Submission was attempted before every question had an answer."""

    kind = "incomplete_answers"

    def __init__(self, missing: Sequence[str]):
        self.missing = tuple(missing)
        super().__init__(
            "{0} question(s) still need an answer.".format(len(self.missing))
        )
