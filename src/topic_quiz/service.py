"""Transport-neutral handler for quiz generation requests.

Maps ``{"topic": ...}`` request bodies to ``(status, body)`` pairs so any
HTTP layer can expose the generator without knowing the error taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .errors import (
    CLIENT_ERROR,
    SERVER_ERROR,
    SERVER_MISCONFIGURATION,
    GenerationError,
    InvalidInput,
)
from .quiz.generator import QuizGenerator

__all__ = ["STATUS_CODES", "GenerateResponse", "handle_generate_request"]

STATUS_CODES: Mapping[str, int] = {
    CLIENT_ERROR: 400,
    SERVER_MISCONFIGURATION: 500,
    SERVER_ERROR: 502,
}


@dataclass(frozen=True)
class GenerateResponse:
    status: int
    body: dict[str, Any]
    status_class: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_class is None


def handle_generate_request(
    body: Any, generator: QuizGenerator
) -> GenerateResponse:
    """Run one generation request and classify any failure."""

    try:
        if not isinstance(body, Mapping) or not isinstance(
            body.get("topic"), str
        ):
            raise InvalidInput("Topic is required.")
        quiz = generator.generate(body["topic"])
    except GenerationError as exc:
        return GenerateResponse(
            status=STATUS_CODES[exc.status_class],
            body={"error": exc.message, "kind": exc.kind},
            status_class=exc.status_class,
        )
    return GenerateResponse(status=200, body={"quiz": quiz.to_dict()})
