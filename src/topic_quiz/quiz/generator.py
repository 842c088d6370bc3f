"""Quiz generation pipeline: topic -> prompt -> model reply -> Quiz."""

from __future__ import annotations

import json
import logging
import re
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Tuple

from ..core.ai import load_client
from ..errors import (
    InvalidInput,
    MalformedResponse,
    StructuralError,
    UpstreamError,
)
from .models import QUESTION_COUNT, Quiz
from .validator import validate_questions

__all__ = [
    "MODEL",
    "TEMPERATURE",
    "MAX_TOKENS",
    "REQUEST_TIMEOUT",
    "QuizGenerator",
    "build_prompts",
    "decode_payload",
    "new_quiz_id",
]

logger = logging.getLogger(__name__)

MODEL = "gpt-3.5-turbo"
TEMPERATURE = 0.7
MAX_TOKENS = 2000
REQUEST_TIMEOUT = 60.0

_SYSTEM_PROMPT = f"""You are an expert quiz creator. Create exactly \
{QUESTION_COUNT} multiple-choice questions about the given topic.

Requirements:
- Each question should have exactly 4 options (A, B, C, D)
- Only one option should be correct
- Questions should be educational and factual
- Vary the difficulty level
- Provide a brief explanation for the correct answer

Return the response as a JSON object with this exact structure:
{{
  "questions": [
    {{
      "id": "1",
      "question": "Question text here?",
      "options": {{
        "A": "Option A",
        "B": "Option B",
        "C": "Option C",
        "D": "Option D"
      }},
      "correctAnswer": "A",
      "explanation": "Brief explanation of why this is correct"
    }}
  ]
}}"""

_FENCE_RE = re.compile(r"```(?:json)?\s*(.+?)```", re.DOTALL)


def build_prompts(topic: str) -> Tuple[str, str]:
    """Return the (system, user) prompt pair for an already-trimmed topic."""

    return _SYSTEM_PROMPT, f"Create a quiz about: {topic}"


def decode_payload(content: str) -> Any:
    """Decode a model reply into a loosely-typed JSON value.

    A Markdown code fence around the JSON is tolerated. Anything that does
    not decode raises :class:`MalformedResponse`.
    """

    text = (content or "").strip()
    if not text:
        raise MalformedResponse("The model returned an empty response.")
    fenced = _FENCE_RE.search(text)
    candidate = fenced.group(1) if fenced else text
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(
            "The model response was not valid JSON."
        ) from exc


def new_quiz_id() -> str:
    return f"quiz_{time.monotonic_ns():x}{secrets.token_hex(4)}"


class QuizGenerator:
    """Generate quizzes through an OpenAI-compatible chat client.

    ``client`` is any object exposing ``chat.completions.create``. When it
    is omitted, ``client_factory`` is called on first use and the result is
    reused for later calls; the default factory raises
    :class:`~topic_quiz.errors.NotConfigured` without a credential.
    """

    def __init__(
        self,
        client: Any = None,
        *,
        client_factory: Optional[Callable[[], Any]] = None,
        timeout: float = REQUEST_TIMEOUT,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._client = client
        self._client_factory = client_factory or load_client
        self._timeout = timeout
        self._clock = clock

    def _resolve_client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def generate(self, topic: str) -> Quiz:
        """Generate a validated :class:`Quiz` for ``topic``.

        Raises a :class:`~topic_quiz.errors.GenerationError` subclass on
        failure; no partial quiz is ever returned and nothing is retried.
        """

        cleaned = (topic or "").strip()
        if not cleaned:
            raise InvalidInput("Topic is required.")
        client = self._resolve_client()

        logger.info(
            "Generating quiz",
            extra={"topic_length": len(cleaned), "model": MODEL},
        )
        system_prompt, user_prompt = build_prompts(cleaned)
        content = self._complete(client, system_prompt, user_prompt)

        try:
            payload = decode_payload(content)
        except MalformedResponse:
            logger.error(
                "Failed to parse model response",
                extra={"raw_response": content},
            )
            raise
        try:
            questions = validate_questions(payload)
        except StructuralError as exc:
            logger.warning(
                "Model response failed validation",
                extra={"rule": exc.rule, "question_index": exc.index},
            )
            raise

        quiz = Quiz(
            id=new_quiz_id(),
            topic=cleaned,
            questions=tuple(questions),
            created_at=self._clock(),
        )
        logger.info("Generated quiz", extra={"quiz_id": quiz.id})
        return quiz

    def _complete(
        self, client: Any, system_prompt: str, user_prompt: str
    ) -> str:
        try:
            resp = client.chat.completions.create(
                model=MODEL,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
                timeout=self._timeout,
            )
            raw_content = resp.choices[0].message.content
        except Exception as exc:
            logger.exception("Model request failed")
            raise UpstreamError(
                "The quiz service could not reach the model. Try again."
            ) from exc
        return raw_content or ""
