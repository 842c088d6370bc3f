from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fixtures import OpenAIStub, make_payload, make_quiz  # noqa: E402

from topic_quiz.quiz.generator import QuizGenerator  # noqa: E402
from topic_quiz.quiz.models import Quiz  # noqa: E402

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def openai_stub() -> OpenAIStub:
    """A fresh chat client stub; queue replies with ``queue_response``."""

    return OpenAIStub()


@pytest.fixture
def generator(openai_stub: OpenAIStub) -> QuizGenerator:
    return QuizGenerator(openai_stub, clock=lambda: FIXED_NOW)


@pytest.fixture
def payload() -> dict:
    return make_payload()


@pytest.fixture
def quiz() -> Quiz:
    return make_quiz()


@pytest.fixture(autouse=True)
def _isolated_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TOPIC_QUIZ_HOME", str(tmp_path / "home"))


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("topic_quiz")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
