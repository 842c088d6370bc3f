from __future__ import annotations

import pytest

from fixtures import CORRECT_KEYS

from topic_quiz.errors import (
    IncompleteAnswers,
    InvalidIndex,
    InvalidOption,
    InvalidQuestion,
    SessionClosed,
)
from topic_quiz.quiz.session import CompletedSession, QuizSession, SessionState


def _wrong(key: str) -> str:
    return "B" if key == "A" else "A"


def _answer_all(session: QuizSession, keys) -> None:
    for qid, key in zip(session.quiz.question_ids, keys):
        session.select_answer(qid, key)


def test_initialize_starts_at_first_question(quiz) -> None:
    session = QuizSession.initialize(quiz)
    assert session.state is SessionState.IN_PROGRESS
    assert session.index == 0
    assert dict(session.answers) == {}
    assert session.progress == (1, 5)
    assert session.current_question is quiz.questions[0]


def test_select_answer_is_idempotent_and_overwrites(quiz) -> None:
    session = QuizSession(quiz)
    session.select_answer("1", "C")
    session.select_answer("1", "C")
    assert dict(session.answers) == {"1": "C"}
    session.select_answer("1", "D")
    assert dict(session.answers) == {"1": "D"}
    assert session.index == 0


def test_select_answer_rejects_unknown_question(quiz) -> None:
    session = QuizSession(quiz)
    with pytest.raises(InvalidQuestion):
        session.select_answer("42", "A")
    assert dict(session.answers) == {}


@pytest.mark.parametrize("key", ["E", "a", "", "AB"])
def test_select_answer_rejects_unknown_option(quiz, key: str) -> None:
    session = QuizSession(quiz)
    with pytest.raises(InvalidOption):
        session.select_answer("1", key)
    assert dict(session.answers) == {}


def test_answers_view_is_read_only(quiz) -> None:
    session = QuizSession(quiz)
    session.select_answer("1", "A")
    with pytest.raises(TypeError):
        session.answers["2"] = "B"  # type: ignore[index]


def test_move_next_requires_current_answer(quiz) -> None:
    session = QuizSession(quiz)
    assert session.move_next() is False
    assert session.index == 0

    session.select_current("A")
    assert session.move_next() is True
    assert session.index == 1


def test_move_next_stops_at_last_question(quiz) -> None:
    session = QuizSession(quiz)
    _answer_all(session, CORRECT_KEYS)
    for _ in range(10):
        session.move_next()
    assert session.index == 4
    assert session.can_move_next() is False


def test_move_previous_and_jump_are_unrestricted(quiz) -> None:
    session = QuizSession(quiz)
    assert session.move_previous() is False
    session.jump_to(3)
    assert session.index == 3
    assert session.move_previous() is True
    assert session.index == 2
    session.jump_to(0)
    assert session.index == 0


@pytest.mark.parametrize("index", [-1, 5, 99])
def test_jump_to_out_of_range_raises(quiz, index: int) -> None:
    session = QuizSession(quiz)
    session.jump_to(2)
    with pytest.raises(InvalidIndex):
        session.jump_to(index)
    assert session.index == 2


def test_submit_requires_all_answers(quiz) -> None:
    session = QuizSession(quiz)
    _answer_all(session, CORRECT_KEYS[:3])
    assert session.can_submit() is False
    with pytest.raises(IncompleteAnswers) as exc:
        session.submit()
    assert exc.value.missing == ("4", "5")
    assert session.state is SessionState.IN_PROGRESS
    session.select_answer("4", "A")
    assert session.unanswered_ids() == ["5"]


def test_submit_all_correct_scores_full_marks(quiz) -> None:
    session = QuizSession(quiz)
    _answer_all(session, CORRECT_KEYS)
    completed = session.submit()
    assert isinstance(completed, CompletedSession)
    assert completed.state is SessionState.COMPLETED
    assert completed.score == 5
    assert completed.total == 5
    assert dict(completed.answers) == dict(zip(quiz.question_ids, CORRECT_KEYS))
    assert session.state is SessionState.COMPLETED


def test_submit_counts_exact_matches(quiz) -> None:
    session = QuizSession(quiz)
    keys = CORRECT_KEYS[:3] + [_wrong(k) for k in CORRECT_KEYS[3:]]
    _answer_all(session, keys)
    assert session.submit().score == 3


def test_completed_session_rejects_further_operations(quiz) -> None:
    session = QuizSession(quiz)
    _answer_all(session, CORRECT_KEYS)
    completed = session.submit()
    with pytest.raises(SessionClosed):
        session.submit()
    with pytest.raises(SessionClosed):
        session.select_answer("1", "B")
    with pytest.raises(SessionClosed):
        session.move_previous()
    with pytest.raises(SessionClosed):
        session.jump_to(0)
    assert completed.answers["1"] == "A"


def test_retake_starts_fresh_attempt(quiz) -> None:
    session = QuizSession(quiz)
    _answer_all(session, CORRECT_KEYS)
    session.jump_to(4)
    completed = session.submit()

    again = completed.retake()
    assert again is not session
    assert again.quiz is quiz
    assert again.index == 0
    assert dict(again.answers) == {}
    assert again.state is SessionState.IN_PROGRESS
    assert completed.score == 5
