"""Quiz-taking state machine and the Rich console loop that drives it.

A :class:`QuizSession` is the ``InProgress`` state: it tracks the current
question, records answers and gates forward navigation on the current
question being answered. :meth:`QuizSession.submit` is the only way to
reach the ``Completed`` state and returns a :class:`CompletedSession`;
the in-progress object is closed afterwards and refuses every further
operation. A retake starts a brand-new :class:`QuizSession`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Callable, Literal, Mapping

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..errors import (
    IncompleteAnswers,
    InvalidIndex,
    InvalidOption,
    InvalidQuestion,
    SessionClosed,
)
from .models import OPTION_KEYS, Question, Quiz
from .results import Result, render_result, summarize

__all__ = [
    "SessionState",
    "QuizSession",
    "CompletedSession",
    "SessionCommand",
    "SessionRunResult",
    "parse_session_command",
    "run_quiz_session",
]

InputProvider = Callable[[], str]
ExitAction = Literal["submitted", "quit"]


class SessionState(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CompletedSession:
    """Terminal state: finalized answers and score for one attempt."""

    quiz: Quiz
    answers: Mapping[str, str]
    score: int
    state: SessionState = field(default=SessionState.COMPLETED, init=False)

    @property
    def total(self) -> int:
        return len(self.quiz)

    def summarize(self) -> Result:
        return summarize(self.quiz, self.answers, self.score)

    def retake(self) -> "QuizSession":
        return QuizSession(self.quiz)


class QuizSession:
    """In-progress attempt at a :class:`Quiz`.

    Operations are not thread-safe; callers serialize access.
    """

    def __init__(self, quiz: Quiz) -> None:
        self._quiz = quiz
        self._index = 0
        self._answers: dict[str, str] = {}
        self._state = SessionState.IN_PROGRESS

    @classmethod
    def initialize(cls, quiz: Quiz) -> "QuizSession":
        return cls(quiz)

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._quiz)

    @property
    def current_question(self) -> Question:
        return self._quiz.questions[self._index]

    @property
    def answers(self) -> Mapping[str, str]:
        return MappingProxyType(self._answers)

    @property
    def progress(self) -> tuple[int, int]:
        """Return (1-based position, question count)."""

        return self._index + 1, self.total

    def answered_count(self) -> int:
        return len(self._answers)

    def is_answered(self, question_id: str) -> bool:
        return question_id in self._answers

    def selected_for(self, question_id: str) -> str | None:
        return self._answers.get(question_id)

    def unanswered_ids(self) -> list[str]:
        return [
            qid for qid in self._quiz.question_ids if qid not in self._answers
        ]

    def can_move_next(self) -> bool:
        return self._index + 1 < self.total and self.is_answered(
            self.current_question.id
        )

    def can_submit(self) -> bool:
        return self._state is SessionState.IN_PROGRESS and not (
            self.unanswered_ids()
        )

    def select_answer(self, question_id: str, key: str) -> None:
        """Record ``key`` for ``question_id``, replacing any earlier pick."""

        self._ensure_open()
        if self._quiz.get(question_id) is None:
            raise InvalidQuestion(f"Unknown question id '{question_id}'.")
        if key not in OPTION_KEYS:
            raise InvalidOption(
                f"'{key}' is not one of {', '.join(OPTION_KEYS)}."
            )
        self._answers[question_id] = key

    def select_current(self, key: str) -> None:
        self.select_answer(self.current_question.id, key)

    def move_next(self) -> bool:
        """Advance one question; a no-op unless the current one is answered."""

        self._ensure_open()
        if not self.can_move_next():
            return False
        self._index += 1
        return True

    def move_previous(self) -> bool:
        self._ensure_open()
        if self._index == 0:
            return False
        self._index -= 1
        return True

    def jump_to(self, index: int) -> None:
        self._ensure_open()
        if not 0 <= index < self.total:
            raise InvalidIndex(
                f"Question index {index} is outside 0..{self.total - 1}."
            )
        self._index = index

    def submit(self) -> CompletedSession:
        """Score the attempt and close this session.

        Raises :class:`IncompleteAnswers` (leaving the session untouched)
        while any question is unanswered.
        """

        self._ensure_open()
        missing = self.unanswered_ids()
        if missing:
            raise IncompleteAnswers(missing)
        score = 0
        for question in self._quiz.questions:
            if self._answers[question.id] == question.correct_answer:
                score += 1
        self._state = SessionState.COMPLETED
        return CompletedSession(
            quiz=self._quiz,
            answers=MappingProxyType(dict(self._answers)),
            score=score,
        )

    def _ensure_open(self) -> None:
        if self._state is not SessionState.IN_PROGRESS:
            raise SessionClosed("This quiz attempt was already submitted.")


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["next", "prev", "goto", "submit", "quit", "select"]
    choice: str | None = None
    index: int | None = None


@dataclass(frozen=True)
class SessionRunResult:
    """Return value from :func:`run_quiz_session`."""

    exit_action: ExitAction
    completed: CompletedSession | None = None
    result: Result | None = None


def parse_session_command(raw: str | None) -> SessionCommand | None:
    """Parse raw user input into a structured command."""

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"p", "prev", "previous"}:
        return SessionCommand("prev")
    if lowered in {"submit", "s"}:
        return SessionCommand("submit")
    if lowered in {"quit", "q", "exit"}:
        return SessionCommand("quit")
    head, _, tail = lowered.partition(" ")
    if head in {"g", "goto"}:
        number = tail.strip()
        if number.isdigit():
            return SessionCommand("goto", index=int(number) - 1)
        return None
    if len(text) == 1 and text.upper() in OPTION_KEYS:
        return SessionCommand("select", text.upper())
    return None


def run_quiz_session(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
    *,
    show_explanations: bool = True,
) -> SessionRunResult:
    """Run an interactive quiz session using Rich-rendered prompts."""

    while True:
        _render_question(console, session)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            return SessionRunResult("quit")
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print(
                "\n[bold yellow]Ending session without submission.[/]"
            )
            return SessionRunResult("quit")
        completed = _apply_command(command, session, console)
        if completed is not None:
            result = completed.summarize()
            render_result(console, result, show_explanations=show_explanations)
            return SessionRunResult("submitted", completed, result)


def _apply_command(
    command: SessionCommand,
    session: QuizSession,
    console: Console,
) -> CompletedSession | None:
    if command.type == "select" and command.choice:
        session.select_current(command.choice)
        console.print(f"Selected [bold]{command.choice}[/].")
    elif command.type == "next":
        if not session.move_next():
            if session.index + 1 >= session.total:
                console.print("[yellow]This is the last question.[/]")
            else:
                console.print(
                    "[yellow]Answer this question before moving on.[/]"
                )
    elif command.type == "prev":
        session.move_previous()
    elif command.type == "goto" and command.index is not None:
        try:
            session.jump_to(command.index)
        except InvalidIndex:
            console.print(
                f"[red]Pick a question between 1 and {session.total}.[/]"
            )
    elif command.type == "submit":
        try:
            return session.submit()
        except IncompleteAnswers as exc:
            console.print(f"[red]{exc}[/red]")
    return None


def _render_question(console: Console, session: QuizSession) -> None:
    question = session.current_question
    position, total = session.progress
    header = Text.assemble(
        (f"Question {position}", "bold cyan"),
        (f" / {total}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.text, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")

    selected = session.selected_for(question.id)
    for option in question.options:
        indicator = "•" if option.key == selected else " "
        option_text = Text(option.text)
        if option.key == selected:
            option_text.stylize("bold green")
        row_text = Text(indicator + " ")
        row_text += option_text
        table.add_row(option.key, row_text)

    console.print(table)
    console.print(
        Text(
            f"Answered {session.answered_count()}/{total} | Commands: "
            f"choices [{', '.join(OPTION_KEYS)}], n (next), p (prev), "
            "g N (go to), submit, quit",
            style="dim",
        )
    )
