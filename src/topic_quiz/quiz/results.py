"""Scoring summaries for completed quiz attempts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import Quiz

__all__ = [
    "Band",
    "QuestionOutcome",
    "Result",
    "band_for",
    "percentage_for",
    "summarize",
    "render_result",
]


class Band(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_BAND_MESSAGES = {
    Band.HIGH: "Excellent! Great job!",
    Band.MEDIUM: "Good work! Keep learning!",
    Band.LOW: "Keep practicing! You'll get better!",
}

_BAND_STYLES = {
    Band.HIGH: "green",
    Band.MEDIUM: "yellow",
    Band.LOW: "red",
}


@dataclass(frozen=True)
class QuestionOutcome:
    """How one question was answered."""

    question_id: str
    question: str
    selected: str | None
    selected_text: str | None
    correct_answer: str
    correct_text: str
    is_correct: bool
    explanation: str | None = None


@dataclass(frozen=True)
class Result:
    """Score, percentage, band and per-question breakdown."""

    score: int
    total: int
    percentage: int
    band: Band
    outcomes: tuple[QuestionOutcome, ...]

    @property
    def message(self) -> str:
        return _BAND_MESSAGES[self.band]


def percentage_for(score: int, total: int) -> int:
    """Return ``100 * score / total`` rounded half up (12.5 -> 13)."""

    if total <= 0:
        return 0
    return (200 * score + total) // (2 * total)


def band_for(percentage: int) -> Band:
    if percentage >= 80:
        return Band.HIGH
    if percentage >= 60:
        return Band.MEDIUM
    return Band.LOW


def summarize(quiz: Quiz, answers: Mapping[str, str], score: int) -> Result:
    """Build a :class:`Result` from a quiz, recorded answers and score.

    Questions without a recorded answer count as incorrect.
    """

    total = len(quiz)
    if not 0 <= score <= total:
        raise ValueError(f"score {score} is outside 0..{total}")
    outcomes = []
    for question in quiz.questions:
        selected = answers.get(question.id)
        outcomes.append(
            QuestionOutcome(
                question_id=question.id,
                question=question.text,
                selected=selected,
                selected_text=question.option_text(selected),
                correct_answer=question.correct_answer,
                correct_text=question.correct_text,
                is_correct=selected == question.correct_answer,
                explanation=question.explanation,
            )
        )
    percentage = percentage_for(score, total)
    return Result(
        score=score,
        total=total,
        percentage=percentage,
        band=band_for(percentage),
        outcomes=tuple(outcomes),
    )


def render_result(
    console: Console,
    result: Result,
    *,
    show_explanations: bool = True,
) -> None:
    console.print()
    console.rule(Text("Quiz Results", style="bold magenta"))
    style = _BAND_STYLES[result.band]
    console.print(
        Text.assemble(
            (f"{result.score}/{result.total}", f"bold {style}"),
            "  ",
            (f"{result.percentage}%", style),
        )
    )
    console.print(Text(result.message, style=style))

    table = Table(title="Question Review", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer")
    table.add_column("Correct answer")
    table.add_column("Result", justify="center")
    for idx, outcome in enumerate(result.outcomes, start=1):
        yours = (
            f"{outcome.selected}) {outcome.selected_text}"
            if outcome.selected
            else "—"
        )
        table.add_row(
            str(idx),
            Text(outcome.question),
            Text(yours),
            Text(f"{outcome.correct_answer}) {outcome.correct_text}"),
            "Correct" if outcome.is_correct else "Incorrect",
        )
    console.print(table)

    if not show_explanations:
        return
    for idx, outcome in enumerate(result.outcomes, start=1):
        if not outcome.explanation:
            continue
        console.print(
            Panel(
                Text(outcome.explanation),
                title=f"Question {idx}",
                border_style="green" if outcome.is_correct else "red",
            )
        )
