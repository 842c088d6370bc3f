from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Vertical
from textual.widget import Widget
from textual.widgets import Button, Static

from ..errors import IncompleteAnswers
from .models import Question
from .results import Result
from .session import CompletedSession, QuizSession


class QuizApp(App):
    CSS = """
#choices Button.selected { background: $accent; color: black; }
#status { color: $warning; }
"""
    BINDINGS = [
        ("n", "next", "Next"),
        ("p", "prev", "Prev"),
        ("a", "select('A')", "Select A"),
        ("b", "select('B')", "Select B"),
        ("c", "select('C')", "Select C"),
        ("d", "select('D')", "Select D"),
        ("s", "submit", "Submit"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, session: QuizSession):
        super().__init__()
        self.quiz_session = session
        self.completed: CompletedSession | None = None
        self.quiz_result: Result | None = None
        self.feedback = ""

    def compose(self) -> ComposeResult:
        with Container(id="stage"):
            yield self._stage_widget()
        with Container(id="footer"):
            yield Button("Prev", id="prev")
            yield Button("Next", id="next")
            yield Button("Submit", id="submit")
            yield Static(self.answered_text(), id="answered")
            yield Static("", id="status")

    # Navigation and selection work without a running App so they can be
    # exercised directly.
    def select_answer(self, key: str) -> None:
        if self.completed is not None:
            return
        self.quiz_session.select_current(key)
        self.feedback = ""
        self._refresh()

    def next_question(self) -> int:
        if self.completed is None and not self.quiz_session.move_next():
            self.feedback = "Answer this question before moving on."
        self._refresh()
        return self.quiz_session.index

    def prev_question(self) -> int:
        if self.completed is None:
            self.quiz_session.move_previous()
        self._refresh()
        return self.quiz_session.index

    def submit(self) -> Result | None:
        if self.completed is not None:
            return self.quiz_result
        try:
            self.completed = self.quiz_session.submit()
        except IncompleteAnswers as exc:
            self.feedback = str(exc)
        else:
            self.quiz_result = self.completed.summarize()
            self.feedback = self.quiz_result.message
        self._refresh()
        return self.quiz_result

    def answered_text(self) -> str:
        session = self.quiz_session
        return f"Answered: {session.answered_count()}/{session.total}"

    def action_next(self) -> None:
        self.next_question()

    def action_prev(self) -> None:
        self.prev_question()

    def action_select(self, key: str) -> None:
        self.select_answer(key)

    def action_submit(self) -> None:
        self.submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = event.button.id or ""
        if bid.startswith("choice-"):
            self.select_answer(bid.removeprefix("choice-"))
        elif bid == "submit":
            self.submit()
        elif bid == "next":
            self.next_question()
        elif bid == "prev":
            self.prev_question()

    def _stage_widget(self) -> Widget:
        if self.quiz_result is not None:
            return ResultView(self.quiz_result)
        question = self.quiz_session.current_question
        return QuestionView(
            question,
            index=self.quiz_session.index + 1,
            total=self.quiz_session.total,
            selected=self.quiz_session.selected_for(question.id),
        )

    def _refresh(self) -> None:
        if not self.is_running:
            return
        stage = self.query_one("#stage", Container)
        stage.remove_children()
        stage.mount(self._stage_widget())
        self.query_one("#answered", Static).update(self.answered_text())
        self.query_one("#status", Static).update(self.feedback)
        done = self.completed is not None
        self.query_one("#next", Button).disabled = (
            done or not self.quiz_session.can_move_next()
        )
        self.query_one("#prev", Button).disabled = (
            done or self.quiz_session.index == 0
        )
        self.query_one("#submit", Button).disabled = (
            done or not self.quiz_session.can_submit()
        )

    def on_mount(self) -> None:
        self._refresh()


class QuestionView(Widget):
    """Render one question with its options, progress and selection."""

    def __init__(
        self,
        question: Question,
        index: int,
        total: int,
        *,
        selected: str | None = None,
    ) -> None:
        super().__init__()
        self.question = question
        self.index = index
        self.total = total
        self.selected = selected

    def compose(self) -> ComposeResult:
        yield Static(f"{self.index}/{self.total}", id="progress")
        yield Static(Text(self.question.text), id="stem")
        with Vertical(id="choices"):
            for option in self.question.options:
                btn = Button(
                    Text(f"{option.key}) {option.text}"),
                    id=f"choice-{option.key}",
                )
                if option.key == self.selected:
                    btn.add_class("selected")
                yield btn


class ResultView(Widget):
    def __init__(self, result: Result) -> None:
        super().__init__()
        self.quiz_result = result

    def lines(self) -> list[str]:
        out = [
            f"Score: {self.quiz_result.score}/{self.quiz_result.total} "
            f"({self.quiz_result.percentage}%)",
            self.quiz_result.message,
            "",
        ]
        for idx, outcome in enumerate(self.quiz_result.outcomes, start=1):
            mark = "Correct" if outcome.is_correct else "Incorrect"
            out.append(
                f"{idx}. {outcome.question} [{mark}] "
                f"you: {outcome.selected or '-'}, "
                f"answer: {outcome.correct_answer}"
            )
        return out

    def compose(self) -> ComposeResult:
        yield Static(Text("\n".join(self.lines())), id="result")
