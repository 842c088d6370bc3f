"""Command-line entry point for topic-quiz."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .core.config import (
    AppConfig,
    ConfigError,
    find_config_path,
    load_config,
)
from .core.logging import configure_logger
from .errors import CLIENT_ERROR, QuizError
from .quiz.generator import QuizGenerator
from .quiz.models import Quiz
from .quiz.session import QuizSession, run_quiz_session
from .quiz.validator import parse_quiz
from .service import handle_generate_request

logger = logging.getLogger(__name__)

InputProvider = Callable[[], str]


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="topic-quiz",
        description="Generate a five-question quiz from a topic and take it",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--config", help="Path to topic-quiz.toml")
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr",
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp_gen = sub.add_parser("generate", help="Generate a quiz as JSON")
    sp_gen.add_argument("topic")
    sp_gen.add_argument("--out", help="Write the quiz JSON to this file")

    sp_take = sub.add_parser("take", help="Take a quiz saved as JSON")
    sp_take.add_argument("path")
    sp_take.add_argument("--tui", action="store_true", help="Use Textual UI")
    _add_explain_flags(sp_take)

    sp_play = sub.add_parser("play", help="Generate a quiz and take it")
    sp_play.add_argument("topic")
    _add_explain_flags(sp_play)

    sub.add_parser("version", help="Print the installed version")
    return p


def _add_explain_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--explain", dest="explain", action="store_true")
    parser.add_argument("--no-explain", dest="explain", action="store_false")
    parser.set_defaults(explain=None)


def _exit_code_for(status_class: str | None) -> int:
    if status_class is None:
        return 0
    return 2 if status_class == CLIENT_ERROR else 1


def _show_explanations(args: argparse.Namespace, cfg: AppConfig) -> bool:
    if args.explain is None:
        return cfg.show_explanations
    return bool(args.explain)


def _cmd_generate(
    args: argparse.Namespace, generator: QuizGenerator, console: Console
) -> int:
    response = handle_generate_request({"topic": args.topic}, generator)
    if response.ok and args.out:
        out_path = Path(args.out).expanduser()
        try:
            out_path.write_text(
                json.dumps(response.body["quiz"], indent=2), encoding="utf-8"
            )
        except OSError as exc:
            raise QuizError(f"Could not write quiz file: {exc}") from exc
        console.print(f"Wrote quiz -> {out_path}")
    else:
        console.print_json(data=response.body)
    return _exit_code_for(response.status_class)


def load_quiz_file(path: Path) -> Quiz:
    """Read a quiz saved by ``generate`` (bare or wrapped in ``{"quiz"}``)."""

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise QuizError(f"Quiz file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise QuizError(f"Quiz file is not valid JSON: {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("quiz"), dict):
        data = data["quiz"]
    return parse_quiz(data)


def _cmd_take(
    args: argparse.Namespace,
    cfg: AppConfig,
    console: Console,
    input_provider: InputProvider,
) -> int:
    quiz = load_quiz_file(Path(args.path).expanduser())
    session = QuizSession.initialize(quiz)
    if args.tui:
        from .quiz.tui import QuizApp

        QuizApp(session).run()
        return 0
    outcome = run_quiz_session(
        session,
        console,
        input_provider,
        show_explanations=_show_explanations(args, cfg),
    )
    return 0 if outcome.exit_action == "submitted" else 1


def _cmd_play(
    args: argparse.Namespace,
    cfg: AppConfig,
    generator: QuizGenerator,
    console: Console,
    input_provider: InputProvider,
) -> int:
    topic = args.topic
    explain = _show_explanations(args, cfg)
    while True:
        with console.status("Generating quiz..."):
            response = handle_generate_request({"topic": topic}, generator)
        if not response.ok:
            console.print(
                "[red]Error generating quiz:[/] "
                + escape(response.body["error"])
            )
            return _exit_code_for(response.status_class)
        quiz = parse_quiz(response.body["quiz"])
        session = QuizSession.initialize(quiz)
        while True:
            outcome = run_quiz_session(
                session, console, input_provider, show_explanations=explain
            )
            if outcome.completed is None:
                return 1
            choice = _ask(
                console, input_provider, "[r]etake, [n]ew topic, [q]uit"
            )
            if choice.lower() == "r":
                session = outcome.completed.retake()
                continue
            break
        if choice.lower() != "n":
            return 0
        topic = _ask(console, input_provider, "Topic")
        if not topic:
            return 0


def _ask(console: Console, input_provider: InputProvider, label: str) -> str:
    console.print(f"{label}: ", end="", markup=False)
    try:
        return input_provider().strip()
    except (EOFError, KeyboardInterrupt, StopIteration):
        return ""


def _cmd_version(console: Console) -> int:
    try:
        version = metadata.version("topic-quiz")
    except metadata.PackageNotFoundError:
        version = "unknown"
    console.print(version)
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Console | None = None,
    input_provider: InputProvider | None = None,
    generator: QuizGenerator | None = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    console = console or Console()
    if args.command == "version":
        return _cmd_version(console)

    try:
        cfg = load_config(find_config_path(args.config))
    except ConfigError as exc:
        console.print(f"[red]Error:[/] {escape(str(exc))}")
        return 2
    _, log_path = configure_logger(
        "topic_quiz",
        log_dir=cfg.log_dir,
        level=cfg.log_level,
        verbose=bool(args.verbose),
    )
    logger.debug("Logging to %s", log_path)

    generator = generator or QuizGenerator()
    input_provider = input_provider or (lambda: console.input("> "))
    try:
        if args.command == "generate":
            return _cmd_generate(args, generator, console)
        if args.command == "take":
            return _cmd_take(args, cfg, console, input_provider)
        if args.command == "play":
            return _cmd_play(args, cfg, generator, console, input_provider)
    except QuizError as exc:
        logger.error("Command failed", extra={"kind": exc.kind})
        console.print(f"[red]Error:[/] {escape(str(exc))}")
        return 1
    parser.print_help()  # pragma: no cover - argparse enforces a command
    return 2


def run() -> None:  # pragma: no cover - console script shim
    raise SystemExit(main(sys.argv[1:]))
