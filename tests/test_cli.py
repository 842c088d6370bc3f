from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console

from fixtures import CORRECT_KEYS, payload_json

from topic_quiz import cli


def make_provider(commands: list[str]):
    iterator = iter(commands)
    return lambda: next(iterator)


def _answer_commands(keys) -> list[str]:
    commands: list[str] = []
    for key in keys:
        commands.extend([key.lower(), "n"])
    return commands[:-1] + ["submit"]


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=120, force_terminal=False)


def test_generate_prints_quiz_json(generator, openai_stub, console) -> None:
    openai_stub.queue_response(payload_json())
    code = cli.main(["generate", "Tides"], console=console, generator=generator)
    assert code == 0
    body = json.loads(console.export_text())
    assert body["quiz"]["topic"] == "Tides"


def test_generate_writes_file(generator, openai_stub, console, tmp_path) -> None:
    openai_stub.queue_response(payload_json())
    out = tmp_path / "quiz.json"
    code = cli.main(
        ["generate", "Tides", "--out", str(out)],
        console=console,
        generator=generator,
    )
    assert code == 0
    saved = json.loads(out.read_text(encoding="utf-8"))
    assert len(saved["questions"]) == 5


def test_generate_reports_unwritable_out(
    generator, openai_stub, console, tmp_path
) -> None:
    openai_stub.queue_response(payload_json())
    out = tmp_path / "missing" / "quiz.json"
    code = cli.main(
        ["generate", "Tides", "--out", str(out)],
        console=console,
        generator=generator,
    )
    assert code == 1
    assert "Could not write quiz file" in console.export_text()
    assert not out.exists()


def test_generate_error_exit_codes(generator, openai_stub, console) -> None:
    assert cli.main(["generate", "  "], console=console, generator=generator) == 2
    openai_stub.queue_response("nope")
    assert cli.main(["generate", "x"], console=console, generator=generator) == 1
    assert "malformed_response" in console.export_text()


def test_take_runs_console_session(quiz, console, tmp_path: Path) -> None:
    path = tmp_path / "quiz.json"
    path.write_text(json.dumps({"quiz": quiz.to_dict()}), encoding="utf-8")
    code = cli.main(
        ["take", str(path), "--no-explain"],
        console=console,
        input_provider=make_provider(_answer_commands(CORRECT_KEYS)),
    )
    assert code == 0
    text = console.export_text()
    assert "5/5" in text
    assert "Because of reason" not in text


def test_take_reports_invalid_file(console, tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"questions": []}', encoding="utf-8")
    assert cli.main(["take", str(path)], console=console) == 1
    assert "question_count" in console.export_text()

    assert cli.main(["take", str(tmp_path / "missing.json")], console=console) == 1
    assert "not found" in console.export_text()


def test_play_supports_retake(generator, openai_stub, console) -> None:
    openai_stub.queue_response(payload_json())
    commands = (
        _answer_commands(CORRECT_KEYS)
        + ["r"]
        + _answer_commands(["D"] * 5)
        + ["q"]
    )
    code = cli.main(
        ["play", "Tides"],
        console=console,
        generator=generator,
        input_provider=make_provider(commands),
    )
    assert code == 0
    text = console.export_text()
    assert "5/5" in text
    assert "1/5" in text
    assert len(openai_stub.calls) == 1


def test_play_new_topic_generates_again(generator, openai_stub, console) -> None:
    openai_stub.queue_response(payload_json())
    openai_stub.queue_response(payload_json())
    commands = (
        _answer_commands(CORRECT_KEYS)
        + ["n", "Glaciers"]
        + ["quit"]
    )
    code = cli.main(
        ["play", "Tides"],
        console=console,
        generator=generator,
        input_provider=make_provider(commands),
    )
    assert code == 1
    assert len(openai_stub.calls) == 2
    assert openai_stub.calls[1]["messages"][1]["content"].endswith("Glaciers")


def test_play_reports_generation_errors(generator, console) -> None:
    code = cli.main(["play", "Tides"], console=console, generator=generator)
    assert code == 1
    assert "Error generating quiz" in console.export_text()


def test_config_errors_are_reported(console, tmp_path: Path) -> None:
    cfg = tmp_path / "bad.toml"
    cfg.write_text("[logging]\ncolour = true\n", encoding="utf-8")
    code = cli.main(["--config", str(cfg), "generate", "x"], console=console)
    assert code == 2
    assert "logging.colour" in console.export_text()


def test_logs_are_written_to_configured_dir(
    generator, openai_stub, console, tmp_path: Path
) -> None:
    log_dir = tmp_path / "logs"
    cfg = tmp_path / "topic-quiz.toml"
    cfg.write_text(f'[logging]\ndir = "{log_dir.as_posix()}"\n', encoding="utf-8")
    openai_stub.queue_response(payload_json())
    cli.main(["--config", str(cfg), "generate", "x"], console=console, generator=generator)
    lines = (log_dir / "topic_quiz.log").read_text(encoding="utf-8").splitlines()
    messages = [json.loads(line)["message"] for line in lines]
    assert "Generated quiz" in messages


def test_version_command(console) -> None:
    assert cli.main(["version"], console=console) == 0
    assert console.export_text().strip()
