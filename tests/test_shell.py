from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from tinysh.core import DispatchStatus, ExecutionContext
from tinysh.shell import Shell, tokenize


@dataclass
class _FakeRenderer:
    lines: list[str] = field(default_factory=list)
    info_messages: list[str] = field(default_factory=list)
    error_messages: list[str] = field(default_factory=list)
    warning_messages: list[str] = field(default_factory=list)
    statuses: list[bool] = field(default_factory=list)
    read_error: OSError | None = None

    def info(self, message: str) -> None:
        self.info_messages.append(message)

    def error(self, message: str) -> None:
        self.error_messages.append(message)

    def warning(self, message: str) -> None:
        self.warning_messages.append(message)

    def command_status(self, succeeded: bool) -> None:
        self.statuses.append(succeeded)

    def get_user_input(self, _prompt: str) -> str:
        if self.lines:
            return self.lines.pop(0)
        if self.read_error is not None:
            raise self.read_error
        raise EOFError


def _shell(*lines: str, verbose: bool = False) -> tuple[Shell, _FakeRenderer]:
    renderer = _FakeRenderer(lines=list(lines))
    return Shell(ExecutionContext(verbose=verbose), renderer), renderer  # type: ignore[arg-type]


def test_tokenize_splits_on_whitespace_only() -> None:
    assert tokenize("  ls\t-la  >  'out file'\n") == ["ls", "-la", ">", "'out", "file'"]


def test_exit_ends_loop_cleanly() -> None:
    shell, renderer = _shell("exit", "echo never")

    assert shell.run() == 0
    assert renderer.lines == ["echo never"]
    assert renderer.info_messages[-1] == "Exiting now. Thanks for using tinysh!"


def test_end_of_input_exits_with_success() -> None:
    shell, _ = _shell("", "   ")

    assert shell.run() == 0


def test_read_error_fails_the_loop() -> None:
    shell, renderer = _shell()
    renderer.read_error = OSError(5, "Input/output error")

    assert shell.run() == 1


def test_verbose_and_brief_toggle_context() -> None:
    shell, renderer = _shell()

    shell.execute_line("verbose")
    assert shell.context.verbose is True
    shell.execute_line("brief")
    assert shell.context.verbose is False
    assert renderer.statuses == [True]


def test_cd_without_argument_goes_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(Path.cwd())
    monkeypatch.setenv("HOME", str(tmp_path))
    shell, _ = _shell()

    assert shell.execute_line("cd") is DispatchStatus.SUCCESS
    assert Path.cwd() == tmp_path.resolve()


def test_cd_errors(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("HOME", raising=False)
    shell, renderer = _shell()

    assert shell.execute_line("cd") is DispatchStatus.FAILURE
    assert shell.execute_line("cd a b") is DispatchStatus.FAILURE
    assert shell.execute_line(f"cd {tmp_path / 'missing'}") is DispatchStatus.FAILURE
    assert len(renderer.error_messages) == 3
    assert Path.cwd() == tmp_path


def test_pwd_prints_and_rejects_arguments(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    shell, renderer = _shell()

    assert shell.execute_line("pwd") is DispatchStatus.SUCCESS
    assert renderer.info_messages == [os.getcwd()]
    assert shell.execute_line("pwd -x") is DispatchStatus.FAILURE


def test_special_pwd_is_dispatched(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    shell, _ = _shell()

    assert shell.execute_line("pwd > where") is DispatchStatus.SUCCESS
    assert (tmp_path / "where").read_text(encoding="utf-8") == f"{os.getcwd()}\n"


def test_commands_are_dispatched_and_summarized_in_verbose_mode(tmp_path: Path, capfd) -> None:
    target = tmp_path / "out"
    shell, renderer = _shell(verbose=True)

    assert shell.execute_line(f"echo hi > {target}") is DispatchStatus.SUCCESS
    assert shell.execute_line("false") is DispatchStatus.FAILURE
    assert target.read_text(encoding="utf-8") == "hi\n"
    assert renderer.statuses == [True, False]


def test_interruptions_are_reported(tmp_path: Path) -> None:
    script = tmp_path / "interrupt-self"
    script.write_text("#!/bin/sh\nkill -INT $$\n", encoding="utf-8")
    script.chmod(0o755)
    shell, renderer = _shell()

    assert shell.execute_line(str(script)) is DispatchStatus.INTERRUPTED
    assert renderer.warning_messages == ["Command was interrupted by the user."]


def test_help_lists_builtins() -> None:
    shell, renderer = _shell()

    shell.execute_line("help")

    assert "cd [dir]" in renderer.info_messages[0]
