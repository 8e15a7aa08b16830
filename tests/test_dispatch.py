from __future__ import annotations

import errno
import os
from pathlib import Path

import pytest

from tinysh import logging_utils
from tinysh.core import DispatchStatus, ExecutionContext, dispatch


def test_plain_command_succeeds(capfd, context: ExecutionContext) -> None:
    assert dispatch(["echo", "hello"], context) is DispatchStatus.SUCCESS
    assert capfd.readouterr().out == "hello\n"


def test_empty_command_is_a_no_op(context: ExecutionContext) -> None:
    assert dispatch([], context) is DispatchStatus.SUCCESS


def test_nonzero_exit_is_failure(context: ExecutionContext) -> None:
    assert dispatch(["sh", "-c", "exit 3"], context) is DispatchStatus.FAILURE


def test_missing_command_fails_and_caller_stays_usable(capfd, context: ExecutionContext, shell_logging) -> None:
    assert dispatch(["tinysh-no-such-command"], context) is DispatchStatus.FAILURE
    assert "tinysh-no-such-command: command not found" in capfd.readouterr().err

    assert dispatch(["true"], context) is DispatchStatus.SUCCESS


def test_malformed_line_fails_inside_the_child(capfd, context: ExecutionContext, shell_logging) -> None:
    assert dispatch(["echo", "x", ">"], context) is DispatchStatus.FAILURE
    assert "Missing file name after >" in capfd.readouterr().err


def test_interrupt_is_distinct_from_nonzero_exit(context: ExecutionContext) -> None:
    assert dispatch(["sh", "-c", "kill -INT $$"], context) is DispatchStatus.INTERRUPTED
    assert dispatch(["sh", "-c", "kill -TERM $$"], context) is DispatchStatus.FAILURE


def test_interrupted_pipe_tail_and_redirected_head(tmp_path: Path, context: ExecutionContext) -> None:
    assert dispatch(["echo", "x", "|", "sh", "-c", "kill -INT $$"], context) is DispatchStatus.INTERRUPTED
    target = str(tmp_path / "out")
    assert dispatch(["sh", "-c", "kill -INT $$", ">", target], context) is DispatchStatus.INTERRUPTED


def test_dispatch_does_not_change_caller_streams(tmp_path: Path, context: ExecutionContext, open_fds) -> None:
    before = open_fds()
    stdin_stat = os.fstat(0)
    stdout_stat = os.fstat(1)

    dispatch(["echo", "x", "|", "cat"], context)
    dispatch(["echo", "x", ">", str(tmp_path / "f")], context)

    assert open_fds() == before
    assert os.fstat(0).st_ino == stdin_stat.st_ino
    assert os.fstat(1).st_ino == stdout_stat.st_ino


def test_fork_failure_is_reported_as_failure(
    capfd, context: ExecutionContext, monkeypatch: pytest.MonkeyPatch, shell_logging
) -> None:
    calls = []

    def refuse_fork() -> int:
        calls.append(1)
        raise OSError(errno.EAGAIN, os.strerror(errno.EAGAIN))

    monkeypatch.setattr(os, "fork", refuse_fork)

    assert dispatch(["echo", "x"], context) is DispatchStatus.FAILURE
    assert len(calls) == 1
    assert "Unable to create a child process" in capfd.readouterr().err


def test_debug_log_describes_each_stage(tmp_path: Path, capfd, context: ExecutionContext) -> None:
    target = tmp_path / "out"
    logging_utils.configure_logging(profile="shell", level="DEBUG")

    assert dispatch(["echo", "hi", ">", str(target)], context) is DispatchStatus.SUCCESS

    assert f"echo hi > {target}" in capfd.readouterr().err
