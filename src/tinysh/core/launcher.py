"""Process launching: fork, bind descriptors, replace the image, reap."""

from __future__ import annotations

import contextlib
import errno
import os
import signal
import sys
from collections.abc import Callable, Iterator, Sequence
from typing import NoReturn, Optional

from loguru import logger

from tinysh.core.context import ExecutionContext
from tinysh.core.descriptors import STDIN_FILENO, STDOUT_FILENO, DescriptorBinding, close_fd
from tinysh.core.trace import TraceChannel
from tinysh.core.types import INTERRUPT_SIGNALS, TerminationOutcome
from tinysh.errors import LaunchError, TinyshError

COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126
CHILD_FAILURE = 1

# Python ignores these at startup; exec'd programs expect the defaults.
_DEFAULT_SIGNALS = (*INTERRUPT_SIGNALS, signal.SIGPIPE, signal.SIGXFSZ)

ChildBody = Callable[[], int]


@contextlib.contextmanager
def interrupts_ignored() -> Iterator[None]:
    """Ignore SIGINT and SIGQUIT in this process for the block.

    Children created inside the block restore the default dispositions, so
    an interrupt from the terminal ends the foreground child while the
    waiting parent survives. Must be used from the main thread.
    """
    previous = {sig: signal.signal(sig, signal.SIG_IGN) for sig in INTERRUPT_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def spawn(
    body: ChildBody,
    *,
    bindings: Sequence[DescriptorBinding] = (),
    closes: Sequence[int] = (),
    trace: Optional[TraceChannel] = None,
) -> TerminationOutcome:
    """Run ``body`` in a new child and wait for it.

    The child applies ``bindings``, closes ``closes`` and runs ``body``,
    exiting with its return value (1 if it raises). It never returns into
    the caller's code. The parent closes every bound descriptor, on failure
    too, then reaps the child exactly once.
    """
    trace = trace or TraceChannel()
    _flush_stdio(trace)
    try:
        try:
            pid = os.fork()
        except OSError as exc:
            raise LaunchError(f"Unable to create a child process: {exc.strerror}") from exc
        if pid == 0:
            _run_child(body, bindings, closes, trace)
    finally:
        # Only the parent gets here; the child always ends in os._exit.
        for binding in bindings:
            close_fd(binding.fd)

    trace.emit("Parent:", 1)
    trace.emit("Waiting for child process to terminate.", 2)
    return wait_for(pid)


def launch(
    argv: Sequence[str],
    context: ExecutionContext,
    trace: Optional[TraceChannel] = None,
    *,
    stdin: Optional[int] = None,
    stdout: Optional[int] = None,
    closes: Sequence[int] = (),
) -> TerminationOutcome:
    """Run one argument vector in a child with optional stream overrides.

    ``stdin`` and ``stdout`` are consumed: the child duplicates them onto its
    standard streams and the parent closes its copies.
    """
    trace = trace or TraceChannel(context.verbose)
    bindings: list[DescriptorBinding] = []
    if stdout is not None:
        bindings.append(DescriptorBinding(stdout, STDOUT_FILENO))
    if stdin is not None:
        bindings.append(DescriptorBinding(stdin, STDIN_FILENO))

    trace.emit(f"Creating a child process for the command: {argv[0]}", 1)
    outcome = spawn(
        lambda: replace_image(argv, context.search_path, trace),
        bindings=bindings,
        closes=closes,
        trace=trace,
    )
    logger.debug("launch.done argv={} outcome={}", list(argv), outcome.describe())
    return outcome


def wait_for(pid: int) -> TerminationOutcome:
    """Block until ``pid`` terminates and translate its status."""
    try:
        _, status = os.waitpid(pid, 0)
    except ChildProcessError as exc:
        raise LaunchError(f"Unable to wait for process {pid}: {exc.strerror}") from exc
    return TerminationOutcome.from_wait_status(status)


def replace_image(argv: Sequence[str], search_path: Sequence[str] = (), trace: Optional[TraceChannel] = None) -> int:
    """Replace the current process image with ``argv``.

    Without a search path the environment's ``PATH`` lookup is used. With
    one, each prefix is concatenated with the command name as is and tried
    in order. Returns only when nothing could be executed, with the status
    the process should exit with.
    """
    name = argv[0]
    args = list(argv)
    if trace is not None:
        if search_path:
            trace.emit(f"Searching the provided paths for the command: {name}", 2)
        trace.release()
        _flush_stdio(trace)

    if not search_path or "/" in name:
        try:
            os.execvp(name, args)
        except OSError as exc:
            return _exec_failed(name, exc)

    refused: Optional[OSError] = None
    for prefix in search_path:
        try:
            os.execv(prefix + name, args)
        except OSError as exc:
            if exc.errno not in (errno.ENOENT, errno.ENOTDIR) and refused is None:
                refused = exc
    return _exec_failed(name, refused)


def restore_default_signals() -> None:
    for sig in _DEFAULT_SIGNALS:
        signal.signal(sig, signal.SIG_DFL)


def terminate(status: int) -> NoReturn:
    """Leave the process now, skipping interpreter cleanup."""
    with contextlib.suppress(OSError, ValueError):
        sys.stdout.flush()
    with contextlib.suppress(OSError, ValueError):
        sys.stderr.flush()
    os._exit(status)


def _run_child(
    body: ChildBody,
    bindings: Sequence[DescriptorBinding],
    closes: Sequence[int],
    trace: TraceChannel,
) -> NoReturn:
    status = CHILD_FAILURE
    try:
        restore_default_signals()
        trace.emit("Child:", 1)
        for fd in closes:
            os.close(fd)
        if bindings:
            trace.capture()
        for binding in bindings:
            binding.apply()
            trace.emit(f"Duplicated descriptor {binding.fd} as {binding.stream_name}.", 2)
        status = body()
    except TinyshError as exc:
        logger.error("{}", exc)
    except Exception:
        logger.exception("launch.child.error pid={}", os.getpid())
    finally:
        trace.release()
        terminate(status)


def _exec_failed(name: str, exc: Optional[OSError]) -> int:
    if exc is None or exc.errno in (errno.ENOENT, errno.ENOTDIR):
        logger.error("{}: command not found", name)
        return COMMAND_NOT_FOUND
    logger.error("{}: {}", name, exc.strerror)
    return COMMAND_NOT_EXECUTABLE


def _flush_stdio(trace: TraceChannel) -> None:
    trace.flush()
    sys.stderr.flush()
