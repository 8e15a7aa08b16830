"""Top-level dispatch: every command runs inside a disposable child."""

from __future__ import annotations

import os
import signal
from collections.abc import Sequence

from loguru import logger

from tinysh.core.chain import build_chain
from tinysh.core.context import ExecutionContext
from tinysh.core.launcher import interrupts_ignored, spawn
from tinysh.core.pipe import execute_chain
from tinysh.core.trace import TraceChannel
from tinysh.core.types import DispatchStatus, TerminationOutcome
from tinysh.errors import LaunchError


def dispatch(cmd: Sequence[str], context: ExecutionContext) -> DispatchStatus:
    """Execute one tokenized command line and report how it ended.

    Classification and execution happen in a fresh child, so a pipeline
    tail that replaces its process image never touches the caller. The
    caller ignores terminal interrupts while it waits; the child does not.
    """
    if not cmd:
        return DispatchStatus.SUCCESS

    argv = tuple(cmd)
    with TraceChannel(context.verbose) as trace:
        trace.emit(f"Creating a child process to run the command: {argv[0]}")
        with interrupts_ignored():
            try:
                outcome = spawn(lambda: _contain(argv, context, trace), trace=trace)
            except LaunchError as exc:
                logger.error("{}", exc)
                return DispatchStatus.FAILURE

    logger.debug("dispatch.done argv={} outcome={}", list(argv), outcome.describe())
    return outcome.status


def _contain(argv: tuple[str, ...], context: ExecutionContext, trace: TraceChannel) -> int:
    chain = build_chain(argv, context.max_stages)
    logger.debug("dispatch.chain stages={}", [stage.describe() for stage in chain.stages])
    outcome = execute_chain(chain, context, trace)
    return _exit_status(outcome, trace)


def _exit_status(outcome: TerminationOutcome, trace: TraceChannel) -> int:
    """Exit status that carries ``outcome`` to the dispatching parent."""
    if outcome.succeeded:
        return 0
    if outcome.signal is not None:
        if outcome.interrupted:
            # Die the same way so the parent sees the interruption.
            trace.flush()
            signal.signal(outcome.signal, signal.SIG_DFL)
            os.kill(os.getpid(), outcome.signal)
        return 128 + outcome.signal
    return outcome.exit_code or 1
