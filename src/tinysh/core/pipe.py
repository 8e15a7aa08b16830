"""Pipe engine: run a chain of stages connected by pipes."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from tinysh.core.chain import build_chain
from tinysh.core.context import ExecutionContext
from tinysh.core.descriptors import STDIN_FILENO, bound_to, close_fd, open_pipe
from tinysh.core.launcher import launch, replace_image
from tinysh.core.redirect import run_redirected
from tinysh.core.trace import TraceChannel
from tinysh.core.types import Chain, OutcomeKind, Stage, TerminationOutcome
from tinysh.errors import LaunchError


def pipe_run(
    head: Sequence[str],
    tail: Sequence[str],
    context: ExecutionContext,
    trace: Optional[TraceChannel] = None,
) -> TerminationOutcome:
    """Pipe the output of ``head`` into ``tail``.

    The head runs in a child; the tail runs in the calling process, whose
    image is replaced unless the tail is itself redirected. Only call this
    from a process that may disappear.
    """
    trace = trace or TraceChannel(context.verbose)
    return execute_chain(build_chain((*head, "|", *tail), context.max_stages), context, trace)


def execute_chain(chain: Chain, context: ExecutionContext, trace: TraceChannel) -> TerminationOutcome:
    """Run every stage of ``chain`` in order.

    Each stage but the last runs to completion in its own child, writing
    into a fresh pipe, before the next stage is bound to the read end. The
    last stage runs in this process. A plain last stage replaces this
    process image, so a returned outcome means it could not be executed.
    """
    *heads, last = chain.stages
    if heads:
        trace.emit(f"Piping: {' --> '.join(stage.name for stage in chain.stages)}", 1)

    read_end: Optional[int] = None
    for stage in heads:
        read_end = _run_head(stage, read_end, context, trace)
    return _run_tail(last, read_end, context, trace)


def _run_head(stage: Stage, stdin: Optional[int], context: ExecutionContext, trace: TraceChannel) -> int:
    """Run ``stage`` feeding a new pipe and return the pipe's read end.

    ``stdin`` is consumed. The write end is closed here before waiting, so
    the next stage sees end of input once the head has exited.
    """
    try:
        read_end, write_end = open_pipe(context.pipe_buffer_size)
    except LaunchError:
        if stdin is not None:
            close_fd(stdin)
        raise
    trace.emit("Created a pipe for interprocess communication.", 1)

    try:
        if stage.redirect is not None:
            # Output goes to the file; the next stage reads end of input.
            close_fd(write_end)
            outcome = run_redirected(stage, context, trace, stdin=stdin, closes=(read_end,))
        else:
            trace.emit(f"Executing the head command: {stage.name}", 1)
            outcome = launch(stage.argv, context, trace, stdin=stdin, stdout=write_end, closes=(read_end,))
    except Exception:
        close_fd(read_end)
        raise
    trace.emit(f"Head command {stage.name} finished ({outcome.describe()}).", 1)
    return read_end


def _run_tail(
    stage: Stage, stdin: Optional[int], context: ExecutionContext, trace: TraceChannel
) -> TerminationOutcome:
    if stdin is None:
        return _run_stage_here(stage, context, trace)
    with bound_to(stdin, STDIN_FILENO):
        trace.emit("Duplicated the read end of the pipe as stdin and closed both ends.", 1)
        trace.emit(f"Executing the tail command: {stage.name}", 1)
        return _run_stage_here(stage, context, trace)


def _run_stage_here(stage: Stage, context: ExecutionContext, trace: TraceChannel) -> TerminationOutcome:
    if stage.redirect is not None:
        return run_redirected(stage, context, trace)
    trace.emit(f"Executing {stage.name}...", 1)
    trace.emit("Program Output:")
    status = replace_image(stage.argv, context.search_path, trace)
    return TerminationOutcome(OutcomeKind.NONZERO_EXIT, exit_code=status)
