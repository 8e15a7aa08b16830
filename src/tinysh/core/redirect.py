"""Output redirection engine."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from tinysh.core.chain import build_chain
from tinysh.core.context import ExecutionContext
from tinysh.core.descriptors import close_fd, open_target
from tinysh.core.launcher import launch
from tinysh.core.trace import TraceChannel
from tinysh.core.types import Classification, Stage, TerminationOutcome
from tinysh.errors import ChainError, RedirectionError

_DESCRIPTIONS = {
    Classification.OVERWRITE: ("Overwriting the output of {} onto {}", "overwrite"),
    Classification.APPEND: ("Appending the output of {} onto the end of {}", "append"),
}


def redirect(
    head: Sequence[str],
    tail: Sequence[str],
    mode: Classification,
    context: ExecutionContext,
    trace: Optional[TraceChannel] = None,
) -> TerminationOutcome:
    """Run ``head`` with its output sent to the file named by ``tail[0]``.

    When the tail goes on past the file name with another marker, the line
    is executed as a chain. A chain may replace the calling process, so
    that case only belongs in a disposable child.
    """
    if not mode.is_redirect:
        raise ChainError(f"Not an output redirection: {mode.value}")
    trace = trace or TraceChannel(context.verbose)
    chain = build_chain((*head, mode.value, *tail), context.max_stages)
    if len(chain.stages) == 1:
        return run_redirected(chain.stages[0], context, trace)

    from tinysh.core.pipe import execute_chain

    return execute_chain(chain, context, trace)


def run_redirected(
    stage: Stage,
    context: ExecutionContext,
    trace: TraceChannel,
    *,
    stdin: Optional[int] = None,
    closes: Sequence[int] = (),
) -> TerminationOutcome:
    """Run one stage in a child whose stdout is the stage's target file.

    The target is opened here, in the orchestrating process, and handed to
    the child; ``stdin`` is consumed as well. Both are closed in this
    process on every path.
    """
    if stage.redirect is None:
        raise ChainError(f"{stage.name} has no output redirection")
    template, verb = _DESCRIPTIONS[stage.redirect.mode]
    trace.emit(template.format(stage.name, stage.redirect.path), 1)
    try:
        fd = open_target(stage.redirect)
    except RedirectionError:
        if stdin is not None:
            close_fd(stdin)
        raise
    trace.emit(f"Opened {stage.redirect.path} for writing ({verb}).", 1)
    return launch(stage.argv, context, trace, stdin=stdin, stdout=fd, closes=closes)
