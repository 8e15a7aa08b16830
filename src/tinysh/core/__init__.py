"""Process orchestration core."""

from .chain import build_chain
from .classifier import classify, locate_marker, split
from .context import ExecutionContext
from .dispatch import dispatch
from .launcher import launch, spawn
from .pipe import pipe_run
from .redirect import redirect
from .trace import TraceChannel
from .types import Chain, Classification, DispatchStatus, OutcomeKind, Redirect, SegmentPair, Stage, TerminationOutcome

__all__ = [
    "Chain",
    "Classification",
    "DispatchStatus",
    "ExecutionContext",
    "OutcomeKind",
    "Redirect",
    "SegmentPair",
    "Stage",
    "TerminationOutcome",
    "TraceChannel",
    "build_chain",
    "classify",
    "dispatch",
    "launch",
    "locate_marker",
    "pipe_run",
    "redirect",
    "spawn",
    "split",
]
