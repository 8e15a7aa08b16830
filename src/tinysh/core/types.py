"""Shared core dataclasses and enums."""

from __future__ import annotations

import os
import signal
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

INTERRUPT_SIGNALS = frozenset({signal.SIGINT, signal.SIGQUIT})


class Classification(str, Enum):
    """Special feature found in an argument vector."""

    PLAIN = "plain"
    APPEND = ">>"
    OVERWRITE = ">"
    PIPE = "|"

    @property
    def is_redirect(self) -> bool:
        return self in (Classification.APPEND, Classification.OVERWRITE)


MARKERS: dict[str, Classification] = {
    Classification.APPEND.value: Classification.APPEND,
    Classification.OVERWRITE.value: Classification.OVERWRITE,
    Classification.PIPE.value: Classification.PIPE,
}


@dataclass(frozen=True)
class SegmentPair:
    """The two segments on either side of a marker."""

    head: tuple[str, ...]
    tail: tuple[str, ...]


@dataclass(frozen=True)
class Redirect:
    """Output redirection of one stage."""

    path: str
    mode: Classification  # APPEND|OVERWRITE

    @property
    def flags(self) -> int:
        extra = os.O_APPEND if self.mode is Classification.APPEND else os.O_TRUNC
        return os.O_CREAT | os.O_WRONLY | extra


@dataclass(frozen=True)
class Stage:
    """One command of a chain with its optional output redirection."""

    argv: tuple[str, ...]
    redirect: Optional[Redirect] = None

    @property
    def name(self) -> str:
        return self.argv[0]

    def describe(self) -> str:
        text = " ".join(self.argv)
        if self.redirect is not None:
            text = f"{text} {self.redirect.mode.value} {self.redirect.path}"
        return text


@dataclass(frozen=True)
class Chain:
    """Stages connected by pipes, head first."""

    stages: tuple[Stage, ...] = field(default_factory=tuple)


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    NONZERO_EXIT = "nonzero_exit"
    SIGNALED = "signaled"


class DispatchStatus(str, Enum):
    """What the interactive loop learns about a command."""

    SUCCESS = "success"
    FAILURE = "failure"
    INTERRUPTED = "interrupted"


@dataclass(frozen=True)
class TerminationOutcome:
    """How a reaped child terminated."""

    kind: OutcomeKind
    exit_code: Optional[int] = None
    signal: Optional[int] = None

    @classmethod
    def from_wait_status(cls, status: int) -> TerminationOutcome:
        if os.WIFSIGNALED(status):
            return cls(OutcomeKind.SIGNALED, signal=os.WTERMSIG(status))
        code = os.WEXITSTATUS(status)
        if code == 0:
            return cls(OutcomeKind.SUCCESS, exit_code=0)
        return cls(OutcomeKind.NONZERO_EXIT, exit_code=code)

    @classmethod
    def success(cls) -> TerminationOutcome:
        return cls(OutcomeKind.SUCCESS, exit_code=0)

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def interrupted(self) -> bool:
        return self.kind is OutcomeKind.SIGNALED and self.signal in INTERRUPT_SIGNALS

    @property
    def status(self) -> DispatchStatus:
        if self.succeeded:
            return DispatchStatus.SUCCESS
        if self.interrupted:
            return DispatchStatus.INTERRUPTED
        return DispatchStatus.FAILURE

    def describe(self) -> str:
        if self.kind is OutcomeKind.SIGNALED:
            return f"killed by signal {self.signal}"
        return f"exit={self.exit_code}"
