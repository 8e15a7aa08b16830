"""Immutable execution context handed to the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tinysh.config import Settings


@dataclass(frozen=True)
class ExecutionContext:
    """Everything one dispatch reads; never mutated while it runs."""

    search_path: tuple[str, ...] = ()
    verbose: bool = False
    max_stages: int = 2
    pipe_buffer_size: int = 0

    @classmethod
    def from_settings(cls, settings: Settings, search_path: Optional[tuple[str, ...]] = None) -> ExecutionContext:
        return cls(
            search_path=search_path or (),
            verbose=settings.verbose,
            max_stages=settings.max_stages,
            pipe_buffer_size=settings.pipe_buffer_size,
        )

    def with_verbose(self, verbose: bool) -> ExecutionContext:
        return replace(self, verbose=verbose)
