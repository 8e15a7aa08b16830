"""Verbose progress output that survives stdout redirection."""

from __future__ import annotations

import os
import sys
from typing import IO, Optional

from rich.console import Console

STDOUT_FILENO = 1
INDENT = "  "


class TraceChannel:
    """Side channel for verbose traces.

    Traces go to standard output until :meth:`capture` duplicates the live
    stdout descriptor; from then on they go to the duplicate, which keeps
    pointing at the terminal after fd 1 has been rebound. Capture is
    idempotent and the duplicate is closed by :meth:`release` or on leaving
    the ``with`` block. A disabled channel never touches descriptors.
    """

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._stream: Optional[IO[str]] = None
        self._console: Optional[Console] = None

    @property
    def captured(self) -> bool:
        return self._stream is not None

    def capture(self) -> None:
        """Duplicate the current stdout descriptor, once."""
        if not self.enabled or self.captured:
            return
        fd = os.dup(STDOUT_FILENO)
        self._stream = os.fdopen(fd, "w", buffering=1, encoding="utf-8")
        self._console = Console(file=self._stream, highlight=False, markup=False, soft_wrap=True)

    def emit(self, message: str, depth: int = 0) -> None:
        if not self.enabled:
            return
        if self._console is None:
            self._console = Console(highlight=False, markup=False, soft_wrap=True)
        self._console.print(f"{INDENT * depth}{message}")

    def release(self) -> None:
        """Close the duplicated descriptor if this process holds one."""
        stream, self._stream = self._stream, None
        self._console = None
        if stream is not None:
            stream.close()

    def flush(self) -> None:
        if self._stream is not None:
            self._stream.flush()
        sys.stdout.flush()

    def __enter__(self) -> TraceChannel:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
