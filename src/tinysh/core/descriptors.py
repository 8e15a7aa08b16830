"""Descriptor bindings and the descriptors the core opens."""

from __future__ import annotations

import fcntl
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger

from tinysh.core.types import Redirect
from tinysh.errors import LaunchError, RedirectionError

STDIN_FILENO = 0
STDOUT_FILENO = 1
CREATE_MODE = 0o666


@dataclass(frozen=True)
class DescriptorBinding:
    """Make ``fd`` the process's ``target`` stream.

    Applying the binding consumes ``fd``: it is duplicated onto ``target``
    and then closed, so only the standard stream remains.
    """

    fd: int
    target: int

    def apply(self) -> None:
        if self.fd == self.target:
            os.set_inheritable(self.target, True)
            return
        os.dup2(self.fd, self.target)
        os.close(self.fd)

    @property
    def stream_name(self) -> str:
        return {STDIN_FILENO: "stdin", STDOUT_FILENO: "stdout"}.get(self.target, f"fd {self.target}")


@contextmanager
def bound_to(fd: int, target: int) -> Iterator[None]:
    """Bind ``fd`` as ``target`` for the duration of the block.

    ``fd`` is consumed. The previous ``target`` is restored on every exit
    path unless the process image is replaced first.
    """
    saved = os.dup(target)
    try:
        DescriptorBinding(fd, target).apply()
        yield
    finally:
        os.dup2(saved, target)
        os.close(saved)


def close_fd(fd: int) -> None:
    try:
        os.close(fd)
    except OSError as exc:
        logger.warning("descriptor.close.error fd={} error={}", fd, exc.strerror)


def open_target(redirect: Redirect) -> int:
    """Open a redirection destination, creating it when missing."""
    try:
        return os.open(redirect.path, redirect.flags, CREATE_MODE)
    except OSError as exc:
        raise RedirectionError(f"{redirect.path}: {exc.strerror}") from exc


def open_pipe(buffer_size: int = 0) -> tuple[int, int]:
    """Create a pipe, returning ``(read_end, write_end)``."""
    try:
        read_end, write_end = os.pipe()
    except OSError as exc:
        raise LaunchError(f"Unable to create pipe: {exc.strerror}") from exc
    set_size = getattr(fcntl, "F_SETPIPE_SZ", None)
    if buffer_size and set_size is not None:
        try:
            fcntl.fcntl(write_end, set_size, buffer_size)
        except OSError as exc:
            logger.debug("pipe.resize.skipped size={} error={}", buffer_size, exc.strerror)
    return read_end, write_end
