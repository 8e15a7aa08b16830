"""Turn a command line into a bounded chain of stages."""

from __future__ import annotations

from collections.abc import Sequence

from tinysh.core.classifier import locate_marker, split
from tinysh.core.types import Chain, Classification, Redirect, Stage
from tinysh.errors import ChainError


def build_chain(cmd: Sequence[str], max_stages: int = 2) -> Chain:
    """Split ``cmd`` at every marker until the residual tail is plain.

    A redirection consumes one token of its tail as the destination. What
    follows the destination must be empty or start with another marker,
    which is classified again.
    """

    if not cmd:
        raise ChainError("Empty command")

    stages: list[Stage] = []
    argv: tuple[str, ...] | None = None
    redirect: Redirect | None = None
    rest: tuple[str, ...] = tuple(cmd)

    while True:
        located = locate_marker(rest)
        if located is None:
            if argv is None:
                argv = rest
            elif rest:
                raise ChainError(f"Unexpected argument after redirection target: {rest[0]}")
            stages.append(_stage(argv, redirect, max_stages, len(stages)))
            return Chain(tuple(stages))

        kind, index = located
        segments = split(rest, index)
        if argv is None:
            argv = segments.head
        elif segments.head:
            raise ChainError(f"Unexpected argument after redirection target: {segments.head[0]}")

        if kind is Classification.PIPE:
            stages.append(_stage(argv, redirect, max_stages, len(stages)))
            if not segments.tail:
                raise ChainError("Missing command after |")
            argv, redirect, rest = None, None, segments.tail
            continue

        if redirect is not None:
            raise ChainError(f"Output of {argv[0] if argv else '?'} is already redirected to {redirect.path}")
        if not segments.tail:
            raise ChainError(f"Missing file name after {kind.value}")
        redirect = Redirect(path=segments.tail[0], mode=kind)
        rest = segments.tail[1:]


def _stage(argv: tuple[str, ...], redirect: Redirect | None, max_stages: int, built: int) -> Stage:
    if not argv:
        raise ChainError("Missing command before special feature")
    if built >= max_stages:
        raise ChainError(f"Pipelines are limited to {max_stages} commands")
    return Stage(argv=argv, redirect=redirect)
