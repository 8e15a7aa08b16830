from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from loguru import logger

from tinysh import logging_utils
from tinysh.core import ExecutionContext

FD_DIR = Path("/proc/self/fd")


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(logging_utils, "_CONFIGURED", None)
    yield
    logger.remove()


@pytest.fixture
def context() -> ExecutionContext:
    return ExecutionContext()


@pytest.fixture
def shell_logging() -> None:
    """Send loguru output to the stderr that is current for this test."""
    logging_utils.configure_logging(profile="shell", level="INFO")


@pytest.fixture
def open_fds() -> Callable[[], set[str]]:
    """Snapshot the names of this process's open descriptors."""
    if not FD_DIR.is_dir():
        pytest.skip("descriptor table introspection needs /proc")

    def snapshot() -> set[str]:
        return set(os.listdir(FD_DIR))

    return snapshot
