"""Special feature classification and segment splitting."""

from __future__ import annotations

from collections.abc import Sequence

from tinysh.core.types import MARKERS, Classification, SegmentPair
from tinysh.errors import SplitError


def locate_marker(cmd: Sequence[str]) -> tuple[Classification, int] | None:
    """Find the leftmost marker token and its kind.

    The first marker wins whatever its kind, so ``a > b | c`` is an
    overwrite at index 1.
    """

    for index, token in enumerate(cmd):
        kind = MARKERS.get(token)
        if kind is not None:
            return kind, index
    return None


def classify(cmd: Sequence[str]) -> Classification:
    """Classify an argument vector by its leftmost marker."""

    located = locate_marker(cmd)
    if located is None:
        return Classification.PLAIN
    return located[0]


def split(cmd: Sequence[str], marker_index: int) -> SegmentPair:
    """Split a vector around the marker at ``marker_index``.

    The marker itself belongs to neither segment. Both segments are copies.
    """

    if not 0 <= marker_index < len(cmd) or cmd[marker_index] not in MARKERS:
        raise SplitError(f"No special feature at position {marker_index}")
    return SegmentPair(head=tuple(cmd[:marker_index]), tail=tuple(cmd[marker_index + 1 :]))
