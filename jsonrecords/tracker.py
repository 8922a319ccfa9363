"""
Depth Tracker - Counts open arrays and objects in the event stream.

The tracker is bookkeeping only. It trusts the tokenizer to deliver
balanced structure and does not validate nesting, so a stray end event
can drive a counter below zero.
"""

from typing import NamedTuple, Optional

from .events import Event, ParseEvent


class Depth(NamedTuple):
    """Snapshot of both depth counters."""

    array: int
    object: int


class DepthTracker:
    """
    Tracks array depth, object depth and the most recent key name.

    Every event pulled from the tokenizer is observed exactly once.
    The top-level wrapper array counts as one open array.
    """

    def __init__(self):
        self._array_depth: int = 0
        self._object_depth: int = 0
        self._key: Optional[str] = None

    @property
    def array_depth(self) -> int:
        """Number of currently open arrays."""
        return self._array_depth

    @property
    def object_depth(self) -> int:
        """Number of currently open objects."""
        return self._object_depth

    @property
    def key(self) -> Optional[str]:
        """The most recently seen key name."""
        return self._key

    @property
    def depth(self) -> Depth:
        return Depth(self._array_depth, self._object_depth)

    def observe(self, event: ParseEvent) -> None:
        """Update the counters for one event."""
        kind = event.kind
        if kind is Event.START_ARRAY:
            self._array_depth += 1
        elif kind is Event.END_ARRAY:
            self._array_depth -= 1
        elif kind is Event.START_OBJECT:
            self._object_depth += 1
        elif kind is Event.END_OBJECT:
            self._object_depth -= 1
        elif kind is Event.KEY_NAME:
            self._key = event.value

    def __repr__(self) -> str:
        return f"DepthTracker(array={self._array_depth}, object={self._object_depth})"
