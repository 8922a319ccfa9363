"""
Lookahead Cursor - A two-event window over the tokenizer.

The splitter decides whether the stream has reached the end of the array
before it re-emits anything, so it needs to see the event that follows the
one it is about to act on.
"""

from typing import NamedTuple, Optional

from .events import ParseEvent
from .tokenizer import Tokenizer
from .tracker import DepthTracker


class Slot(NamedTuple):
    """A window event and the array depth right after it was counted."""

    event: ParseEvent
    array_depth: int


class LookaheadCursor:
    """
    Holds the current and next events of the stream.

    Both slots are refilled by advance(). Either may be None when the
    tokenizer runs dry, and callers must cope with that.
    """

    def __init__(self, tokenizer: Tokenizer, tracker: DepthTracker):
        self.tokenizer = tokenizer
        self.tracker = tracker
        self._current: Optional[Slot] = None
        self._next: Optional[Slot] = None

    @property
    def current(self) -> Optional[Slot]:
        return self._current

    @property
    def next(self) -> Optional[Slot]:
        return self._next

    def _pull(self) -> Optional[Slot]:
        if not self.tokenizer.has_next():
            return None
        event = self.tokenizer.next_event()
        self.tracker.observe(event)
        return Slot(event, self.tracker.array_depth)

    def advance(self) -> None:
        """Refill the window with the next two events."""
        self._current = self._pull()
        self._next = self._pull()

    def step(self) -> Optional[ParseEvent]:
        """Pull a single event past the window, or None at end of stream."""
        slot = self._pull()
        return slot.event if slot else None
