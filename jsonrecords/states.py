"""
Splitter States - The record boundary state machine.

The reader is always in one of three states:

- BeforeRecord: the lookahead window describes the boundary before a
  candidate record.
- InRecord: a record is available and its opening events are known.
- Exhausted: the top-level array has closed (terminal).

The boundary decision is a pure function of the window and the depth
counters, so it can be exercised without a tokenizer.
"""

from typing import TYPE_CHECKING, NamedTuple, Optional, Tuple

from .assembler import RecordAssembler
from .cursor import Slot
from .errors import ReaderStateError, RecordAssemblyError
from .events import Event, ParseEvent
from .record import JsonRecord
from .tracker import Depth

if TYPE_CHECKING:
    from .reader import JsonRecordReader


BEFORE_RECORD = "BEFORE_RECORD"
IN_RECORD = "IN_RECORD"
EXHAUSTED = "EXHAUSTED"

# Array depth of the top-level array that wraps every record.
WRAPPER_DEPTH = 1


class Transition(NamedTuple):
    """The state to move to and the window events a new record starts with."""

    state: str
    emit: Tuple[ParseEvent, ...] = ()


def _kind(slot: Optional[Slot]) -> Optional[Event]:
    return slot.event.kind if slot is not None else None


def has_more(current: Optional[Slot], nxt: Optional[Slot], depth: Depth) -> bool:
    """
    Decide from the window whether another record follows.

    Every event is counted once when pulled, so a closed wrapper shows up as
    array depth 0 (one below WRAPPER_DEPTH).
    """
    if current is None:
        return False
    if (_kind(current) is Event.START_ARRAY and _kind(nxt) is Event.END_ARRAY
            and depth.array == WRAPPER_DEPTH - 1):
        # Empty top-level array
        return False
    if (_kind(current) is Event.END_ARRAY and depth.array == WRAPPER_DEPTH - 1
            and depth.object == 0):
        # The top-level array has just closed
        return False
    return True


def record_opening(current: Optional[Slot], nxt: Optional[Slot]) -> Tuple[ParseEvent, ...]:
    """
    Window events that open the next record.

    The StartArray of the wrapper itself is dropped. Everything else in the
    window belongs to the record: its StartObject, its first key, a nested
    StartArray, or the EndObject of an empty object.
    """
    events = []
    for slot in (current, nxt):
        if slot is None:
            continue
        if slot.event.kind is Event.START_ARRAY and slot.array_depth == WRAPPER_DEPTH:
            continue
        events.append(slot.event)
    return tuple(events)


def transition(state: str, current: Optional[Slot], nxt: Optional[Slot], depth: Depth) -> Transition:
    """Compute the state after the window has been advanced."""
    if state == EXHAUSTED or not has_more(current, nxt, depth):
        return Transition(EXHAUSTED)
    return Transition(IN_RECORD, record_opening(current, nxt))


# ========================================================================
# STATE CLASSES
# ========================================================================

class SplitterState:
    """Base class for reader states."""

    name = "base"

    def __init__(self, reader: 'JsonRecordReader'):
        self.reader = reader

    def has_next(self) -> bool:
        """Advance the window and decide. Subclasses must implement."""
        raise NotImplementedError

    def read(self) -> JsonRecord:
        """Assemble the pending record. Subclasses must implement."""
        raise NotImplementedError

    def _advance_and_decide(self) -> bool:
        cursor = self.reader.cursor
        cursor.advance()
        step = transition(self.name, cursor.current, cursor.next, cursor.tracker.depth)
        if step.state == EXHAUSTED:
            self.reader._transition(ExhaustedState(self.reader))
            return False
        self.reader._transition(InRecordState(self.reader, step.emit))
        return True

    def __repr__(self) -> str:
        return f"<{self.name}>"


class BeforeRecordState(SplitterState):
    """Between records, window not yet advanced."""

    name = BEFORE_RECORD

    def has_next(self) -> bool:
        return self._advance_and_decide()

    def read(self) -> JsonRecord:
        raise ReaderStateError("read_next_record() called without a pending record")


class InRecordState(SplitterState):
    """A record is available; its opening events come from the window."""

    name = IN_RECORD

    def __init__(self, reader: 'JsonRecordReader', opening: Tuple[ParseEvent, ...]):
        super().__init__(reader)
        self.opening = opening

    def has_next(self) -> bool:
        # Asking twice without reading re-advances the window and skips ahead.
        return self._advance_and_decide()

    def read(self) -> JsonRecord:
        cursor = self.reader.cursor
        tracker = cursor.tracker
        assembler = RecordAssembler()

        started = False
        for event in self.opening:
            assembler.emit(event)
            started = started or event.kind is Event.START_OBJECT

        # The record is complete once its root object has been opened and closed.
        while not started or tracker.object_depth > 0:
            event = cursor.step()
            if event is None:
                raise RecordAssemblyError("Event stream ended inside a record")
            assembler.emit(event)
            started = started or event.kind is Event.START_OBJECT

        if tracker.array_depth != WRAPPER_DEPTH:
            # Close the array that was opened at record start.
            assembler.close_container()

        payload = assembler.finish()
        self.reader._transition(BeforeRecordState(self.reader))
        return self.reader._new_record(payload)


class ExhaustedState(SplitterState):
    """The top-level array has closed."""

    name = EXHAUSTED

    def has_next(self) -> bool:
        return False

    def read(self) -> JsonRecord:
        raise ReaderStateError("No more records in the JSON stream")
