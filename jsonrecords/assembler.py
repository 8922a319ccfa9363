"""
Record Assembler - Re-serializes the events of one record.

An assembler lives for exactly one record. It owns a fresh writer and its
own pending key, so nothing leaks from one record into the next.
"""

from typing import Optional

from .events import Event, ParseEvent
from .writer import JSONWriter


class RecordAssembler:
    """Feed parse events in, get one JSON text out."""

    def __init__(self):
        self.writer = JSONWriter()
        self._key: Optional[str] = None

    @property
    def key(self) -> Optional[str]:
        """The pending key name for the next value."""
        return self._key

    def emit(self, event: ParseEvent) -> None:
        """Re-emit one parse event into the writer."""
        kind = event.kind
        if kind is Event.KEY_NAME:
            # A valid object has exactly one value per key, so overwriting is enough.
            self._key = event.value
        elif kind is Event.START_ARRAY:
            self.writer.start_array(self._key)
        elif kind is Event.START_OBJECT:
            self.writer.start_object(self._key)
        elif kind is Event.END_ARRAY or kind is Event.END_OBJECT:
            self.writer.end()
        elif kind is Event.VALUE_NULL:
            self.writer.write(self._key, None)
        else:
            self.writer.write(self._key, event.value)

    def close_container(self) -> None:
        """Close whatever container is innermost."""
        self.writer.end()

    def finish(self) -> str:
        """Close the writer and return the assembled text."""
        self.writer.close()
        return self.writer.getvalue()
