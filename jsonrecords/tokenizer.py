"""
Tokenizer - The token stream the splitter pulls parse events from.

The splitter only needs two questions answered: "is there another event?"
and "give me the next event". Any conformant tokenizer can sit behind this
interface; ``IjsonTokenizer`` adapts ``ijson.basic_parse`` and
``EventListTokenizer`` replays events that are already in memory.
"""

from typing import BinaryIO, Iterable, Iterator, Optional, Tuple, Any

import ijson

from .events import ParseEvent, from_ijson


DEFAULT_BUF_SIZE = 64 * 1024


class Tokenizer:
    """
    Base class for parse event sources.
    Subclasses must implement has_next() and next_event().
    """

    def has_next(self) -> bool:
        """Return True if another event can be pulled."""
        raise NotImplementedError

    def next_event(self) -> ParseEvent:
        """Pull the next event. Raises StopIteration when there is none."""
        raise NotImplementedError

    def close(self) -> None:
        """Release whatever the tokenizer reads from."""
        pass


class _PeekingTokenizer(Tokenizer):
    """Answers has_next() by pulling one event ahead from an iterator."""

    def __init__(self, events: Iterator[ParseEvent]):
        self._events = events
        self._peeked: Optional[ParseEvent] = None

    def has_next(self) -> bool:
        if self._peeked is None:
            try:
                self._peeked = next(self._events)
            except StopIteration:
                return False
        return True

    def next_event(self) -> ParseEvent:
        if not self.has_next():
            raise StopIteration("token stream is exhausted")
        event, self._peeked = self._peeked, None
        return event


class EventListTokenizer(_PeekingTokenizer):
    """Replay a fixed sequence of parse events."""

    def __init__(self, events: Iterable[ParseEvent]):
        super().__init__(iter(events))


class IjsonTokenizer(_PeekingTokenizer):
    """
    Tokenize a binary stream with ijson.

    Numbers are parsed with ``use_float=False`` so decimal literals arrive as
    ``decimal.Decimal`` and keep their exact precision. Malformed input makes
    ijson raise ``ijson.JSONError`` from has_next(); it is not caught here.
    """

    def __init__(self, stream: BinaryIO, buf_size: int = DEFAULT_BUF_SIZE):
        self.stream = stream
        raw: Iterator[Tuple[str, Any]] = ijson.basic_parse(
            stream, buf_size=buf_size, use_float=False
        )
        super().__init__(from_ijson(name, value) for name, value in raw)

    def close(self) -> None:
        self.stream.close()
