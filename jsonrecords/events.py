"""
Parse Events - The tagged variant produced by a tokenizer.

A parse event is either a structural marker (start/end of an array or an
object), a key name, or a scalar value. Events are immutable and transient:
the splitter never keeps more than the two events of its lookahead window.
"""

import enum
from decimal import Decimal
from typing import Any, NamedTuple, Union


class Event(enum.Enum):
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    KEY_NAME = "key_name"
    VALUE_STRING = "value_string"
    VALUE_NUMBER = "value_number"
    VALUE_BOOL = "value_bool"
    VALUE_NULL = "value_null"


STRUCTURAL_EVENTS = frozenset({
    Event.START_ARRAY,
    Event.END_ARRAY,
    Event.START_OBJECT,
    Event.END_OBJECT,
})

Number = Union[int, Decimal]


class ParseEvent(NamedTuple):
    """One event of the token stream, with its payload for keys and scalars."""

    kind: Event
    value: Any = None

    def __repr__(self) -> str:
        if self.kind in STRUCTURAL_EVENTS or self.kind is Event.VALUE_NULL:
            return f"ParseEvent({self.kind.name})"
        return f"ParseEvent({self.kind.name}, {self.value!r})"


# Structural events carry no payload, so one instance each is enough.
START_ARRAY = ParseEvent(Event.START_ARRAY)
END_ARRAY = ParseEvent(Event.END_ARRAY)
START_OBJECT = ParseEvent(Event.START_OBJECT)
END_OBJECT = ParseEvent(Event.END_OBJECT)
VALUE_NULL = ParseEvent(Event.VALUE_NULL)


def key(name: str) -> ParseEvent:
    return ParseEvent(Event.KEY_NAME, name)


def string(value: str) -> ParseEvent:
    return ParseEvent(Event.VALUE_STRING, value)


def number(value: Number) -> ParseEvent:
    return ParseEvent(Event.VALUE_NUMBER, value)


def boolean(value: bool) -> ParseEvent:
    return ParseEvent(Event.VALUE_BOOL, value)


_IJSON_EVENTS = {
    'start_array': START_ARRAY,
    'end_array': END_ARRAY,
    'start_map': START_OBJECT,
    'end_map': END_OBJECT,
    'null': VALUE_NULL,
}

_IJSON_VALUE_EVENTS = {
    'map_key': Event.KEY_NAME,
    'string': Event.VALUE_STRING,
    'number': Event.VALUE_NUMBER,
    'boolean': Event.VALUE_BOOL,
}


def from_ijson(name: str, value: Any) -> ParseEvent:
    """
    Convert one ``(event, value)`` pair from ``ijson.basic_parse``.

    Raises:
        ValueError: If the event name is not one ijson produces.
    """
    event = _IJSON_EVENTS.get(name)
    if event is not None:
        return event
    kind = _IJSON_VALUE_EVENTS.get(name)
    if kind is None:
        raise ValueError(f"Unknown tokenizer event: {name!r}")
    return ParseEvent(kind, value)
