"""
JSON Writer - Generates compact JSON text one container at a time.

The writer keeps a bracket stack of the containers it has opened, the same
way the parser side tracks nesting. Inside an object every value needs a
name; inside an array names are ignored.
"""

import io
import json
from decimal import Decimal
from typing import Any, List, Optional

from .errors import RecordAssemblyError


def encode_value(value: Any) -> str:
    """Encode a scalar as a JSON literal."""
    if value is None:
        return 'null'
    if value is True:
        return 'true'
    if value is False:
        return 'false'
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise RecordAssemblyError(f"Cannot write non-finite number {value}")
        # str() keeps the digits of the source literal, e.g. Decimal('1.50') -> '1.50'
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        try:
            return json.dumps(value, allow_nan=False)
        except ValueError as e:
            raise RecordAssemblyError(f"Cannot write non-finite number {value}") from e
    raise RecordAssemblyError(f"Cannot write value of type {type(value).__name__}")


class JSONWriter:
    """
    Write one JSON value to a text buffer.

    Output uses ',' and ':' separators with no whitespace. Structural misuse
    (closing with nothing open, a second root value, a scalar outside any
    container, a nameless member inside an object) raises RecordAssemblyError.
    """

    def __init__(self, out: Optional[io.StringIO] = None):
        self._out = out if out is not None else io.StringIO()
        self._bracket_stack: List[str] = []
        self._item_counts: List[int] = []
        self._root_written = False
        self._closed = False

    @property
    def bracket_stack(self) -> List[str]:
        return self._bracket_stack

    def in_array(self) -> bool:
        return bool(self._bracket_stack) and self._bracket_stack[-1] == '['

    def in_object(self) -> bool:
        return bool(self._bracket_stack) and self._bracket_stack[-1] == '{'

    def _begin_value(self, name: Optional[str]) -> None:
        """Write the separator and member name that precede a value."""
        if self._closed:
            raise RecordAssemblyError("Writer is already closed")
        if not self._bracket_stack:
            if self._root_written:
                raise RecordAssemblyError("A JSON text can hold only one root value")
            return
        if self._item_counts[-1]:
            self._out.write(',')
        self._item_counts[-1] += 1
        if self.in_object():
            if name is None:
                raise RecordAssemblyError("Object member has no key name")
            self._out.write(json.dumps(name, ensure_ascii=False))
            self._out.write(':')

    def _open(self, bracket: str, name: Optional[str]) -> None:
        self._begin_value(name)
        self._out.write(bracket)
        self._bracket_stack.append(bracket)
        self._item_counts.append(0)

    def start_array(self, name: Optional[str] = None) -> None:
        self._open('[', name)

    def start_object(self, name: Optional[str] = None) -> None:
        self._open('{', name)

    def end(self) -> None:
        """Close the innermost open container."""
        if not self._bracket_stack:
            raise RecordAssemblyError("No open array or object to close")
        bracket = self._bracket_stack.pop()
        self._item_counts.pop()
        self._out.write(']' if bracket == '[' else '}')
        if not self._bracket_stack:
            self._root_written = True

    def write(self, name: Optional[str], value: Any) -> None:
        """Write a scalar, named when the current container is an object."""
        if not self._bracket_stack:
            raise RecordAssemblyError("Scalar value outside of an array or object")
        self._begin_value(name)
        self._out.write(encode_value(value))

    def close(self) -> None:
        """Finish the text. Every opened container must have been closed."""
        if self._bracket_stack:
            raise RecordAssemblyError(
                f"Incomplete JSON text, {len(self._bracket_stack)} container(s) left open"
            )
        self._closed = True

    def getvalue(self) -> str:
        return self._out.getvalue()
