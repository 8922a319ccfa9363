"""
JSON Record - One element of the top-level array as standalone JSON text.
"""

import json
from typing import Any, NamedTuple


class JsonRecord(NamedTuple):
    """
    A record handed to the caller.

    number is 1-based and never reused within a reader. payload is an
    independently parseable JSON text.
    """

    number: int
    source: str
    payload: str

    def loads(self, **kwargs: Any) -> Any:
        """Parse the payload with ``json.loads``."""
        return json.loads(self.payload, **kwargs)

    def __str__(self) -> str:
        return f"Record: {{number={self.number}, source={self.source!r}, payload={self.payload}}}"
