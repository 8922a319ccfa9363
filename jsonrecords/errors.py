"""
Errors - Exceptions raised by the record readers.

Malformed JSON is reported by the tokenizer itself (``ijson.JSONError`` and
``ijson.IncompleteJSONError``) and is never wrapped here.
"""


class JSONRecordError(Exception):
    """Base class for all jsonrecords errors."""


class RecordAssemblyError(JSONRecordError):
    """A record could not be written as a balanced JSON text."""


class ReaderStateError(JSONRecordError):
    """A reader operation was called in the wrong lifecycle state."""
