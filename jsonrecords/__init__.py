"""
jsonrecords - Split a streamed top-level JSON array into standalone records.
"""

from .errors import JSONRecordError, ReaderStateError, RecordAssemblyError
from .events import Event, ParseEvent
from .reader import JsonFileRecordReader, JsonRecordReader, RecordReader
from .record import JsonRecord
from .tokenizer import EventListTokenizer, IjsonTokenizer, Tokenizer

__all__ = [
    'JsonRecordReader',
    'JsonFileRecordReader',
    'RecordReader',
    'JsonRecord',
    'Event',
    'ParseEvent',
    'Tokenizer',
    'IjsonTokenizer',
    'EventListTokenizer',
    'JSONRecordError',
    'RecordAssemblyError',
    'ReaderStateError',
]
__version__ = '0.1.0'
