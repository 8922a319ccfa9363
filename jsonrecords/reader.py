"""
Record Readers - Split a top-level JSON array into records.

Usage follows the pull model of batch record readers::

    reader = JsonRecordReader(stream)
    reader.open()
    while reader.has_next_record():
        record = reader.read_next_record()
    reader.close()

Readers are also context managers and iterables.
"""

import codecs
import io
import logging
import os
from typing import BinaryIO, Callable, Iterator, Optional, Union

from .cursor import LookaheadCursor
from .errors import ReaderStateError
from .estimator import DEFAULT_CHUNK_SIZE, estimate_total_records
from .record import JsonRecord
from .states import BeforeRecordState, SplitterState
from .tokenizer import DEFAULT_BUF_SIZE, IjsonTokenizer, Tokenizer
from .tracker import DepthTracker

logger = logging.getLogger(__name__)

TokenizerFactory = Callable[[BinaryIO], Tokenizer]

_UTF8_CHARSETS = frozenset({'utf-8', 'utf-8-sig'})


class TranscodingStream(io.RawIOBase):
    """
    Binary view of a text file in any charset, re-encoded as UTF-8.

    Both read() and readinto() go through the decoder, so tokenizers that
    fill their own buffers see UTF-8 too.
    """

    def __init__(self, raw: BinaryIO, charset: str):
        super().__init__()
        self._text = io.TextIOWrapper(raw, encoding=charset, newline='')
        self._pending = b''

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if not self._pending:
            self._pending = self._text.read(len(buffer)).encode('utf-8')
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._text.close()
        super().close()


class RecordReader:
    """
    Base class for record readers.

    Subclasses implement the lifecycle methods; iteration and the context
    manager protocol are built on top of them.
    """

    def open(self) -> None:
        raise NotImplementedError

    def has_next_record(self) -> bool:
        raise NotImplementedError

    def read_next_record(self) -> JsonRecord:
        raise NotImplementedError

    def get_total_records(self) -> Optional[int]:
        """Total number of records, or None when it is not known."""
        return None

    def get_data_source_name(self) -> str:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> 'RecordReader':
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[JsonRecord]:
        while self.has_next_record():
            yield self.read_next_record()


class JsonRecordReader(RecordReader):
    """
    Read one record per object of a top-level JSON array.

    The stream must be opened in binary mode. It is owned by the reader and
    closed by close(). get_total_records() consumes it, so it cannot be
    combined with reading records from the same reader.
    """

    def __init__(self, stream: Optional[BinaryIO], buf_size: int = DEFAULT_BUF_SIZE,
                 chunk_size: int = DEFAULT_CHUNK_SIZE,
                 tokenizer_factory: Optional[TokenizerFactory] = None):
        self.stream = stream
        self.buf_size = buf_size
        self.chunk_size = chunk_size
        self._tokenizer_factory = tokenizer_factory

        self.tokenizer: Optional[Tokenizer] = None
        self.cursor: Optional[LookaheadCursor] = None
        self._state: Optional[SplitterState] = None
        self._record_number = 0

    @property
    def state(self) -> Optional[SplitterState]:
        """Current state object, None while the reader is closed."""
        return self._state

    @property
    def state_name(self) -> str:
        return self._state.name if self._state else "None"

    @property
    def tracker(self) -> Optional[DepthTracker]:
        return self.cursor.tracker if self.cursor else None

    def _transition(self, new_state: SplitterState) -> None:
        self._state = new_state

    def _create_tokenizer(self) -> Tokenizer:
        if self._tokenizer_factory is not None:
            return self._tokenizer_factory(self.stream)
        return IjsonTokenizer(self.stream, buf_size=self.buf_size)

    def _require_open(self) -> SplitterState:
        if self._state is None:
            raise ReaderStateError(f"{self.get_data_source_name()} is not open")
        return self._state

    def _new_record(self, payload: str) -> JsonRecord:
        self._record_number += 1
        record = JsonRecord(self._record_number, self.get_data_source_name(), payload)
        logger.debug("Read record #%d from %s", record.number, record.source)
        return record

    def _require_closed(self) -> None:
        if self.tokenizer is not None:
            raise ReaderStateError(f"{self.get_data_source_name()} is already open")

    def open(self) -> None:
        self._require_closed()
        self.tokenizer = self._create_tokenizer()
        self.cursor = LookaheadCursor(self.tokenizer, DepthTracker())
        self._record_number = 0
        self._transition(BeforeRecordState(self))
        logger.debug("Opened %s", self.get_data_source_name())

    def has_next_record(self) -> bool:
        return self._require_open().has_next()

    def read_next_record(self) -> JsonRecord:
        return self._require_open().read()

    def get_total_records(self) -> Optional[int]:
        return estimate_total_records(self.stream, chunk_size=self.chunk_size)

    def get_data_source_name(self) -> str:
        return f"Json stream: {self.stream!r}"

    def close(self) -> None:
        if self.tokenizer is None:
            return
        try:
            self.tokenizer.close()
        except OSError:
            logger.error("Unable to close %s", self.get_data_source_name(), exc_info=True)
        finally:
            self.tokenizer = None
            self.cursor = None
            self._state = None
        logger.debug("Closed %s after %d record(s)", self.get_data_source_name(), self._record_number)


class JsonFileRecordReader(JsonRecordReader):
    """
    Read records from a JSON file.

    Files in a charset other than UTF-8 are transcoded to UTF-8 bytes before
    they reach the tokenizer, and a leading UTF-8 byte order mark is skipped.
    The data source name is the absolute file path.
    Unlike the stream reader, get_total_records() scans its own file handle
    and can be called before, during or after reading.
    """

    def __init__(self, path: Union[str, os.PathLike], charset: str = 'utf-8', **kwargs):
        super().__init__(None, **kwargs)
        self.path = path
        self.charset = codecs.lookup(charset).name

    def _open_stream(self) -> BinaryIO:
        raw = open(self.path, 'rb')
        if self.charset not in _UTF8_CHARSETS:
            return TranscodingStream(raw, self.charset)
        # Skip a byte order mark, the tokenizer only accepts bare UTF-8.
        if raw.read(len(codecs.BOM_UTF8)) != codecs.BOM_UTF8:
            raw.seek(0)
        return raw

    def open(self) -> None:
        self._require_closed()
        self.stream = self._open_stream()
        super().open()

    def get_total_records(self) -> Optional[int]:
        try:
            stream = self._open_stream()
        except OSError:
            logger.error("Unable to open %s to count records", self.get_data_source_name(),
                         exc_info=True)
            return None
        return estimate_total_records(stream, chunk_size=self.chunk_size)

    def get_data_source_name(self) -> str:
        return os.path.abspath(self.path)
