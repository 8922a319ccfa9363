"""
Tests for JsonRecordReader.

The reader pulls parse events from ijson and hands back one JSON text per
element of the top-level array:
- has_next_record(): advance the lookahead window and decide
- read_next_record(): assemble the pending record
- get_total_records(): naive brace-counting estimate
"""

import io
import json
import logging
import random
from decimal import Decimal

import ijson
import pytest

from jsonrecords import JsonRecordReader, ReaderStateError, RecordAssemblyError


def read_payloads(data: bytes):
    """Read every record of a byte string and return the payloads."""
    with JsonRecordReader(io.BytesIO(data)) as reader:
        return [record.payload for record in reader]


def test_empty_array():
    """An empty array has no records."""
    reader = JsonRecordReader(io.BytesIO(b"[]"))
    reader.open()

    assert reader.has_next_record() is False
    reader.close()


def test_empty_array_with_whitespace():
    """Whitespace inside the empty array changes nothing."""
    assert read_payloads(b"  [ \n ]  ") == []


def test_single_flat_object():
    """A single object comes back byte for byte in compact form."""
    assert read_payloads(b'[{"a":1}]') == ['{"a":1}']


def test_nested_structure():
    """Nested arrays and objects stay inside their record."""
    payloads = read_payloads(b'[{"a":[1,2,{"b":"c"}]}]')

    assert payloads == ['{"a":[1,2,{"b":"c"}]}']


def test_decimal_literals_preserved():
    """Decimal numbers keep their digits instead of going through float."""
    payloads = read_payloads(b'[{"a":1.50,"b":-0.0,"c":0.1000000000000000055511,"d":1e3}]')
    assert len(payloads) == 1

    payload = payloads[0]
    assert '"a":1.50' in payload
    assert '"b":-0.0' in payload
    assert '"c":0.1000000000000000055511' in payload

    parsed = json.loads(payload, parse_float=Decimal)
    assert parsed["d"] == Decimal("1e3")


def test_integer_stays_integer():
    """Integer literals are not written as decimals."""
    payloads = read_payloads(b'[{"big":12345678901234567890,"neg":-7}]')

    assert payloads == ['{"big":12345678901234567890,"neg":-7}']


def test_all_scalar_kinds():
    """Strings, numbers, booleans and null are all written under their key."""
    data = [{"s": "text", "n": 3, "t": True, "f": False, "z": None}]
    payloads = read_payloads(json.dumps(data).encode("utf-8"))

    assert payloads == ['{"s":"text","n":3,"t":true,"f":false,"z":null}']


def test_sequential_numbering():
    """Record numbers run 1, 2, 3 with no gaps."""
    data = [{"id": 1}, {"id": 2, "nested": {"deep": [1, [2, [3]]]}}, {"id": 3}]

    with JsonRecordReader(io.BytesIO(json.dumps(data).encode("utf-8"))) as reader:
        numbers = [record.number for record in reader]

    assert numbers == [1, 2, 3]


def test_empty_object_records():
    """Empty objects are records too, wherever they appear."""
    payloads = read_payloads(b'[{},{"a":1},{},{}]')

    assert payloads == ['{}', '{"a":1}', '{}', '{}']


def test_object_with_only_nested_values():
    """A record whose first value is an object or an array."""
    data = [{"obj": {"x": 1}}, {"arr": [{"y": 2}, []]}, {"empty": {}}]
    payloads = read_payloads(json.dumps(data).encode("utf-8"))

    assert [json.loads(p) for p in payloads] == data


def test_pretty_printed_input():
    """Indentation and newlines in the source are irrelevant."""
    data = [{"name": "Alice", "tags": ["a", "b"]}, {"name": "Bob", "tags": []}]
    payloads = read_payloads(json.dumps(data, indent=2).encode("utf-8"))

    assert [json.loads(p) for p in payloads] == data


def test_unicode_and_escapes():
    """Escaped and non-ASCII characters survive re-serialization."""
    data = [{"quote": 'say "hi"', "newline": "a\nb", "snow": "☃", "kéy": "\\"}]
    payloads = read_payloads(json.dumps(data).encode("utf-8"))

    assert json.loads(payloads[0]) == data[0]
    assert "☃" in payloads[0]


def _random_value(rng, depth):
    choice = rng.randint(0, 7 if depth < 4 else 4)
    if choice == 0:
        return rng.randint(-10**6, 10**6)
    if choice == 1:
        return "".join(rng.choice('ab{}[]" \\é') for _ in range(rng.randint(0, 6)))
    if choice == 2:
        return rng.choice([True, False])
    if choice == 3:
        return None
    if choice == 4:
        return rng.randint(0, 10**4) / 8
    if choice in (5, 6):
        return _random_object(rng, depth + 1)
    return [_random_value(rng, depth + 1) for _ in range(rng.randint(0, 4))]


def _random_object(rng, depth=0):
    return {f"k{i}": _random_value(rng, depth) for i in range(rng.randint(0, 5))}


def test_round_trip_random_documents():
    """Every record re-parses to the element it came from."""
    rng = random.Random(1234)
    for _ in range(25):
        data = [_random_object(rng) for _ in range(rng.randint(1, 10))]
        payloads = read_payloads(json.dumps(data).encode("utf-8"))

        assert len(payloads) == len(data)
        assert [json.loads(p) for p in payloads] == data


def test_small_buffer_size():
    """Tokenizer buffers smaller than a token still split correctly."""
    data = [{"long": "x" * 100, "list": list(range(20))}, {"b": {"c": [True, None]}}]
    stream = io.BytesIO(json.dumps(data).encode("utf-8"))

    with JsonRecordReader(stream, buf_size=3) as reader:
        records = list(reader)

    assert [r.loads() for r in records] == data


class TestDepthInvariant:
    """Depth counters between records."""

    def test_depths_after_each_record(self):
        """After every record object depth is 0 and array depth is back to the wrapper."""
        data = [{"a": [1, {"b": [2, 3]}]}, {}, {"c": {"d": {"e": []}}}]
        reader = JsonRecordReader(io.BytesIO(json.dumps(data).encode("utf-8")))
        reader.open()

        while reader.has_next_record():
            reader.read_next_record()
            assert reader.tracker.object_depth == 0
            assert reader.tracker.array_depth == 1

        assert reader.tracker.array_depth == 0
        reader.close()


class TestLifecycle:
    """open / has_next_record / read_next_record / close ordering."""

    def test_has_next_before_open(self):
        """Using a reader that was never opened is an error."""
        reader = JsonRecordReader(io.BytesIO(b'[{"a":1}]'))

        with pytest.raises(ReaderStateError):
            reader.has_next_record()

    def test_read_without_has_next(self):
        """read_next_record() needs a pending record."""
        reader = JsonRecordReader(io.BytesIO(b'[{"a":1}]'))
        reader.open()

        with pytest.raises(ReaderStateError):
            reader.read_next_record()

    def test_exhausted_is_terminal(self):
        """Once exhausted, has_next_record() keeps returning False."""
        reader = JsonRecordReader(io.BytesIO(b'[{"a":1}]'))
        reader.open()

        assert reader.has_next_record()
        reader.read_next_record()
        assert not reader.has_next_record()
        assert not reader.has_next_record()
        assert reader.state_name == "EXHAUSTED"

        with pytest.raises(ReaderStateError):
            reader.read_next_record()

    def test_close_closes_stream(self):
        """The reader owns its stream."""
        stream = io.BytesIO(b'[{"a":1}]')
        reader = JsonRecordReader(stream)
        reader.open()
        reader.close()

        assert stream.closed
        assert reader.state is None

    def test_close_twice(self):
        """A second close() is a no-op."""
        reader = JsonRecordReader(io.BytesIO(b"[]"))
        reader.open()
        reader.close()
        reader.close()

    def test_data_source_name(self):
        """Records carry the reader's data source name."""
        stream = io.BytesIO(b'[{"a":1}]')

        with JsonRecordReader(stream) as reader:
            name = reader.get_data_source_name()
            record = reader.read_next_record() if reader.has_next_record() else None

        assert name.startswith("Json stream: ")
        assert record.source == name
        assert str(record).startswith("Record: {number=1")


class TestErrors:
    """Malformed and unsupported input."""

    def test_malformed_value(self):
        """Tokenizer errors propagate unchanged."""
        with pytest.raises(ijson.JSONError):
            read_payloads(b'[{"a":1},{"b":}]')

    def test_truncated_input(self):
        """A stream that stops inside a record is an incomplete document."""
        with pytest.raises(ijson.IncompleteJSONError):
            read_payloads(b'[{"a":1},{"b":[1,2')

    def test_first_record_survives_later_error(self):
        """Records before the broken one are returned intact."""
        reader = JsonRecordReader(io.BytesIO(b'[{"a":1},{"b":tru}]'), buf_size=4)
        reader.open()

        assert reader.has_next_record()
        assert reader.read_next_record().payload == '{"a":1}'
        with pytest.raises(ijson.JSONError):
            if reader.has_next_record():
                reader.read_next_record()
        reader.close()

    def test_array_of_scalars_is_rejected(self):
        """Only object elements are supported."""
        with pytest.raises(RecordAssemblyError):
            read_payloads(b"[1,2,3]")


class TestTotalRecords:
    """get_total_records() on a stream reader."""

    def test_counts_objects(self):
        """Nested objects do not count as records."""
        reader = JsonRecordReader(io.BytesIO(b'[{"a":{"b":1}},{"c":[{"d":2}]}]'))

        assert reader.get_total_records() == 2

    def test_consumes_and_closes_stream(self):
        """The estimate reads the stream to its end."""
        stream = io.BytesIO(b'[{"a":1}]')
        reader = JsonRecordReader(stream)

        reader.get_total_records()

        assert stream.closed

    def test_may_diverge_from_splitter(self):
        """A brace inside a string fools the estimate but not the splitter."""
        data = b'[{"a":"{"},{"b":2}]'

        assert read_payloads(data) == ['{"a":"{"}', '{"b":2}']
        assert JsonRecordReader(io.BytesIO(data)).get_total_records() != 2


class FailingCloseStream(io.BytesIO):
    failed = False

    def close(self):
        if not self.failed:
            self.failed = True
            raise OSError("cannot close")
        super().close()


def test_close_failure_is_logged(caplog):
    """A stream that fails to close does not hide the records already read."""
    reader = JsonRecordReader(FailingCloseStream(b'[{"a":1}]'))
    reader.open()
    payloads = [r.payload for r in reader]

    with caplog.at_level(logging.ERROR, logger="jsonrecords.reader"):
        reader.close()

    assert payloads == ['{"a":1}']
    assert "Unable to close" in caplog.text
    assert reader.state is None


def test_open_twice_is_refused():
    """Opening an open reader again would drop its tokenizer."""
    reader = JsonRecordReader(io.BytesIO(b'[{"a":1}]'))
    reader.open()

    with pytest.raises(ReaderStateError):
        reader.open()

    assert [r.payload for r in reader] == ['{"a":1}']
    reader.close()
