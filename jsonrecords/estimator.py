"""
Total-Count Estimator - A best-effort record count from raw bytes.

The estimator does not tokenize. It balances '{' against '}' and counts how
often the balance returns to zero, so braces inside string values are
counted as structure and the result can disagree with the splitter.
Reading runs to the end of the stream and closes it.
"""

import logging
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

_OPEN_BRACE = ord('{')
_CLOSE_BRACE = ord('}')
_NOT_BRACES = bytes(b for b in range(256) if b not in (_OPEN_BRACE, _CLOSE_BRACE))


def count_braces(chunk: bytes, depth: int = 0):
    """
    Count completed top-level objects in one chunk of bytes.

    Args:
        chunk: Raw bytes to scan.
        depth: Brace depth carried over from the previous chunk.

    Returns:
        A (records, depth) tuple.
    """
    records = 0
    for b in chunk.translate(None, _NOT_BRACES):
        if b == _OPEN_BRACE:
            depth += 1
        else:
            depth -= 1
            if depth == 0:
                records += 1
    return records, depth


def estimate_total_records(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Optional[int]:
    """
    Scan the stream from its current position and estimate the record count.

    Returns None if reading fails. The stream is closed in every case.
    """
    total = 0
    depth = 0
    try:
        chunk = stream.read(chunk_size)
        while chunk:
            records, depth = count_braces(chunk, depth)
            total += records
            chunk = stream.read(chunk_size)
    except OSError:
        logger.error("Unable to calculate total records number in JSON stream.", exc_info=True)
        return None
    finally:
        try:
            stream.close()
        except OSError:
            logger.error("Unable to close JSON stream when calculating total records number.",
                         exc_info=True)
    return total
