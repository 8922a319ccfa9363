"""
Command line splitter: print each element of a top-level JSON array as one
line of NDJSON.

    python -m jsonrecords data.json > data.ndjson
    python -m jsonrecords data.json --count
"""

import argparse
import logging
import sys
from typing import List, Optional

import ijson

from .errors import JSONRecordError
from .estimator import DEFAULT_CHUNK_SIZE
from .reader import JsonFileRecordReader
from .tokenizer import DEFAULT_BUF_SIZE

logger = logging.getLogger("jsonrecords")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonrecords",
        description="Split a top-level JSON array into one JSON record per line.",
    )
    parser.add_argument("path", help="JSON file holding a top-level array of objects")
    parser.add_argument("--charset", default="utf-8", help="Input file charset (default: utf-8)")
    parser.add_argument("--count", action="store_true",
                        help="Print the estimated number of records instead of the records")
    parser.add_argument("--buf-size", type=int, default=DEFAULT_BUF_SIZE,
                        help="Tokenizer read size in bytes")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE,
                        help="Read size in bytes for --count")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress to stderr (-vv for debug)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        reader = JsonFileRecordReader(args.path, charset=args.charset,
                                      buf_size=args.buf_size, chunk_size=args.chunk_size)
    except LookupError as e:
        print(f"jsonrecords: {e}", file=sys.stderr)
        return 2

    if args.count:
        total = reader.get_total_records()
        print("unknown" if total is None else total)
        return 0

    count = 0
    try:
        with reader:
            for record in reader:
                sys.stdout.write(record.payload)
                sys.stdout.write("\n")
                count = record.number
    except OSError as e:
        print(f"jsonrecords: cannot read {args.path}: {e}", file=sys.stderr)
        return 1
    except (ijson.JSONError, JSONRecordError) as e:
        print(f"jsonrecords: {args.path} after record {count}: {e}", file=sys.stderr)
        return 1

    logger.info("Wrote %d record(s) from %s", count, reader.get_data_source_name())
    return 0


if __name__ == "__main__":
    sys.exit(main())
