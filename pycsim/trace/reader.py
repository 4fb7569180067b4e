from __future__ import annotations
import re
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from .record import Operation, TraceRecord

# " L 7ff000398,8", " M 0421c7f0,4", "L10,1" or "I  0400d7d4,8"
_TRACE_LINE = re.compile(
    r"^\s*(?P<op>[LSMI])\s*(?:0[xX])?(?P<address>[0-9a-fA-F]+)\s*,\s*(?P<size>\d+)\s*$"
)


def parse_trace_line(line: str) -> Optional[TraceRecord]:
    """Parses one trace line into a TraceRecord.

    Returns None for instruction fetches and for anything that is not a data
    access, so callers can simply skip it.
    """
    match = _TRACE_LINE.match(line)
    if match is None:
        return None
    op = Operation(match.group("op"))
    if op is Operation.INSTRUCTION:
        return None
    return TraceRecord(
        operation=op,
        address=int(match.group("address"), 16),
        size=int(match.group("size")),
    )


def parse_trace(lines: Iterable[str]) -> Iterator[TraceRecord]:
    for line in lines:
        record = parse_trace_line(line)
        if record is not None:
            yield record


def read_trace(path: Union[str, Path]) -> Iterator[TraceRecord]:
    """Lazily yields the data-access records of a trace file.

    The file is opened before the first record is requested, so a missing or
    unreadable trace raises OSError right away. Bytes that are not valid UTF-8
    are replaced, which leaves the line unparseable and skipped.
    """
    f = open(path, "r", encoding="utf-8", errors="replace")

    def _records() -> Iterator[TraceRecord]:
        with f:
            yield from parse_trace(f)

    return _records()
