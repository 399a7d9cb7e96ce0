"""
Semicolon-delimited record reader.
"""

import csv
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, TextIO, Union

from .errors import RecordReadError

DELIMITER = ";"
QUOTECHAR = '"'

# Scanner states for _trim_leading_space
_START, _FIELD, _QUOTED, _QUOTE_IN_QUOTED = range(4)


def _trim_leading_space(lines: Iterable[str]) -> Iterator[str]:
    """
    Drop whitespace at the start of every field, outside quoted text.

    Any character for which ``str.isspace()`` holds is dropped, not only the
    ASCII space. Quote state carries over from one physical line to the next,
    so continuation lines of a quoted field are left alone.
    """
    state = _START
    for line in lines:
        out = []
        for c in line:
            if c in "\r\n":
                if state != _QUOTED:
                    state = _START
                out.append(c)
                continue

            if state == _START:
                if c.isspace():
                    continue
                if c == QUOTECHAR:
                    state = _QUOTED
                elif c != DELIMITER:
                    state = _FIELD
            elif state == _FIELD:
                if c == DELIMITER:
                    state = _START
            elif state == _QUOTED:
                if c == QUOTECHAR:
                    state = _QUOTE_IN_QUOTED
            else:
                if c == QUOTECHAR:
                    state = _QUOTED
                elif c == DELIMITER:
                    state = _START
                else:
                    state = _FIELD
            out.append(c)
        yield "".join(out)


def read_records(stream: TextIO) -> Iterator[List[str]]:
    """
    Lazily read records from a semicolon-delimited text stream.

    Rows may have any number of fields, leading whitespace is dropped from each
    field and malformed quoting is tolerated. Blank lines are skipped and do not
    count as rows.

    Args:
        stream: Text stream opened with ``newline=""``

    Yields:
        Each record as a list of field strings

    Raises:
        RecordReadError: If a record cannot be read or decoded
    """
    reader = csv.reader(
        _trim_leading_space(stream),
        delimiter=DELIMITER,
        quotechar=QUOTECHAR,
        strict=False,
    )
    row = 1
    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except (csv.Error, UnicodeDecodeError) as e:
            raise RecordReadError(row, e) from e

        if not record:
            continue

        yield record
        row += 1


@contextmanager
def open_records(path: Union[str, Path], encoding: str = "utf-8-sig") -> Iterator[Iterator[List[str]]]:
    """Open a CSV file and yield its record iterator, closing the file afterwards."""
    with open(path, "r", encoding=encoding, newline="") as stream:
        yield read_records(stream)
