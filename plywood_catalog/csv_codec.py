"""
CSV codec for published spreadsheet exports.

Decoding rules:
- single left-to-right scan, quoted fields may hold commas and newlines
- "" inside a quoted field is a literal quote
- CRLF, lone CR and lone LF all end a row
- first row is the header, every other row is zipped onto it by position
- never raises; an unterminated quote runs to end of input
"""

from __future__ import annotations

import csv
import io
from typing import Dict, Iterable, List, Optional, Sequence

Record = Dict[str, str]


def decode_rows(raw: str) -> List[List[str]]:
    """Split raw CSV text into rows of untrimmed cells."""
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False

    i = 0
    n = len(raw)
    while i < n:
        ch = raw[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < n and raw[i + 1] == '"':
                    field.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(ch)
            i += 1
            continue

        if ch == '"':
            in_quotes = True
        elif ch == ",":
            row.append("".join(field))
            field = []
        elif ch == "\r" or ch == "\n":
            # CRLF is a single terminator
            if ch == "\r" and i + 1 < n and raw[i + 1] == "\n":
                i += 1
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
        else:
            field.append(ch)
        i += 1

    # no trailing newline
    if field or row:
        row.append("".join(field))
        rows.append(row)

    return rows


def decode_records(raw: str) -> List[Record]:
    """
    Decode CSV text into records keyed by the (trimmed) header row.

    Short rows are padded with "", extra cells are dropped.
    Empty input and header-only input both give [].
    """
    rows = decode_rows(raw or "")
    if not rows:
        return []

    header = [cell.strip() for cell in rows[0]]
    records: List[Record] = []
    for cells in rows[1:]:
        record: Record = {}
        for j, key in enumerate(header):
            record[key] = cells[j].strip() if j < len(cells) else ""
        records.append(record)
    return records


def encode_records(records: Iterable[Record], columns: Optional[Sequence[str]] = None) -> str:
    """
    Write records back to CSV text (comma, CRLF, minimal quoting).

    Columns default to the keys of the first record. Missing keys are written as "".
    CRLF rows make the writer quote any cell holding a CR or LF.
    """
    records = list(records)
    if columns is None:
        columns = list(records[0].keys()) if records else []
    if not columns:
        return ""

    outp = io.StringIO(newline="")
    writer = csv.writer(outp, delimiter=",", lineterminator="\r\n")
    writer.writerow(columns)
    for record in records:
        writer.writerow([record.get(col, "") for col in columns])
    return outp.getvalue()
