from __future__ import annotations

import csv
import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .errors import FormatError, WorkReportError
from .models import Holiday, LineResult, MAX_BREAK, WorkRecord
from .timevalues import WorkSpan

logger = logging.getLogger(__name__)

CSV_HEADER = ["date", "start", "end", "break", "note"]
CSV_DATE_RE = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")


# ----------------------------
# Dates
# ----------------------------

def parse_csv_date(value: str) -> date:
    """Parse "YYYY/M/D" (month and day may be zero-padded or not)."""
    text = (value or "").strip()
    m = CSV_DATE_RE.match(text)
    if not m:
        raise FormatError(f"Invalid date: {value!r} (expected YYYY/M/D)")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as e:
        raise FormatError(f"Invalid date: {value!r} ({e})") from e


def format_csv_date(d: date) -> str:
    return f"{d.year:04d}/{d.month}/{d.day}"


# ----------------------------
# Work records
# ----------------------------

def iter_line_results(
    csv_path: str | Path,
    max_break: Optional[WorkSpan] = MAX_BREAK,
) -> Iterator[LineResult]:
    """
    Yield one LineResult per data line of a work CSV (the header line is skipped).
    Blank lines are ignored. A line that fails to parse or validate comes back with a
    reason instead of a record; the caller decides what to do with it.
    """
    path = Path(csv_path)
    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.reader(handle)
        next(reader, None)
        for row in reader:
            line_number = reader.line_num
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) < len(CSV_HEADER):
                yield LineResult(line_number, reason=f"expected {len(CSV_HEADER)} fields, got {len(row)}")
                continue
            date_raw, start_raw, end_raw, break_raw, note_raw = row[:5]
            try:
                day = parse_csv_date(date_raw)
                record = WorkRecord.of(
                    day,
                    start_raw.strip(),
                    end_raw.strip(),
                    break_raw.strip(),
                    note_raw.strip(),
                    max_break=max_break,
                )
            except WorkReportError as e:
                yield LineResult(line_number, reason=str(e))
                continue
            yield LineResult(line_number, record=record)


def read_records(
    csv_path: str | Path,
    max_break: Optional[WorkSpan] = MAX_BREAK,
) -> List[WorkRecord]:
    """Read valid records; invalid lines are logged and skipped."""
    records: List[WorkRecord] = []
    for result in iter_line_results(csv_path, max_break=max_break):
        if result.ok:
            records.append(result.record)
        else:
            logger.warning("Skipping %s line %d: %s", csv_path, result.line_number, result.reason)
    logger.info("Read %d records from %s", len(records), csv_path)
    return records


def write_records(records: Iterable[WorkRecord], csv_path: str | Path) -> None:
    """Write the header and one line per record, replacing any existing file."""
    path = Path(csv_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADER)
        count = 0
        for record in records:
            writer.writerow(
                [
                    format_csv_date(record.date),
                    record.start_text,
                    record.end_text,
                    record.break_text,
                    record.note,
                ]
            )
            count += 1
    logger.info("Wrote %d records to %s", count, path)


# ----------------------------
# Holidays
# ----------------------------

def read_holidays(csv_path: str | Path, encoding: str = "shift_jis") -> List[Holiday]:
    """
    Read a holiday list: a header line, then "YYYY/M/D,name" rows.
    Unparsable rows are logged and skipped. OSError propagates.
    """
    path = Path(csv_path)
    holidays: List[Holiday] = []
    with path.open(newline="", encoding=encoding) as handle:
        reader = csv.reader(handle)
        next(reader, None)
        for row in reader:
            if not row:
                continue
            if len(row) < 2:
                logger.warning("Skipping holiday line %d in %s: %r", reader.line_num, path, row)
                continue
            try:
                holidays.append(Holiday(parse_csv_date(row[0]), row[1].strip()))
            except WorkReportError as e:
                logger.warning("Skipping holiday line %d in %s: %s", reader.line_num, path, e)
    return holidays
