"""
File naming conventions (version 1).

Report workbook:  {identity}_{yyyyMM}_{suffix}{ext}    e.g. tanaka_202506_work_report.xlsx
Work CSV:         {yyyyMM}_{suffix}{ext}               e.g. 202506_work_data.csv

The year-month of a report is the second "_"-separated segment and must be exactly
6 digits, so identities may not contain "_". Parsing and formatting live together here;
a layout change means a new convention version in this module only.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from .errors import FileNameFormatError, MonthFormatError

FILENAME_CONVENTION_VERSION = 1

MIN_YEAR = 1900
MAX_YEAR = 2100

MONTH_RE = re.compile(r"^\s*(\d{4})/(\d{1,2})\s*$")
TOKEN_RE = re.compile(r"^\d{6}$")


@dataclass(frozen=True, order=True)
class YearMonth:
    year: int
    month: int

    def __post_init__(self) -> None:
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise MonthFormatError(f"Year out of range ({MIN_YEAR}-{MAX_YEAR}): {self.year}")
        if not 1 <= self.month <= 12:
            raise MonthFormatError(f"Month out of range (1-12): {self.month}")

    @classmethod
    def parse(cls, text: str) -> "YearMonth":
        """Accepts "2025/06" or "2025/6"."""
        m = MONTH_RE.match(text or "")
        if not m:
            raise MonthFormatError(f"Invalid month: {text!r} (expected YYYY/M)")
        return cls(int(m.group(1)), int(m.group(2)))

    @classmethod
    def from_token(cls, token: str) -> "YearMonth":
        """Accepts the 6-digit "yyyyMM" form used in file names."""
        if not TOKEN_RE.match(token or ""):
            raise MonthFormatError(f"Invalid year-month token: {token!r} (expected yyyyMM)")
        return cls(int(token[:4]), int(token[4:]))

    @property
    def token(self) -> str:
        return f"{self.year:04d}{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{self.year:04d}/{self.month:02d}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def days(self) -> List[date]:
        return [date(self.year, self.month, d) for d in range(1, self.days_in_month + 1)]

    def contains(self, d: date) -> bool:
        return d.year == self.year and d.month == self.month

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class ReportFileName:
    identity: str
    year_month: YearMonth
    suffix: str = "work_report"
    extension: str = ".xlsx"

    def format(self) -> str:
        if not self.identity or not self.identity.strip():
            raise FileNameFormatError("Report identity must not be empty")
        if "_" in self.identity:
            raise FileNameFormatError(f"Report identity must not contain '_': {self.identity!r}")
        return f"{self.identity}_{self.year_month.token}_{self.suffix}{self.extension}"

    @classmethod
    def parse(cls, name: str, suffix: str = "work_report", extension: str = ".xlsx") -> "ReportFileName":
        tail = f"_{suffix}{extension}"
        if not name.endswith(tail):
            raise FileNameFormatError(f"Not a report file name: {name!r} (expected *{tail})")
        parts = name.split("_")
        if len(parts) < 3 or not TOKEN_RE.match(parts[1]):
            raise FileNameFormatError(f"No yyyyMM segment in report file name: {name!r}")
        # the suffix itself may contain "_", so only the tail after the token is checked
        if "_".join(parts[2:]) != f"{suffix}{extension}":
            raise FileNameFormatError(f"Unexpected report file name layout: {name!r}")
        try:
            ym = YearMonth.from_token(parts[1])
        except MonthFormatError as e:
            raise FileNameFormatError(f"Bad year-month in report file name {name!r}: {e}") from e
        return cls(parts[0], ym, suffix, extension)


@dataclass(frozen=True)
class CsvFileName:
    year_month: YearMonth
    suffix: str = "work_data"
    extension: str = ".csv"

    def format(self) -> str:
        return f"{self.year_month.token}_{self.suffix}{self.extension}"

    @classmethod
    def parse(cls, name: str, suffix: str = "work_data", extension: str = ".csv") -> "CsvFileName":
        m = re.match(rf"^(\d{{6}})_{re.escape(suffix)}{re.escape(extension)}$", name)
        if not m:
            raise FileNameFormatError(f"Not a work CSV file name: {name!r}")
        try:
            ym = YearMonth.from_token(m.group(1))
        except MonthFormatError as e:
            raise FileNameFormatError(f"Bad year-month in CSV file name {name!r}: {e}") from e
        return cls(ym, suffix, extension)


def latest_csv(names: Iterable[str], suffix: str = "work_data", extension: str = ".csv") -> Optional[CsvFileName]:
    """Return the CSV whose yyyyMM sorts highest, ignoring names that don't match."""
    found: List[CsvFileName] = []
    for name in names:
        try:
            found.append(CsvFileName.parse(name, suffix, extension))
        except FileNameFormatError:
            continue
    if not found:
        return None
    return max(found, key=lambda c: c.year_month.token)
