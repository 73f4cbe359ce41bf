"""
Fixed report template geometry.

The template has one row per day of the month:
- the month stamp (first day of the month, as a date) is at B7
- client name at C4, user name at L4
- day 1 is on row 8, day N on row 8 + N - 1
- per-day columns: start F, end G, break H, note J

Rows are 1-based sheet row numbers (as openpyxl and "F8"-style addresses use them).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from .errors import AddressFormatError
from .filenames import YearMonth


@dataclass(frozen=True)
class ReportLayout:
    month_cell: str = "B7"
    client_cell: str = "C4"
    user_cell: str = "L4"
    first_day_row: int = 8
    start_col: str = "F"
    end_col: str = "G"
    break_col: str = "H"
    note_col: str = "J"

    @property
    def time_cols(self) -> Tuple[str, str, str]:
        return self.start_col, self.end_col, self.break_col

    @property
    def day_cols(self) -> Tuple[str, str, str, str]:
        return self.start_col, self.end_col, self.break_col, self.note_col

    def row_of_day(self, day: int) -> int:
        return self.first_day_row + (day - 1)


DEFAULT_LAYOUT = ReportLayout()


def parse_cell_address(address: str) -> Tuple[int, int]:
    """
    "B7" -> (6, 1): zero-based (row, column).
    Column is a single letter A-Z; row is a positive integer.
    """
    if address is None or len(address) < 2:
        raise AddressFormatError(f"Cell address too short: {address!r}")
    col_char = address[0]
    if not ("A" <= col_char <= "Z"):
        raise AddressFormatError(f"Invalid column in cell address: {address!r}")
    row_text = address[1:]
    if not (row_text.isascii() and row_text.isdigit()):
        raise AddressFormatError(f"Invalid row in cell address: {address!r}")
    row = int(row_text) - 1
    if row < 0:
        raise AddressFormatError(f"Row must be 1 or greater: {address!r}")
    return row, ord(col_char) - ord("A")


def row_for_date(ws, d: date, layout: ReportLayout = DEFAULT_LAYOUT,
                 year_month: Optional[YearMonth] = None) -> Optional[int]:
    """
    Sheet row for d, or None when the row isn't in the sheet (or d is outside
    year_month, when given).
    """
    if year_month is not None and not year_month.contains(d):
        return None
    row = layout.row_of_day(d.day)
    if row > ws.max_row:
        return None
    return row


def date_for_row(row: int, year_month: YearMonth, layout: ReportLayout = DEFAULT_LAYOUT) -> Optional[date]:
    day = row - layout.first_day_row + 1
    if 1 <= day <= year_month.days_in_month:
        return date(year_month.year, year_month.month, day)
    return None
