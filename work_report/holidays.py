from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .csv_codec import read_holidays
from .filenames import YearMonth
from .models import Holiday

logger = logging.getLogger(__name__)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


class HolidayCalendar:
    """
    In-memory holiday list plus the weekend rule.

    Build one with HolidayCalendar.load(path) and pass it to whatever needs workdays.
    If the source can't be read the calendar is empty: every weekday is then a workday.
    Call reload() to pick up edits to the source.
    """

    def __init__(self, holidays: Iterable[Holiday] = (), source: Optional[str | Path] = None,
                 encoding: str = "shift_jis"):
        self.source = Path(source) if source is not None else None
        self.encoding = encoding
        self._set(holidays)

    @classmethod
    def load(cls, source: str | Path, encoding: str = "shift_jis") -> "HolidayCalendar":
        cal = cls(source=source, encoding=encoding)
        cal.reload()
        return cal

    def reload(self) -> int:
        """Re-read the source. Returns the number of holidays loaded."""
        if self.source is None:
            return len(self._holidays)
        try:
            loaded = read_holidays(self.source, self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read holidays from %s (%s); continuing without holidays", self.source, e)
            loaded = []
        self._set(loaded)
        logger.info("Loaded %d holidays from %s", len(self._holidays), self.source)
        return len(self._holidays)

    def _set(self, holidays: Iterable[Holiday]) -> None:
        self._holidays: Tuple[Holiday, ...] = tuple(sorted(holidays, key=lambda h: h.date))
        self._dates = {h.date for h in self._holidays}

    @property
    def holidays(self) -> Tuple[Holiday, ...]:
        return self._holidays

    def __len__(self) -> int:
        return len(self._holidays)

    def is_holiday(self, d: date) -> bool:
        return d in self._dates

    def is_workday(self, d: date) -> bool:
        return not is_weekend(d) and not self.is_holiday(d)

    def holidays_in_month(self, ym: YearMonth) -> List[Holiday]:
        return [h for h in self._holidays if ym.contains(h.date)]

    def workdays_of_month(self, ym: YearMonth) -> List[date]:
        """Ordered workdays of the month, computed fresh on every call."""
        return [d for d in ym.days() if self.is_workday(d)]
