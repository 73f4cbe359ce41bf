import calendar
import tempfile
import unittest
from datetime import date
from pathlib import Path

from work_report.filenames import YearMonth
from work_report.holidays import HolidayCalendar
from work_report.models import Holiday

from tests.support import write_csv

MAY_2025 = [
    "2025/5/3,憲法記念日",
    "2025/5/4,みどりの日",
    "2025/5/5,こどもの日",
    "2025/5/6,休日",
]


class HolidayCalendarTests(unittest.TestCase):
    def test_empty_calendar_june_2025(self) -> None:
        workdays = HolidayCalendar().workdays_of_month(YearMonth(2025, 6))
        self.assertIn(date(2025, 6, 2), workdays)
        for excluded in (date(2025, 6, 1), date(2025, 6, 7), date(2025, 6, 8)):
            self.assertNotIn(excluded, workdays)
        self.assertEqual(len(workdays), 21)
        self.assertEqual(workdays, sorted(workdays))

    def test_weekend_holidays_are_not_double_counted(self) -> None:
        cal = HolidayCalendar([Holiday(date(2025, 5, 3), "a"), Holiday(date(2025, 5, 4), "b"),
                               Holiday(date(2025, 5, 5), "c"), Holiday(date(2025, 5, 6), "d")])
        ym = YearMonth(2025, 5)
        days = ym.days_in_month
        weekends = sum(1 for d in ym.days() if d.weekday() >= 5)
        weekday_holidays = sum(1 for h in cal.holidays_in_month(ym) if h.date.weekday() < 5)
        self.assertEqual(len(cal.workdays_of_month(ym)), days - weekends - weekday_holidays)
        self.assertEqual(len(cal.workdays_of_month(ym)), 20)

    def test_is_holiday_and_is_workday(self) -> None:
        cal = HolidayCalendar([Holiday(date(2025, 5, 5), "こどもの日")])
        self.assertTrue(cal.is_holiday(date(2025, 5, 5)))
        self.assertFalse(cal.is_workday(date(2025, 5, 5)))
        self.assertTrue(cal.is_workday(date(2025, 5, 7)))
        self.assertFalse(cal.is_workday(date(2025, 5, 10)))
        self.assertFalse(cal.is_holiday(date(2025, 5, 10)))

    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_csv(Path(tmpdir) / "h.csv", ["date,name"] + MAY_2025, encoding="shift_jis")
            cal = HolidayCalendar.load(path)
        self.assertEqual(len(cal), 4)
        self.assertFalse(cal.is_workday(date(2025, 5, 6)))

    def test_unreadable_source_degrades_to_empty(self) -> None:
        with self.assertLogs("work_report.holidays", level="WARNING"):
            cal = HolidayCalendar.load("/nonexistent/holidays.csv")
        self.assertEqual(len(cal), 0)
        # every weekday is a workday once holidays are gone
        ym = YearMonth(2025, 5)
        weekdays = [d for d in ym.days() if d.weekday() < 5]
        self.assertEqual(cal.workdays_of_month(ym), weekdays)

    def test_reload_picks_up_edits(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_csv(Path(tmpdir) / "h.csv", ["date,name", "2025/5/5,こどもの日"], encoding="shift_jis")
            cal = HolidayCalendar.load(path)
            self.assertFalse(cal.is_workday(date(2025, 5, 5)))
            self.assertTrue(cal.is_workday(date(2025, 5, 6)))

            write_csv(path, ["date,name"] + MAY_2025, encoding="shift_jis")
            # workdays are recomputed from the current holidays on every call
            self.assertEqual(cal.reload(), 4)
            self.assertFalse(cal.is_workday(date(2025, 5, 6)))

    def test_every_month_of_a_year(self) -> None:
        cal = HolidayCalendar()
        for month in range(1, 13):
            ym = YearMonth(2026, month)
            weekdays = sum(1 for d in range(1, calendar.monthrange(2026, month)[1] + 1)
                           if date(2026, month, d).weekday() < 5)
            self.assertEqual(len(cal.workdays_of_month(ym)), weekdays)


if __name__ == "__main__":
    unittest.main()
