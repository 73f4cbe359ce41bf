"""
Report service: creates monthly work reports from the template and keeps them in
step with their CSV counterparts.

create_report    copy template, stamp month/client/user, fill workday defaults
create_csv       write the editable CSV (one default line per workday)
update_from_csv  apply CSV lines to a report; clear workday rows missing from the CSV
save_latest_csv  apply the newest CSV to every report of the same month
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Union

from .config import ReportConfig
from .csv_codec import format_csv_date, read_records, write_records
from .errors import FileNameFormatError, TemplateMissingError, WorkReportError
from .filenames import CsvFileName, ReportFileName, YearMonth, latest_csv
from .holidays import HolidayCalendar
from .layout import DEFAULT_LAYOUT, ReportLayout, row_for_date
from .models import WorkRecord
from .timevalues import WorkSpan
from . import workbook_io

logger = logging.getLogger(__name__)

MonthLike = Union[str, YearMonth]


@dataclass(frozen=True)
class SyncResult:
    report: str
    updated: int
    cleared: int
    skipped: int = 0


class ReportService:
    def __init__(
        self,
        config: ReportConfig,
        calendar: HolidayCalendar,
        layout: ReportLayout = DEFAULT_LAYOUT,
    ):
        self.config = config
        self.calendar = calendar
        self.layout = layout

    # ----------------------------
    # Paths / names
    # ----------------------------

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_dir)

    @property
    def csv_dir(self) -> Path:
        return Path(self.config.csv_dir)

    @property
    def max_break(self) -> WorkSpan:
        return WorkSpan.parse(self.config.max_break)

    def report_name(self, ym: YearMonth, user: str) -> str:
        return ReportFileName(user, ym, self.config.report_suffix, self.config.report_extension).format()

    def csv_name(self, ym: YearMonth) -> str:
        return CsvFileName(ym, self.config.csv_suffix, self.config.csv_extension).format()

    # ----------------------------
    # Workdays
    # ----------------------------

    def workdays_of_month(self, month: MonthLike) -> List[date]:
        return self.calendar.workdays_of_month(_year_month(month))

    def default_record(self, d: date) -> WorkRecord:
        return WorkRecord.of(
            d,
            self.config.default_start,
            self.config.default_end,
            self.config.default_break,
            "",
            max_break=self.max_break,
        )

    # ----------------------------
    # Create
    # ----------------------------

    def create_report(self, month: MonthLike, user: str, client: str) -> str:
        """Create {user}_{yyyyMM}_{suffix} from the template. Returns the file name."""
        ym = _year_month(month)
        template = Path(self.config.template_file)
        if not template.is_file():
            raise TemplateMissingError(
                f"Template not found: {template}. Place the report template workbook there "
                f"or set template_file in the config."
            )

        name = self.report_name(ym, user)
        out_path = self.output_dir / name
        workbook_io.copy_template(template, out_path)

        wb = workbook_io.open_workbook(out_path)
        ws = wb.worksheets[0]
        workbook_io.set_cell(ws, self.layout.month_cell, datetime(ym.year, ym.month, 1))
        workbook_io.set_cell(ws, self.layout.client_cell, client)
        workbook_io.set_cell(ws, self.layout.user_cell, user)

        filled = 0
        for d in self.workdays_of_month(ym):
            row = row_for_date(ws, d, self.layout, ym)
            if row is None:
                logger.warning("No row for %s (%s) in %s", d, d.strftime("%a"), name)
                continue
            self._write_row(ws, row, self.default_record(d), with_note=False)
            filled += 1

        workbook_io.recompute_formulas(wb)
        workbook_io.save_workbook(wb, out_path)
        logger.info("Created %s (%d workdays filled)", name, filled)
        return name

    def create_csv(self, month: MonthLike) -> str:
        """Write {yyyyMM}_{suffix} with a default line per workday. Returns the file name."""
        ym = _year_month(month)
        records = [self.default_record(d) for d in self.workdays_of_month(ym)]
        name = self.csv_name(ym)
        write_records(records, self.csv_dir / name)
        logger.info("Created %s (%d workdays)", name, len(records))
        return name

    # ----------------------------
    # Sync
    # ----------------------------

    def update_from_csv(self, report_name: str, csv_name: str) -> SyncResult:
        """
        Apply a work CSV to a report:
          1. every CSV record overwrites start/end/break/note on its date's row
          2. every workday of the month that is not in the CSV has those cells cleared
          3. formulas are flagged for recalculation and the workbook is saved

        Records whose date has no row in the report are logged and skipped. When a date
        appears on several lines, the last one is applied and counted once.
        """
        records = read_records(self.csv_dir / csv_name, max_break=self.max_break)

        report_file = ReportFileName.parse(
            Path(report_name).name, self.config.report_suffix, self.config.report_extension
        )
        ym = report_file.year_month

        report_path = self.output_dir / report_name
        wb = workbook_io.open_workbook(report_path)
        ws = wb.worksheets[0]

        # one record per date, the last CSV line wins
        by_date = {}
        for record in records:
            if record.date in by_date:
                logger.warning("Duplicate line for %s in %s; the later line is used",
                               format_csv_date(record.date), csv_name)
            by_date[record.date] = record

        updated = 0
        skipped = 0
        for record in by_date.values():
            row = row_for_date(ws, record.date, self.layout, ym)
            if row is None:
                logger.warning("No row for %s (%s) in %s; skipped",
                               record.date, record.date.strftime("%a"), report_name)
                skipped += 1
                continue
            self._write_row(ws, row, record)
            updated += 1

        csv_dates = set(by_date)
        cleared = 0
        for d in self.workdays_of_month(ym):
            if d in csv_dates:
                continue
            row = row_for_date(ws, d, self.layout, ym)
            if row is None:
                continue
            self._clear_row(ws, row)
            cleared += 1
            logger.debug("Cleared %s (%s): not in CSV", d, d.strftime("%a"))

        workbook_io.recompute_formulas(wb)
        workbook_io.save_workbook(wb, report_path)
        logger.info("Updated %s from %s: %d updated, %d cleared", report_name, csv_name, updated, cleared)
        return SyncResult(report_name, updated, cleared, skipped)

    def find_latest_csv(self) -> Optional[CsvFileName]:
        found = latest_csv(
            workbook_io.list_files(self.csv_dir), self.config.csv_suffix, self.config.csv_extension
        )
        if found is not None:
            logger.info("Latest CSV: %s", found.format())
        return found

    def find_reports_for_month(self, month: MonthLike) -> List[str]:
        ym = _year_month(month)
        matches: List[str] = []
        for name in workbook_io.list_files(self.output_dir):
            try:
                parsed = ReportFileName.parse(name, self.config.report_suffix, self.config.report_extension)
            except FileNameFormatError:
                continue
            if parsed.year_month == ym:
                matches.append(name)
        logger.info("Found %d report(s) for %s", len(matches), ym)
        return matches

    def save_latest_csv(self) -> int:
        """Apply the newest CSV to every report of its month. Returns reports updated."""
        latest = self.find_latest_csv()
        if latest is None:
            logger.warning("No work CSV found in %s", self.csv_dir)
            return 0

        reports = self.find_reports_for_month(latest.year_month)
        if not reports:
            logger.warning("No reports found for %s", latest.year_month)
            return 0

        csv_name = latest.format()
        updated_files = 0
        for report in reports:
            try:
                result = self.update_from_csv(report, csv_name)
            except (OSError, WorkReportError) as e:
                logger.error("Failed to update %s: %s", report, e)
                continue
            logger.info("Saved %s (%d rows updated)", report, result.updated)
            updated_files += 1
        return updated_files

    # ----------------------------
    # Cells
    # ----------------------------

    def _write_row(self, ws, row: int, record: WorkRecord, with_note: bool = True) -> None:
        lay = self.layout
        workbook_io.set_cell(ws, f"{lay.start_col}{row}", record.start_text)
        workbook_io.set_cell(ws, f"{lay.end_col}{row}", record.end_text)
        workbook_io.set_cell(ws, f"{lay.break_col}{row}", record.break_text)
        if with_note:
            workbook_io.set_cell(ws, f"{lay.note_col}{row}", record.note or None)

    def _clear_row(self, ws, row: int) -> None:
        for col in self.layout.day_cols:
            workbook_io.clear_cell(ws, f"{col}{row}")


def _year_month(month: MonthLike) -> YearMonth:
    if isinstance(month, YearMonth):
        return month
    return YearMonth.parse(month)
