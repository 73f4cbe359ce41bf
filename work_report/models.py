from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .errors import RequiredFieldError, ValidationError
from .timevalues import ClockTime, WorkSpan

MAX_BREAK = WorkSpan.of(hours=3)


@dataclass(frozen=True)
class Holiday:
    date: date
    name: str

    def __post_init__(self) -> None:
        if self.date is None:
            raise RequiredFieldError("Holiday date is required")
        if self.name is None:
            raise RequiredFieldError("Holiday name is required")


@dataclass(frozen=True)
class WorkRecord:
    """One day of work. Build it with WorkRecord.of so the time rules are checked."""

    date: date
    start_time: ClockTime
    end_time: ClockTime
    break_time: WorkSpan
    note: str

    @classmethod
    def of(
        cls,
        day: date,
        start_text: str,
        end_text: str,
        break_text: str,
        note: str,
        max_break: Optional[WorkSpan] = MAX_BREAK,
    ) -> "WorkRecord":
        """
        Parse start/end/break text and validate:
          - end must not be before start
          - break must not exceed the worked span (end - start)
          - break must not exceed max_break (pass None to disable)
        """
        if day is None:
            raise RequiredFieldError("Date is required")
        for label, value in (("start time", start_text), ("end time", end_text), ("break time", break_text)):
            if value is None:
                raise RequiredFieldError(f"{label.capitalize()} is required")
        if note is None:
            raise RequiredFieldError("Note is required (may be empty)")

        start = ClockTime.parse(start_text)
        end = ClockTime.parse(end_text)
        brk = WorkSpan.parse(break_text)

        if end < start:
            raise ValidationError(f"End time must not be before start time: {start_text} -> {end_text}")
        worked = end - start
        if brk > worked:
            raise ValidationError(f"Break time {brk} exceeds worked span {worked}")
        if max_break is not None and brk > max_break:
            raise ValidationError(f"Break time {brk} exceeds the {max_break} limit")

        return cls(day, start, end, brk, note)

    @property
    def start_text(self) -> str:
        return self.start_time.format()

    @property
    def end_text(self) -> str:
        return self.end_time.format()

    @property
    def break_text(self) -> str:
        return self.break_time.format()

    @property
    def worked_time(self) -> WorkSpan:
        return (self.end_time - self.start_time) - self.break_time


@dataclass(frozen=True)
class LineResult:
    """Outcome of parsing one CSV line: either a record or the reason it was skipped."""

    line_number: int
    record: Optional[WorkRecord] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None
