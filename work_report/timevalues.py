"""
Clock times and durations used in work records.

ClockTime  - wall-clock time of day, "H:MM" or "HH:MM" in, "HH:MM" out.
WorkSpan   - non-negative span, "H+:MM" in, "H:MM" out (hour part unbounded).

Neither type knows about domain ceilings (e.g. the break limit); callers apply those.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import FormatError

CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
SPAN_RE = re.compile(r"^(\d+):([0-5][0-9])$")


@dataclass(frozen=True, order=True)
class ClockTime:
    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23:
            raise FormatError(f"Hour out of range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise FormatError(f"Minute out of range: {self.minute}")

    @classmethod
    def parse(cls, text: str) -> "ClockTime":
        if text is None:
            raise FormatError("Time text is missing")
        m = CLOCK_RE.match(str(text).strip())
        if not m:
            raise FormatError(f"Invalid time: {text!r} (expected H:MM)")
        return cls(int(m.group(1)), int(m.group(2)))

    @property
    def total_minutes(self) -> int:
        return self.hour * 60 + self.minute

    def format(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def __sub__(self, other: "ClockTime") -> "WorkSpan":
        if not isinstance(other, ClockTime):
            return NotImplemented
        return WorkSpan(self.total_minutes - other.total_minutes)

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True, order=True)
class WorkSpan:
    total_minutes: int

    def __post_init__(self) -> None:
        if self.total_minutes < 0:
            raise ValueError(f"Span must not be negative: {self.total_minutes} minutes")

    @classmethod
    def parse(cls, text: str) -> "WorkSpan":
        if text is None:
            raise FormatError("Duration text is missing")
        m = SPAN_RE.match(str(text).strip())
        if not m:
            raise FormatError(f"Invalid duration: {text!r} (expected H:MM, minutes 00-59)")
        return cls(int(m.group(1)) * 60 + int(m.group(2)))

    @classmethod
    def of(cls, hours: int = 0, minutes: int = 0) -> "WorkSpan":
        return cls(hours * 60 + minutes)

    @property
    def hours(self) -> int:
        return self.total_minutes // 60

    @property
    def minutes(self) -> int:
        return self.total_minutes % 60

    def format(self) -> str:
        return f"{self.hours}:{self.minutes:02d}"

    def __add__(self, other: "WorkSpan") -> "WorkSpan":
        if not isinstance(other, WorkSpan):
            return NotImplemented
        return WorkSpan(self.total_minutes + other.total_minutes)

    def __sub__(self, other: "WorkSpan") -> "WorkSpan":
        if not isinstance(other, WorkSpan):
            return NotImplemented
        return WorkSpan(self.total_minutes - other.total_minutes)

    def __str__(self) -> str:
        return self.format()
