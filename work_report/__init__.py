"""Monthly work report generation and CSV synchronization."""

from .errors import (
    AddressFormatError,
    DocumentFormatError,
    FileNameFormatError,
    FormatError,
    MonthFormatError,
    RequiredFieldError,
    TemplateMissingError,
    ValidationError,
    WorkReportError,
)
from .filenames import CsvFileName, ReportFileName, YearMonth
from .holidays import HolidayCalendar
from .models import Holiday, WorkRecord
from .sender import ReportSender, SendResult
from .service import ReportService, SyncResult
from .timevalues import ClockTime, WorkSpan

__version__ = "0.1.0"
