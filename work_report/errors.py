from __future__ import annotations


class WorkReportError(Exception):
    """Base class for every error raised by the report tooling."""


class FormatError(WorkReportError, ValueError):
    """Raised when time, duration, date or address text is malformed."""


class ValidationError(WorkReportError, ValueError):
    """Raised when a well-formed record is logically inconsistent."""


class RequiredFieldError(WorkReportError, ValueError):
    """Raised when a mandatory value is missing."""


class TemplateMissingError(WorkReportError, FileNotFoundError):
    """Raised when the report template workbook does not exist."""


class AddressFormatError(FormatError):
    """Raised when a cell address such as "B7" cannot be parsed."""


class MonthFormatError(FormatError):
    """Raised when a target month is not YYYY/M."""


class FileNameFormatError(FormatError):
    """Raised when a file name does not follow the report/CSV naming convention."""


class DocumentFormatError(FormatError):
    """Raised when a report file exists but is not a readable workbook."""
