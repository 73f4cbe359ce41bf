"""
Send preparation: package a finished report so it can be mailed.

For one report (by default the first report of the newest CSV's month) this writes:
  send_dir/{report stem}.zip                         AES-encrypted copy of the report
  send_dir/work/{yyyy}/{yyyyMM}/password.txt         the generated ZIP password
  send_dir/work/{yyyy}/{yyyyMM}/mail_content.txt     mails rendered from the template

The mail template holds three sections (subject, body, password mail body) separated
by a line of "--------". Placeholders: ${yearMonth}, ${deadline}, ${password}.
The deadline is the second workday of the month after the report's month.
"""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

import pyzipper

from .errors import FormatError, ValidationError
from .filenames import ReportFileName, YearMonth
from .holidays import HolidayCalendar
from .service import ReportService

logger = logging.getLogger(__name__)

PASSWORD_ALPHABET = string.ascii_letters + string.digits
PASSWORD_LENGTH = 8
MAIL_SEPARATOR = "--------"
DEADLINE_WORKDAY = 2

WORK_DIR_NAME = "work"
PASSWORD_FILE = "password.txt"
MAIL_CONTENT_FILE = "mail_content.txt"

DEFAULT_MAIL_TEMPLATE = """\
Work report for ${yearMonth}
--------
Hello,

Please find attached the work report for ${yearMonth}.
The password for the attachment follows in a separate mail.
Please check it by ${deadline}.

Best regards
--------
Hello,

The password for the ${yearMonth} work report is: ${password}

Best regards
"""


@dataclass(frozen=True)
class MailTemplate:
    subject: str
    body: str
    password_body: str

    def render(self, year_month: YearMonth, deadline: date, password: str) -> "MailTemplate":
        values = {
            "yearMonth": year_month.label,
            "deadline": format_deadline(deadline),
            "password": password,
        }
        return MailTemplate(
            string.Template(self.subject).safe_substitute(values),
            string.Template(self.body).safe_substitute(values),
            string.Template(self.password_body).safe_substitute(values),
        )

    def to_text(self) -> str:
        sep = f"\n{MAIL_SEPARATOR}\n"
        return sep.join([self.subject, self.body, self.password_body]) + "\n"


@dataclass(frozen=True)
class SendResult:
    report: str
    zip_path: Path
    password: str
    work_dir: Path


def generate_password(length: int = PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def write_protected_zip(src: str | Path, zip_path: str | Path, password: str) -> Path:
    """Write src into an AES-encrypted, deflated ZIP. An existing ZIP is replaced."""
    src, zip_path = Path(src), Path(zip_path)
    if not src.is_file():
        raise FileNotFoundError(f"Report not found: {src}")
    zip_path.parent.mkdir(parents=True, exist_ok=True)
    with pyzipper.AESZipFile(zip_path, "w", compression=pyzipper.ZIP_DEFLATED,
                             encryption=pyzipper.WZ_AES) as zf:
        zf.setpassword(password.encode("utf-8"))
        zf.write(src, arcname=src.name)
    logger.debug("Wrote %s", zip_path)
    return zip_path


def next_month(ym: YearMonth) -> YearMonth:
    if ym.month == 12:
        return YearMonth(ym.year + 1, 1)
    return YearMonth(ym.year, ym.month + 1)


def deadline_for(ym: YearMonth, calendar: HolidayCalendar, nth: int = DEADLINE_WORKDAY) -> date:
    """The nth workday of the month following ym."""
    workdays = calendar.workdays_of_month(next_month(ym))
    if len(workdays) < nth:
        raise ValidationError(f"{next_month(ym)} has fewer than {nth} workdays")
    return workdays[nth - 1]


def format_deadline(d: date) -> str:
    return f"{d:%Y/%m/%d} ({d:%a})"


def load_mail_template(path: str | Path) -> MailTemplate:
    """Read the mail template, writing the default one first if it does not exist."""
    path = Path(path)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_MAIL_TEMPLATE, encoding="utf-8")
        logger.info("Created default mail template %s", path)

    sections = path.read_text(encoding="utf-8").split(MAIL_SEPARATOR, 2)
    if len(sections) < 3:
        raise FormatError(
            f"Mail template {path} needs subject, body and password sections "
            f"separated by '{MAIL_SEPARATOR}' lines"
        )
    subject, body, password_body = (s.strip("\n") for s in sections)
    return MailTemplate(subject.strip(), body, password_body)


class ReportSender:
    def __init__(self, service: ReportService, send_dir: str | Path, mail_template_file: str | Path):
        self.service = service
        self.send_dir = Path(send_dir)
        self.mail_template_file = Path(mail_template_file)

    def work_dir(self, ym: YearMonth) -> Path:
        return self.send_dir / WORK_DIR_NAME / f"{ym.year:04d}" / ym.token

    def pick_report(self) -> Optional[str]:
        """First report of the newest CSV's month, or None."""
        latest = self.service.find_latest_csv()
        if latest is None:
            logger.warning("No work CSV found in %s", self.service.csv_dir)
            return None
        reports = self.service.find_reports_for_month(latest.year_month)
        if not reports:
            logger.warning("No reports found for %s", latest.year_month)
            return None
        return reports[0]

    def send(self, report_name: Optional[str] = None) -> Optional[SendResult]:
        """
        Prepare report_name (or the picked report) for sending.
        Returns None when no report was given and none could be picked.
        """
        if not report_name:
            report_name = self.pick_report()
            if report_name is None:
                return None

        cfg = self.service.config
        ym = ReportFileName.parse(Path(report_name).name, cfg.report_suffix, cfg.report_extension).year_month
        template = load_mail_template(self.mail_template_file)

        password = generate_password()
        src = self.service.output_dir / report_name
        zip_path = write_protected_zip(src, self.send_dir / f"{Path(report_name).stem}.zip", password)

        work_dir = self.work_dir(ym)
        work_dir.mkdir(parents=True, exist_ok=True)
        (work_dir / PASSWORD_FILE).write_text(password + "\n", encoding="utf-8")

        mail = template.render(ym, deadline_for(ym, self.service.calendar), password)
        (work_dir / MAIL_CONTENT_FILE).write_text(mail.to_text(), encoding="utf-8")

        logger.info("Prepared %s for sending: %s", report_name, zip_path)
        return SendResult(report_name, zip_path, password, work_dir)
