import tempfile
import unittest
from datetime import date
from pathlib import Path

import pyzipper

from work_report.config import ReportConfig
from work_report.errors import FileNameFormatError, FormatError
from work_report.filenames import YearMonth
from work_report.holidays import HolidayCalendar
from work_report.models import Holiday
from work_report.sender import (
    DEFAULT_MAIL_TEMPLATE,
    PASSWORD_ALPHABET,
    ReportSender,
    deadline_for,
    generate_password,
    load_mail_template,
    next_month,
)
from work_report.service import ReportService

from tests.support import make_template, write_csv


class PasswordTests(unittest.TestCase):
    def test_length_and_alphabet(self) -> None:
        password = generate_password()
        self.assertEqual(len(password), 8)
        self.assertTrue(set(password) <= set(PASSWORD_ALPHABET))
        self.assertEqual(len(generate_password(12)), 12)


class DeadlineTests(unittest.TestCase):
    def test_second_workday_of_next_month(self) -> None:
        # July 2025 starts on a Tuesday
        self.assertEqual(deadline_for(YearMonth(2025, 6), HolidayCalendar()), date(2025, 7, 2))
        # November 2025 starts on a Saturday
        self.assertEqual(deadline_for(YearMonth(2025, 10), HolidayCalendar()), date(2025, 11, 4))

    def test_holidays_push_the_deadline(self) -> None:
        calendar = HolidayCalendar([Holiday(date(2025, 7, 1), "Company holiday")])
        self.assertEqual(deadline_for(YearMonth(2025, 6), calendar), date(2025, 7, 3))

    def test_december_rolls_into_january(self) -> None:
        self.assertEqual(next_month(YearMonth(2025, 12)), YearMonth(2026, 1))
        self.assertEqual(deadline_for(YearMonth(2025, 12), HolidayCalendar()), date(2026, 1, 2))


class MailTemplateTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "mail" / "mail_template.txt"

    def test_missing_template_is_created_from_the_default(self) -> None:
        template = load_mail_template(self.path)
        self.assertEqual(self.path.read_text(encoding="utf-8"), DEFAULT_MAIL_TEMPLATE)
        self.assertEqual(template.subject, "Work report for ${yearMonth}")

    def test_render(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("Report ${yearMonth}\n--------\nDue ${deadline}\n--------\nPassword: ${password}\n",
                             encoding="utf-8")
        mail = load_mail_template(self.path).render(YearMonth(2025, 6), date(2025, 7, 2), "abcd1234")
        self.assertEqual(mail.subject, "Report 2025/06")
        self.assertEqual(mail.body, "Due 2025/07/02 (Wed)")
        self.assertEqual(mail.password_body, "Password: abcd1234")
        self.assertEqual(mail.to_text(),
                         "Report 2025/06\n--------\nDue 2025/07/02 (Wed)\n--------\nPassword: abcd1234\n")

    def test_too_few_sections(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("subject\n--------\nbody only\n", encoding="utf-8")
        with self.assertRaises(FormatError):
            load_mail_template(self.path)


class ReportSenderTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        config = ReportConfig(
            template_file=str(make_template(self.root / "template.xlsx")),
            output_dir=str(self.root / "output"),
            csv_dir=str(self.root / "csv"),
            holidays_file=str(self.root / "holidays.csv"),
        )
        self.service = ReportService(config, HolidayCalendar())
        self.send_dir = self.root / "send"
        self.sender = ReportSender(self.service, self.send_dir, self.root / "mail" / "mail_template.txt")

    def test_send_named_report(self) -> None:
        report = self.service.create_report("2025/06", "tanaka", "Example Co.")

        result = self.sender.send(report)

        self.assertEqual(result.zip_path, self.send_dir / "tanaka_202506_work_report.zip")
        self.assertEqual(result.work_dir, self.send_dir / "work" / "2025" / "202506")
        self.assertEqual((result.work_dir / "password.txt").read_text(encoding="utf-8").strip(),
                         result.password)

        with pyzipper.AESZipFile(result.zip_path) as zf:
            zf.setpassword(result.password.encode("utf-8"))
            self.assertEqual(zf.namelist(), [report])
            content = zf.read(report)
        self.assertEqual(content, (self.service.output_dir / report).read_bytes())

        mail = (result.work_dir / "mail_content.txt").read_text(encoding="utf-8")
        self.assertIn("Work report for 2025/06", mail)
        self.assertIn("2025/07/02 (Wed)", mail)
        self.assertIn(result.password, mail)

    def test_zip_needs_the_password(self) -> None:
        report = self.service.create_report("2025/06", "tanaka", "Example Co.")
        result = self.sender.send(report)
        with pyzipper.AESZipFile(result.zip_path) as zf:
            with self.assertRaises(RuntimeError):
                zf.read(report)

    def test_picks_first_report_of_the_latest_csv_month(self) -> None:
        self.service.create_report("2025/05", "tanaka", "Example Co.")
        self.service.create_report("2025/06", "tanaka", "Example Co.")
        self.service.create_report("2025/06", "sato", "Example Co.")
        write_csv(self.service.csv_dir / "202505_work_data.csv", ["date,start,end,break,note"])
        write_csv(self.service.csv_dir / "202506_work_data.csv", ["date,start,end,break,note"])

        result = self.sender.send()
        self.assertEqual(result.report, "sato_202506_work_report.xlsx")

    def test_nothing_to_send(self) -> None:
        self.assertIsNone(self.sender.send())
        write_csv(self.service.csv_dir / "202506_work_data.csv", ["date,start,end,break,note"])
        self.assertIsNone(self.sender.send())
        self.assertFalse(self.send_dir.exists())

    def test_bad_or_missing_report(self) -> None:
        with self.assertRaises(FileNameFormatError):
            self.sender.send("report.xlsx")
        with self.assertRaises(FileNotFoundError):
            self.sender.send("tanaka_202506_work_report.xlsx")


if __name__ == "__main__":
    unittest.main()
