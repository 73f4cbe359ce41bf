#!/usr/bin/env python3
"""
work-report command line.

  create-file --month 2025/06 --user tanaka --client "Example Co."
      copy the template into {user}_{yyyyMM}_work_report.xlsx with workday defaults,
      and write {yyyyMM}_work_data.csv next to it (in csv_dir) for editing
  update-file --file tanaka_202506_work_report.xlsx --csv 202506_work_data.csv
      apply a CSV to one report (workdays missing from the CSV are cleared)
  save
      apply the newest CSV to every report of the same month
  send [--file tanaka_202506_work_report.xlsx]
      zip a report with a generated password into send_dir and render the mails
      (without --file: the first report of the newest CSV's month)
  help
      show commands, CSV format and configured directories
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import DEFAULT_CONFIG_PATH, ReportConfig, load_config, save_config
from .errors import WorkReportError
from .holidays import HolidayCalendar
from .sender import ReportSender
from .service import ReportService
from . import workbook_io

LOG_LEVEL_ENV = "WORK_REPORT_LOG_LEVEL"


def setup_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger("work_report")
    logger.setLevel(level.upper())
    if not logger.handlers:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
        logger.addHandler(ch)
    return logger


def help_message(cfg: ReportConfig) -> str:
    return f"""\
Work report tool

Commands:
  create-file --month <YYYY/M> --user <name> --client <client>
      Create a new report and its CSV.
      e.g. create-file --month 2025/06 --user tanaka --client "Example Co."

  update-file --file <report file> --csv <csv file>
      Update one report from a CSV.
      e.g. update-file --file tanaka_202506_{cfg.report_suffix}{cfg.report_extension} --csv 202506_{cfg.csv_suffix}{cfg.csv_extension}

  save
      Apply the newest CSV to every report of the same month.

  send [--file <report file>]
      Zip a report with a generated password and write the mail texts.
      Without --file, the first report of the newest CSV's month is sent.

  help
      Show this help.

CSV format:
  date,start,end,break,note
  2025/6/2,09:30,17:45,1:00,design document
  2025/6/3,10:00,18:30,1:00,implementation

Notes:
  - CSV files are read from {cfg.csv_dir}
  - Reports are written to {cfg.output_dir}
  - Template: {cfg.template_file}
  - ZIPs are written to {cfg.send_dir or "(asked on first send)"}
  - Mail template: {cfg.mail_template_file}
"""


def ensure_directories(cfg: ReportConfig) -> None:
    """Ask for any directory setting left blank in the config."""
    if not cfg.output_dir.strip():
        cfg.output_dir = workbook_io.prompt_line("Report output directory: ")
    if not cfg.csv_dir.strip():
        cfg.csv_dir = workbook_io.prompt_line("CSV directory: ")


def ensure_send_dir(cfg: ReportConfig, config_path: str) -> None:
    """Ask for the send directory once and keep it in the config file."""
    if cfg.send_dir.strip():
        return
    answer = workbook_io.prompt_line("Send directory: ")
    if not answer:
        raise ValueError("A send directory is required")
    cfg.send_dir = answer
    save_config(cfg, config_path)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="work-report", description="Create and update monthly work reports.")
    ap.add_argument("--config", default=DEFAULT_CONFIG_PATH, help=f"Config JSON (default {DEFAULT_CONFIG_PATH})")
    ap.add_argument("--log-level", default=None, help=f"Log level (default INFO, or ${LOG_LEVEL_ENV})")
    sub = ap.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-file", help="Create a report and its CSV")
    create.add_argument("--month", required=True, help="Target month, YYYY/M (e.g. 2025/06)")
    create.add_argument("--user", required=True, help="User name (no '_')")
    create.add_argument("--client", required=True, help="Client name")

    update = sub.add_parser("update-file", help="Update a report from a CSV")
    update.add_argument("--file", required=True, help="Report file name in the output directory")
    update.add_argument("--csv", required=True, help="CSV file name in the CSV directory")

    sub.add_parser("save", help="Apply the newest CSV to its month's reports")
    send = sub.add_parser("send", help="Zip a report with a password and write the mail texts")
    send.add_argument("--file", default=None, help="Report file name (default: newest month's first report)")

    sub.add_parser("help", help="Show usage details")
    return ap


def run(args: argparse.Namespace, cfg: ReportConfig) -> str:
    if args.command == "help":
        return help_message(cfg)

    ensure_directories(cfg)
    calendar = HolidayCalendar.load(cfg.holidays_file, cfg.holidays_encoding)
    service = ReportService(cfg, calendar)

    if args.command == "create-file":
        report = service.create_report(args.month, args.user, args.client)
        csv_name = service.create_csv(args.month)
        return f"✅ Created:\n- Report: {report}\n- CSV: {csv_name}"

    if args.command == "update-file":
        result = service.update_from_csv(args.file, args.csv)
        return f"✅ Updated {result.report}: {result.updated} row(s) updated, {result.cleared} cleared"

    if args.command == "save":
        count = service.save_latest_csv()
        if count:
            return f"✅ Saved: {count} report(s) updated"
        return "No reports to update"

    if args.command == "send":
        ensure_send_dir(cfg, args.config)
        sender = ReportSender(service, cfg.send_dir, cfg.mail_template_file)
        sent = sender.send(args.file)
        if sent is None:
            return "No report to send"
        return (
            f"✅ Ready to send:\n- Report: {sent.report}\n- ZIP: {sent.zip_path}\n"
            f"- Password: {sent.password}\n- Mail: {sent.work_dir}"
        )

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or os.getenv(LOG_LEVEL_ENV) or "INFO")

    try:
        cfg = load_config(args.config)
        print(run(args, cfg))
    except (WorkReportError, OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
