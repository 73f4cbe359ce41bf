from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "work_report.json"


@dataclass
class ReportConfig:
    template_file: str = "local-data/templates/work_report_template.xlsx"
    output_dir: str = "local-data/output"
    csv_dir: str = "local-data/csv"
    holidays_file: str = "local-data/holidays.csv"
    holidays_encoding: str = "shift_jis"

    # default entry written for every workday
    default_start: str = "09:00"
    default_end: str = "18:00"
    default_break: str = "1:00"
    max_break: str = "3:00"

    report_suffix: str = "work_report"
    report_extension: str = ".xlsx"
    csv_suffix: str = "work_data"
    csv_extension: str = ".csv"

    # send: blank send_dir is asked for once and then saved
    send_dir: str = ""
    mail_template_file: str = "local-data/mail/mail_template.txt"

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: Optional[str | Path] = None) -> ReportConfig:
    """
    Config JSON format (every key optional):

    {
      "template_file": "local-data/templates/work_report_template.xlsx",
      "output_dir": "local-data/output",
      "csv_dir": "local-data/csv",
      "holidays_file": "local-data/holidays.csv",
      "default_start": "09:00",
      "send_dir": "local-data/send"
    }

    Values must be JSON strings.
    """
    cfg_path = Path(path or DEFAULT_CONFIG_PATH)
    if not cfg_path.exists():
        logger.info("Config %s not found; using defaults", cfg_path)
        return ReportConfig()

    raw = json.loads(cfg_path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Config {cfg_path} must be a JSON object")

    known = {f.name for f in fields(ReportConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {cfg_path}: {', '.join(unknown)}")
    for key, value in raw.items():
        if not isinstance(value, str):
            raise ValueError(f"Config key {key!r} in {cfg_path} must be a string, got {value!r}")

    logger.debug("Loaded config from %s", cfg_path)
    return ReportConfig(**raw)


def save_config(cfg: ReportConfig, path: Optional[str | Path] = None) -> Path:
    """Write cfg as JSON, so values entered at a prompt are kept for the next run."""
    cfg_path = Path(path or DEFAULT_CONFIG_PATH)
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(json.dumps(cfg.to_dict(), ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    logger.info("Saved config to %s", cfg_path)
    return cfg_path
