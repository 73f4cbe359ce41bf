"""
Thin file and workbook helpers the report service calls into.
Everything here goes straight to openpyxl or the filesystem.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List
from zipfile import BadZipFile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.properties import CalcProperties

from .errors import DocumentFormatError
from .layout import parse_cell_address

logger = logging.getLogger(__name__)


def open_workbook(path: str | Path):
    """Load a workbook. A file that is not an .xlsx package raises DocumentFormatError."""
    if not Path(path).is_file():
        raise FileNotFoundError(f"Workbook not found: {path}")
    try:
        return openpyxl.load_workbook(path)
    except (BadZipFile, KeyError, InvalidFileException) as e:
        raise DocumentFormatError(f"Not a valid workbook: {path} ({e})") from e


def save_workbook(wb, path: str | Path) -> None:
    wb.save(path)
    logger.debug("Saved workbook %s", path)


def set_cell(ws, address: str, value) -> None:
    row, col = parse_cell_address(address)
    ws.cell(row + 1, col + 1).value = value


def clear_cell(ws, address: str) -> None:
    row, col = parse_cell_address(address)
    ws.cell(row + 1, col + 1).value = None


def copy_template(src: str | Path, dst: str | Path) -> None:
    Path(dst).parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)


def recompute_formulas(wb) -> None:
    """Ask the spreadsheet application to recalculate every formula on next open."""
    if wb.calculation is None:
        wb.calculation = CalcProperties()
    wb.calculation.fullCalcOnLoad = True


def list_files(directory: str | Path) -> List[str]:
    """Names of regular files in directory, sorted. A missing directory has no files."""
    d = Path(directory)
    if not d.is_dir():
        logger.warning("Directory not found: %s", d)
        return []
    return sorted(p.name for p in d.iterdir() if p.is_file())


def prompt_line(text: str) -> str:
    return input(text).strip()
