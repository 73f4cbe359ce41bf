from __future__ import annotations

from pathlib import Path

import openpyxl

FIRST_DAY_ROW = 8
LAST_DAY_ROW = FIRST_DAY_ROW + 30


def make_template(path: Path) -> Path:
    """Minimal report template: header cells, 31 day rows, a worked-time formula column."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Report"
    ws["A1"] = "Work Report"
    ws["B4"] = "Client"
    ws["K4"] = "Name"
    ws["A7"] = "Month"
    headers = {"B": "Day", "F": "Start", "G": "End", "H": "Break", "I": "Worked", "J": "Note"}
    for col, text in headers.items():
        ws[f"{col}6"] = text
    for day in range(1, 32):
        row = FIRST_DAY_ROW + day - 1
        ws[f"B{row}"] = day
        ws[f"I{row}"] = f'=IF(F{row}="","",G{row}-F{row}-H{row})'
    ws[f"I{LAST_DAY_ROW + 1}"] = f"=SUM(I{FIRST_DAY_ROW}:I{LAST_DAY_ROW})"
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path


def write_csv(path: Path, lines: list[str], encoding: str = "utf-8") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding=encoding)
    return path


def row_values(path: Path, row: int, cols: str = "FGHJ") -> list:
    ws = openpyxl.load_workbook(path).worksheets[0]
    return [ws[f"{col}{row}"].value for col in cols]
