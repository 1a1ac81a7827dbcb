"""
Cell styles and formatting for label match sheets.
"""
from __future__ import annotations

import re
from typing import Any

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

DARK_BLUE = "1A3E6E"
GRAY_666 = "666666"
LIGHT_GOLD = "FFF8DC"

TITLE_FONT = Font(name="Calibri", size=16, bold=True, color=DARK_BLUE)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=GRAY_666)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
DATA_FONT = Font(name="Calibri", size=10)
NOTE_FONT = Font(name="Calibri", size=10, italic=True, color=GRAY_666)

HEADER_FILL = PatternFill(start_color=DARK_BLUE, end_color=DARK_BLUE, fill_type="solid")
# rows that have a sub-table below them
PARENT_FILL = PatternFill(start_color=LIGHT_GOLD, end_color=LIGHT_GOLD, fill_type="solid")

_SIDE = Side(style="thin", color="CCCCCC")
THIN_BORDER = Border(left=_SIDE, right=_SIDE, top=_SIDE, bottom=_SIDE)

PATH_SEPARATOR = " > "
SUBTABLE_MARKER = "+"

_SHEET_TITLE_RE = re.compile(r"[\[\]:*?/\\]")


def sheet_title(key: str | None) -> str:
    """Worksheet name for a period key (Excel allows 31 chars, no []:*?/\\)."""
    if not key:
        return "Report"
    return _SHEET_TITLE_RE.sub("-", key)[:31]


def style_header(ws: Worksheet, row_num: int, headers: list[str]) -> None:
    for col, text in enumerate(headers, 1):
        cell = ws.cell(row=row_num, column=col, value=text)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal="center")


def path_cell(ws: Worksheet, row_num: int, col_num: int, path: list[str], parent: bool) -> None:
    """Label path joined with " > ", indented one step per level below the root."""
    cell = ws.cell(row=row_num, column=col_num, value=PATH_SEPARATOR.join(path))
    cell.alignment = Alignment(horizontal="left", indent=max(len(path) - 1, 0))
    _finish(cell, parent)


def text_cell(ws: Worksheet, row_num: int, col_num: int, value: Any, parent: bool) -> None:
    cell = ws.cell(row=row_num, column=col_num, value=value)
    cell.alignment = Alignment(horizontal="left")
    _finish(cell, parent)


def metric_cell(ws: Worksheet, row_num: int, col_num: int, value: Any, parent: bool) -> None:
    """Numbers right-aligned with thousands separators; anything else as text."""
    cell = ws.cell(row=row_num, column=col_num, value=value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        cell.alignment = Alignment(horizontal="left")
    else:
        cell.alignment = Alignment(horizontal="right")
        cell.number_format = "#,##0.00" if isinstance(value, float) else "#,##0"
    _finish(cell, parent)


def _finish(cell, parent: bool) -> None:
    cell.font = DATA_FONT
    cell.border = THIN_BORDER
    if parent:
        cell.fill = PARENT_FILL


def fit_columns(ws: Worksheet, min_width: int = 8, max_width: int = 60) -> None:
    widths: dict[int, int] = {}
    for row in ws.iter_rows(min_row=4):
        for cell in row:
            if cell.value is not None:
                width = len(str(cell.value)) + 2 + 2 * (cell.alignment.indent or 0)
                widths[cell.column] = max(widths.get(cell.column, 0), width)
    for col, width in widths.items():
        ws.column_dimensions[get_column_letter(col)].width = min(max(width, min_width), max_width)
