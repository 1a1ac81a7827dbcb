"""
MatchWorkbook — one sheet per period listing the rows matched by label paths.

Sheet layout:
  row 1  report name
  row 2  period and match count
  row 4  # | Query | Label Path | Depth | Stored Label | Sub-table | metrics...
  row 5+ one line per matched row, in label order

Rows that have a sub-table are shaded and marked "+" with the sub-table id.
"""
from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from reportlabel.excel.formatters import (
    NOTE_FONT, SUBTABLE_MARKER, SUBTITLE_FONT, TITLE_FONT,
    fit_columns, metric_cell, path_cell, sheet_title, style_header, text_cell,
)

MATCH_HEADERS = ["#", "Query", "Label Path", "Depth", "Stored Label", "Sub-table"]
HEADER_ROW = 4
NO_MATCH_NOTE = "No row matched the requested labels."


def metric_header(key: str) -> str:
    return key.replace("_", " ").title()


class MatchWorkbook:
    """Workbook of matched rows; `metrics` fixes the metric columns of every sheet."""

    def __init__(self, report: str, labels: list[str], metrics: list[str]) -> None:
        self.report = report
        self.labels = labels
        self.metrics = metrics
        self.wb = Workbook()
        self.wb.remove(self.wb.active)

    def add_period(self, period: dict) -> Worksheet:
        """Add the sheet for one FilteredPeriod payload dict."""
        ws = self.wb.create_sheet(title=sheet_title(period["key"]))
        rows = period["rows"]

        ws.cell(row=1, column=1, value=self.report).font = TITLE_FONT
        subtitle = f"{period['period'] or 'All rows'}  |  {len(rows)} of {len(self.labels)} label(s) matched"
        ws.cell(row=2, column=1, value=subtitle).font = SUBTITLE_FONT

        if not rows:
            ws.cell(row=HEADER_ROW, column=1, value=NO_MATCH_NOTE).font = NOTE_FONT
            return ws

        style_header(ws, HEADER_ROW, MATCH_HEADERS + [metric_header(m) for m in self.metrics])
        for row_num, match in enumerate(rows, HEADER_ROW + 1):
            self._write_match(ws, row_num, match)

        fit_columns(ws)
        ws.freeze_panes = f"C{HEADER_ROW + 1}"
        return ws

    def _write_match(self, ws: Worksheet, row_num: int, match: dict) -> None:
        subtable_id = match["subtable_id"]
        parent = subtable_id is not None
        marker = f"{SUBTABLE_MARKER} {subtable_id}" if parent else None

        metric_cell(ws, row_num, 1, match["label_idx"], parent)
        text_cell(ws, row_num, 2, match["query"], parent)
        path_cell(ws, row_num, 3, match["path"], parent)
        metric_cell(ws, row_num, 4, len(match["path"]), parent)
        text_cell(ws, row_num, 5, match["label"], parent)
        text_cell(ws, row_num, 6, marker, parent)
        for col, key in enumerate(self.metrics, len(MATCH_HEADERS) + 1):
            metric_cell(ws, row_num, col, match["columns"].get(key), parent)

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(path)
        return path
