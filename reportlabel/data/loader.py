"""
Archive discovery and CSV loading into ReportTables.
"""
from __future__ import annotations

import re
from pathlib import Path

import pandas as pd

from reportlabel.config import ARCHIVE_FOLDER, LABEL_COLUMN, SUBTABLE_COLUMN
from reportlabel.data.normalize import normalize_columns
from reportlabel.data.schemas import Period, ReportTable, Row


# ---------------------------------------------------------------------------
# Archive paths
# ---------------------------------------------------------------------------

_REPORT_DIR_RE = re.compile(r"^[A-Za-z0-9_]+\.[A-Za-z0-9_]+$")


def discover_reports(archive: Path = ARCHIVE_FOLDER) -> list[str]:
    """Report names ("Module.method") that have an archive directory."""
    if not archive.exists():
        return []
    return sorted(p.name for p in archive.iterdir() if p.is_dir() and _REPORT_DIR_RE.match(p.name))


def table_path(
    archive: Path,
    report: str,
    period: Period,
    subtable_id: int | None = None,
) -> Path:
    """Location of a root table, or of one row's sub-table."""
    stem = period.key if subtable_id is None else f"{period.key}_{subtable_id}"
    return archive / report / period.period_type.value / f"{stem}.csv"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_table_csv(filepath: Path) -> ReportTable:
    """Load one archive CSV into a ReportTable."""
    df = pd.read_csv(
        filepath,
        dtype={LABEL_COLUMN: str},
        keep_default_na=False,
        na_values={SUBTABLE_COLUMN: [""]},
        skipinitialspace=False,
    )
    df = normalize_columns(df)
    return frame_to_table(df)


def frame_to_table(df: pd.DataFrame) -> ReportTable:
    table = ReportTable()
    for rec in df.to_dict("records"):
        subtable_id = rec.pop(SUBTABLE_COLUMN, None)
        table.add_row(Row(
            columns=rec,
            subtable_id=None if pd.isna(subtable_id) else int(subtable_id),
        ))
    return table
