"""
Report table model and period schemas for archived reports.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from reportlabel.config import LABEL_COLUMN


class PeriodType(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class Period:
    """A single reporting period anchored on any date it contains."""
    period_type: PeriodType = PeriodType.DAY
    date: dt.date = field(default_factory=dt.date.today)

    def resolve(self) -> tuple[dt.date, dt.date]:
        """Return (start_date, end_date) based on period_type."""
        d = self.date
        if self.period_type == PeriodType.DAY:
            return d, d

        if self.period_type == PeriodType.WEEK:
            start = d - dt.timedelta(days=d.weekday())
            return start, start + dt.timedelta(days=6)

        if self.period_type == PeriodType.MONTH:
            start = dt.date(d.year, d.month, 1)
            if d.month == 12:
                end = dt.date(d.year + 1, 1, 1) - dt.timedelta(days=1)
            else:
                end = dt.date(d.year, d.month + 1, 1) - dt.timedelta(days=1)
            return start, end

        return dt.date(d.year, 1, 1), dt.date(d.year, 12, 31)

    @property
    def date_start(self) -> dt.date:
        return self.resolve()[0]

    @property
    def date_end(self) -> dt.date:
        return self.resolve()[1]

    @property
    def key(self) -> str:
        """ISO start date; keys collections and archive files."""
        return self.date_start.isoformat()

    @property
    def label(self) -> str:
        """Human-readable label for the period."""
        start, end = self.resolve()
        if self.period_type == PeriodType.DAY:
            return f"{start:%a %d %b %Y}"
        if self.period_type == PeriodType.WEEK:
            return f"Week {start:%b %d} to {end:%b %d, %Y}"
        if self.period_type == PeriodType.MONTH:
            return f"{start:%B %Y}"
        return str(start.year)

    def previous(self) -> "Period":
        """Return the immediately preceding period of the same type."""
        return Period(self.period_type, self.date_start - dt.timedelta(days=1))

    def next(self) -> "Period":
        return Period(self.period_type, self.date_end + dt.timedelta(days=1))

    @classmethod
    def range(cls, period_type: PeriodType, start: dt.date, end: dt.date) -> list["Period"]:
        """All periods of one type overlapping [start, end], oldest first."""
        periods = []
        p = cls(period_type, start)
        while p.date_start <= end:
            periods.append(p)
            p = p.next()
        return periods


def parse_date_param(
    period_type: str,
    date: str,
    today: dt.date | None = None,
) -> Period | list[Period]:
    """Parse a period/date request pair.

    A single date gives one Period. "start,end", "lastN" and "previousN"
    give a list of periods, which callers load as a TableCollection.
    """
    try:
        pt = PeriodType(period_type)
    except ValueError:
        raise ValueError(f"Invalid period: {period_type}")

    today = today or dt.date.today()
    date = date.strip()

    if "," in date:
        start_s, end_s = date.split(",", 1)
        start, end = _parse_single_date(start_s, today), _parse_single_date(end_s, today)
        if start > end:
            raise ValueError(f"Invalid date range: {date}")
        return Period.range(pt, start, end)

    for prefix in ("last", "previous"):
        if date.startswith(prefix) and date[len(prefix):].isdigit():
            count = int(date[len(prefix):])
            if count < 1:
                raise ValueError(f"Invalid date: {date}")
            newest = Period(pt, today)
            if prefix == "previous":
                newest = newest.previous()
            oldest = newest
            for _ in range(count - 1):
                oldest = oldest.previous()
            return Period.range(pt, oldest.date_start, newest.date_start)

    return Period(pt, _parse_single_date(date, today))


def _parse_single_date(value: str, today: dt.date) -> dt.date:
    value = value.strip()
    if value == "today":
        return today
    if value == "yesterday":
        return today - dt.timedelta(days=1)
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date: {value}")


# ---------------------------------------------------------------------------
# Report tables
# ---------------------------------------------------------------------------

@dataclass
class Row:
    """One report row: flat column values plus metadata attached later."""
    columns: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    subtable_id: Optional[int] = None   # None for leaf rows

    @property
    def label(self) -> str:
        return self.columns.get(LABEL_COLUMN, "")

    @property
    def has_subtable(self) -> bool:
        return self.subtable_id is not None

    def add_metadata(self, name: str, value: Any) -> None:
        self.metadata[name] = value

    def get_metadata(self, name: str, default: Any = None) -> Any:
        return self.metadata.get(name, default)

    def copy(self) -> "Row":
        return Row(dict(self.columns), dict(self.metadata), self.subtable_id)


class ReportTable:
    """Ordered rows of one report (or of one row's sub-table)."""

    def __init__(self, rows: list[Row] | None = None, metadata: dict | None = None) -> None:
        self._rows: list[Row] = list(rows or [])
        self.metadata: dict[str, Any] = dict(metadata or {})

    def rows(self) -> list[Row]:
        return list(self._rows)

    def add_row(self, row: Row) -> None:
        self._rows.append(row)

    def get_row_from_label(self, label: str) -> Row | None:
        """First row whose label equals `label` exactly, or None."""
        for row in self._rows:
            if row.label == label:
                return row
        return None

    def empty_clone(self) -> "ReportTable":
        """Same kind of table with the same metadata and no rows."""
        return ReportTable(metadata=self.metadata)

    @property
    def period(self) -> Period | None:
        return self.metadata.get("period")

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __repr__(self) -> str:
        return f"ReportTable(rows={len(self._rows)}, metadata={self.metadata!r})"


class TableCollection:
    """Ordered tables keyed by period key (one table per period)."""

    def __init__(self, metadata: dict | None = None) -> None:
        self.metadata: dict[str, Any] = dict(metadata or {})
        self._tables: dict[str, ReportTable] = {}

    def add_table(self, table: ReportTable, key: str) -> None:
        self._tables[key] = table

    def get_table(self, key: str) -> ReportTable | None:
        return self._tables.get(key)

    def items(self) -> list[tuple[str, ReportTable]]:
        return list(self._tables.items())

    def keys(self) -> list[str]:
        return list(self._tables.keys())

    def empty_clone(self) -> "TableCollection":
        return TableCollection(self.metadata)

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"TableCollection(keys={self.keys()!r})"
