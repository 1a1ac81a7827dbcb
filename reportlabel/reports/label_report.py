"""
Label Report — rows of an archived report picked out by label paths.
"""
from __future__ import annotations

from pathlib import Path

from reportlabel.config import LABEL_COLUMN
from reportlabel.data.schemas import ReportTable, TableCollection
from reportlabel.data.store import ArchiveStore
from reportlabel.export.models import FilteredPeriod, FilteredReport, MatchedRow
from reportlabel.excel.writer import MatchWorkbook
from reportlabel.filters.label_filter import LabelFilter


def filter_report(store: ArchiveStore, request: dict, labels: list[str]) -> ReportTable | TableCollection:
    """Fetch the requested report and keep the rows matching `labels`."""
    data = store.fetch(request)
    label_filter = LabelFilter(
        request["module"],
        request["method"],
        request=request,
        fetch=store.fetch,
    )
    return label_filter.filter(labels, data)


def _period_payload(key: str | None, table: ReportTable, labels: list[str]) -> FilteredPeriod:
    rows = []
    for row in table:
        idx = row.get_metadata("label_idx")
        rows.append(MatchedRow(
            label=row.label,
            label_idx=idx,
            query=labels[idx],
            path=row.get_metadata("label_path") or [row.label],
            columns={k: v for k, v in row.columns.items() if k != LABEL_COLUMN},
            subtable_id=row.subtable_id,
        ))
    period = table.period
    return FilteredPeriod(key=key, period=period.label if period else None, rows=rows)


def generate_json(store: ArchiveStore, request: dict, labels: list[str]) -> dict:
    filtered = filter_report(store, request, labels)

    if isinstance(filtered, TableCollection):
        periods = [_period_payload(key, table, labels) for key, table in filtered.items()]
    else:
        periods = [_period_payload(None, filtered, labels)]

    report = FilteredReport(
        report=f"{request['module']}.{request['method']}",
        labels=labels,
        is_collection=isinstance(filtered, TableCollection),
        periods=periods,
    )
    return report.model_dump()


def _metric_keys(periods: list[dict]) -> list[str]:
    """Every metric seen in any matched row, first-seen order."""
    keys: dict[str, None] = {}
    for p in periods:
        for r in p["rows"]:
            keys.update(dict.fromkeys(r["columns"]))
    return list(keys)


def generate_excel(data: dict, output_path: str | Path) -> Path:
    """Write a payload from generate_json as a workbook, one sheet per period."""
    workbook = MatchWorkbook(data["report"], data["labels"], _metric_keys(data["periods"]))
    for p in data["periods"]:
        workbook.add_period(p)
    return workbook.save(output_path)
