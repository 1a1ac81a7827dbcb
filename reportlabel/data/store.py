"""
ArchiveStore — Reads archived report tables from disk on request.

Root tables and sub-tables are separate CSV files, so a sub-table is only
read when something asks for it.
"""
from __future__ import annotations

from pathlib import Path

from reportlabel.config import ARCHIVE_FOLDER, DEFAULT_PERIOD
from reportlabel.data.loader import discover_reports, load_table_csv, table_path
from reportlabel.data.schemas import Period, ReportTable, TableCollection, parse_date_param


def build_request(report: str, period: str = DEFAULT_PERIOD, date: str = "today", **params) -> dict:
    """Split "Module.method" into a request dict understood by ArchiveStore.fetch."""
    if "." not in report:
        raise ValueError(f"Report must look like Module.method (got '{report}')")
    module, method = report.split(".", 1)
    request = {"module": module, "method": method, "period": period, "date": date}
    request.update(params)
    return request


class ArchiveStore:
    """Archived report tables addressed by (report, period, sub-table id)."""

    def __init__(self, archive: Path = ARCHIVE_FOLDER) -> None:
        self.archive = Path(archive)
        self._reports: list[str] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> "ArchiveStore":
        """Scan the archive folder for available reports."""
        print(f"Scanning archive: {self.archive}")
        self._reports = discover_reports(self.archive)
        if not self._reports:
            print("  No archived reports found")
        else:
            print(f"  {len(self._reports)} report(s): {', '.join(self._reports)}")
        self._loaded = True
        return self

    def reports(self) -> list[str]:
        if not self._loaded:
            self.load()
        return list(self._reports)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def fetch(self, request: dict) -> ReportTable | TableCollection | None:
        """Load the table(s) a request points at.

        A date range gives a TableCollection keyed by period key. With
        idSubtable set, a missing file means the row has no sub-table
        and None is returned (or stored as an empty member in a collection).
        """
        try:
            report = f"{request['module']}.{request['method']}"
        except KeyError as e:
            raise ValueError(f"Request is missing {e.args[0]!r}")
        if report not in self.reports():
            raise ValueError(f"Unknown report: {report}")

        periods = parse_date_param(request.get("period", DEFAULT_PERIOD), str(request.get("date", "today")))
        subtable_id = request.get("idSubtable")
        if subtable_id is not None:
            subtable_id = int(subtable_id)

        if isinstance(periods, list):
            collection = TableCollection(metadata={"report": report})
            for period in periods:
                table = self._load(report, period, subtable_id)
                if table is None:
                    table = ReportTable(metadata={"period": period, "report": report})
                collection.add_table(table, period.key)
            return collection

        return self._load(report, periods, subtable_id)

    def _load(self, report: str, period: Period, subtable_id: int | None) -> ReportTable | None:
        path = table_path(self.archive, report, period, subtable_id)
        if not path.exists():
            if subtable_id is not None:
                return None
            # Period was never archived: no rows
            return ReportTable(metadata={"period": period, "report": report})

        table = load_table_csv(path)
        table.metadata.update(period=period, report=report)
        if subtable_id is not None:
            table.metadata["idSubtable"] = subtable_id
        return table
