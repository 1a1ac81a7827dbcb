"""
TableManipulator — base for manipulations applied to each report table.

Handles the single table / period collection split and loading of
sub-tables through a fetch callable, so subclasses only deal with one
ReportTable at a time.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from reportlabel.data.schemas import ReportTable, Row, TableCollection

# request dict -> table; None when the requested sub-table does not exist
ReportFetcher = Callable[[dict], Optional[ReportTable]]


class TableManipulator:

    def __init__(
        self,
        api_module: str = "",
        api_method: str = "",
        request: dict | None = None,
        fetch: ReportFetcher | None = None,
    ) -> None:
        self.api_module = api_module
        self.api_method = api_method
        self.request = dict(request or {})
        self.fetch = fetch

    @property
    def report_name(self) -> str:
        return f"{self.api_module}.{self.api_method}"

    def manipulate(self, data_table: Any, date: str | None = None, **context: Any) -> Any:
        """Apply do_manipulate to a table, or to every member of a collection.

        Collection members are manipulated with the start date of their
        own period. Anything that is not a table is returned unchanged.
        """
        if isinstance(data_table, TableCollection):
            result = data_table.empty_clone()
            for key, child in data_table.items():
                period = child.period
                child_date = period.date_start.isoformat() if period is not None else date
                result.add_table(self.manipulate(child, child_date, **context), key)
            return result

        if isinstance(data_table, ReportTable):
            return self.do_manipulate(data_table, date, **context)

        return data_table

    def do_manipulate(self, data_table: ReportTable, date: str | None = None, **context: Any) -> ReportTable:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Sub-tables
    # ------------------------------------------------------------------

    def load_subtable(self, row: Row, date: str | None = None) -> ReportTable | None:
        """Fetch the sub-table of `row`, or None if the row is a leaf."""
        if not row.has_subtable:
            return None
        if self.fetch is None:
            raise RuntimeError(f"{type(self).__name__} needs a fetch callable to load sub-tables")

        request = dict(self.request)
        request["module"] = self.api_module
        request["method"] = self.api_method
        request["idSubtable"] = row.subtable_id
        request["expanded"] = 0
        if date:
            request["date"] = date
        self.manipulate_subtable_request(request)

        subtable = self.fetch(request)
        if isinstance(subtable, TableCollection):
            raise TypeError(f"Sub-table request for {self.report_name} returned a collection")
        return subtable

    def manipulate_subtable_request(self, request: dict) -> None:
        """Hook to adjust a sub-table request before it is fetched."""
