"""
LabelFilter — keep only the rows whose label matches the requested labels.

Labels are passed URL-encoded. Recursive labels (e.g. page URL trees) join
the label of every level with ">", as in "docs>install>index.html"; only the
sub-tables on that path are loaded, never the whole tree.
"""
from __future__ import annotations

from typing import Any

from reportlabel.config import BLANK_PREFIXED_REPORTS, SEPARATOR_RECURSIVE_LABEL
from reportlabel.data.normalize import sanitize_input_value, url_decode
from reportlabel.data.schemas import ReportTable, Row
from reportlabel.filters.manipulator import ReportFetcher, TableManipulator


def label_variations(label: str, blank_prefixed: bool = False) -> list[str]:
    """Spellings of a label to try, most authoritative first.

    Stored labels are sanitized, so the sanitized form is tried before the
    label as given. Reports flagged `blank_prefixed` store some labels with
    a leading blank that is lost when the label is passed in a URL.
    """
    trimmed = label.strip()

    sanitized = sanitize_input_value(trimmed)
    variations = [sanitized]
    if blank_prefixed:
        variations.append(" " + sanitized)
        variations.append(" " + trimmed)
    variations.append(label)
    return variations


class LabelFilter(TableManipulator):
    """Narrow a report (or each period of a report) to the rows matching labels."""

    def __init__(
        self,
        api_module: str = "",
        api_method: str = "",
        request: dict | None = None,
        fetch: ReportFetcher | None = None,
        blank_prefixed: bool | None = None,
        separator: str = SEPARATOR_RECURSIVE_LABEL,
    ) -> None:
        super().__init__(api_module, api_method, request, fetch)
        if blank_prefixed is None:
            blank_prefixed = self.report_name in BLANK_PREFIXED_REPORTS
        self.blank_prefixed = blank_prefixed
        self.separator = separator

    def filter(self, labels: str | list[str], data_table: Any, date: str | None = None) -> Any:
        """Return a new table holding at most one row per label.

        Rows keep the order of `labels` and carry metadata "label_idx", the
        position of the label that matched them. Labels with no match are
        left out. A collection gives a collection of filtered tables.
        """
        if isinstance(labels, str):
            labels = [labels]
        return self.manipulate(data_table, date, labels=list(labels))

    def do_manipulate(self, data_table: ReportTable, date: str | None = None, **context: Any) -> ReportTable:
        result = data_table.empty_clone()
        for label_idx, label in enumerate(context.get("labels", [])):
            row = self._find_row(label, data_table, date)
            if row is None:
                continue
            row.add_metadata("label_idx", label_idx)
            result.add_row(row)
        return result

    def manipulate_subtable_request(self, request: dict) -> None:
        # sub-tables are walked here, the label must not filter them again
        request.pop("label", None)

    # ------------------------------------------------------------------
    # Recursive descent
    # ------------------------------------------------------------------

    def _find_row(self, label: str, data_table: ReportTable, date: str | None) -> Row | None:
        for variation in label_variations(label, self.blank_prefixed):
            label_parts = tuple(url_decode(part) for part in variation.split(self.separator))
            row = self._descend(label_parts, data_table, date)
            if row is not None:
                return row
        return None

    def _descend(
        self,
        label_parts: tuple[str, ...],
        data_table: ReportTable,
        date: str | None,
        trail: tuple[str, ...] = (),
    ) -> Row | None:
        """Matched row (a copy, tagged with the stored labels walked) or None."""
        if not label_parts:
            return None
        head, rest = label_parts[0], label_parts[1:]

        row = None
        for variation in label_variations(head, self.blank_prefixed):
            row = data_table.get_row_from_label(variation)
            if row is not None:
                break
        if row is None:
            return None

        trail = trail + (row.label,)
        if not rest:
            row = row.copy()
            row.add_metadata("label_path", list(trail))
            return row

        subtable = self.load_subtable(row, date)
        if subtable is None:
            # labels left but the row has no children
            return None
        return self._descend(rest, subtable, date, trail)
