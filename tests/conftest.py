"""Shared fixtures: in-memory page trees and an on-disk archive."""
import datetime as dt
from pathlib import Path

import pytest

from reportlabel.data.schemas import Period, PeriodType, ReportTable, Row


def make_table(*rows, metadata=None) -> ReportTable:
    """rows: (label, nb_visits) or (label, nb_visits, subtable_id)."""
    table = ReportTable(metadata=metadata)
    for spec in rows:
        label, visits = spec[0], spec[1]
        subtable_id = spec[2] if len(spec) > 2 else None
        table.add_row(Row(columns={"label": label, "nb_visits": visits}, subtable_id=subtable_id))
    return table


class RecordingFetch:
    """Fetch callable over a dict of sub-tables; remembers every request."""

    def __init__(self, subtables: dict[int, ReportTable]):
        self.subtables = subtables
        self.requests: list[dict] = []

    def __call__(self, request: dict):
        self.requests.append(dict(request))
        return self.subtables.get(request["idSubtable"])


@pytest.fixture
def page_tree():
    """Root page URL table plus its sub-tables keyed by id.

    docs/ (1)
      install/ (3)
        index.html
      faq.html
    blog/ (2)
      2020
    index.html
    a &amp; b          (stored sanitized)
    a>b                (label containing the separator)
    """
    root = make_table(
        ("docs", 10, 1),
        ("blog", 5, 2),
        ("index.html", 7),
        ("a &amp; b", 1),
        ("a>b", 2),
        metadata={"report": "Actions.getPageUrls"},
    )
    subtables = {
        1: make_table(("install", 4, 3), ("faq.html", 2)),
        2: make_table(("2020", 5)),
        3: make_table(("index.html", 3)),
    }
    return root, subtables


@pytest.fixture
def fetch(page_tree):
    _, subtables = page_tree
    return RecordingFetch(subtables)


@pytest.fixture
def month_periods():
    return [
        Period(PeriodType.MONTH, dt.date(2020, 1, 15)),
        Period(PeriodType.MONTH, dt.date(2020, 2, 15)),
    ]


# ---------------------------------------------------------------------------
# On-disk archive
# ---------------------------------------------------------------------------

def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


@pytest.fixture
def archive(tmp_path) -> Path:
    root = tmp_path / "archive"
    urls = root / "Actions.getPageUrls" / "day"
    _write(urls / "2024-03-01.csv",
           "label,nb_visits,idsubdatatable\n"
           "docs,10,1\n"
           "blog,5,2\n"
           "index.html,7,\n"
           "my page.html,1,\n")
    _write(urls / "2024-03-01_1.csv",
           "label,nb_visits,idsubdatatable\n"
           "install,4,3\n"
           "faq.html,2,\n")
    _write(urls / "2024-03-01_3.csv",
           "label,nb_visits\n"
           "index.html,3\n")
    _write(urls / "2024-03-02.csv",
           "label,nb_visits,idsubdatatable\n"
           "blog,9,2\n")

    titles = root / "Actions.getPageTitles" / "day"
    _write(titles / "2024-03-01.csv",
           "label,nb_visits\n"
           " Welcome,3\n"
           "About,1\n")
    return root
