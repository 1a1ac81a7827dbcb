"""
Report Label Filter — Configuration: paths, constants, label rules.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with REPORTLABEL_DATA_DIR env var
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("REPORTLABEL_DATA_DIR", str(Path.home() / "ReportLabel")))
ARCHIVE_FOLDER = _data_dir / "archive"

# ---------------------------------------------------------------------------
# Label handling
# ---------------------------------------------------------------------------
# Joins the labels of nested rows, e.g. "docs>install>index.html"
SEPARATOR_RECURSIVE_LABEL = ">"

# Reports whose stored labels may carry a single leading blank.
# The blank gets lost when a label travels through a query string.
BLANK_PREFIXED_REPORTS = {
    "Actions.getPageTitles",
}

# ---------------------------------------------------------------------------
# Archive CSV layout
# ---------------------------------------------------------------------------
LABEL_COLUMN = "label"
SUBTABLE_COLUMN = "idsubdatatable"

DEFAULT_PERIOD = "day"
PERIOD_TYPES = ["day", "week", "month", "year"]
