"""
Label sanitization, URL encoding, and archive column normalization.
"""
from __future__ import annotations

import html
from urllib.parse import quote_plus, unquote_plus

import pandas as pd

from reportlabel.config import LABEL_COLUMN, SUBTABLE_COLUMN, SEPARATOR_RECURSIVE_LABEL


# ---------------------------------------------------------------------------
# Label text
# ---------------------------------------------------------------------------

def sanitize_input_value(value: str) -> str:
    """Canonical stored form of a label: control chars dropped, HTML-escaped."""
    value = value.replace("\n", "").replace("\r", "").replace("\0", "")
    # html.escape writes &#x27; where stored labels use &#039;
    return html.escape(value, quote=True).replace("&#x27;", "&#039;")


def unsanitize_input_value(value: str) -> str:
    """Reverse sanitize_input_value for display."""
    return html.unescape(value)


def url_decode(value: str) -> str:
    """Percent-decode one label segment ("+" also decodes to a space)."""
    return unquote_plus(value)


def encode_label_path(segments: list[str], separator: str = SEPARATOR_RECURSIVE_LABEL) -> str:
    """Build a recursive label query from raw segments.

    Each segment is percent-encoded so a literal separator inside a
    label survives the split.
    """
    return separator.join(quote_plus(s) for s in segments)


def split_raw_label(label: str, separator: str = SEPARATOR_RECURSIVE_LABEL) -> list[str]:
    return [part.strip() for part in label.split(separator)]


# ---------------------------------------------------------------------------
# Archive frames
# ---------------------------------------------------------------------------

def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Clean a raw archive CSV frame into label / sub-table id / metrics."""
    df = df.rename(columns=lambda c: str(c).strip())
    if LABEL_COLUMN not in df.columns:
        raise ValueError(f"Archive table has no '{LABEL_COLUMN}' column")

    # Labels stay verbatim: a leading blank is significant for some reports
    df[LABEL_COLUMN] = df[LABEL_COLUMN].fillna("").astype(str)

    if SUBTABLE_COLUMN in df.columns:
        df[SUBTABLE_COLUMN] = pd.to_numeric(df[SUBTABLE_COLUMN], errors="coerce").astype("Int64")
    else:
        df[SUBTABLE_COLUMN] = pd.array([pd.NA] * len(df), dtype="Int64")

    return df
