"""
Pydantic schemas for filtered report payloads.
"""
from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, field_validator

def metric_value(value: Any) -> Any:
    """One archived metric as a JSON-native value; missing or non-finite -> None."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is pd.NA or value is pd.NaT:
        return None
    return value

class MatchedRow(BaseModel):
    label: str
    label_idx: int
    query: str
    path: list[str]                 # stored labels from the root table down to this row
    columns: dict[str, Any]
    subtable_id: Optional[int] = None

    @field_validator("columns", mode="before")
    @classmethod
    def _metrics_to_native(cls, columns: dict) -> dict[str, Any]:
        return {str(k): metric_value(v) for k, v in columns.items()}


class FilteredPeriod(BaseModel):
    key: Optional[str] = None      # period key; None for a single-table report
    period: Optional[str] = None   # human-readable period label
    rows: list[MatchedRow]

class FilteredReport(BaseModel):
    report: str
    labels: list[str]
    is_collection: bool
    periods: list[FilteredPeriod]
