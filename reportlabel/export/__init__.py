"""JSON payload models for filtered reports."""
from .models import FilteredPeriod, FilteredReport, MatchedRow, metric_value
