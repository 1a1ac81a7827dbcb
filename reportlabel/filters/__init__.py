"""Per-table report manipulations."""
from .manipulator import TableManipulator
from .label_filter import LabelFilter, label_variations
