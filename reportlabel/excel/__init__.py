"""Excel workbooks of label matches."""
from .writer import MatchWorkbook
