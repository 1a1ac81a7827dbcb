"""Report Label Filter — narrow hierarchical reports to the rows named by label paths."""
__version__ = "1.0.0"
