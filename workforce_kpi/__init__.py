"""HR workforce KPI pipeline: workbook import, metrics engine and dashboard indicators."""

__version__ = "0.1.0"
