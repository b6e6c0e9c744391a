"""Export module for writing comparison results to Excel spreadsheets."""

from .excel import ComparisonExporter

__all__ = ["ComparisonExporter"]
