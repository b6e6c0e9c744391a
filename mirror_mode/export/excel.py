"""
Excel export module for comparison results.

Handles:
- Writing the per-word comparison table
- A summary sheet with the word counts
- Saving to disk or to bytes for download
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from mirror_mode.models import ComparisonResult

logger = logging.getLogger(__name__)


class ComparisonExporter:
    """
    Exports comparison results to Excel workbooks.

    Features:
    - One row per distinct word, in comparison order
    - Green/red marks for presence on each side
    - Summary sheet with the three counts and common words
    """

    HEADERS = ["Word", "In Reference", "In Candidate"]

    COLUMN_WIDTHS = {
        "A": 35,  # Word
        "B": 15,  # In Reference
        "C": 15,  # In Candidate
    }

    PRESENT_MARK = "✓"
    ABSENT_MARK = "✗"

    def __init__(self):
        """Initialize the Excel exporter."""
        self._setup_styles()

    def _setup_styles(self):
        """Set up Excel styles for formatting."""
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

        self.present_font = Font(color="2E7D32", bold=True)
        self.absent_font = Font(color="C62828", bold=True)
        self.center = Alignment(horizontal="center")

        thin_border = Side(style="thin", color="CCCCCC")
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border,
        )

        # Alternating row colors
        self.even_row_fill = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")

    def build_workbook(self, result: ComparisonResult) -> Workbook:
        """Build a workbook with the comparison and summary sheets."""
        wb = Workbook()
        ws = wb.active
        ws.title = "Comparison"
        self._write_headers(ws)

        for row_num, row in enumerate(result.rows, start=2):
            self._write_row(ws, row_num, row.word, row.in_reference, row.in_candidate)

        for col_letter, width in self.COLUMN_WIDTHS.items():
            ws.column_dimensions[col_letter].width = width

        self._write_summary(wb.create_sheet("Summary"), result)
        return wb

    def export(self, result: ComparisonResult, file_path: Union[str, Path]) -> Path:
        """
        Export a comparison result to an Excel file.

        Args:
            result: Comparison to export
            file_path: Path to Excel file (overwritten if it exists)

        Returns:
            Path to the exported file
        """
        file_path = Path(file_path)

        # Ensure .xlsx extension
        if file_path.suffix.lower() != ".xlsx":
            file_path = file_path.with_suffix(".xlsx")

        wb = self.build_workbook(result)
        wb.save(file_path)
        logger.info(f"Exported {len(result.rows)} words to {file_path}")

        return file_path

    def to_bytes(self, result: ComparisonResult) -> bytes:
        """Render a comparison result as .xlsx file content."""
        buffer = BytesIO()
        self.build_workbook(result).save(buffer)
        return buffer.getvalue()

    def _write_headers(self, ws: Worksheet):
        """Write header row with formatting."""
        for col, header in enumerate(self.HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment
            cell.border = self.cell_border

        # Freeze header row
        ws.freeze_panes = "A2"

    def _write_row(self, ws: Worksheet, row_num: int, word: str, in_reference: bool, in_candidate: bool):
        """Write a single word row."""
        word_cell = ws.cell(row=row_num, column=1, value=word)
        word_cell.border = self.cell_border

        for col, present in ((2, in_reference), (3, in_candidate)):
            cell = ws.cell(row=row_num, column=col, value=self.PRESENT_MARK if present else self.ABSENT_MARK)
            cell.font = self.present_font if present else self.absent_font
            cell.alignment = self.center
            cell.border = self.cell_border

        if row_num % 2 == 0:
            for col in range(1, len(self.HEADERS) + 1):
                ws.cell(row=row_num, column=col).fill = self.even_row_fill

    def _write_summary(self, ws: Worksheet, result: ComparisonResult):
        """Write the count summary sheet."""
        summary = [
            ("Total distinct words", result.total_distinct_words),
            ("Words in reference", result.reference_word_count),
            ("Words in candidate", result.candidate_word_count),
            ("Common words", result.common_word_count),
        ]
        for row_num, (label, value) in enumerate(summary, start=1):
            ws.cell(row=row_num, column=1, value=label).font = Font(bold=True)
            ws.cell(row=row_num, column=2, value=value)

        ws.column_dimensions["A"].width = 25
        ws.column_dimensions["B"].width = 12


def export_comparison(result: ComparisonResult, file_path: Union[str, Path]) -> Path:
    """
    Convenience function to export a comparison.

    Args:
        result: Comparison to export
        file_path: Path to Excel file

    Returns:
        Path to exported file
    """
    exporter = ComparisonExporter()
    return exporter.export(result, file_path)
