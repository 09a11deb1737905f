"""Excel export for parsed receipts and review data."""

import logging
from typing import List, Optional
from pathlib import Path
import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from .models import ReceiptResult
from .review import ReviewItem

logger = logging.getLogger(__name__)

SHEET_NAME = "All Receipts"

HEADERS = ["File Name", "Vendor", "Date", "Invoice", "Subtotal", "Tax", "Total",
           "Review Status", "Review Reason"]
COLUMN_WIDTHS = [25, 30, 12, 18, 12, 12, 12, 12, 50]


class ExcelExporter:
    """Export parsed receipts and review items to an Excel workbook."""

    def __init__(self, output_path: Path):
        """
        Initialize Excel exporter.

        Args:
            output_path: Path for the output Excel file
        """
        self.output_path = output_path
        self.workbook = Workbook()

    def export_receipts(self,
                        receipts: List[ReceiptResult],
                        review_items: Optional[List[ReviewItem]] = None,
                        include_summary: bool = False):
        """
        Export receipts to a single consolidated sheet.

        Args:
            receipts: Stored receipts to export
            review_items: Items needing review, matched to receipts by id
            include_summary: Whether to add a summary section above the rows
        """
        review_items = review_items or []
        try:
            if "Sheet" in self.workbook.sheetnames:
                self.workbook.remove(self.workbook["Sheet"])

            self._create_receipts_sheet(receipts, review_items, include_summary)

            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.workbook.save(str(self.output_path))

            logger.info(f"Excel file exported to: {self.output_path}")

        except Exception as e:
            logger.error(f"Failed to export Excel file: {e}")
            raise

    def _create_receipts_sheet(self, receipts: List[ReceiptResult],
                               review_items: List[ReviewItem], include_summary: bool):
        ws = self.workbook.create_sheet(SHEET_NAME)
        current_row = 1

        if include_summary:
            current_row = self._add_summary_section(ws, receipts, current_row)
            current_row += 2

        review_lookup = {item.receipt_id: item for item in review_items if item.receipt_id}

        ws.cell(row=current_row, column=1, value="ALL RECEIPTS").font = Font(bold=True, size=14)
        current_row += 2

        for col, header in enumerate(HEADERS, 1):
            cell = ws.cell(row=current_row, column=col, value=header)
            cell.font = Font(bold=True)
            cell.fill = PatternFill(start_color="E6E6E6", end_color="E6E6E6", fill_type="solid")
            cell.alignment = Alignment(horizontal="center")
        current_row += 1

        # OK rows first, REVIEW rows at the end
        ordered = sorted(receipts, key=lambda r: r.id in review_lookup)
        for receipt in ordered:
            data = receipt.data
            review_item = review_lookup.get(receipt.id)
            values = [
                receipt.filename,
                data.vendor_name or '',
                data.date or '',
                data.invoice_number or '',
                data.subtotal_amount,
                data.tax_amount,
                data.amount,
                "REVIEW" if review_item else "OK",
                review_item.reason if review_item else "",
            ]
            for col, value in enumerate(values, 1):
                ws.cell(row=current_row, column=col, value=value)
            current_row += 1

        # Failures never produced a receipt; list them after the parsed rows
        for item in review_items:
            if item.receipt_id:
                continue
            ws.cell(row=current_row, column=1, value=Path(item.file_path).name)
            ws.cell(row=current_row, column=8, value="FAILED")
            ws.cell(row=current_row, column=9, value=item.reason)
            current_row += 1

        for i, width in enumerate(COLUMN_WIDTHS, 1):
            ws.column_dimensions[get_column_letter(i)].width = width

        logger.info(f"Created receipts sheet with {len(receipts)} receipts and {len(review_items)} review items")

    def _add_summary_section(self, ws, receipts: List[ReceiptResult], start_row: int) -> int:
        """Add summary statistics to the top of the sheet."""
        if not receipts:
            ws.cell(row=start_row, column=1, value="No receipts to summarize")
            return start_row + 1

        df = pd.DataFrame([
            {'vendor': r.data.vendor_name or 'Unknown', 'amount': r.data.amount}
            for r in receipts
        ])
        df['amount'] = pd.to_numeric(df['amount'])

        ws.cell(row=start_row, column=1, value="RECEIPT SUMMARY").font = Font(bold=True, size=14)
        current_row = start_row + 2

        ws.cell(row=current_row, column=1, value="Total Receipts:").font = Font(bold=True)
        ws.cell(row=current_row, column=2, value=len(receipts))

        ws.cell(row=current_row, column=4, value="Total Amount:").font = Font(bold=True)
        ws.cell(row=current_row, column=5, value=round(float(df['amount'].sum()), 2))

        ws.cell(row=current_row, column=7, value="Missing Total:").font = Font(bold=True)
        ws.cell(row=current_row, column=8, value=int(df['amount'].isna().sum()))
        current_row += 2

        ws.cell(row=current_row, column=1, value="Top Vendors:").font = Font(bold=True)
        current_row += 1
        ws.cell(row=current_row, column=1, value="Vendor").font = Font(bold=True)
        ws.cell(row=current_row, column=2, value="Count").font = Font(bold=True)
        ws.cell(row=current_row, column=3, value="Amount").font = Font(bold=True)
        current_row += 1

        vendor_summary = df.groupby('vendor')['amount'].agg(['size', 'sum'])
        top_vendors = vendor_summary.sort_values('sum', ascending=False).head(5)
        for vendor, row in top_vendors.iterrows():
            ws.cell(row=current_row, column=1, value=vendor)
            ws.cell(row=current_row, column=2, value=int(row['size']))
            ws.cell(row=current_row, column=3, value=round(float(row['sum']), 2))
            current_row += 1

        return current_row
