"""Spreadsheet export for report lists.

Excel (.xlsx) workbooks via openpyxl. The caller hands over the rows it
is currently showing; nothing is re-queried here.
"""

import io
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

INSPECTION_COLUMNS = [
    "date", "loan_ac_no", "customer_name", "loan_amount", "location", "region",
    "state", "lar_remarks", "payment_status", "invoice_status",
]

PAYOUT_COLUMNS = [
    "month", "financier", "loan_amount", "payout_percentage", "amount_paid",
    "less_tds", "nett_amount", "bank_details", "pan_no", "sm_name",
    "contact_no", "mail_sent", "payment_status",
]


def _cell_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def rows_for_export(records: list, columns: list[str]) -> list[dict]:
    """Flatten model instances (or dicts) to the exported columns."""
    rows = []
    for record in records:
        if isinstance(record, dict):
            rows.append({c: _cell_value(record.get(c)) for c in columns})
        else:
            rows.append({c: _cell_value(getattr(record, c, None)) for c in columns})
    return rows


def export_excel(
    data: list[dict],
    columns: list[str] | None = None,
    sheet_name: str = "Report",
    title: Optional[str] = None,
    creator: Optional[str] = None,
) -> bytes:
    """Render data as Excel (.xlsx) bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]
    if title:
        wb.properties.title = title
    if creator:
        wb.properties.creator = creator

    cols = columns or (list(data[0].keys()) if data else [])

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    for col_idx, col_name in enumerate(cols, 1):
        cell = ws.cell(row=1, column=col_idx, value=col_name.replace("_", " ").title())
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    number_format = '#,##0.00'
    for row_idx, row in enumerate(data, 2):
        for col_idx, col_name in enumerate(cols, 1):
            value = _cell_value(row.get(col_name))
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                cell.number_format = number_format
                cell.alignment = Alignment(horizontal="right")

    if cols:
        ws.auto_filter.ref = f"A1:{get_column_letter(len(cols))}{len(data) + 1}"
    ws.freeze_panes = "A2"

    for col_idx, col_name in enumerate(cols, 1):
        max_len = max(
            len(str(col_name)),
            *(len(str(row.get(col_name, ""))) for row in data[:100]),
        ) if data else len(str(col_name))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 2, 40)

    output = io.BytesIO()
    wb.save(output)
    logger.info("Exported %d rows to sheet %r", len(data), ws.title)
    return output.getvalue()


def export_filename(stem: str, on: date | None = None) -> str:
    """``<stem>_<YYYY-MM-DD>.xlsx`` for the Content-Disposition header."""
    day = on or datetime.now(timezone.utc).date()
    return f"{stem}_{day.isoformat()}.xlsx"
