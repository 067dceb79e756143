"""Structured row export: XLSX via openpyxl and a flat CSV."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from .report import BASE_HEADERS, Report, SignatureBlock, quantity_headers

logger = logging.getLogger(__name__)

SHEET_NAME = "Inventory"
SIGNATURE_LINE = "_______________"

# Column slots for signature labels, left to right
_DEFAULT_SIGNATURE_COLUMNS = (1, 3, 6)
_RTL_SIGNATURE_COLUMNS = (0, 6)

_COLUMN_WIDTHS = {"#": 4, "Brand Name": 15, "Item Code": 12,
                  "Item Description": 35, "UOM": 8}


def _placed_row(width: int, values: dict[int, str]) -> list[str]:
    row = [""] * width
    for column, value in values.items():
        row[column] = value
    return row


def signature_rows(block: SignatureBlock, width: int) -> list[list[str]]:
    """Lay out a signature block as spreadsheet rows.

    Right-to-left blocks are mirrored so the first label ends up in the
    rightmost slot.
    """
    if block.rtl:
        columns = _RTL_SIGNATURE_COLUMNS
        labels = tuple(reversed(block.labels))
        line = SIGNATURE_LINE
    else:
        columns = _DEFAULT_SIGNATURE_COLUMNS
        labels = block.labels
        line = f"Signature: {SIGNATURE_LINE}"

    rows: list[list[str]] = []
    if block.declaration:
        rows.append(_placed_row(width, {0: block.declaration}))
        rows.append([""] * width)
    rows.append(_placed_row(width, dict(zip(columns, labels))))
    rows.append(_placed_row(width, {c: line for c in columns[: len(labels)]}))
    return rows


def sheet_rows(report: Report) -> list[list[str | int]]:
    """Title row, blank row, item rows, two blank rows, signature rows."""
    width = len(report.headers)
    blank: list[str | int] = [""] * width
    title: list[str | int] = _placed_row(width, {0: report.title})
    return [
        title,
        list(blank),
        *[list(row) for row in report.rows],
        list(blank),
        list(blank),
        *signature_rows(report.signatures, width),
    ]


def write_xlsx(report: Report, output_path: str | Path) -> Path:
    """Write the report rows to an XLSX workbook.

    Returns:
        Path to the written file.
    """
    from openpyxl import Workbook
    from openpyxl.utils import get_column_letter

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_NAME
    for row in sheet_rows(report):
        worksheet.append(row)

    for index, header in enumerate(report.headers, 1):
        width = _COLUMN_WIDTHS.get(header, 8 if header.startswith("Qty") else 14)
        worksheet.column_dimensions[get_column_letter(index)].width = width

    workbook.save(output_path)
    logger.info("Wrote %d items to %s", report.item_count, output_path)
    return output_path


def write_csv(report: Report, output_path: str | Path) -> Path:
    """Write a flat CSV with the scan date per item.

    The file starts with a UTF-8 BOM so spreadsheet programs pick up the
    encoding of Arabic descriptions.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    headers = ["Date", *BASE_HEADERS[1:], *quantity_headers(report.quantity_columns)]
    with open(output_path, "w", newline="", encoding="utf-8-sig") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        for scan_date, row in zip(report.scan_dates, report.rows):
            writer.writerow([scan_date, *row[1:]])

    logger.info("Wrote %d items to %s", report.item_count, output_path)
    return output_path
