"""Report model shared by the markup, spreadsheet and PDF exports."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime

from ..config import DEFAULT_WAREHOUSE
from ..models import ScannedItem
from .dates import format_date

MIN_QUANTITY_COLUMNS = 3
BASE_HEADERS = ("#", "Brand Name", "Item Code", "Item Description", "UOM")
DESCRIPTION_COLUMN = 3

DECLARATION_TEXT = (
    "اني الموقع ادناه (..................................................)  "
    "اقر بان البضائع الدرجة تفاصيلها في قوائم هذا الجرد استلمتها من شركة "
    "الميسرللتجارة العامة المحدودة المسؤولية واتعهد بتسديد قيمتها الى قسم "
    "الحسابات وحسب سعر البيع المعتمد في الشركة"
)
DECLARANT_SIGNATURE = "اسم وتوقيع صاحب الاقرار"
COUNTER_SIGNATURE = "اسم وتوقيع القائم بالجرد"
DEFAULT_SIGNATURES = ("Warehouse Team", "Sales Team", "Control Team")


@dataclass(frozen=True)
class SignatureBlock:
    """Signature section printed under the item table."""

    labels: tuple[str, ...]
    declaration: str = ""
    rtl: bool = False


def signature_block(use_alternate_signature_block: bool) -> SignatureBlock:
    """Return the signature section for a report.

    The alternate block (used when a reference code was given) carries an
    Arabic declaration and two Arabic signature placeholders; the default
    block has three English team placeholders.
    """
    if use_alternate_signature_block:
        return SignatureBlock(
            labels=(DECLARANT_SIGNATURE, COUNTER_SIGNATURE),
            declaration=DECLARATION_TEXT,
            rtl=True,
        )
    return SignatureBlock(labels=DEFAULT_SIGNATURES)


@dataclass
class Report:
    title: str
    report_date: str
    headers: list[str]
    rows: list[list[str | int]]
    signatures: SignatureBlock
    quantity_columns: int = MIN_QUANTITY_COLUMNS
    item_count: int = 0
    scan_dates: list[str] = field(default_factory=list)


def sanitize_reference_code(text: str) -> str:
    """Keep only the digits of a reference code."""
    return re.sub(r"[^0-9]", "", text or "")


def display_title(warehouse: str, reference_code: str = "") -> str:
    warehouse = warehouse or DEFAULT_WAREHOUSE
    return f"{warehouse} - {reference_code}" if reference_code else warehouse


def safe_filename(name: str) -> str:
    """Make a warehouse name usable as a file name.

    Drops everything except ASCII letters, digits, spaces and hyphens, then
    turns whitespace runs into single underscores.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9\s-]", "", name or "")
    cleaned = re.sub(r"\s+", "_", cleaned.strip())
    return cleaned or "inventory_report"


def export_filename(
    warehouse: str, extension: str, now: datetime | None = None
) -> str:
    """``{safe name}_{YYYYMMDD_HHMM}.{extension}`` in local time."""
    now = now or datetime.now()
    return f"{safe_filename(warehouse)}_{now.strftime('%Y%m%d_%H%M')}.{extension}"


def quantity_headers(count: int) -> list[str]:
    headers: list[str] = []
    for i in range(1, count + 1):
        headers.extend([f"Qty {i}", f"Exp {i}"])
    return headers


def build_report(
    items: Sequence[ScannedItem],
    warehouse: str = DEFAULT_WAREHOUSE,
    reference_code: str = "",
    today: date | None = None,
) -> Report:
    """Lay out the session as table rows plus a signature block."""
    reference_code = sanitize_reference_code(reference_code)
    quantity_columns = max(
        [MIN_QUANTITY_COLUMNS] + [len(item.quantities) for item in items]
    )

    rows: list[list[str | int]] = []
    for index, item in enumerate(items, 1):
        row: list[str | int] = [
            index,
            item.brand_name,
            item.item_code,
            item.item_description,
            item.uom,
        ]
        for i in range(quantity_columns):
            entry = item.quantities[i] if i < len(item.quantities) else None
            row.append(entry.quantity if entry else "")
            row.append(format_date(entry.expiry) if entry else "")
        rows.append(row)

    return Report(
        title=display_title(warehouse, reference_code),
        report_date=format_date(today or date.today()),
        headers=list(BASE_HEADERS) + quantity_headers(quantity_columns),
        rows=rows,
        signatures=signature_block(bool(reference_code)),
        quantity_columns=quantity_columns,
        item_count=len(items),
        scan_dates=[format_date(item.scan_date) for item in items],
    )
