"""Map spreadsheet header variants onto canonical item fields."""

from __future__ import annotations

from collections.abc import Mapping

from ..models import NormalizedItem

# Candidate headers per canonical field, in priority order
BRAND_NAME_HEADERS = ("Brand Name", "BrandName", "brand_name", "BRAND NAME")
ITEM_CODE_HEADERS = ("Item Code", "ItemCode", "item_code", "ITEM CODE")
ITEM_DESCRIPTION_HEADERS = (
    "Item Description",
    "ItemDescription",
    "item_description",
    "ITEM DESCRIPTION",
)
UOM_HEADERS = ("Warehouse UOM", "UOM", "uom", "WAREHOUSE UOM")
BARCODE_HEADERS = ("Item Barcode", "Barcode", "barcode", "ITEM BARCODE")

FIELD_HEADERS: dict[str, tuple[str, ...]] = {
    "brand_name": BRAND_NAME_HEADERS,
    "item_code": ITEM_CODE_HEADERS,
    "item_description": ITEM_DESCRIPTION_HEADERS,
    "uom": UOM_HEADERS,
    "barcode": BARCODE_HEADERS,
}


def cell_text(value: object) -> str:
    """Render a decoded cell value as text.

    Spreadsheet decoders hand back numeric barcodes as floats, so integral
    floats lose their ``.0`` suffix.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def first_value(record: Mapping[str, object], headers: tuple[str, ...]) -> str:
    """Return the first non-empty value among ``headers``, else ``""``."""
    for header in headers:
        text = cell_text(record.get(header))
        if text.strip():
            return text
    return ""


def normalize_record(record: Mapping[str, object]) -> NormalizedItem:
    """Build a :class:`NormalizedItem` from a raw catalog row.

    Earlier candidates win when several headers for one field are present.
    Unknown or missing fields yield an empty string.
    """
    return NormalizedItem(
        **{name: first_value(record, headers) for name, headers in FIELD_HEADERS.items()}
    )
