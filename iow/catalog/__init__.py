"""Catalog decoding, column normalization and lookup."""

from .loader import CatalogError, read_catalog, warehouse_name_from_filename
from .lookup import find_by_barcode, find_by_code
from .normalizer import FIELD_HEADERS, cell_text, normalize_record

__all__ = [
    "CatalogError",
    "FIELD_HEADERS",
    "cell_text",
    "find_by_barcode",
    "find_by_code",
    "normalize_record",
    "read_catalog",
    "warehouse_name_from_filename",
]
