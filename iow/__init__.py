"""Warehouse inventory scanning: catalog lookup, expiry capture and signed exports."""

from .catalog import (
    CatalogError,
    find_by_barcode,
    find_by_code,
    normalize_record,
    read_catalog,
    warehouse_name_from_filename,
)
from .config import (
    AppConfig,
    CatalogConfig,
    ExportConfig,
    GDriveConfig,
    PrinterConfig,
    ScannerConfig,
    StorageConfig,
    load_config,
)
from .db import CatalogLockedError, CatalogStore, KeyValueStore, SessionStore
from .export import EmptySessionError, ExportError, build_report, export_session
from .models import NormalizedItem, QuantityEntry, QuantityRow, ScannedItem
from .scanner import BarcodeInput, ScanForm, extract_new_barcode

__all__ = [
    "AppConfig",
    "BarcodeInput",
    "CatalogConfig",
    "CatalogError",
    "CatalogLockedError",
    "CatalogStore",
    "EmptySessionError",
    "ExportConfig",
    "ExportError",
    "GDriveConfig",
    "KeyValueStore",
    "NormalizedItem",
    "PrinterConfig",
    "QuantityEntry",
    "QuantityRow",
    "ScanForm",
    "ScannedItem",
    "ScannerConfig",
    "SessionStore",
    "StorageConfig",
    "build_report",
    "export_session",
    "extract_new_barcode",
    "find_by_barcode",
    "find_by_code",
    "load_config",
    "normalize_record",
    "read_catalog",
    "warehouse_name_from_filename",
]
