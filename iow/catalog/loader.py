"""Decode catalog spreadsheets (XLSX / CSV) into row mappings."""

from __future__ import annotations

import csv
import logging
import re
import zipfile
from pathlib import Path

from ..config import DEFAULT_WAREHOUSE

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xlsm", ".csv")
_EXTENSION_RE = re.compile(r"\.(xlsx|xlsm|xls|csv)$", re.IGNORECASE)


class CatalogError(Exception):
    """The catalog file could not be read or is not usable."""


def warehouse_name_from_filename(
    filename: str, default: str = DEFAULT_WAREHOUSE
) -> str:
    """Derive the warehouse name from a catalog file name."""
    name = _EXTENSION_RE.sub("", Path(filename).name)
    return name or default


def _read_xlsx(path: Path) -> list[dict[str, object]]:
    from openpyxl import load_workbook
    from openpyxl.utils.exceptions import InvalidFileException

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (
        InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError,
    ) as e:
        raise CatalogError(
            "Failed to parse file. Make sure it is a valid Excel or CSV file."
        ) from e

    try:
        worksheet = workbook.worksheets[0]
        rows = worksheet.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []
        headers = ["" if h is None else str(h).strip() for h in header_row]

        records: list[dict[str, object]] = []
        for row in rows:
            if row is None or all(v is None or str(v).strip() == "" for v in row):
                continue
            record: dict[str, object] = {}
            for index, header in enumerate(headers):
                if not header:
                    continue
                value = row[index] if index < len(row) else None
                record[header] = "" if value is None else value
            records.append(record)
        return records
    finally:
        workbook.close()


def _read_csv(path: Path) -> list[dict[str, object]]:
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.reader(f)
            header_row = next(reader, None)
            if header_row is None:
                return []
            headers = [h.strip().replace('"', "") for h in header_row]

            records: list[dict[str, object]] = []
            for row in reader:
                if not any(cell.strip() for cell in row):
                    continue
                records.append({
                    header: (row[index].strip() if index < len(row) else "")
                    for index, header in enumerate(headers)
                    if header
                })
            return records
    except (UnicodeDecodeError, csv.Error) as e:
        raise CatalogError(
            "Failed to parse file. Make sure it is a valid Excel or CSV file."
        ) from e


def _has_item_code_column(record: dict[str, object]) -> bool:
    keys = [k.lower() for k in record]
    return any("item" in k and "code" in k for k in keys)


def read_catalog(path: str | Path) -> list[dict[str, object]]:
    """Read and validate a catalog file.

    Args:
        path: Path to an ``.xlsx``/``.xlsm`` or ``.csv`` file.

    Returns:
        One mapping per data row, keyed by the original header text.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        CatalogError: If the file type is unsupported, the file can't be
            decoded, is empty, or has no item code column.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".xls":
        raise CatalogError(
            "Legacy .xls files are not supported. Save the file as .xlsx or CSV."
        )
    if suffix not in SUPPORTED_EXTENSIONS:
        raise CatalogError("Please select an Excel (.xlsx) or CSV file")

    records = _read_csv(path) if suffix == ".csv" else _read_xlsx(path)

    if not records:
        raise CatalogError("The file appears to be empty or invalid")
    if not _has_item_code_column(records[0]):
        raise CatalogError('File must contain an "Item Code" column')

    logger.info("Read %d catalog rows from %s", len(records), path.name)
    return records
