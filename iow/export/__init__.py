"""Report exports for a scanning session."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from ..config import DEFAULT_WAREHOUSE, EXPORT_FORMATS
from ..models import ScannedItem
from .dates import format_date, parse_display_date
from .markup import render_html
from .pdf import generate_pdf
from .report import (
    Report,
    SignatureBlock,
    build_report,
    display_title,
    export_filename,
    safe_filename,
    sanitize_reference_code,
    signature_block,
)
from .spreadsheet import sheet_rows, write_csv, write_xlsx

logger = logging.getLogger(__name__)

MIMETYPES = {
    "pdf": "application/pdf",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "html": "text/html",
    "csv": "text/csv",
}


class ExportError(Exception):
    """Raised when a report can't be produced."""


class EmptySessionError(ExportError):
    """Raised when exporting a session with no scanned items."""

    def __init__(self, message: str = "No items to export"):
        super().__init__(message)


def export_session(
    items: Sequence[ScannedItem],
    fmt: str,
    output_dir: str | Path,
    warehouse: str = DEFAULT_WAREHOUSE,
    reference_code: str = "",
    now: datetime | None = None,
    font_path: str | Path | None = None,
) -> Path:
    """Write the session in ``fmt`` to ``output_dir`` and return the file path.

    Raises:
        EmptySessionError: If ``items`` is empty.
        ExportError: If ``fmt`` is not a supported format.
    """
    if not items:
        raise EmptySessionError()
    if fmt not in EXPORT_FORMATS:
        raise ExportError(
            f"Unsupported export format: {fmt} (choose from {', '.join(EXPORT_FORMATS)})"
        )

    now = now or datetime.now()
    report = build_report(items, warehouse, reference_code, today=now.date())
    output_path = Path(output_dir).expanduser() / export_filename(warehouse, fmt, now)

    match fmt:
        case "pdf":
            generate_pdf(report, output_path, font_path=font_path)
        case "xlsx":
            write_xlsx(report, output_path)
        case "csv":
            write_csv(report, output_path)
        case "html":
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(render_html(report), encoding="utf-8")
            logger.info("Wrote %d items to %s", report.item_count, output_path)

    return output_path


__all__ = [
    "EmptySessionError",
    "ExportError",
    "MIMETYPES",
    "Report",
    "SignatureBlock",
    "build_report",
    "display_title",
    "export_filename",
    "export_session",
    "format_date",
    "generate_pdf",
    "parse_display_date",
    "render_html",
    "safe_filename",
    "sanitize_reference_code",
    "sheet_rows",
    "signature_block",
    "write_csv",
    "write_xlsx",
]
