"""PDF rendering of inventory reports using ReportLab."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from xml.sax.saxutils import escape

from .report import DESCRIPTION_COLUMN, Report

logger = logging.getLogger(__name__)

# Fonts with Latin and Arabic coverage, by platform
_FONT_SEARCH_PATHS = [
    # Noto (Debian/Ubuntu)
    "/usr/share/fonts/truetype/noto/NotoSansArabic-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoNaskhArabic-Regular.ttf",
    # Noto (Fedora/RHEL)
    "/usr/share/fonts/google-noto/NotoSansArabic-Regular.ttf",
    "/usr/share/fonts/google-noto/NotoNaskhArabic-Regular.ttf",
    # DejaVu
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu-sans-fonts/DejaVuSans.ttf",
    # macOS
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    # Windows
    "C:/Windows/Fonts/arial.ttf",
    "C:/Windows/Fonts/tahoma.ttf",
]

_FALLBACK_FONT = "Helvetica"

# Arabic letters, supplements and presentation forms
_ARABIC_RE = re.compile(
    "[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]"
)


def shape_text(text: str) -> str:
    """Prepare text for drawing on a PDF canvas.

    ReportLab neither joins Arabic letters nor reorders right-to-left runs,
    so Arabic text is reshaped into presentation forms and put in visual
    order. Other text is returned unchanged.
    """
    if not _ARABIC_RE.search(text):
        return text
    try:
        import arabic_reshaper
        from bidi.algorithm import get_display
    except ImportError:
        raise ImportError(
            "arabic-reshaper and python-bidi are required for Arabic text:\n"
            "  pip install arabic-reshaper python-bidi"
        )
    return get_display(arabic_reshaper.reshape(text))


def _markup(text: object) -> str:
    return escape(shape_text(str(text)))


def _report_texts(report: Report):
    yield report.title
    yield from report.headers
    for row in report.rows:
        yield from (str(value) for value in row)
    yield report.signatures.declaration
    yield from report.signatures.labels


def _needs_unicode_font(report: Report) -> bool:
    """True when some text falls outside what the Type 1 fonts encode."""
    return any(
        ord(ch) > 0xFF for text in _report_texts(report) for ch in text
    )


def _find_unicode_font(font_path: str | Path | None = None) -> str:
    """Find a font that can render Arabic text."""
    if font_path:
        if Path(font_path).expanduser().exists():
            return str(Path(font_path).expanduser())
        raise FileNotFoundError(f"Configured font not found: {font_path}")
    for path in _FONT_SEARCH_PATHS:
        if Path(path).exists():
            return path
    raise FileNotFoundError(
        "No Arabic-capable font found. Install one of the following:\n"
        "  Ubuntu/Debian: sudo apt install fonts-noto-core fonts-dejavu-core\n"
        "  Fedora/RHEL:   sudo dnf install google-noto-sans-arabic-fonts\n"
        "or set export.font_path in the configuration file."
    )


def _register_unicode_font(font_path: str | Path | None = None) -> str:
    """Register a Unicode font with ReportLab and return the font name."""
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    path = _find_unicode_font(font_path)
    font_name = "InventoryFont"
    pdfmetrics.registerFont(TTFont(font_name, path))
    return font_name


def _resolve_font(report: Report, font_path: str | Path | None) -> str:
    try:
        return _register_unicode_font(font_path)
    except FileNotFoundError:
        if _needs_unicode_font(report):
            raise
        logger.warning("No Unicode font found; falling back to %s", _FALLBACK_FONT)
        return _FALLBACK_FONT


def generate_pdf(
    report: Report,
    output_path: str | Path,
    font_path: str | Path | None = None,
) -> Path:
    """Generate an A4-landscape PDF from a report.

    Args:
        report: The report to render.
        output_path: Where to save the PDF file.
        font_path: Optional TTF font to use instead of searching the system.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed, or the report has Arabic
            text and arabic-reshaper or python-bidi is not installed.
        FileNotFoundError: If the report has text outside Latin-1 and no
            suitable font is found.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.enums import TA_CENTER, TA_RIGHT
        from reportlab.lib.pagesizes import A4, landscape
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError("reportlab is required: pip install reportlab")

    font_name = _resolve_font(report, font_path)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=landscape(A4),
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=10 * mm,
        bottomMargin=10 * mm,
        title=report.title,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Title"],
        fontName=font_name,
        fontSize=18,
        leading=22,
        textColor=colors.HexColor("#112d47"),
    )
    date_style = ParagraphStyle(
        "ReportDate",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=11,
        leading=14,
        alignment=TA_CENTER,
        textColor=colors.HexColor("#666666"),
    )
    cell_style = ParagraphStyle(
        "Cell",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=8,
        leading=10,
    )
    rtl_cell_style = ParagraphStyle(
        "CellRTL", parent=cell_style, alignment=TA_RIGHT,
    )
    declaration_style = ParagraphStyle(
        "Declaration",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=11,
        leading=18,
        alignment=TA_RIGHT,
        borderColor=colors.HexColor("#cccccc"),
        borderWidth=0.5,
        borderPadding=8,
        backColor=colors.HexColor("#f9f9f9"),
    )
    signature_style = ParagraphStyle(
        "Signature",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=12,
        leading=16,
        alignment=TA_CENTER,
        textColor=colors.HexColor("#112d47"),
    )

    elements: list = []
    elements.append(Paragraph(_markup(report.title), title_style))
    elements.append(
        Paragraph(
            f"Date: {report.report_date} | Total Items: {report.item_count}",
            date_style,
        )
    )
    elements.append(Spacer(1, 4 * mm))

    table_data: list[list] = [report.headers]
    for row in report.rows:
        cells: list = []
        for index, value in enumerate(row):
            if index == DESCRIPTION_COLUMN:
                cells.append(Paragraph(_markup(value), rtl_cell_style))
            elif index in (1, 2):
                cells.append(Paragraph(_markup(value), cell_style))
            else:
                cells.append(str(value))
        table_data.append(cells)

    # Fixed widths for the item columns, the rest shared by Qty/Exp pairs
    usable = landscape(A4)[0] - 20 * mm
    base_widths = [8 * mm, 30 * mm, 24 * mm, 70 * mm, 14 * mm]
    pair_width = (usable - sum(base_widths)) / report.quantity_columns
    col_widths = base_widths + [pair_width * 0.4, pair_width * 0.6] * (
        report.quantity_columns
    )

    table = Table(table_data, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4b7c70")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 3),
        ("RIGHTPADDING", (0, 0), (-1, -1), 3),
    ]))
    elements.append(table)

    # Signature section
    block = report.signatures
    if block.declaration:
        elements.append(Spacer(1, 10 * mm))
        elements.append(Paragraph(_markup(block.declaration), declaration_style))

    elements.append(Spacer(1, 14 * mm))
    labels = list(reversed(block.labels)) if block.rtl else list(block.labels)
    line_text = "" if block.rtl else "Signature"
    signature_table = Table(
        [
            [Paragraph(_markup(label), signature_style) for label in labels],
            [""] * len(labels),
            [line_text] * len(labels),
        ],
        colWidths=[usable / len(labels)] * len(labels),
        rowHeights=[None, 14 * mm, None],
    )
    signature_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 2), (-1, 2), 9),
        ("TEXTCOLOR", (0, 2), (-1, 2), colors.HexColor("#666666")),
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("LINEABOVE", (0, 2), (-1, 2), 0.5, colors.black),
        ("LEFTPADDING", (0, 0), (-1, -1), 12 * mm),
        ("RIGHTPADDING", (0, 0), (-1, -1), 12 * mm),
    ]))
    elements.append(signature_table)

    doc.build(elements)
    logger.info("Wrote %d items to %s", report.item_count, output_path)
    return output_path
