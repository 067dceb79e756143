"""Self-contained HTML rendering of a report."""

from __future__ import annotations

from html import escape

from .report import DESCRIPTION_COLUMN, Report, SignatureBlock

_STYLE = """
    @page { size: A4 landscape; margin: 10mm; }
    body { font-family: Arial, sans-serif; font-size: 10px; margin: 0; padding: 10px; }
    h1 { text-align: center; font-size: 18px; margin-bottom: 5px; color: #112d47; }
    .date { text-align: center; font-size: 11px; margin-bottom: 10px; color: #666; }
    table { width: 100%; border-collapse: collapse; font-size: 9px; }
    th { background-color: #4b7c70; color: white; padding: 6px 4px;
         border: 1px solid #000; text-align: center; font-weight: bold; }
    td { border: 1px solid #000; padding: 4px; vertical-align: middle; }
    td.center { text-align: center; }
    tr:nth-child(even) { background-color: #f5f5f5; }
    .declaration { direction: rtl; text-align: right; margin-top: 30px; padding: 15px;
                   border: 1px solid #ccc; background: #f9f9f9; font-size: 11px;
                   line-height: 1.8; }
    .signatures { display: flex; justify-content: space-between; margin-top: 40px;
                  padding: 0 20px; }
    .signatures.rtl { direction: rtl; }
    .signature-box { text-align: center; width: 30%; }
    .signatures.rtl .signature-box { width: 45%; }
    .signature-title { font-weight: bold; font-size: 12px; color: #112d47;
                       margin-bottom: 30px; }
    .signature-line { border-top: 1px solid #000; margin-top: 40px; padding-top: 5px;
                      font-size: 10px; color: #666; }
"""

# Text columns are left aligned; everything else is centred
_TEXT_COLUMNS = {1, 2, DESCRIPTION_COLUMN}


def _cell(index: int, value: object) -> str:
    text = escape(str(value))
    if index == DESCRIPTION_COLUMN:
        return f'<td dir="rtl">{text}</td>'
    if index in _TEXT_COLUMNS:
        return f"<td>{text}</td>"
    return f'<td class="center">{text}</td>'


def render_signature_block(block: SignatureBlock) -> str:
    parts: list[str] = []
    if block.declaration:
        parts.append(
            f'<div class="declaration" dir="rtl">{escape(block.declaration)}</div>'
        )
    css = "signatures rtl" if block.rtl else "signatures"
    line_text = "" if block.rtl else "Signature"
    boxes = "".join(
        '<div class="signature-box">'
        f'<div class="signature-title">{escape(label)}</div>'
        f'<div class="signature-line">{line_text}</div>'
        "</div>"
        for label in block.labels
    )
    direction = ' dir="rtl"' if block.rtl else ""
    parts.append(f'<div class="{css}"{direction}>{boxes}</div>')
    return "\n".join(parts)


def render_html(report: Report) -> str:
    """Render ``report`` as an A4-landscape HTML document string."""
    header_cells = "".join(f"<th>{escape(h)}</th>" for h in report.headers)
    body_rows = "\n".join(
        "<tr>" + "".join(_cell(i, v) for i, v in enumerate(row)) + "</tr>"
        for row in report.rows
    )
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>{escape(report.title)}</title>
<style>{_STYLE}</style>
</head>
<body>
<h1>{escape(report.title)}</h1>
<div class="date">Date: {escape(report.report_date)} | Total Items: {report.item_count}</div>
<table>
<thead><tr>{header_cells}</tr></thead>
<tbody>
{body_rows}
</tbody>
</table>
{render_signature_block(report.signatures)}
</body>
</html>
"""
