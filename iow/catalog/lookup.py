"""Linear catalog search by barcode or item code."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .normalizer import BARCODE_HEADERS, ITEM_CODE_HEADERS, first_value


def _search_key(value: object) -> str:
    return str(value).strip().lower()


def _find(
    catalog: Iterable[Mapping[str, object]] | None,
    code: object,
    headers: tuple[str, ...],
) -> Mapping[str, object] | None:
    if catalog is None or code is None:
        return None
    needle = _search_key(code)
    if not needle:
        return None
    for record in catalog:
        if _search_key(first_value(record, headers)) == needle:
            return record
    return None


def find_by_barcode(
    catalog: Iterable[Mapping[str, object]] | None, code: object
) -> Mapping[str, object] | None:
    """Return the first catalog row whose barcode matches ``code``.

    Comparison ignores case and surrounding whitespace. Returns ``None``
    when nothing matches.
    """
    return _find(catalog, code, BARCODE_HEADERS)


def find_by_code(
    catalog: Iterable[Mapping[str, object]] | None, code: object
) -> Mapping[str, object] | None:
    """Return the first catalog row whose item code matches ``code``."""
    return _find(catalog, code, ITEM_CODE_HEADERS)
