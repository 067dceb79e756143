"""Scanner input handling and the scan form state.

Keyboard-wedge scanners type the decoded barcode into whatever field has
focus. When a second scan arrives before the field was cleared, the new
code is appended to the old one; :func:`extract_new_barcode` recovers the
code that was actually scanned.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date

from . import validation
from .catalog import find_by_barcode, find_by_code, normalize_record
from .models import NormalizedItem, QuantityRow, ScannedItem

logger = logging.getLogger(__name__)

_MIN_CODE_LENGTH = 4
_COMMON_CODE_LENGTHS = (8, 12, 13, 14)


def collapse_repetition(value: str) -> str:
    """Collapse a code the scanner sent twice in a row.

    Checks an exact half repetition, then doubled codes of the common
    8/12/13/14 character lengths. Every doubled code of those lengths is
    already an exact half repetition, so the second check is a restatement
    of the first rather than a separate rule.
    """
    half = len(value) // 2
    if half >= _MIN_CODE_LENGTH and value[:half] == value[half:]:
        return value[:half]

    for length in _COMMON_CODE_LENGTHS:
        if len(value) == length * 2 and value[:length] == value[length:]:
            return value[:length]

    return value


def extract_new_barcode(new_value: str, old_value: str = "") -> str:
    """Return the code a scanner meant to send.

    Tried in order: strip a grown prefix equal to the previous value,
    then :func:`collapse_repetition`. Falls back to the trimmed input.
    """
    if not new_value:
        return ""
    if not old_value:
        return new_value

    trimmed_new = new_value.strip()
    trimmed_old = old_value.strip()

    if (
        trimmed_old
        and trimmed_new.startswith(trimmed_old)
        and len(trimmed_new) > len(trimmed_old)
    ):
        extracted = trimmed_new[len(trimmed_old):].strip()
        if len(extracted) >= _MIN_CODE_LENGTH:
            return extracted

    return collapse_repetition(trimmed_new)


class BarcodeInput:
    """Tracks the barcode field value across keyboard-wedge updates."""

    def __init__(
        self,
        window_ms: int = 500,
        long_input_threshold: int = 20,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window = window_ms / 1000
        self._long_input_threshold = long_input_threshold
        self._clock = clock
        self._last_time: float | None = None
        self.value = ""

    def feed(self, text: str) -> str:
        """Apply a new field value and return the cleaned-up one."""
        now = self._clock()
        elapsed = None if self._last_time is None else now - self._last_time
        self._last_time = now

        processed = text
        if (
            self.value
            and len(text) > len(self.value)
            and elapsed is not None
            and elapsed < self._window
        ):
            processed = extract_new_barcode(text, self.value)
        elif len(text) > self._long_input_threshold:
            processed = collapse_repetition(text.strip())

        if processed != text:
            logger.debug("Wedge input %r interpreted as %r", text, processed)
        self.value = processed
        return processed

    def reset(self) -> None:
        self.value = ""
        self._last_time = None


@dataclass
class SearchResult:
    status: str  # "found" | "not_found" | "empty"
    message: str
    item: NormalizedItem | None = None

    @property
    def found(self) -> bool:
        return self.status == "found"


@dataclass
class SaveResult:
    saved: bool
    message: str
    item: ScannedItem | None = None
    row_errors: dict[int, str] = field(default_factory=dict)


def _blank_rows(count: int) -> list[QuantityRow]:
    return [QuantityRow() for _ in range(count)]


class ScanForm:
    """State of the scan screen: inputs, found item and quantity rows.

    Args:
        catalog: Loaded catalog rows.
        save_item: Callback persisting a saved item; receives the
            normalized item, the committed entries and the searched code,
            and returns the stored :class:`ScannedItem`.
        min_rows: Number of quantity rows that are always present.
        barcode_input: Wedge-aware barcode field tracker.
        today: Callable returning today's date (local time).
    """

    def __init__(
        self,
        catalog: Sequence[Mapping[str, object]] | None,
        save_item: Callable[..., ScannedItem],
        min_rows: int = 3,
        barcode_input: BarcodeInput | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._catalog = catalog
        self._save_item = save_item
        self._min_rows = min_rows
        self._barcode = barcode_input or BarcodeInput()
        self._today = today
        self.item_code_value = ""
        self.active_input: str | None = None
        self.found_item: NormalizedItem | None = None
        self.rows: list[QuantityRow] = _blank_rows(min_rows)

    @property
    def barcode_value(self) -> str:
        return self._barcode.value

    # -- inputs ---------------------------------------------------------

    def enter_barcode(self, text: str) -> str:
        processed = self._barcode.feed(text)
        if processed:
            self.active_input = "barcode"
            self.item_code_value = ""
        elif not self.item_code_value:
            self.active_input = None
        return processed

    def enter_item_code(self, text: str) -> None:
        self.item_code_value = text
        if text:
            self.active_input = "itemCode"
            self._barcode.reset()
        elif not self.barcode_value:
            self.active_input = None

    def scan_barcode(self, data: str) -> SearchResult:
        """Handle a camera scan: take the code as-is and search for it."""
        self._barcode.reset()
        self._barcode.value = data
        self.active_input = "barcode"
        self.item_code_value = ""
        return self._perform_search(data, "barcode")

    # -- search ---------------------------------------------------------

    def search(self) -> SearchResult:
        if self.active_input == "barcode" and self.barcode_value.strip():
            return self._perform_search(self.barcode_value, "barcode")
        if self.active_input == "itemCode" and self.item_code_value.strip():
            return self._perform_search(self.item_code_value, "itemCode")
        return SearchResult("empty", "Please enter a barcode or item code")

    def _perform_search(self, value: str, search_type: str) -> SearchResult:
        if not value or not value.strip():
            return SearchResult("empty", "Please enter a barcode or item code")

        if search_type == "barcode":
            record = find_by_barcode(self._catalog, value)
            missing = "Barcode not found in master data"
        else:
            record = find_by_code(self._catalog, value)
            missing = "Item code not found in master data"

        if record is None:
            self.found_item = None
            logger.info("No catalog match for %s %r", search_type, value)
            return SearchResult("not_found", missing)

        self.found_item = normalize_record(record)
        self.rows = _blank_rows(self._min_rows)
        return SearchResult("found", "Item found!", self.found_item)

    # -- quantity rows --------------------------------------------------

    def set_row(self, index: int, **values: str) -> None:
        row = self.rows[index]
        for name, value in values.items():
            if not hasattr(row, name):
                raise AttributeError(f"Unknown quantity field: {name}")
            setattr(row, name, value)

    def can_add_row(self) -> bool:
        return validation.is_committable(self.rows[-1], self._today())

    def add_row(self) -> bool:
        """Append an empty row once the last row is filled and valid."""
        if not self.can_add_row():
            return False
        self.rows.append(QuantityRow())
        return True

    def remove_row(self, index: int) -> bool:
        """Remove an extra row; the first ``min_rows`` rows stay."""
        if index < self._min_rows or index >= len(self.rows):
            return False
        del self.rows[index]
        return True

    def row_errors(self) -> dict[int, str]:
        today = self._today()
        errors = {}
        for index, row in enumerate(self.rows):
            message = validation.row_error(row, today)
            if message:
                errors[index] = message
        return errors

    def can_save(self) -> bool:
        if self.found_item is None:
            return False
        today = self._today()
        return any(validation.is_committable(r, today) for r in self.rows)

    # -- save / clear ---------------------------------------------------

    def save(self) -> SaveResult:
        """Commit the found item with its valid quantity rows.

        Any filled row with an invalid date blocks the whole save.
        """
        today = self._today()
        if self.found_item is None:
            return SaveResult(False, "Search for an item first")

        if validation.blocking_rows(self.rows, today):
            return SaveResult(
                False,
                "Please select valid future dates for all expiry fields",
                row_errors=self.row_errors(),
            )

        entries = validation.committed_entries(self.rows, today)
        if not entries:
            return SaveResult(
                False,
                "Please fill at least one quantity with a valid future expiry date",
                row_errors=self.row_errors(),
            )

        saved = self._save_item(
            self.found_item,
            entries,
            self.barcode_value or self.item_code_value,
        )
        self.clear()
        return SaveResult(True, "Item saved successfully!", item=saved)

    def clear(self) -> None:
        self._barcode.reset()
        self.item_code_value = ""
        self.active_input = None
        self.found_item = None
        self.rows = _blank_rows(self._min_rows)
