"""Tests for wedge input handling and the scan form."""

from datetime import date, timedelta

import pytest

from iow.models import NormalizedItem, ScannedItem
from iow.scanner import (
    BarcodeInput,
    ScanForm,
    collapse_repetition,
    extract_new_barcode,
)

TODAY = date(2026, 3, 15)
FUTURE = TODAY + timedelta(days=30)
PAST = TODAY - timedelta(days=1)

CATALOG = [
    {"Item Code": "X1", "Item Barcode": "6291041500213", "Item Description": "Soap"},
    {"Item Code": "X2", "Item Barcode": "12345678", "Item Description": "Shampoo"},
]


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestExtractNewBarcode:
    def test_empty(self):
        assert extract_new_barcode("", "123") == ""

    def test_no_previous_value(self):
        assert extract_new_barcode(" 123 ") == " 123 "

    def test_appended_scan(self):
        assert extract_new_barcode("6291041500213ABCD1234", "6291041500213") == "ABCD1234"

    def test_short_tail_falls_through(self):
        assert extract_new_barcode("1234567", "1234") == "1234567"

    def test_half_repetition(self):
        assert extract_new_barcode("12341234", "1234") == "1234"

    def test_doubled_ean13(self):
        code = "6291041500213"
        assert extract_new_barcode(code * 2, "99") == code

    def test_no_heuristic_matches(self):
        assert extract_new_barcode(" 5551234 ", "0000") == "5551234"


class TestCollapseRepetition:
    def test_doubled_upc(self):
        assert collapse_repetition("012345678905" * 2) == "012345678905"

    def test_short_halves_not_collapsed(self):
        assert collapse_repetition("123123") == "123123"

    def test_plain_value(self):
        assert collapse_repetition("6291041500213") == "6291041500213"


class TestBarcodeInput:
    def test_growth_within_window_is_deduplicated(self):
        clock = FakeClock()
        field = BarcodeInput(clock=clock)
        assert field.feed("1234") == "1234"
        clock.advance(0.1)
        assert field.feed("12341234") == "1234"
        assert field.value == "1234"

    def test_growth_after_window_is_kept(self):
        clock = FakeClock()
        field = BarcodeInput(clock=clock)
        field.feed("1234")
        clock.advance(1.0)
        assert field.feed("12341234") == "12341234"

    def test_long_input_collapsed(self):
        clock = FakeClock()
        field = BarcodeInput(clock=clock)
        code = "6291041500213"
        assert field.feed(code * 2) == code

    def test_manual_typing_unchanged(self):
        clock = FakeClock()
        field = BarcodeInput(clock=clock)
        for text in ("6", "62", "629"):
            clock.advance(0.05)
            assert field.feed(text) == text

    def test_reset(self):
        field = BarcodeInput(clock=FakeClock())
        field.feed("1234")
        field.reset()
        assert field.value == ""


@pytest.fixture
def saved():
    return []


@pytest.fixture
def form(saved):
    def save_item(item, entries, code):
        scanned = ScannedItem(
            id=f"id{len(saved)}", scan_date="2026-03-15T10:00:00+00:00",
            item=item, quantities=entries, scanned_barcode=code,
        )
        saved.append(scanned)
        return scanned

    return ScanForm(
        CATALOG, save_item, barcode_input=BarcodeInput(clock=FakeClock()),
        today=lambda: TODAY,
    )


def _fill(form, index, quantity, d):
    form.set_row(
        index, quantity=quantity, day=str(d.day), month=str(d.month - 1), year=str(d.year)
    )


class TestScanFormSearch:
    def test_barcode_search(self, form):
        form.enter_barcode("6291041500213")
        result = form.search()
        assert result.found
        assert result.message == "Item found!"
        assert result.item == NormalizedItem(
            item_code="X1", item_description="Soap", barcode="6291041500213"
        )

    def test_item_code_search(self, form):
        form.enter_item_code(" x2 ")
        result = form.search()
        assert result.found
        assert result.item.item_code == "X2"

    def test_inputs_are_mutually_exclusive(self, form):
        form.enter_barcode("12345678")
        form.enter_item_code("X1")
        assert form.barcode_value == ""
        assert form.active_input == "itemCode"
        form.enter_barcode("12345678")
        assert form.item_code_value == ""
        assert form.active_input == "barcode"

    def test_barcode_not_found(self, form):
        form.enter_barcode("000000")
        result = form.search()
        assert result.status == "not_found"
        assert result.message == "Barcode not found in master data"
        assert form.found_item is None

    def test_item_code_not_found(self, form):
        form.enter_item_code("ZZ")
        assert form.search().message == "Item code not found in master data"

    def test_empty_search(self, form):
        assert form.search().status == "empty"

    def test_camera_scan_searches_immediately(self, form):
        result = form.scan_barcode("12345678")
        assert result.found
        assert form.barcode_value == "12345678"

    def test_no_catalog(self, saved):
        empty = ScanForm(None, lambda *a: None, today=lambda: TODAY)
        assert empty.scan_barcode("12345678").status == "not_found"


class TestScanFormRows:
    def test_starts_with_three_rows(self, form):
        assert len(form.rows) == 3

    def test_add_row_requires_valid_last_row(self, form):
        assert not form.add_row()
        _fill(form, 2, "4", PAST)
        assert not form.add_row()
        _fill(form, 2, "4", FUTURE)
        assert form.add_row()
        assert len(form.rows) == 4

    def test_initial_rows_cannot_be_removed(self, form):
        assert not form.remove_row(0)
        _fill(form, 2, "4", FUTURE)
        form.add_row()
        assert form.remove_row(3)
        assert len(form.rows) == 3

    def test_unknown_field(self, form):
        with pytest.raises(AttributeError):
            form.set_row(0, colour="red")

    def test_row_errors(self, form):
        _fill(form, 1, "", PAST)
        assert list(form.row_errors()) == [1]


class TestScanFormSave:
    def test_requires_item(self, form):
        result = form.save()
        assert not result.saved
        assert result.message == "Search for an item first"

    def test_requires_one_valid_row(self, form, saved):
        form.scan_barcode("12345678")
        assert not form.can_save()
        result = form.save()
        assert not result.saved
        assert "at least one quantity" in result.message
        assert saved == []

    def test_invalid_filled_row_blocks_save(self, form, saved):
        form.scan_barcode("12345678")
        _fill(form, 0, "5", FUTURE)
        _fill(form, 1, "2", PAST)
        result = form.save()
        assert not result.saved
        assert result.message == "Please select valid future dates for all expiry fields"
        assert 1 in result.row_errors
        assert saved == []

    def test_save_commits_valid_rows_and_clears(self, form, saved):
        form.scan_barcode("12345678")
        _fill(form, 0, "5", FUTURE)
        form.set_row(1, quantity="7")
        result = form.save()
        assert result.saved
        assert result.message == "Item saved successfully!"
        assert len(saved) == 1
        assert [q.quantity for q in saved[0].quantities] == ["5"]
        assert saved[0].quantities[0].expiry == FUTURE.isoformat()
        assert saved[0].scanned_barcode == "12345678"
        assert form.found_item is None
        assert form.barcode_value == ""
        assert len(form.rows) == 3
