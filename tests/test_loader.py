"""Tests for reading catalog files."""

import pytest

from iow.catalog import CatalogError, read_catalog, warehouse_name_from_filename


def _write_xlsx(path, rows):
    openpyxl = pytest.importorskip("openpyxl")
    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    for row in rows:
        worksheet.append(row)
    workbook.save(path)


class TestWarehouseName:
    def test_strips_extension(self):
        assert warehouse_name_from_filename("Shaab Food.xlsx") == "Shaab Food"

    def test_strips_csv_case_insensitive(self):
        assert warehouse_name_from_filename("/tmp/Store A.CSV") == "Store A"

    def test_empty_name_falls_back(self):
        assert warehouse_name_from_filename(".xlsx") == "Inventory Report"


class TestReadCsv:
    def test_reads_rows(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_text(
            "Item Code,Item Barcode,Item Description\n"
            "X1,999,Soap\n"
            ",,\n"
            "X2,1000,شامبو\n",
            encoding="utf-8-sig",
        )
        rows = read_catalog(path)
        assert rows == [
            {"Item Code": "X1", "Item Barcode": "999", "Item Description": "Soap"},
            {"Item Code": "X2", "Item Barcode": "1000", "Item Description": "شامبو"},
        ]

    def test_missing_item_code_column(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_text("Name,Barcode\nSoap,999\n")
        with pytest.raises(CatalogError, match="Item Code"):
            read_catalog(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_text("")
        with pytest.raises(CatalogError, match="empty"):
            read_catalog(path)

    def test_header_only(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_text("Item Code,Barcode\n")
        with pytest.raises(CatalogError, match="empty"):
            read_catalog(path)


class TestReadXlsx:
    def test_reads_first_sheet(self, tmp_path):
        path = tmp_path / "Main Store.xlsx"
        _write_xlsx(path, [
            ["Brand Name", "ItemCode", "Barcode", "UOM"],
            ["Acme", "X1", 6291041500213, "PCS"],
            [None, None, None, None],
            ["Acme", "X2", None, "CTN"],
        ])
        rows = read_catalog(path)
        assert len(rows) == 2
        assert rows[0]["ItemCode"] == "X1"
        assert rows[0]["Barcode"] == 6291041500213
        assert rows[1]["Barcode"] == ""

    def test_corrupt_file(self, tmp_path):
        pytest.importorskip("openpyxl")
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a zip archive")
        with pytest.raises(CatalogError, match="Failed to parse"):
            read_catalog(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_catalog(tmp_path / "nope.csv")


def test_legacy_xls_rejected(tmp_path):
    path = tmp_path / "old.xls"
    path.write_bytes(b"\xd0\xcf\x11\xe0")
    with pytest.raises(CatalogError, match=".xls"):
        read_catalog(path)


def test_unsupported_extension(tmp_path):
    path = tmp_path / "catalog.txt"
    path.write_text("Item Code\nX1\n")
    with pytest.raises(CatalogError, match="Excel"):
        read_catalog(path)
