"""Tests for the command-line front end."""

import io
import json
from unittest.mock import patch

import pytest

from iow.cli import main
from iow.db import CatalogStore, KeyValueStore

CATALOG_CSV = (
    "Brand Name,Item Code,Item Description,UOM,Item Barcode\n"
    "Acme,X1,Soap,PCS,6291041500213\n"
    "Acme,X2,Shampoo,CTN,12345678\n"
)


@pytest.fixture(autouse=True)
def env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("IOW_DB_PATH", str(tmp_path / "iow.db"))
    monkeypatch.setenv("IOW_FILE_PASSWORD", "s3cret")


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "Shaab Food.csv"
    path.write_text(CATALOG_CSV, encoding="utf-8")
    return path


@pytest.fixture
def loaded(catalog_file, capsys):
    main(["load", str(catalog_file)])
    capsys.readouterr()
    return catalog_file


def _fails(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_no_command_shows_help(capsys):
    assert _fails([]) == 1
    assert "usage" in capsys.readouterr().out


class TestCatalogCommands:
    def test_load_and_status(self, catalog_file, capsys):
        main(["load", str(catalog_file)])
        assert "Loaded 2 items for Shaab Food." in capsys.readouterr().out

        main(["status"])
        out = capsys.readouterr().out
        assert "Warehouse: Shaab Food" in out
        assert "2 items (locked)" in out
        assert "0 scanned items" in out

    def test_load_refused_while_locked(self, loaded, capsys):
        assert _fails(["load", str(loaded)]) == 1
        assert "iow unlock" in capsys.readouterr().err

    def test_load_bad_file(self, tmp_path, capsys):
        bad = tmp_path / "bad.csv"
        bad.write_text("Name\nSoap\n")
        assert _fails(["load", str(bad)]) == 1
        assert "Item Code" in capsys.readouterr().err

    def test_unlock(self, loaded, capsys):
        assert _fails(["unlock", "wrong"]) == 1
        assert "Incorrect password" in capsys.readouterr().err

        main(["unlock", "s3cret"])
        assert "Catalog unlocked" in capsys.readouterr().out
        main(["load", str(loaded)])

    def test_unlock_without_configured_password(self, loaded, monkeypatch, capsys):
        monkeypatch.delenv("IOW_FILE_PASSWORD")
        assert _fails(["unlock", "anything"]) == 1
        assert "IOW_FILE_PASSWORD" in capsys.readouterr().err


class TestLookup:
    def test_by_barcode(self, loaded, capsys):
        main(["lookup", "--barcode", "6291041500213"])
        out = capsys.readouterr().out
        assert "X1" in out
        assert "Soap" in out

    def test_by_code_json(self, loaded, capsys):
        main(["lookup", "--code", "x2", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data["itemCode"] == "X2"
        assert data["uom"] == "CTN"

    def test_not_found(self, loaded, capsys):
        assert _fails(["lookup", "--barcode", "000"]) == 1
        assert "Barcode not found in master data" in capsys.readouterr().out

    def test_no_catalog(self, capsys):
        assert _fails(["lookup", "--code", "X1"]) == 1
        assert "No catalog loaded" in capsys.readouterr().err


class TestScanAndItems:
    def test_scan_saves_item(self, loaded, capsys):
        main(["scan", "--barcode", "12345678", "--entry", "5@2099-01-20"])
        assert "Item saved successfully!" in capsys.readouterr().out

        main(["items", "--json"])
        items = json.loads(capsys.readouterr().out)
        assert len(items) == 1
        assert items[0]["itemCode"] == "X2"
        assert items[0]["quantities"] == [{"quantity": "5", "expiry": "2099-01-20"}]
        assert items[0]["scannedBarcode"] == "12345678"

    def test_scan_many_entries(self, loaded, capsys):
        entries = []
        for month in range(1, 6):
            entries += ["--entry", f"{month}@2099-{month:02d}-01"]
        main(["scan", "--code", "X1", *entries])
        capsys.readouterr()
        main(["items", "--json"])
        items = json.loads(capsys.readouterr().out)
        assert [q["quantity"] for q in items[0]["quantities"]] == ["1", "2", "3", "4", "5"]

    def test_scan_past_date_refused(self, loaded, capsys):
        assert _fails(["scan", "--code", "X1", "--entry", "5@2000-01-01"]) == 1
        assert "valid future dates" in capsys.readouterr().err
        main(["items"])
        assert "No items scanned yet." in capsys.readouterr().out

    def test_scan_bad_entry(self, loaded, capsys):
        assert _fails(["scan", "--code", "X1", "--entry", "five"]) == 1
        assert "QTY@YYYY-MM-DD" in capsys.readouterr().err

    def test_remove_and_clear(self, loaded, capsys):
        main(["scan", "--code", "X1", "--entry", "1@2099-01-01"])
        main(["scan", "--code", "X2", "--entry", "2@2099-01-01"])
        capsys.readouterr()
        main(["items", "--json"])
        first, second = json.loads(capsys.readouterr().out)

        main(["remove", first["id"]])
        assert "1 items remaining" in capsys.readouterr().out
        assert _fails(["remove", first["id"]]) == 1

        main(["clear"])
        capsys.readouterr()
        main(["items", "--json"])
        assert json.loads(capsys.readouterr().out) == []


def test_wedge_deduplicates_appended_scans(loaded, monkeypatch, capsys):
    code = "6291041500213"
    monkeypatch.setattr("sys.stdin", io.StringIO(f"{code}\n{code}{code}\n000000\n"))
    main(["wedge"])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"{code}\tX1\tSoap"
    assert lines[1] == f"{code}\tX1\tSoap"
    assert lines[2] == "000000\tBarcode not found in master data"


class TestExport:
    def test_empty_session(self, loaded, tmp_path, capsys):
        assert _fails(["export", "--format", "html", "--output", str(tmp_path / "out")]) == 1
        assert "No items to export" in capsys.readouterr().err
        assert not (tmp_path / "out").exists()

    def test_html_export_uses_catalog_warehouse(self, loaded, tmp_path, capsys):
        main(["scan", "--code", "X1", "--entry", "3@2099-01-01"])
        capsys.readouterr()
        main(["export", "--format", "html", "--output", str(tmp_path / "out"),
              "--ref", "No. 55"])
        out = capsys.readouterr().out
        assert "Exported 1 items" in out
        files = list((tmp_path / "out").iterdir())
        assert len(files) == 1
        assert files[0].name.startswith("Shaab_Food_")
        assert "Shaab Food - 55" in files[0].read_text(encoding="utf-8")

    def test_export_and_print(self, loaded, tmp_path, capsys):
        main(["scan", "--code", "X1", "--entry", "3@2099-01-01"])
        with patch("iow.printer.Printer.print_file") as mock_print:
            main(["export", "--format", "csv", "--output", str(tmp_path),
                  "--printer", "Warehouse_Laser"])
        args, kwargs = mock_print.call_args
        assert args[0].suffix == ".csv"
        assert kwargs["printer_name"] == "Warehouse_Laser"
        assert "Print job sent: Warehouse_Laser" in capsys.readouterr().out

    def test_export_and_upload(self, loaded, tmp_path, capsys):
        main(["scan", "--code", "X1", "--entry", "3@2099-01-01"])
        with patch("iow.gdrive.GoogleDriveUploader.upload", return_value="file_1") as up:
            main(["export", "--format", "csv", "--output", str(tmp_path),
                  "--drive", "--drive-folder", "folder9"])
        assert up.call_args.args[0].suffix == ".csv"
        assert up.call_args.kwargs["folder_id"] == "folder9"
        assert "File ID: file_1" in capsys.readouterr().out


def test_printers(capsys):
    with patch("iow.printer.Printer.list_printers", return_value=[]):
        main(["printers"])
    assert "No printers found." in capsys.readouterr().out


def test_scan_year_out_of_range_refused(loaded, capsys):
    assert _fails(["scan", "--code", "X1", "--entry", "5@99999999999999999999-01-01"]) == 1
    assert "valid future dates" in capsys.readouterr().err


class TestDefaultWarehouse:
    @pytest.fixture
    def config_file(self, tmp_path):
        path = tmp_path / "iow.toml"
        path.write_text('[catalog]\ndefault_warehouse = "Main Depot"\n', encoding="utf-8")
        return path

    def test_status_shows_configured_default(self, config_file, capsys):
        main(["-c", str(config_file), "status"])
        assert "Warehouse: Main Depot" in capsys.readouterr().out

    def test_export_title_uses_configured_default(self, config_file, tmp_path, capsys):
        store = KeyValueStore(tmp_path / "iow.db")
        CatalogStore(store).save([{"Item Code": "X1", "Item Description": "Soap"}])
        store.close()

        main(["-c", str(config_file), "scan", "--code", "X1", "--entry", "1@2099-01-01"])
        main(["-c", str(config_file), "export", "--format", "html",
              "--output", str(tmp_path / "out")])
        [exported] = list((tmp_path / "out").iterdir())
        assert exported.name.startswith("Main_Depot_")
        assert "<h1>Main Depot</h1>" in exported.read_text(encoding="utf-8")
