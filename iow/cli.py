"""CLI entry point for the inventory scanner."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from datetime import date

from dotenv import load_dotenv

from .catalog import (
    CatalogError,
    find_by_barcode,
    find_by_code,
    normalize_record,
    read_catalog,
    warehouse_name_from_filename,
)
from .config import EXPORT_FORMATS, AppConfig, load_config
from .db import CatalogLockedError, CatalogStore, KeyValueStore, SessionStore
from .export import ExportError, export_session, format_date
from .models import QuantityRow
from .scanner import BarcodeInput, ScanForm


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iow",
        description="Warehouse inventory scanner: look up items, record "
        "quantities with expiry dates and export signed count sheets",
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None,
        help="Path to the configuration file (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log progress messages",
    )

    sub = parser.add_subparsers(dest="command")

    load_parser = sub.add_parser("load", help="Load a catalog file (.xlsx or .csv)")
    load_parser.add_argument("file", type=str)

    unlock_parser = sub.add_parser(
        "unlock", help="Unlock and discard the loaded catalog",
    )
    unlock_parser.add_argument(
        "password", type=str, nargs="?", default=None,
        help="Catalog password (prompted for when omitted)",
    )

    sub.add_parser("status", help="Show catalog and session state")

    lookup_parser = sub.add_parser("lookup", help="Look up a catalog item")
    _add_code_arguments(lookup_parser)
    lookup_parser.add_argument("--json", action="store_true", help="Output JSON")

    scan_parser = sub.add_parser(
        "scan", help="Look up an item and save it with quantities",
    )
    _add_code_arguments(scan_parser)
    scan_parser.add_argument(
        "--entry", type=str, action="append", required=True, metavar="QTY@YYYY-MM-DD",
        help="Quantity with its expiry date; repeat for more rows",
    )

    sub.add_parser(
        "wedge", help="Read keyboard-wedge scanner input from stdin",
    )

    items_parser = sub.add_parser("items", help="List scanned items")
    items_parser.add_argument("--json", action="store_true", help="Output JSON")

    remove_parser = sub.add_parser("remove", help="Remove a scanned item")
    remove_parser.add_argument("item_id", type=str)

    sub.add_parser("clear", help="Remove all scanned items")

    export_parser = sub.add_parser("export", help="Export the scanned items")
    export_parser.add_argument(
        "--format", "-f", dest="fmt", choices=EXPORT_FORMATS, default=None,
        help="Output format (default from configuration)",
    )
    export_parser.add_argument(
        "--warehouse", type=str, default=None,
        help="Warehouse name for the title (default: loaded catalog name)",
    )
    export_parser.add_argument(
        "--ref", type=str, default="", help="Reference code (digits only)",
    )
    export_parser.add_argument(
        "--output", "-o", type=str, default=None, metavar="DIR",
        help="Output directory",
    )
    export_parser.add_argument(
        "--print", action="store_true", dest="do_print",
        help="Print with the default printer",
    )
    export_parser.add_argument(
        "--printer", type=str, default=None, help="Print with this printer",
    )
    export_parser.add_argument(
        "--drive", action="store_true", help="Upload to Google Drive",
    )
    export_parser.add_argument(
        "--drive-folder", type=str, default=None, help="Google Drive folder ID",
    )

    sub.add_parser("printers", help="List available printers")
    return parser


def _add_code_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--barcode", "-b", type=str, help="Item barcode")
    group.add_argument("--code", type=str, help="Item code")


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except (ValueError, ImportError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    store = KeyValueStore(config.storage.db_path)
    try:
        ok = _dispatch(args, config, store)
    except (
        CatalogError,
        CatalogLockedError,
        ExportError,
        ImportError,
        RuntimeError,
        OSError,
    ) as e:
        print(f"Error: {e}", file=sys.stderr)
        ok = False
    finally:
        store.close()

    if not ok:
        sys.exit(1)


def _dispatch(args, config: AppConfig, store: KeyValueStore) -> bool:
    match args.command:
        case "load":
            return _cmd_load(config, store, args)
        case "unlock":
            return _cmd_unlock(config, store, args)
        case "status":
            return _cmd_status(config, store)
        case "lookup":
            return _cmd_lookup(config, store, args)
        case "scan":
            return _cmd_scan(config, store, args)
        case "wedge":
            return _cmd_wedge(config, store)
        case "items":
            return _cmd_items(store, args)
        case "remove":
            return _cmd_remove(store, args)
        case "clear":
            SessionStore(store).clear()
            print("Cleared all scanned items.")
            return True
        case "export":
            return _cmd_export(config, store, args)
        case "printers":
            return _cmd_printers()
    return False


def _catalog(config: AppConfig, store: KeyValueStore) -> CatalogStore:
    return CatalogStore(store, config.catalog.default_warehouse)


def _cmd_load(config: AppConfig, store: KeyValueStore, args) -> bool:
    catalog = _catalog(config, store)
    if catalog.is_locked() and catalog.rows() is not None:
        raise CatalogLockedError(
            "A catalog is already loaded. Run 'iow unlock' first."
        )
    rows = read_catalog(args.file)
    warehouse = warehouse_name_from_filename(
        args.file, config.catalog.default_warehouse
    )
    catalog.save(rows, warehouse)
    print(f"Loaded {len(rows)} items for {warehouse}.")
    return True


def _cmd_unlock(config: AppConfig, store: KeyValueStore, args) -> bool:
    catalog = _catalog(config, store)
    if not catalog.is_locked():
        print("The catalog is not locked.")
        return True
    if not config.catalog.password:
        print(
            "No catalog password is configured (set IOW_FILE_PASSWORD).",
            file=sys.stderr,
        )
        return False
    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
    if not catalog.unlock(password, config.catalog.password):
        print("Incorrect password", file=sys.stderr)
        return False
    print("Catalog unlocked. You can now load a new file.")
    return True


def _cmd_status(config: AppConfig, store: KeyValueStore) -> bool:
    catalog = _catalog(config, store)
    rows = catalog.rows()
    session = SessionStore(store).items()
    print(f"Warehouse: {catalog.warehouse_name()}")
    print(f"Catalog:   {len(rows) if rows is not None else 0} items"
          f"{' (locked)' if catalog.is_locked() else ''}")
    print(f"Session:   {len(session)} scanned items")
    return True


def _cmd_lookup(config: AppConfig, store: KeyValueStore, args) -> bool:
    rows = _catalog(config, store).rows()
    if rows is None:
        print("No catalog loaded. Run 'iow load FILE' first.", file=sys.stderr)
        return False

    if args.barcode is not None:
        record = find_by_barcode(rows, args.barcode)
        missing = "Barcode not found in master data"
    else:
        record = find_by_code(rows, args.code)
        missing = "Item code not found in master data"

    if record is None:
        print(missing)
        return False

    item = normalize_record(record)
    if args.json:
        print(json.dumps(item.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_item(item)
    return True


def _print_item(item) -> None:
    print(f"  Brand Name:       {item.brand_name}")
    print(f"  Item Code:        {item.item_code}")
    print(f"  Item Description: {item.item_description}")
    print(f"  UOM:              {item.uom}")
    print(f"  Barcode:          {item.barcode}")


def _parse_entry(text: str) -> QuantityRow:
    """``QTY@YYYY-MM-DD`` to an edit row (month 0-indexed)."""
    quantity, sep, expiry = text.partition("@")
    parts = expiry.strip().split("-")
    if not sep or len(parts) != 3:
        raise ValueError(f"Invalid entry {text!r}, expected QTY@YYYY-MM-DD")
    year, month, day = parts
    try:
        month = str(int(month) - 1)
    except ValueError:
        raise ValueError(f"Invalid month in entry {text!r}")
    return QuantityRow(quantity=quantity.strip(), day=day, month=month, year=year)


def _scan_form(config: AppConfig, store: KeyValueStore) -> ScanForm:
    session = SessionStore(store)
    return ScanForm(
        _catalog(config, store).rows(),
        save_item=session.add,
        min_rows=config.scanner.min_quantity_rows,
        barcode_input=BarcodeInput(
            window_ms=config.scanner.wedge_window_ms,
            long_input_threshold=config.scanner.long_input_threshold,
        ),
        today=date.today,
    )


def _cmd_scan(config: AppConfig, store: KeyValueStore, args) -> bool:
    try:
        entries = [_parse_entry(e) for e in args.entry]
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return False

    form = _scan_form(config, store)
    if args.barcode is not None:
        result = form.scan_barcode(args.barcode)
    else:
        form.enter_item_code(args.code)
        result = form.search()
    print(result.message)
    if not result.found:
        return False

    for index, row in enumerate(entries):
        if index >= len(form.rows) and not form.add_row():
            print(
                f"Entry {index + 1} refused: the previous row needs a quantity "
                "and a valid future date",
                file=sys.stderr,
            )
            return False
        form.set_row(
            index, quantity=row.quantity, day=row.day, month=row.month, year=row.year,
        )

    saved = form.save()
    for index, message in sorted(saved.row_errors.items()):
        print(f"  Row {index + 1}: {message}", file=sys.stderr)
    if not saved.saved:
        print(saved.message, file=sys.stderr)
        return False
    print(f"{saved.message} ({saved.item.item_code}, id {saved.item.id})")
    return True


def _cmd_wedge(config: AppConfig, store: KeyValueStore) -> bool:
    if _catalog(config, store).rows() is None:
        print("No catalog loaded. Run 'iow load FILE' first.", file=sys.stderr)
        return False

    form = _scan_form(config, store)
    for line in sys.stdin:
        value = form.enter_barcode(line.rstrip("\r\n"))
        if not value:
            continue
        result = form.search()
        if result.found:
            print(f"{value}\t{result.item.item_code}\t{result.item.item_description}")
        else:
            print(f"{value}\t{result.message}")
    return True


def _cmd_items(store: KeyValueStore, args) -> bool:
    items = SessionStore(store).items()
    if args.json:
        print(json.dumps([i.to_dict() for i in items], ensure_ascii=False, indent=2))
        return True
    if not items:
        print("No items scanned yet.")
        return True
    print(f"Scanned items: {len(items)}")
    for item in items:
        print(f"\n[{item.id}] {item.item_code}  {item.item_description}")
        print(f"  Brand: {item.brand_name}  UOM: {item.uom}  "
              f"Scanned: {format_date(item.scan_date)}")
        for entry in item.quantities:
            print(f"  Qty {entry.quantity}  Exp {format_date(entry.expiry)}")
    return True


def _cmd_remove(store: KeyValueStore, args) -> bool:
    session = SessionStore(store)
    before = len(session.items())
    remaining = session.remove(args.item_id)
    if len(remaining) == before:
        print(f"No scanned item with id {args.item_id}", file=sys.stderr)
        return False
    print(f"Removed. {len(remaining)} items remaining.")
    return True


def _cmd_export(config: AppConfig, store: KeyValueStore, args) -> bool:
    items = SessionStore(store).items()
    fmt = args.fmt or config.export.default_format
    warehouse = args.warehouse or _catalog(config, store).warehouse_name()
    output_dir = args.output or config.export.output_dir

    path = export_session(
        items,
        fmt,
        output_dir,
        warehouse=warehouse,
        reference_code=args.ref,
        font_path=config.export.font_path or None,
    )
    print(f"Exported {len(items)} items: {path}")

    ok = True
    printer_name = args.printer or (
        config.printer.printer_name if config.printer.enabled else None
    )
    if args.do_print or args.printer or config.printer.enabled:
        from .printer import Printer

        try:
            Printer.print_file(path, printer_name=printer_name or None)
            print(f"Print job sent: {printer_name or 'default printer'}")
        except RuntimeError as e:
            print(f"Print error: {e}", file=sys.stderr)
            ok = False

    if args.drive or config.gdrive.enabled:
        from .gdrive import GoogleDriveUploader

        try:
            uploader = GoogleDriveUploader.from_config(config.gdrive)
            file_id = uploader.upload(path, folder_id=args.drive_folder or None)
            print(f"Uploaded to Google Drive (File ID: {file_id})")
        except (ImportError, FileNotFoundError) as e:
            print(f"Google Drive error: {e}", file=sys.stderr)
            ok = False

    return ok


def _cmd_printers() -> bool:
    from .printer import Printer

    printers = Printer.list_printers()
    if not printers:
        print("No printers found.")
        return True
    print(f"Available printers: {len(printers)}")
    for p in printers:
        default_mark = " (default)" if p.is_default else ""
        print(f"  {p.name}{default_mark}")
    return True
