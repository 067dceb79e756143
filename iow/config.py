"""TOML configuration loader for the inventory scanner."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_WAREHOUSE = "Inventory Report"
EXPORT_FORMATS = ("pdf", "xlsx", "html", "csv")


@dataclass
class StorageConfig:
    db_path: str = "~/.config/iow/iow.db"


@dataclass
class CatalogConfig:
    password: str = ""
    default_warehouse: str = DEFAULT_WAREHOUSE


@dataclass
class ScannerConfig:
    wedge_window_ms: int = 500
    long_input_threshold: int = 20
    min_quantity_rows: int = 3


@dataclass
class ExportConfig:
    output_dir: str = "~/iow-exports"
    default_format: str = "pdf"
    font_path: str = ""


@dataclass
class PrinterConfig:
    enabled: bool = False
    printer_name: str = ""


@dataclass
class GDriveConfig:
    enabled: bool = False
    credentials_path: str = "~/.config/iow/gdrive_credentials.json"
    token_path: str = "~/.config/iow/gdrive_token.json"
    folder_id: str = ""


@dataclass
class AppConfig:
    storage: StorageConfig = field(default_factory=StorageConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    printer: PrinterConfig = field(default_factory=PrinterConfig)
    gdrive: GDriveConfig = field(default_factory=GDriveConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The catalog password and database path can be overridden via
    environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    sto = raw.get("storage", {})
    cat = raw.get("catalog", {})
    scn = raw.get("scanner", {})
    exp = raw.get("export", {})
    prn = raw.get("printer", {})
    gdr = raw.get("gdrive", {})

    # Environment wins over the file for the secret and the database path
    password = os.environ.get("IOW_FILE_PASSWORD", "") or cat.get("password", "")
    db_path = os.environ.get("IOW_DB_PATH", "") or sto.get(
        "db_path", "~/.config/iow/iow.db"
    )

    default_format = exp.get("default_format", "pdf")
    if default_format not in EXPORT_FORMATS:
        raise ValueError(
            f"Unknown export format: {default_format!r} "
            f"(choose one of {', '.join(EXPORT_FORMATS)})"
        )

    return AppConfig(
        storage=StorageConfig(db_path=db_path),
        catalog=CatalogConfig(
            password=password,
            default_warehouse=cat.get("default_warehouse", DEFAULT_WAREHOUSE),
        ),
        scanner=ScannerConfig(
            wedge_window_ms=scn.get("wedge_window_ms", 500),
            long_input_threshold=scn.get("long_input_threshold", 20),
            min_quantity_rows=scn.get("min_quantity_rows", 3),
        ),
        export=ExportConfig(
            output_dir=exp.get("output_dir", "~/iow-exports"),
            default_format=default_format,
            font_path=exp.get("font_path", ""),
        ),
        printer=PrinterConfig(
            enabled=prn.get("enabled", False),
            printer_name=prn.get("printer_name", ""),
        ),
        gdrive=GDriveConfig(
            enabled=gdr.get("enabled", False),
            credentials_path=gdr.get(
                "credentials_path",
                "~/.config/iow/gdrive_credentials.json",
            ),
            token_path=gdr.get(
                "token_path",
                "~/.config/iow/gdrive_token.json",
            ),
            folder_id=gdr.get("folder_id", ""),
        ),
    )
