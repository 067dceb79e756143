"""Send exported reports to a CUPS printer."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class PrinterInfo:
    name: str
    is_default: bool


def _require_command(name: str) -> None:
    if shutil.which(name) is None:
        raise RuntimeError(
            f"{name} command not found. Make sure CUPS is installed:\n"
            "  Ubuntu/Debian: sudo apt install cups\n"
            "  Fedora/RHEL:   sudo dnf install cups"
        )


def _lpstat(flag: str) -> str:
    """Run ``lpstat <flag>`` and return its output, or ``""`` on failure."""
    try:
        result = subprocess.run(
            ["lpstat", flag], capture_output=True, text=True, timeout=10,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.warning("lpstat %s failed: %s", flag, e)
        return ""
    return result.stdout if result.returncode == 0 else ""


class Printer:
    """Print files using the system lpr command."""

    @staticmethod
    def list_printers() -> list[PrinterInfo]:
        """List available printers using lpstat.

        Raises:
            RuntimeError: If lpstat is not available.
        """
        _require_command("lpstat")

        # "system default destination: PrinterName"
        default_output = _lpstat("-d")
        default_name = ""
        if ":" in default_output:
            default_name = default_output.strip().split(":")[-1].strip()

        printers: list[PrinterInfo] = []
        # "printer PrinterName is idle."
        for line in _lpstat("-p").strip().splitlines():
            parts = line.split()
            if len(parts) >= 2 and parts[0] == "printer":
                printers.append(PrinterInfo(parts[1], parts[1] == default_name))
        return printers

    @staticmethod
    def print_file(file_path: str | Path, printer_name: str | None = None) -> None:
        """Print a file using lpr.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            RuntimeError: If lpr is not available or printing fails.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        _require_command("lpr")

        cmd = ["lpr"]
        if printer_name:
            cmd.extend(["-P", printer_name])
        cmd.append(str(file_path))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
        except subprocess.TimeoutExpired:
            raise RuntimeError("Print job timed out.")
        if result.returncode != 0:
            raise RuntimeError(f"Printing failed: {result.stderr.strip()}")
        logger.info("Sent %s to %s", file_path.name, printer_name or "default printer")
