"""Data models for catalog items, quantity entries and scanned items."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NormalizedItem:
    """Canonical view of a catalog row."""

    brand_name: str = ""
    item_code: str = ""
    item_description: str = ""
    uom: str = ""
    barcode: str = ""

    def to_dict(self) -> dict:
        return {
            "brandName": self.brand_name,
            "itemCode": self.item_code,
            "itemDescription": self.item_description,
            "uom": self.uom,
            "barcode": self.barcode,
        }


@dataclass
class QuantityRow:
    """A quantity/expiry row while it is being edited.

    ``month`` is 0-indexed (``"0"`` is January), matching the month picker.
    """

    quantity: str = ""
    day: str = ""
    month: str = ""
    year: str = ""


@dataclass(frozen=True)
class QuantityEntry:
    """A committed quantity with its ISO-8601 expiry date."""

    quantity: str
    expiry: str

    def to_dict(self) -> dict:
        return {"quantity": self.quantity, "expiry": self.expiry}

    @classmethod
    def from_dict(cls, data: dict) -> QuantityEntry:
        return cls(
            quantity=str(data.get("quantity", "") or ""),
            expiry=str(data.get("expiry", "") or ""),
        )


@dataclass(frozen=True)
class ScannedItem:
    """An item saved into the scan session."""

    id: str
    scan_date: str
    item: NormalizedItem
    quantities: list[QuantityEntry] = field(default_factory=list)
    scanned_barcode: str = ""

    @property
    def brand_name(self) -> str:
        return self.item.brand_name

    @property
    def item_code(self) -> str:
        return self.item.item_code

    @property
    def item_description(self) -> str:
        return self.item.item_description

    @property
    def uom(self) -> str:
        return self.item.uom

    @property
    def barcode(self) -> str:
        return self.item.barcode

    def to_dict(self) -> dict:
        data = self.item.to_dict()
        data.update({
            "id": self.id,
            "scanDate": self.scan_date,
            "quantities": [q.to_dict() for q in self.quantities],
            "scannedBarcode": self.scanned_barcode,
        })
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ScannedItem:
        return cls(
            id=str(data.get("id", "")),
            scan_date=str(data.get("scanDate", "") or ""),
            item=NormalizedItem(
                brand_name=str(data.get("brandName", "") or ""),
                item_code=str(data.get("itemCode", "") or ""),
                item_description=str(data.get("itemDescription", "") or ""),
                uom=str(data.get("uom", "") or ""),
                barcode=str(data.get("barcode", "") or ""),
            ),
            quantities=[
                QuantityEntry.from_dict(q) for q in data.get("quantities") or []
            ],
            scanned_barcode=str(data.get("scannedBarcode", "") or ""),
        )
