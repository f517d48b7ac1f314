from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from core.errors import ServerError
from core.utils import iso_date, json_number, parse_date, to_decimal


class PaymentMode(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    MOBILE_MONEY = "Mobile Money"

    @classmethod
    def parse(cls, value: Any) -> Optional["PaymentMode"]:
        if isinstance(value, cls):
            return value
        for mode in cls:
            if mode.value == value:
                return mode
        return None


PAYMENT_MODES = [m.value for m in PaymentMode]

# User-facing fields that must be filled before a sale is submitted.
REQUIRED_SALE_FIELDS = ("fuel_type", "liters", "sale_price_per_liter", "sale_date", "payment_mode")


@dataclass(frozen=True)
class BranchSession:
    credential: Optional[str]
    branch_id: Optional[str]

    @property
    def has_branch(self) -> bool:
        return bool(self.branch_id is not None and str(self.branch_id).strip())


@dataclass(frozen=True)
class InventoryItem:
    id: Any
    fuel_type: str
    unit_price: Decimal


@dataclass(frozen=True)
class SaleRecord:
    id: Any
    fuel_type: str
    liters: Decimal
    sale_price_per_liter: Decimal
    sale_date: date
    payment_mode: str
    branch_id: Any = None


@dataclass
class SaleDraft:
    """
    Editable form state for one sale.

    `liters` holds the raw text typed by the user; `sale_price_per_liter`
    is only ever written by fuel-type selection.
    """

    id: Any = None
    fuel_type: str = ""
    liters: str = ""
    sale_price_per_liter: Optional[Decimal] = None
    sale_date: Optional[date] = field(default_factory=date.today)
    payment_mode: str = ""
    branch_id: Any = None

    @property
    def is_new(self) -> bool:
        return self.id is None or self.id == ""

    @classmethod
    def from_record(cls, record: SaleRecord) -> "SaleDraft":
        return cls(
            id=record.id,
            fuel_type=record.fuel_type,
            liters=str(record.liters),
            sale_price_per_liter=record.sale_price_per_liter,
            sale_date=record.sale_date,
            payment_mode=record.payment_mode,
            branch_id=record.branch_id,
        )


def _require(payload: dict, key: str, what: str) -> Any:
    if not isinstance(payload, dict):
        raise ServerError(f"Malformed {what} from server: expected an object, got {type(payload).__name__}")
    if key not in payload:
        raise ServerError(f"Malformed {what} from server: missing '{key}'")
    return payload[key]


def inventory_item_from_json(payload: dict) -> InventoryItem:
    price = to_decimal(_require(payload, "unit_price", "inventory item"))
    if price is None:
        raise ServerError(f"Malformed inventory item from server: unit_price={payload.get('unit_price')!r}")
    return InventoryItem(
        id=payload.get("id"),
        fuel_type=str(_require(payload, "fuel_type", "inventory item")),
        unit_price=price,
    )


def sale_record_from_json(payload: dict) -> SaleRecord:
    try:
        sale_date = parse_date(_require(payload, "sale_date", "sale"))
    except ValueError:
        raise ServerError(f"Malformed sale from server: sale_date={payload.get('sale_date')!r}")

    liters = to_decimal(_require(payload, "liters", "sale"))
    price = to_decimal(_require(payload, "sale_price_per_liter", "sale"))
    if liters is None or price is None or sale_date is None:
        raise ServerError(f"Malformed sale from server: id={payload.get('id')!r}")

    return SaleRecord(
        id=payload.get("id"),
        fuel_type=str(_require(payload, "fuel_type", "sale")),
        liters=liters,
        sale_price_per_liter=price,
        sale_date=sale_date,
        payment_mode=str(payload.get("payment_mode") or ""),
        branch_id=payload.get("branch_id"),
    )


def sale_record_to_json(record: SaleRecord) -> dict:
    payload = {
        "fuel_type": record.fuel_type,
        "liters": json_number(record.liters),
        "sale_price_per_liter": json_number(record.sale_price_per_liter),
        "sale_date": iso_date(record.sale_date),
        "payment_mode": record.payment_mode,
        "branch_id": record.branch_id,
    }
    if record.id is not None and record.id != "":
        payload["id"] = record.id
    return payload
