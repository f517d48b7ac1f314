from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from core.schema import InventoryItem


def resolve_price(fuel_type: str, inventory: Iterable[InventoryItem]) -> Optional[Decimal]:
    """
    Current unit price for `fuel_type` at this branch.

    Exact, case-sensitive match on fuel_type. None when the fuel is not
    stocked here or inventory has not been loaded yet.
    """
    for item in inventory:
        if item.fuel_type == fuel_type:
            return item.unit_price
    return None


def fuel_type_options(inventory: Iterable[InventoryItem]) -> list[str]:
    return [item.fuel_type for item in inventory]
