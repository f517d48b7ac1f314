from __future__ import annotations

from typing import Optional, Sequence

from core.schema import SaleRecord


def filter_sales(sales: Sequence[SaleRecord], fuel_type: Optional[str]) -> Sequence[SaleRecord]:
    """
    Sales matching `fuel_type`, in their original order.

    An empty filter hands back `sales` itself. The input is never mutated.
    """
    if not fuel_type:
        return sales
    return tuple(s for s in sales if s.fuel_type == fuel_type)
