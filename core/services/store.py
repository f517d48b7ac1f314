from __future__ import annotations

from typing import Any, Optional

from core.errors import FuelSalesError
from core.logs import get_logger
from core.schema import BranchSession, InventoryItem, SaleRecord

log = get_logger("fuel_sales.store")


class BranchScopedDataStore:
    """
    In-memory inventory and sales for the active branch.

    Collections are tuples and are only ever swapped wholesale, so readers
    never see a mix of two responses. A failed refresh leaves the previous
    tuple in place. There is no generation counter: whichever response
    completes last wins.
    """

    def __init__(self, gateway):
        self.gateway = gateway
        self.inventory: tuple[InventoryItem, ...] = ()
        self.sales: tuple[SaleRecord, ...] = ()
        self._branch_id: Optional[Any] = None
        self._inventory_loaded = False
        self._sales_loaded = False

    def _track_branch(self, session: BranchSession) -> None:
        # Cache belongs to one branch; a new branch starts unloaded.
        if session.branch_id != self._branch_id:
            if self._branch_id is not None:
                log.info("Branch changed %s -> %s; cache reset", self._branch_id, session.branch_id)
            self._branch_id = session.branch_id
            self.inventory = ()
            self.sales = ()
            self._inventory_loaded = False
            self._sales_loaded = False

    def refresh_inventory(self, session: BranchSession) -> tuple[InventoryItem, ...]:
        if not session.has_branch:
            return self.inventory
        self._track_branch(session)

        items = tuple(self.gateway.list_inventory(session))
        self.inventory = items
        self._inventory_loaded = True
        log.info("Inventory refreshed for branch %s: %d item(s)", session.branch_id, len(items))
        return items

    def refresh_sales(self, session: BranchSession) -> tuple[SaleRecord, ...]:
        if not session.has_branch:
            return self.sales
        self._track_branch(session)

        records = tuple(self.gateway.list_sales(session))
        self.sales = records
        self._sales_loaded = True
        log.info("Sales refreshed for branch %s: %d record(s)", session.branch_id, len(records))
        return records

    def is_ready(self, session: BranchSession) -> bool:
        return (
            session.has_branch
            and session.branch_id == self._branch_id
            and self._inventory_loaded
            and self._sales_loaded
        )

    def ensure_loaded(self, session: BranchSession) -> None:
        """
        Run whichever refresh has not yet succeeded for the session's branch.

        Both are attempted even when the first fails; the first error is
        re-raised afterwards.
        """
        if not session.has_branch:
            return
        self._track_branch(session)

        error = None
        if not self._sales_loaded:
            try:
                self.refresh_sales(session)
            except FuelSalesError as exc:
                error = exc
        if not self._inventory_loaded:
            try:
                self.refresh_inventory(session)
            except FuelSalesError as exc:
                error = error or exc
        if error is not None:
            raise error
