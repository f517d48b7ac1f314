from __future__ import annotations

from typing import Any, Callable, Optional

from core.errors import FuelSalesError, MissingBranchError, ValidationError
from core.logs import get_logger
from core.schema import BranchSession, PaymentMode, SaleDraft, SaleRecord
from core.services.store import BranchScopedDataStore
from core.utils import is_plain_positive_quantity, non_empty, to_decimal

log = get_logger("fuel_sales.sales")


def missing_fields(draft: SaleDraft) -> list[str]:
    """
    Names of required fields that are empty or unusable.

    Liters must be plain decimal text (no sign or exponent, bounded size)
    above zero, and the payment mode must be one of the known modes;
    anything else is reported like an empty field.
    """
    missing: list[str] = []
    if not non_empty(draft.fuel_type):
        missing.append("fuel_type")
    if not is_plain_positive_quantity(draft.liters):
        missing.append("liters")
    price = draft.sale_price_per_liter
    if price is None or to_decimal(price) is None or to_decimal(price) < 0:
        missing.append("sale_price_per_liter")
    if draft.sale_date is None:
        missing.append("sale_date")
    if PaymentMode.parse(draft.payment_mode) is None:
        missing.append("payment_mode")
    return missing


def validate(draft: SaleDraft) -> None:
    missing = missing_fields(draft)
    if missing:
        raise ValidationError(missing)


def _to_record(draft: SaleDraft, session: BranchSession) -> SaleRecord:
    return SaleRecord(
        id=None if draft.is_new else draft.id,
        fuel_type=draft.fuel_type,
        liters=to_decimal(draft.liters),
        sale_price_per_liter=to_decimal(draft.sale_price_per_liter),
        sale_date=draft.sale_date,
        payment_mode=draft.payment_mode,
        # Always the active branch, whatever the draft carried.
        branch_id=session.branch_id,
    )


class SaleRecordService:
    def __init__(
        self,
        gateway,
        store: BranchScopedDataStore,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.gateway = gateway
        self.store = store
        self.notify = notify

    def validate(self, draft: SaleDraft) -> None:
        validate(draft)

    def submit(self, draft: SaleDraft, session: BranchSession) -> SaleRecord:
        if not session.has_branch:
            raise MissingBranchError()
        validate(draft)

        record = _to_record(draft, session)
        if draft.is_new:
            saved = self.gateway.create_sale(record, session)
            log.info("Created sale %s (%s, %s L) for branch %s", saved.id, record.fuel_type, record.liters, session.branch_id)
        else:
            saved = self.gateway.update_sale(record, session)
            log.info("Updated sale %s for branch %s", record.id, session.branch_id)

        # Inventory is refreshed too, even though a sale does not move prices.
        self._follow_up(self.store.refresh_sales, session, "Error fetching sales data")
        self._follow_up(self.store.refresh_inventory, session, "Error fetching inventory")
        return saved

    def delete(self, sale_id: Any, session: BranchSession) -> None:
        if not session.has_branch:
            raise MissingBranchError()
        if sale_id is None or sale_id == "":
            raise ValidationError(["id"], "Select a sale to delete.")

        self.gateway.delete_sale(sale_id, session)
        log.info("Deleted sale %s for branch %s", sale_id, session.branch_id)

        # No local removal: the list is whatever the server returns next.
        self._follow_up(self.store.refresh_sales, session, "Error fetching sales data")

    def _follow_up(self, refresh: Callable[[BranchSession], Any], session: BranchSession, message: str) -> None:
        # The write already succeeded; a failed refresh must not undo that.
        try:
            refresh(session)
        except FuelSalesError as e:
            log.warning("%s after write: %s", message, e.user_message)
            if self.notify is not None:
                self.notify(f"{message}: {e.user_message}")
