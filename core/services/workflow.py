from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional

from core.errors import FuelSalesError, ValidationError
from core.logs import get_logger
from core.schema import BranchSession, SaleDraft, SaleRecord
from core.services.pricing import resolve_price
from core.services.sales import SaleRecordService
from core.services.store import BranchScopedDataStore

log = get_logger("fuel_sales.workflow")


class WorkflowState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"


class InvalidTransition(RuntimeError):
    pass


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str = "info"  # info | success | error


class SaleEntryWorkflow:
    """
    Sale-entry state machine shared by the new-sale and edit-sale forms.

        IDLE -> EDITING(draft) -> SUBMITTING -> IDLE      (saved)
                                             -> EDITING   (error shown)

    Every outcome replaces `notification`, a single dismissible message.
    """

    def __init__(self, service: SaleRecordService, store: BranchScopedDataStore):
        self.service = service
        self.store = store
        self.state = WorkflowState.IDLE
        self.draft: Optional[SaleDraft] = None
        self.notification: Optional[Notification] = None
        self._warnings: list[str] = []
        # Follow-up refresh warnings are collected here and still passed on
        # to any notifier the service was built with.
        self._outer_notify = service.notify
        service.notify = self._collect_warning

    # -------------------------
    # Transitions
    # -------------------------

    def start_new(self, today: Optional[date] = None) -> SaleDraft:
        self._require(WorkflowState.IDLE, WorkflowState.EDITING)
        self.draft = SaleDraft(sale_date=today or date.today())
        self.state = WorkflowState.EDITING
        return self.draft

    def start_edit(self, record: SaleRecord) -> SaleDraft:
        self._require(WorkflowState.IDLE, WorkflowState.EDITING)
        self.draft = SaleDraft.from_record(record)
        self.state = WorkflowState.EDITING
        return self.draft

    def cancel(self) -> None:
        self._require(WorkflowState.EDITING)
        self.draft = None
        self.state = WorkflowState.IDLE

    def save(self, session: BranchSession) -> Optional[SaleRecord]:
        self._require(WorkflowState.EDITING)
        self.state = WorkflowState.SUBMITTING
        self._warnings.clear()
        try:
            saved = self.service.submit(self.draft, session)
        except ValidationError as e:
            self.state = WorkflowState.EDITING
            self._notify(e.user_message, "error")
            return None
        except FuelSalesError as e:
            self.state = WorkflowState.EDITING
            log.warning("Saving sale failed: %s", e.user_message)
            self._notify(f"Error saving sale: {e.user_message}", "error")
            return None
        except Exception:
            self.state = WorkflowState.EDITING
            raise

        self.draft = None
        self.state = WorkflowState.IDLE
        if self._warnings:
            self._notify(f"Sale saved successfully. {self._warnings[-1]}", "error")
        else:
            self._notify("Sale saved successfully", "success")
        return saved

    # -------------------------
    # Draft edits
    # -------------------------

    def select_fuel_type(self, fuel_type: str) -> None:
        self._require(WorkflowState.EDITING)
        self.draft.fuel_type = fuel_type
        # Always overwritten, also with None when the fuel is not stocked.
        self.draft.sale_price_per_liter = resolve_price(fuel_type, self.store.inventory)

    def set_liters(self, liters: Any) -> None:
        self._require(WorkflowState.EDITING)
        self.draft.liters = "" if liters is None else str(liters)

    def set_sale_date(self, sale_date: Optional[date]) -> None:
        self._require(WorkflowState.EDITING)
        if sale_date is not None:
            self.draft.sale_date = sale_date

    def set_payment_mode(self, payment_mode: str) -> None:
        self._require(WorkflowState.EDITING)
        self.draft.payment_mode = payment_mode or ""

    # -------------------------
    # List actions
    # -------------------------

    def delete(self, sale_id: Any, session: BranchSession) -> bool:
        self._warnings.clear()
        try:
            self.service.delete(sale_id, session)
        except FuelSalesError as e:
            log.warning("Deleting sale %s failed: %s", sale_id, e.user_message)
            self._notify(f"Error deleting sale: {e.user_message}", "error")
            return False
        if self._warnings:
            self._notify(f"Sale deleted successfully. {self._warnings[-1]}", "error")
        else:
            self._notify("Sale deleted successfully", "success")
        return True

    def load(self, session: BranchSession) -> None:
        """First fetch once a branch is known; silent while it is not."""
        try:
            self.store.ensure_loaded(session)
        except FuelSalesError as e:
            self._notify(f"Error fetching data: {e.user_message}", "error")

    def reload(self, session: BranchSession) -> None:
        if not session.has_branch:
            return
        try:
            self.store.refresh_sales(session)
            self.store.refresh_inventory(session)
        except FuelSalesError as e:
            self._notify(f"Error fetching data: {e.user_message}", "error")

    # -------------------------
    # Presentation helpers
    # -------------------------

    @property
    def form_title(self) -> str:
        if self.draft is not None and not self.draft.is_new:
            return "Edit Sale"
        return "New Sale"

    def dismiss_notification(self) -> None:
        self.notification = None

    def _collect_warning(self, message: str) -> None:
        self._warnings.append(message)
        if self._outer_notify is not None:
            self._outer_notify(message)

    def _notify(self, message: str, kind: str) -> None:
        self.notification = Notification(message=message, kind=kind)

    def _require(self, *states: WorkflowState) -> None:
        if self.state not in states:
            raise InvalidTransition(f"Not allowed while {self.state.value}")
