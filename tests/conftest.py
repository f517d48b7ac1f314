# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - No network: services talk to FakeGateway, SalesGateway talks to FakeHttp
# - Every test gets fresh fakes; nothing is shared between tests
# - Sessions are plain BranchSession values (no Streamlit runtime needed)
# ---------------------------------------------------------------------

from __future__ import annotations

import json
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import pytest

from core.config import Settings
from core.schema import BranchSession, InventoryItem, SaleRecord
from core.services.sales import SaleRecordService
from core.services.store import BranchScopedDataStore
from core.services.workflow import SaleEntryWorkflow


# ---------- Builders ----------
def make_item(fuel_type: str, unit_price, item_id: Any = None) -> InventoryItem:
    return InventoryItem(id=item_id or fuel_type.lower(), fuel_type=fuel_type, unit_price=Decimal(str(unit_price)))


def make_sale(sale_id: Any, fuel_type: str, **kw) -> SaleRecord:
    return SaleRecord(
        id=sale_id,
        fuel_type=fuel_type,
        liters=Decimal(str(kw.get("liters", "10"))),
        sale_price_per_liter=Decimal(str(kw.get("price", "1500"))),
        sale_date=kw.get("sale_date", date(2024, 1, 5)),
        payment_mode=kw.get("payment_mode", "Cash"),
        branch_id=kw.get("branch_id", "7"),
    )


# ---------- In-memory remote store ----------
class FakeGateway:
    """
    Stands in for SalesGateway. Records every call as (name, args) and
    serves whatever `sales` / `inventory` hold at call time.
    """

    def __init__(self, inventory=(), sales=()):
        self.inventory = list(inventory)
        self.sales = list(sales)
        self.calls: list[tuple[str, Any]] = []
        self.fail: dict[str, Exception] = {}
        self._next_id = 100

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail:
            raise self.fail[name]

    def list_inventory(self, session):
        self.calls.append(("list_inventory", session.branch_id))
        self._maybe_fail("list_inventory")
        return list(self.inventory)

    def list_sales(self, session):
        self.calls.append(("list_sales", session.branch_id))
        self._maybe_fail("list_sales")
        return list(self.sales)

    def create_sale(self, record, session):
        self.calls.append(("create_sale", record))
        self._maybe_fail("create_sale")
        self._next_id += 1
        saved = replace(record, id=self._next_id)
        self.sales.append(saved)
        return saved

    def update_sale(self, record, session):
        self.calls.append(("update_sale", record))
        self._maybe_fail("update_sale")
        self.sales = [record if s.id == record.id else s for s in self.sales]
        return record

    def delete_sale(self, sale_id, session):
        self.calls.append(("delete_sale", sale_id))
        self._maybe_fail("delete_sale")
        self.sales = [s for s in self.sales if s.id != sale_id]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


# ---------- Fake HTTP for SalesGateway ----------
class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        if text is not None:
            self.content = text.encode("utf-8")
        elif body is None:
            self.content = b""
        else:
            self.content = json.dumps(body).encode("utf-8")
        self.text = self.content.decode("utf-8")

    def json(self):
        return json.loads(self.text)


class FakeHttp:
    def __init__(self):
        self.requests: list[dict] = []
        self.responses: list[Any] = []

    def queue(self, response) -> None:
        self.responses.append(response)

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.requests.append({"method": method, "url": url, "headers": headers, "json": json, "timeout": timeout})
        nxt = self.responses.pop(0) if self.responses else FakeResponse(200, [])
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


# ---------- Fixtures ----------
@pytest.fixture
def session() -> BranchSession:
    return BranchSession(credential="tok-123", branch_id="7")


@pytest.fixture
def no_branch_session() -> BranchSession:
    return BranchSession(credential="tok-123", branch_id=None)


@pytest.fixture
def inventory():
    return [make_item("Diesel", 1500, 1), make_item("Petrol", 1650, 2)]


@pytest.fixture
def gateway(inventory) -> FakeGateway:
    return FakeGateway(inventory=inventory, sales=[make_sale(1, "Diesel"), make_sale(2, "Petrol")])


@pytest.fixture
def store(gateway) -> BranchScopedDataStore:
    return BranchScopedDataStore(gateway)


@pytest.fixture
def service(gateway, store) -> SaleRecordService:
    return SaleRecordService(gateway, store)


@pytest.fixture
def workflow(service, store, session) -> SaleEntryWorkflow:
    wf = SaleEntryWorkflow(service, store)
    wf.load(session)
    return wf


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path, api_base_url="http://api.test/api")


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()
