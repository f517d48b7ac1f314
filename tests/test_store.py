from __future__ import annotations

import pytest

from conftest import FakeGateway, make_item, make_sale

from core.errors import AuthError, NetworkError
from core.schema import BranchSession
from core.services.store import BranchScopedDataStore


def test_refresh_is_noop_without_branch(store, gateway, no_branch_session) -> None:
    assert store.refresh_sales(no_branch_session) == ()
    assert store.refresh_inventory(no_branch_session) == ()
    store.ensure_loaded(no_branch_session)
    assert gateway.calls == []
    assert not store.is_ready(no_branch_session)


def test_refresh_fetches_for_session_branch(store, gateway, session) -> None:
    sales = store.refresh_sales(session)
    items = store.refresh_inventory(session)

    assert gateway.calls == [("list_sales", "7"), ("list_inventory", "7")]
    assert [s.id for s in sales] == [1, 2]
    assert [i.fuel_type for i in items] == ["Diesel", "Petrol"]
    assert store.sales is sales
    assert store.inventory is items


def test_refresh_replaces_cache_wholesale(store, gateway, session) -> None:
    first = store.refresh_sales(session)
    gateway.sales = [make_sale(9, "Diesel")]

    second = store.refresh_sales(session)

    assert first is not second
    assert [s.id for s in first] == [1, 2]
    assert [s.id for s in store.sales] == [9]


@pytest.mark.parametrize("error", [NetworkError(), AuthError()])
def test_failed_refresh_keeps_previous_cache(store, gateway, session, error) -> None:
    store.refresh_inventory(session)
    before = store.inventory
    gateway.inventory = [make_item("Kerosene", 900)]
    gateway.fail["list_inventory"] = error

    with pytest.raises(type(error)):
        store.refresh_inventory(session)

    assert store.inventory is before


def test_failed_sales_refresh_keeps_previous_sales(store, gateway, session) -> None:
    store.refresh_sales(session)
    before = store.sales
    gateway.fail["list_sales"] = NetworkError()

    with pytest.raises(NetworkError):
        store.refresh_sales(session)

    assert store.sales is before


def test_ensure_loaded_runs_once_per_branch(store, gateway, session) -> None:
    store.ensure_loaded(session)
    store.ensure_loaded(session)

    assert gateway.call_names() == ["list_sales", "list_inventory"]
    assert store.is_ready(session)


def test_ensure_loaded_tries_both_and_reraises(store, gateway, session) -> None:
    gateway.fail["list_sales"] = NetworkError()

    with pytest.raises(NetworkError):
        store.ensure_loaded(session)

    assert gateway.call_names() == ["list_sales", "list_inventory"]
    assert len(store.inventory) == 2
    assert not store.is_ready(session)

    del gateway.fail["list_sales"]
    store.ensure_loaded(session)
    assert gateway.call_names()[-1] == "list_sales"
    assert store.is_ready(session)


def test_branch_change_resets_readiness(store, gateway, session) -> None:
    store.ensure_loaded(session)
    other = BranchSession(credential="tok-123", branch_id="8")

    assert not store.is_ready(other)
    store.ensure_loaded(other)

    assert gateway.calls[-2:] == [("list_sales", "8"), ("list_inventory", "8")]
    assert store.is_ready(other)
    assert not store.is_ready(session)


def test_last_completed_refresh_wins() -> None:
    gw = FakeGateway(sales=[make_sale(1, "Diesel")])
    store = BranchScopedDataStore(gw)
    s = BranchSession(credential="t", branch_id="7")

    store.refresh_sales(s)
    gw.sales = []  # an older snapshot arriving late
    store.refresh_sales(s)

    assert store.sales == ()
