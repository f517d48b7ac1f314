from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional

import requests
import streamlit as st

from core.config import Settings
from core.errors import AuthError, NetworkError, ServerError
from core.logs import get_logger
from core.schema import (
    BranchSession,
    InventoryItem,
    SaleRecord,
    inventory_item_from_json,
    sale_record_from_json,
    sale_record_to_json,
)

log = get_logger("fuel_sales.gateway")


class SalesGateway:
    """
    Request/response boundary to the remote store.

    Every call carries the session's bearer credential. Transport failures
    become NetworkError, rejected credentials AuthError, and any other
    non-2xx answer ServerError.
    """

    def __init__(self, settings: Settings, http: Optional[requests.Session] = None):
        self.base_url = settings.api_base_url.rstrip("/")
        self.timeout = settings.request_timeout
        self._http = http or requests.Session()

    # -------------------------
    # Collections
    # -------------------------

    def list_sales(self, session: BranchSession) -> list[SaleRecord]:
        rows = self._request("GET", f"/fuel-sales/branch/{session.branch_id}", session)
        return [sale_record_from_json(r) for r in _as_list(rows, "sales")]

    def list_inventory(self, session: BranchSession) -> list[InventoryItem]:
        rows = self._request("GET", f"/inventory/branch/{session.branch_id}", session)
        return [inventory_item_from_json(r) for r in _as_list(rows, "inventory")]

    # -------------------------
    # Sale writes
    # -------------------------

    def create_sale(self, record: SaleRecord, session: BranchSession) -> SaleRecord:
        payload = sale_record_to_json(record)
        payload.pop("id", None)
        body = self._request("POST", "/fuel-sales", session, json=payload)
        return _echo_or_parse(body, record)

    def update_sale(self, record: SaleRecord, session: BranchSession) -> SaleRecord:
        body = self._request("PUT", f"/fuel-sales/{record.id}", session, json=sale_record_to_json(record))
        return _echo_or_parse(body, record)

    def delete_sale(self, sale_id: Any, session: BranchSession) -> None:
        self._request("DELETE", f"/fuel-sales/{sale_id}", session)

    # -------------------------
    # Transport
    # -------------------------

    def _request(self, method: str, path: str, session: BranchSession, *, json: Optional[dict] = None) -> Any:
        if not session.credential:
            raise AuthError("You are not signed in")

        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {session.credential}"}
        log.debug("%s %s", method, url)
        try:
            response = self._http.request(method, url, headers=headers, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError() from exc

        if response.status_code in (401, 403):
            log.warning("%s %s rejected credential (status=%s)", method, url, response.status_code)
            raise AuthError()

        if not 200 <= response.status_code < 300:
            message = _server_message(response)
            log.warning("%s %s status=%s detail=%s", method, url, response.status_code, message)
            raise ServerError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise ServerError("The server sent an unreadable response", status_code=response.status_code)


def _server_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


def _as_list(rows: Any, what: str) -> list:
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise ServerError(f"Expected a list of {what} from server")
    return rows


def _echo_or_parse(body: Any, sent: SaleRecord) -> SaleRecord:
    # Some deployments answer writes with a bare {"message": ...}; fall back
    # to the record we sent, stamped with any id the server returned.
    if isinstance(body, dict) and "fuel_type" in body:
        return sale_record_from_json(body)
    new_id = body.get("id", sent.id) if isinstance(body, dict) else sent.id
    return replace(sent, id=new_id)


@st.cache_resource
def get_gateway(settings: Settings) -> SalesGateway:
    return SalesGateway(settings)
