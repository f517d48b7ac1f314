from __future__ import annotations

import os
from typing import Any, Mapping, Optional

import streamlit as st

from core.schema import BranchSession

# Same keys the sign-in flow stores after a successful login.
TOKEN_KEY = "user_token"
BRANCH_KEY = "branch"

ENV_TOKEN = "FUEL_SALES_TOKEN"
ENV_BRANCH = "FUEL_SALES_BRANCH"


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s if s else None


def session_from(session_values: Mapping[str, Any], environ: Mapping[str, str]) -> BranchSession:
    token = _clean(session_values.get(TOKEN_KEY)) or _clean(environ.get(ENV_TOKEN))
    branch = _clean(session_values.get(BRANCH_KEY)) or _clean(environ.get(ENV_BRANCH))
    return BranchSession(credential=token, branch_id=branch)


def get_branch_session() -> BranchSession:
    return session_from(dict(st.session_state), os.environ)


def store_branch_session(credential: str, branch_id: str) -> None:
    st.session_state[TOKEN_KEY] = _clean(credential)
    st.session_state[BRANCH_KEY] = _clean(branch_id)


def clear_branch_session() -> None:
    for key in (TOKEN_KEY, BRANCH_KEY):
        st.session_state.pop(key, None)
