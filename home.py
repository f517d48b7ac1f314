from __future__ import annotations

import streamlit as st

from core.config import get_settings, persist_api_url
from core.session import clear_branch_session, get_branch_session, store_branch_session

st.set_page_config(page_title="Fuel Sales", page_icon="⛽", layout="wide")

st.title("⛽ Fuel Sales")
st.caption("Record, edit and review fuel sales for your branch. Prices come from the branch inventory.")

settings = get_settings()
session = get_branch_session()

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**API:** `{settings.api_base_url}`")
    st.write(f"**Branch:** `{session.branch_id or '-'}`")

st.subheader("Branch session")
st.caption("Paste the token and branch issued at sign-in.")

token = st.text_input("Bearer token", value=session.credential or "", type="password")
branch = st.text_input("Branch ID", value=session.branch_id or "")

c1, c2 = st.columns(2)
with c1:
    if st.button("Use this session", type="primary"):
        if not token.strip() or not branch.strip():
            st.error("Please fill in all fields.")
        else:
            store_branch_session(token, branch)
            st.success("Session saved. Open **Fuel Sales** from the sidebar.")
with c2:
    if st.button("Sign out"):
        clear_branch_session()
        st.rerun()

st.divider()
st.subheader("Remote store")

new_url = st.text_input("API base URL", value=settings.api_base_url)
if st.button("Save & use this API"):
    try:
        persist_api_url(new_url, settings.data_dir)
        st.success("Saved. The app will reload using the new API.")
        st.cache_resource.clear()
        st.rerun()
    except (OSError, ValueError) as e:
        st.error(str(e))
