from __future__ import annotations

import streamlit as st

st.set_page_config(page_title="Fuel Sales", page_icon="⛽", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_⛽_Fuel_Sales.py", title="Fuel Sales", icon="⛽"),
]

st.navigation(pages).run()
