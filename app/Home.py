import streamlit as st

st.set_page_config(page_title="Erlang C FTE Engine", layout="wide")

st.title("Erlang C FTE Engine")
st.write(
    """
This app computes **required headcount per request** with an exact-arithmetic Erlang C engine.

Included:
- Headcount Calculator (single request, with achieved service level / ASA / occupancy)
- Batch Staffing (JSON or CSV upload, validation flags, results download)
- Occupancy cap (max occupancy, 0 = no cap)
- Shrinkage conversion (on-phone → headcount)
"""
)

st.info("Use the left sidebar to navigate to the calculator or the batch page.")
