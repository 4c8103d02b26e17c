from __future__ import annotations

import pandas as pd
import streamlit as st

from erlangfte import calculate_fte, load_settings_from_env
from erlangfte.io import read_requests_csv, read_requests_json, requests_from_frame, results_to_csv, results_to_frame
from erlangfte.validation import has_rejections, validate_requests

st.set_page_config(page_title="Batch Staffing", layout="wide")
st.title("Batch Staffing (JSON or CSV Upload)")

st.write(
    """
Upload a JSON array of request objects or a CSV with columns
`id, volume, interval_length, aht, target_service_level, target_time, max_occupancy, shrinkage`
(optional `index`). Legacy PascalCase JSON keys (`ID`, `Volume`, `IntervalLength`, ...) are accepted.
"""
)

with st.sidebar:
    st.header("Execution")
    mode = st.radio("Mode", ["concurrent", "sequential"], index=0)

uploaded = st.file_uploader("Upload requests", type=["json", "csv"])
if uploaded is None:
    st.info("No file uploaded yet.")
    st.stop()

try:
    if uploaded.name.lower().endswith(".json"):
        df = read_requests_json(uploaded)
    else:
        df = read_requests_csv(uploaded)
    flags = validate_requests(df)
except Exception as e:
    st.error(f"Could not read requests: {e}")
    st.stop()

st.subheader("Input preview (first 30 rows)")
st.dataframe(flags.head(30), use_container_width=True)

rejected = int(has_rejections(flags).sum())
if rejected:
    st.warning(f"{rejected} request(s) will be rejected; their rows carry an error instead of a headcount.")

results = calculate_fte(requests_from_frame(df), mode=mode, settings=load_settings_from_env())
out = results_to_frame(results)

st.subheader("Results")
st.dataframe(out, use_container_width=True)

c1, c2, c3 = st.columns(3)
c1.metric("Requests", f"{len(out)}")
c2.metric("Requests with errors", f"{int(out['error'].notna().sum())}")
c3.metric("Total headcount (sum)", f"{pd.to_numeric(out['headcount']).fillna(0).sum():.0f}")

st.download_button(
    label="Download results CSV",
    data=results_to_csv(results),
    file_name="staffing_results.csv",
    mime="text/csv",
)
