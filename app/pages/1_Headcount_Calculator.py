from __future__ import annotations

import pandas as pd
import streamlit as st

from erlangfte import (
    StaffingError,
    StaffingRequest,
    breakdown_to_dict,
    evaluate_staffing,
    load_settings_from_env,
)


# -----------------------------
# Page config
# -----------------------------
st.set_page_config(page_title="Headcount Calculator", layout="wide")
st.title("Headcount Calculator")
st.caption("Minimum agents meeting the service level target, then occupancy cap and shrinkage.")


# -----------------------------
# Sidebar controls
# -----------------------------
with st.sidebar:
    st.header("Load")
    volume = st.number_input("Volume (arrivals per interval)", min_value=0.0, value=100.0, step=10.0)
    interval_length = st.selectbox("Interval length (seconds)", [300, 600, 900, 1800, 3600], index=2)
    aht = st.number_input("AHT (seconds)", min_value=1, value=300, step=10)

    st.divider()
    st.header("Target")
    target_service_level = st.slider("Service Level target", 0.50, 0.99, 0.80, 0.01)
    target_time = st.number_input("Target answer time (seconds)", min_value=0, value=60, step=5)

    st.divider()
    st.header("Adjustments")
    use_occ = st.checkbox("Apply occupancy cap", value=True)
    max_occupancy = st.slider("Max occupancy", 0.50, 1.00, 0.80, 0.01) if use_occ else 0.0
    shrinkage = st.slider("Shrinkage", 0.0, 0.60, 0.20, 0.01)


request = StaffingRequest(
    id="calculator",
    index=0,
    volume=float(volume),
    interval_length=int(interval_length),
    aht=int(aht),
    target_service_level=float(target_service_level),
    target_time=int(target_time),
    max_occupancy=float(max_occupancy),
    shrinkage=float(shrinkage),
)

try:
    breakdown = evaluate_staffing(request, settings=load_settings_from_env())
except StaffingError as e:
    st.error(f"Could not compute staffing: {e}")
    st.stop()

row = breakdown_to_dict(breakdown)

c1, c2, c3, c4 = st.columns(4)
c1.metric("Headcount", f"{row['headcount']}")
c2.metric("On-phone agents", f"{row['agents']}")
c3.metric("Service level", f"{row['service_level']:.1%}")
c4.metric("Occupancy", f"{row['occupancy']:.1%}")

st.subheader("Details")
st.dataframe(pd.DataFrame([row]), use_container_width=True)
