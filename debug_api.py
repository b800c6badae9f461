"""
Debug page for checking what the analytics backend returns.
Run with: streamlit run debug_api.py
"""

from datetime import date

import pandas as pd
import streamlit as st

from api_client import ApiError, AuthenticationError, DashboardApiClient, check_connection
from config import AppConfig, configure_logging
from models import AnalyticsQuery, ComparisonPeriod, DateRange
from views import stores_frame

st.title("Analytics API Debug")

config = AppConfig.from_env()
configure_logging(config.log_level)
client = DashboardApiClient.from_config(config)

st.caption(f"Backend: {config.api_url} (timeout {config.timeout:.0f}s, retries {config.max_retries})")

col1, col2 = st.columns(2)
with col1:
    email = st.text_input("Email")
with col2:
    password = st.text_input("Password", type="password")

if email and password:
    try:
        client.login(email, password)
        st.success("Logged in")
    except AuthenticationError as e:
        st.error(f"Login failed (status {e.status_code})")
        st.stop()

if not check_connection(client):
    st.error("Could not reach the stores endpoint")
    st.stop()

stores = client.list_stores()
st.subheader(f"Stores ({len(stores)})")
st.dataframe(stores_frame(stores), use_container_width=True, hide_index=True)

if not stores:
    st.stop()

store_id = st.selectbox("Store", [s.id for s in stores])

col1, col2, col3 = st.columns(3)
with col1:
    start_date = st.date_input("Start date", date.today().replace(day=1))
with col2:
    end_date = st.date_input("End date", date.today())
with col3:
    comparison = st.selectbox("Comparison", list(ComparisonPeriod), format_func=lambda p: p.value)

if st.button("Fetch analytics"):
    query = AnalyticsQuery(store_id, DateRange(start_date, end_date), comparison)
    st.write("**Query params:**", query.to_params())
    with st.spinner("Fetching analytics..."):
        try:
            snapshot = client.get_analytics(query)
        except ApiError as e:
            st.error(f"Request failed: {e}")
            st.stop()

    st.write(
        {
            "totalRevenue": snapshot.total_revenue,
            "totalOrders": snapshot.total_orders,
            "averageOrderValue": snapshot.average_order_value,
            "totalSessions": snapshot.total_sessions,
            "conversionRate": snapshot.conversion_rate,
        }
    )
    if snapshot.comparison:
        st.subheader("Comparison")
        st.write(snapshot.comparison)

    if snapshot.sales_over_time:
        st.subheader("Sales over time")
        st.dataframe(
            pd.DataFrame([{"name": p.name, "value": p.value} for p in snapshot.sales_over_time]),
            use_container_width=True,
            hide_index=True,
        )
