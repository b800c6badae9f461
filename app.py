"""
Storefront Analytics Dashboard
Stores, sync status and revenue metrics across connected storefronts.
"""

import logging

import streamlit as st

from analytics import AnalyticsFetcher, SuccessStatusLoader
from api_client import ApiError, AuthenticationError, DashboardApiClient
from config import AppConfig, configure_logging
from date_range import DATE_PRESETS, DateRangeSelector, preset_range
from formatting import format_currency, status_badge, tier_badge
from models import BenchmarkPeriod, ComparisonPeriod, DateRange, StoreUpdate, parse_tags, serialize_tags
from store_registry import StoreRegistry
from views import metric_cards, sales_frame, stores_frame, top_products_rows


logger = logging.getLogger(__name__)

# Palette
PRIMARY = "#4f46e5"
PRIMARY_SOFT = "#e0e7ff"
POSITIVE = "#16a34a"
NEGATIVE = "#dc2626"
MUTED = "#6b7280"

TONE_COLORS = {"positive": POSITIVE, "negative": NEGATIVE, "neutral": MUTED}

COMPARISON_LABELS = {
    ComparisonPeriod.NONE: "No comparison",
    ComparisonPeriod.PREVIOUS_PERIOD: "Previous period",
    ComparisonPeriod.REF_1: "Reference period 1",
    ComparisonPeriod.REF_2: "Reference period 2",
    ComparisonPeriod.REF_3: "Reference period 3",
}

BENCHMARK_LABELS = {
    BenchmarkPeriod.REF: "Current vs previous",
    BenchmarkPeriod.REF_1: "1 period back",
    BenchmarkPeriod.REF_2: "2 periods back",
    BenchmarkPeriod.REF_3: "3 periods back",
}


st.set_page_config(
    page_title="Storefront Analytics",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown(f"""
<style>
    .main-header {{
        background: {PRIMARY};
        padding: 15px 20px;
        border-radius: 12px;
        margin-bottom: 15px;
        text-align: center;
    }}
    .main-header h1 {{
        color: #ffffff;
        margin: 0;
        font-size: 1.6em;
    }}
    .main-header p {{
        color: {PRIMARY_SOFT};
        margin: 5px 0 0 0;
        font-size: 0.9em;
    }}
    .metric-card {{
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        padding: 16px;
    }}
    .metric-card .title {{
        color: {MUTED};
        font-size: 0.85em;
    }}
    .metric-card .value {{
        font-size: 1.6em;
        font-weight: bold;
    }}
</style>
""", unsafe_allow_html=True)


def get_services() -> dict:
    """Build the per-session services once and keep them in session state."""
    if "services" not in st.session_state:
        config = AppConfig.from_env()
        configure_logging(config.log_level)

        client = DashboardApiClient.from_config(config)
        registry = StoreRegistry(client)
        selector = DateRangeSelector()

        st.session_state["services"] = {
            "config": config,
            "client": client,
            "registry": registry,
            "selector": selector,
            "quick_view": AnalyticsFetcher(client, registry, selector, include_comparison=True),
            "analytics": AnalyticsFetcher(client, registry, selector, include_comparison=False),
            "success": SuccessStatusLoader(
                client, registry, selector, config.fixed_thresholds, config.percentage_thresholds
            ),
        }
    return st.session_state["services"]


def render_login(services: dict) -> None:
    st.markdown("""
    <div class="main-header">
        <h1>Sign in</h1>
        <p>Access your storefront analytics</p>
    </div>
    """, unsafe_allow_html=True)

    with st.form("login"):
        email = st.text_input("Email", placeholder="name@company.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")

    if submitted:
        try:
            result = services["client"].login(email, password)
        except AuthenticationError:
            st.error("Invalid email or password")
            return

        st.session_state["user"] = result.user
        services["registry"].refresh()
        st.rerun()


def render_metric_card(card) -> None:
    change = ""
    if card.change_label:
        color = TONE_COLORS[card.tone]
        change = f'<div style="color:{color}; font-size:0.85em;">{card.change_label} vs comparison</div>'

    st.markdown(f"""
        <div class="metric-card">
            <div class="title">{card.title}</div>
            <div class="value">{card.value}</div>
            {change}
        </div>
    """, unsafe_allow_html=True)


def render_metric_grid(cards) -> None:
    for col, card in zip(st.columns(len(cards)), cards):
        with col:
            render_metric_card(card)


def render_sidebar(services: dict) -> None:
    registry = services["registry"]
    selector = services["selector"]

    with st.sidebar:
        user = st.session_state.get("user")
        if user:
            st.caption(f"Signed in as {user.name or user.email}")

        st.markdown("## Filters")

        if registry.stores:
            ids = [s.id for s in registry.stores]
            names = {s.id: s.name for s in registry.stores}
            selected = registry.selected_store
            chosen = st.selectbox(
                "Store",
                ids,
                index=ids.index(selected.id) if selected else 0,
                format_func=lambda store_id: names[store_id],
            )
            if selected is None or chosen != selected.id:
                registry.select(chosen)
        else:
            st.info("No stores connected yet.")

        preset = st.selectbox("Date Range", DATE_PRESETS, index=0)
        if preset != "Custom":
            default = preset_range(preset)
        else:
            default = selector.date_range

        date_start = st.date_input("From", value=default.start, key=f"from_{preset}")
        date_end = st.date_input("To", value=default.end, key=f"to_{preset}")
        selector.set_date_range(DateRange(start=date_start, end=date_end))
        if date_start > date_end:
            st.warning("Start date is after end date.")

        periods = list(ComparisonPeriod)
        comparison = st.selectbox(
            "Compare with",
            periods,
            index=periods.index(selector.comparison_period),
            format_func=lambda p: COMPARISON_LABELS[p],
        )
        selector.set_comparison_period(comparison)

        benchmarks = list(BenchmarkPeriod)
        benchmark = st.selectbox(
            "Success benchmark",
            benchmarks,
            index=benchmarks.index(selector.benchmark_period),
            format_func=lambda p: BENCHMARK_LABELS[p],
        )
        selector.set_benchmark_period(benchmark)

        st.markdown("---")
        if st.button("Refresh Data", type="primary", use_container_width=True):
            registry.refresh()
            services["quick_view"].refresh()
            services["analytics"].refresh()
            if services["config"].has_success_thresholds:
                services["success"].refresh()

        if st.button("Sign out", use_container_width=True):
            logger.info("Signing out %s", user.email if user else "unknown user")
            services["client"].logout()
            st.session_state.clear()
            st.rerun()


def render_overview(services: dict) -> None:
    registry = services["registry"]
    if registry.is_loading:
        st.info("Loading stores...")
        return
    if registry.last_error:
        st.error(registry.last_error)

    counts = registry.status_counts()
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Stores", counts["total"])
    col2.metric("Active Synced Stores", counts["active"])
    col3.metric("Syncing Now", counts["syncing"])
    col4.metric("Failed Syncs", counts["failed"])

    st.caption("Pick a store in the sidebar or open the Analytics tab for a single store's metrics.")


def render_success_banner(services: dict) -> None:
    if not services["config"].has_success_thresholds:
        return

    status = services["success"].sync()
    if status is None:
        return

    metrics = status.metrics
    with st.container(border=True):
        st.markdown(f"### 🎯 Success case: {status.store_name}")
        st.caption(
            f"{status.reference_period.start} to {status.reference_period.end} "
            f"({status.duration_in_days} days) vs "
            f"{status.previous_period.start} to {status.previous_period.end}"
        )
        col1, col2, col3 = st.columns(3)
        col1.markdown(f"**Fixed:** {tier_badge(metrics.fixed_level)}")
        col2.markdown(f"**Growth:** {tier_badge(metrics.percentage_level)}")
        growth = ""
        if metrics.percentage_increase is not None:
            sign = "+" if metrics.percentage_increase > 0 else ""
            growth = f" ({sign}{metrics.percentage_increase:.1f}%)"
        col3.markdown(f"**Increase:** {format_currency(metrics.fixed_increase, decimals=2)}{growth}")
        st.caption(
            f"Reference revenue {format_currency(status.reference_revenue, decimals=2)} · "
            f"previous {format_currency(status.previous_revenue, decimals=2)}"
        )


def render_quick_view(services: dict) -> None:
    registry = services["registry"]
    fetcher = services["quick_view"]

    selected = registry.selected_store
    if selected is None:
        st.info("Select a store to see its metrics.")
        return

    with st.spinner("Loading analytics..."):
        fetcher.sync()

    if fetcher.error:
        st.error(fetcher.error)
    render_metric_grid(metric_cards(fetcher.snapshot, with_comparison=True))

    render_success_banner(services)

    st.markdown("### Stores")
    for store in registry.stores:
        col_name, col_status, col_tags, col_action = st.columns([3, 2, 3, 1])
        marker = "▶ " if store.id == selected.id else ""
        col_name.markdown(f"{marker}**{store.name}**  \n{store.url}")
        col_status.markdown(status_badge(store.sync_status))
        col_tags.markdown(" ".join(f"`{tag}`" for tag in store.tags) or "-")
        if col_action.button("View", key=f"view_{store.id}", disabled=store.id == selected.id):
            registry.select(store.id)
            st.rerun()
    if not registry.stores:
        st.caption("No stores found.")


def render_analytics(services: dict) -> None:
    registry = services["registry"]
    fetcher = services["analytics"]

    if registry.is_loading:
        st.info("Loading stores...")
        return
    if registry.selected_store is None:
        st.info("Select a store to see its analytics.")
        return

    with st.spinner("Loading analytics..."):
        fetcher.sync()

    if fetcher.error:
        st.error(fetcher.error)
        return

    render_metric_grid(metric_cards(fetcher.snapshot, with_comparison=False))

    col_chart, col_products = st.columns([2, 1])
    with col_chart:
        st.markdown("### Sales over time")
        df = sales_frame(fetcher.snapshot)
        if df.empty:
            st.caption("No sales in this period.")
        else:
            st.area_chart(df, y="value")

    with col_products:
        st.markdown("### Top products")
        rows = top_products_rows(fetcher.snapshot)
        if not rows:
            st.caption("No product data available.")
        for row in rows:
            st.markdown(f"`{row['badge']}` {row['title']} · **{row['sales']}**")


def render_edit_form(registry: StoreRegistry, store) -> None:
    with st.form(f"edit_{store.id}"):
        name = st.text_input("Name", value=store.name)
        access_token = st.text_input(
            "Access token", type="password", placeholder="Leave blank to keep current"
        )
        tags = st.text_input("Tags", value=serialize_tags(store.tags), placeholder="Car accessories, Pet food")
        if st.form_submit_button("Save Changes"):
            update = StoreUpdate(name=name, tags=parse_tags(tags), access_token=access_token or None)
            try:
                registry.update(store.id, update)
            except ApiError as e:
                st.error(f"Failed to update store: {e}")
                return
            st.rerun()


def render_stores(services: dict) -> None:
    registry = services["registry"]
    if registry.is_loading:
        st.info("Loading stores...")
        return
    if registry.last_error:
        st.error(registry.last_error)
    if not registry.stores:
        st.caption("No stores connected yet.")
        return

    df = stores_frame(registry.stores).drop(columns=["id"])
    st.dataframe(df, use_container_width=True, hide_index=True)

    pending_delete = st.session_state.get("pending_delete")

    for store in registry.stores:
        with st.expander(f"{store.name}"):
            st.markdown(status_badge(store.sync_status))
            col_retry, col_delete = st.columns(2)

            if col_retry.button("🔄 Retry Sync", key=f"retry_{store.id}"):
                try:
                    registry.retry_sync(store.id)
                except ApiError as e:
                    st.error(f"Failed to retry sync: {e}")
                else:
                    st.rerun()

            if pending_delete == store.id:
                col_delete.warning("Are you sure you want to delete this store?")
                if col_delete.button("Yes, delete", key=f"confirm_{store.id}", type="primary"):
                    st.session_state.pop("pending_delete", None)
                    try:
                        registry.delete(store.id)
                    except ApiError as e:
                        st.error(f"Failed to delete store: {e}")
                    else:
                        st.rerun()
                if col_delete.button("Cancel", key=f"cancel_{store.id}"):
                    st.session_state.pop("pending_delete", None)
                    st.rerun()
            elif col_delete.button("🗑️ Delete Store", key=f"delete_{store.id}"):
                st.session_state["pending_delete"] = store.id
                st.rerun()

            render_edit_form(registry, store)


def main():
    services = get_services()

    if "user" not in st.session_state:
        render_login(services)
        return

    render_sidebar(services)

    st.markdown("""
    <div class="main-header">
        <h1>Storefront Analytics</h1>
        <p>Revenue and sync status across your connected stores</p>
    </div>
    """, unsafe_allow_html=True)

    selector = services["selector"]
    st.caption(
        f"📅 {selector.date_range.start.strftime('%d/%m/%Y')} - "
        f"{selector.date_range.end.strftime('%d/%m/%Y')}"
    )

    tab_overview, tab_quick, tab_analytics, tab_stores = st.tabs(
        ["Overview", "Quick View", "Analytics", "Stores"]
    )

    with tab_overview:
        render_overview(services)
    with tab_quick:
        render_quick_view(services)
    with tab_analytics:
        render_analytics(services)
    with tab_stores:
        render_stores(services)


if __name__ == "__main__":
    main()
