"""Streamlit dashboard for mortgage market data.

Run with: streamlit run mortgage_market_dashboard/ui/dashboard.py
"""

import asyncio

import streamlit as st
import plotly.graph_objects as go

from mortgage_market_dashboard.config import FRED_SERIES, SeriesDefinition, Settings
from mortgage_market_dashboard.data.fred_fetcher import FredFetcher
from mortgage_market_dashboard.data.poller import OVERVIEW_LIMITS, trim_results
from mortgage_market_dashboard.indicators.calculator import calculate_change, format_chart_data
from mortgage_market_dashboard.indicators.insights import Insight, market_insights
from mortgage_market_dashboard.models import SeriesResult


SETTINGS = Settings()

SERIES_COLORS = {
    "mortgage_rate": "#3b82f6",
    "home_price_index": "#10b981",
    "unemployment_rate": "#f59e0b",
    "delinquency_rate": "#ef4444",
}

CHART_LIMITS: dict[str, int] = {
    key: definition.chart_limit for key, definition in FRED_SERIES.items()
}


def format_value(definition: SeriesDefinition, value: float) -> str:
    if definition.units == "%":
        return f"{value:.2f}%"
    return f"{value:,.1f}"


def change_color(change: float) -> str:
    if change > 0:
        return "#10b981"
    if change < 0:
        return "#ef4444"
    return "#6b7280"


async def _fetch(limits: dict[str, int]) -> dict[str, SeriesResult]:
    async with FredFetcher(SETTINGS) as fetcher:
        return await fetcher.fetch_all(limits)


# Expires just before the next timed rerun of the market data fragment
@st.cache_data(ttl=SETTINGS.refresh_interval * 0.9, show_spinner=False)
def load_results(limits: dict[str, int]) -> dict[str, SeriesResult]:
    """Fetch series, cached for one refresh interval."""
    return asyncio.run(_fetch(limits))


def render_source_badge(result: SeriesResult) -> str:
    if result.is_synthetic:
        return '<span style="color: #f59e0b; font-size: 0.65rem; border: 1px solid #f59e0b; border-radius: 4px; padding: 0 0.3rem;">SYNTHETIC</span>'
    return '<span style="color: #10b981; font-size: 0.65rem; border: 1px solid #10b981; border-radius: 4px; padding: 0 0.3rem;">LIVE</span>'


def render_metric_card(definition: SeriesDefinition, result: SeriesResult) -> None:
    """Render current value, change and source for one series."""
    if not result.points:
        return

    summary = calculate_change(result.points)
    sign = "+" if summary.change > 0 else ""

    st.markdown(
        f"""<div style="background: #1e293b; border: 1px solid #334155; border-left: 4px solid {SERIES_COLORS[definition.key]}; border-radius: 8px; padding: 1rem 1.25rem;">
            <div style="display: flex; justify-content: space-between; align-items: center;">
                <span style="color: #94a3b8; font-size: 0.75rem; text-transform: uppercase; letter-spacing: 0.05em;">{definition.title}</span>
                {render_source_badge(result)}
            </div>
            <div style="display: flex; align-items: baseline; gap: 0.75rem; margin-top: 0.5rem;">
                <span style="font-size: 1.75rem; font-weight: 700; color: #f1f5f9; font-family: 'SF Mono', 'Consolas', monospace;">{format_value(definition, summary.current)}</span>
                <span style="color: {change_color(summary.change)}; font-size: 0.85rem; font-weight: 600;">{sign}{summary.change_percent:.2f}%</span>
            </div>
        </div>""",
        unsafe_allow_html=True,
    )


def render_series_chart(definition: SeriesDefinition, result: SeriesResult) -> None:
    """Render one series as a line chart."""
    if not result.points:
        st.info(f"No data for {definition.title}")
        return

    rows = format_chart_data(result.points, "value")
    color = SERIES_COLORS[definition.key]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[row["date"] for row in rows], y=[row["value"] for row in rows],
        customdata=[row["formattedDate"] for row in rows],
        mode="lines", line=dict(color=color, width=2),
        name=definition.title,
        hovertemplate="%{customdata}: %{y:.2f}<extra></extra>",
    ))
    fig.update_layout(
        height=260, margin=dict(l=0, r=10, t=30, b=0),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        showlegend=False,
        title=dict(text=f"{definition.title} ({definition.series_id})", font=dict(size=12, color="#94a3b8"), x=0),
        xaxis=dict(showgrid=True, gridcolor="#1e293b", tickfont=dict(color="#64748b", size=10), tickformat="%b %d"),
        yaxis=dict(showgrid=True, gridcolor="#1e293b", tickfont=dict(color="#64748b", size=10)),
        hovermode="x unified",
    )
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def render_insight(insight: Insight) -> None:
    color = "#ef4444" if insight.elevated else "#3b82f6"
    st.markdown(
        f"""<div style="border-left: 3px solid {color}; padding: 0.25rem 0.75rem; margin-bottom: 0.75rem;">
            <div style="display: flex; align-items: center; gap: 0.5rem;">
                <span style="color: {color}; font-size: 0.65rem; border: 1px solid {color}; border-radius: 4px; padding: 0 0.3rem;">{insight.badge}</span>
                <span style="color: #e2e8f0; font-size: 0.85rem; font-weight: 600;">{insight.title}</span>
            </div>
            <div style="color: #94a3b8; font-size: 0.8rem; margin-top: 0.25rem;">{insight.message}</div>
        </div>""",
        unsafe_allow_html=True,
    )


def render_insights(insights: list[Insight]) -> None:
    """Render opportunities and risks side by side."""
    col_opps, col_risks = st.columns(2)
    with col_opps:
        st.markdown("#### Market Opportunities")
        for insight in insights:
            if insight.category == "opportunity":
                render_insight(insight)
    with col_risks:
        st.markdown("#### Risk Indicators")
        for insight in insights:
            if insight.category == "risk":
                render_insight(insight)


def render_data_sources() -> None:
    rows = "".join(
        f"<li>{definition.title} ({definition.series_id}), {definition.cadence}</li>"
        for definition in FRED_SERIES.values()
    )
    st.markdown(
        f"""<div style="color: #64748b; font-size: 0.75rem; border-top: 1px solid #334155; padding-top: 0.5rem;">
            Data Sources: Federal Reserve Economic Data (FRED), api.stlouisfed.org/fred
            <ul style="margin: 0.25rem 0 0 1rem;">{rows}</ul>
        </div>""",
        unsafe_allow_html=True,
    )


@st.fragment(run_every=SETTINGS.refresh_interval)
def render_market_data() -> None:
    """Cards, insights and charts; reruns on its own every refresh interval."""
    with st.spinner("Loading..."):
        charts = load_results(CHART_LIMITS)
    overview = trim_results(charts, OVERVIEW_LIMITS)

    cols = st.columns(len(FRED_SERIES))
    for col, (key, definition) in zip(cols, FRED_SERIES.items()):
        with col:
            render_metric_card(definition, overview[key])

    if any(result.is_synthetic for result in charts.values()):
        st.caption("Some series are unavailable from FRED and show synthetic data.")

    render_insights(market_insights({key: result.points for key, result in overview.items()}))

    keys = list(FRED_SERIES)
    for left, right in zip(keys[::2], keys[1::2]):
        col_left, col_right = st.columns(2)
        with col_left:
            render_series_chart(FRED_SERIES[left], charts[left])
        with col_right:
            render_series_chart(FRED_SERIES[right], charts[right])

    fetched_at = next(iter(charts.values())).fetched_at
    st.caption(f"Last refresh: {fetched_at:%Y-%m-%d %H:%M:%S}. Auto-refresh every {SETTINGS.refresh_interval / 60:.0f} minutes.")


def main() -> None:
    """Main dashboard entry point."""
    st.set_page_config(
        page_title="Mortgage Market Data",
        page_icon="",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    st.markdown(
        """
        <style>
            .stApp { background-color: #0f172a; }
            .stMarkdown, .stText, p, span, label { color: #e2e8f0; }
            h1, h2, h3, h4 { color: #f1f5f9 !important; font-weight: 600 !important; }
            #MainMenu, footer, header { visibility: hidden; }
        </style>
        """,
        unsafe_allow_html=True,
    )

    col_title, col_refresh = st.columns([5, 1])
    with col_title:
        st.markdown(
            """<div style="padding: 0.5rem 0 1rem 0;">
                <h1 style="margin: 0; font-size: 1.5rem; color: #f1f5f9;">Real-Time Market Data</h1>
                <div style="color: #64748b; font-size: 0.75rem; margin-top: 0.25rem;">Economic indicators affecting mortgage investments. Data: FRED</div>
            </div>""",
            unsafe_allow_html=True,
        )
    with col_refresh:
        if st.button("Refresh"):
            load_results.clear()

    render_market_data()
    render_data_sources()


if __name__ == "__main__":
    main()
