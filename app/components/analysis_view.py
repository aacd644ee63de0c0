# Streamlit renderers for the analysis presentation model.
# They only read the view objects and forward widget events to the session.

import base64
import functools
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd
import plotly.graph_objects as go
import streamlit as st
import streamlit.components.v1 as components

from radiology_ai.predictions.presentation import ErrorView, LoadingView, RadarData, ResultView, TableRow
from radiology_ai.predictions.scroll import ViewportMetrics
from radiology_ai.predictions.session import AnalysisSession
from radiology_ai.utils.exceptions import ValidationException
from radiology_ai.utils.logger import get_logger

logger = get_logger(__name__)

SCROLL_BRIDGE_DIR = Path(__file__).resolve().parent / "scroll_bridge"

# Approximate pixel geometry of the scrollable results column
ROW_HEIGHT_PX = 42
HEADER_HEIGHT_PX = 48
RADAR_HEIGHT_PX = 420
SCROLL_CONTAINER_PX = 560

SWATCH = (
    '<svg height="20" width="20" viewBox="0 0 32 32">'
    '<rect fill="{color}" height="28" rx="3" width="28" x="2" y="2" /></svg>'
)


def decode_image(encoded: str) -> bytes:
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]
    return base64.b64decode(encoded)


def results_viewport(view: ResultView, scroll_top: float = 0.0) -> ViewportMetrics:
    """Estimate the results column geometry until the browser reports it."""
    content = HEADER_HEIGHT_PX + ROW_HEIGHT_PX * (len(view.rows) + int(view.can_expand)) + RADAR_HEIGHT_PX
    return ViewportMetrics(
        scroll_top=scroll_top,
        scroll_height=content,
        client_height=SCROLL_CONTAINER_PX,
    )


def scroll_key(session: AnalysisSession) -> str:
    """Widget key of the scroll bridge; a new analysis starts a new bridge."""
    return f"scroll-{session.session_id}-{session.generation}"


@functools.lru_cache(maxsize=None)
def _scroll_bridge():
    return components.declare_component("scroll_bridge", path=str(SCROLL_BRIDGE_DIR))


def measured_viewport(view: ResultView, scroll_event: Optional[dict]) -> ViewportMetrics:
    """Metrics reported by the browser, or the layout estimate before the first report."""
    if scroll_event is None:
        return results_viewport(view)
    try:
        return ViewportMetrics.from_event(scroll_event)
    except ValidationException as e:
        logger.warning(f"Ignoring scroll event: {e}")
        return results_viewport(view)


def result_view(session: AnalysisSession, scroll_event: Optional[dict] = None):
    """
    Feed the latest scroll metrics to the session and return the view to draw.

    Non-result views (loading, error) are returned unchanged.
    """
    view = session.render()
    if not isinstance(view, ResultView):
        return view
    session.on_scroll(measured_viewport(view, scroll_event))
    return session.render()


def ranked_frame(rows: Sequence[TableRow]) -> pd.DataFrame:
    """Every ranked class as a DataFrame for CSV export."""
    return pd.DataFrame([
        {
            "rank": row.rank + 1,
            "class": row.label,
            "severity": row.tier.value,
            "mean": row.mean,
            "variance": row.variance,
            "accuracy": row.accuracy_text,
            "verified": row.verified,
        }
        for row in rows
    ])


def radar_figure(radar: RadarData) -> go.Figure:
    fig = go.Figure()
    if radar.labels:
        # Repeat the first point to close the polygon
        fig.add_trace(go.Scatterpolar(
            r=list(radar.values) + [radar.values[0]],
            theta=list(radar.labels) + [radar.labels[0]],
            fill="toself",
            fillcolor="rgba(255, 99, 132, 0.2)",
            line_color="rgb(255, 99, 132)",
            marker=dict(color="rgb(255, 99, 132)", line=dict(color="#fff", width=1)),
            name="Mean",
        ))
    fig.update_layout(
        polar=dict(radialaxis=dict(visible=True, range=[0, max(radar.values, default=1.0)])),
        showlegend=False,
        height=RADAR_HEIGHT_PX,
        margin=dict(l=40, r=40, t=30, b=30),
    )
    return fig


def render_loading_view(view: LoadingView):
    if view.source_image:
        st.image(decode_image(view.source_image), caption="Original image", use_container_width=True)
    st.progress(0, text="Loading")
    st.caption("Have patience! Analysis is in progress")


def render_error_view(view: ErrorView):
    st.error(f"❌ {view.message}")
    if view.details:
        with st.expander("Details"):
            st.code(view.details, language=None)


def render_legend(view: ResultView):
    st.markdown("**Legend**")
    for tier, color in view.legend:
        st.markdown(f"{SWATCH.format(color=color)} {tier.value}", unsafe_allow_html=True)


def _activate(session: AnalysisSession, label: str, key: str):
    session.select(label)
    # A toggle cannot be switched off; drop its widget state so it re-reads the session
    st.session_state.pop(key, None)


def render_table(session: AnalysisSession, view: ResultView):
    header = st.columns([1, 1, 3, 1, 2])
    for col, title in zip(header, ["HeatMap", "Verified", "Class", "Severity", "Accuracy"]):
        col.markdown(f"**{title}**")

    for row in view.rows:
        cols = st.columns([1, 1, 3, 1, 2])
        # The key includes the active label so every toggle re-reads the session on change
        toggle_key = f"active-{session.session_id}-{session.generation}-{session.selection.active_label}-{row.label}"
        cols[0].toggle(
            row.label,
            value=row.active,
            key=toggle_key,
            label_visibility="collapsed",
            on_change=_activate,
            args=(session, row.label, toggle_key),
        )
        cols[1].checkbox(
            row.label,
            value=row.verified,
            key=f"verified-{session.session_id}-{session.generation}-{row.label}",
            label_visibility="collapsed",
            on_change=session.toggle_verified,
            args=(row.label,),
        )
        cols[2].markdown(f"**{row.label}**" if row.active else row.label)
        cols[3].markdown(SWATCH.format(color=row.color), unsafe_allow_html=True)
        cols[4].markdown(row.accuracy_text)

    if view.can_expand:
        st.button(
            "See less" if view.expanded else "See more",
            key=f"expand-{session.session_id}",
            on_click=session.toggle_expanded,
        )


def render_result_view(session: AnalysisSession, view: ResultView):
    if view.is_empty:
        st.info("The analysis returned no findings for this image.")

    left, right = st.columns(2)

    with left:
        if view.source_image:
            st.image(decode_image(view.source_image), use_container_width=True)
            st.markdown("**Original image**")

    with right:
        if view.heatmap is not None:
            st.image(
                decode_image(view.heatmap.image),
                caption=f"Radiographie heatmap of {view.heatmap.label}",
                use_container_width=True,
            )
            st.markdown(f"Radiographie heatmap of **{view.heatmap.label}**")

        render_legend(view)

        if view.show_up_arrow:
            st.caption("▲ Scroll up for more")
        with st.container(height=SCROLL_CONTAINER_PX):
            render_table(session, view)
            st.plotly_chart(radar_figure(view.radar), use_container_width=True)
        # Must sit right after the container it measures
        _scroll_bridge()(key=scroll_key(session), default=None)
        if view.show_down_arrow:
            st.caption("▼ Scroll down for more")

    export_rows = session.export_rows()
    if export_rows:
        st.download_button(
            label="📥 Download Results (CSV)",
            data=ranked_frame(export_rows).to_csv(index=False).encode("utf-8"),
            file_name=f"analysis_{session.session_id[:8]}.csv",
            mime="text/csv",
        )


def render_session(session: AnalysisSession):
    """Dispatch on the session's presentation model."""
    # The bridge's last report is in session state before it is drawn again
    view = result_view(session, st.session_state.get(scroll_key(session)))
    if isinstance(view, ResultView):
        render_result_view(session, view)
    elif isinstance(view, ErrorView):
        render_error_view(view)
    else:
        render_loading_view(view)
