"""
Chart Components for Dashboard

This module provides Plotly-based chart components for visualizing
component fault probabilities and the alarms and warnings raised at
fault-pattern peaks.

Inputs are the JSON payloads returned by the API (lists of dicts with
"date" and "probability" / "value" keys), so the charts can be built
without touching the data files.
"""

import plotly.graph_objects as go
from typing import List, Dict, Any, Optional


# =========================================
# Color Schemes
# =========================================

COLORS = {
    "series": "rgb(30, 55, 153)",     # Dark blue
    "alarm": "rgb(255, 0, 0)",        # Red
    "warning": "rgb(255, 204, 0)",    # Amber
    "primary": "#3B82F6",             # Blue
    "secondary": "#6B7280",           # Gray
    "background": "#1F2937",          # Dark gray
    "text": "#F9FAFB",                # Light text
    "grid": "#374151",                # Grid lines
}

LEADER_LINE_COLORS = {
    "alarm": "rgba(255, 0, 0, 0.7)",
    "warning": "rgba(255, 204, 0, 0.7)",
}

# Leader lines start just above the axis so they stay inside the plot area
LEADER_LINE_BASE = 0.001

TICK_FORMATS = {
    "day": "%b %d, %Y",
    "week": "%b %d, %Y",
    "month": "%b %Y",
    "quarter": "%b %Y",
    "year": "%Y",
}


# =========================================
# Chart Layout Defaults
# =========================================

def get_default_layout(title: str = "", height: int = 400) -> dict:
    """Get default chart layout settings."""
    return {
        "title": {
            "text": title,
            "font": {"size": 16, "color": COLORS["text"]},
            "x": 0.5,
            "xanchor": "center"
        },
        "paper_bgcolor": "rgba(0,0,0,0)",
        "plot_bgcolor": "rgba(0,0,0,0)",
        "height": height,
        "margin": {"l": 60, "r": 40, "t": 60, "b": 60},
        "font": {"color": COLORS["text"], "size": 12},
        "xaxis": {
            "gridcolor": COLORS["grid"],
            "showgrid": True,
            "zeroline": False,
        },
        "yaxis": {
            "gridcolor": COLORS["grid"],
            "showgrid": True,
            "zeroline": False,
        },
        "legend": {
            "bgcolor": "rgba(0,0,0,0.5)",
            "bordercolor": COLORS["grid"],
            "font": {"color": COLORS["text"]}
        },
        "hovermode": "x unified",
    }


def _empty_figure(title: str, height: int, message: str = "No data available") -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper", yref="paper",
        x=0.5, y=0.5,
        showarrow=False,
        font={"size": 16, "color": COLORS["secondary"]}
    )
    fig.update_layout(**get_default_layout(title, height))
    return fig


def chart_title(component: str, turbine_id: Optional[int] = None) -> str:
    """Title shown above the fault-probability chart."""
    name = component[:1].upper() + component[1:]
    title = f"Fault Probability Index - {name}"
    if turbine_id is not None:
        title += f" (Turbine #{turbine_id})"
    return title


# =========================================
# Fault Probability Chart
# =========================================

def create_fault_probability_chart(
    points: List[Dict[str, Any]],
    alarms: Optional[List[Dict[str, Any]]] = None,
    warnings: Optional[List[Dict[str, Any]]] = None,
    component: str = "",
    turbine_id: Optional[int] = None,
    granularity: str = "month",
    height: int = 450
) -> go.Figure:
    """
    Create the fault-probability line chart with event markers.

    Alarms and warnings are drawn as triangles at their event value,
    each with a vertical leader line from the axis to the marker.

    Args:
        points: Aggregated series points ({"date", "probability"})
        alarms: Alarm events ({"date", "value", ...})
        warnings: Warning events ({"date", "value", ...})
        component: Component name for the title
        turbine_id: Turbine id for the title
        granularity: Aggregation granularity; selects the tick format
        height: Chart height in pixels

    Returns:
        Plotly Figure object
    """
    title = chart_title(component, turbine_id) if component else "Fault Probability Index"
    alarms = alarms or []
    warnings = warnings or []

    if not points and not alarms and not warnings:
        return _empty_figure(title, height, "No data for this selection")

    fig = go.Figure()

    if points:
        fig.add_trace(go.Scatter(
            x=[p["date"] for p in points],
            y=[p["probability"] for p in points],
            mode="lines+markers",
            name="Fault Probability Index",
            line={"color": COLORS["series"], "width": 2, "shape": "spline", "smoothing": 0.3},
            marker={"size": 3},
            hovertemplate="<b>%{y:.4f}</b><br>%{x}<extra></extra>"
        ))

    for kind, events, label in (("alarm", alarms, "Alarms"), ("warning", warnings, "Warnings")):
        if not events:
            continue

        for event in events:
            fig.add_shape(
                type="line",
                x0=event["date"], x1=event["date"],
                y0=LEADER_LINE_BASE, y1=event["value"],
                line={"color": LEADER_LINE_COLORS[kind], "width": 3},
                layer="below",
            )

        fig.add_trace(go.Scatter(
            x=[e["date"] for e in events],
            y=[e["value"] for e in events],
            mode="markers",
            name=label,
            marker={
                "symbol": "triangle-up",
                "size": 12,
                "color": COLORS[kind],
                "line": {"color": COLORS[kind], "width": 1},
            },
            hovertemplate=f"<b>{label[:-1]}</b>: %{{y:.4f}}<br>%{{x}}<extra></extra>"
        ))

    layout = get_default_layout(title, height)
    layout["yaxis"]["range"] = [0, 1]
    layout["yaxis"]["title"] = "Fault Probability"
    layout["xaxis"]["title"] = "Date"
    layout["xaxis"]["type"] = "date"
    layout["xaxis"]["tickformat"] = TICK_FORMATS.get(granularity, "%b %Y")
    layout["legend"]["orientation"] = "h"
    layout["legend"]["yanchor"] = "bottom"
    layout["legend"]["y"] = 1.02
    layout["legend"]["xanchor"] = "center"
    layout["legend"]["x"] = 0.5

    fig.update_layout(**layout)

    return fig


# =========================================
# Event Count Chart (Bar)
# =========================================

def create_event_count_chart(
    events: List[Dict[str, Any]],
    title: str = "Events by Component",
    height: int = 320
) -> go.Figure:
    """
    Create a stacked bar chart of alarms and warnings per component.

    Args:
        events: Event dicts with 'component' and 'kind'
        title: Chart title
        height: Chart height in pixels

    Returns:
        Plotly Figure object
    """
    if not events:
        return _empty_figure(title, height)

    counts: Dict[str, Dict[str, int]] = {}
    for event in events:
        per_kind = counts.setdefault(event["component"], {"alarm": 0, "warning": 0})
        if event["kind"] in per_kind:
            per_kind[event["kind"]] += 1

    components = sorted(counts)

    fig = go.Figure()
    for kind, label in (("alarm", "Alarms"), ("warning", "Warnings")):
        fig.add_trace(go.Bar(
            x=components,
            y=[counts[c][kind] for c in components],
            name=label,
            marker_color=COLORS[kind],
            hovertemplate=f"<b>%{{x}}</b><br>{label}: %{{y}}<extra></extra>"
        ))

    layout = get_default_layout(title, height)
    layout["barmode"] = "stack"
    layout["yaxis"]["title"] = "Events"
    layout["hovermode"] = "closest"

    fig.update_layout(**layout)

    return fig
