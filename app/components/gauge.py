"""
Risk Gauge and Metric Card Components

This module provides visual components for displaying single values
with context: the current fault risk of a component, summary metric
cards and status badges.
"""

import streamlit as st
from typing import Optional, Tuple


# =========================================
# Color Utilities
# =========================================

RISK_LEVELS = [
    (0.2, "Low", "#10B981", "🟢"),
    (0.4, "Elevated", "#FBBF24", "🟡"),
    (0.7, "High", "#F97316", "🟠"),
    (float("inf"), "Critical", "#EF4444", "🔴"),
]


def get_risk_level(probability: float) -> Tuple[str, str, str]:
    """
    Get label, color and emoji for a fault probability.

    Returns:
        Tuple of (label, color, emoji)
    """
    for threshold, label, color, emoji in RISK_LEVELS:
        if probability < threshold:
            return (label, color, emoji)
    return RISK_LEVELS[-1][1:]


# =========================================
# Risk Gauge Component
# =========================================

def render_risk_gauge(
    probability: float,
    title: str = "Fault Risk",
    subtitle: str = ""
) -> None:
    """
    Render a fault-risk gauge for one component.

    Args:
        probability: Fault probability (0-1)
        title: Title to display
        subtitle: Optional line under the value (e.g. the date)
    """
    label, color, emoji = get_risk_level(probability)
    percent = max(0.0, min(probability, 1.0)) * 100

    gauge_html = f"""
    <div style="
        text-align: center;
        padding: 1rem;
        background: linear-gradient(135deg, rgba(31, 41, 55, 0.8), rgba(17, 24, 39, 0.9));
        border-radius: 12px;
        border: 1px solid {color}40;
    ">
        <div style="font-size: 1rem; color: #9CA3AF; text-transform: uppercase; letter-spacing: 1px;">
            {title}
        </div>
        <div style="font-size: 3rem; font-weight: bold; color: {color};">{probability:.2f}</div>
        <div style="font-size: 1rem; color: {color};">{emoji} {label}</div>
        <div style="font-size: 0.8rem; color: #6B7280;">{subtitle}</div>
        <div style="margin-top: 0.75rem; height: 8px; background: #374151; border-radius: 4px; overflow: hidden;">
            <div style="width: {percent:.0f}%; height: 100%; background: {color}; border-radius: 4px;"></div>
        </div>
    </div>
    """

    st.markdown(gauge_html, unsafe_allow_html=True)


# =========================================
# Metric Card Component
# =========================================

def render_metric_card(
    title: str,
    value: str,
    color: str = "#3B82F6",
    help_text: Optional[str] = None
) -> None:
    """
    Render a compact card with a title and a preformatted value.

    Args:
        title: Card title
        value: Display value
        color: Value color
        help_text: Optional help tooltip text
    """
    help_html = ""
    if help_text:
        help_html = f'<span style="font-size: 0.75rem; color: #6B7280; cursor: help;" title="{help_text}">ⓘ</span>'

    card_html = f"""
    <div style="
        padding: 1rem;
        background: linear-gradient(135deg, rgba(31, 41, 55, 0.6), rgba(17, 24, 39, 0.8));
        border-radius: 10px;
        border: 1px solid #374151;
    ">
        <div style="font-size: 0.85rem; color: #9CA3AF; margin-bottom: 0.5rem;
                    display: flex; justify-content: space-between; align-items: center;">
            <span>{title}</span>
            {help_html}
        </div>
        <div style="font-size: 1.75rem; font-weight: bold; color: {color};">{value}</div>
    </div>
    """

    st.markdown(card_html, unsafe_allow_html=True)


# =========================================
# Status Indicator Component
# =========================================

def render_status_indicator(status: str, message: str = "") -> None:
    """
    Render a status badge for the data store.

    Args:
        status: One of "healthy", "empty", "unhealthy"
        message: Optional message to display
    """
    status_config = {
        "healthy": {"color": "#10B981", "emoji": "🟢", "label": "Data ready"},
        "empty": {"color": "#FBBF24", "emoji": "🟡", "label": "No data generated"},
        "unhealthy": {"color": "#EF4444", "emoji": "🔴", "label": "Data unreadable"},
        "unknown": {"color": "#6B7280", "emoji": "⚪", "label": "Unknown"},
    }

    config = status_config.get(status.lower(), status_config["unknown"])
    display_message = message if message else config["label"]

    indicator_html = f"""
    <div style="
        display: inline-flex;
        align-items: center;
        gap: 6px;
        font-size: 0.875rem;
        color: {config['color']};
        background: {config['color']}20;
        padding: 4px 10px;
        border-radius: 6px;
        border: 1px solid {config['color']}40;
    ">
        <span>{config['emoji']}</span>
        <span>{display_message}</span>
    </div>
    """

    st.markdown(indicator_html, unsafe_allow_html=True)
