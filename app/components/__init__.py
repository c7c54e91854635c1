"""
Dashboard Components Module

Reusable UI components for the Streamlit dashboard.

Components:
- charts: Plotly fault-probability and event charts
- gauge: Fault-risk gauge, metric cards and status badges
- tables: pandas tables for events and fault patterns
"""

from .charts import (
    create_fault_probability_chart,
    create_event_count_chart,
)
from .gauge import (
    render_risk_gauge,
    render_metric_card,
    render_status_indicator,
)
from .tables import (
    events_to_dataframe,
    patterns_to_dataframe,
)

__all__ = [
    # Charts
    "create_fault_probability_chart",
    "create_event_count_chart",

    # Gauge
    "render_risk_gauge",
    "render_metric_card",
    "render_status_indicator",

    # Tables
    "events_to_dataframe",
    "patterns_to_dataframe",
]
