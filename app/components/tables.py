"""
Table Components for Dashboard

pandas frames built from API payloads for st.dataframe.
"""

import pandas as pd
from typing import List, Dict, Any

EVENT_COLUMNS = ["Date", "Turbine", "Component", "Kind", "Probability"]
PATTERN_COLUMNS = ["Pattern", "Severity", "Every (days)", "Lasts (days)", "Magnitude", "Raises"]


def events_to_dataframe(events: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Build the event table, newest first.

    Args:
        events: Event dicts as returned by /api/v1/events

    Returns:
        DataFrame with EVENT_COLUMNS (empty but typed when there are no events)
    """
    if not events:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(events)
    df["date"] = pd.to_datetime(df["date"]).dt.date
    df["kind"] = df["kind"].str.capitalize()
    df = df.rename(columns={
        "date": "Date",
        "turbine_id": "Turbine",
        "component": "Component",
        "kind": "Kind",
        "value": "Probability",
    })
    return df[EVENT_COLUMNS].sort_values("Date", ascending=False).reset_index(drop=True)


def patterns_to_dataframe(patterns: List[Dict[str, Any]]) -> pd.DataFrame:
    """Build the fault-pattern reference table."""
    rows = [
        {
            "Pattern": p["name"],
            "Severity": p["severity"],
            "Every (days)": p["period_days"],
            "Lasts (days)": p["duration_days"],
            "Magnitude": p["magnitude"],
            "Raises": p.get("event_kind") or "-",
        }
        for p in patterns
    ]
    return pd.DataFrame(rows, columns=PATTERN_COLUMNS)
