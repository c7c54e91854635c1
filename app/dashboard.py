"""
Turbine Fault Digital Twin - Streamlit Dashboard

Main dashboard application for exploring the simulated fault-probability
history of the wind-turbine fleet.

Features:
- Fault-probability chart per turbine and component
- Alarm and warning markers with leader lines
- Quick time ranges (W / M / Q / Y / All) and granularity selection
- Event tables and per-component event counts
- Batch data generation

Run with: streamlit run app/dashboard.py
"""

import os
import streamlit as st
import requests
from typing import Dict, Any, Optional, Tuple

from components.charts import (
    create_fault_probability_chart,
    create_event_count_chart,
)
from components.gauge import (
    render_risk_gauge,
    render_metric_card,
    render_status_indicator,
)
from components.tables import (
    events_to_dataframe,
    patterns_to_dataframe,
)


# =========================================
# Configuration
# =========================================

API_URL = os.getenv("API_URL", "http://localhost:8000")

PRESET_LABELS = {
    "week": "W",
    "month": "M",
    "quarter": "Q",
    "year": "Y",
    "all": "All",
}

GRANULARITIES = ["day", "week", "month", "quarter", "year"]

# Page configuration
st.set_page_config(
    page_title="Turbine Fault Digital Twin",
    page_icon="🌬️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 2rem;
    }

    [data-testid="stMetric"] {
        background: rgba(31, 41, 55, 0.6);
        border-radius: 10px;
        padding: 15px;
        border: 1px solid #374151;
    }

    [data-testid="stSidebar"] {
        background: linear-gradient(180deg, #1F2937 0%, #111827 100%);
    }

    .stButton > button {
        border-radius: 8px;
        font-weight: 600;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# =========================================
# API Helper Functions
# =========================================

@st.cache_data(ttl=30)
def fetch_api(endpoint: str, params: Optional[Tuple[Tuple[str, Any], ...]] = None) -> Optional[Dict[str, Any]]:
    """Fetch data from API with caching."""
    try:
        response = requests.get(f"{API_URL}{endpoint}", params=dict(params or ()), timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"API Error: {e}")
        return None


def post_api(endpoint: str, data: Dict[str, Any] = None) -> Optional[Dict[str, Any]]:
    """POST to API."""
    try:
        response = requests.post(f"{API_URL}{endpoint}", json=data, timeout=300)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"API Error: {e}")
        return None


def get_api_health() -> Optional[Dict[str, Any]]:
    """Get the API health payload, or None if the API is unreachable."""
    try:
        response = requests.get(f"{API_URL}/health", timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException:
        return None


def fetch_metadata() -> Optional[Dict[str, Any]]:
    """Metadata of the current run, or None when nothing was generated."""
    try:
        response = requests.get(f"{API_URL}/api/v1/metadata", timeout=10)
    except requests.exceptions.RequestException as e:
        st.error(f"API Error: {e}")
        return None
    if response.status_code == 404:
        return None
    if not response.ok:
        st.error(f"API Error: {response.status_code} {response.text}")
        return None
    return response.json()


# =========================================
# Sidebar
# =========================================

def render_sidebar(metadata: Optional[Dict[str, Any]]) -> Tuple[int, str]:
    """Render the sidebar with controls."""
    with st.sidebar:
        st.markdown("## 🌬️ Turbine Fault Twin")
        st.markdown("---")

        # API Status
        health = get_api_health()
        if health:
            st.success("🟢 API Connected")
            render_status_indicator(health.get("data_store", "unknown"))
        else:
            st.error("🔴 API Disconnected")
            st.info(f"API URL: {API_URL}")

        st.markdown("---")

        # Turbine / Component Selection
        st.subheader("🏭 Selection")

        turbine_ids = metadata["turbine_ids"] if metadata else [1]
        components = metadata["components"] if metadata else ["Generator"]

        turbine_id = st.selectbox(
            "Turbine",
            options=turbine_ids,
            format_func=lambda t: f"Turbine #{t}",
            key="turbine_selector"
        )
        default_component = components.index("Generator") if "Generator" in components else 0
        component = st.selectbox(
            "Component",
            options=components,
            index=default_component,
            key="component_selector"
        )

        st.markdown("---")

        # Quick Actions
        st.subheader("⚡ Quick Actions")

        if st.button("🔄 Refresh Data", use_container_width=True):
            st.cache_data.clear()
            st.rerun()

        return turbine_id, component


# =========================================
# Fault Monitoring Page
# =========================================

def render_time_controls() -> Tuple[Optional[str], str]:
    """Quick-range buttons and granularity selector."""
    if "preset" not in st.session_state:
        st.session_state["preset"] = "all"

    cols = st.columns(len(PRESET_LABELS) + 2)
    for col, (preset, label) in zip(cols, PRESET_LABELS.items()):
        with col:
            button_type = "primary" if st.session_state["preset"] == preset else "secondary"
            if st.button(label, key=f"preset_{preset}", type=button_type, use_container_width=True):
                st.session_state["preset"] = preset
                st.rerun()

    with cols[-1]:
        granularity = st.selectbox(
            "Granularity",
            options=["preset"] + GRANULARITIES,
            format_func=lambda g: "Auto" if g == "preset" else g.capitalize(),
            label_visibility="collapsed",
            key="granularity_override"
        )

    preset = st.session_state["preset"]
    return preset, granularity


def render_monitoring_page(metadata: Dict[str, Any], turbine_id: int, component: str):
    """Render the fault-probability chart for the current selection."""
    st.title("📈 Fault Probability")
    st.caption(
        f"Simulated history {metadata['start_date']} to {metadata['end_date']} "
        f"({metadata['total_days']} days)"
    )

    preset, granularity = render_time_controls()

    params = [("preset", preset)]
    if granularity != "preset":
        params.append(("granularity", granularity))

    view = fetch_api(f"/api/v1/series/{turbine_id}/{component.lower()}", tuple(params))
    if view is None:
        return

    points = view.get("points", [])
    alarms = view.get("alarms", [])
    warnings = view.get("warnings", [])

    col1, col2 = st.columns([1, 3])

    with col1:
        if points:
            latest = points[-1]
            render_risk_gauge(latest["probability"], "Latest Risk", subtitle=latest["date"])
            peak = max(p["probability"] for p in points)
            st.markdown("")
            render_metric_card("Peak in range", f"{peak:.2f}", color="#F97316")
        st.markdown("")
        render_metric_card("Alarms", str(len(alarms)), color="#EF4444")
        st.markdown("")
        render_metric_card("Warnings", str(len(warnings)), color="#FBBF24")

    with col2:
        fig = create_fault_probability_chart(
            points,
            alarms=alarms,
            warnings=warnings,
            component=component,
            turbine_id=turbine_id,
            granularity=view.get("granularity", "month"),
        )
        st.plotly_chart(fig, use_container_width=True)
        if view.get("message"):
            st.info(view["message"])

    if alarms or warnings:
        with st.expander(f"Events in range ({len(alarms) + len(warnings)})"):
            st.dataframe(events_to_dataframe(alarms + warnings), use_container_width=True)


# =========================================
# Events Page
# =========================================

def render_events_page(metadata: Dict[str, Any], turbine_id: int):
    """Render the fleet-wide event overview."""
    st.title("🚨 Alarms & Warnings")

    scope = st.radio(
        "Scope",
        ["Selected turbine", "Whole fleet"],
        horizontal=True,
        label_visibility="collapsed"
    )
    kind = st.selectbox("Kind", ["all", "alarm", "warning"], format_func=str.capitalize)

    params = []
    if scope == "Selected turbine":
        params.append(("turbine_id", turbine_id))
    if kind != "all":
        params.append(("kind", kind))

    data = fetch_api("/api/v1/events", tuple(params))
    if data is None:
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Events", data["count"])
    col2.metric("Alarms", data["alarm_count"])
    col3.metric("Warnings", data["warning_count"])

    events = data.get("events", [])
    st.plotly_chart(create_event_count_chart(events), use_container_width=True)
    st.dataframe(events_to_dataframe(events), use_container_width=True, height=400)


# =========================================
# Generation Page
# =========================================

def render_generation_page(metadata: Optional[Dict[str, Any]]):
    """Render the data generation controls."""
    st.title("🧪 Data Generation")

    if metadata:
        st.info(
            f"Current run: {metadata['start_date']} to {metadata['end_date']}, "
            f"{len(metadata['turbine_ids'])} turbines x {len(metadata['components'])} components"
        )
    else:
        st.warning("No data has been generated yet.")

    patterns = fetch_api("/api/v1/patterns")
    if patterns:
        st.subheader("Fault Patterns")
        st.dataframe(patterns_to_dataframe(patterns["patterns"]), use_container_width=True)

    st.subheader("New Run")
    col1, col2, col3 = st.columns(3)
    with col1:
        years = st.number_input("Years", min_value=1, max_value=30, value=10)
    with col2:
        use_seed = st.checkbox("Fixed seed", value=True)
        seed = st.number_input("Seed", value=42, disabled=not use_seed)
    with col3:
        write_csv = st.checkbox("Export CSV", value=False)

    if st.button("🚀 Generate", type="primary"):
        payload = {
            "years": int(years),
            "seed": int(seed) if use_seed else None,
            "write_csv": write_csv,
        }
        with st.spinner("Generating fleet data..."):
            result = post_api("/api/v1/generate", payload)
        if result and result.get("success"):
            st.success(result["message"])
            col1, col2, col3 = st.columns(3)
            col1.metric("Files", result["files_written"])
            col2.metric("Alarms", result["alarms"])
            col3.metric("Warnings", result["warnings"])
            st.cache_data.clear()
        else:
            st.error("Generation failed")


# =========================================
# About Page
# =========================================

def render_about_page():
    """Render the about page."""
    st.title("ℹ️ About")
    st.markdown("""
    The **Turbine Fault Digital Twin** shows a simulated fault-probability
    history for every component of a small wind-turbine fleet.

    Each daily value is a low noise floor plus the contribution of three
    recurring fault patterns: scheduled maintenance, minor issues and
    major failures. Major-failure peaks raise **alarms** (red triangles);
    some minor-issue peaks raise **warnings** (yellow triangles).

    The quick-range buttons pick a readable granularity:

    | Button | Range | Granularity |
    |---|---|---|
    | W | last 7 days | day |
    | M | last month | day |
    | Q | last 3 months | week |
    | Y | last year | month |
    | All | whole history | quarter |

    Week buckets count days from January 1 in steps of seven, so they do
    not follow ISO weeks.
    """)


# =========================================
# Main Application
# =========================================

def main():
    """Main application entry point."""
    metadata = fetch_metadata()
    turbine_id, component = render_sidebar(metadata)

    # Navigation
    st.sidebar.markdown("---")
    st.sidebar.subheader("📍 Navigation")

    page = st.sidebar.radio(
        "Go to",
        ["📈 Fault Probability", "🚨 Events", "🧪 Data Generation", "ℹ️ About"],
        label_visibility="collapsed"
    )

    if page in ("📈 Fault Probability", "🚨 Events") and metadata is None:
        st.warning("No generated data available. Create a run on the Data Generation page.")
        return

    if page == "📈 Fault Probability":
        render_monitoring_page(metadata, turbine_id, component)
    elif page == "🚨 Events":
        render_events_page(metadata, turbine_id)
    elif page == "🧪 Data Generation":
        render_generation_page(metadata)
    elif page == "ℹ️ About":
        render_about_page()


if __name__ == "__main__":
    main()
