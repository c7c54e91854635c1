"""
Streamlit Dashboard Application

This module provides the web-based dashboard for the Turbine Fault
Digital Twin. It reads everything through the REST API.

Components:
- dashboard.py: Main dashboard application
- components/: Reusable UI components
  - charts.py: Plotly fault-probability and event charts
  - gauge.py: Fault-risk gauge and cards
  - tables.py: pandas event and pattern tables

Features:
- Fault-probability chart with alarm and warning markers
- Quick time ranges and granularity selection
- Fleet-wide event overview
- Batch data generation
"""

__version__ = "0.1.0"
