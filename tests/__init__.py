"""
Test Suite for the Turbine Fault Digital Twin

This module contains tests for:
- Fault patterns (test_event_patterns.py)
- Series synthesis and fleet generation (test_generator.py)
- Calendar buckets and aggregation (test_aggregation.py)
- Chart filtering and time-range presets (test_filters.py)
- Output validation (test_validators.py)
- File output and the data store (test_writer.py, test_store.py)
- API endpoints (test_api.py)
- Dashboard chart and table builders (test_dashboard_components.py)
- Batch generation entry point (test_cli.py)

Run tests with:
    pytest tests/ -v
    pytest tests/ --cov=core --cov=engine --cov=api
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
