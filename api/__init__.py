"""
API Module - FastAPI Backend

This module provides the REST API for the Turbine Fault Digital Twin.
It serves the generated flat files and can trigger new generation runs.

Key Components:
- main.py: FastAPI application and root endpoints
- models.py: Pydantic schemas for request/response validation
- store.py: Read access to the generated JSON files
- routes/: API endpoint implementations

Endpoints:
- GET /api/v1/metadata: Window and keys of the current run
- GET /api/v1/series/{turbine_id}/{component}: Aggregated chart series
- GET /api/v1/events: Alarms and warnings
- GET /api/v1/patterns: Fault pattern catalogue
- POST /api/v1/generate: Run the batch generator
"""

__version__ = "0.1.0"
