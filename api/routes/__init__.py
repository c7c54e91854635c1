"""
API Routes Module

This module contains all API endpoint implementations organized by function:
- series.py: Fault-probability series per turbine and component
- events.py: Alarm and warning queries
- generation.py: Metadata, fault patterns and the generation trigger

All routers are combined in main.py to create the complete API.
"""

from .series import router as series_router
from .events import router as events_router
from .generation import router as generation_router

__all__ = [
    "series_router",
    "events_router",
    "generation_router",
]
