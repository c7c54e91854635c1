"""
Flat-File Data Store

This module reads the generated files (metadata.json, events.json,
turbine{id}.json) for the FastAPI application.

Features:
- Missing files are "no data", never an error
- Malformed files raise SeriesFormatError for the request that touched
  them; other requests keep working
- Health checking for the system endpoints
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from core.timeseries import (
    Event,
    Metadata,
    SeriesFormatError,
    TimeSeriesPoint,
    TurbineSeries,
)
from engine.config import get_data_dir
from engine.writer import EVENTS_FILENAME, METADATA_FILENAME, turbine_filename

logger = logging.getLogger(__name__)


class DataStore:
    """
    Read access to one generated-data directory.

    Provides high-level methods for the API endpoints. Every call reads
    from disk, so a fresh generation run is visible immediately.
    """

    def __init__(self, data_dir: Optional[str] = None):
        """
        Initialize with optional data directory.

        Args:
            data_dir: Directory with generated files (defaults to DATA_DIR)
        """
        self.data_dir = data_dir or get_data_dir()

    def _path(self, filename: str) -> str:
        return os.path.join(self.data_dir, filename)

    def _read_json(self, filename: str) -> Optional[Any]:
        """Load a JSON file, or None if it does not exist."""
        path = self._path(filename)
        if not os.path.exists(path):
            logger.debug(f"No data file: {path}")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Malformed data file {path}: {e}")
            raise SeriesFormatError(f"Malformed data file {filename}: {e}") from e

    # =========================================
    # Queries
    # =========================================

    def get_metadata(self) -> Optional[Metadata]:
        data = self._read_json(METADATA_FILENAME)
        if data is None:
            return None
        return Metadata.from_dict(data)

    def get_turbine(self, turbine_id: int) -> Optional[TurbineSeries]:
        """
        Load all component series of a turbine.

        Returns:
            TurbineSeries, or None if the turbine has no file
        """
        data = self._read_json(turbine_filename(turbine_id))
        if data is None:
            return None
        return TurbineSeries.from_dict(data)

    def get_component_series(self, turbine_id: int, component: str) -> List[TimeSeriesPoint]:
        """Series of one component; empty when the turbine or component is unknown."""
        turbine = self.get_turbine(turbine_id)
        if turbine is None:
            return []
        return turbine.get_component(component)

    def get_events(self) -> List[Event]:
        data = self._read_json(EVENTS_FILENAME)
        if data is None:
            return []
        if not isinstance(data, list):
            raise SeriesFormatError(f"{EVENTS_FILENAME} must contain a list")
        return [Event.from_dict(record) for record in data]

    def list_turbine_ids(self) -> List[int]:
        metadata = self.get_metadata()
        if metadata is None:
            return []
        return list(metadata.turbine_ids)


# =========================================
# Dependency for FastAPI
# =========================================

def get_store() -> DataStore:
    """
    Dependency that provides the data store.

    Usage in FastAPI:
        @app.get("/items")
        def get_items(store: DataStore = Depends(get_store)):
            return store.get_metadata()
    """
    return DataStore()


def check_store_health(data_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Check that the data directory exists and holds a readable run.

    Returns:
        Dictionary with status ("healthy", "empty" or "unhealthy") and details
    """
    store = DataStore(data_dir)

    if not os.path.isdir(store.data_dir):
        return {"status": "empty", "data_dir": store.data_dir, "metadata_present": False}

    try:
        metadata = store.get_metadata()
    except SeriesFormatError as e:
        return {"status": "unhealthy", "data_dir": store.data_dir, "error": str(e)}

    if metadata is None:
        return {"status": "empty", "data_dir": store.data_dir, "metadata_present": False}

    missing = [
        turbine_id for turbine_id in metadata.turbine_ids
        if not os.path.exists(os.path.join(store.data_dir, turbine_filename(turbine_id)))
    ]

    return {
        "status": "healthy" if not missing else "unhealthy",
        "data_dir": store.data_dir,
        "metadata_present": True,
        "start_date": metadata.start_date.isoformat(),
        "end_date": metadata.end_date.isoformat(),
        "turbine_count": len(metadata.turbine_ids),
        "missing_turbines": missing,
    }
