"""
Turbine Fault Digital Twin - FastAPI Application

This is the main entry point for the FastAPI backend.
It combines all route modules and provides system-wide endpoints.

Features:
- Fault-probability series per turbine and component, aggregated on demand
- Alarm and warning queries
- Batch generation of simulated fleet data
- Interactive API documentation (Swagger/OpenAPI)

Access Points:
- API Root: http://localhost:8000
- Swagger Docs: http://localhost:8000/docs
- ReDoc: http://localhost:8000/redoc
- OpenAPI JSON: http://localhost:8000/openapi.json
"""

import os
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.store import check_store_health
from api.routes import series_router, events_router, generation_router
from api.models import ErrorResponse, SystemHealth
from core.timeseries import SeriesFormatError

API_VERSION = "0.1.0"

# =========================================
# Logging Configuration
# =========================================

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =========================================
# Application Lifespan
# =========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown; reports the state of the data directory.
    """
    logger.info("Starting Turbine Fault Digital Twin API...")

    store_health = check_store_health()
    if store_health["status"] == "healthy":
        logger.info(
            f"Data store ready: {store_health['data_dir']} "
            f"({store_health['start_date']} .. {store_health['end_date']}, "
            f"{store_health['turbine_count']} turbines)"
        )
    elif store_health["status"] == "empty":
        logger.warning(
            f"No generated data in {store_health['data_dir']}; "
            f"run `python -m engine` or POST /api/v1/generate"
        )
    else:
        logger.warning(f"Data store health check failed: {store_health}")

    logger.info("API Documentation: http://localhost:8000/docs")

    yield

    logger.info("Shutting down Turbine Fault Digital Twin API...")


# =========================================
# FastAPI Application
# =========================================

app = FastAPI(
    title="Turbine Fault Digital Twin API",
    description="""
## Wind-Turbine Fault-Probability Digital Twin

This API serves simulated daily fault probabilities for every component
of a small wind-turbine fleet, together with the alarms and warnings
raised at the peaks of recurring fault patterns.

### Key Features

- **Simulated History**: Ten years of daily fault probability per (turbine, component)
- **Fault Patterns**: Scheduled maintenance, minor issues and major failures
- **Events**: Alarms at major-failure peaks, sampled warnings at minor-issue peaks
- **Aggregation**: Day, week, month, quarter and year views with stable display dates

### Quick Start

1. **Check API health**: `GET /health`
2. **Generate data**: `POST /api/v1/generate`
3. **Inspect the run**: `GET /api/v1/metadata`
4. **Chart a component**: `GET /api/v1/series/1/generator?granularity=month`
5. **List alarms**: `GET /api/v1/events?kind=alarm`
    """,
    version=API_VERSION,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    },
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# =========================================
# CORS Middleware
# =========================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # React dev
        "http://127.0.0.1:8501",
        "http://127.0.0.1:3000",
        "*"  # Allow all for development - restrict in production
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================
# Exception Handlers
# =========================================

def error_body(status_code: int, message: str, detail=None) -> dict:
    return ErrorResponse(
        message=message,
        status_code=status_code,
        detail=detail,
        timestamp=datetime.utcnow(),
    ).model_dump(mode="json")


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions with consistent format."""
    if isinstance(exc.detail, str):
        content = error_body(exc.status_code, exc.detail)
    else:
        content = error_body(exc.status_code, "Request failed", detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(SeriesFormatError)
async def series_format_exception_handler(request, exc):
    """Malformed persisted data fails the request, not the service."""
    logger.warning(f"Malformed data for {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    detail = str(exc) if os.getenv("DEBUG", "false").lower() == "true" else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred", detail)
    )


# =========================================
# Include Routers
# =========================================

# API v1 routes
app.include_router(series_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(generation_router, prefix="/api/v1")


# =========================================
# Root Endpoints
# =========================================

@app.get(
    "/",
    tags=["System"],
    summary="API Root",
    description="Welcome endpoint with API information"
)
async def root():
    """API root endpoint."""
    return {
        "name": "Turbine Fault Digital Twin API",
        "version": API_VERSION,
        "description": "Simulated fault probabilities and events for a wind-turbine fleet",
        "documentation": "/docs",
        "health_check": "/health",
        "api_base": "/api/v1"
    }


@app.get(
    "/health",
    response_model=SystemHealth,
    tags=["System"],
    summary="System Health Check",
    description="Check the health status of the API and its data directory"
)
async def health_check():
    """System health check endpoint."""
    store_health = check_store_health()

    overall_status = "ok" if store_health["status"] == "healthy" else "degraded"

    return SystemHealth(
        status=overall_status,
        version=API_VERSION,
        timestamp=datetime.utcnow(),
        data_store=store_health["status"],
        components={
            "api": "ok",
            "data_store": store_health["status"],
            "generator": "ok",
            "aggregation": "ok"
        }
    )


@app.get(
    "/info",
    tags=["System"],
    summary="System Information",
    description="Get detailed system information"
)
async def system_info():
    """Get system information."""
    store_health = check_store_health()

    return {
        "api": {
            "name": "Turbine Fault Digital Twin API",
            "version": API_VERSION,
            "environment": os.getenv("ENVIRONMENT", "development")
        },
        "data_store": {
            "status": store_health["status"],
            "type": "JSON files",
            "data_dir": store_health["data_dir"],
            "start_date": store_health.get("start_date"),
            "end_date": store_health.get("end_date"),
            "turbine_count": store_health.get("turbine_count", 0)
        },
        "features": {
            "aggregation": ["day", "week", "month", "quarter", "year"],
            "event_kinds": ["alarm", "warning"],
            "generation": True,
            "csv_export": True
        },
        "endpoints": {
            "metadata": "/api/v1/metadata",
            "series": "/api/v1/series/{turbine_id}/{component}",
            "events": "/api/v1/events",
            "patterns": "/api/v1/patterns",
            "generate": "/api/v1/generate"
        },
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json"
        }
    }


@app.get(
    "/ready",
    tags=["System"],
    summary="Readiness Check",
    description="Check if the API has generated data to serve"
)
async def readiness_check():
    """Kubernetes-style readiness probe."""
    store_health = check_store_health()

    if store_health["status"] != "healthy":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Data store not ready"
        )

    return {"ready": True}


@app.get(
    "/live",
    tags=["System"],
    summary="Liveness Check",
    description="Check if the API process is alive"
)
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}


# =========================================
# Development/Debug Endpoints
# =========================================

if os.getenv("DEBUG", "false").lower() == "true":

    @app.get("/debug/config", tags=["Debug"])
    async def debug_config():
        """Show configuration (debug only)."""
        return {
            "data_dir": os.getenv("DATA_DIR", "data/simulated"),
            "generation_years": os.getenv("GENERATION_YEARS", "10"),
            "generation_seed": os.getenv("GENERATION_SEED", "not set"),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "debug": os.getenv("DEBUG", "false")
        }


# =========================================
# Run with Uvicorn (for development)
# =========================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", 8000)),
        reload=os.getenv("API_RELOAD", "true").lower() == "true",
        log_level=os.getenv("LOG_LEVEL", "info").lower()
    )
