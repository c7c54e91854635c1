"""
Generation Endpoints

This module exposes the batch generator over HTTP:
- Metadata of the current generation run
- The catalogue of fault patterns injected into every series
- A generation trigger that (re)writes the data directory

Generation replaces the files of the previous run; each file is
swapped in atomically, so concurrent readers see either the old or the
new version of a file.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.models import (
    GenerateRequest,
    GenerateResponse,
    MetadataResponse,
    PatternInfo,
    PatternListResponse,
)
from api.store import DataStore, get_store
from core.timeseries import SeriesFormatError
from engine.config import DEFAULT_COMPONENTS, DEFAULT_TURBINE_IDS, GenerationConfig
from engine.event_patterns import PatternLibrary
from engine.generator import GenerationWindow, SeriesSynthesizer
from engine.writer import GenerationError, OutputWriter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Generation"])


@router.get(
    "/metadata",
    response_model=MetadataResponse,
    summary="Get generation metadata",
    description="Window, components and turbine ids of the current generation run."
)
async def get_metadata(store: DataStore = Depends(get_store)):
    """Get metadata of the persisted run."""
    try:
        metadata = store.get_metadata()
    except SeriesFormatError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    if metadata is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No generated data available; run the generator first"
        )

    return MetadataResponse.from_metadata(metadata)


@router.get(
    "/patterns",
    response_model=PatternListResponse,
    summary="List fault patterns",
    description="""
    Get the recurring fault patterns injected into every series.

    Only patterns stronger than the peak threshold raise events:
    major patterns raise alarms, minor patterns occasionally raise
    warnings and scheduled maintenance never does.
    """
)
async def list_patterns():
    """List the default fault patterns."""
    return PatternListResponse(
        patterns=[PatternInfo.from_pattern(p) for p in PatternLibrary.get_all_patterns()]
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate fleet data",
    description="""
    Run the batch generator and write the results to the data directory.

    **Options:**
    - `years`: length of the historical window (default: 10)
    - `end_date`: window end, exclusive (default: today)
    - `seed`: random seed for reproducible output
    - `components` / `turbine_ids`: fleet layout (default: 9 components, turbines 1-4)
    - `write_csv`: also export each turbine as CSV
    """
)
async def generate(
    request: GenerateRequest,
    store: DataStore = Depends(get_store)
):
    """Generate and persist a new run."""
    try:
        config = GenerationConfig(
            components=tuple(request.components or DEFAULT_COMPONENTS),
            turbine_ids=tuple(request.turbine_ids or DEFAULT_TURBINE_IDS),
            years=request.years,
            random_seed=request.seed,
            output_dir=store.data_dir,
            write_csv=request.write_csv,
        )
        window = GenerationWindow.ending_on(request.end_date, years=config.years)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    synthesizer = SeriesSynthesizer.from_config(config)
    result = synthesizer.generate_all(window)

    writer = OutputWriter(config.output_dir)
    try:
        paths = writer.write_all(result, write_csv=config.write_csv)
    except GenerationError as e:
        logger.error(f"Generation rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.validation.to_dict() if e.validation else str(e)
        )

    logger.info(f"Generated {window.total_days} days into {config.output_dir}")

    return GenerateResponse(
        success=True,
        metadata=MetadataResponse.from_metadata(result.metadata),
        files_written=len(paths),
        alarms=result.alarm_count,
        warnings=result.warning_count,
        validation_status=writer.last_validation.status if writer.last_validation else "accepted",
        message=(
            f"Generated {len(config.turbine_ids)} turbines x {len(config.components)} components "
            f"over {window.total_days} days"
        )
    )
