"""FastAPI application: weather validation and signal intake endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from aptos_signals.signals.intake import signal_from_market
from aptos_signals.signals.store import SignalStore
from aptos_signals.validation.models import WEATHER_CATEGORY
from aptos_signals.validation.weather import (
    ANALYSIS_REQUIREMENTS,
    DATA_TYPES,
    check_capabilities,
    validate_weather_data,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Aptos Signals API",
    description="Weather data validation and signal intake for on-chain publishing",
    version="0.1.0",
)


def get_store() -> SignalStore:
    """Dependency returning the signal store."""
    return SignalStore()


def _error_report(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "valid": False,
            "errors": [message],
            "warnings": [],
            "category": WEATHER_CATEGORY,
        },
    )


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


# ═══════════════════════════════════════════════════════════════
# Weather validation
# ═══════════════════════════════════════════════════════════════


class WeatherValidationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weather_data: Optional[dict[str, Any]] = Field(default=None, alias="weatherData")
    data_type: str = Field(default="current", alias="dataType")
    analysis_type: Optional[str] = Field(default=None, alias="analysisType")


@app.post("/api/validate/weather")
async def validate_weather(body: WeatherValidationRequest):
    """Validate weather data quality and completeness."""
    if body.weather_data is None:
        return _error_report("weatherData is required", 400)

    try:
        report = validate_weather_data(body.data_type, body.weather_data)
        capabilities = None
        if body.analysis_type:
            capabilities = check_capabilities(body.weather_data, body.analysis_type).to_dict()
    except Exception as exc:
        logger.exception("Weather validation failed")
        return _error_report(f"Weather validation failed: {exc}", 500)

    return {
        **report.to_dict(),
        "capabilities": capabilities,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/validate/weather")
async def describe_validate_weather():
    return {
        "endpoint": "/api/validate/weather",
        "method": "POST",
        "description": "Validates weather data quality and completeness",
        "requiredFields": ["weatherData"],
        "optionalFields": ["dataType", "analysisType"],
        "supportedDataTypes": list(DATA_TYPES),
        "supportedAnalysisTypes": list(ANALYSIS_REQUIREMENTS),
    }


# ═══════════════════════════════════════════════════════════════
# Signals
# ═══════════════════════════════════════════════════════════════


class CreateSignalRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    market: Optional[dict[str, Any]] = None
    analysis: Optional[dict[str, Any]] = None
    weather: Optional[dict[str, Any]] = None
    author_address: Optional[str] = Field(default=None, alias="authorAddress")


class PatchSignalRequest(BaseModel):
    id: Optional[str] = None
    tx_hash: Optional[str] = None


@app.post("/api/signals")
async def create_signal(body: CreateSignalRequest, store: SignalStore = Depends(get_store)):
    """Store a signal built from a market snapshot and its analysis."""
    if not body.market or not body.analysis:
        return JSONResponse(
            status_code=400, content={"success": False, "error": "missing market or analysis"},
        )

    try:
        stored = signal_from_market(
            body.market, body.analysis, body.weather, author_address=body.author_address,
        )
        signal_id = await store.save_signal(stored)
    except Exception as exc:
        logger.exception("Failed to save signal")
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})

    return {"success": True, "id": signal_id}


@app.get("/api/signals")
async def list_signals(
    limit: int = Query(default=20, ge=1, le=500),
    store: SignalStore = Depends(get_store),
):
    try:
        signals = await store.latest_signals(limit)
    except Exception as exc:
        logger.exception("Failed to load signals")
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})
    return {"success": True, "signals": [s.to_dict() for s in signals]}


@app.patch("/api/signals")
async def set_signal_tx_hash(body: PatchSignalRequest, store: SignalStore = Depends(get_store)):
    """Attach the publish transaction hash to a stored signal."""
    if not body.id or not body.tx_hash:
        return JSONResponse(
            status_code=400, content={"success": False, "error": "missing id or tx_hash"},
        )

    try:
        updated = await store.update_tx_hash(body.id, body.tx_hash)
    except Exception as exc:
        logger.exception("Failed to update signal %s", body.id)
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})

    if not updated:
        return JSONResponse(
            status_code=404, content={"success": False, "error": f"unknown signal {body.id}"},
        )
    return {"success": True}
