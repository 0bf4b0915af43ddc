"""
API routes — thin HTTP layer that delegates to MappingService.

Routes:
  GET  /health                    → API health check
  GET  /api                       → API info and endpoint list
  GET  /api/safeguards            → Safeguard summaries (optional filters)
  GET  /api/safeguards/{id}       → Safeguard details (?include_examples=true)
  POST /api/validate              → Validate a vendor's claimed capability
  POST /api/analyze               → Detect the capability a vendor response exhibits
  GET  /api/metrics               → Performance and cache metrics
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from safeguard_mapper.config import get_settings
from safeguard_mapper.models.schemas import (
    AnalysisResult,
    CapabilityAnalysis,
    MetricsSnapshot,
    SafeguardDefinition,
    SummaryListing,
)
from safeguard_mapper.services.mapping_service import MappingService

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
api_router = APIRouter()


@lru_cache()
def get_mapping_service() -> MappingService:
    """Process-wide service instance (override in tests via dependency_overrides)."""
    return MappingService()


# ── Request schemas ──────────────────────────────────────
# Fields are optional so blank/missing values reach the service and come
# back as MissingFieldError with guidance instead of a generic 422.

class ValidateRequest(BaseModel):
    vendor_name: Optional[str] = None
    safeguard_id: Optional[str] = None
    claimed_capability: Optional[str] = None
    supporting_text: Optional[str] = None


class AnalyzeRequest(BaseModel):
    vendor_name: Optional[str] = None
    safeguard_id: Optional[str] = None
    response_text: Optional[str] = None


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check(service: MappingService = Depends(get_mapping_service)):
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "framework": service.catalog.framework_name,
        "safeguards": len(service.catalog),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ── API info ─────────────────────────────────────────────

@api_router.get("")
async def api_info() -> dict[str, Any]:
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Maps vendor capability claims to safeguard capability roles",
        "endpoints": {
            "GET /health": "Health check",
            "GET /api/safeguards": "List safeguards (filters: implementation_group, security_function)",
            "GET /api/safeguards/{safeguard_id}": "Safeguard details (include_examples=true|false)",
            "POST /api/validate": "Validate a vendor's claimed capability against supporting text",
            "POST /api/analyze": "Detect the capability role a vendor response exhibits",
            "GET /api/metrics": "Performance and cache metrics",
        },
        "capability_roles": ["full", "partial", "facilitates", "governance", "validates"],
    }


# ── Safeguards ───────────────────────────────────────────

@api_router.get("/safeguards", response_model=SummaryListing)
async def list_safeguards(
    implementation_group: Optional[str] = Query(default=None),
    security_function: Optional[str] = Query(default=None),
    service: MappingService = Depends(get_mapping_service),
):
    return service.summarize_safeguards(implementation_group, security_function)


@api_router.get("/safeguards/{safeguard_id}", response_model=SafeguardDefinition)
async def get_safeguard(
    safeguard_id: str,
    include_examples: bool = Query(default=False),
    service: MappingService = Depends(get_mapping_service),
):
    return service.get_safeguard(safeguard_id, include_examples=include_examples)


# ── Analysis ─────────────────────────────────────────────

@api_router.post("/validate", response_model=AnalysisResult)
async def validate_vendor_mapping(
    request: ValidateRequest,
    service: MappingService = Depends(get_mapping_service),
):
    return service.validate_mapping(
        request.vendor_name,
        request.safeguard_id,
        request.claimed_capability,
        request.supporting_text,
    )


@api_router.post("/analyze", response_model=CapabilityAnalysis)
async def analyze_vendor_response(
    request: AnalyzeRequest,
    service: MappingService = Depends(get_mapping_service),
):
    return service.analyze_response(request.vendor_name, request.safeguard_id, request.response_text)


@api_router.get("/metrics", response_model=MetricsSnapshot)
async def get_metrics(service: MappingService = Depends(get_mapping_service)):
    return service.metrics_snapshot()
