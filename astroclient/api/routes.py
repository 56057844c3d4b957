"""
API routes for the AstrologyAPI gateway.

Endpoint groups:

  /health                        — Service health + configured upstream
  /operations                    — The dispatch table
  /operations/{name}/preview     — Dry run: resolved path + encoded form, no network
  /operations/{name}             — Call the operation upstream
  /availability                  — License probe (JSON or markdown)
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from astroclient.errors import InputValidationError, RemoteRejectionError, TransportError
from astroclient.models.birth_data import (
    BirthData,
    TarotScores,
    TransitBirthData,
    TwoPersonBirthData,
)
from astroclient.services.astrology_api import AsyncAstrologyAPI
from astroclient.services.availability import probe_availability, render_markdown
from astroclient.services.endpoints import OPERATIONS, PayloadKind, get_operation, prepare

logger = logging.getLogger(__name__)
router = APIRouter()


class OperationRequest(BaseModel):
    """
    JSON body for preview / call. Fill the field matching the operation's
    payload kind; hybrid general reports also accept primary + secondary.
    """
    birth_data: Optional[BirthData] = None
    transit: Optional[TransitBirthData] = None
    pair: Optional[TwoPersonBirthData] = None
    tarot: Optional[TarotScores] = None
    primary: Optional[BirthData] = None
    secondary: Optional[BirthData] = None
    orb: Optional[float] = None
    path_params: Dict[str, str] = {}

    def payload_for(self, kind: PayloadKind):
        return {
            PayloadKind.BIRTH: self.birth_data,
            PayloadKind.TRANSIT: self.transit,
            PayloadKind.PAIR: self.pair,
            PayloadKind.TAROT: self.tarot,
        }[kind]


def _get_api(request: Request) -> AsyncAstrologyAPI:
    api = getattr(request.app.state, "astrology_api", None)
    if api is None:
        raise HTTPException(
            status_code=503,
            detail="AstrologyAPI credentials not configured. Set ASTROLOGY_API_USER_ID and ASTROLOGY_API_KEY.",
        )
    return api


def _prepare(name: str, body: OperationRequest):
    operation = get_operation(name)
    return prepare(
        name,
        body.payload_for(operation.kind),
        path_params=body.path_params,
        primary=body.primary,
        secondary=body.secondary,
        orb=body.orb,
    )


# ─────────────────────────────────────────────
# Health
# ─────────────────────────────────────────────

@router.get("/health")
async def health_check(request: Request):
    api = getattr(request.app.state, "astrology_api", None)
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "upstream": getattr(request.app.state, "base_url", None),
        "credentials": "configured" if api is not None else "missing",
        "operations": len(OPERATIONS),
    }


# ─────────────────────────────────────────────
# Operations
# ─────────────────────────────────────────────

@router.get("/operations")
async def list_operations():
    return [
        {
            "name": op.name,
            "path": op.path,
            "payload": op.kind.value,
            "format": op.form_format.value if op.form_format else None,
            "path_params": list(op.path_params),
        }
        for op in OPERATIONS.values()
    ]


@router.post("/operations/{name}/preview")
async def preview_operation(name: str, body: OperationRequest):
    """Show exactly what would be sent for `name`, without calling upstream."""
    try:
        prepared = _prepare(name, body)
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"operation": prepared.operation, "path": prepared.path, "form": prepared.form}


@router.post("/operations/{name}")
async def call_operation(name: str, body: OperationRequest, request: Request):
    """
    Call `name` upstream and return its JSON untouched.

    Upstream rejections come back as 502 with the upstream status and raw
    body, so a 405 (license tier) stays distinguishable from a bad request.
    """
    api = _get_api(request)
    try:
        # validation and encoding happen here, before anything is sent
        pending = api.call(
            name,
            body.payload_for(get_operation(name).kind),
            path_params=body.path_params,
            primary=body.primary,
            secondary=body.secondary,
            orb=body.orb,
        )
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        return await pending
    except RemoteRejectionError as e:
        raise HTTPException(
            status_code=502,
            detail={
                "upstream_status": e.status_code,
                "endpoint_unavailable": e.endpoint_unavailable,
                "url": e.url,
                "body": e.body,
            },
        )
    except TransportError as e:
        logger.error(f"Upstream call failed for {name}: {e}")
        raise HTTPException(status_code=504, detail=str(e))


# ─────────────────────────────────────────────
# Availability
# ─────────────────────────────────────────────

@router.get("/availability")
async def get_availability(
    request: Request,
    format: str = Query("json", description="json or markdown"),
):
    """
    Probe every endpoint once with sample data and report which ones the
    configured license can reach. Makes one upstream call per endpoint.
    """
    api = _get_api(request)
    report = await probe_availability(api)

    if format == "markdown":
        return PlainTextResponse(render_markdown(report), media_type="text/markdown")
    return {
        "base_url": report.base_url,
        "generated_at": report.generated_at.isoformat(),
        "accessible": [r.model_dump() for r in report.accessible],
        "not_accessible": [r.model_dump() for r in report.not_accessible],
    }
