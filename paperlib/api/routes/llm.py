"""Inference gateway settings.

- GET /api/llm - Cached gateway status
- PUT /api/llm/endpoint - Point the gateway at another server and re-probe
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from paperlib.api.dependencies import get_gateway
from paperlib.api.models import UpdateEndpointRequest
from paperlib.llm.gateway import InferenceGateway
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import log_event

logger = get_logger(__name__)

router = APIRouter(prefix="/api/llm", tags=["llm"])


def _status(gateway: InferenceGateway) -> dict[str, Any]:
    return {
        "online": gateway.online,
        "endpoint": gateway.endpoint,
        "checked": gateway.last_checked is not None,
    }


@router.get("")
def get_llm_status(gateway: InferenceGateway = Depends(get_gateway)) -> dict[str, Any]:
    return _status(gateway)


@router.put("/endpoint")
def update_endpoint(
    request: UpdateEndpointRequest, gateway: InferenceGateway = Depends(get_gateway)
) -> dict[str, Any]:
    """Switch servers at runtime. Status is rechecked against the new endpoint before responding."""
    gateway.set_endpoint(request.endpoint)
    gateway.check_status()
    logger.info("Gateway endpoint set to %s (online=%s)", gateway.endpoint, gateway.online)
    log_event("llm.endpoint_changed", endpoint=gateway.endpoint, online=gateway.online)
    return _status(gateway)
