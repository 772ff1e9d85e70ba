"""Health, debug and reference endpoints.

- /health - Service status including a live gateway probe
- /debug/stats - Telemetry counters and gateway latency
- /api/energies - Energy icons and descriptions for clients
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends

from paperlib.api.dependencies import get_gateway
from paperlib.classification.heuristic import energy_description, energy_icon
from paperlib.config import APP_VERSION
from paperlib.llm.gateway import InferenceGateway
from paperlib.observability.telemetry import get_counters, get_latency_stats
from paperlib.storage.models import Energy

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(gateway: InferenceGateway = Depends(get_gateway)) -> dict[str, Any]:
    """Service status. Probes the gateway, so ``llm.online`` is current."""
    online = gateway.check_status()
    return {
        "status": "healthy",
        "service": "Paper Library API",
        "version": APP_VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
        "llm": {
            "online": online,
            "endpoint": gateway.endpoint,
        },
    }


@router.get("/debug/stats")
def debug_stats() -> dict[str, Any]:
    return {
        "counters": get_counters(),
        "latency": {"gateway.complete": get_latency_stats("gateway.complete")},
    }


@router.get("/api/energies")
def list_energies() -> list[dict[str, str]]:
    return [
        {
            "energy": energy.value,
            "icon": energy_icon(energy),
            "description": energy_description(energy),
        }
        for energy in Energy
    ]
