"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from fastapi import HTTPException, status

from connectors.base import BaseConnector
from connectors.registry import ConnectorRegistry


def get_connector(app: str) -> BaseConnector:
    """Resolve the registered connector for the ``{app}`` path parameter."""
    registry = ConnectorRegistry()
    connector = registry.get(app)
    if connector is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"App '{app}' not found or not configured",
        )
    return connector
