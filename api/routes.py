"""
REST API routes — list apps and props, load prop options, run actions.

Route prefix: /api/v1
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, List

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_connector
from connectors.base import BaseConnector
from connectors.exceptions import ConfigurationError, ConnectorError
from connectors.registry import ConnectorRegistry
from tools.registry import ToolRegistry
from utils.schemas import (
    ActionInfo,
    ActionRequest,
    OptionsRequest,
    PropDefinition,
    PropOption,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["apps"])


def _connector_failure(exc: Exception) -> HTTPException:
    """Translate a connector failure into the error shown to the workflow author."""
    if isinstance(exc, ConfigurationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    if isinstance(exc, httpx.HTTPStatusError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Upstream returned {exc.response.status_code}: {exc.request.url}",
        )
    if isinstance(exc, httpx.HTTPError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Upstream request failed: {exc}",
        )
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


# ── Apps & props ───────────────────────────────────────────────────────


@router.get("/apps")
async def list_apps() -> List[Dict[str, Any]]:
    """List all known apps and whether they have credentials."""
    return ConnectorRegistry().list_providers()


@router.get("/apps/{app}/props")
async def list_props(connector: BaseConnector = Depends(get_connector)) -> List[PropDefinition]:
    return connector.prop_definitions


@router.post("/apps/{app}/props/{prop}/options")
async def load_prop_options(
    prop: str,
    request: OptionsRequest,
    connector: BaseConnector = Depends(get_connector),
) -> List[PropOption]:
    """Load the dropdown options of a prop, given the props filled in so far."""
    if connector.get_prop(prop) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{connector.display_name} has no prop '{prop}'",
        )
    try:
        return await connector.load_options(prop, **request.context)
    except (ConnectorError, httpx.HTTPError) as exc:
        logger.warning("Options for %s.%s failed: %s", connector.provider_name, prop, exc)
        raise _connector_failure(exc) from exc


# ── Actions ────────────────────────────────────────────────────────────


@router.get("/actions")
async def list_actions() -> List[ActionInfo]:
    registry = ToolRegistry()
    return [
        ActionInfo(
            name=name,
            app=registry.tool_app(name),
            requires_approval=registry.tool_requires_approval(name),
        )
        for name in registry.list_tools()
    ]


@router.post("/actions/{name}")
async def run_action(name: str, request: ActionRequest) -> Dict[str, Any]:
    """
    Run an action with the connector of its app.

    Mutating actions need ``approved: true`` in the body.
    """
    registry = ToolRegistry()
    if not registry.has_tool(name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Action '{name}' not found",
        )
    if registry.tool_requires_approval(name) and not request.approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Action '{name}' modifies data and requires approval",
        )

    connector = get_connector(registry.tool_app(name))
    tool_fn = registry.get_tool(name)
    try:
        bound = inspect.signature(tool_fn).bind(connector, **request.params)
    except TypeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid parameters for '{name}': {exc}",
        ) from exc

    try:
        result = await tool_fn(*bound.args, **bound.kwargs)
    except (ConnectorError, httpx.HTTPError) as exc:
        logger.warning("Action %s failed: %s", name, exc)
        raise _connector_failure(exc) from exc
    except (ValueError, TypeError) as exc:
        logger.warning("Action %s rejected its parameters: %s", name, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid parameters for '{name}': {exc}",
        ) from exc

    return {"action": name, "result": result}
