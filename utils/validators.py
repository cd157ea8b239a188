"""
Runtime validators used at startup.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def validate_tools_for_connectors(tool_registry, connector_registry) -> None:
    """
    Called once at startup.  Every registered action must belong to an app
    the ConnectorRegistry knows about; actions whose connector is known but
    not configured are only reported.
    """
    for tool_name in tool_registry.list_tools():
        app = tool_registry.tool_app(tool_name)
        if not connector_registry.is_known(app):
            raise RuntimeError(
                f"Startup validation failed — tool '{tool_name}' belongs to "
                f"unknown app '{app}'"
            )

    configured = set(connector_registry.list_configured())
    for app in tool_registry.list_apps():
        if app not in configured:
            logger.warning(
                "App '%s' is not configured — its %d actions will fail until credentials are set",
                app,
                len(tool_registry.list_tools(app)),
            )

    logger.info("All tool→connector bindings validated")
