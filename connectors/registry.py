"""
ConnectorRegistry — discovers and provides access to all app connectors.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from connectors.base import BaseConnector
from connectors.jobber import JobberConnector
from connectors.reform import ReformConnector

logger = logging.getLogger(__name__)

# ── All known connectors — add new ones here ─────────────────────────────


def _all_connectors() -> List[BaseConnector]:
    return [
        JobberConnector(),
        ReformConnector(),
    ]


class ConnectorRegistry:
    """Singleton registry for all app connectors."""

    _instance: Optional["ConnectorRegistry"] = None

    def __new__(cls) -> "ConnectorRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._connectors = {}
            cls._instance._known = {c.provider_name: c for c in _all_connectors()}
            cls._instance._discovered = False
        return cls._instance

    def discover(self) -> None:
        """Register all configured connectors."""
        if self._discovered:
            return
        for conn in list(self._known.values()):
            if conn.is_configured():
                self.register(conn)
            else:
                logger.warning(
                    "Connector %s skipped — not configured (missing credentials)",
                    conn.provider_name,
                )
        self._discovered = True

    def register(self, connector: BaseConnector) -> None:
        """Register *connector*, replacing any previous one for the same app."""
        self._connectors[connector.provider_name] = connector
        self._known[connector.provider_name] = connector
        logger.info(
            "Connector registered: %s (%s)",
            connector.display_name,
            connector.provider_name,
        )

    def get(self, provider: str) -> Optional[BaseConnector]:
        """Get a registered connector by provider name."""
        return self._connectors.get(provider)

    def is_known(self, provider: str) -> bool:
        return provider in self._known

    def list_providers(self) -> List[Dict[str, object]]:
        """Return info about all known connectors."""
        return [
            {
                "provider": c.provider_name,
                "display_name": c.display_name,
                "icon": c.icon,
                "configured": c.is_configured(),
            }
            for c in self._known.values()
        ]

    def list_configured(self) -> List[str]:
        """Return names of registered connectors."""
        return list(self._connectors.keys())

    # ── reset (for tests) ──────────────────────────────────────────────

    @classmethod
    def reset(cls) -> None:
        """Destroy singleton — only useful in test teardown."""
        cls._instance = None
