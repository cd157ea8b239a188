"""
BaseConnector — abstract interface for all app connectors.

Every app (Jobber, Reform, …) subclasses this and supplies its identity,
its auth headers and its prop definitions. Requests go through
``_make_request`` so auth, timeouts and error logging live in one place.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from config.settings import config
from connectors.exceptions import ConfigurationError
from utils.schemas import PropDefinition, PropOption

logger = logging.getLogger(__name__)

OptionLoader = Callable[..., Awaitable[List[PropOption]]]


class BaseConnector(ABC):
    """Abstract base for all app connectors."""

    def __init__(self, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        # Tests inject httpx.MockTransport here.
        self._transport = transport

    # ── Identity ────────────────────────────────────────────────────────
    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique slug: 'jobber', 'reform'."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable: 'Jobber', 'Reform'."""
        ...

    @property
    def icon(self) -> str:
        """Optional emoji / icon for UI."""
        return "🔗"

    # ── Auth / transport ────────────────────────────────────────────────

    @property
    @abstractmethod
    def base_url(self) -> str:
        ...

    @abstractmethod
    def auth_headers(self) -> Dict[str, str]:
        """Headers that authenticate every request to the app."""
        ...

    def is_configured(self) -> bool:
        """
        Return True if this connector has the credentials it needs.
        """
        return True

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=config.http_timeout, transport=self._transport)

    async def _make_request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Send a request to ``base_url + path`` and return the decoded JSON body.

        Caller headers are merged first so the auth headers always win.
        Non-2xx responses raise ``httpx.HTTPStatusError``.
        """
        url = f"{self.base_url}{path}"
        merged = {**(headers or {}), **self.auth_headers()}
        logger.debug("[%s] %s %s", self.provider_name, method, url)

        async with self._client() as client:
            resp = await client.request(method, url, headers=merged, **kwargs)
            if resp.is_error:
                self._log_error(resp)
            resp.raise_for_status()
            return resp.json()

    def _log_error(self, resp: httpx.Response) -> None:
        try:
            body = resp.json()
        except ValueError:
            body = resp.text[:500]
        logger.error(
            "[%s] %s %s — %d body=%s",
            self.provider_name,
            resp.request.method,
            resp.request.url,
            resp.status_code,
            body,
        )

    # ── Props ───────────────────────────────────────────────────────────

    @property
    def prop_definitions(self) -> List[PropDefinition]:
        """Workflow parameters this app contributes."""
        return []

    def _option_loaders(self) -> Dict[str, OptionLoader]:
        """Map prop name → coroutine returning its dropdown options."""
        return {}

    def get_prop(self, prop: str) -> Optional[PropDefinition]:
        for definition in self.prop_definitions:
            if definition.name == prop:
                return definition
        return None

    async def load_options(self, prop: str, **context: Any) -> List[PropOption]:
        """
        Load the dropdown options for *prop*.

        ``context`` carries values of props the user already filled in.
        """
        if self.get_prop(prop) is None:
            raise ConfigurationError(f"{self.display_name} has no prop '{prop}'")
        loader = self._option_loaders().get(prop)
        if loader is None:
            raise ConfigurationError(
                f"Prop '{prop}' of {self.display_name} has no options to load"
            )
        return await loader(**context)
