"""
JobberConnector — GraphQL access to the Jobber field-service platform.

Every call is a POST to ``/graphql`` authenticated with the account's OAuth
access token and pinned to an API version through the
``X-JOBBER-GRAPHQL-VERSION`` header. GraphQL errors arrive with a 200
status and are turned into ``ConfigurationError`` here.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from config.settings import config
from connectors.base import BaseConnector, OptionLoader
from connectors.exceptions import ConfigurationError
from utils.pagination import collect_all, paginate
from utils.schemas import PropDefinition, PropOption

logger = logging.getLogger(__name__)

_CLIENTS_OPTIONS_QUERY = """
query GetClients {
  clients {
    nodes {
      id
      firstName
      lastName
      companyName
    }
  }
}
"""

_PROPERTIES_OPTIONS_QUERY = """
query GetProperties($filter: PropertyFilterAttributes) {
  properties(filter: $filter) {
    nodes {
      id
      address {
        street
      }
    }
  }
}
"""


class JobberConnector(BaseConnector):
    """Connector for the Jobber GraphQL API."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(transport=transport)
        self._access_token = (
            access_token if access_token is not None else config.jobber_oauth_access_token
        )

    @property
    def provider_name(self) -> str:
        return "jobber"

    @property
    def display_name(self) -> str:
        return "Jobber"

    @property
    def icon(self) -> str:
        return "🧰"

    @property
    def base_url(self) -> str:
        return config.jobber_api_base

    def is_configured(self) -> bool:
        return bool(self._access_token)

    def auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "X-JOBBER-GRAPHQL-VERSION": config.jobber_graphql_version,
        }

    # ── GraphQL ─────────────────────────────────────────────────────────

    async def post(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Run a GraphQL operation and return the full response body."""
        payload: Dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables

        body = await self._make_request("POST", "/graphql", json=payload)
        if body.get("errors"):
            logger.error("Jobber GraphQL errors:\n%s", json.dumps(body, indent=2))
            raise ConfigurationError(body["errors"][0].get("message", "Unknown GraphQL error"))
        return body

    async def _query_data(self, query: str, variables: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        body = await self.post(query, variables)
        return body.get("data")

    def paginate(
        self,
        query: str,
        *,
        resource_key: str,
        max_items: int,
        args: Optional[Dict[str, Any]] = None,
    ) -> AsyncIterator[Any]:
        """Stream the nodes of a connection query; see ``utils.pagination``."""
        return paginate(
            self._query_data,
            query,
            resource_key=resource_key,
            max_items=max_items,
            args=args,
        )

    async def get_paginated_resources(
        self,
        query: str,
        *,
        resource_key: str,
        max_items: int,
        args: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        return await collect_all(
            self._query_data,
            query,
            resource_key=resource_key,
            max_items=max_items,
            args=args,
        )

    async def run_mutation(
        self,
        query: str,
        variables: Dict[str, Any],
        resource_key: str,
    ) -> Dict[str, Any]:
        """
        Run a mutation whose payload exposes ``userErrors``.

        Returns the payload under *resource_key*; validation failures
        reported in ``userErrors`` raise ``ConfigurationError``.
        """
        body = await self.post(query, variables)
        payload = body["data"][resource_key]
        user_errors = payload.get("userErrors") or []
        if user_errors:
            messages = "; ".join(e.get("message", "") for e in user_errors)
            raise ConfigurationError(f"Jobber rejected {resource_key}: {messages}")
        return payload

    # ── Props ───────────────────────────────────────────────────────────

    @property
    def prop_definitions(self) -> List[PropDefinition]:
        return [
            PropDefinition(
                name="client_id",
                label="Client ID",
                description="The ID of the client",
                has_options=True,
            ),
            PropDefinition(
                name="property_id",
                label="Property ID",
                description="The ID of a property",
                has_options=True,
            ),
        ]

    def _option_loaders(self) -> Dict[str, OptionLoader]:
        return {
            "client_id": self.client_id_options,
            "property_id": self.property_id_options,
        }

    async def client_id_options(self, **_: Any) -> List[PropOption]:
        body = await self.post(_CLIENTS_OPTIONS_QUERY)
        nodes = body["data"]["clients"]["nodes"]
        return [
            PropOption(
                value=n["id"],
                label=n.get("companyName")
                or " ".join(filter(None, (n.get("firstName"), n.get("lastName"))))
                or n["id"],
            )
            for n in nodes
        ]

    async def property_id_options(
        self, client_id: Optional[str] = None, **_: Any
    ) -> List[PropOption]:
        variables = {"filter": {"clientId": client_id}} if client_id else {}
        body = await self.post(_PROPERTIES_OPTIONS_QUERY, variables)
        nodes = body["data"]["properties"]["nodes"]
        return [
            PropOption(value=n["id"], label=n["address"]["street"])
            for n in nodes
        ]
