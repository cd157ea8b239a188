"""
Jobber actions — list clients and properties, create clients and requests.

Architecture:
  • The API resolves the registered ``JobberConnector`` and passes it as the
    first argument (connector pass-through; the token never reaches here).
  • List actions stream through the cursor paginator and stop once
    ``max_items`` nodes were read.

Approval:
  • Read-only: ``list_clients``, ``list_properties``.
  • Mutating: ``create_client``, ``create_request`` → ``requires_approval=True``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from config.settings import config
from connectors.jobber import JobberConnector
from tools import tool

logger = logging.getLogger(__name__)

CLIENTS_QUERY = """
query ListClients($first: Int, $after: String) {
  clients(first: $first, after: $after) {
    nodes {
      id
      firstName
      lastName
      companyName
      isCompany
      createdAt
      emails {
        address
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

PROPERTIES_QUERY = """
query ListProperties($first: Int, $after: String, $filter: PropertyFilterAttributes) {
  properties(first: $first, after: $after, filter: $filter) {
    nodes {
      id
      address {
        street
        city
        province
        postalCode
        country
      }
      client {
        id
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

CLIENT_CREATE_MUTATION = """
mutation CreateClient($input: ClientCreateInput!) {
  clientCreate(input: $input) {
    client {
      id
      firstName
      lastName
      companyName
    }
    userErrors {
      message
      path
    }
  }
}
"""

REQUEST_CREATE_MUTATION = """
mutation CreateRequest($input: RequestCreateInput!) {
  requestCreate(input: $input) {
    request {
      id
      title
      requestStatus
      createdAt
    }
    userErrors {
      message
      path
    }
  }
}
"""


# ── Read-only tools (no approval) ─────────────────────────────────────────


@tool("jobber")
async def list_clients(
    connector: JobberConnector,
    max_items: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    List clients of the Jobber account.

    Parameters
    ----------
    max_items : int
        Stop requesting pages once this many clients were read.
    """
    return await connector.get_paginated_resources(
        CLIENTS_QUERY,
        resource_key="clients",
        max_items=config.default_max_items if max_items is None else max_items,
    )


@tool("jobber")
async def list_properties(
    connector: JobberConnector,
    client_id: Optional[str] = None,
    max_items: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """List properties, optionally only those of one client."""
    args = {"filter": {"clientId": client_id}} if client_id else None
    return await connector.get_paginated_resources(
        PROPERTIES_QUERY,
        resource_key="properties",
        max_items=config.default_max_items if max_items is None else max_items,
        args=args,
    )


# ── Mutating tools (approval required) ──────────────────────────────────


@tool("jobber", requires_approval=True)
async def create_client(
    connector: JobberConnector,
    first_name: str,
    last_name: str,
    company_name: Optional[str] = None,
    email: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a client; ``company_name`` makes it a company client."""
    client_input: Dict[str, Any] = {"firstName": first_name, "lastName": last_name}
    if company_name:
        client_input["companyName"] = company_name
        client_input["isCompany"] = True
    if email:
        client_input["emails"] = [{"description": "MAIN", "primary": True, "address": email}]

    payload = await connector.run_mutation(
        CLIENT_CREATE_MUTATION, {"input": client_input}, "clientCreate"
    )
    logger.info("Created Jobber client %s", payload["client"]["id"])
    return payload["client"]


@tool("jobber", requires_approval=True)
async def create_request(
    connector: JobberConnector,
    client_id: str,
    title: str,
    property_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a service request for a client."""
    request_input: Dict[str, Any] = {"clientId": client_id, "title": title}
    if property_id:
        request_input["propertyId"] = property_id

    payload = await connector.run_mutation(
        REQUEST_CREATE_MUTATION, {"input": request_input}, "requestCreate"
    )
    logger.info("Created Jobber request %s", payload["request"]["id"])
    return payload["request"]
