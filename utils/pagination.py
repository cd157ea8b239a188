"""
Cursor pagination for GraphQL connections.

Walks the ``nodes`` / ``pageInfo { hasNextPage endCursor }`` shape one page
at a time, forwarding ``endCursor`` as the ``after`` variable of the next
request. Pages are fetched strictly one after another and only when the
consumer asks for more items.

Usage:
    async for client in paginate(
        request, CLIENTS_QUERY, resource_key="clients", max_items=50
    ):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from connectors.exceptions import PaginationError
from utils.schemas import Page

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

# (query, variables) -> decoded GraphQL ``data`` object
RequestFn = Callable[[str, Dict[str, Any]], Awaitable[Mapping]]


def _read_page(data: Any, resource_key: str) -> Optional[Page]:
    """Return the page under *resource_key*, or None when it holds no nodes."""
    if not isinstance(data, Mapping) or resource_key not in data:
        raise PaginationError(
            f"Response has no '{resource_key}' field", resource_key=resource_key
        )
    container = data[resource_key]
    if not isinstance(container, Mapping):
        raise PaginationError(
            f"'{resource_key}' is not a connection object", resource_key=resource_key
        )
    if not container.get("nodes"):
        return None
    try:
        return Page.model_validate(container)
    except ValidationError as exc:
        raise PaginationError(
            f"Malformed page under '{resource_key}': {exc}",
            resource_key=resource_key,
            original_error=exc,
        ) from exc


async def paginate(
    request: RequestFn,
    query: str,
    *,
    resource_key: str,
    max_items: int,
    args: Optional[Dict[str, Any]] = None,
) -> AsyncIterator[Any]:
    """
    Yield nodes from successive pages until the connection is exhausted.

    Parameters
    ----------
    request : coroutine function taking ``(query, variables)`` and returning
        the decoded ``data`` object. Any exception it raises ends the
        iteration and propagates to the consumer.
    query : GraphQL query declaring ``$first`` and ``$after`` variables.
    resource_key : field of ``data`` holding the connection.
    max_items : no further page is requested once this many nodes have been
        yielded. The check runs between pages, so the last page is always
        yielded in full and may overshoot the cap.
    args : extra variables; they override the default ``first`` / ``after``.
    """
    if max_items < 0:
        raise ValueError(f"max_items must be >= 0, got {max_items}")

    counter = 0
    end_cursor: Optional[str] = None
    while True:
        variables = {"after": end_cursor, "first": DEFAULT_PAGE_SIZE, **(args or {})}
        logger.debug("Fetching '%s' page after=%s", resource_key, end_cursor)
        data = await request(query, variables)

        page = _read_page(data, resource_key)
        if page is None:
            return

        for node in page.nodes:
            counter += 1
            yield node

        if not (page.page_info.has_next_page and counter < max_items):
            logger.debug("'%s' pagination done after %d items", resource_key, counter)
            return
        end_cursor = page.page_info.end_cursor


async def collect_all(
    request: RequestFn,
    query: str,
    *,
    resource_key: str,
    max_items: int,
    args: Optional[Dict[str, Any]] = None,
) -> List[Any]:
    """Run :func:`paginate` to completion and return the nodes as a list."""
    results: List[Any] = []
    async for node in paginate(
        request, query, resource_key=resource_key, max_items=max_items, args=args
    ):
        results.append(node)
    return results
