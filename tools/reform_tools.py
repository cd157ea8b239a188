"""
Reform actions — extract structured data from documents or text.
"""

from __future__ import annotations

from typing import Any, Dict, List

from connectors.reform import ReformConnector
from tools import tool


@tool("reform")
async def extract_data_from_document(
    connector: ReformConnector,
    document: str,
    fields: List[Any],
) -> Dict[str, Any]:
    """
    Extract *fields* from a document.

    Parameters
    ----------
    document : str
        A file URL or a local path such as ``/tmp/invoice.pdf``.
    fields : list
        Field definitions, as objects or JSON strings.
    """
    return await connector.extract_data_from_document(document, fields)


@tool("reform")
async def extract_data_from_text(
    connector: ReformConnector,
    text: str,
    fields: List[Any],
) -> Dict[str, Any]:
    """Extract *fields* from a block of plain text."""
    return await connector.extract_data_from_text(text, fields)
