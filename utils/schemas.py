"""
Pydantic schemas shared by the connectors, the paginator and the API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# GraphQL cursor pages
# ═══════════════════════════════════════════════════════════════════════════════


class PageInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")


class Page(BaseModel):
    """One batch of nodes plus the continuation metadata."""

    model_config = ConfigDict(populate_by_name=True)

    nodes: List[Any] = Field(default_factory=list)
    page_info: PageInfo = Field(alias="pageInfo")


# ═══════════════════════════════════════════════════════════════════════════════
# Props (workflow parameters) and their dropdown options
# ═══════════════════════════════════════════════════════════════════════════════


class PropDefinition(BaseModel):
    name: str
    type: str = "string"  # "string" | "string[]"
    label: str
    description: str = ""
    has_options: bool = False


class PropOption(BaseModel):
    value: str
    label: str


# ═══════════════════════════════════════════════════════════════════════════════
# API request bodies
# ═══════════════════════════════════════════════════════════════════════════════


class OptionsRequest(BaseModel):
    """Values of props already filled in, e.g. ``client_id`` for ``property_id``."""

    context: Dict[str, Any] = Field(default_factory=dict)


class ActionRequest(BaseModel):
    params: Dict[str, Any] = Field(default_factory=dict)
    approved: bool = False


class ActionInfo(BaseModel):
    name: str
    app: str
    requires_approval: bool = False
