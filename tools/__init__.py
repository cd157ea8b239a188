"""
@tool decorator — marks a function as a workflow action and declares which
app it belongs to.

Usage:
    from tools import tool

    @tool("jobber")
    async def list_clients(connector: JobberConnector, max_items: int = 100) -> List[Dict]:
        ...

    @tool("jobber", requires_approval=True)
    async def create_client(connector: JobberConnector, ...) -> Dict:
        ...
"""

from __future__ import annotations

from typing import Callable


def tool(
    app: str,
    *,
    requires_approval: bool = False,
) -> Callable:
    """
    Decorator that tags a function as a registered action.

    Parameters
    ----------
    app : provider name of the connector passed as the first argument.
    requires_approval : if True, the action writes to the remote app and the
        API refuses to run it unless the request is explicitly approved.
    """

    def decorator(func: Callable) -> Callable:
        func.is_tool = True  # type: ignore[attr-defined]
        func.app: str = app  # type: ignore[attr-defined]
        func.requires_approval: bool = requires_approval  # type: ignore[attr-defined]
        return func

    return decorator
