"""
Singleton ToolRegistry with auto-discovery.

Actions live in ``tools/*_tools.py`` and are tagged with ``@tool``; each one
belongs to exactly one app and receives that app's connector as its first
argument.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pathlib
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

_TOOLS_DIR = pathlib.Path(__file__).resolve().parent


class ToolRegistry:
    """Process-wide singleton that maps action-name → callable + owning app + approval flag."""

    _instance: "ToolRegistry | None" = None

    def __new__(cls) -> "ToolRegistry":
        if cls._instance is None:
            inst = super().__new__(cls)
            inst._tools: Dict[str, Callable] = {}
            inst._apps: Dict[str, str] = {}
            inst._requires_approval: Dict[str, bool] = {}
            cls._instance = inst
        return cls._instance

    def register(
        self,
        tool_name: str,
        tool_fn: Callable,
        app: str,
        requires_approval: bool = False,
    ) -> None:
        if tool_name in self._tools and self._apps[tool_name] != app:
            raise ValueError(
                f"Tool '{tool_name}' is already registered for app '{self._apps[tool_name]}'"
            )
        self._tools[tool_name] = tool_fn
        self._apps[tool_name] = app
        self._requires_approval[tool_name] = requires_approval

    def get_tool(self, tool_name: str, app: Optional[str] = None) -> Callable:
        """
        Return the tool callable, optionally checking that it belongs to *app*.

        Raises
        ------
        ValueError      – tool not found
        PermissionError – tool belongs to another app
        """
        if tool_name not in self._tools:
            raise ValueError(f"Tool '{tool_name}' not found in registry")
        if app is not None and self._apps[tool_name] != app:
            raise PermissionError(
                f"Tool '{tool_name}' belongs to '{self._apps[tool_name]}', not '{app}'"
            )
        return self._tools[tool_name]

    def has_tool(self, tool_name: str) -> bool:
        return tool_name in self._tools

    def tool_app(self, tool_name: str) -> str:
        return self._apps[tool_name]

    def list_tools(self, app: Optional[str] = None) -> List[str]:
        if app is None:
            return list(self._tools.keys())
        return [name for name, owner in self._apps.items() if owner == app]

    def list_apps(self) -> List[str]:
        return sorted(set(self._apps.values()))

    def tool_requires_approval(self, tool_name: str) -> bool:
        """Return True if *tool_name* is marked ``requires_approval``."""
        return self._requires_approval.get(tool_name, False)

    # ── auto-discovery ──────────────────────────────────────────────────

    def auto_discover_tools(self, tools_dir: Optional[str] = None) -> None:
        """
        Scan ``tools/*_tools.py`` for functions decorated with ``@tool``.
        """
        tools_path = pathlib.Path(tools_dir).resolve() if tools_dir else _TOOLS_DIR

        tool_files = sorted(tools_path.glob("*_tools.py"))

        if not tool_files:
            raise RuntimeError(f"No *_tools.py files found in {tools_path}")

        for tool_file in tool_files:
            try:
                relative = tool_file.relative_to(tools_path.parent)
                module_name = ".".join(relative.with_suffix("").parts)

                module = importlib.import_module(module_name)

                for name, obj in inspect.getmembers(module, inspect.isfunction):
                    if getattr(obj, "is_tool", False):
                        if not getattr(obj, "app", None):
                            raise RuntimeError(
                                f"Tool '{name}' in {tool_file.name} is missing "
                                f"'app' (bad @tool usage)"
                            )
                        self.register(
                            tool_name=name,
                            tool_fn=obj,
                            app=obj.app,
                            requires_approval=getattr(obj, "requires_approval", False),
                        )

            except Exception as exc:
                raise RuntimeError(
                    f"Failed to load tools from {tool_file.name}: {exc}"
                ) from exc

        logger.info(
            "Registered %d tools from %d files",
            len(self._tools),
            len(tool_files),
        )

    # ── reset (for tests) ──────────────────────────────────────────────

    @classmethod
    def reset(cls) -> None:
        """Destroy singleton — only useful in test teardown."""
        cls._instance = None
