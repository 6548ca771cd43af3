"""Tool registry — register and dispatch horde tools by name."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from horde.tool.base import BaseTool

if TYPE_CHECKING:
    from horde.manager import HordeManager

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of available tools, keyed by tool name."""

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool instance."""
        if tool.name in self._tools:
            logger.warning("Tool %s already registered, overwriting", tool.name)
        self._tools[tool.name] = tool

    def register_many(self, tools: list[BaseTool]) -> None:
        for tool in tools:
            self.register(tool)

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def get_specs(self, names: list[str] | None = None) -> list[dict[str, Any]]:
        """Get OpenAI tool specs, optionally filtered by name."""
        tools = self._tools.values()
        if names is not None:
            tools = [t for t in tools if t.name in names]
        return [t.to_openai_spec() for t in tools]

    def names(self) -> list[str]:
        return list(self._tools.keys())

    async def dispatch(self, name: str, arguments: dict[str, Any]) -> tuple[str, bool]:
        """Run tool ``name`` with raw ``arguments``.

        Returns:
            (content, is_error) tuple.
        """
        tool = self._tools.get(name)
        if tool is None:
            return (
                f"Unknown tool: {name}. Available tools: {', '.join(self.names())}",
                True,
            )
        return await tool(arguments)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


def create_registry(manager: HordeManager) -> ToolRegistry:
    """Registry holding every built-in horde tool bound to ``manager``."""
    from horde.tool.builtin import BUILTIN_TOOLS

    registry = ToolRegistry()
    registry.register_many([tool_cls(manager) for tool_cls in BUILTIN_TOOLS])
    return registry
