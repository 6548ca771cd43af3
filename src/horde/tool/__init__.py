"""Tool system — the caller-facing façade over HordeManager."""

from horde.tool.base import BaseTool, ToolError, ToolOk, ToolResult, from_result
from horde.tool.registry import ToolRegistry, create_registry

__all__ = [
    "BaseTool",
    "ToolResult",
    "ToolOk",
    "ToolError",
    "from_result",
    "ToolRegistry",
    "create_registry",
]
