"""Built-in horde tools, one per caller-facing operation."""

from horde.tool.builtin.agent import (
    CheckOnAgentTool,
    ExecuteCommandTool,
    GetAgentStateTool,
    WaitForResponseTool,
)
from horde.tool.builtin.confirmation import (
    AwaitConfirmationTool,
    RequestConfirmationTool,
    ResolveConfirmationTool,
)
from horde.tool.builtin.messaging import GetMessagesTool, SendMessageTool
from horde.tool.builtin.session import (
    AddAgentTool,
    CreateHordeTool,
    ListAgentsTool,
    RemoveAgentTool,
)

BUILTIN_TOOLS = [
    CreateHordeTool,
    AddAgentTool,
    RemoveAgentTool,
    ListAgentsTool,
    SendMessageTool,
    GetMessagesTool,
    GetAgentStateTool,
    WaitForResponseTool,
    ExecuteCommandTool,
    CheckOnAgentTool,
    RequestConfirmationTool,
    ResolveConfirmationTool,
    AwaitConfirmationTool,
]

__all__ = [
    "BUILTIN_TOOLS",
    "CreateHordeTool",
    "AddAgentTool",
    "RemoveAgentTool",
    "ListAgentsTool",
    "SendMessageTool",
    "GetMessagesTool",
    "GetAgentStateTool",
    "WaitForResponseTool",
    "ExecuteCommandTool",
    "CheckOnAgentTool",
    "RequestConfirmationTool",
    "ResolveConfirmationTool",
    "AwaitConfirmationTool",
]
