"""Agent inspection tools — state, responses, raw pane access."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from horde.agent.state import AgentState
from horde.tool.base import BaseTool, ToolError, ToolOk, ToolResult, from_result


def format_state(name: str, state: AgentState) -> str:
    text = (
        f"Agent '{name}': {state.status} (action: {state.action}, "
        f"context warning: {state.context_warning})"
    )
    if state.pending_confirmation is not None:
        text += f"\nPending confirmation: {state.pending_confirmation.message}"
    return text


class AgentNameParams(BaseModel):
    name: str = Field(description="Name of the agent")


class GetAgentStateTool(BaseTool[AgentNameParams]):
    name: ClassVar[str] = "get_agent_state"
    description: ClassVar[str] = "Get the current state of an agent"
    param_model: ClassVar[type[BaseModel]] = AgentNameParams

    async def execute(self, params: AgentNameParams) -> ToolResult:
        result = await self.manager.get_agent_state(params.name)
        if not result:
            return ToolError(output=result.message)
        return ToolOk(output=format_state(params.name, result.value))


class WaitForResponseParams(BaseModel):
    name: str = Field(description="Name of the agent")
    timeout: float = Field(
        default=120, ge=0, description="Seconds to wait for the agent to go idle"
    )


class WaitForResponseTool(BaseTool[WaitForResponseParams]):
    name: ClassVar[str] = "wait_for_response"
    description: ClassVar[str] = (
        "Wait until an agent finishes working and return its screen. "
        "Stops early if the agent is waiting for approval."
    )
    param_model: ClassVar[type[BaseModel]] = WaitForResponseParams

    async def execute(self, params: WaitForResponseParams) -> ToolResult:
        result = await self.manager.wait_for_response(params.name, params.timeout)
        if not result:
            return ToolError(output=result.message)
        return ToolOk(output=result.value)


class ExecuteCommandParams(BaseModel):
    name: str = Field(description="Name of the agent")
    command: str = Field(
        description=(
            "Command to execute (e.g. '/compact', '/new', '/session', '/clear', "
            "'/accept', '/deny')"
        )
    )


class ExecuteCommandTool(BaseTool[ExecuteCommandParams]):
    name: ClassVar[str] = "execute_command"
    description: ClassVar[str] = "Execute a command directly in an agent's OpenCode session"
    param_model: ClassVar[type[BaseModel]] = ExecuteCommandParams

    async def execute(self, params: ExecuteCommandParams) -> ToolResult:
        return from_result(
            await self.manager.execute_command(params.name, params.command)
        )


class CheckOnAgentParams(BaseModel):
    name: str = Field(description="Name of agent")
    lines: int = Field(default=30, ge=1, description="Number of lines to read (default 30)")


class CheckOnAgentTool(BaseTool[CheckOnAgentParams]):
    name: ClassVar[str] = "check_on_agent"
    description: ClassVar[str] = (
        "LAST RESORT: Check on an agent by reading their pane content. Not for "
        "normal workflow - only use when communication is broken or agent is "
        "unresponsive"
    )
    param_model: ClassVar[type[BaseModel]] = CheckOnAgentParams

    async def execute(self, params: CheckOnAgentParams) -> ToolResult:
        result = await self.manager.check_on_agent(params.name, params.lines)
        if not result:
            return ToolError(output=result.message)
        return ToolOk(output=result.value)
