"""Horde lifecycle tools — create, grow, shrink and list the horde."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from horde.tool.base import BaseTool, ToolOk, ToolResult, from_result

AGENT_TYPES = (
    "system, coding, coding-ts, coding-py, coding-go, coding-csharp, general, "
    "explore, knowledge, librarian, planning, work, compaction, summary, title, acquire"
)


class CreateHordeParams(BaseModel):
    names: str = Field(
        description="Comma-separated agent names (e.g. 'agent1,agent2,agent3')"
    )
    models: str | None = Field(
        default=None,
        description=(
            "Comma-separated models, positional (optional, e.g. "
            "'anthropic/claude-sonnet-4,google/gemini-2.5-pro')"
        ),
    )
    themes: str | None = Field(
        default=None,
        description="Comma-separated themes, positional (optional, e.g. 'dracula,nord')",
    )
    agent_types: str | None = Field(
        default=None,
        description=f"Comma-separated agent types, positional (optional). Available: {AGENT_TYPES}",
    )


class CreateHordeTool(BaseTool[CreateHordeParams]):
    name: ClassVar[str] = "create_horde"
    description: ClassVar[str] = (
        "Create a HORDE session with multiple agents at once, replacing any "
        "existing one. Arrays are positional - names[0] gets models[0], "
        "themes[0], and agent_types[0]."
    )
    param_model: ClassVar[type[BaseModel]] = CreateHordeParams

    async def execute(self, params: CreateHordeParams) -> ToolResult:
        result = await self.manager.create_horde(
            params.names, params.models, params.themes, params.agent_types
        )
        return from_result(result)


class AddAgentParams(BaseModel):
    name: str = Field(description="Name of the new agent")
    model: str | None = Field(default=None, description="Model (optional)")
    theme: str | None = Field(default=None, description="Theme (optional)")
    agent_type: str | None = Field(
        default=None, description=f"Agent type (optional). Available: {AGENT_TYPES}"
    )


class AddAgentTool(BaseTool[AddAgentParams]):
    name: ClassVar[str] = "add_agent"
    description: ClassVar[str] = "Add a single agent to the running horde."
    param_model: ClassVar[type[BaseModel]] = AddAgentParams

    async def execute(self, params: AddAgentParams) -> ToolResult:
        result = await self.manager.add_agent(
            params.name, params.model, params.theme, params.agent_type
        )
        return from_result(result)


class RemoveAgentParams(BaseModel):
    name: str = Field(description="Name of the agent to remove")


class RemoveAgentTool(BaseTool[RemoveAgentParams]):
    name: ClassVar[str] = "remove_agent"
    description: ClassVar[str] = "Remove an agent and close its pane."
    param_model: ClassVar[type[BaseModel]] = RemoveAgentParams

    async def execute(self, params: RemoveAgentParams) -> ToolResult:
        return from_result(await self.manager.remove_agent(params.name))


class ListAgentsParams(BaseModel):
    pass


class ListAgentsTool(BaseTool[ListAgentsParams]):
    name: ClassVar[str] = "list_agents"
    description: ClassVar[str] = "List the agents in the horde."
    param_model: ClassVar[type[BaseModel]] = ListAgentsParams

    async def execute(self, params: ListAgentsParams) -> ToolResult:
        agents = self.manager.list_agents()
        if not agents:
            return ToolOk(output="No agents running")
        return ToolOk(output="\n".join(f"{a.name} ({a.model})" for a in agents))
