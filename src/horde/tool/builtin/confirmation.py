"""Confirmation tools — ask for, give, and wait for approval."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, Field

from horde.tool.base import BaseTool, ToolError, ToolOk, ToolResult, from_result


class RequestConfirmationParams(BaseModel):
    agent: str = Field(description="Your agent name")
    message: str = Field(description="What needs approval")


class RequestConfirmationTool(BaseTool[RequestConfirmationParams]):
    name: ClassVar[str] = "request_confirmation"
    description: ClassVar[str] = (
        "Ask the coordinator to approve an action. Follow up with "
        "await_confirmation to get the answer."
    )
    param_model: ClassVar[type[BaseModel]] = RequestConfirmationParams

    async def execute(self, params: RequestConfirmationParams) -> ToolResult:
        return from_result(
            await self.manager.request_confirmation(params.agent, params.message)
        )


class ResolveConfirmationParams(BaseModel):
    name: str = Field(description="Agent whose request is answered")
    approved: bool = Field(description="True to approve, false to deny")
    responded_by: str | None = Field(
        default=None, description="Who answered (optional)"
    )


class ResolveConfirmationTool(BaseTool[ResolveConfirmationParams]):
    name: ClassVar[str] = "resolve_confirmation"
    description: ClassVar[str] = (
        "Approve or deny an agent's pending confirmation. If the agent made no "
        "request, answers its on-screen prompt with y/n instead."
    )
    param_model: ClassVar[type[BaseModel]] = ResolveConfirmationParams

    async def execute(self, params: ResolveConfirmationParams) -> ToolResult:
        return from_result(
            await self.manager.resolve_confirmation(
                params.name, params.approved, params.responded_by
            )
        )


class AwaitConfirmationParams(BaseModel):
    agent: str = Field(description="Your agent name")
    timeout: float = Field(default=300, ge=0, description="Seconds to wait")


class AwaitConfirmationTool(BaseTool[AwaitConfirmationParams]):
    name: ClassVar[str] = "await_confirmation"
    description: ClassVar[str] = (
        "Wait for the coordinator to answer your confirmation request."
    )
    param_model: ClassVar[type[BaseModel]] = AwaitConfirmationParams

    async def execute(self, params: AwaitConfirmationParams) -> ToolResult:
        result = await self.manager.await_confirmation(params.agent, params.timeout)
        if not result:
            return ToolError(output="No response")
        return ToolOk(output="approved" if result.value.approved else "denied")
