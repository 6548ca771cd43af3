"""Messaging tools — talk to agents and read the coordinator inbox."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from horde.messaging.inbox import Message
from horde.tool.base import BaseTool, ToolOk, ToolResult, from_result


def format_message(message: Message) -> str:
    return (
        f"[{message.timestamp:%H:%M:%S}] "
        f"{message.sender} -> {message.recipient}: {message.content}"
    )


class SendMessageParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(description="Recipient name (agent name or 'coordinator')")
    message: str = Field(description="Message to send")
    sender: str = Field(
        alias="from", description="Sender name (your agent name, or 'coordinator')"
    )


class SendMessageTool(BaseTool[SendMessageParams]):
    name: ClassVar[str] = "send_message"
    description: ClassVar[str] = "Send a message to an agent or coordinator"
    param_model: ClassVar[type[BaseModel]] = SendMessageParams

    async def execute(self, params: SendMessageParams) -> ToolResult:
        result = await self.manager.send_message(
            params.to, params.message, sender=params.sender
        )
        return from_result(result)


class GetMessagesParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender: str | None = Field(
        default=None, alias="from", description="Filter by sender (optional)"
    )


class GetMessagesTool(BaseTool[GetMessagesParams]):
    name: ClassVar[str] = "get_messages"
    description: ClassVar[str] = "Get all messages in the inbox"
    param_model: ClassVar[type[BaseModel]] = GetMessagesParams

    async def execute(self, params: GetMessagesParams) -> ToolResult:
        messages = self.manager.get_messages(params.sender)
        if not messages:
            return ToolOk(output="No messages in inbox")
        return ToolOk(output="\n\n".join(format_message(m) for m in messages))
