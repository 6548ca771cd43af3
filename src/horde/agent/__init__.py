"""Agent system — registry, state inference, onboarding primers."""

from horde.agent.registry import MAX_AGENTS, AgentRecord, AgentRegistry
from horde.agent.state import AgentAction, AgentState, classify_text

__all__ = [
    "MAX_AGENTS",
    "AgentRecord",
    "AgentRegistry",
    "AgentAction",
    "AgentState",
    "classify_text",
]
