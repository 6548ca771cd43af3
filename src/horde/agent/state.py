"""Agent state inference from captured pane text.

The agent CLI offers no status channel, so state is guessed from the
footer it draws: a handful of keywords in the last few lines of the
pane. Classification is a pure function over text plus the agent's
outstanding confirmation request, if any.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

from horde.messaging.confirmation import ConfirmationRequest

TAIL_LINES = 10


class AgentAction(enum.StrEnum):
    WAITING_CONFIRMATION = "waiting_confirmation"  # Agent asked via request_confirmation
    PENDING_CONFIRMATION = "pending_confirmation"  # Built-in approval prompt on screen
    WORKING = "working"
    IDLE = "idle"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AgentState:
    """Derived state of one agent. Recomputed on every query."""

    action: AgentAction
    status: str
    context_warning: bool = False
    pending_confirmation: ConfirmationRequest | None = None


def _approval_prompt(text: str) -> bool:
    return "(y/n)" in text or "approve" in text or "permission" in text


def _busy(text: str) -> bool:
    return "esc" in text and "interrupt" in text


def _ready(text: str) -> bool:
    return "tab" in text and "switch" in text


# Checked in order; the first match wins.
_TEXT_RULES: list[tuple[Callable[[str], bool], AgentAction, str]] = [
    (_approval_prompt, AgentAction.PENDING_CONFIRMATION, "waiting for approval"),
    (_busy, AgentAction.WORKING, "processing"),
    (_ready, AgentAction.IDLE, "ready"),
]


def tail_text(text: str, lines: int = TAIL_LINES) -> str:
    """Last ``lines`` non-empty lines of ``text``, lowercased."""
    kept = [line for line in text.split("\n") if line]
    return "\n".join(kept[-lines:]).lower()


def classify_text(
    text: str, pending: ConfirmationRequest | None = None
) -> AgentState:
    """Classify captured pane text.

    An outstanding agent-initiated confirmation pre-empts everything the
    text says. The context warning flag is independent of the action.
    """
    tail = tail_text(text)
    context_warning = "context" in tail and "warning" in tail

    if pending is not None:
        return AgentState(
            AgentAction.WAITING_CONFIRMATION,
            "awaiting approval",
            context_warning,
            pending,
        )

    for predicate, action, status in _TEXT_RULES:
        if predicate(tail):
            return AgentState(action, status, context_warning)

    return AgentState(AgentAction.UNKNOWN, "state not detected", context_warning)
