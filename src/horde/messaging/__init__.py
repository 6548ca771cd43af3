"""Messaging — the coordinator inbox and the confirmation handshake."""

from horde.messaging.confirmation import (
    ConfirmationBook,
    ConfirmationRequest,
    ConfirmationResponse,
)
from horde.messaging.inbox import COORDINATOR, Inbox, Message, is_coordinator

__all__ = [
    "ConfirmationBook",
    "ConfirmationRequest",
    "ConfirmationResponse",
    "COORDINATOR",
    "Inbox",
    "Message",
    "is_coordinator",
]
