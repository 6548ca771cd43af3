"""Coordinator inbox — append-only message queue."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

from horde.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)

COORDINATOR = "coordinator"


def is_coordinator(name: str) -> bool:
    """True if ``name`` addresses the coordinator inbox (case-insensitive)."""
    return name.casefold() == COORDINATOR


@dataclass(frozen=True)
class Message:
    sender: str
    recipient: str
    content: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Inbox:
    """Mailbox of the coordinator (the external caller).

    Messages are kept in insertion order for the lifetime of the process;
    nothing is ever removed, reordered or deduplicated. Readers always get
    a snapshot.
    """

    def __init__(
        self,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._messages: list[Message] = []
        self._lock = threading.Lock()
        self._sleep = sleep
        self._clock = clock

    def post(self, sender: str, content: str, recipient: str = COORDINATOR) -> Message:
        """Append a message and return it."""
        message = Message(sender=sender, recipient=recipient, content=content)
        with self._lock:
            self._messages.append(message)
        logger.debug("Inbox <- %s (%d chars)", sender, len(content))
        return message

    def messages(self, sender: str | None = None) -> list[Message]:
        """Snapshot of the inbox, optionally only messages from ``sender``."""
        with self._lock:
            snapshot = list(self._messages)
        if sender is None:
            return snapshot
        return [m for m in snapshot if m.sender == sender]

    async def wait_for_message(
        self,
        sender: str | None = None,
        timeout: float = 60.0,
        after: int | None = None,
        poll_interval: float = 0.5,
    ) -> Result:
        """Wait for the next message from ``sender``.

        ``after`` is an index into the full inbox; only messages at that
        position or later count. It defaults to the inbox length at call
        time, so by default only mail that arrives during the wait is seen.
        Success carries ``(index, message)``; pass ``index + 1`` as the next
        ``after`` to keep reading where this call stopped.
        """
        if after is None:
            after = len(self)
        deadline = self._clock() + timeout
        while True:
            with self._lock:
                pending = self._messages[after:]
            for offset, message in enumerate(pending):
                if sender is None or message.sender == sender:
                    return Ok((after + offset, message))
            if self._clock() >= deadline:
                who = f" from '{sender}'" if sender else ""
                return Err(ErrorKind.TIMEOUT, f"No message{who} within {timeout:g}s")
            await self._sleep(poll_interval)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
