"""Human-in-the-loop confirmation handshake.

Per agent name the handshake moves ``none -> requested -> resolved ->
none``. The resolved state only lasts until a waiter consumes the
response.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConfirmationRequest:
    agent_name: str
    message: str
    requested_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class ConfirmationResponse:
    approved: bool
    responded_by: str | None = None
    responded_at: datetime = field(default_factory=_now)


class ConfirmationBook:
    """Outstanding requests and unconsumed responses, keyed by agent name.

    A request and its response are never stored together: resolving pops
    the request and stores the response under one lock. A newer request
    for the same agent replaces the older one (latest wins).
    """

    def __init__(
        self,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._requests: dict[str, ConfirmationRequest] = {}
        self._responses: dict[str, ConfirmationResponse] = {}
        self._lock = threading.Lock()
        self._sleep = sleep
        self._clock = clock

    def request(self, agent_name: str, message: str) -> ConfirmationRequest:
        request = ConfirmationRequest(agent_name=agent_name, message=message)
        with self._lock:
            replaced = self._requests.get(agent_name)
            self._requests[agent_name] = request
        if replaced is not None:
            logger.info("Confirmation request for %s replaced an unresolved one", agent_name)
        return request

    def pending(self, agent_name: str) -> ConfirmationRequest | None:
        with self._lock:
            return self._requests.get(agent_name)

    def resolve(
        self, agent_name: str, approved: bool, responded_by: str | None = None
    ) -> bool:
        """Answer the outstanding request for ``agent_name``.

        Returns False when there was nothing to answer.
        """
        with self._lock:
            if self._requests.pop(agent_name, None) is None:
                return False
            self._responses[agent_name] = ConfirmationResponse(
                approved=approved, responded_by=responded_by
            )
        logger.info(
            "Confirmation for %s %s by %s",
            agent_name,
            "approved" if approved else "denied",
            responded_by or "unknown",
        )
        return True

    def take_response(self, agent_name: str) -> ConfirmationResponse | None:
        """Remove and return the response for ``agent_name``, if any."""
        with self._lock:
            return self._responses.pop(agent_name, None)

    async def wait(
        self, agent_name: str, timeout: float = 300.0, poll_interval: float = 0.5
    ) -> ConfirmationResponse | None:
        """Wait for a response and consume it.

        Only one waiter ever receives a given response. On timeout the
        outstanding request, if any, is withdrawn and None is returned.
        """
        deadline = self._clock() + timeout
        while True:
            response = self.take_response(agent_name)
            if response is not None:
                return response
            if self._clock() >= deadline:
                break
            await self._sleep(poll_interval)

        with self._lock:
            withdrawn = self._requests.pop(agent_name, None)
        if withdrawn is not None:
            logger.info("Confirmation request for %s timed out", agent_name)
        return None

    def discard(self, agent_name: str) -> None:
        """Forget everything about ``agent_name``."""
        with self._lock:
            self._requests.pop(agent_name, None)
            self._responses.pop(agent_name, None)
