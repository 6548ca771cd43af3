"""Agent registry — the live agents of the horde session."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from horde.result import ErrorKind

logger = logging.getLogger(__name__)

MAX_AGENTS = 4


@dataclass(frozen=True)
class AgentRecord:
    """A running agent.

    ``pane_target`` is a tmux target string; nothing outside the tmux
    layer interprets it.
    """

    name: str
    model: str
    pane_target: str


class AgentRegistry:
    """Thread-safe map of agent name to record, capped at ``capacity``.

    Adding an agent is two-phase: ``reserve`` claims the name and a slot
    before the (slow) launch, ``commit`` stores the record once the pane is
    up, ``release`` gives the slot back if the launch is abandoned. Reserved
    names count against the cap, so concurrent adds cannot overshoot it.
    """

    def __init__(self, capacity: int = MAX_AGENTS) -> None:
        self.capacity = capacity
        self._agents: dict[str, AgentRecord] = {}
        self._reserved: set[str] = set()
        self._lock = threading.Lock()

    def reserve(self, name: str) -> ErrorKind | None:
        """Claim ``name``. Returns the reason on failure, None on success."""
        with self._lock:
            if name in self._agents or name in self._reserved:
                return ErrorKind.CONFLICT
            if len(self._agents) + len(self._reserved) >= self.capacity:
                return ErrorKind.CAPACITY_EXCEEDED
            self._reserved.add(name)
        return None

    def commit(self, record: AgentRecord) -> None:
        with self._lock:
            self._reserved.discard(record.name)
            self._agents[record.name] = record
        logger.info("Registered agent %s (%s) at %s", record.name, record.model, record.pane_target)

    def release(self, name: str) -> None:
        with self._lock:
            self._reserved.discard(name)

    def remove(self, name: str) -> AgentRecord | None:
        with self._lock:
            return self._agents.pop(name, None)

    def get(self, name: str) -> AgentRecord | None:
        with self._lock:
            return self._agents.get(name)

    def snapshot(self) -> list[AgentRecord]:
        """Copy of all records in registration order."""
        with self._lock:
            return list(self._agents.values())

    def names(self) -> list[str]:
        with self._lock:
            return list(self._agents.keys())

    def pane_targets(self) -> set[str]:
        with self._lock:
            return {a.pane_target for a in self._agents.values()}

    def clear(self) -> None:
        with self._lock:
            self._agents.clear()
            self._reserved.clear()

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._agents
