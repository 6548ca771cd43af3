"""Shared fixtures: a scripted tmux and a virtual clock."""

from __future__ import annotations

import asyncio

import pytest

from horde.config import HordeConfig
from horde.manager import HordeManager
from horde.tmux.control import CommandResult, TmuxControl

READY_SCREEN = "opencode\n\n  tab switch agent   ctrl+p commands\n"


class FakeClock:
    """Monotonic clock that only moves when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        # Still yield so concurrent tasks interleave
        await asyncio.sleep(0)


class FakeTmux(TmuxControl):
    """In-memory stand-in for the tmux command line.

    Tracks sessions and pane ids, records every invocation, and serves
    pane captures from ``screens`` (falling back to ``default_screen``).
    Command names listed in ``failing`` report failure.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, ...]] = []
        self.sessions: set[str] = set()
        self.panes: list[str] = []
        self.screens: dict[str, str] = {}
        self.default_screen = READY_SCREEN
        self.typed: dict[str, list[str]] = {}
        self.failing: set[str] = set()
        self.terminals: list[tuple[str, str]] = []
        self._next_pane = 0

    def _new_pane(self) -> str:
        pane = f"%{self._next_pane}"
        self._next_pane += 1
        self.panes.append(pane)
        return pane

    async def run(self, *args: str) -> CommandResult:
        self.calls.append(args)
        command = args[0]
        if command in self.failing:
            return CommandResult(False, f"{command}: failed")

        if command == "has-session":
            return CommandResult(args[2] in self.sessions)
        if command == "new-session":
            self.sessions.add(args[args.index("-s") + 1])
            self._new_pane()
            return CommandResult(True)
        if command == "kill-session":
            existed = args[2] in self.sessions
            self.sessions.discard(args[2])
            self.panes.clear()
            return CommandResult(existed, "" if existed else "no such session")
        if command == "split-window":
            return CommandResult(True, self._new_pane() + "\n")
        if command == "display-message":
            target = args[args.index("-t") + 1]
            if target.endswith(".0") and self.panes:
                return CommandResult(True, self.panes[0] + "\n")
            return CommandResult(False, "can't find pane")
        if command == "capture-pane":
            target = args[args.index("-t") + 1]
            return CommandResult(True, self.screens.get(target, self.default_screen))
        if command == "kill-pane":
            target = args[2]
            if target not in self.panes:
                return CommandResult(False, "can't find pane")
            self.panes.remove(target)
            return CommandResult(True)
        if command == "send-keys":
            target = args[2]
            keys = args[-1]
            self.typed.setdefault(target, []).append(keys)
            return CommandResult(True)
        return CommandResult(True)

    async def spawn_terminal(self, terminal: str, session: str) -> None:
        self.terminals.append((terminal, session))

    def commands(self, name: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == name]

    def literal_text(self, target: str) -> list[str]:
        """Everything typed into ``target``, without the Enter presses."""
        return [k for k in self.typed.get(target, []) if k != "Enter"]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tmux() -> FakeTmux:
    return FakeTmux()


@pytest.fixture
def manager(tmux: FakeTmux, clock: FakeClock) -> HordeManager:
    return HordeManager(HordeConfig(), control=tmux, sleep=clock.sleep, clock=clock)
