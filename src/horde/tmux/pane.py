"""Pane input injection and readiness polling."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from horde.config import TimingConfig
from horde.result import Err, ErrorKind, Ok, Result
from horde.tmux.control import TmuxControl

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_READY_MARKERS = ("ctrl+p", "tab switch")


def settle_delay(text: str, floor: float = 0.15, ceiling: float = 0.5) -> float:
    """Seconds to wait between typing ``text`` and pressing Enter.

    One millisecond per ten characters, clamped to [floor, ceiling].
    """
    return min(max(len(text) / 10 / 1000, floor), ceiling)


class PaneDriver:
    """Types into panes and polls them for readiness.

    Sleep is injectable so tests can run the polling loops instantly.
    """

    def __init__(
        self,
        control: TmuxControl,
        timing: TimingConfig | None = None,
        ready_markers: tuple[str, ...] | list[str] = DEFAULT_READY_MARKERS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.control = control
        self.timing = timing or TimingConfig()
        self.ready_markers = tuple(ready_markers)
        self._sleep = sleep

    async def send(self, target: str, text: str) -> Result:
        """Type ``text`` literally into ``target``, then press Enter.

        The pause between the two keeps a busy agent CLI from seeing Enter
        before it has consumed the text.
        """
        typed = await self.control.send_keys(target, text, literal=True)
        if not typed.success:
            return Err(
                ErrorKind.EXTERNAL_COMMAND_FAILED,
                f"send-keys to {target} failed: {typed.output.strip()}",
            )

        await self._sleep(
            settle_delay(text, self.timing.settle_min, self.timing.settle_max)
        )

        entered = await self.control.send_keys(target, "Enter")
        if not entered.success:
            return Err(
                ErrorKind.EXTERNAL_COMMAND_FAILED,
                f"Enter to {target} failed: {entered.output.strip()}",
            )
        return Ok()

    async def wait_for_ready(self, target: str) -> Result:
        """Poll ``target`` until a ready marker shows up.

        Readiness is advisory: on timeout callers log and carry on.
        """
        attempts = self.timing.ready_attempts
        for _ in range(attempts):
            output = await self.control.capture_pane(target)
            if any(marker in output for marker in self.ready_markers):
                return Ok()
            await self._sleep(self.timing.ready_poll_interval)

        waited = attempts * self.timing.ready_poll_interval
        return Err(ErrorKind.TIMEOUT, f"{target} not ready after {waited:.0f}s")
