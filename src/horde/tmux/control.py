"""tmux control adapter — run tmux commands and collect their output."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from dataclasses import dataclass

import libtmux
from libtmux import exc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one tmux invocation.

    ``output`` is stdout followed by stderr; callers never need to tell
    them apart.
    """

    success: bool
    output: str = ""


class TmuxControl:
    """Thin async wrapper around a ``libtmux.Server``.

    Every call is one ``Server.cmd`` invocation (an argument vector, never
    a shell string) run in a worker thread. The result reports success
    plus combined output. Nothing is retried.
    """

    def __init__(self, socket_name: str | None = None) -> None:
        self.socket_name = socket_name
        self.server = libtmux.Server(socket_name=socket_name)

    async def run(self, *args: str) -> CommandResult:
        """Run ``tmux <args>`` and return its result."""
        logger.debug("tmux %s", " ".join(args))
        try:
            proc = await asyncio.to_thread(self.server.cmd, *args)
        except (exc.LibTmuxException, OSError, ValueError) as e:
            # Missing tmux binary, or an argument the OS cannot pass (NUL byte)
            logger.error("Failed to run tmux %s: %s", args[0] if args else "", e)
            return CommandResult(False, f"Failed to run tmux: {e}")

        output = "\n".join(list(proc.stdout) + list(proc.stderr))
        return CommandResult(proc.returncode == 0, output)

    # ------------------------------------------------------------------
    # Session / window structure
    # ------------------------------------------------------------------

    async def has_session(self, session: str) -> bool:
        return (await self.run("has-session", "-t", session)).success

    async def new_session(self, session: str, window: str) -> CommandResult:
        return await self.run("new-session", "-d", "-s", session, "-n", window)

    async def kill_session(self, session: str) -> CommandResult:
        return await self.run("kill-session", "-t", session)

    async def set_option(self, session: str, option: str, value: str) -> CommandResult:
        return await self.run("set-option", "-t", session, option, value)

    async def split_window(self, window_target: str) -> CommandResult:
        """Split the window; on success ``output`` is the new pane's id."""
        result = await self.run(
            "split-window", "-t", window_target, "-P", "-F", "#{pane_id}"
        )
        return CommandResult(result.success, result.output.strip())

    async def pane_id(self, target: str) -> str | None:
        """Resolve any pane target to its stable ``%N`` id."""
        result = await self.run("display-message", "-p", "-t", target, "#{pane_id}")
        pane = result.output.strip()
        if not result.success or not pane.startswith("%"):
            return None
        return pane

    async def select_layout(self, window_target: str, layout: str = "tiled") -> CommandResult:
        return await self.run("select-layout", "-t", window_target, layout)

    # ------------------------------------------------------------------
    # Panes
    # ------------------------------------------------------------------

    async def set_pane_title(self, target: str, title: str) -> CommandResult:
        return await self.run("select-pane", "-t", target, "-T", title)

    async def kill_pane(self, target: str) -> CommandResult:
        return await self.run("kill-pane", "-t", target)

    async def send_keys(self, target: str, keys: str, literal: bool = False) -> CommandResult:
        """Send keys to a pane. With ``literal`` the text is not parsed as key names."""
        if literal:
            return await self.run("send-keys", "-t", target, "-l", keys)
        return await self.run("send-keys", "-t", target, keys)

    async def capture_pane(self, target: str) -> str:
        """Return the visible text of a pane, or "" if it cannot be captured."""
        result = await self.run("capture-pane", "-t", target, "-p")
        if not result.success:
            logger.debug("capture-pane %s failed: %s", target, result.output.strip())
            return ""
        return result.output

    # ------------------------------------------------------------------
    # Terminal
    # ------------------------------------------------------------------

    def attach_command(self, session: str) -> list[str]:
        """Argument vector that attaches a client to ``session``."""
        argv = ["tmux"]
        if self.socket_name:
            argv += ["-L", self.socket_name]
        return argv + ["attach", "-t", session]

    async def spawn_terminal(self, terminal: str, session: str) -> None:
        """Open a terminal emulator attached to ``session``.

        Fire-and-forget: the emulator runs detached in its own session and
        is never waited on.
        """
        try:
            subprocess.Popen(
                [terminal, "-e", *self.attach_command(session)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            logger.warning("Could not launch terminal %s: %s", terminal, e)
            return
        logger.info("Launched %s attached to tmux session %s", terminal, session)
