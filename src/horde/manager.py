"""Horde manager — session bootstrap, agent lifecycle, messaging.

One manager owns one tmux session. Agents are launched into panes of
that session's single window and driven by typing into their panes;
their state is read back by capturing the pane text.

Every public operation returns ``Ok``/``Err``. Structural tmux work
(session creation, splits, layout, pane kills) and whole create/add
flows are serialized on a session lock; captures and message injection
run freely.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import time
from typing import Awaitable, Callable

from horde.agent.primer import DEFAULT_ROLE, horde_primer, join_primer
from horde.agent.registry import AgentRecord, AgentRegistry
from horde.agent.state import AgentAction, classify_text
from horde.config import HordeConfig
from horde.messaging.confirmation import ConfirmationBook
from horde.messaging.inbox import COORDINATOR, Inbox, Message, is_coordinator
from horde.result import Err, ErrorKind, Ok, Result
from horde.tmux.control import TmuxControl
from horde.tmux.pane import PaneDriver

logger = logging.getLogger(__name__)


def split_list(value: str | None) -> list[str]:
    """Parse a comma-separated argument: trimmed, empty entries dropped."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _at(items: list[str], index: int) -> str | None:
    return items[index] if index < len(items) else None


class HordeManager:
    """Coordinates the agents living in one tmux session."""

    def __init__(
        self,
        config: HordeConfig | None = None,
        control: TmuxControl | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or HordeConfig()
        self.control = control or TmuxControl(self.config.tmux.socket_name)
        self.panes = PaneDriver(
            self.control,
            timing=self.config.timing,
            ready_markers=self.config.agent.ready_markers,
            sleep=sleep,
        )
        self.registry = AgentRegistry(capacity=self.config.agent.max_agents)
        self.inbox = Inbox(sleep=sleep, clock=clock)
        self.confirmations = ConfirmationBook(sleep=sleep, clock=clock)
        self._sleep = sleep
        self._clock = clock
        self._initialized = False
        self._session_lock = asyncio.Lock()

    @property
    def session(self) -> str:
        return self.config.tmux.session_name

    @property
    def window_target(self) -> str:
        return f"{self.session}:{self.config.tmux.window_name}"

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def ensure_session(self) -> Result:
        """Make sure the tmux session exists.

        The first call in a process lifetime kills any session of the same
        name left behind by a previous run before creating a fresh one.
        """
        async with self._session_lock:
            return await self._ensure_session()

    async def _ensure_session(self) -> Result:
        if not self._initialized:
            await self.control.kill_session(self.session)
            self._initialized = True

        if await self.control.has_session(self.session):
            return Ok(message=f"Session '{self.session}' ready")

        created = await self.control.new_session(
            self.session, self.config.tmux.window_name
        )
        if not created.success:
            logger.error("Could not create tmux session %s: %s", self.session, created.output.strip())
            return Err(
                ErrorKind.EXTERNAL_COMMAND_FAILED,
                f"Failed to create tmux session '{self.session}': {created.output.strip()}",
            )

        # Pane titles carry the agent names
        await self.control.set_option(self.session, "pane-border-status", "top")
        await self.control.set_option(
            self.session, "pane-border-format", " #{pane_title} "
        )

        if self.config.tmux.attach_terminal:
            await self.control.spawn_terminal(self.config.tmux.terminal, self.session)

        logger.info("Created tmux session %s", self.session)
        return Ok(message=f"Session '{self.session}' created")

    # ------------------------------------------------------------------
    # Agent lifecycle
    # ------------------------------------------------------------------

    async def create_horde(
        self,
        names: str,
        models: str | None = None,
        themes: str | None = None,
        agent_types: str | None = None,
    ) -> Result:
        """Start a fresh horde, replacing whatever session existed.

        All list arguments are comma-separated and positional: the i-th
        model, theme and agent type belong to the i-th name. Agents are
        launched one at a time; each must finish starting up before the
        next pane is split.
        """
        name_list = split_list(names)
        model_list = split_list(models)
        theme_list = split_list(themes)
        type_list = split_list(agent_types)

        if not name_list:
            return Err(ErrorKind.INVALID_INPUT, "No agents specified")
        if len(name_list) > self.registry.capacity:
            return Err(
                ErrorKind.INVALID_INPUT,
                f"Maximum {self.registry.capacity} agents supported",
            )
        if len(set(name_list)) != len(name_list):
            return Err(ErrorKind.INVALID_INPUT, "Agent names must be unique")

        created: list[str] = []
        async with self._session_lock:
            self.registry.clear()
            self._initialized = False
            session = await self._ensure_session()
            if not session:
                return session

            for i, name in enumerate(name_list):
                model = _at(model_list, i)
                if i == 0:
                    first = f"{self.window_target}.0"
                    target = await self.control.pane_id(first) or first
                else:
                    split = await self._split_pane()
                    if not split:
                        done = ", ".join(created) or "none"
                        return Err(split.kind, f"{split.detail} (created so far: {done})")
                    target = split.value

                self.registry.reserve(name)
                launched = await self._launch(
                    name, target, model, _at(theme_list, i), _at(type_list, i)
                )
                if not launched:
                    self.registry.release(name)
                    return launched

                label = model or self.config.agent.default_model
                self.registry.commit(AgentRecord(name, label, target))
                created.append(f"'{name}' ({label})")

        roles = {
            name: _at(type_list, i) or DEFAULT_ROLE for i, name in enumerate(name_list)
        }
        for name in name_list:
            await self.send_message(
                name, horde_primer(name, roles[name], roles), sender=COORDINATOR
            )

        return Ok(
            self.registry.snapshot(),
            f"Created horde with agents: {', '.join(created)}",
        )

    async def add_agent(
        self,
        name: str,
        model: str | None = None,
        theme: str | None = None,
        agent_type: str | None = None,
    ) -> Result:
        """Add one agent to the running session."""
        name = name.strip()
        if not name:
            return Err(ErrorKind.INVALID_INPUT, "Agent name is required")

        label = model or self.config.agent.default_model
        async with self._session_lock:
            refused = self.registry.reserve(name)
            if refused is ErrorKind.CONFLICT:
                return Err(refused, f"Agent '{name}' already exists")
            if refused is ErrorKind.CAPACITY_EXCEEDED:
                return Err(refused, f"Maximum {self.registry.capacity} agents supported")

            committed = False
            try:
                session = await self._ensure_session()
                if not session:
                    return session

                pane = await self._allocate_pane()
                if not pane:
                    return pane
                target = pane.value

                launched = await self._launch(name, target, model, theme, agent_type)
                if not launched:
                    return launched

                self.registry.commit(AgentRecord(name, label, target))
                committed = True
            finally:
                if not committed:
                    self.registry.release(name)

        peers = [n for n in self.registry.names() if n != name]
        await self.send_message(
            name,
            join_primer(name, agent_type or DEFAULT_ROLE, peers),
            sender=COORDINATOR,
        )
        return Ok(self.registry.get(name), f"Added agent '{name}' ({label})")

    async def remove_agent(self, name: str) -> Result:
        """Kill the agent's pane and forget the agent."""
        record = self.registry.get(name)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"Agent '{name}' not found")

        async with self._session_lock:
            killed = await self.control.kill_pane(record.pane_target)
            if self.registry.remove(name) is None:
                return Err(ErrorKind.NOT_FOUND, f"Agent '{name}' not found")

        if not killed.success:
            logger.warning(
                "kill-pane %s for %s failed: %s",
                record.pane_target,
                name,
                killed.output.strip(),
            )
        self.confirmations.discard(name)
        logger.info("Removed agent %s", name)
        return Ok(record, f"Removed agent '{name}'")

    def list_agents(self) -> list[AgentRecord]:
        """Point-in-time copy of all agents."""
        return self.registry.snapshot()

    async def _split_pane(self) -> Result:
        split = await self.control.split_window(self.window_target)
        if not split.success or not split.output:
            return Err(
                ErrorKind.EXTERNAL_COMMAND_FAILED,
                f"Failed to split window: {split.output}",
            )
        await self.control.select_layout(self.window_target, "tiled")
        await self._sleep(self.config.timing.split_settle)
        return Ok(split.output)

    async def _allocate_pane(self) -> Result:
        """Pick a pane for a new agent.

        The window's first pane is reused when no agent owns it and it does
        not look like it hosts one (blank, or none of the agent markers).
        """
        first = await self.control.pane_id(f"{self.window_target}.0")
        if first is not None and first not in self.registry.pane_targets():
            text = await self.control.capture_pane(first)
            markers = self.config.agent.pane_markers
            if not text.strip() or not any(m in text for m in markers):
                return Ok(first)
        return await self._split_pane()

    async def _launch(
        self,
        name: str,
        target: str,
        model: str | None,
        theme: str | None,
        agent_type: str | None,
    ) -> Result:
        """Start the agent CLI in ``target`` and configure it.

        Readiness waits are best effort: a slow agent is logged and the
        sequence continues.
        """
        flags: list[str] = []
        if model:
            flags += ["--model", model]
        if agent_type:
            flags += ["--agent", agent_type]
        command = " ".join([self.config.agent.command, shlex.join(flags)]).strip()

        sent = await self.panes.send(target, command)
        if not sent:
            return sent
        logger.info("Launching %s in %s: %s", name, target, command)
        await self._wait_ready(name, target)

        if theme:
            await self._menu_select(name, target, "/theme", theme)
        if model:
            # Model picker lists bare names, not provider/model
            await self._menu_select(name, target, "/model", model.rsplit("/", 1)[-1])

        await self.control.set_pane_title(target, name)
        return Ok()

    async def _menu_select(self, name: str, target: str, command: str, choice: str) -> None:
        await self.panes.send(target, command)
        await self._sleep(self.config.timing.menu_settle)
        await self.panes.send(target, choice)
        await self._wait_ready(name, target)

    async def _wait_ready(self, name: str, target: str) -> None:
        ready = await self.panes.wait_for_ready(target)
        if not ready:
            logger.warning("Agent %s: %s, continuing", name, ready.detail)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send_message(
        self, to: str, content: str, sender: str | None = None
    ) -> Result:
        """Deliver ``content`` to an agent's pane or to the coordinator inbox."""
        if is_coordinator(to):
            message = self.inbox.post(sender or "unknown", content)
            return Ok(message, "Message queued for coordinator")

        record = self.registry.get(to)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"Agent '{to}' not found")

        sent = await self.panes.send(record.pane_target, content)
        if not sent:
            return sent
        return Ok(message=f"Message sent to '{to}'")

    def get_messages(self, sender: str | None = None) -> list[Message]:
        """Inbox snapshot in arrival order, optionally filtered by sender."""
        return self.inbox.messages(sender)

    async def wait_for_message(
        self,
        sender: str | None = None,
        timeout: float = 60.0,
        after: int | None = None,
    ) -> Result:
        """Block until the next matching inbox message.

        Returns ``Ok((index, message))``; see ``Inbox.wait_for_message``.
        """
        return await self.inbox.wait_for_message(
            sender,
            timeout=timeout,
            after=after,
            poll_interval=self.config.timing.message_poll_interval,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    async def get_agent_state(self, name: str) -> Result:
        record = self.registry.get(name)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"Agent '{name}' not found")

        text = await self.control.capture_pane(record.pane_target)
        if not text.strip():
            return Err(ErrorKind.CAPTURE_FAILED, f"Capture of '{name}' failed")

        return Ok(classify_text(text, self.confirmations.pending(name)))

    async def wait_for_response(
        self, name: str, timeout: float | None = None
    ) -> Result:
        """Wait until the agent goes idle and return its pane text.

        Fails early if the agent stops at a built-in approval prompt. A
        failed capture is retried until the deadline.
        """
        if timeout is None:
            timeout = self.config.timing.response_timeout
        deadline = self._clock() + timeout

        while True:
            record = self.registry.get(name)
            if record is None:
                return Err(ErrorKind.NOT_FOUND, f"Agent '{name}' not found")

            text = await self.control.capture_pane(record.pane_target)
            if text.strip():
                state = classify_text(text, self.confirmations.pending(name))
                if state.action is AgentAction.IDLE:
                    return Ok(text, f"Agent '{name}' is idle")
                if state.action is AgentAction.PENDING_CONFIRMATION:
                    return Err(
                        ErrorKind.PENDING_CONFIRMATION,
                        f"Agent '{name}' is waiting for approval",
                    )

            if self._clock() >= deadline:
                return Err(
                    ErrorKind.TIMEOUT,
                    f"Agent '{name}' did not respond within {timeout:g}s",
                )
            await self._sleep(self.config.timing.response_poll_interval)

    # ------------------------------------------------------------------
    # Confirmations
    # ------------------------------------------------------------------

    async def request_confirmation(self, agent_name: str, message: str) -> Result:
        """Ask the coordinator to approve something on behalf of an agent."""
        if agent_name not in self.registry:
            return Err(ErrorKind.NOT_FOUND, f"Agent '{agent_name}' not found")

        request = self.confirmations.request(agent_name, message)
        self.inbox.post(agent_name, f"[CONFIRMATION REQUESTED] {message}")
        return Ok(request, f"Confirmation requested for '{agent_name}'")

    async def resolve_confirmation(
        self, name: str, approved: bool, responded_by: str | None = None
    ) -> Result:
        """Answer a confirmation.

        Without an agent-initiated request the answer is typed into the
        pane as ``y``/``n`` for the agent CLI's own approval prompt.
        """
        verdict = "approved" if approved else "denied"
        if self.confirmations.resolve(name, approved, responded_by):
            return Ok(message=f"Confirmation for '{name}' {verdict}")

        record = self.registry.get(name)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"Agent '{name}' not found")

        key = "y" if approved else "n"
        sent = await self.panes.send(record.pane_target, key)
        if not sent:
            return sent
        return Ok(message=f"Sent '{key}' to '{name}' ({verdict})")

    async def await_confirmation(
        self, agent_name: str, timeout: float | None = None
    ) -> Result:
        """Wait for the coordinator's answer to ``agent_name``'s request."""
        if timeout is None:
            timeout = self.config.timing.confirmation_timeout
        response = await self.confirmations.wait(
            agent_name,
            timeout=timeout,
            poll_interval=self.config.timing.confirmation_poll_interval,
        )
        if response is None:
            return Err(ErrorKind.TIMEOUT, f"No response for '{agent_name}'")
        verdict = "approved" if response.approved else "denied"
        return Ok(response, f"Request {verdict} by {response.responded_by or 'unknown'}")

    # ------------------------------------------------------------------
    # Raw pane access
    # ------------------------------------------------------------------

    async def check_on_agent(self, name: str, lines: int = 30) -> Result:
        """Last ``lines`` lines of the agent's pane, unfiltered."""
        record = self.registry.get(name)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"Agent '{name}' not found")

        text = await self.control.capture_pane(record.pane_target)
        tail = text.split("\n")[-lines:] if lines > 0 else []
        return Ok("\n".join(tail))

    async def execute_command(self, name: str, command: str) -> Result:
        """Type a command (e.g. ``/compact``) into the agent's pane."""
        record = self.registry.get(name)
        if record is None:
            return Err(ErrorKind.NOT_FOUND, f"Agent '{name}' not found")

        sent = await self.panes.send(record.pane_target, command)
        if not sent:
            return sent
        await self._sleep(self.config.timing.command_settle)
        return Ok(message=f"Command '{command}' executed on agent '{name}'")
