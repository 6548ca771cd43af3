"""Configuration — Pydantic models for horde settings."""

from __future__ import annotations

import json
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class TmuxConfig(BaseModel):
    """How to reach tmux and which session to drive."""

    socket_name: str | None = Field(
        default=None, description="tmux server socket name (tmux -L); None for the default server"
    )
    session_name: str = Field(default="horde")
    window_name: str = Field(default="main")
    terminal: str = Field(
        default="xterm",
        description="Terminal emulator launched to attach to the session",
    )
    attach_terminal: bool = Field(
        default=True,
        description="Spawn a terminal attached to the session when it is created",
    )


class AgentLaunchConfig(BaseModel):
    """Agent CLI launch settings.

    ``ready_markers`` are substrings of the agent CLI's footer that only
    appear once it is idle and accepting input. ``pane_markers`` are used to
    tell an empty shell pane from one already hosting an agent.
    """

    command: str = Field(default="opencode")
    ready_markers: list[str] = Field(default_factory=lambda: ["ctrl+p", "tab switch"])
    pane_markers: list[str] = Field(
        default_factory=lambda: ["ctrl+p", "tab switch", "opencode"]
    )
    max_agents: int = Field(default=4, ge=1, le=4)
    default_model: str = Field(default="default")


class TimingConfig(BaseModel):
    """Poll intervals, settle delays and default timeouts (seconds)."""

    ready_poll_interval: float = 0.5
    ready_attempts: int = 60
    settle_min: float = 0.15
    settle_max: float = 0.5
    split_settle: float = 0.1
    menu_settle: float = 0.2
    command_settle: float = 0.2
    response_poll_interval: float = 1.0
    response_timeout: float = 120.0
    confirmation_poll_interval: float = 0.5
    confirmation_timeout: float = 300.0
    message_poll_interval: float = 0.5


class HordeConfig(BaseModel):
    """Top-level horde configuration."""

    tmux: TmuxConfig = Field(default_factory=TmuxConfig)
    agent: AgentLaunchConfig = Field(default_factory=AgentLaunchConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)

    @classmethod
    def load(cls, config_path: str | None = None) -> HordeConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Env vars:
            HORDE_SESSION          - tmux session name
            HORDE_TMUX_SOCKET      - tmux server socket name
            HORDE_AGENT_COMMAND    - Agent CLI launch command
            HORDE_ATTACH_TERMINAL  - "0"/"false" to run headless
            TERMINAL               - Terminal emulator used to attach
        """
        load_dotenv(override=True)

        config_data: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            with open(config_path) as f:
                config_data = json.load(f)

        tmux = config_data.get("tmux", {})

        env_session = os.environ.get("HORDE_SESSION")
        if env_session:
            tmux["session_name"] = env_session

        env_socket = os.environ.get("HORDE_TMUX_SOCKET")
        if env_socket:
            tmux["socket_name"] = env_socket

        env_terminal = os.environ.get("TERMINAL")
        if env_terminal:
            tmux["terminal"] = env_terminal

        env_attach = os.environ.get("HORDE_ATTACH_TERMINAL")
        if env_attach:
            tmux["attach_terminal"] = env_attach.lower() not in ("0", "false", "no")

        if tmux:
            config_data["tmux"] = tmux

        env_command = os.environ.get("HORDE_AGENT_COMMAND")
        if env_command:
            agent = config_data.get("agent", {})
            agent["command"] = env_command
            config_data["agent"] = agent

        return cls.model_validate(config_data)
