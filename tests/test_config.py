"""Tests for horde.config.HordeConfig."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from horde.config import AgentLaunchConfig, HordeConfig

_ENV_VARS = (
    "HORDE_SESSION",
    "HORDE_TMUX_SOCKET",
    "HORDE_AGENT_COMMAND",
    "HORDE_ATTACH_TERMINAL",
    "TERMINAL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_defaults(self) -> None:
        config = HordeConfig()
        assert config.tmux.session_name == "horde"
        assert config.tmux.window_name == "main"
        assert config.agent.command == "opencode"
        assert config.agent.max_agents == 4
        assert config.agent.ready_markers == ["ctrl+p", "tab switch"]
        assert config.timing.ready_attempts == 60
        assert config.timing.ready_poll_interval == 0.5
        assert config.timing.response_timeout == 120
        assert config.timing.confirmation_timeout == 300

    def test_agent_cap_cannot_exceed_four(self) -> None:
        with pytest.raises(ValidationError):
            AgentLaunchConfig(max_agents=5)


class TestLoad:
    def test_load_without_file(self) -> None:
        assert HordeConfig.load() == HordeConfig()

    def test_load_from_file(self, tmp_path) -> None:
        path = tmp_path / "horde.json"
        path.write_text(json.dumps({"tmux": {"session_name": "team"}, "timing": {"ready_attempts": 5}}))
        config = HordeConfig.load(str(path))
        assert config.tmux.session_name == "team"
        assert config.timing.ready_attempts == 5

    def test_env_beats_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "horde.json"
        path.write_text(json.dumps({"tmux": {"session_name": "team"}}))
        monkeypatch.setenv("HORDE_SESSION", "override")
        monkeypatch.setenv("HORDE_AGENT_COMMAND", "opencode --print-logs")
        monkeypatch.setenv("TERMINAL", "kitty")
        config = HordeConfig.load(str(path))
        assert config.tmux.session_name == "override"
        assert config.agent.command == "opencode --print-logs"
        assert config.tmux.terminal == "kitty"

    @pytest.mark.parametrize("value,expected", [("0", False), ("false", False), ("1", True)])
    def test_attach_terminal_env(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        monkeypatch.setenv("HORDE_ATTACH_TERMINAL", value)
        assert HordeConfig.load().tmux.attach_terminal is expected
