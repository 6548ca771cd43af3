"""Tests for horde.tmux (TmuxControl, PaneDriver, settle_delay)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock, patch

import pytest
from libtmux import exc

from horde.config import TimingConfig
from horde.result import ErrorKind
from horde.tmux import CommandResult, PaneDriver, TmuxControl, settle_delay

from conftest import READY_SCREEN, FakeClock, FakeTmux


# ---------------------------------------------------------------------------
# TmuxControl
# ---------------------------------------------------------------------------


def _server(stdout=(), stderr=(), returncode=0, error=None) -> Mock:
    """A libtmux server whose ``cmd`` returns a canned tmux_cmd result."""
    server = Mock()
    if error is not None:
        server.cmd.side_effect = error
    else:
        server.cmd.return_value = SimpleNamespace(
            stdout=list(stdout), stderr=list(stderr), returncode=returncode
        )
    return server


class TestTmuxControlRun:
    async def test_success_collects_stdout(self) -> None:
        control = TmuxControl()
        control.server = _server(stdout=["hello"])
        result = await control.run("display-message", "-p", "hello")
        assert result.success
        assert result.output == "hello"
        control.server.cmd.assert_called_once_with("display-message", "-p", "hello")

    async def test_failure_merges_stderr(self) -> None:
        control = TmuxControl()
        control.server = _server(stdout=["out"], stderr=["err"], returncode=1)
        result = await control.run("kill-pane", "-t", "%7")
        assert not result.success
        assert result.output == "out\nerr"

    async def test_missing_binary(self) -> None:
        control = TmuxControl()
        control.server = _server(error=exc.TmuxCommandNotFound())
        result = await control.run("ls")
        assert not result.success
        assert "Failed to run tmux" in result.output

    async def test_nul_byte_argument(self) -> None:
        control = TmuxControl()
        control.server = _server(error=ValueError("embedded null byte"))
        result = await control.send_keys("%1", "hi\x00there", literal=True)
        assert not result.success
        assert "embedded null byte" in result.output

    def test_socket_name_reaches_server_and_attach(self) -> None:
        control = TmuxControl(socket_name="horde-test")
        assert control.server.socket_name == "horde-test"
        assert control.attach_command("team") == [
            "tmux", "-L", "horde-test", "attach", "-t", "team"
        ]
        assert TmuxControl().attach_command("team") == ["tmux", "attach", "-t", "team"]


class TestSpawnTerminal:
    async def test_detached_popen(self) -> None:
        with patch("horde.tmux.control.subprocess.Popen") as popen:
            await TmuxControl().spawn_terminal("kitty", "horde")
        argv = popen.call_args.args[0]
        assert argv == ["kitty", "-e", "tmux", "attach", "-t", "horde"]
        assert popen.call_args.kwargs["start_new_session"] is True

    async def test_launch_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch(
            "horde.tmux.control.subprocess.Popen", side_effect=FileNotFoundError("kitty")
        ):
            await TmuxControl().spawn_terminal("kitty", "horde")
        assert "Could not launch terminal kitty" in caplog.text


class TestTmuxControlHelpers:
    async def test_capture_failure_is_empty(self) -> None:
        control = TmuxControl()
        control.run = AsyncMock(return_value=CommandResult(False, "can't find pane"))
        assert await control.capture_pane("%9") == ""

    async def test_split_returns_pane_id(self) -> None:
        control = TmuxControl()
        control.run = AsyncMock(return_value=CommandResult(True, "%3\n"))
        result = await control.split_window("horde:main")
        assert result.output == "%3"
        control.run.assert_awaited_once_with(
            "split-window", "-t", "horde:main", "-P", "-F", "#{pane_id}"
        )

    async def test_pane_id_rejects_garbage(self) -> None:
        control = TmuxControl()
        control.run = AsyncMock(return_value=CommandResult(True, "oops\n"))
        assert await control.pane_id("horde:main.0") is None

    async def test_literal_send_keys(self) -> None:
        control = TmuxControl()
        control.run = AsyncMock(return_value=CommandResult(True))
        await control.send_keys("%1", "Enter", literal=True)
        control.run.assert_awaited_once_with("send-keys", "-t", "%1", "-l", "Enter")


# ---------------------------------------------------------------------------
# settle_delay
# ---------------------------------------------------------------------------


class TestSettleDelay:
    def test_floor(self) -> None:
        assert settle_delay("hi") == pytest.approx(0.15)

    def test_proportional(self) -> None:
        assert settle_delay("x" * 3000) == pytest.approx(0.3)

    def test_ceiling(self) -> None:
        assert settle_delay("x" * 100_000) == pytest.approx(0.5)


# ---------------------------------------------------------------------------
# PaneDriver
# ---------------------------------------------------------------------------


class TestPaneDriverSend:
    async def test_types_literal_then_enter(self) -> None:
        tmux, clock = FakeTmux(), FakeClock()
        driver = PaneDriver(tmux, sleep=clock.sleep)
        assert await driver.send("%1", "Enter the dragon")
        assert tmux.calls == [
            ("send-keys", "-t", "%1", "-l", "Enter the dragon"),
            ("send-keys", "-t", "%1", "Enter"),
        ]
        assert clock.sleeps == [pytest.approx(0.15)]

    async def test_failure_stops_before_enter(self) -> None:
        tmux = FakeTmux()
        tmux.failing.add("send-keys")
        driver = PaneDriver(tmux, sleep=FakeClock().sleep)
        result = await driver.send("%1", "hi")
        assert result.kind == ErrorKind.EXTERNAL_COMMAND_FAILED
        assert len(tmux.calls) == 1


class TestWaitForReady:
    async def test_ready_immediately(self) -> None:
        tmux, clock = FakeTmux(), FakeClock()
        driver = PaneDriver(tmux, sleep=clock.sleep)
        assert await driver.wait_for_ready("%0")
        assert clock.sleeps == []

    async def test_ready_after_a_few_polls(self) -> None:
        tmux, clock = FakeTmux(), FakeClock()
        tmux.default_screen = "booting"
        driver = PaneDriver(tmux, sleep=clock.sleep)

        original_sleep = clock.sleep

        async def sleep(seconds: float) -> None:
            await original_sleep(seconds)
            if len(clock.sleeps) == 3:
                tmux.default_screen = READY_SCREEN

        driver._sleep = sleep
        assert await driver.wait_for_ready("%0")
        assert len(tmux.commands("capture-pane")) == 4

    async def test_timeout_after_sixty_attempts(self) -> None:
        tmux, clock = FakeTmux(), FakeClock()
        tmux.default_screen = "$ "
        driver = PaneDriver(tmux, sleep=clock.sleep)
        result = await driver.wait_for_ready("%0")
        assert result.kind == ErrorKind.TIMEOUT
        assert len(tmux.commands("capture-pane")) == 60
        assert clock.now == pytest.approx(30)

    async def test_custom_markers_and_timing(self) -> None:
        tmux, clock = FakeTmux(), FakeClock()
        tmux.default_screen = ">>> "
        timing = TimingConfig(ready_attempts=2, ready_poll_interval=1.0)
        driver = PaneDriver(tmux, timing=timing, ready_markers=[">>>"], sleep=clock.sleep)
        assert await driver.wait_for_ready("%0")
