"""Tests for horde.agent.state (classify_text, tail_text)."""

from __future__ import annotations

import enum

from horde.agent.state import AgentAction, classify_text, tail_text
from horde.messaging.confirmation import ConfirmationRequest


# ---------------------------------------------------------------------------
# AgentAction
# ---------------------------------------------------------------------------


class TestAgentAction:
    def test_is_str_enum(self) -> None:
        assert issubclass(AgentAction, enum.StrEnum)

    def test_values(self) -> None:
        assert {a.value for a in AgentAction} == {
            "waiting_confirmation",
            "pending_confirmation",
            "working",
            "idle",
            "unknown",
        }


# ---------------------------------------------------------------------------
# tail_text
# ---------------------------------------------------------------------------


class TestTailText:
    def test_skips_empty_lines_and_lowercases(self) -> None:
        assert tail_text("A\n\n\nB\n") == "a\nb"

    def test_keeps_last_ten(self) -> None:
        text = "\n".join(f"Line {i}" for i in range(25))
        tail = tail_text(text).split("\n")
        assert tail[0] == "line 15"
        assert len(tail) == 10


# ---------------------------------------------------------------------------
# classify_text
# ---------------------------------------------------------------------------


class TestClassify:
    def test_idle(self) -> None:
        state = classify_text("Build  claude-sonnet\n  tab to switch agent")
        assert state.action == AgentAction.IDLE
        assert state.status == "ready"

    def test_working(self) -> None:
        state = classify_text("Working...\n  esc to interrupt")
        assert state.action == AgentAction.WORKING
        assert state.status == "processing"

    def test_approval_prompt(self) -> None:
        for screen in ("Run rm -rf dist? (y/n)", "Approve this edit", "Permission required"):
            assert classify_text(screen).action == AgentAction.PENDING_CONFIRMATION

    def test_unknown(self) -> None:
        state = classify_text("$ ls\nREADME.md")
        assert state.action == AgentAction.UNKNOWN
        assert state.status == "state not detected"

    def test_case_insensitive(self) -> None:
        assert classify_text("ESC to INTERRUPT").action == AgentAction.WORKING

    def test_prompt_beats_busy(self) -> None:
        state = classify_text("Allow write? (y/n)\nesc to interrupt")
        assert state.action == AgentAction.PENDING_CONFIRMATION

    def test_busy_beats_idle(self) -> None:
        state = classify_text("tab to switch\nesc to interrupt")
        assert state.action == AgentAction.WORKING

    def test_agent_request_beats_everything(self) -> None:
        request = ConfirmationRequest(agent_name="a", message="deploy?")
        for screen in ("tab to switch", "esc to interrupt", "(y/n)", "nothing"):
            state = classify_text(screen, pending=request)
            assert state.action == AgentAction.WAITING_CONFIRMATION
            assert state.pending_confirmation is request

    def test_only_tail_counts(self) -> None:
        screen = "esc to interrupt\n" + "\n".join(f"out {i}" for i in range(10))
        assert classify_text(screen).action == AgentAction.UNKNOWN

    def test_context_warning_is_independent(self) -> None:
        state = classify_text("Warning: context 90% full\ntab to switch")
        assert state.action == AgentAction.IDLE
        assert state.context_warning is True
        assert classify_text("tab to switch").context_warning is False
