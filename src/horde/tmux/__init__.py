"""tmux integration — control commands, pane input, readiness polling.

The tmux server and the agent CLIs it hosts are opaque external
processes; everything here talks to them through the tmux command line.
"""

from horde.tmux.control import CommandResult, TmuxControl
from horde.tmux.pane import PaneDriver, settle_delay

__all__ = [
    "CommandResult",
    "TmuxControl",
    "PaneDriver",
    "settle_delay",
]
