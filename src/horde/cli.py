"""CLI entry point for horde."""

from __future__ import annotations

import asyncio
import json
import logging

import typer

from horde.config import HordeConfig
from horde.manager import HordeManager
from horde.messaging.inbox import COORDINATOR
from horde.tool.builtin.messaging import format_message
from horde.tool.registry import ToolRegistry, create_registry

app = typer.Typer(
    name="horde",
    help="Run a team of CLI coding agents side by side in tmux.",
    no_args_is_help=True,
)

CONSOLE_HELP = """Commands:
  @<agent> <text>          send a message to an agent
  /agents                  list agents
  /state <agent>           show an agent's state
  /check <agent> [lines]   show the tail of an agent's pane
  /approve <agent>         approve a pending confirmation
  /deny <agent>            deny a pending confirmation
  /add <agent> [model]     add an agent
  /remove <agent>          remove an agent
  /tool <name> <json>      call any tool directly
  /quit                    leave (agents keep running in tmux)"""


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@app.command()
def up(
    names: str = typer.Argument(help="Comma-separated agent names, e.g. 'planner,coder'."),
    models: str | None = typer.Option(
        None, "--models", "-m", help="Comma-separated models, positional."
    ),
    themes: str | None = typer.Option(
        None, "--themes", "-t", help="Comma-separated themes, positional."
    ),
    agent_types: str | None = typer.Option(
        None, "--agent-types", "-a", help="Comma-separated agent types, positional."
    ),
    headless: bool = typer.Option(
        False, "--headless", help="Don't open a terminal attached to the session."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Create a horde and coordinate it from an interactive console."""
    setup_logging(verbose)

    config = HordeConfig.load(config_file)
    if headless:
        config.tmux.attach_terminal = False

    typer.echo("horde v0.1.0")
    typer.echo(f"Session: {config.tmux.session_name}")
    typer.echo(f"Agent command: {config.agent.command}")
    typer.echo("---")

    asyncio.run(_run_console(config, names, models, themes, agent_types))


@app.command()
def tools(
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path."
    ),
) -> None:
    """Print the tool specs exposed to a tool-calling caller."""
    registry = create_registry(HordeManager(HordeConfig.load(config_file)))
    typer.echo(json.dumps(registry.get_specs(), indent=2))


async def _run_console(
    config: HordeConfig,
    names: str,
    models: str | None,
    themes: str | None,
    agent_types: str | None,
) -> None:
    manager = HordeManager(config)
    registry = create_registry(manager)

    created = await manager.create_horde(names, models, themes, agent_types)
    typer.echo(created.message)
    if not created:
        raise typer.Exit(1)

    typer.echo(CONSOLE_HELP)
    printer = asyncio.create_task(_print_inbox(manager))
    try:
        while True:
            line = await asyncio.to_thread(input, "> ")
            line = line.strip()
            if not line:
                continue
            if line in ("/quit", "/exit"):
                break
            output = await _handle_line(registry, line)
            if output:
                typer.echo(output)
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        printer.cancel()


async def _print_inbox(manager: HordeManager) -> None:
    """Echo coordinator mail as it arrives."""
    after = None
    while True:
        result = await manager.wait_for_message(timeout=3600, after=after)
        if result:
            index, message = result.value
            typer.echo(f"\n{format_message(message)}")
            after = index + 1


async def _handle_line(registry: ToolRegistry, line: str) -> str:
    """Run one console line and return what to print."""
    if line.startswith("@"):
        to, _, text = line[1:].partition(" ")
        if not text:
            return "Usage: @<agent> <text>"
        content, _ = await registry.dispatch(
            "send_message", {"to": to, "message": text, "from": COORDINATOR}
        )
        return content

    command, _, rest = line.partition(" ")
    args = rest.split()

    if command == "/agents":
        content, _ = await registry.dispatch("list_agents", {})
        return content
    if command == "/tool":
        tool_name, _, raw = rest.partition(" ")
        try:
            arguments = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            return f"Invalid JSON: {e}"
        content, _ = await registry.dispatch(tool_name, arguments)
        return content

    if not args:
        return CONSOLE_HELP

    name = args[0]
    if command == "/state":
        content, _ = await registry.dispatch("get_agent_state", {"name": name})
    elif command == "/check":
        lines = int(args[1]) if len(args) > 1 and args[1].isdigit() else 30
        content, _ = await registry.dispatch("check_on_agent", {"name": name, "lines": lines})
    elif command in ("/approve", "/deny"):
        content, _ = await registry.dispatch(
            "resolve_confirmation",
            {"name": name, "approved": command == "/approve", "responded_by": COORDINATOR},
        )
    elif command == "/add":
        arguments = {"name": name}
        if len(args) > 1:
            arguments["model"] = args[1]
        content, _ = await registry.dispatch("add_agent", arguments)
    elif command == "/remove":
        content, _ = await registry.dispatch("remove_agent", {"name": name})
    else:
        content = CONSOLE_HELP
    return content


def main() -> None:
    app()


if __name__ == "__main__":
    main()
