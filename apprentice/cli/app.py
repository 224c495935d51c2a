"""
Main CLI application for apprentice.

Usage:
    apprentice chat [OPTIONS]
    apprentice config show
    apprentice tools list
    apprentice version
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from apprentice import __version__
from apprentice.backends.base import ExecutionBackend
from apprentice.backends.local import LocalBackend
from apprentice.cli.output import OutputFormatter
from apprentice.cli.term import RichTerminal, Terminal
from apprentice.config import AppConfig, Goal, find_config_path, load_config
from apprentice.errors import ApprenticeError
from apprentice.llm.factory import get_llm_chat
from apprentice.llm.transport import HttpxTransport, Transport
from apprentice.orchestrator.core import Agent
from apprentice.prompts.system import build_system_prompt
from apprentice.tools.help import HelpTool
from apprentice.tools.registry import ToolRegistry
from apprentice.tools.shell import ShellTool

app = typer.Typer(
    name="apprentice",
    help="Apprentice - turns requests into cloud CLI commands",
    no_args_is_help=True,
)
tools_app = typer.Typer(help="Tool management")
config_app = typer.Typer(help="Configuration management")

app.add_typer(tools_app, name="tools")
app.add_typer(config_app, name="config")

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _setup_logging(verbose: bool = False, debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=debug)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def _fail(error: BaseException) -> typer.Exit:
    OutputFormatter(err_console).format_error(error)
    return typer.Exit(1)


def _load(
    config_path: Path | None,
    context: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> AppConfig:
    return load_config(
        config_path or find_config_path(),
        context=context,
        cli_overrides=overrides,
    )


def build_registry(
    goal: Goal,
    backend: ExecutionBackend,
    term: Terminal,
) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(ShellTool(backend, term))
    registry.register(HelpTool(goal, backend))
    return registry


def setup_agent(
    cfg: AppConfig,
    term: Terminal | None = None,
    transport: Transport | None = None,
    backend: ExecutionBackend | None = None,
) -> Agent:
    """Wire up the chat adapter, tools and terminal for *cfg*."""
    term = term or RichTerminal(cfg.settings)
    registry = build_registry(cfg.goal, backend or LocalBackend(), term)

    chat = get_llm_chat(cfg.model, transport or HttpxTransport(), registry.specs())
    chat.set_system_prompt(build_system_prompt(cfg.goal, cfg.prompt))
    logger.info(
        "Agent ready: goal=%s provider=%s model=%s",
        cfg.goal.value, cfg.model.provider.value, cfg.model.name,
    )
    return Agent(chat, registry, term, initial_message=cfg.message)


def _run_agent(agent: Agent) -> None:
    # Not asyncio.run(): its SIGINT handler would keep Ctrl+C from
    # interrupting a blocking terminal read.
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(agent.run())
    finally:
        loop.close()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def chat(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to the config file"),
    context: Optional[str] = typer.Option(None, "--context", help="Config context to apply"),
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="Target cloud: gcp, aws or azure"),
    model_provider: Optional[str] = typer.Option(
        None, "--model-provider", "-p", help="LLM provider: openai, anthropic or gcp"
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model name"),
    api_key: Optional[str] = typer.Option(None, "--api-key", "-k", help="LLM provider API key"),
    api_url: Optional[str] = typer.Option(None, "--api-url", "-u", help="LLM endpoint URL"),
    api_version: Optional[str] = typer.Option(None, "--api-version", help="API version (anthropic)"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Maximum output tokens"),
    n: Optional[int] = typer.Option(None, "--n", help="Number of response variants (openai)"),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="Sampling temperature"),
    top_p: Optional[float] = typer.Option(None, "--top-p", help="Nucleus sampling mass"),
    top_k: Optional[int] = typer.Option(None, "--top-k", help="Top-k sampling"),
    frequency_penalty: Optional[float] = typer.Option(None, "--frequency-penalty"),
    presence_penalty: Optional[float] = typer.Option(None, "--presence-penalty"),
    stop_sequence: Optional[str] = typer.Option(None, "--stop-sequence"),
    message: Optional[str] = typer.Option(
        None, "--message", "-e", help="First user message; skips the initial prompt"
    ),
    prompt: Optional[str] = typer.Option(
        None, "--prompt", help="Extra instructions added to the system prompt"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log requests and tool calls"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
):
    """Start an interactive dialogue."""
    _setup_logging(verbose, debug)
    overrides = {
        "goal": goal,
        "model_provider": model_provider,
        "model": model,
        "api_key": api_key,
        "api_url": api_url,
        "api_version": api_version,
        "max_tokens": max_tokens,
        "n": n,
        "temperature": temperature,
        "top_p": top_p,
        "top_k": top_k,
        "frequency_penalty": frequency_penalty,
        "presence_penalty": presence_penalty,
        "stop_sequence": stop_sequence,
        "message": message,
        "prompt": prompt,
    }
    try:
        cfg = _load(config, context, overrides)
        _run_agent(setup_agent(cfg))
    except ApprenticeError as e:
        logger.debug("Fatal %s error", e.code, exc_info=True)
        raise _fail(e)
    except (EOFError, KeyboardInterrupt):
        # Interrupted while a tool was prompting or running.
        err_console.print()


@tools_app.command("list")
def tools_list(
    goal: str = typer.Option("gcp", "--goal", "-g", help="Goal used for the HELP tool"),
):
    """List the tools offered to the model."""
    try:
        goal_value = Goal(goal)
    except ValueError:
        raise _fail(ApprenticeError(f"unknown goal: {goal} (expected gcp, aws or azure)"))

    registry = build_registry(goal_value, LocalBackend(), RichTerminal())
    OutputFormatter(console).format_tool_list(registry.list())


@config_app.command("show")
def config_show(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to the config file"),
    context: Optional[str] = typer.Option(None, "--context", help="Config context to apply"),
):
    """Show the effective config (API key masked)."""
    try:
        cfg = _load(config, context)
    except ApprenticeError as e:
        raise _fail(e)
    OutputFormatter(console).format_config(cfg.to_dict())


@app.command()
def version():
    """Show version."""
    console.print(f"apprentice v{__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
