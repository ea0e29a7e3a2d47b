"""Enhancement CLI commands."""

import asyncio
import json
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ...core.config import get_settings, load_raw_settings, merge_raw
from ...core.exceptions import ConfigurationError
from ...core.credentials import EnvironmentCredentialStore
from ...core.resolver import resolve_config
from ...core.types import EnhancementConfig

console = Console(stderr=True)


def collect_overrides(
    provider: Optional[str] = None,
    tone: Optional[str] = None,
    action: Optional[str] = None,
    model: Optional[str] = None,
    api_base: Optional[str] = None,
    temperature: Optional[float] = None,
    stream: Optional[bool] = None,
    copy: Optional[bool] = None,
    ask_post_action: bool = False,
) -> Dict[str, Any]:
    """Raw settings from command-line options; unset options are left out."""
    raw: Dict[str, Any] = {}
    remote: Dict[str, Any] = {}

    if provider:
        raw["provider"] = provider
    if tone:
        raw["tone"] = tone
    if action:
        raw["default_action"] = action
    if copy is not None:
        raw["copy_to_clipboard"] = copy
    if ask_post_action:
        raw["post_action_prompt"] = True
    if model:
        remote["model"] = model
    if api_base:
        remote["api_base"] = api_base
    if temperature is not None:
        remote["temperature"] = temperature
        remote["use_temperature"] = True
    if stream is not None:
        remote["streaming"] = stream

    if remote:
        raw["remote"] = remote
    return raw


def build_config(config_file: Optional[str], overrides: Dict[str, Any]) -> EnhancementConfig:
    """Settings file < environment < command-line options."""
    try:
        raw = load_raw_settings(config_file, strict=True)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise click.Abort()
    return resolve_config(merge_raw(raw, overrides))


@click.command()
@click.argument("prompt", required=False)
@click.option("-f", "--file", "input_file", type=click.Path(exists=True, dir_okay=False), help="Read prompt from file (placement actions edit this file)")
@click.option("-o", "--output", "output_file", type=click.Path(dir_okay=False), help="Write result to file when opening a new document")
@click.option("-p", "--provider", help="Provider: local or remote")
@click.option(
    "-t", "--tone",
    type=click.Choice(["concise", "balanced", "detailed"]),
    help="Output tone"
)
@click.option("-a", "--action", help="insertBelow, replaceSelection, openNew, none, copyOnly, or <action>AndCopy")
@click.option("-m", "--model", help="Remote model identifier")
@click.option("--api-base", help="Remote API base URL")
@click.option("--temperature", type=float, help="Send this temperature to the remote provider")
@click.option("--stream/--no-stream", default=None, help="Stream the remote response")
@click.option("--copy/--no-copy", default=None, help="Copy the result to the clipboard")
@click.option("--ask-post-action", is_flag=True, help="Ask how to apply the result")
@click.option("-c", "--config", "config_file", type=click.Path(dir_okay=False), help="JSON settings file")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
def enhance(
    prompt, input_file, output_file, provider, tone, action, model,
    api_base, temperature, stream, copy, ask_post_action, config_file, verbose
):
    """Enhance a rough prompt into a structured one.

    Examples:

        pe enhance "make the login form nicer and add validation"

        pe enhance -f notes.md --action replaceSelection

        pe enhance "..." --provider remote --model gpt-4o-mini -v
    """
    from ...host import TerminalHost
    from ...enhancement import run_enhance_command, infer_domain

    if not prompt and not input_file:
        stdin = click.get_text_stream("stdin")
        if not stdin.isatty():
            prompt = stdin.read()

    overrides = collect_overrides(
        provider=provider, tone=tone, action=action, model=model,
        api_base=api_base, temperature=temperature, stream=stream,
        copy=copy, ask_post_action=ask_post_action,
    )
    config = build_config(config_file, overrides)

    try:
        host = TerminalHost(
            selection=prompt or None,
            source_path=input_file,
            output_path=output_file,
            console=console,
            preview=config.is_remote and config.remote.streaming,
        )
    except UnicodeDecodeError:
        console.print(f"[red]Error:[/red] {escape(input_file)} is not UTF-8 text")
        raise click.Abort()
    settings = get_settings()
    credentials = EnvironmentCredentialStore(settings.remote.api_key_env_var)

    result = asyncio.run(run_enhance_command(host, config, credentials=credentials))
    if result is None:
        console.print("[red]Error:[/red] No prompt provided")
        raise click.Abort()

    if host.preview and result.streamed:
        console.print()

    if verbose:
        table = Table(title="Enhancement Results")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Provider", result.provider)
        table.add_row("Streamed", "Yes" if result.streamed else "No")
        table.add_row("Local Fallback", "Yes" if result.fell_back else "No")
        table.add_row("Domain", infer_domain(result.original))
        table.add_row("Action", config.action)
        table.add_row("Copy to Clipboard", "Yes" if config.copy_to_clipboard else "No")
        table.add_row("Time", f"{result.processing_time_ms:.1f}ms")

        console.print(table)


@click.command(name="config")
@click.option("-c", "--config", "config_file", type=click.Path(dir_okay=False), help="JSON settings file")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
def show_config(config_file, as_json):
    """Show the resolved configuration.

    Example:

        pe config --json
    """
    config = build_config(config_file, {})
    data = config.to_dict()

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    table = Table(title="Resolved Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    remote = data.pop("remote")
    for key, value in data.items():
        table.add_row(key, str(value))
    for key, value in remote.items():
        table.add_row(f"remote.{key}", str(value))

    Console().print(table)
