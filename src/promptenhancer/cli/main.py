"""Main CLI entry point."""

import click
from rich.console import Console

from .. import __version__
from ..core.config import get_settings
from ..core.resolver import DEFAULT_API_HOST, as_port, as_text
from ..logging_config import setup_logging
from .commands import enhance, show_config

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="promptenhancer")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file")
def cli(debug, log_file):
    """promptenhancer - turn rough prompts into structured ones.

    \b
    Examples:
        pe enhance "make the login form nicer and add validation"
        pe enhance -f notes.md --action replaceSelection
        pe enhance "..." --provider remote --no-stream
        pe config

    Use --help on any command for more details.
    """
    settings = get_settings()
    setup_logging(
        level=settings.logging.level,
        log_file=log_file or settings.logging.file,
        debug=debug,
    )


cli.add_command(enhance)
cli.add_command(show_config)


@cli.command()
@click.option("-h", "--host", default=None, help="Host to bind to")
@click.option("-p", "--port", default=None, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host, port, reload):
    """Start the REST API server.

    Example:

        pe serve --port 8080 --reload
    """
    settings = get_settings()
    host = host or as_text(settings.api.host, DEFAULT_API_HOST)
    port = port or as_port(settings.api.port)

    console.print(f"[bold]Starting promptenhancer API server...[/bold]")
    console.print(f"  Host: {host}")
    console.print(f"  Port: {port}")
    console.print(f"  Reload: {'Yes' if reload else 'No'}")
    console.print(f"\n[dim]API docs available at http://{host}:{port}/docs[/dim]\n")

    from ..api import run_server
    run_server(host=host, port=port, reload=reload)


@cli.command()
def info():
    """Show information about promptenhancer."""
    from rich.panel import Panel

    info_text = """[bold]promptenhancer[/bold] - structured prompts from rough notes

[bold]Providers:[/bold]
  • [cyan]local[/cyan]: deterministic template, no network (default)
  • [cyan]remote[/cyan]: OpenAI-compatible chat completions, streamed or single-shot

[bold]Placement actions:[/bold]
  insertBelow, replaceSelection, openNew, none, copyOnly, <action>AndCopy

[bold]Environment:[/bold]
  PE_PROVIDER, PE_TONE, PE_DEFAULT_ACTION, PE_MODEL, PE_API_BASE,
  PE_STREAMING, PE_TEMPERATURE, PE_USE_TEMPERATURE, OPENAI_API_KEY

[bold]Deployment:[/bold]
  • Python SDK: import promptenhancer
  • REST API: pe serve
  • CLI: pe <command>"""

    console.print(Panel(info_text, title=f"promptenhancer v{__version__}", border_style="green"))


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
