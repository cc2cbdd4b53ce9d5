"""Domain Finder CLI entry point."""

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from domain_finder.api.cli.commands.enrich import enrich_command

# Credentials such as GEMINI_API_KEY may live in a local .env file
load_dotenv()

app = typer.Typer(
    name="domain-finder",
    help="Domain Finder - AI-powered company domain enrichment",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.command("enrich")(enrich_command)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(
        Path("domain_finder.yaml"), "--config", help="YAML settings file (optional)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Domain Finder CLI."""
    # Store global options in context for subcommands
    ctx.obj = {"config_path": config, "debug": debug}


@app.command()
def version():
    """Show Domain Finder version."""
    from domain_finder import __version__

    console.print(f"[bold blue]Domain Finder[/bold blue] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
