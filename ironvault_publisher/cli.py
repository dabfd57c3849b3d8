"""Command line interface: ``ironvault-publish``."""

import sys
from pathlib import Path

import typer
from loguru import logger

from ironvault_publisher.core.discovery import VaultDiscovery
from ironvault_publisher.core.processor import ContentProcessor
from ironvault_publisher.core.publisher import ConfigError, create_publisher_from_config

app = typer.Typer(name="ironvault-publish", help="Publish an Iron Vault campaign as HTML.")


def setup_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


@app.command()
def build(
    config: Path = typer.Argument(..., help="YAML config file"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Render without writing files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Render every note in the vault to HTML files."""
    setup_logging(verbose)
    try:
        publisher = create_publisher_from_config(config, dry_run=dry_run or None)
        result = publisher.publish()
    except (ConfigError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Published {len(result.published_titles)} notes")
    for failure in result.failures:
        typer.echo(f"Failed: {failure.path}: {failure.error}", err=True)
    if result.failures:
        raise typer.Exit(1)


@app.command()
def render(
    vault: Path = typer.Argument(..., help="Vault root"),
    note: str = typer.Argument(..., help="Note title, filename or path"),
    base_url: str = typer.Option("", "--base-url", help="Prefix for generated links"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Print one note's HTML."""
    setup_logging(verbose)
    try:
        discovery = VaultDiscovery(vault)
        documents = discovery.discover_all()
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    document = discovery.get_note(note)
    if document is None:
        typer.echo(f"Note not found: {note}", err=True)
        raise typer.Exit(1)

    processor = ContentProcessor(documents, base_url=base_url)
    rendered = processor.process(document, discovery.read_body(document))
    typer.echo(rendered.html)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
