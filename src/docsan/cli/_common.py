"""Common CLI utilities and the main app group."""

import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from docsan.config import DocsanSettings, load_settings
from docsan.exceptions import DocsanError
from docsan.log_config import configure_logging

LOGGER = logging.getLogger(__name__)

# Load .env file when CLI module is imported
load_dotenv()


def get_settings(ctx: click.Context) -> DocsanSettings:
    """Get the settings loaded by the app group."""
    return ctx.find_object(DocsanSettings)


def read_input(source: str) -> bytes:
    """Read HTML from a file path, or from stdin when ``source`` is "-"."""
    if source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def write_output(text: str, output: Path | None) -> None:
    """Write text to a file, or to stdout when no file is given."""
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Saved to {output}", err=True)


def fail(error: DocsanError) -> None:
    """Report a docsan error and exit with status 1."""
    LOGGER.debug(f"Error context: {error.context}")
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group(help="Sanitize HTML documents and convert them to JSON document records.")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON config file. Defaults to ./docsan.json when present.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def app(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """
    Entry point for the docsan CLI.

    Loads settings once and configures logging before any command runs.
    """
    try:
        settings = load_settings(config_path)
    except DocsanError as e:
        fail(e)
    configure_logging(
        settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json,
        verbose=verbose,
    )
    ctx.obj = settings
