"""Sanitizing commands."""

from pathlib import Path

import click

from docsan.cli._common import app, fail, read_input, write_output
from docsan.correlation import new_correlation_id
from docsan.exceptions import DocsanError


@app.command("sanitize", help="Comment out scripts and stylesheet links of an HTML document.")
@click.argument("source", type=str)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Defaults to stdout.",
)
def sanitize(source: str, output: Path | None) -> None:
    """Sanitize SOURCE (an HTML file, or - for stdin).

    Examples:
        docsan sanitize page.html
        docsan sanitize page.html --output page.safe.html
    """
    from docsan.services.sanitizer import sanitize_html

    new_correlation_id()
    try:
        markup = read_input(source)
    except OSError as e:
        raise click.FileError(source, hint=str(e)) from e

    try:
        sanitized = sanitize_html(markup)
    except DocsanError as e:
        fail(e)

    write_output(sanitized, output)
