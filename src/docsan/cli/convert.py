"""Document conversion commands."""

from pathlib import Path

import click

from docsan.cli._common import app, fail, get_settings, read_input, write_output
from docsan.correlation import new_correlation_id
from docsan.exceptions import DocsanError


@app.command("convert", help="Convert an HTML document to a JSON document record.")
@click.argument("source", type=str)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Defaults to stdout.",
)
@click.option(
    "--pretty",
    is_flag=True,
    default=False,
    help="Indent the JSON output (always on when the json_pretty setting is set).",
)
@click.pass_context
def convert(ctx: click.Context, source: str, output: Path | None, pretty: bool) -> None:
    """Convert SOURCE (an HTML file, or - for stdin) to JSON.

    Examples:
        docsan convert chapter.html
        docsan convert chapter.html --output chapter.json --pretty
        cat chapter.html | docsan convert -
    """
    from docsan.services.document import DocumentService

    settings = get_settings(ctx)
    new_correlation_id()
    try:
        markup = read_input(source)
    except OSError as e:
        raise click.FileError(source, hint=str(e)) from e

    service = DocumentService(settings)
    try:
        record = service.convert(markup)
    except DocsanError as e:
        fail(e)

    for warning in record.warnings:
        click.echo(f"Warning: {warning}", err=True)

    write_output(record.to_json(pretty=pretty or settings.json_pretty), output)
