"""HTTP service command."""

import click

from docsan.cli._common import app, get_settings


@app.command("serve", help="Run the docsan HTTP service.")
@click.option("--host", type=str, default=None, help="Host to bind to. Defaults to the host setting.")
@click.option(
    "--port",
    "-p",
    type=click.IntRange(1, 65535),
    default=None,
    help="Port to listen on. Defaults to PORT, then the port setting (8080).",
)
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Serve POST /docsan, POST /sanitize and GET /health.

    Examples:
        docsan serve
        docsan --config docsan.json serve --port 9000
    """
    from docsan.server import serve as run_server

    run_server(get_settings(ctx), host=host, port=port)
