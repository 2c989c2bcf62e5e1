"""Command-line interface for docsan.

Commands are organized into modules by functionality:

- convert: HTML document to JSON document record
- sanitize: comment out scripts and stylesheets of a whole document
- serve: run the HTTP service
"""

# Import all command modules to register them with the app
from docsan.cli import (
    convert,  # noqa: F401
    sanitize,  # noqa: F401
    serve,  # noqa: F401
)
from docsan.cli._common import app

__all__ = ["app"]
