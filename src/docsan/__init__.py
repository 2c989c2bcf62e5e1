"""docsan: HTML document sanitizer and JSON document assembler."""

__version__ = "1.4.0"

from docsan.exceptions import (  # noqa: E402
    ConfigurationError,
    DocsanError,
    DocumentParseError,
    PayloadError,
)
from docsan.models import DocumentRecord  # noqa: E402
from docsan.services import DocumentService, assemble, parse_document, sanitize_html  # noqa: E402

__all__ = [
    "ConfigurationError",
    "DocsanError",
    "DocumentParseError",
    "DocumentRecord",
    "DocumentService",
    "PayloadError",
    "__version__",
    "assemble",
    "parse_document",
    "sanitize_html",
]
