"""Document conversion service: parse, assemble and serialise."""

import logging

from docsan.config import DocsanSettings
from docsan.models import DocumentRecord
from docsan.services.assembler import AssemblerConfig, assemble
from docsan.services.parser import parse_document
from docsan.services.sanitizer import sanitize_html

LOGGER = logging.getLogger(__name__)


class DocumentService:
    """Converts HTML documents to DocumentRecords using one fixed configuration.

    The assembler configuration is built once from the settings and shared by
    every call; each call parses its own tree, so calls are independent.

    Usage:
        service = DocumentService(load_settings())
        record = service.convert(html_bytes)
        print(record.to_json())
    """

    def __init__(self, settings: DocsanSettings | None = None, generated: str | None = None):
        """Initialise document service.

        Args:
            settings: Settings providing the meta allow-list and output options.
                Defaults to settings loaded from the environment.
            generated: Generation tag. Defaults to "docsan <version>".
        """
        from docsan import __version__

        self.settings = settings or DocsanSettings()
        self.config = AssemblerConfig(
            meta_name_allowed=self.settings.meta_name_policy(),
            generated=generated if generated is not None else f"docsan {__version__}",
        )

    def convert(self, markup: bytes | str) -> DocumentRecord:
        """Parse and assemble one document.

        Raises:
            DocumentParseError: If the markup cannot be parsed.
        """
        tree = parse_document(markup)
        record = assemble(tree, self.config)
        LOGGER.info(f"{record.doc_id}: converted '{record.title}' ({len(record.body)} chars of body)")
        return record

    def convert_to_json(self, markup: bytes | str, *, pretty: bool | None = None) -> str:
        """Parse, assemble and serialise one document.

        Args:
            markup: Raw HTML.
            pretty: Indent the JSON. Defaults to the ``json_pretty`` setting.
        """
        record = self.convert(markup)
        return record.to_json(pretty=self.settings.json_pretty if pretty is None else pretty)

    def sanitize(self, markup: bytes | str) -> str:
        """Comment out scripts and stylesheet links of a whole document."""
        return sanitize_html(markup)
