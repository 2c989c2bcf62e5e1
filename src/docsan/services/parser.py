"""HTML parsing into a BeautifulSoup tree."""

import logging

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from docsan.correlation import get_correlation_id
from docsan.exceptions import DocumentParseError

LOGGER = logging.getLogger(__name__)

TREE_BUILDER = "html5lib"


def parse_document(markup: bytes | str) -> BeautifulSoup:
    """
    Parse an HTML document into a tree.

    The HTML5 parsing algorithm is used, so the tree always has ``html``,
    ``head`` and ``body`` elements even when the markup leaves their tags out,
    and tables get their implied ``tbody``. Bytes are decoded with bs4's
    encoding detection. ``class`` and the other multi-valued attributes are
    kept as plain strings, and when an attribute is repeated the first value
    wins.

    Args:
        markup: Raw HTML.

    Returns:
        Parsed document.

    Raises:
        DocumentParseError: If the input is not text or the parser rejects it.
    """
    if not isinstance(markup, (bytes, str)):
        raise DocumentParseError(
            f"Expected HTML as bytes or str, got {type(markup).__name__}",
            parser=TREE_BUILDER,
            correlation_id=get_correlation_id(),
        )
    try:
        return BeautifulSoup(markup, TREE_BUILDER, multi_valued_attributes=None)
    except ParserRejectedMarkup as e:
        LOGGER.error(f"Parser rejected markup: {e}")
        raise DocumentParseError(
            f"Failed to parse HTML: {e}",
            parser=TREE_BUILDER,
            correlation_id=get_correlation_id(),
        ) from e
