"""Whole-document sanitizing: comment out scripts and stylesheet links."""

import logging

from bs4 import BeautifulSoup

from docsan.nodes.render import render
from docsan.nodes.selectors import and_, attr_equals, element, or_
from docsan.nodes.transform import replace_all_with_comments
from docsan.services.parser import parse_document

LOGGER = logging.getLogger(__name__)

IGNORED = or_(element("script"), and_(element("link"), attr_equals("rel", "stylesheet")))


def sanitize_tree(tree: BeautifulSoup) -> int:
    """
    Comment out every script and stylesheet link of a parsed document, in place.

    Returns:
        Number of nodes commented out.
    """
    return replace_all_with_comments(tree, IGNORED)


def sanitize_html(markup: bytes | str) -> str:
    """
    Sanitize an HTML document.

    Args:
        markup: Raw HTML.

    Returns:
        The whole document rendered back, with scripts and stylesheet links
        turned into comments holding their original markup.

    Raises:
        DocumentParseError: If the markup cannot be parsed.
    """
    tree = parse_document(markup)
    count = sanitize_tree(tree)
    LOGGER.debug(f"Commented out {count} nodes")
    return render(tree)
