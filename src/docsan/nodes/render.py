"""Rendering helpers: nodes to markup strings and attribute maps."""

import html
from collections.abc import Iterable

from bs4 import Tag
from bs4.element import PageElement

from docsan.nodes.selectors import CheckAttrs, accept_all, attr_value


def render(node: PageElement) -> str:
    """Render a node and its subtree to markup.

    Text is entity-escaped the way bs4's "minimal" formatter does it, except
    inside ``<script>``/``<style>`` where it is written verbatim. Comments
    render with their ``<!--``/``-->`` delimiters.
    """
    if isinstance(node, Tag):
        return node.decode()
    return node.output_ready()


def render_children(node: PageElement | None) -> str:
    """Render all children of a node, without the node itself."""
    if not isinstance(node, Tag):
        return ""
    return "".join(render(child) for child in node.contents)


def content(node: PageElement | None) -> str:
    """Get the children of a node as an unescaped string ("" for None)."""
    if node is None:
        return ""
    return html.unescape(render_children(node))


def shallow_copy(node: Tag) -> Tag:
    """Copy a tag's name and attributes; the copy has no parent and no children."""
    return Tag(name=node.name, attrs=dict(node.attrs))


def as_comment_element(markup: str) -> str:
    """Wrap markup in comment delimiters."""
    return f"<!--{markup}-->"


def as_comment_elements(node: Tag) -> tuple[str, str]:
    """Render the start and end tag of an element as two comments.

    The childless element is rendered and split after its first ``>``, so
    ``<body class="x">`` becomes ``<!--<body class="x">-->`` and the end tag
    becomes ``<!--</body>-->``.
    """
    start, sep, end = render(shallow_copy(node)).partition(">")
    return as_comment_element(start + sep), as_comment_element(end)


def render_children_comment_parent(node: Tag | None) -> str:
    """Render the children of a node surrounded by its start and end tag as comments.

    Returns "" when there is no node.
    """
    if node is None:
        return ""
    start, end = as_comment_elements(node)
    return start + render_children(node) + end


def attrs_as_map(node: Tag) -> dict[str, str]:
    """Create a map from the attributes of an element, in attribute order."""
    return {key: attr_value(node, key) or "" for key in node.attrs}


def to_map_array(nodes: Iterable[PageElement], accept: CheckAttrs = accept_all) -> list[dict[str, str]]:
    """Create the attribute maps of elements, keeping the ones ``accept`` allows.

    Args:
        nodes: Element nodes, in output order.
        accept: Attribute map filter.

    Returns:
        Attribute maps in the order of ``nodes``.
    """
    maps = []
    for node in nodes:
        attrs = attrs_as_map(node)
        if accept(attrs):
            maps.append(attrs)
    return maps
