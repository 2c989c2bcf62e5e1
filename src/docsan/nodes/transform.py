"""Tree rewriting primitives.

Single-node operations relink through bs4 (``replace_with``, ``extract``,
``insert``), which updates the parent and the child list in one call, so a
node is never left referenced by two parents.

Operations that relink a node need it to be attached: on a detached node
they log at debug level and do nothing. The bulk forms select with
``find_all`` first and then rewrite, so each match set is taken from the tree
as it is when the bulk operation starts.
"""

import copy
import logging
from collections.abc import Callable, Mapping
from enum import Enum

from bs4 import BeautifulSoup, Comment, Tag
from bs4.element import PageElement

from docsan.nodes.render import render
from docsan.nodes.selectors import Check, is_element
from docsan.nodes.walker import find_all

LOGGER = logging.getLogger(__name__)

# Prepended to an attribute key so consumers looking it up by name no longer see it
DISABLED_ATTRIBUTE_PREFIX = "xxx"


class Position(str, Enum):
    """Where ``insert_child_at`` puts the new child."""

    FIRST = "first"
    LAST = "last"


def _is_attached(node: PageElement, operation: str) -> bool:
    if node.parent is None:
        LOGGER.debug(f"{operation}: node <{getattr(node, 'name', None)}> is detached, skipping")
        return False
    return True


def make_element(near: PageElement | None, name: str, attrs: Mapping[str, str] | None = None) -> Tag:
    """Create a new element belonging to the same document as ``near``.

    Args:
        near: Any node of the target tree, or None for a free-standing element.
        name: Tag name.
        attrs: Attributes, in output order.

    Returns:
        New detached element.
    """
    root = near
    while root is not None and root.parent is not None:
        root = root.parent
    if isinstance(root, BeautifulSoup):
        return root.new_tag(name, attrs=dict(attrs or {}))
    return Tag(name=name, attrs=dict(attrs or {}))


# =============================================================================
# Single-node operations
# =============================================================================


def replace_with_comment(node: PageElement) -> bool:
    """Replace a node by a comment holding its rendered markup.

    Returns:
        True if the node was replaced.
    """
    if not _is_attached(node, "replace_with_comment"):
        return False
    node.replace_with(Comment(render(node)))
    return True


def replace_with_content(node: PageElement) -> bool:
    """Replace a node by a deep copy of its first child.

    Only the first child survives: any further children are dropped along
    with the node's own tag and attributes. A node without children is
    removed.

    Returns:
        True if the node was replaced or removed.
    """
    if not _is_attached(node, "replace_with_content"):
        return False
    children = node.contents if isinstance(node, Tag) else []
    if not children:
        node.extract()
        return True
    if len(children) > 1:
        LOGGER.debug(f"replace_with_content: dropping {len(children) - 1} sibling(s) of first child of <{node.name}>")
    node.replace_with(copy.copy(children[0]))
    return True


def remove(node: PageElement) -> bool:
    """Detach a node from its parent.

    Returns:
        True if the node was detached.
    """
    if not _is_attached(node, "remove"):
        return False
    node.extract()
    return True


def wrap(node: PageElement, wrapper_tag: str, attrs: Mapping[str, str] | None = None) -> Tag | None:
    """Put a new element at the node's position and move the node inside it.

    The node keeps its whole subtree; its former siblings are untouched.

    Args:
        node: Node to wrap.
        wrapper_tag: Tag name of the wrapper.
        attrs: Wrapper attributes.

    Returns:
        The wrapper element, or None if the node is detached.
    """
    if not _is_attached(node, "wrap"):
        return None
    wrapper = make_element(node, wrapper_tag, attrs)
    node.replace_with(wrapper)
    wrapper.append(node)
    return wrapper


def insert_child_at(anchor: Tag, new_element: PageElement, position: Position | str) -> None:
    """Splice a node into the children of ``anchor`` at the first or last position.

    ``new_element`` is detached from any previous parent first.

    Raises:
        ValueError: If the insertion would make a node its own ancestor.
    """
    position = Position(position)
    ancestor: PageElement | None = anchor
    while ancestor is not None:
        if ancestor is new_element:
            raise ValueError("Cannot insert a node into itself or one of its descendants")
        ancestor = ancestor.parent
    new_element.extract()
    if position is Position.FIRST:
        anchor.insert(0, new_element)
    else:
        anchor.append(new_element)


def disable_attribute(node: PageElement, key: str) -> bool:
    """Disable an attribute by prefixing its key with ``xxx``.

    The value and the attribute order are kept. If the prefixed key is
    already present the prefix is repeated until the key is free, so both
    values survive. A node without the attribute is left alone.

    Returns:
        True if the attribute was renamed.
    """
    if not is_element(node) or key not in node.attrs:
        return False
    disabled = DISABLED_ATTRIBUTE_PREFIX + key
    while disabled in node.attrs:
        disabled = DISABLED_ATTRIBUTE_PREFIX + disabled
    node.attrs = {(disabled if k == key else k): v for k, v in node.attrs.items()}
    return True


# =============================================================================
# Bulk operations
# =============================================================================


def _apply_all(root: PageElement | None, accept: Check, operation: Callable[[PageElement], object]) -> int:
    return sum(1 for node in find_all(root, accept) if operation(node))


def replace_all_with_comments(root: PageElement | None, accept: Check) -> int:
    """Replace every accepted node below ``root`` with a comment of its markup."""
    return _apply_all(root, accept, replace_with_comment)


def replace_all_with_content(root: PageElement | None, accept: Check) -> int:
    """Replace every accepted node below ``root`` with its first child."""
    return _apply_all(root, accept, replace_with_content)


def remove_all(root: PageElement | None, accept: Check) -> int:
    """Detach every accepted node below ``root``."""
    return _apply_all(root, accept, remove)


def wrap_all(root: PageElement | None, accept: Check, wrapper_tag: str, attrs: Mapping[str, str] | None = None) -> int:
    """Wrap every accepted node below ``root`` in a new element."""
    return _apply_all(root, accept, lambda node: wrap(node, wrapper_tag, attrs))


def disable_attribute_all(root: PageElement | None, key: str, accept: Check) -> int:
    """Disable ``key`` on every accepted node below ``root``."""
    return _apply_all(root, accept, lambda node: disable_attribute(node, key))
