"""Node predicates and their combinators.

Every predicate is a plain function ``node -> bool`` that only looks at the
node it is given, never at its parent or children. Predicates hold no state
after construction, so a predicate built once can be shared by every request.

Usage:
    is_chapter_table = and_(element("table"), attr_contains("class", "chapter-table"))
    tables = find_all(body, is_chapter_table)
"""

from collections.abc import Callable, Iterable, Mapping

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

type Check = Callable[[PageElement], bool]

type CheckAttrs = Callable[[Mapping[str, str]], bool]


def is_element(node: PageElement | None) -> bool:
    """Return True if the node is an element (the document root is not)."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def attr_value(node: Tag, key: str) -> str | None:
    """Get an attribute value as a string, or None when the key is absent.

    Multi-valued attributes (a tree parsed with bs4's default ``class``
    splitting) are joined back into their source form.
    """
    value = node.attrs.get(key)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


# =============================================================================
# Combinators
# =============================================================================


def and_(*checks: Check) -> Check:
    """Return a predicate that is true when all supplied predicates are true."""

    def check(node: PageElement) -> bool:
        return all(chk(node) for chk in checks)

    return check


def or_(*checks: Check) -> Check:
    """Return a predicate that is true when any supplied predicate is true."""

    def check(node: PageElement) -> bool:
        return any(chk(node) for chk in checks)

    return check


def not_(chk: Check) -> Check:
    """Return a predicate that negates the supplied one."""

    def check(node: PageElement) -> bool:
        return not chk(node)

    return check


# =============================================================================
# Element predicates
# =============================================================================


def element(name: str) -> Check:
    """Return a predicate matching elements with the given tag name."""

    def check(node: PageElement) -> bool:
        return is_element(node) and node.name == name

    return check


def any_element() -> Check:
    """Return a predicate matching any element node."""
    return is_element


# =============================================================================
# Attribute predicates
# =============================================================================


def _attr_check(key: str, accept: Callable[[str], bool]) -> Check:
    def check(node: PageElement) -> bool:
        if not is_element(node):
            return False
        value = attr_value(node, key)
        return value is not None and accept(value)

    return check


def attr_equals(key: str, value: str) -> Check:
    """Return a predicate checking that an attribute has exactly this value."""
    return _attr_check(key, lambda v: v == value)


def has_attr(key: str) -> Check:
    """Return a predicate checking that an attribute is present."""
    return _attr_check(key, lambda v: True)


def attr_prefix(key: str, prefix: str) -> Check:
    """Return a predicate checking that an attribute value starts with a prefix."""
    return _attr_check(key, lambda v: v.startswith(prefix))


def attr_contains(key: str, substr: str) -> Check:
    """Return a predicate checking that an attribute value contains a substring."""
    return _attr_check(key, lambda v: substr in v)


def attr_not_prefix(key: str, prefix: str) -> Check:
    """Return a predicate checking that an attribute value does NOT start with a prefix.

    The attribute must still be present: a node without ``key`` is rejected.
    """
    return _attr_check(key, lambda v: not v.startswith(prefix))


# =============================================================================
# Attribute map predicates
# =============================================================================


def accept_all(attrs: Mapping[str, str]) -> bool:
    """Accept every attribute map."""
    return True


def meta_name_accept(accept_name: Callable[[str], bool]) -> CheckAttrs:
    """Return an attribute map filter for ``<meta>`` elements.

    A map without a ``name`` key is always kept; otherwise the name must be
    accepted by ``accept_name``.
    """

    def check(attrs: Mapping[str, str]) -> bool:
        name = attrs.get("name")
        return name is None or accept_name(name)

    return check


def id_in(ids: Iterable[str]) -> Check:
    """Return a predicate matching elements whose ``id`` is one of ``ids``."""
    return or_(*(attr_equals("id", i) for i in ids))
