"""Depth-first tree walking and node collection."""

from bs4 import Tag
from bs4.element import PageElement

from docsan.nodes.selectors import Check


class Collector:
    """Collects the nodes accepted by a predicate, in pre-order.

    Usage:
        collector = Collector(element("meta"))
        collector.walk(head)
        metas = collector.nodes
    """

    def __init__(self, accept: Check):
        """Initialise collector.

        Args:
            accept: Predicate deciding which nodes are collected.
        """
        self.accept = accept
        self.nodes: list[PageElement] = []

    def collect(self, node: PageElement) -> None:
        """Add the node to this collector if the predicate accepts it."""
        if self.accept(node):
            self.nodes.append(node)

    def walk(self, root: PageElement, *, first_only: bool = False) -> None:
        """Walk the tree below ``root`` (root included) in pre-order.

        An explicit stack keeps deeply nested documents clear of the
        recursion limit.

        Args:
            root: Node to start from.
            first_only: Stop as soon as one node has been collected.
        """
        stack: list[PageElement] = [root]
        while stack:
            node = stack.pop()
            self.collect(node)
            if first_only and self.nodes:
                return
            if isinstance(node, Tag):
                stack.extend(reversed(node.contents))


def find_all(root: PageElement | None, accept: Check) -> list[PageElement]:
    """Find all nodes accepted by the predicate.

    The returned list is a snapshot: rewriting the tree afterwards does not
    change it, so re-query after a mutation that may invalidate matches.

    Args:
        root: Node to start from; tested itself. None yields no matches.
        accept: Node predicate.

    Returns:
        Matching nodes in pre-order (document order).
    """
    if root is None:
        return []
    collector = Collector(accept)
    collector.walk(root)
    return collector.nodes


def find_first(root: PageElement | None, accept: Check) -> PageElement | None:
    """Find the first node accepted by the predicate, or None."""
    if root is None:
        return None
    collector = Collector(accept)
    collector.walk(root, first_only=True)
    return collector.nodes[0] if collector.nodes else None
