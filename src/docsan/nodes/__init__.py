"""Node selection and tree rewriting on BeautifulSoup trees.

- selectors: node predicates and AND/OR/NOT combinators
- walker: pre-order collection of matching nodes
- render: markup and attribute-map rendering
- transform: mutation primitives (comment-out, unwrap, remove, wrap, insert, disable)
"""

from docsan.nodes.render import (
    attrs_as_map,
    content,
    render,
    render_children,
    render_children_comment_parent,
    to_map_array,
)
from docsan.nodes.selectors import (
    Check,
    CheckAttrs,
    accept_all,
    and_,
    any_element,
    attr_contains,
    attr_equals,
    attr_not_prefix,
    attr_prefix,
    element,
    has_attr,
    id_in,
    is_element,
    meta_name_accept,
    not_,
    or_,
)
from docsan.nodes.transform import (
    DISABLED_ATTRIBUTE_PREFIX,
    Position,
    disable_attribute,
    disable_attribute_all,
    insert_child_at,
    make_element,
    remove,
    remove_all,
    replace_all_with_comments,
    replace_all_with_content,
    replace_with_comment,
    replace_with_content,
    wrap,
    wrap_all,
)
from docsan.nodes.walker import Collector, find_all, find_first

__all__ = [
    "DISABLED_ATTRIBUTE_PREFIX",
    "Check",
    "CheckAttrs",
    "Collector",
    "Position",
    "accept_all",
    "and_",
    "any_element",
    "attr_contains",
    "attr_equals",
    "attr_not_prefix",
    "attr_prefix",
    "attrs_as_map",
    "content",
    "disable_attribute",
    "disable_attribute_all",
    "element",
    "find_all",
    "find_first",
    "has_attr",
    "id_in",
    "insert_child_at",
    "is_element",
    "make_element",
    "meta_name_accept",
    "not_",
    "or_",
    "remove",
    "remove_all",
    "render",
    "render_children",
    "render_children_comment_parent",
    "replace_all_with_comments",
    "replace_all_with_content",
    "replace_with_comment",
    "replace_with_content",
    "to_map_array",
    "wrap",
    "wrap_all",
]
