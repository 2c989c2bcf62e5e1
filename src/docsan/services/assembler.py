"""Document assembly: from a parsed tree to a DocumentRecord.

The pipeline always runs the same steps in the same order:

 1. locate ``<head>`` and ``<body>``
 2. title
 3. metas, filtered by the meta name allow-list
 4. document ID from the ``docid`` meta
 5. JSON slots from the well-known ``<script id=...>`` elements
 6. remaining head scripts
 7. notice and see-also placeholders
 8. drop the slot scripts
 9. comment out scripts, stylesheet links and compare-to paragraphs
10. wrap chapter tables
11. disable click handlers
12. render the body
13. build the record

Each step re-queries the tree, so later steps see the rewrites of earlier
ones. Only a missing parse result is fatal; everything else falls back to a
default value.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from bs4 import NavigableString, Tag
from bs4.element import PageElement

from docsan.exceptions import PayloadError
from docsan.models import SLOT_SCRIPT_IDS, SLOTS, TOC_SCRIPT_ID, DocumentRecord, Slot, validate_json_text
from docsan.nodes.render import content, render_children_comment_parent, to_map_array
from docsan.nodes.selectors import (
    Check,
    and_,
    any_element,
    attr_contains,
    attr_equals,
    attr_prefix,
    attr_value,
    element,
    has_attr,
    id_in,
    meta_name_accept,
    not_,
    or_,
)
from docsan.nodes.transform import (
    Position,
    disable_attribute_all,
    insert_child_at,
    make_element,
    remove_all,
    replace_all_with_comments,
    wrap_all,
)
from docsan.nodes.walker import find_all, find_first

LOGGER = logging.getLogger(__name__)

# Value of the data-generator attribute on every element docsan creates
GENERATOR = "docsan"

UNKNOWN_DOC_ID = "unknown"


@dataclass(frozen=True)
class AssemblerConfig:
    """Configuration injected into every pipeline run.

    Attributes:
        meta_name_allowed: Decides which ``<meta name=...>`` values are kept.
        generated: Generation tag copied into the record (e.g. "docsan 1.4.0").
    """

    meta_name_allowed: Callable[[str], bool]
    generated: str = ""


@dataclass(frozen=True)
class PlaceholderKind:
    """A kind of placeholder ``<div>`` injected into annotatable elements."""

    name: str
    id_prefix: str
    css_class: str
    position: Position
    existing: Check = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "existing", and_(element("div"), attr_prefix("id", self.id_prefix)))


NOTICE = PlaceholderKind("notice", "notice_", "ib-notice", Position.FIRST)
SEEALSO = PlaceholderKind("seealso", "seealso_", "ib-seealso", Position.LAST)


@dataclass(frozen=True)
class PipelineSelectors:
    """Every predicate the pipeline uses, built once and shared by all runs."""

    head: Check
    body: Check
    title: Check
    meta: Check
    slot_scripts: dict[str, Check]
    dropped_scripts: Check
    kept_scripts: Check
    placeholder_targets: Check
    comment_targets: Check
    chapter_tables: Check
    click_handlers: Check

    @classmethod
    def build(cls) -> "PipelineSelectors":
        """Build the selector bundle."""
        script = element("script")
        dropped_scripts = and_(script, id_in((*SLOT_SCRIPT_IDS, TOC_SCRIPT_ID)))

        is_stylesheet_link = and_(element("link"), attr_equals("rel", "stylesheet"))
        is_compare_paragraph = and_(element("p"), attr_contains("class", "compare-to"))

        return cls(
            head=element("head"),
            body=element("body"),
            title=element("title"),
            meta=element("meta"),
            slot_scripts={slot.script_id: and_(script, attr_equals("id", slot.script_id)) for slot in SLOTS},
            dropped_scripts=dropped_scripts,
            kept_scripts=and_(script, not_(dropped_scripts)),
            placeholder_targets=and_(any_element(), attr_contains("class", "annotatable"), has_attr("id")),
            comment_targets=or_(script, is_stylesheet_link, is_compare_paragraph),
            chapter_tables=and_(element("table"), attr_contains("class", "chapter-table")),
            click_handlers=and_(any_element(), has_attr("onclick"), not_(attr_contains("class", "dyncal-button"))),
        )


SELECTORS = PipelineSelectors.build()


# =============================================================================
# Read steps
# =============================================================================


def extract_metas(head: PageElement | None, meta_name_allowed: Callable[[str], bool]) -> list[dict[str, str]]:
    """Get the attribute maps of the head's ``<meta>`` elements that the allow-list keeps."""
    return to_map_array(find_all(head, SELECTORS.meta), meta_name_accept(meta_name_allowed))


def get_doc_id(metas: list[dict[str, str]]) -> str:
    """Get the ``content`` of the first ``docid`` meta (name compared case-insensitively)."""
    for meta in metas:
        if meta.get("name", "").casefold() == "docid":
            return meta.get("content", "")
    return UNKNOWN_DOC_ID


def decode_slot(script: PageElement | None, slot: Slot) -> str:
    """Get the JSON payload carried by a slot script.

    Args:
        script: The slot's ``<script>`` element, or None if the document has none.
        slot: Slot description.

    Returns:
        The payload as raw JSON text; the slot's default when there is no script.

    Raises:
        PayloadError: If the script text is not one standard JSON value.
    """
    if script is None:
        return slot.shape.default

    first = script.contents[0] if isinstance(script, Tag) and script.contents else None
    text = str(first) if isinstance(first, NavigableString) else ""
    try:
        return validate_json_text(text)
    except ValueError as e:
        raise PayloadError(f"Invalid JSON in script #{slot.script_id}: {e}", slot=slot.script_id) from e


def extract_slots(head: PageElement | None, doc_id: str) -> tuple[dict[str, str], list[str]]:
    """Read every well-known slot, falling back to defaults on bad payloads.

    Returns:
        Tuple of (record field -> raw JSON text, warning messages).
    """
    values: dict[str, str] = {}
    warnings: list[str] = []
    for slot in SLOTS:
        script = find_first(head, SELECTORS.slot_scripts[slot.script_id])
        try:
            values[slot.field] = decode_slot(script, slot)
        except PayloadError as e:
            LOGGER.warning(f"{doc_id}: {e.message}, using {slot.shape.default}")
            warnings.append(e.message)
            values[slot.field] = slot.shape.default
    return values, warnings


# =============================================================================
# Rewrite steps
# =============================================================================


def add_placeholders_if_needed(body: PageElement | None, kind: PlaceholderKind, doc_id: str = UNKNOWN_DOC_ID) -> int:
    """Inject ``kind`` placeholders unless the body already holds one.

    The guard is global: a single existing placeholder of this kind anywhere
    in the body skips the injection for all elements, which makes the step
    idempotent.

    Returns:
        Number of placeholders added.
    """
    if body is None:
        return 0
    if find_first(body, kind.existing) is not None:
        LOGGER.debug(f"{doc_id}: {kind.name} placeholders already present")
        return 0

    targets = find_all(body, SELECTORS.placeholder_targets)
    if targets:
        LOGGER.info(f"{doc_id}: adding {len(targets)} {kind.name} placeholders")
    for target in targets:
        placeholder = make_element(
            target,
            "div",
            {
                "id": kind.id_prefix + (attr_value(target, "id") or ""),
                "class": kind.css_class,
                "data-generator": GENERATOR,
            },
        )
        insert_child_at(target, placeholder, kind.position)
    return len(targets)


def wrap_tables(body: PageElement | None, doc_id: str = UNKNOWN_DOC_ID) -> int:
    """Wrap every chapter table in a ``div.ib-table-wrapper``."""
    count = wrap_all(
        body,
        SELECTORS.chapter_tables,
        "div",
        {"class": "ib-table-wrapper", "data-generator": GENERATOR},
    )
    if count:
        LOGGER.info(f"{doc_id}: wrapping {count} tables")
    return count


def disable_click_handlers(body: PageElement | None, doc_id: str = UNKNOWN_DOC_ID) -> int:
    """Disable ``onclick`` everywhere except on dyncal buttons."""
    count = disable_attribute_all(body, "onclick", SELECTORS.click_handlers)
    if count:
        LOGGER.info(f"{doc_id}: disabling {count} onclick events")
    return count


# =============================================================================
# Pipeline
# =============================================================================


def assemble(tree: PageElement, config: AssemblerConfig) -> DocumentRecord:
    """
    Turn a parsed document into a DocumentRecord, rewriting the tree in place.

    Args:
        tree: Parsed document; it is mutated and should be discarded afterwards.
        config: Meta allow-list and generation tag.

    Returns:
        The assembled record. Invalid slot payloads are reported in
        ``record.warnings``.
    """
    head = find_first(tree, SELECTORS.head)
    body = find_first(tree, SELECTORS.body)

    title = content(find_first(head, SELECTORS.title))
    metas = extract_metas(head, config.meta_name_allowed)
    doc_id = get_doc_id(metas)
    slots, warnings = extract_slots(head, doc_id)
    scripts = to_map_array(find_all(head, SELECTORS.kept_scripts))

    add_placeholders_if_needed(body, NOTICE, doc_id)
    add_placeholders_if_needed(body, SEEALSO, doc_id)
    dropped = remove_all(tree, SELECTORS.dropped_scripts)
    commented = replace_all_with_comments(body, SELECTORS.comment_targets)
    LOGGER.debug(f"{doc_id}: dropped {dropped} slot scripts, commented out {commented} nodes")
    wrap_tables(body, doc_id)
    disable_click_handlers(body, doc_id)

    return DocumentRecord(
        generated=config.generated,
        title=title,
        metas=metas,
        scripts=scripts,
        body=render_children_comment_parent(body),
        doc_id=doc_id,
        warnings=warnings,
        **slots,
    )
