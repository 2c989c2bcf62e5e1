"""Tests for the document assembly pipeline."""

import json

import pytest

from docsan.config import MetaNamePolicy
from docsan.exceptions import PayloadError
from docsan.models import SLOTS, JSONShape
from docsan.nodes import element, find_all, find_first, has_attr, render
from docsan.services.assembler import (
    NOTICE,
    SEEALSO,
    SELECTORS,
    AssemblerConfig,
    add_placeholders_if_needed,
    assemble,
    decode_slot,
    disable_click_handlers,
    extract_slots,
    get_doc_id,
    wrap_tables,
)
from docsan.services.parser import parse_document

EXPECTED_BODY = (
    '<!--<body class="doc">-->'
    '<div class="annotatable" id="s1">'
    '<div id="notice_s1" class="ib-notice" data-generator="docsan"></div>'
    "<p>Text</p>"
    '<div id="seealso_s1" class="ib-seealso" data-generator="docsan"></div>'
    "</div>"
    "<!--<script>alert(1)</script>-->"
    '<div class="ib-table-wrapper" data-generator="docsan">'
    '<table class="chapter-table"><tbody><tr><td>1</td></tr></tbody></table>'
    "</div>"
    '<a xxxonclick="go()">x</a>'
    '<button class="dyncal-button" onclick="calc()">c</button>'
    '<!--<p class="compare-to">Compare</p>-->'
    "<!--</body>-->"
)


def make_config(*names: str) -> AssemblerConfig:
    return AssemblerConfig(meta_name_allowed=MetaNamePolicy.of(names), generated="docsan test")


def body_of(markup: str):
    return find_first(parse_document(f"<html><body>{markup}</body></html>"), element("body"))


class TestAssemble:
    """End-to-end tests for assemble."""

    def test_full_document(self, sample_html: str) -> None:
        """Test that every pipeline step shows up in the record."""
        record = assemble(parse_document(sample_html), make_config("docid"))

        assert record.generated == "docsan test"
        assert record.title == "Tax & Treaties"
        assert record.metas == [{"name": "docid", "content": "evdeudir_2006_112"}, {"charset": "utf-8"}]
        assert record.doc_id == "evdeudir_2006_112"
        assert record.outline == '{"chapters": [1, 2]}'
        assert record.slot_value("outline") == {"chapters": [1, 2]}
        assert record.tables == '[{"id": "t1"}]'
        assert record.sumtab == "{}"
        assert record.seealso == "{}"
        assert record.lookup == "[]"
        assert record.scripts == [{"src": "app.js", "type": "text/javascript"}]
        assert record.body == EXPECTED_BODY
        assert record.warnings == []

    def test_slot_scripts_are_dropped_from_tree(self, sample_html: str) -> None:
        """Test that slot and toc scripts are removed while the head keeps its other scripts."""
        tree = parse_document(sample_html)
        assemble(tree, make_config())
        assert find_first(tree, SELECTORS.dropped_scripts) is None
        head = find_first(tree, element("head"))
        assert [s.get("src") for s in find_all(head, element("script"))] == ["app.js"]

    def test_empty_allow_list_keeps_only_unnamed_metas(self, sample_html: str) -> None:
        record = assemble(parse_document(sample_html), make_config())
        assert record.metas == [{"charset": "utf-8"}]
        assert record.doc_id == "unknown"

    def test_meta_policy_is_case_sensitive(self, sample_html: str) -> None:
        record = assemble(parse_document(sample_html), make_config("DOCID"))
        assert record.metas == [{"charset": "utf-8"}]

    def test_fragment_keeps_its_content(self):
        """Test that a fragment without html, head or body tags keeps its content in the body."""
        record = assemble(parse_document("<p>just text</p>"), make_config("docid"))
        assert record.title == ""
        assert record.metas == []
        assert record.scripts == []
        assert record.body == "<!--<body>--><p>just text</p><!--</body>-->"
        assert record.outline == "{}"
        assert record.lookup == "[]"

    def test_omitted_body_tag(self):
        """Test that body content is kept when only the head tags are written out."""
        markup = '<html><head><title>T</title></head><p class="compare-to">c</p><p>content</p></html>'
        record = assemble(parse_document(markup), make_config())
        assert record.title == "T"
        assert record.body == '<!--<body>--><!--<p class="compare-to">c</p>--><p>content</p><!--</body>-->'

    def test_invalid_payload_falls_back_to_default(self):
        """Test that a bad slot payload gives the slot default and a warning."""
        markup = (
            '<html><head><script id="outline">{not json</script>'
            '<script id="lookup"></script><script id="links">{"a": 1}</script></head><body></body></html>'
        )
        record = assemble(parse_document(markup), make_config())
        assert record.outline == "{}"
        assert record.lookup == "[]"
        assert record.links == '{"a": 1}'
        assert len(record.warnings) == 2
        assert "#outline" in record.warnings[0]

    def test_placeholders_are_idempotent(self):
        """Test that a second pass over the output adds no placeholders."""
        markup = '<html><head></head><body><div class="annotatable" id="a">x</div></body></html>'
        tree = parse_document(markup)
        assemble(tree, make_config())
        first = render(tree)
        assemble(tree, make_config())
        assert render(tree) == first
        assert len(find_all(tree, NOTICE.existing)) == 1
        assert len(find_all(tree, SEEALSO.existing)) == 1

    def test_record_json_field_order(self, sample_html: str) -> None:
        record = assemble(parse_document(sample_html), make_config("docid"))
        data = json.loads(record.to_json())
        assert list(data) == [
            "generated",
            "title",
            "outline",
            "sumtab",
            "links",
            "seealso",
            "tables",
            "lookup",
            "specialcopyrights",
            "metas",
            "scripts",
            "body",
        ]


class TestPlaceholders:
    """Tests for add_placeholders_if_needed."""

    def test_adds_first_and_last(self):
        body = body_of('<div class="annotatable" id="a"><p>x</p></div><div class="other" id="b"></div>')
        assert add_placeholders_if_needed(body, NOTICE) == 1
        assert add_placeholders_if_needed(body, SEEALSO) == 1
        div = find_first(body, element("div"))
        assert [c.get("id") for c in div.contents] == ["notice_a", None, "seealso_a"]

    def test_needs_id(self):
        """Test that annotatable elements without an id are skipped."""
        body = body_of('<div class="annotatable">x</div>')
        assert add_placeholders_if_needed(body, NOTICE) == 0

    def test_existing_placeholder_skips_whole_body(self):
        """Test that one existing placeholder anywhere disables the injection everywhere."""
        body = body_of(
            '<div class="annotatable" id="a"><div id="notice_a"></div></div><div class="annotatable" id="b"></div>'
        )
        assert add_placeholders_if_needed(body, NOTICE) == 0
        assert add_placeholders_if_needed(body, SEEALSO) == 2

    def test_no_body(self):
        assert add_placeholders_if_needed(None, NOTICE) == 0


class TestRewriteSteps:
    """Tests for table wrapping and click handler disabling."""

    def test_wrap_tables_only_chapter_tables(self):
        body = body_of('<table class="chapter-table big"></table><table class="plain"></table>')
        assert wrap_tables(body) == 1
        tables = find_all(body, element("table"))
        assert tables[0].parent.get("class") == "ib-table-wrapper"
        assert tables[1].parent is body

    def test_disable_click_handlers_spares_dyncal(self):
        body = body_of('<a onclick="a()">a</a><span class="x dyncal-button" onclick="b()">b</span>')
        assert disable_click_handlers(body) == 1
        assert [n.name for n in find_all(body, has_attr("onclick"))] == ["span"]


class TestSlots:
    """Tests for slot decoding."""

    def test_missing_script_gives_default(self):
        for slot in SLOTS:
            expected = "{}" if slot.shape is JSONShape.OBJECT else "[]"
            assert decode_slot(None, slot) == expected

    def test_invalid_json_raises_payload_error(self):
        tree = parse_document('<script id="sumtab">nope</script>')
        slot = next(s for s in SLOTS if s.script_id == "sumtab")
        with pytest.raises(PayloadError) as exc_info:
            decode_slot(find_first(tree, element("script")), slot)
        assert exc_info.value.context["slot"] == "sumtab"

    @pytest.mark.parametrize("payload", ["NaN", "Infinity", "-Infinity", '{"a": [1, NaN]}'])
    def test_non_standard_constants_are_invalid(self, payload: str) -> None:
        """Test that NaN and Infinity are refused like any other invalid payload."""
        tree = parse_document(f'<head><script id="outline">{payload}</script></head>')
        values, warnings = extract_slots(find_first(tree, element("head")), "d1")
        assert values["outline"] == "{}"
        assert len(warnings) == 1
        assert "#outline" in warnings[0]

    def test_payload_text_is_kept_verbatim(self):
        """Test that precision, huge numbers and duplicate keys reach the output unchanged."""
        payload = '{"rate": 0.10000000000000000001, "big": 1e999, "k": 1, "k": 2}'
        tree = parse_document(f'<html><head><script id="outline">\n{payload}\n</script></head><body></body></html>')
        record = assemble(tree, make_config())
        assert record.outline == payload
        assert f'"outline":{payload},' in record.to_json()
        assert record.warnings == []

    def test_references_feed_seealso(self):
        tree = parse_document('<head><script id="references">{"r": [1]}</script></head>')
        values, warnings = extract_slots(find_first(tree, element("head")), "d1")
        assert values["seealso"] == '{"r": [1]}'
        assert warnings == []

    def test_payload_is_not_required_to_match_shape(self):
        """Test that any valid JSON is passed through as-is."""
        tree = parse_document('<head><script id="tables">{"not": "a list"}</script></head>')
        values, _ = extract_slots(find_first(tree, element("head")), "d1")
        assert values["tables"] == '{"not": "a list"}'


class TestDocId:
    """Tests for get_doc_id."""

    def test_name_is_case_insensitive(self):
        assert get_doc_id([{"charset": "utf-8"}, {"name": "DocID", "content": "x1"}]) == "x1"

    def test_first_wins(self):
        assert get_doc_id([{"name": "docid", "content": "a"}, {"name": "docid", "content": "b"}]) == "a"

    def test_unknown(self):
        assert get_doc_id([]) == "unknown"
