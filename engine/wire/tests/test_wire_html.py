"""
Wire Engine — HTML helper tests

update_html stamps attributes on the root element only, keeps the root's
inner markup as written, drops anything outside the root, and appends the
footer on its own line. html_hash is CRC-32 over the UTF-8 bytes.
"""

import html
import logging

import pytest

from engine.wire.errors import RenderError
from engine.wire.html import html_hash, parse_fragment, update_html


class TestHtmlHash:
    def test_known_values(self):
        assert html_hash("") == "00000000"
        assert html_hash("hello") == "3610a686"

    def test_stable_for_identical_markup(self):
        markup = '<div class="counter"><span>0</span></div>'
        assert html_hash(markup) == html_hash(markup)

    def test_changes_on_any_byte(self):
        assert html_hash("<span>0</span>") != html_hash("<span>1</span>")
        assert html_hash("<span>0</span>") != html_hash("<span>0</span> ")

    def test_fixed_width_hex(self):
        for markup in ["a", "<div></div>", "é" * 100]:
            token = html_hash(markup)
            assert len(token) == 8
            int(token, 16)


class TestUpdateHtml:
    def test_sets_attribute_and_footer(self):
        out = update_html('<div class="a">hi</div>', {"wire:id": "x"}, "<!-- end -->")
        assert out == '<div class="a" wire:id="x">hi</div>\n<!-- end -->\n'

    def test_overwrites_existing_attribute_in_place(self):
        out = update_html('<div id="old" class="c"></div>', {"id": "new"}, "")
        assert out == '<div id="new" class="c"></div>\n\n'

    def test_new_attributes_keep_given_order(self):
        out = update_html("<div></div>", {"wire:id": "x", "wire:initial-data": "{}"}, "")
        assert out.startswith('<div wire:id="x" wire:initial-data="{}">')

    def test_drops_content_outside_root(self):
        markup = "\n  <!-- lead -->\n  <section><p>a &amp; b</p><!-- c --></section>\n trailing text"
        out = update_html(markup, {}, "")
        assert out == "<section><p>a &amp; b</p><!-- c --></section>\n\n"

    def test_inner_markup_kept_verbatim(self):
        markup = '<div>\n  <button wire:click="add(\'10\')">&minus;</button>\n  <br/>\n  <img src=x>\n</div>'
        out = update_html(markup, {"wire:id": "x"}, "")
        assert out == (
            '<div wire:id="x">\n  <button wire:click="add(\'10\')">&minus;</button>\n  <br/>\n  <img src=x>\n</div>\n\n'
        )

    def test_nested_same_tag(self):
        out = update_html("<div><div>x</div><div>y</div></div>", {"wire:id": "x"}, "")
        assert out == '<div wire:id="x"><div>x</div><div>y</div></div>\n\n'

    def test_script_body_untouched(self):
        markup = "<div><script>if (a < b && c) { go(); }</script></div>"
        out = update_html(markup, {}, "")
        assert out == markup + "\n\n"

    def test_attribute_values_are_escaped(self):
        value = '{"a":"<b> & \'c\'"}'
        out = update_html("<div></div>", {"wire:initial-data": value}, "")
        start_tag = out.split(">", 1)[0]
        assert '"<b>' not in start_tag
        raw = start_tag.split('wire:initial-data="', 1)[1].rstrip('"')
        assert html.unescape(raw) == value

    def test_existing_entity_in_attribute_round_trips(self):
        out = update_html('<a title="x &amp; y"></a>', {}, "")
        assert out == '<a title="x &amp; y"></a>\n\n'

    def test_bare_attribute(self):
        out = update_html("<div hidden></div>", {"wire:id": "x"}, "")
        assert out == '<div hidden wire:id="x"></div>\n\n'

    def test_void_root(self):
        out = update_html('<input type="text">', {"wire:id": "x"}, "")
        assert out == '<input type="text" wire:id="x">\n\n'

    def test_tag_names_lowercased(self):
        out = update_html("<DIV>x</DIV>", {"wire:id": "x"}, "")
        assert out == '<div wire:id="x">x</div>\n\n'

    def test_unclosed_root_is_closed(self):
        out = update_html("<div><p>x", {}, "")
        assert out == "<div><p>x</div>\n\n"


class TestRootValidation:
    def test_no_root_element(self):
        with pytest.raises(RenderError) as exc:
            update_html("just text", {"wire:id": "x"}, "")
        assert "no root element" in exc.value.message

    def test_empty_markup(self):
        with pytest.raises(RenderError):
            update_html("", {}, "")

    def test_multiple_roots_stamp_first_and_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="engine.wire.html"):
            out = update_html("<p>a</p>\n<p>b</p>", {"wire:id": "x"}, "")
        assert out == '<p wire:id="x">a</p>\n\n'
        assert "2 top-level elements" in caplog.text

    def test_multiple_roots_strict(self):
        with pytest.raises(RenderError) as exc:
            update_html("<p>a</p><p>b</p>", {"wire:id": "x"}, "", strict=True)
        assert exc.value.context["roots"] == 2

    def test_parse_fragment_counts_top_level_only(self):
        fragment = parse_fragment("<ul><li>a</li><li>b</li></ul>")
        assert fragment.tag == "ul"
        assert fragment.top_level_elements == 1
        assert fragment.inner == "<li>a</li><li>b</li>"
