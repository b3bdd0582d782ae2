"""Tests for the allowlist sanitizer."""

from docengine.infrastructure.content.sanitizer import Sanitizer, sanitize


class TestSanitizer:
    def test_plain_text_is_unchanged(self):
        assert sanitize("Hello world") == "Hello world"

    def test_allowed_inline_tags_survive(self):
        cleaned = sanitize("<b>bold</b> <em>em</em> <code>x</code> <mark>hi</mark>")
        assert "<b>bold</b>" in cleaned
        assert "<em>em</em>" in cleaned
        assert "<code>x</code>" in cleaned
        assert "<mark>hi</mark>" in cleaned

    def test_script_is_removed_with_its_content(self):
        cleaned = sanitize('before<script>alert("x")</script>after')
        assert "script" not in cleaned
        assert "alert" not in cleaned
        assert "before" in cleaned and "after" in cleaned

    def test_unknown_tags_are_stripped_but_text_kept(self):
        cleaned = sanitize("<div><h1>Title</h1></div>")
        assert "<div>" not in cleaned
        assert "<h1>" not in cleaned
        assert "Title" in cleaned

    def test_event_handler_attributes_are_removed(self):
        cleaned = sanitize('<b onclick="steal()">x</b>')
        assert "onclick" not in cleaned
        assert "<b>x</b>" in cleaned

    def test_javascript_links_lose_their_href(self):
        cleaned = sanitize('<a href="javascript:alert(1)">click</a>')
        assert "javascript" not in cleaned
        assert "click" in cleaned

    def test_http_and_mailto_links_are_kept(self):
        assert 'href="https://example.com"' in sanitize('<a href="https://example.com">x</a>')
        assert 'href="mailto:a@b.c"' in sanitize('<a href="mailto:a@b.c">x</a>')

    def test_class_allowed_on_any_allowed_tag(self):
        assert 'class="hl"' in sanitize('<span class="hl">x</span>')

    def test_style_attribute_is_removed(self):
        assert "style" not in sanitize('<span style="color:red">x</span>')

    def test_empty_and_none(self):
        assert sanitize("") == ""
        assert sanitize(None) == ""

    def test_custom_allowlist(self):
        sanitizer = Sanitizer(tags={"b"}, attributes={}, url_schemes={"https"})
        assert sanitizer.clean("<b>x</b><i>y</i>") == "<b>x</b>y"
