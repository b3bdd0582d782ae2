"""Tests for the document renderer."""

import pytest

from docengine.infrastructure.content.base import DocumentKind
from docengine.infrastructure.content.codec import encode_link
from docengine.infrastructure.content.renderer import DocumentRenderer, format_price, is_safe_url, youtube_embed_url


def block(block_id, type, content=""):
    return {"id": block_id, "type": type, "content": content}


@pytest.fixture
def renderer():
    return DocumentRenderer()


class TestRenderBlocks:
    def test_numbered_list_positions(self, renderer):
        blocks = [
            block(1, "bullet_list", "a"),
            block(2, "numbered_list", "x"),
            block(3, "numbered_list", "y"),
            block(4, "text", "note"),
            block(5, "numbered_list", "z"),
        ]
        rendered = {item.id: item for item in renderer.render_blocks(blocks)}
        assert [rendered[i].position for i in (2, 3, 5)] == [1, 2, 1]
        assert rendered[3].html == '<li value="2">y</li>'

    def test_todo_checked_state(self, renderer):
        (item,) = renderer.render_blocks([block(1, "todo", "[x] Buy milk")])
        assert item.checked is True
        assert "checked" in item.html
        assert "Buy milk" in item.html
        assert "[x]" not in item.html

    def test_toggle_is_collapsed(self, renderer):
        (item,) = renderer.render_blocks([block(1, "toggle", "Question\n---\nAnswer")])
        assert item.collapsed is True
        assert item.title_html == "Question"
        assert item.body_html == "Answer"
        assert "<details" in item.html and " open" not in item.html

    def test_markup_in_content_is_sanitized(self, renderer):
        (item,) = renderer.render_blocks([block(1, "text", "<b>hi</b><script>alert(1)</script><img src=x>")])
        assert item.html == "<p><b>hi</b></p>"

    def test_code_is_escaped_not_sanitized(self, renderer):
        (item,) = renderer.render_blocks([block(1, "code", "<script>x()</script>")])
        assert item.html == "<pre><code>&lt;script&gt;x()&lt;/script&gt;</code></pre>"

    def test_link_with_label(self, renderer):
        (item,) = renderer.render_blocks([block(1, "link", "https://example.com|Example")])
        assert item.url == "https://example.com"
        assert item.label == "Example"
        assert 'href="https://example.com"' in item.html
        assert ">Example</a>" in item.html

    def test_link_with_separator_in_url(self, renderer):
        (item,) = renderer.render_blocks([block(1, "link", encode_link("https://a.com/?q=a|b", "Search"))])
        assert item.url == "https://a.com/?q=a%7Cb"
        assert item.label == "Search"

    def test_image_url_is_trimmed(self, renderer):
        (item,) = renderer.render_blocks([block(1, "image", "  https://example.com/a.png \n")])
        assert item.url == "https://example.com/a.png"

    def test_unknown_type_renders_as_text(self, renderer):
        (item,) = renderer.render_blocks([block(1, "mystery", "plain words")])
        assert item.type == "mystery"
        assert item.html == "<p>plain words</p>"

    @pytest.mark.parametrize("type", ["image", "video", "link"])
    def test_unsafe_urls_are_dropped(self, renderer, type):
        assert renderer.render_blocks([block(1, type, "javascript:alert(1)")]) == []

    def test_youtube_video_gets_embed_url(self, renderer):
        (item,) = renderer.render_blocks([block(1, "video", "https://www.youtube.com/watch?v=abc123")])
        assert item.embed_url == "https://www.youtube.com/embed/abc123"
        assert "<iframe" in item.html

    def test_other_video_uses_video_tag(self, renderer):
        (item,) = renderer.render_blocks([block(1, "video", "https://cdn.example.com/clip.mp4")])
        assert item.embed_url is None
        assert "<video" in item.html

    def test_divider(self, renderer):
        (item,) = renderer.render_blocks([block(1, "divider", "ignored")])
        assert item.html == "<hr>"

    def test_headings(self, renderer):
        rendered = renderer.render_blocks([block(1, "heading1", "A"), block(2, "heading3", "C")])
        assert [item.html for item in rendered] == ["<h1>A</h1>", "<h3>C</h3>"]

    def test_empty_text_skipped_for_knowledge_base(self, renderer):
        assert renderer.render_blocks([block(1, "text", "  ")]) == []

    def test_empty_text_is_spacer_for_blog_post(self):
        blog = DocumentRenderer(mode=DocumentKind.BLOG_POST)
        (item,) = blog.render_blocks([block(1, "text", "")])
        assert "spacer" in item.html

    def test_malformed_payloads_do_not_raise(self, renderer):
        rendered = renderer.render_blocks([block(1, "todo", "no marker"), block(2, "toggle", "no sentinel")])
        assert rendered[0].checked is False
        assert rendered[1].body_html == ""


class TestRenderHtml:
    def test_list_runs_are_wrapped(self, renderer):
        html = renderer.render_html(
            [
                block(1, "numbered_list", "x"),
                block(2, "numbered_list", "y"),
                block(3, "text", "note"),
                block(4, "bullet_list", "b"),
            ]
        )
        assert html.split("\n") == [
            "<ol>",
            '<li value="1">x</li>',
            '<li value="2">y</li>',
            "</ol>",
            "<p>note</p>",
            "<ul>",
            "<li>b</li>",
            "</ul>",
        ]


class TestRenderLocked:
    def test_shows_titles_and_price_but_no_content(self, renderer):
        document = {"title": "Paid Guide", "description": "Secrets", "price_cents": 1999, "cover_image_url": None}
        skeleton = [{"title": "Chapter 1", "depth": 0}, {"title": "Section 1.1", "depth": 1}]
        html = renderer.render_locked(document, skeleton)
        assert "Paid Guide" in html
        assert "$19.99" in html
        assert "Chapter 1" in html and "Section 1.1" in html
        assert "Buy to unlock" in html

    def test_titles_are_escaped(self, renderer):
        html = renderer.render_locked({"title": "<script>", "price_cents": 100}, [])
        assert "<script>" not in html


class TestHelpers:
    def test_safe_urls(self):
        assert is_safe_url("https://a.com/x")
        assert is_safe_url("http://a.com")
        assert not is_safe_url("ftp://a.com")
        assert not is_safe_url("javascript:alert(1)")
        assert not is_safe_url("")

    def test_short_youtube_link(self):
        assert youtube_embed_url("https://youtu.be/xyz_9") == "https://www.youtube.com/embed/xyz_9"

    def test_non_youtube_link(self):
        assert youtube_embed_url("https://vimeo.com/1") is None

    def test_price(self):
        assert format_price(0) == "Free"
        assert format_price(1500) == "$15.00"
