"""Read-only projection of a page's blocks to safe HTML.

Every block's display text goes through the allowlist sanitizer before it is
treated as markup. Code blocks are escaped instead, and urls for images,
videos and links must be http(s) or the block is dropped.
"""

import html
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence
from urllib.parse import urlparse

from .base import (
    BlockType,
    DocumentKind,
    HEADING_TYPES,
    LinkTarget,
    ListItem,
    PlainContent,
    TodoState,
    ToggleState,
)
from .codec import decode, list_position
from .sanitizer import Sanitizer

_YOUTUBE_PATTERNS = (
    re.compile(r"youtu\.be/([A-Za-z0-9_-]+)"),
    re.compile(r"youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]+)"),
    re.compile(r"youtube\.com/embed/([A-Za-z0-9_-]+)"),
)
_LIST_TAGS = {BlockType.BULLET_LIST.value: "ul", BlockType.NUMBERED_LIST.value: "ol"}


@dataclass
class RenderedBlock:
    """Display form of one block.

    ``html`` is always safe to embed. The typed extras are set only for the
    block types they apply to.
    """

    id: Any
    type: str
    html: str
    position: Optional[int] = None
    checked: Optional[bool] = None
    title_html: Optional[str] = None
    body_html: Optional[str] = None
    url: Optional[str] = None
    label: Optional[str] = None
    embed_url: Optional[str] = None
    collapsed: Optional[bool] = None


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _type_name(block: Any) -> str:
    block_type = _field(block, "type", BlockType.TEXT.value)
    return block_type.value if isinstance(block_type, BlockType) else str(block_type)


def is_safe_url(url: Optional[str]) -> bool:
    """True for absolute http(s) urls."""
    if not url:
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def youtube_embed_url(url: str) -> Optional[str]:
    """Embed url for a YouTube watch or short link, None for anything else."""
    for pattern in _YOUTUBE_PATTERNS:
        match = pattern.search(url)
        if match:
            return f"https://www.youtube.com/embed/{match.group(1)}"
    return None


def format_price(price_cents: int) -> str:
    if not price_cents:
        return "Free"
    return f"${price_cents / 100:.2f}"


class DocumentRenderer:
    """Render blocks for the public viewer and blog posts.

    Args:
        sanitizer: Sanitizer applied to every piece of display text
        mode: Knowledge bases skip empty text blocks; blog posts render them
            as spacers
    """

    def __init__(self, sanitizer: Optional[Sanitizer] = None, mode: DocumentKind = DocumentKind.KNOWLEDGE_BASE):
        self.sanitizer = sanitizer or Sanitizer()
        self.mode = DocumentKind(mode)

    def _inline(self, text: Optional[str]) -> str:
        return self.sanitizer.clean(text).replace("\n", "<br>")

    def render_block(self, blocks: Sequence[Any], index: int) -> Optional[RenderedBlock]:
        """Render ``blocks[index]``; None when the block produces no output."""
        block = blocks[index]
        block_id = _field(block, "id")
        type_name = _type_name(block)

        try:
            block_type = BlockType(type_name)
        except ValueError:
            block_type = BlockType.TEXT

        position = list_position(blocks, index) if type_name in _LIST_TAGS else 1
        value = decode(block_type, _field(block, "content"), position)

        if isinstance(value, TodoState):
            checked = " checked" if value.checked else ""
            markup = (
                f'<div class="todo{" done" if value.checked else ""}">'
                f'<input type="checkbox" disabled{checked}> <span>{self._inline(value.text)}</span></div>'
            )
            return RenderedBlock(id=block_id, type=type_name, html=markup, checked=value.checked)

        if isinstance(value, ToggleState):
            title_html = self._inline(value.title)
            body_html = self._inline(value.body)
            markup = (
                f'<details class="toggle"><summary>{title_html}</summary>'
                f'<div class="toggle-body">{body_html}</div></details>'
            )
            return RenderedBlock(
                id=block_id,
                type=type_name,
                html=markup,
                title_html=title_html,
                body_html=body_html,
                collapsed=True,
            )

        if isinstance(value, LinkTarget):
            if not is_safe_url(value.url):
                return None
            markup = (
                f'<p class="link"><a href="{html.escape(value.url)}" target="_blank" '
                f'rel="noopener noreferrer">{html.escape(value.label)}</a></p>'
            )
            return RenderedBlock(id=block_id, type=type_name, html=markup, url=value.url, label=value.label)

        if isinstance(value, ListItem):
            if value.ordered:
                markup = f'<li value="{value.position}">{self._inline(value.text)}</li>'
            else:
                markup = f"<li>{self._inline(value.text)}</li>"
            return RenderedBlock(id=block_id, type=type_name, html=markup, position=value.position)

        return self._render_plain(block_id, type_name, block_type, value)

    def _render_plain(
        self, block_id: Any, type_name: str, block_type: BlockType, value: PlainContent
    ) -> Optional[RenderedBlock]:
        text = value.text

        if block_type in HEADING_TYPES:
            level = block_type.value[-1]
            return RenderedBlock(id=block_id, type=type_name, html=f"<h{level}>{self._inline(text)}</h{level}>")

        if block_type == BlockType.QUOTE:
            return RenderedBlock(id=block_id, type=type_name, html=f"<blockquote>{self._inline(text)}</blockquote>")

        if block_type == BlockType.CALLOUT:
            return RenderedBlock(id=block_id, type=type_name, html=f'<div class="callout">{self._inline(text)}</div>')

        if block_type == BlockType.CODE:
            return RenderedBlock(id=block_id, type=type_name, html=f"<pre><code>{html.escape(text)}</code></pre>")

        if block_type == BlockType.DIVIDER:
            return RenderedBlock(id=block_id, type=type_name, html="<hr>")

        if block_type == BlockType.IMAGE:
            if not is_safe_url(value.url):
                return None
            return RenderedBlock(
                id=block_id,
                type=type_name,
                html=f'<figure><img src="{html.escape(value.url)}" alt="" loading="lazy"></figure>',
                url=value.url,
            )

        if block_type == BlockType.VIDEO:
            if not is_safe_url(value.url):
                return None
            embed_url = youtube_embed_url(value.url)
            if embed_url:
                markup = (
                    f'<div class="video"><iframe src="{html.escape(embed_url)}" '
                    'allowfullscreen loading="lazy"></iframe></div>'
                )
            else:
                markup = f'<div class="video"><video src="{html.escape(value.url)}" controls></video></div>'
            return RenderedBlock(id=block_id, type=type_name, html=markup, url=value.url, embed_url=embed_url)

        if not text.strip():
            if self.mode == DocumentKind.BLOG_POST:
                return RenderedBlock(id=block_id, type=type_name, html='<div class="spacer"></div>')
            return None
        return RenderedBlock(id=block_id, type=type_name, html=f"<p>{self._inline(text)}</p>")

    def render_blocks(self, blocks: Sequence[Any]) -> List[RenderedBlock]:
        """Render blocks given in display order, skipping those with no output."""
        rendered = []
        for index in range(len(blocks)):
            result = self.render_block(blocks, index)
            if result is not None:
                rendered.append(result)
        return rendered

    def render_html(self, blocks: Sequence[Any]) -> str:
        """Render a full HTML fragment, wrapping list runs in ``ul``/``ol``."""
        parts: List[str] = []
        open_list: Optional[str] = None

        for item in self.render_blocks(blocks):
            list_tag = _LIST_TAGS.get(item.type)
            if list_tag != open_list:
                if open_list:
                    parts.append(f"</{open_list}>")
                if list_tag:
                    parts.append(f"<{list_tag}>")
                open_list = list_tag
            parts.append(item.html)

        if open_list:
            parts.append(f"</{open_list}>")
        return "\n".join(parts)

    def render_locked(self, document: Any, skeleton: Sequence[Any]) -> str:
        """Purchase placeholder for a document the caller may not read.

        Shows title, price, description, cover and the page titles of the
        skeleton. No block content is ever included.
        """
        title = html.escape(_field(document, "title") or "")
        parts = ['<section class="locked">']

        cover = _field(document, "cover_image_url")
        if is_safe_url(cover):
            parts.append(f'<img class="cover" src="{html.escape(cover.strip())}" alt="">')

        parts.append(f"<h1>{title}</h1>")
        description = _field(document, "description")
        if description:
            parts.append(f'<p class="description">{html.escape(description)}</p>')
        parts.append(f'<p class="price">{format_price(_field(document, "price_cents", 0) or 0)}</p>')

        if skeleton:
            parts.append('<ul class="locked-pages">')
            for entry in skeleton:
                depth = _field(entry, "depth", 0) or 0
                parts.append(
                    f'<li class="locked-page" data-depth="{depth}">{html.escape(_field(entry, "title") or "")}</li>'
                )
            parts.append("</ul>")

        parts.append('<p class="purchase"><a class="purchase-button" href="#purchase">Buy to unlock</a></p>')
        parts.append("</section>")
        return "\n".join(parts)
