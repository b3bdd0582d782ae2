"""Encode and decode the state packed into a block's plain-text payload.

Todo, toggle and link blocks keep extra state inside ``content``:

- todo: ``"[ ] text"`` / ``"[x] text"``
- toggle: ``"title\\n---\\nbody"``
- link: ``"url"`` or ``"url|label"``

List positions are derived from neighbouring blocks and never stored.
Decoders never raise: a payload that does not match its type's shape is
read as plain text.
"""

import re
from typing import Any, Optional, Sequence, Union

from .base import BlockType, LinkTarget, ListItem, PlainContent, TodoState, ToggleState

TOGGLE_SENTINEL = "\n---\n"
LINK_SEPARATOR = "|"

_TODO_PATTERN = re.compile(r"^\[([ xX])\]\s*(.*)$", re.DOTALL)

DecodedContent = Union[TodoState, ToggleState, LinkTarget, ListItem, PlainContent]


def decode_todo(content: Optional[str]) -> TodoState:
    """Decode a todo payload.

    Args:
        content: Stored payload, e.g. ``"[x] Buy milk"``

    Returns:
        The checked flag and item text. A payload without a marker is an
        unchecked item whose text is the whole payload. Whitespace between
        the marker and the text is dropped, so leading spaces in a todo's
        text do not survive a round trip.
    """
    content = content or ""
    match = _TODO_PATTERN.match(content)
    if match is None:
        return TodoState(checked=False, text=content)
    return TodoState(checked=match.group(1).lower() == "x", text=match.group(2))


def encode_todo(checked: bool, text: str) -> str:
    return ("[x] " if checked else "[ ] ") + text


def toggle_todo(content: Optional[str]) -> str:
    """Flip the checked state of a todo payload, keeping its text."""
    state = decode_todo(content)
    return encode_todo(not state.checked, state.text)


def decode_toggle(content: Optional[str]) -> ToggleState:
    """Split a toggle payload on the first sentinel line."""
    content = content or ""
    title, sentinel, body = content.partition(TOGGLE_SENTINEL)
    if not sentinel:
        return ToggleState(title=content, body="")
    return ToggleState(title=title, body=body)


def encode_toggle(title: str, body: str) -> str:
    return f"{title}{TOGGLE_SENTINEL}{body}"


def decode_link(content: Optional[str]) -> LinkTarget:
    """Decode ``"url"`` or ``"url|label"``; the label falls back to the url."""
    content = (content or "").strip()
    url, _, label = content.partition(LINK_SEPARATOR)
    url = url.strip()
    label = label.strip()
    return LinkTarget(url=url, label=label or url)


def encode_link(url: str, label: Optional[str] = None) -> str:
    """Pack a link; a separator inside the url is percent-encoded."""
    encoded = url.replace(LINK_SEPARATOR, "%7C")
    if not label or label == url:
        return encoded
    return f"{encoded}{LINK_SEPARATOR}{label}"


def _type_of(block: Any) -> str:
    block_type = block["type"] if isinstance(block, dict) else block.type
    return block_type.value if isinstance(block_type, BlockType) else str(block_type)


def list_position(blocks: Sequence[Any], index: int) -> int:
    """Display position of the block at ``index`` within its list run.

    The position is one plus the number of contiguous preceding siblings
    with the same type, so a run restarts at 1 after any other block.

    Args:
        blocks: Sibling blocks in display order (objects or dicts with ``type``)
        index: Index of the block whose position is wanted

    Returns:
        1-based position within the run
    """
    block_type = _type_of(blocks[index])
    position = 1
    cursor = index - 1
    while cursor >= 0 and _type_of(blocks[cursor]) == block_type:
        position += 1
        cursor -= 1
    return position


def decode(block_type: Union[BlockType, str], content: Optional[str], position: int = 1) -> DecodedContent:
    """Decode a payload according to its block type.

    Args:
        block_type: Block type the payload belongs to
        content: Stored payload
        position: Display position, used for list items only

    Returns:
        The structured value for the type. Unknown types decode as plain text.
    """
    try:
        kind = BlockType(block_type)
    except ValueError:
        return PlainContent(text=content or "")

    if kind == BlockType.TODO:
        return decode_todo(content)
    if kind == BlockType.TOGGLE:
        return decode_toggle(content)
    if kind == BlockType.LINK:
        return decode_link(content)
    if kind in (BlockType.BULLET_LIST, BlockType.NUMBERED_LIST):
        return ListItem(text=content or "", position=position, ordered=kind == BlockType.NUMBERED_LIST)
    if kind == BlockType.DIVIDER:
        return PlainContent(text="")
    if kind in (BlockType.IMAGE, BlockType.VIDEO):
        url = (content or "").strip()
        return PlainContent(text=url, url=url)
    return PlainContent(text=content or "")
