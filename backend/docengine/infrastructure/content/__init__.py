from .base import BlockType, DocumentKind, LinkTarget, ListItem, PlainContent, TodoState, ToggleState
from .codec import (
    decode,
    decode_link,
    decode_todo,
    decode_toggle,
    encode_link,
    encode_todo,
    encode_toggle,
    list_position,
    toggle_todo,
)
from .renderer import DocumentRenderer, RenderedBlock
from .sanitizer import Sanitizer, sanitize

__all__ = [
    "BlockType",
    "DocumentKind",
    "DocumentRenderer",
    "LinkTarget",
    "ListItem",
    "PlainContent",
    "RenderedBlock",
    "Sanitizer",
    "TodoState",
    "ToggleState",
    "decode",
    "decode_link",
    "decode_todo",
    "decode_toggle",
    "encode_link",
    "encode_todo",
    "encode_toggle",
    "list_position",
    "sanitize",
    "toggle_todo",
]
