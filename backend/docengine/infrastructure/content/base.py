"""Block types and the decoded values carried by block payloads."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BlockType(str, Enum):
    """Supported block types."""

    TEXT = "text"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    QUOTE = "quote"
    CALLOUT = "callout"
    CODE = "code"
    IMAGE = "image"
    VIDEO = "video"
    LINK = "link"
    BULLET_LIST = "bullet_list"
    NUMBERED_LIST = "numbered_list"
    TODO = "todo"
    TOGGLE = "toggle"
    DIVIDER = "divider"


HEADING_TYPES = frozenset({BlockType.HEADING1, BlockType.HEADING2, BlockType.HEADING3})
URL_TYPES = frozenset({BlockType.IMAGE, BlockType.VIDEO, BlockType.LINK})


@dataclass(frozen=True)
class TodoState:
    """Checked flag and text of a todo block."""

    checked: bool
    text: str


@dataclass(frozen=True)
class ToggleState:
    """Title and body of a toggle block."""

    title: str
    body: str


@dataclass(frozen=True)
class LinkTarget:
    """Url and display label of a link block."""

    url: str
    label: str


@dataclass(frozen=True)
class ListItem:
    """Text of a list item together with its derived display position."""

    text: str
    position: int = 1
    ordered: bool = False


@dataclass(frozen=True)
class PlainContent:
    """Payload of every block type whose content is the displayed value."""

    text: str
    url: Optional[str] = None


class DocumentKind(str, Enum):
    """What a document is published as; decides a few rendering rules."""

    KNOWLEDGE_BASE = "knowledge_base"
    BLOG_POST = "blog_post"
