"""Slash-command menu state machine.

States per focused block: ``Idle`` and ``SlashMenuOpen(filter_text,
selected_index)``. Focus and menu highlight are interaction state only and
are never persisted.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..content.base import BlockType


@dataclass(frozen=True)
class SlashCandidate:
    """A block type offered by the slash menu."""

    type: BlockType
    label: str
    description: str


SLASH_CANDIDATES: Tuple[SlashCandidate, ...] = (
    SlashCandidate(BlockType.TEXT, "Text", "Plain paragraph"),
    SlashCandidate(BlockType.HEADING1, "Heading 1", "Large section heading"),
    SlashCandidate(BlockType.HEADING2, "Heading 2", "Medium section heading"),
    SlashCandidate(BlockType.HEADING3, "Heading 3", "Small section heading"),
    SlashCandidate(BlockType.BULLET_LIST, "Bulleted list", "Simple bulleted list"),
    SlashCandidate(BlockType.NUMBERED_LIST, "Numbered list", "List with automatic numbering"),
    SlashCandidate(BlockType.TODO, "To-do", "Checkbox item"),
    SlashCandidate(BlockType.TOGGLE, "Toggle", "Collapsible title with hidden body"),
    SlashCandidate(BlockType.QUOTE, "Quote", "Highlighted quotation"),
    SlashCandidate(BlockType.CALLOUT, "Callout", "Boxed note that stands out"),
    SlashCandidate(BlockType.CODE, "Code", "Preformatted code snippet"),
    SlashCandidate(BlockType.IMAGE, "Image", "Image from a url"),
    SlashCandidate(BlockType.VIDEO, "Video", "YouTube or video url"),
    SlashCandidate(BlockType.LINK, "Link", "Link written as url or url|label"),
    SlashCandidate(BlockType.DIVIDER, "Divider", "Horizontal rule"),
)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class SlashMenuOpen:
    filter_text: str = ""
    selected_index: int = 0


MenuState = Union[Idle, SlashMenuOpen]

IDLE = Idle()


def filter_candidates(
    filter_text: str, candidates: Sequence[SlashCandidate] = SLASH_CANDIDATES
) -> List[SlashCandidate]:
    """Candidates whose label (any case) or type id contains the filter."""
    needle = filter_text.lower()
    return [
        candidate
        for candidate in candidates
        if needle in candidate.label.lower() or needle in candidate.type.value
    ]


class SlashMenu:
    """Slash menu for the focused block.

    Example:
        ```python
        menu = SlashMenu()
        menu.on_input("/")       # SlashMenuOpen("", 0)
        menu.on_input("/head")   # SlashMenuOpen("head", 0)
        menu.move(1)             # SlashMenuOpen("head", 1)
        menu.select().type       # BlockType.HEADING2
        ```
    """

    def __init__(self, candidates: Sequence[SlashCandidate] = SLASH_CANDIDATES):
        self._all = tuple(candidates)
        self.state: MenuState = IDLE

    @property
    def is_open(self) -> bool:
        return isinstance(self.state, SlashMenuOpen)

    @property
    def candidates(self) -> List[SlashCandidate]:
        if not isinstance(self.state, SlashMenuOpen):
            return []
        return filter_candidates(self.state.filter_text, self._all)

    @property
    def selected(self) -> Optional[SlashCandidate]:
        if not isinstance(self.state, SlashMenuOpen):
            return None
        candidates = self.candidates
        if not candidates:
            return None
        return candidates[min(self.state.selected_index, len(candidates) - 1)]

    def on_input(self, content: str) -> MenuState:
        """Update the menu after the focused block's content changed.

        A lone ``/`` opens the menu; further text after the slash becomes the
        filter and resets the highlight; anything not starting with ``/``
        closes it.
        """
        if isinstance(self.state, SlashMenuOpen):
            if content.startswith("/"):
                self.state = SlashMenuOpen(filter_text=content[1:], selected_index=0)
            else:
                self.state = IDLE
        elif content == "/":
            self.state = SlashMenuOpen()
        return self.state

    def move(self, delta: int) -> MenuState:
        """Move the highlight, clamped to the filtered list without wrapping."""
        if isinstance(self.state, SlashMenuOpen):
            last = max(len(self.candidates) - 1, 0)
            index = min(max(self.state.selected_index + delta, 0), last)
            self.state = SlashMenuOpen(filter_text=self.state.filter_text, selected_index=index)
        return self.state

    def select(self, index: Optional[int] = None) -> Optional[SlashCandidate]:
        """Choose a candidate and close the menu.

        Args:
            index: Index into the filtered list; the highlighted one when None

        Returns:
            The chosen candidate, or None when nothing matches. The menu stays
            open in that case.
        """
        if not isinstance(self.state, SlashMenuOpen):
            return None
        candidates = self.candidates
        if index is None:
            choice = self.selected
        elif 0 <= index < len(candidates):
            choice = candidates[index]
        else:
            choice = None

        if choice is not None:
            self.state = IDLE
        return choice

    def close(self) -> MenuState:
        self.state = IDLE
        return self.state
