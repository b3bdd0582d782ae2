"""Interactive controller for one open page.

The engine owns the page's local block list, keyboard focus and the slash
menu. Local edits apply immediately; persistence happens through a
``DocumentStore``. Content and title edits are debounced per key and
flushed on Enter, blur and close. Store failures become notifications and
are never retried; the next ``load`` reconciles with the stored state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from ...modules.common.exceptions import BlockNotFoundError, PersistenceError, ValidationError
from ..config import settings
from ..content import codec
from ..content.base import BlockType
from ..logging import get_logger
from ..ordering import in_key_order, insert_after, move, remove
from .debounce import DebouncedWriter
from .state import SlashCandidate, SlashMenu
from .store import BlockRecord, DocumentStore

logger = get_logger(__name__)

Notifier = Callable[[str], None]


class Key(str, Enum):
    ENTER = "Enter"
    BACKSPACE = "Backspace"
    ARROW_UP = "ArrowUp"
    ARROW_DOWN = "ArrowDown"
    ESCAPE = "Escape"


@dataclass
class EditorBlock:
    """Local copy of a block while its page is open."""

    id: Optional[int]
    type: str
    content: str
    sort_order: int


@dataclass(frozen=True)
class Focus:
    block_id: int
    caret: int = 0


def _log_notification(message: str) -> None:
    logger.warning(message)


class EditorInteractionEngine:
    """Stateful editor for a single page with a single active editor.

    Args:
        store: Persistence collaborator
        page_id: Page being edited
        notify: Receives non-fatal error messages; logs a warning by default
        content_delay: Debounce window for block content, in seconds
        title_delay: Debounce window for the page title, in seconds

    Example:
        ```python
        engine = EditorInteractionEngine(HttpDocumentStore(), page_id=7)
        await engine.load()
        engine.handle_input(block_id, "Hello")
        await engine.handle_key(Key.ENTER)
        await engine.close()
        ```
    """

    def __init__(
        self,
        store: DocumentStore,
        page_id: int,
        notify: Optional[Notifier] = None,
        content_delay: Optional[float] = None,
        title_delay: Optional[float] = None,
    ):
        self.store = store
        self.page_id = page_id
        self.notify = notify or _log_notification
        self.blocks: List[EditorBlock] = []
        self.page_title = ""
        self.focused: Optional[Focus] = None
        self.menu = SlashMenu()

        self._content_writer: DebouncedWriter[int, str] = DebouncedWriter(
            self._write_content,
            settings.EDITOR_CONTENT_DEBOUNCE_SECONDS if content_delay is None else content_delay,
            on_error=self._on_write_error,
        )
        self._title_writer: DebouncedWriter[int, str] = DebouncedWriter(
            self._write_title,
            settings.EDITOR_TITLE_DEBOUNCE_SECONDS if title_delay is None else title_delay,
            on_error=self._on_write_error,
        )

    # Loading and lookup

    async def load(self) -> bool:
        """Fetch the page title and its blocks, replacing local state."""
        try:
            page = await self.store.get_page(self.page_id)
            records = await self.store.list_blocks(self.page_id)
        except PersistenceError as e:
            self.notify(f"Could not load page: {e}")
            return False

        self.page_title = page.title
        self.blocks = [self._from_record(record) for record in in_key_order(records)]
        self.focused = None
        self.menu.close()
        logger.debug("Page loaded", extra={"page_id": self.page_id, "block_count": len(self.blocks)})
        return True

    @staticmethod
    def _from_record(record: BlockRecord) -> EditorBlock:
        return EditorBlock(id=record.id, type=record.type, content=record.content, sort_order=record.sort_order)

    def index_of(self, block_id: int) -> int:
        for index, block in enumerate(self.blocks):
            if block.id == block_id:
                return index
        raise BlockNotFoundError(f"Block with ID {block_id} is not on this page")

    def get_block(self, block_id: int) -> EditorBlock:
        return self.blocks[self.index_of(block_id)]

    @property
    def focused_block(self) -> Optional[EditorBlock]:
        if self.focused is None:
            return None
        return self.get_block(self.focused.block_id)

    def display_position(self, block_id: int) -> int:
        """List position of a block, derived from its neighbours."""
        return codec.list_position(self.blocks, self.index_of(block_id))

    def has_pending_content(self, block_id: int) -> bool:
        return self._content_writer.has_pending(block_id)

    @property
    def has_pending_title(self) -> bool:
        return self._title_writer.has_pending(self.page_id)

    # Focus and typing

    def focus(self, block_id: Optional[int], caret: Optional[int] = None) -> Optional[Focus]:
        """Move keyboard focus; the slash menu closes when focus changes block.

        Args:
            block_id: Block to focus, or None to clear focus
            caret: Caret offset; defaults to the end of the content
        """
        if block_id is None:
            self._dismiss_menu()
            self.focused = None
            return None

        block = self.get_block(block_id)
        if self.focused is None or self.focused.block_id != block_id:
            self._dismiss_menu()
        self.focused = Focus(block_id=block_id, caret=len(block.content) if caret is None else caret)
        return self.focused

    def _dismiss_menu(self) -> None:
        """Close the slash menu without a selection, keeping the typed text.

        Text typed while the menu was open only filtered it, so it is
        scheduled for saving here.
        """
        if not self.menu.is_open:
            return
        self.menu.close()
        if self.focused is None:
            return
        for block in self.blocks:
            if block.id == self.focused.block_id:
                self._content_writer.schedule(block.id, block.content)
                return

    def handle_input(self, block_id: int, content: str, caret: Optional[int] = None) -> None:
        """Apply typed content locally and drive the slash menu.

        While the menu is open the text is a filter and is saved only once
        the menu is dismissed; in every other case a debounced content
        write is scheduled.
        """
        block = self.get_block(block_id)
        self.focus(block_id, caret if caret is not None else len(content))
        block.content = content

        self.menu.on_input(content)
        if not self.menu.is_open:
            self._content_writer.schedule(block_id, content)

    def edit_title(self, title: str) -> str:
        """Set the page title locally and schedule its save.

        Raises:
            ValidationError: If the title is empty after trimming
        """
        trimmed = (title or "").strip()
        if not trimmed:
            raise ValidationError("Page title cannot be empty")
        self.page_title = trimmed
        self._title_writer.schedule(self.page_id, trimmed)
        return trimmed

    # Keyboard

    async def handle_key(
        self,
        key: Union[Key, str],
        shift: bool = False,
        at_top_edge: bool = False,
        at_bottom_edge: bool = False,
    ) -> bool:
        """Handle a key press on the focused block.

        Args:
            key: Key name
            shift: Whether Shift is held
            at_top_edge: Caret is on the first visual line of the block
            at_bottom_edge: Caret is on the last visual line of the block

        Returns:
            True when the engine consumed the key, False when the text
            surface should apply its default behaviour.
        """
        try:
            key = Key(key)
        except ValueError:
            return False

        block = self.focused_block
        if block is None:
            return False

        if self.menu.is_open:
            return await self._handle_menu_key(key, block)

        index = self.index_of(block.id)

        if key == Key.ENTER:
            if shift:
                return False
            if block.content == "":
                return True
            await self._content_writer.flush(block.id)
            await self._insert_block(index, BlockType.TEXT)
            return True

        if key == Key.BACKSPACE:
            if block.content != "":
                return False
            await self.delete_block(block.id)
            return True

        if key == Key.ARROW_UP and at_top_edge:
            if index > 0:
                previous = self.blocks[index - 1]
                self.focus(previous.id, len(previous.content))
            return True

        if key == Key.ARROW_DOWN and at_bottom_edge:
            if index < len(self.blocks) - 1:
                self.focus(self.blocks[index + 1].id, 0)
            return True

        return False

    async def _handle_menu_key(self, key: Key, block: EditorBlock) -> bool:
        if key == Key.ARROW_DOWN:
            self.menu.move(1)
            return True
        if key == Key.ARROW_UP:
            self.menu.move(-1)
            return True
        if key == Key.ENTER:
            candidate = self.menu.select()
            if candidate is not None:
                await self._apply_type(block, candidate)
            return True
        if key == Key.ESCAPE:
            self._dismiss_menu()
            return True
        return False

    async def select_slash_item(self, index: Optional[int] = None) -> Optional[SlashCandidate]:
        """Pick a slash-menu entry (highlighted one by default) for the focused block."""
        block = self.focused_block
        if block is None:
            return None
        candidate = self.menu.select(index)
        if candidate is not None:
            await self._apply_type(block, candidate)
        return candidate

    async def _apply_type(self, block: EditorBlock, candidate: SlashCandidate) -> None:
        self._content_writer.cancel(block.id)
        block.type = candidate.type.value
        block.content = ""
        self.focused = Focus(block_id=block.id, caret=0)
        try:
            await self.store.update_block(block.id, type=block.type, content="")
        except PersistenceError as e:
            self.notify(f"Could not change block type: {e}")

    # Structured content

    async def toggle_todo(self, block_id: int) -> str:
        """Flip a todo's checked state and save it right away."""
        block = self.get_block(block_id)
        if block.type != BlockType.TODO.value:
            raise ValidationError(f"Block {block_id} is not a todo")
        block.content = codec.toggle_todo(block.content)
        self._content_writer.schedule(block_id, block.content)
        await self._content_writer.flush(block_id)
        return block.content

    def set_toggle_part(self, block_id: int, title: Optional[str] = None, body: Optional[str] = None) -> str:
        """Edit a toggle's title or body; saved like any other typing."""
        block = self.get_block(block_id)
        if block.type != BlockType.TOGGLE.value:
            raise ValidationError(f"Block {block_id} is not a toggle")
        current = codec.decode_toggle(block.content)
        block.content = codec.encode_toggle(
            current.title if title is None else title,
            current.body if body is None else body,
        )
        self._content_writer.schedule(block_id, block.content)
        return block.content

    # Structure

    async def add_block(
        self, block_type: Union[BlockType, str] = BlockType.TEXT, index: Optional[int] = None
    ) -> Optional[EditorBlock]:
        """Create a block at ``index`` (appended when None) and focus it."""
        position = len(self.blocks) if index is None else index
        if position < 0 or position > len(self.blocks):
            raise ValidationError(f"Position {position} is out of range for {len(self.blocks)} blocks")
        return await self._insert_block(position - 1, BlockType(block_type))

    async def _insert_block(self, anchor_index: int, block_type: BlockType) -> Optional[EditorBlock]:
        previous_keys = [(block, block.sort_order) for block in self.blocks]
        new_block = EditorBlock(id=None, type=block_type.value, content="", sort_order=0)
        result = insert_after(self.blocks, anchor_index, new_block)

        try:
            record = await self.store.create_block(self.page_id, new_block.type, new_block.sort_order)
            new_block.id = record.id
            if result.renumbered:
                await self.store.reorder_blocks(self.page_id, [block.id for block in result.items])
        except PersistenceError as e:
            for block, key in previous_keys:
                block.sort_order = key
            self.notify(f"Could not create block: {e}")
            return None

        self.blocks = result.items
        self.focus(new_block.id, 0)
        return new_block

    async def delete_block(self, block_id: int) -> None:
        """Remove a block; focus moves to the end of the previous block, if any."""
        index = self.index_of(block_id)
        self._content_writer.cancel(block_id)
        self.blocks = remove(self.blocks, index).items

        if self.focused is not None and self.focused.block_id == block_id:
            if index > 0:
                previous = self.blocks[index - 1]
                self.focus(previous.id, len(previous.content))
            else:
                self.focus(None)

        try:
            await self.store.delete_block(block_id)
        except PersistenceError as e:
            self.notify(f"Could not delete block: {e}")

    async def drop(self, from_index: int, to_index: int) -> List[int]:
        """Finish a drag: move the block and send the full new order once.

        Raises:
            ValidationError: If either index is out of range
        """
        result = move(self.blocks, from_index, to_index)
        self.blocks = result.items
        ordered_ids = [block.id for block in self.blocks]

        if from_index != to_index:
            try:
                await self.store.reorder_blocks(self.page_id, ordered_ids)
            except PersistenceError as e:
                self.notify(f"Could not save block order: {e}")
        return ordered_ids

    # Lifecycle

    async def blur(self) -> None:
        """Editor lost focus: close the menu and save everything pending."""
        self.focus(None)
        await self._content_writer.flush_all()
        await self._title_writer.flush_all()

    async def close(self) -> None:
        """Teardown: flush pending writes and wait for writes in flight."""
        await self.blur()
        await self._content_writer.drain()
        await self._title_writer.drain()

    # Store callbacks

    async def _write_content(self, block_id: int, content: str) -> None:
        await self.store.update_block(block_id, content=content)

    async def _write_title(self, page_id: int, title: str) -> None:
        await self.store.rename_page(page_id, title)

    def _on_write_error(self, key: int, error: Exception) -> None:
        logger.warning("Save failed", extra={"page_id": self.page_id, "key": key, "error": str(error)})
        self.notify(f"Could not save changes: {error}")
