"""In-memory page hierarchy for one document."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ...modules.common.exceptions import PageNotFoundError, ValidationError
from ..ordering import OrderingResult, assert_unique_keys, in_key_order, insert_after, renumber, reorder

DEFAULT_PAGE_TITLE = "Untitled Page"


@dataclass
class TreePage:
    """A page node. Only structural fields are tracked, never content."""

    id: Any
    title: str
    parent_page_id: Optional[Any]
    sort_order: int


@dataclass(frozen=True)
class PageSkeleton:
    """Navigation entry for a page: structure and title only."""

    id: Any
    title: str
    parent_page_id: Optional[Any]
    sort_order: int
    depth: int


class PageTree:
    """Parent/child queries and structural edits over a document's pages.

    Pages can only be created under pages that already exist and no reparent
    operation is offered, so the parent graph stays acyclic.

    Example:
        ```python
        tree = PageTree(await page_service.list_pages(db, document_id))
        for page, depth in tree.walk():
            print("  " * depth + page.title)
        ```
    """

    def __init__(self, pages: Iterable[Any] = (), placeholder_title: str = DEFAULT_PAGE_TITLE):
        self.placeholder_title = placeholder_title
        self._pages: Dict[Any, TreePage] = {}
        for page in pages:
            self.add(
                TreePage(
                    id=page.id,
                    title=page.title,
                    parent_page_id=page.parent_page_id,
                    sort_order=page.sort_order,
                )
            )

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page_id: Any) -> bool:
        return page_id in self._pages

    def add(self, page: TreePage) -> TreePage:
        """Register an already-persisted page."""
        if page.id is None:
            raise ValidationError("Cannot add a page without an id")
        self._pages[page.id] = page
        return page

    def get(self, page_id: Any) -> TreePage:
        page = self._pages.get(page_id)
        if page is None:
            raise PageNotFoundError(f"Page with ID {page_id} not found")
        return page

    def children(self, page_id: Optional[Any]) -> List[TreePage]:
        """Direct children of ``page_id`` in key order; ``None`` gives the roots."""
        return in_key_order(page for page in self._pages.values() if page.parent_page_id == page_id)

    def roots(self) -> List[TreePage]:
        return self.children(None)

    def create(self, parent_id: Optional[Any] = None, page_id: Optional[Any] = None) -> TreePage:
        """Create a page as the last child of ``parent_id`` (or the last root).

        Args:
            parent_id: Parent page id, or None for a root page
            page_id: Id of the new page. When None, the page is returned with
                its title and order key computed but is not registered; call
                ``add`` once it has been persisted.

        Raises:
            ValidationError: If the parent is not part of this tree
        """
        if parent_id is not None and parent_id not in self._pages:
            raise ValidationError(f"Parent page {parent_id} does not belong to this document")

        siblings = self.children(parent_id)
        page = TreePage(id=page_id, title=self.placeholder_title, parent_page_id=parent_id, sort_order=0)
        insert_after(siblings, len(siblings) - 1, page)

        if page_id is not None:
            self.add(page)
        return page

    def reorder_roots(self, ordered_ids: Sequence[Any]) -> OrderingResult[TreePage]:
        """Replace the root order with a full permutation of the root ids.

        Raises:
            ValidationError: If the ids are not exactly the current roots
        """
        return reorder(self.roots(), ordered_ids)

    def reorder_children(self, parent_id: Any, ordered_ids: Sequence[Any]) -> OrderingResult[TreePage]:
        self.get(parent_id)
        return reorder(self.children(parent_id), ordered_ids)

    def rename(self, page_id: Any, title: str) -> TreePage:
        """Set a trimmed, non-empty title.

        Raises:
            ValidationError: If the title is empty after trimming
        """
        page = self.get(page_id)
        trimmed = (title or "").strip()
        if not trimmed:
            raise ValidationError("Page title cannot be empty")
        page.title = trimmed
        return page

    def delete(self, page_id: Any) -> List[Any]:
        """Remove a page, moving its children up into its place.

        The children are re-parented to the deleted page's parent and spliced
        in at its position; that sibling set is then renumbered densely.

        Returns:
            Ids of pages whose parent or order key changed
        """
        page = self.get(page_id)
        siblings = self.children(page.parent_page_id)
        index = siblings.index(page)
        orphans = self.children(page_id)

        for child in orphans:
            child.parent_page_id = page.parent_page_id

        del self._pages[page_id]
        result = renumber(siblings[:index] + orphans + siblings[index + 1 :])

        changed = set(result.changed_ids) | {child.id for child in orphans}
        return [item.id for item in result.items if item.id in changed]

    def walk(self) -> Iterator[Tuple[TreePage, int]]:
        """Depth-first traversal yielding ``(page, depth)`` in display order."""
        stack: List[Tuple[TreePage, int]] = [(page, 0) for page in reversed(self.roots())]
        while stack:
            page, depth = stack.pop()
            yield page, depth
            stack.extend((child, depth + 1) for child in reversed(self.children(page.id)))

    def ancestors(self, page_id: Any) -> List[TreePage]:
        """Ancestors of a page, root first, excluding the page itself."""
        chain: List[TreePage] = []
        seen = {page_id}
        parent_id = self.get(page_id).parent_page_id
        while parent_id is not None and parent_id not in seen:
            parent = self.get(parent_id)
            chain.append(parent)
            seen.add(parent_id)
            parent_id = parent.parent_page_id
        chain.reverse()
        return chain

    def skeleton(self) -> List[PageSkeleton]:
        return [
            PageSkeleton(
                id=page.id,
                title=page.title,
                parent_page_id=page.parent_page_id,
                sort_order=page.sort_order,
                depth=depth,
            )
            for page, depth in self.walk()
        ]

    def validate(self) -> None:
        """Check that every sibling set has unique keys and every parent exists."""
        parents = {page.parent_page_id for page in self._pages.values()}
        for parent_id in parents:
            if parent_id is not None and parent_id not in self._pages:
                raise ValidationError(f"Parent page {parent_id} does not exist")
            assert_unique_keys(self.children(parent_id))
