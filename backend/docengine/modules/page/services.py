"""Page tree management service."""

from datetime import UTC, datetime
from typing import Any, Iterable, List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config import settings
from ...infrastructure.logging import get_logger
from ...infrastructure.tree import PageTree, TreePage
from ..common.exceptions import DocumentNotFoundError, PageNotFoundError
from ..document.crud import document_crud
from .crud import page_crud
from .models import Page
from .schemas import PageCreate, PageCreateInternal, PageRead, PageTreeItem, PageUpdate

logger = get_logger(__name__)


class PageService:
    """Service for a document's page tree.

    Structural rules (append position, placeholder title, full-permutation
    reorders, children moving up on delete) come from ``PageTree``; this
    service loads the tree, applies the rule and writes back only the pages
    that changed.
    """

    async def load_tree(self, document_id: int, db: AsyncSession) -> PageTree:
        """Load every page of a document into a ``PageTree``.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        if not await document_crud.exists(db=db, id=document_id):
            raise DocumentNotFoundError(f"Document with ID {document_id} not found")

        stmt = await page_crud.select(document_id=document_id, sort_columns="sort_order", sort_orders="asc")
        result = await db.execute(stmt)
        return PageTree(result.fetchall(), placeholder_title=settings.PAGE_PLACEHOLDER_TITLE)

    async def get_page(self, page_id: int, db: AsyncSession) -> PageRead:
        """Get a single page.

        Raises:
            PageNotFoundError: If the page does not exist
        """
        page = await page_crud.get(db=db, id=page_id)
        if not page:
            raise PageNotFoundError(f"Page with ID {page_id} not found")
        return PageRead(**page)

    async def list_pages(self, document_id: int, db: AsyncSession) -> List[PageTreeItem]:
        """All pages of a document in depth-first display order."""
        if not await document_crud.exists(db=db, id=document_id):
            raise DocumentNotFoundError(f"Document with ID {document_id} not found")

        result = await page_crud.get_multi(db=db, document_id=document_id, limit=None)
        pages = {page["id"]: page for page in result.get("data", [])}
        tree = PageTree([PageRead(**page) for page in pages.values()])

        return [PageTreeItem(**pages[node.id], depth=depth) for node, depth in tree.walk()]

    async def create_page(self, document_id: int, page_data: PageCreate, db: AsyncSession) -> PageRead:
        """Append a page with the placeholder title under its parent.

        Raises:
            DocumentNotFoundError: If the document does not exist
            ValidationError: If the parent page belongs to another document
        """
        tree = await self.load_tree(document_id, db)
        node = tree.create(page_data.parent_page_id)

        page_internal = PageCreateInternal(
            document_id=document_id,
            title=node.title,
            parent_page_id=node.parent_page_id,
            sort_order=node.sort_order,
        )
        created_page: Any = await page_crud.create(db=db, object=page_internal)
        logger.info(
            "Page created",
            extra={"document_id": document_id, "page_id": created_page.id, "parent_page_id": node.parent_page_id},
        )

        return PageRead.model_validate(created_page)

    async def rename_page(self, page_id: int, update_data: PageUpdate, db: AsyncSession) -> PageRead:
        """Rename a page with a trimmed, non-blank title.

        Raises:
            PageNotFoundError: If the page does not exist
            ValidationError: If the title is blank
        """
        page = await self.get_page(page_id, db)
        node = PageTree([page]).rename(page_id, update_data.title)

        await page_crud.update(db=db, id=page_id, object={"title": node.title})
        return await self.get_page(page_id, db)

    async def reorder_root_pages(
        self, document_id: int, ordered_ids: Sequence[int], db: AsyncSession
    ) -> List[PageRead]:
        """Replace the order of the root pages.

        Raises:
            ValidationError: If ``ordered_ids`` is not exactly the set of root ids
        """
        tree = await self.load_tree(document_id, db)
        result = tree.reorder_roots(ordered_ids)

        changed = set(result.changed_ids)
        await self._write_structure(db, (page for page in result.items if page.id in changed))
        await db.commit()
        logger.info("Root pages reordered", extra={"document_id": document_id, "changed": len(result.changed_ids)})

        return [await self.get_page(page.id, db) for page in result.items]

    async def reorder_child_pages(self, page_id: int, ordered_ids: Sequence[int], db: AsyncSession) -> List[PageRead]:
        """Replace the order of a page's direct children.

        Raises:
            PageNotFoundError: If the parent page does not exist
            ValidationError: If ``ordered_ids`` is not exactly the set of child ids
        """
        parent = await self.get_page(page_id, db)
        tree = await self.load_tree(parent.document_id, db)
        result = tree.reorder_children(page_id, ordered_ids)

        changed = set(result.changed_ids)
        await self._write_structure(db, (page for page in result.items if page.id in changed))
        await db.commit()
        logger.info("Child pages reordered", extra={"page_id": page_id, "changed": len(result.changed_ids)})

        return [await self.get_page(page.id, db) for page in result.items]

    async def delete_page(self, page_id: int, db: AsyncSession) -> List[int]:
        """Delete a page and its blocks; its children move up into its place.

        Returns:
            Ids of the pages that were re-parented or renumbered
        """
        page = await self.get_page(page_id, db)
        tree = await self.load_tree(page.document_id, db)
        changed_ids = tree.delete(page_id)

        await self._write_structure(db, (tree.get(changed_id) for changed_id in changed_ids))
        await page_crud.delete(db=db, id=page_id)
        logger.info("Page deleted", extra={"page_id": page_id, "moved_pages": changed_ids})

        return changed_ids

    async def _write_structure(self, db: AsyncSession, pages: Iterable[TreePage]) -> None:
        now = datetime.now(UTC)
        rows = [
            {"id": page.id, "parent_page_id": page.parent_page_id, "sort_order": page.sort_order, "updated_at": now}
            for page in pages
        ]
        if rows:
            await db.execute(update(Page), rows)

    async def get_page_in_document(self, document_id: int, page_id: int, db: AsyncSession) -> Optional[PageRead]:
        page = await page_crud.get(db=db, id=page_id)
        if not page or page["document_id"] != document_id:
            return None
        return PageRead(**page)
