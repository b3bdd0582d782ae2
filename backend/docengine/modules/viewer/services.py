"""Read-only access to published documents."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.content import DocumentKind, DocumentRenderer
from ...infrastructure.logging import get_logger
from ..access.services import AccessService
from ..block.services import BlockService
from ..common.exceptions import DocumentNotFoundError, PageNotFoundError, PermissionDeniedError
from ..document.crud import document_crud
from ..page.schemas import PageSkeletonRead
from ..page.services import PageService
from .schemas import PublicDocument, PublicPage, PublicView, RenderedBlockRead

logger = get_logger(__name__)


class ViewerService:
    """Public viewer for knowledge bases and blog posts.

    Unpublished documents do not exist as far as readers are concerned.
    Denied access is not an error for the overview: it is reported as
    ``has_access=False`` so the caller can show a purchase prompt. Only the
    page content endpoint refuses outright.
    """

    def __init__(
        self,
        access_service: Optional[AccessService] = None,
        page_service: Optional[PageService] = None,
        block_service: Optional[BlockService] = None,
    ):
        self.access_service = access_service or AccessService()
        self.page_service = page_service or PageService()
        self.block_service = block_service or BlockService()

    async def get_published_document(self, document_id: int, db: AsyncSession) -> PublicDocument:
        """Get a published document.

        Raises:
            DocumentNotFoundError: If the document is missing or unpublished
        """
        document = await document_crud.get(db=db, id=document_id)
        if not document or not document["is_published"]:
            raise DocumentNotFoundError(f"Document with ID {document_id} not found")
        return PublicDocument(**document)

    async def get_public_view(self, document_id: int, token: Optional[str], db: AsyncSession) -> PublicView:
        document = await self.get_published_document(document_id, db)
        has_access = await self.access_service.has_access(document, token, db)

        tree = await self.page_service.load_tree(document_id, db)
        pages = [PageSkeletonRead.model_validate(entry) for entry in tree.skeleton()]

        return PublicView(document=document, pages=pages, has_access=has_access)

    async def get_public_page(
        self, document_id: int, page_id: int, token: Optional[str], db: AsyncSession
    ) -> PublicPage:
        """Blocks of one page of a published document, rendered for display.

        Raises:
            DocumentNotFoundError: If the document is missing or unpublished
            PermissionDeniedError: If the caller has no access to the document
            PageNotFoundError: If the page is not part of the document
        """
        document = await self.get_published_document(document_id, db)

        if not await self.access_service.has_access(document, token, db):
            logger.info("Public page access denied", extra={"document_id": document_id, "page_id": page_id})
            raise PermissionDeniedError("Access to this document requires a purchase")

        page = await self.page_service.get_page_in_document(document_id, page_id, db)
        if page is None:
            raise PageNotFoundError(f"Page with ID {page_id} not found")

        blocks = await self.block_service.list_blocks(page_id, db)
        renderer = DocumentRenderer(mode=DocumentKind(document.kind))

        return PublicPage(
            page=page,
            blocks=blocks,
            rendered=[RenderedBlockRead.model_validate(item) for item in renderer.render_blocks(blocks)],
            html=renderer.render_html(blocks),
        )

    def render_locked(self, view: PublicView) -> str:
        """Purchase placeholder for a view the caller may not read."""
        renderer = DocumentRenderer(mode=DocumentKind(view.document.kind))
        return renderer.render_locked(view.document, view.pages)
