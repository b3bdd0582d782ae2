"""Document management service."""

from typing import Any, Optional

from fastcrud import paginated_response
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..common.exceptions import DocumentNotFoundError, ValidationError
from ..page.models import Page
from .crud import document_crud
from .models import Document
from .schemas import DocumentCreate, DocumentRead, DocumentUpdate

logger = get_logger(__name__)


def _row_to_dict(row: Any) -> dict[str, Any]:
    return {
        "id": row.id,
        "title": row.title,
        "description": row.description,
        "cover_image_url": row.cover_image_url,
        "price_cents": row.price_cents,
        "is_published": row.is_published,
        "kind": row.kind,
        "product_id": row.product_id,
        "created_at": row.created_at,
        "updated_at": row.updated_at,
        "page_count": row.page_count,
    }


class DocumentService:
    """Service for managing documents.

    Documents are created unpublished and empty. Publishing requires at least
    one page; deleting a document removes its pages, their blocks and its
    access grants through foreign-key cascades.
    """

    async def create_document(self, document_data: DocumentCreate, db: AsyncSession) -> DocumentRead:
        """Create a new, unpublished document.

        Args:
            document_data: Document creation data
            db: Database session

        Returns:
            Created document data
        """
        created_document: Any = await document_crud.create(db=db, object=document_data)
        logger.info("Document created", extra={"document_id": created_document.id, "kind": created_document.kind})

        document = DocumentRead.model_validate(created_document)
        document.page_count = 0
        return document

    def _select_with_page_count(self, stmt):
        return (
            stmt.add_columns(func.count(Page.id).label("page_count"))
            .outerjoin(Page, Document.id == Page.document_id)
            .group_by(Document.id)
        )

    async def get_document(self, document_id: int, db: AsyncSession) -> DocumentRead:
        """Get a document with its page count.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        stmt = self._select_with_page_count(await document_crud.select(id=document_id))

        result = await db.execute(stmt)
        row = result.first()

        if not row:
            raise DocumentNotFoundError(f"Document with ID {document_id} not found")

        return DocumentRead(**_row_to_dict(row))

    async def get_documents(
        self,
        db: AsyncSession,
        page: int = 1,
        items_per_page: int = 50,
        is_published: Optional[bool] = None,
    ) -> dict[str, Any]:
        """Get documents with pagination, most recently updated first.

        Args:
            db: Database session
            page: Page number (1-indexed)
            items_per_page: Number of documents per page
            is_published: Only return documents with this publication flag

        Returns:
            Paginated response with documents and page counts
        """
        filters: dict[str, Any] = {}
        if is_published is not None:
            filters["is_published"] = is_published

        offset = (page - 1) * items_per_page
        stmt = await document_crud.select(sort_columns="updated_at", sort_orders="desc", **filters)
        stmt = self._select_with_page_count(stmt).offset(offset).limit(items_per_page)

        result = await db.execute(stmt)
        documents = [_row_to_dict(row) for row in result.fetchall()]

        total_count = await document_crud.count(db=db, **filters)

        return paginated_response({"data": documents, "total_count": total_count}, page, items_per_page)

    async def update_document(self, document_id: int, update_data: DocumentUpdate, db: AsyncSession) -> DocumentRead:
        """Update document settings.

        Raises:
            DocumentNotFoundError: If the document does not exist
            ValidationError: If publishing a document that has no pages
        """
        current = await self.get_document(document_id, db)
        update_dict = update_data.model_dump(exclude_unset=True)

        if update_dict.get("is_published") and not current.is_published and current.page_count == 0:
            raise ValidationError("A document needs at least one page before it can be published")

        if update_dict:
            await document_crud.update(db=db, id=document_id, object=update_dict)
            logger.info("Document updated", extra={"document_id": document_id, "fields": sorted(update_dict)})

        return await self.get_document(document_id, db)

    async def delete_document(self, document_id: int, db: AsyncSession) -> None:
        """Delete a document together with everything it owns.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        if not await document_crud.exists(db=db, id=document_id):
            raise DocumentNotFoundError(f"Document with ID {document_id} not found")

        await document_crud.delete(db=db, id=document_id)
        logger.info("Document deleted", extra={"document_id": document_id})
