"""Document API endpoints."""

from typing import Annotated, Any, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ....modules.access.schemas import AccessGrantRead
from ....modules.access.services import AccessService
from ....modules.common.schemas import OrderedIds
from ....modules.common.utils.error_handler import handle_exception
from ....modules.document.schemas import DocumentCreate, DocumentRead, DocumentUpdate
from ....modules.document.services import DocumentService
from ....modules.page.schemas import PageCreate, PageRead, PageTreeItem
from ....modules.page.services import PageService
from ..dependencies import DbSession, get_access_service, get_document_service, get_page_service

router = APIRouter(prefix="/document", tags=["Documents"])


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    summary="Create New Document",
    description="""
    Creates a new, unpublished knowledge base or blog post.

    - **title**: Title of the document
    - **description**: Optional description shown to readers
    - **cover_image_url**: Optional cover image
    - **price_cents**: Price in cents, 0 for free documents
    - **kind**: `knowledge_base` or `blog_post`
    - **product_id**: Optional sellable product this document belongs to
    """,
    responses={
        201: {"description": "Document created successfully"},
        422: {"description": "Invalid document data"},
    },
)
async def create_document(
    document_data: DocumentCreate,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentRead:
    """Create a new document."""
    try:
        return await document_service.create_document(document_data, db)
    except Exception as e:
        raise handle_exception(e)


@router.get(
    "/{document_id}",
    summary="Get Document Details",
    responses={
        200: {"description": "Document details with page count"},
        404: {"description": "Document not found"},
    },
)
async def get_document(
    document_id: int,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentRead:
    """Get a specific document by ID."""
    try:
        return await document_service.get_document(document_id, db)
    except Exception as e:
        raise handle_exception(e)


@router.get(
    "/",
    summary="List Documents",
    description="""
    Retrieves a paginated list of documents, most recently updated first.

    - **is_published**: Optional publication filter
    - **page**: Page number (1-indexed, default: 1)
    - **items_per_page**: Number of documents per page (default: 50, max: 100)
    """,
    responses={200: {"description": "Paginated list of documents"}},
)
async def get_documents(
    db: DbSession,
    is_published: Annotated[Optional[bool], Query(description="Filter by publication flag")] = None,
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    items_per_page: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 50,
    document_service: DocumentService = Depends(get_document_service),
) -> dict[str, Any]:
    """Get documents with pagination."""
    try:
        return await document_service.get_documents(db, page, items_per_page, is_published=is_published)
    except Exception as e:
        raise handle_exception(e)


@router.put(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Update Document",
    description="""Update document settings or toggle publication.

    Publishing (`is_published: true`) is rejected while the document has no
    pages. Unpublishing is always allowed.
    """,
    responses={
        200: {"description": "Document updated successfully"},
        404: {"description": "Document not found"},
        422: {"description": "Invalid update, e.g. publishing an empty document"},
    },
)
async def update_document(
    document_id: int,
    update_data: DocumentUpdate,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentRead:
    """Update a document."""
    try:
        return await document_service.update_document(document_id, update_data, db)
    except Exception as e:
        raise handle_exception(e)


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Document",
    description="Delete a document with all its pages, blocks and access grants. This cannot be undone.",
    responses={
        204: {"description": "Document deleted successfully"},
        404: {"description": "Document not found"},
    },
)
async def delete_document(
    document_id: int,
    db: DbSession,
    document_service: DocumentService = Depends(get_document_service),
):
    """Delete a document and everything it owns."""
    try:
        await document_service.delete_document(document_id, db)
    except Exception as e:
        raise handle_exception(e)


@router.get(
    "/{document_id}/pages",
    summary="List Pages",
    description="All pages of the document, depth-first in display order, each with its depth.",
    responses={
        200: {"description": "Page tree in display order"},
        404: {"description": "Document not found"},
    },
)
async def list_pages(
    document_id: int,
    db: DbSession,
    page_service: PageService = Depends(get_page_service),
) -> List[PageTreeItem]:
    try:
        return await page_service.list_pages(document_id, db)
    except Exception as e:
        raise handle_exception(e)


@router.post(
    "/{document_id}/pages",
    status_code=status.HTTP_201_CREATED,
    summary="Create Page",
    description="""
    Appends a page titled with the placeholder title as the last root page,
    or as the last child of `parent_page_id`.
    """,
    responses={
        201: {"description": "Page created"},
        404: {"description": "Document not found"},
        422: {"description": "Parent page belongs to another document"},
    },
)
async def create_page(
    document_id: int,
    page_data: PageCreate,
    db: DbSession,
    page_service: PageService = Depends(get_page_service),
) -> PageRead:
    try:
        return await page_service.create_page(document_id, page_data, db)
    except Exception as e:
        raise handle_exception(e)


@router.put(
    "/{document_id}/pages/reorder",
    summary="Reorder Root Pages",
    description="""
    Replaces the order of the root pages. `ids` must list every root page id
    exactly once; anything else is rejected and nothing changes.
    """,
    responses={
        200: {"description": "Root pages in their new order"},
        404: {"description": "Document not found"},
        422: {"description": "Ids are not a permutation of the root pages"},
    },
)
async def reorder_root_pages(
    document_id: int,
    order: OrderedIds,
    db: DbSession,
    page_service: PageService = Depends(get_page_service),
) -> List[PageRead]:
    try:
        return await page_service.reorder_root_pages(document_id, order.ids, db)
    except Exception as e:
        raise handle_exception(e)


@router.post(
    "/{document_id}/access-grants",
    status_code=status.HTTP_201_CREATED,
    summary="Issue Access Grant",
    description="Issues a new access token for a paid document, e.g. after a purchase.",
    responses={
        201: {"description": "Grant issued"},
        404: {"description": "Document not found"},
    },
)
async def issue_access_grant(
    document_id: int,
    db: DbSession,
    access_service: AccessService = Depends(get_access_service),
) -> AccessGrantRead:
    try:
        return await access_service.issue_grant(document_id, db)
    except Exception as e:
        raise handle_exception(e)
