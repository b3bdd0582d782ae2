"""Tests for document service."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docengine.modules.block.models import Block
from docengine.modules.common.exceptions import DocumentNotFoundError, ValidationError
from docengine.modules.document.schemas import DocumentCreate, DocumentUpdate
from docengine.modules.document.services import DocumentService
from docengine.modules.page.models import Page


@pytest.fixture
def document_service():
    """Create document service instance."""
    return DocumentService()


@pytest.mark.asyncio
async def test_create_document(document_service: DocumentService, db_session: AsyncSession):
    """Test creating a new document."""
    document_data = DocumentCreate(title="Recipes", description="Family favourites", price_cents=500)

    result = await document_service.create_document(document_data=document_data, db=db_session)

    assert result.id is not None
    assert result.title == "Recipes"
    assert result.price_cents == 500
    assert result.kind == "knowledge_base"
    assert result.is_published is False
    assert result.page_count == 0


@pytest.mark.asyncio
async def test_create_blog_post(document_service: DocumentService, db_session: AsyncSession):
    result = await document_service.create_document(DocumentCreate(title="Launch notes", kind="blog_post"), db_session)
    assert result.kind == "blog_post"


@pytest.mark.asyncio
async def test_get_document_with_pages(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict, test_pages: list
):
    """Test page count on a document with a page tree."""
    result = await document_service.get_document(document_id=test_document["id"], db=db_session)

    assert result.id == test_document["id"]
    assert result.title == "Field Guide"
    assert result.page_count == 4


@pytest.mark.asyncio
async def test_get_document_not_found(document_service: DocumentService, db_session: AsyncSession):
    """Test getting non-existent document."""
    with pytest.raises(DocumentNotFoundError):
        await document_service.get_document(document_id=99999, db=db_session)


@pytest.mark.asyncio
async def test_get_documents_filters_by_publication(
    document_service: DocumentService, db_session: AsyncSession, published_document: dict
):
    """Test listing with and without the publication filter."""
    await document_service.create_document(DocumentCreate(title="Draft"), db_session)

    everything = await document_service.get_documents(db=db_session, page=1, items_per_page=10)
    published = await document_service.get_documents(db=db_session, page=1, items_per_page=10, is_published=True)

    assert everything["total_count"] == 2
    assert published["total_count"] == 1
    assert published["data"][0]["id"] == published_document["id"]
    assert published["data"][0]["page_count"] == 4
    assert published["has_more"] is False


@pytest.mark.asyncio
async def test_publish_without_pages_is_rejected(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict
):
    """An empty document cannot be published."""
    with pytest.raises(ValidationError):
        await document_service.update_document(test_document["id"], DocumentUpdate(is_published=True), db_session)

    result = await document_service.get_document(test_document["id"], db_session)
    assert result.is_published is False


@pytest.mark.asyncio
async def test_publish_and_unpublish(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict, test_pages: list
):
    published = await document_service.update_document(
        test_document["id"], DocumentUpdate(is_published=True), db_session
    )
    assert published.is_published is True

    unpublished = await document_service.update_document(
        test_document["id"], DocumentUpdate(is_published=False), db_session
    )
    assert unpublished.is_published is False


@pytest.mark.asyncio
async def test_update_document_settings(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict
):
    """Test partial update of document settings."""
    result = await document_service.update_document(
        test_document["id"], DocumentUpdate(title="Bird Guide", price_cents=999), db_session
    )

    assert result.title == "Bird Guide"
    assert result.price_cents == 999
    assert result.description == "Everything about birds"


@pytest.mark.asyncio
async def test_update_document_not_found(document_service: DocumentService, db_session: AsyncSession):
    with pytest.raises(DocumentNotFoundError):
        await document_service.update_document(99999, DocumentUpdate(title="x"), db_session)


@pytest.mark.asyncio
async def test_delete_document_removes_pages_and_blocks(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict, test_blocks: list
):
    """Test that deleting a document cascades to its pages and blocks."""
    await document_service.delete_document(test_document["id"], db_session)

    with pytest.raises(DocumentNotFoundError):
        await document_service.get_document(test_document["id"], db_session)

    page_count = await db_session.scalar(select(func.count()).select_from(Page))
    block_count = await db_session.scalar(select(func.count()).select_from(Block))
    assert page_count == 0
    assert block_count == 0


@pytest.mark.asyncio
async def test_delete_document_not_found(document_service: DocumentService, db_session: AsyncSession):
    with pytest.raises(DocumentNotFoundError):
        await document_service.delete_document(99999, db_session)
