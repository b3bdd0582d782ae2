"""FastAPI dependencies for use in API endpoints."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database import async_session
from ...modules.access.services import AccessService
from ...modules.block.services import BlockService
from ...modules.document.services import DocumentService
from ...modules.page.services import PageService
from ...modules.viewer.services import ViewerService

DbSession = Annotated[AsyncSession, Depends(async_session)]


def get_document_service() -> DocumentService:
    """Dependency for providing a DocumentService instance."""
    return DocumentService()


def get_page_service() -> PageService:
    """Dependency for providing a PageService instance."""
    return PageService()


def get_block_service() -> BlockService:
    """Dependency for providing a BlockService instance."""
    return BlockService()


def get_access_service() -> AccessService:
    """Dependency for providing an AccessService instance."""
    return AccessService()


def get_viewer_service() -> ViewerService:
    """Dependency for providing a ViewerService instance."""
    return ViewerService()
