"""Public viewer API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from ....modules.common.utils.error_handler import handle_exception
from ....modules.viewer.schemas import PublicPage, PublicView
from ....modules.viewer.services import ViewerService
from ..dependencies import DbSession, get_viewer_service

router = APIRouter(prefix="/view", tags=["Viewer"])

TokenQuery = Annotated[Optional[str], Query(description="Access token from a purchase")]


@router.get(
    "/{document_id}",
    summary="Get Public View",
    description="""
    Overview of a published document: metadata, page skeleton (titles only)
    and whether the caller may read it. Lack of access is reported as
    `has_access: false`, not as an error.
    """,
    responses={
        200: {"description": "Document overview"},
        404: {"description": "Document not found or not published"},
    },
)
async def get_public_view(
    document_id: int,
    db: DbSession,
    token: TokenQuery = None,
    viewer_service: ViewerService = Depends(get_viewer_service),
) -> PublicView:
    try:
        return await viewer_service.get_public_view(document_id, token, db)
    except Exception as e:
        raise handle_exception(e)


@router.get(
    "/{document_id}/page/{page_id}",
    summary="Get Public Page",
    description="Blocks of one page, raw and rendered to sanitized HTML.",
    responses={
        200: {"description": "Page content"},
        403: {"description": "The document requires a purchase"},
        404: {"description": "Document or page not found"},
    },
)
async def get_public_page(
    document_id: int,
    page_id: int,
    db: DbSession,
    token: TokenQuery = None,
    viewer_service: ViewerService = Depends(get_viewer_service),
) -> PublicPage:
    try:
        return await viewer_service.get_public_page(document_id, page_id, token, db)
    except Exception as e:
        raise handle_exception(e)
